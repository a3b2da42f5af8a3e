"""Shared long-poll loop.

A single loop retrieves updates from Telegram and fans them out by kind:
recognised commands go to the dispatcher queue, button presses go to the
interaction queue. Both handler loops therefore read from one getUpdates
session and progress independently of each other.
"""

import asyncio
import logging

from ..errors import PollError
from ..models import CommandRequest, InteractionEvent, TextMessage
from .commands import parse_command
from .gateway import ChatTransport, IncomingEvent

logger = logging.getLogger(__name__)


class UpdateRouter:
    """Retrieves updates and routes them to the handler queues."""

    def __init__(
        self,
        gateway: ChatTransport,
        commands: asyncio.Queue[CommandRequest],
        interactions: asyncio.Queue[InteractionEvent],
        timeout: int = 30,
        drop_pending: bool = True,
        retry_delay: float = 1.0,
        max_retry_delay: float = 30.0,
    ) -> None:
        self.gateway = gateway
        self.commands = commands
        self.interactions = interactions
        self.timeout = timeout
        self.drop_pending = drop_pending
        self.retry_delay = retry_delay
        self.max_retry_delay = max_retry_delay

    def route(self, event: IncomingEvent) -> None:
        """Put one event on the queue for its kind.

        Text that is not one of our commands is dropped.
        """
        if isinstance(event, InteractionEvent):
            self.interactions.put_nowait(event)
            return

        if isinstance(event, TextMessage):
            command = parse_command(event.text, self.gateway.username)
            if command is None:
                logger.debug(f"Ignoring non-command text in chat {event.chat_id}")
                return
            self.commands.put_nowait(CommandRequest(chat_id=event.chat_id, command=command))
            return

        raise PollError(f"unexpected event type {type(event).__name__}")

    async def run(self) -> None:
        """Poll forever, backing off after failed polls."""
        logger.info(
            f"Long polling started (timeout={self.timeout}s, drop_pending={self.drop_pending})"
        )
        delay = self.retry_delay
        while True:
            try:
                events = await self.gateway.poll(self.timeout, self.drop_pending)
            except Exception as e:
                logger.error(f"Poll failed: {e}; retrying in {delay:.1f}s")
                await asyncio.sleep(delay)
                delay = min(delay * 2, self.max_retry_delay)
                continue

            delay = self.retry_delay
            for event in events:
                try:
                    self.route(event)
                except PollError as e:
                    logger.warning(f"Skipping update: {e}")
