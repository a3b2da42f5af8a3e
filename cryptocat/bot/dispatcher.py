"""Command dispatcher.

Consumes parsed command requests and answers each with exactly one reply.
Errors never escape the loop: quote failures become an error reply, and a
reply that cannot be sent is logged before moving on to the next command.
"""

import asyncio
import logging
from collections.abc import Sequence

from ..errors import DispatchError, FetchError
from ..models import Button, Command, CommandRequest
from ..services.quote import QuoteService
from .gateway import ChatTransport
from .messages import UNEXPECTED_ERROR_MESSAGE
from .response_formatter import ResponseFormatter, response_formatter

logger = logging.getLogger(__name__)


class CommandDispatcher:
    """Maps commands to replies and sends them.

    Stateless: each request is handled on its own with no memory of earlier
    commands.
    """

    def __init__(
        self,
        gateway: ChatTransport,
        quote_service: QuoteService,
        app_name: str = "Bot",
        app_version: str = "0.1",
        pair_label: str = "BTC/USDT",
        formatter: ResponseFormatter = response_formatter,
    ) -> None:
        self.gateway = gateway
        self.quote_service = quote_service
        self.app_name = app_name
        self.app_version = app_version
        self.pair_label = pair_label
        self.formatter = formatter

    async def render(self, command: Command) -> tuple[str, Sequence[Sequence[Button]] | None]:
        """Build reply text and optional keyboard for a command.

        Args:
            command: Parsed command.

        Returns:
            Tuple of reply text and keyboard rows (None for no keyboard).
        """
        if command is Command.INFO:
            return self.formatter.format_info(self.app_name, self.app_version, self.pair_label), None

        if command is Command.HELP:
            return self.formatter.format_help(), None

        try:
            quote = await self.quote_service.fetch_quote()
        except FetchError as e:
            logger.warning(f"Price fetch failed: {e.reason}")
            return self.formatter.format_price_error(e), None

        return self.formatter.format_price_message(quote), self.formatter.refresh_keyboard()

    async def handle(self, request: CommandRequest) -> None:
        """Send exactly one reply for the request.

        Args:
            request: Command addressed to a chat.

        Raises:
            DispatchError: If the reply could not be sent.
        """
        try:
            text, buttons = await self.render(request.command)
        except Exception as e:
            logger.error(f"Error handling /{request.command.value}: {e}")
            text, buttons = UNEXPECTED_ERROR_MESSAGE, None

        try:
            await self.gateway.send(request.chat_id, text, buttons)
        except Exception as e:
            raise DispatchError(
                f"reply to /{request.command.value} in chat {request.chat_id} failed: {e}"
            ) from e

        logger.info(f"Answered /{request.command.value} in chat {request.chat_id}")

    async def run(self, queue: asyncio.Queue[CommandRequest]) -> None:
        """Consume command requests forever."""
        logger.info("Command dispatcher started")
        while True:
            request = await queue.get()
            try:
                await self.handle(request)
            except DispatchError as e:
                logger.error(f"Dispatch failed: {e}")
            finally:
                queue.task_done()
