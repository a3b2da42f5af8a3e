"""Interaction poller.

Handles "Update Price" button presses. For each press carrying the refresh
tag the quote is fetched and the original message is edited in place; the
callback query is then answered exactly once, whether or not the update
worked, so the client never keeps the button in a pending state.
"""

import asyncio
import logging

from ..errors import AckError, FetchError, PollError
from ..models import InteractionEvent
from ..services.quote import QuoteService
from .gateway import ChatTransport
from .messages import (
    REFRESH_PRICE_TAG,
    REFRESH_TARGET_MISSING_NOTICE,
    REFRESH_UPDATE_FAILED_NOTICE,
)
from .response_formatter import ResponseFormatter, response_formatter

logger = logging.getLogger(__name__)


class InteractionPoller:
    """Refreshes price messages in response to button presses."""

    def __init__(
        self,
        gateway: ChatTransport,
        quote_service: QuoteService,
        formatter: ResponseFormatter = response_formatter,
    ) -> None:
        self.gateway = gateway
        self.quote_service = quote_service
        self.formatter = formatter

    async def refresh(self, event: InteractionEvent) -> str | None:
        """Try to replace the target message text with a fresh quote.

        Args:
            event: Button press carrying the refresh tag.

        Returns:
            Toast notice for the acknowledgment, None on success.
        """
        if event.target is None:
            logger.warning(f"Refresh {event.interaction_id} has no target message")
            return REFRESH_TARGET_MISSING_NOTICE

        try:
            quote = await self.quote_service.fetch_quote()
        except FetchError as e:
            logger.warning(f"Price refresh failed: {e.reason}")
            return self.formatter.format_refresh_error_notice(e)

        text = self.formatter.format_price_message(quote)
        try:
            await self.gateway.edit(event.target, text, self.formatter.refresh_keyboard())
        except Exception as e:
            logger.error(f"Failed to edit message {event.target.message_id}: {e}")
            return REFRESH_UPDATE_FAILED_NOTICE

        return None

    async def acknowledge(self, event: InteractionEvent, notice: str | None) -> None:
        """Answer the callback query, optionally with a toast notice.

        Raises:
            AckError: If Telegram rejected the answer.
        """
        try:
            await self.gateway.acknowledge(event.interaction_id, notice)
        except Exception as e:
            raise AckError(f"ack of {event.interaction_id} failed: {e}") from e

    async def handle(self, event: InteractionEvent) -> None:
        """Process a single button press.

        Presses with a different tag are ignored entirely. Matching presses
        are acknowledged once, after the refresh attempt completes.

        Raises:
            PollError: If the refresh failed unexpectedly. The press is
                acknowledged with a failure notice first.
            AckError: If the acknowledgment could not be sent.
        """
        if event.action_tag != REFRESH_PRICE_TAG:
            logger.debug(f"Ignoring callback {event.interaction_id} with tag {event.action_tag!r}")
            return

        try:
            notice = await self.refresh(event)
        except Exception as e:
            await self.acknowledge(event, REFRESH_UPDATE_FAILED_NOTICE)
            raise PollError(f"refresh of {event.interaction_id} failed: {e}") from e

        await self.acknowledge(event, notice)

    async def run(self, queue: asyncio.Queue[InteractionEvent]) -> None:
        """Consume button presses forever."""
        logger.info("Interaction poller started")
        while True:
            event = await queue.get()
            try:
                await self.handle(event)
            except (AckError, PollError) as e:
                logger.error(f"Callback handling failed: {e}")
            finally:
                queue.task_done()
