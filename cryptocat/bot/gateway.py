"""Telegram transport adapter.

Wraps a single ``telegram.Bot`` behind the four operations the bot core needs:
send a message, edit a message, acknowledge a callback query and long-poll
for updates. Telegram objects are converted into the application's models at
this boundary so the handler loops never touch python-telegram-bot types.
"""

import logging
from collections.abc import Sequence
from typing import Protocol

from telegram import (
    Bot,
    BotCommand,
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    Update,
)
from telegram.error import BadRequest
from telegram.request import HTTPXRequest

from ..models import Button, InteractionEvent, TargetMessage, TextMessage
from .messages import COMMAND_DESCRIPTIONS

logger = logging.getLogger(__name__)

IncomingEvent = TextMessage | InteractionEvent

ALLOWED_UPDATES = [Update.MESSAGE, Update.CALLBACK_QUERY]


class ChatTransport(Protocol):
    """Protocol for the outbound/inbound chat platform operations.

    Implemented by TelegramGateway in production and by in-memory fakes in
    tests. A single instance is shared by all handler loops.
    """

    @property
    def username(self) -> str | None:
        """Username of the bot, None if unknown."""
        ...

    async def send(
        self, chat_id: int, text: str, buttons: Sequence[Sequence[Button]] | None = None
    ) -> TargetMessage:
        """Send a message, optionally with an inline keyboard."""
        ...

    async def edit(
        self, target: TargetMessage, text: str, buttons: Sequence[Sequence[Button]] | None = None
    ) -> None:
        """Replace the text of a previously sent message."""
        ...

    async def acknowledge(self, interaction_id: str, text: str | None = None) -> None:
        """Answer a callback query, optionally with a toast notice."""
        ...

    async def poll(self, timeout: int, drop_pending: bool) -> list[IncomingEvent]:
        """Long-poll for the next batch of updates."""
        ...


def build_bot(token: str, connection_pool_size: int = 8) -> Bot:
    """Create the shared Bot instance.

    Regular calls and getUpdates use separate connection pools so a pending
    long-poll never occupies a connection needed for replies or edits.

    Args:
        token: Telegram bot API token.
        connection_pool_size: Pool size for regular Bot API calls.

    Returns:
        Configured, not yet initialized Bot.
    """
    return Bot(
        token=token,
        request=HTTPXRequest(connection_pool_size=connection_pool_size),
        get_updates_request=HTTPXRequest(connection_pool_size=1),
    )


def to_inline_keyboard(buttons: Sequence[Sequence[Button]] | None) -> InlineKeyboardMarkup | None:
    """Convert button rows into a Telegram inline keyboard."""
    if not buttons:
        return None
    return InlineKeyboardMarkup(
        [
            [InlineKeyboardButton(button.label, callback_data=button.action_tag) for button in row]
            for row in buttons
        ]
    )


def to_event(update: Update) -> IncomingEvent | None:
    """Convert a Telegram update into an application event.

    Args:
        update: Raw Telegram update.

    Returns:
        TextMessage for text messages, InteractionEvent for callback queries,
        None for anything else.
    """
    query = update.callback_query
    if query is not None:
        target = None
        message = query.message
        if message is not None:
            target = TargetMessage(chat_id=message.chat.id, message_id=message.message_id)
        return InteractionEvent(interaction_id=query.id, action_tag=query.data, target=target)

    message = update.message
    if message is not None and message.text:
        return TextMessage(chat_id=message.chat.id, text=message.text)

    return None


class TelegramGateway:
    """ChatTransport implementation backed by python-telegram-bot."""

    def __init__(self, bot: Bot) -> None:
        """Initialize gateway.

        Args:
            bot: Shared Bot instance, initialized before the loops start.
        """
        self.bot = bot
        self._offset: int | None = None
        self._started = False

    @property
    def username(self) -> str | None:
        try:
            return self.bot.username
        except RuntimeError:
            return None

    async def send(
        self, chat_id: int, text: str, buttons: Sequence[Sequence[Button]] | None = None
    ) -> TargetMessage:
        message = await self.bot.send_message(
            chat_id=chat_id, text=text, reply_markup=to_inline_keyboard(buttons)
        )
        return TargetMessage(chat_id=message.chat.id, message_id=message.message_id)

    async def edit(
        self, target: TargetMessage, text: str, buttons: Sequence[Sequence[Button]] | None = None
    ) -> None:
        try:
            await self.bot.edit_message_text(
                text=text,
                chat_id=target.chat_id,
                message_id=target.message_id,
                reply_markup=to_inline_keyboard(buttons),
            )
        except BadRequest as e:
            # Same price as currently displayed
            if "message is not modified" in e.message.lower():
                logger.debug(f"Message {target.message_id} already shows the latest text")
                return
            raise

    async def acknowledge(self, interaction_id: str, text: str | None = None) -> None:
        await self.bot.answer_callback_query(callback_query_id=interaction_id, text=text)

    async def poll(self, timeout: int, drop_pending: bool) -> list[IncomingEvent]:
        """Fetch the next batch of updates and advance the offset.

        Pending updates are dropped only on the first call. Updates that
        cannot be converted are logged and skipped.
        """
        if not self._started:
            if drop_pending:
                await self.bot.delete_webhook(drop_pending_updates=True)
                logger.info("Dropped pending updates")
            self._started = True

        updates = await self.bot.get_updates(
            offset=self._offset, timeout=timeout, allowed_updates=ALLOWED_UPDATES
        )

        events: list[IncomingEvent] = []
        for update in updates:
            self._offset = update.update_id + 1
            try:
                event = to_event(update)
            except Exception as e:
                logger.warning(f"Skipping malformed update {update.update_id}: {e}")
                continue
            if event is not None:
                events.append(event)
        return events

    async def publish_commands(self) -> None:
        """Register the command menu shown by Telegram clients."""
        await self.bot.set_my_commands(
            [BotCommand(command.value, description) for command, description in COMMAND_DESCRIPTIONS]
        )
        logger.info("Published bot command menu")
