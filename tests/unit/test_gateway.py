"""Tests for the Telegram transport adapter."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram import InlineKeyboardMarkup
from telegram.error import BadRequest

from cryptocat.bot.gateway import ALLOWED_UPDATES, TelegramGateway, to_event, to_inline_keyboard
from cryptocat.bot.messages import COMMAND_DESCRIPTIONS, REFRESH_PRICE_TAG
from cryptocat.bot.response_formatter import response_formatter
from cryptocat.models import InteractionEvent, TargetMessage, TextMessage


def _text_update(update_id: int, chat_id: int, text: str | None):
    message = SimpleNamespace(chat=SimpleNamespace(id=chat_id), message_id=1, text=text)
    return SimpleNamespace(update_id=update_id, callback_query=None, message=message)


def _callback_update(update_id: int, query_id, data, message=None):
    query = SimpleNamespace(id=query_id, data=data, message=message)
    return SimpleNamespace(update_id=update_id, callback_query=query, message=None)


@pytest.fixture
def bot():
    bot = MagicMock()
    bot.send_message = AsyncMock(
        return_value=SimpleNamespace(chat=SimpleNamespace(id=42), message_id=7)
    )
    bot.edit_message_text = AsyncMock()
    bot.answer_callback_query = AsyncMock()
    bot.get_updates = AsyncMock(return_value=[])
    bot.delete_webhook = AsyncMock()
    bot.set_my_commands = AsyncMock()
    bot.username = "cryptocat_test_bot"
    return bot


def test_to_event_text_message():
    assert to_event(_text_update(1, 5, "/help")) == TextMessage(chat_id=5, text="/help")


def test_to_event_callback_with_message():
    message = SimpleNamespace(chat=SimpleNamespace(id=42), message_id=7)
    event = to_event(_callback_update(1, "cb-1", REFRESH_PRICE_TAG, message))

    assert event == InteractionEvent(
        interaction_id="cb-1",
        action_tag=REFRESH_PRICE_TAG,
        target=TargetMessage(chat_id=42, message_id=7),
    )


def test_to_event_callback_without_message():
    event = to_event(_callback_update(1, "cb-2", REFRESH_PRICE_TAG))

    assert event.target is None


def test_to_event_ignores_non_text_messages():
    assert to_event(_text_update(1, 5, None)) is None
    assert to_event(SimpleNamespace(update_id=1, callback_query=None, message=None)) is None


def test_to_inline_keyboard():
    markup = to_inline_keyboard(response_formatter.refresh_keyboard())

    assert isinstance(markup, InlineKeyboardMarkup)
    assert markup.inline_keyboard[0][0].callback_data == REFRESH_PRICE_TAG
    assert to_inline_keyboard(None) is None


@pytest.mark.asyncio
async def test_send_returns_message_handle(bot):
    gateway = TelegramGateway(bot)

    handle = await gateway.send(42, "hello", response_formatter.refresh_keyboard())

    assert handle == TargetMessage(chat_id=42, message_id=7)
    kwargs = bot.send_message.await_args.kwargs
    assert kwargs["chat_id"] == 42
    assert kwargs["text"] == "hello"
    assert isinstance(kwargs["reply_markup"], InlineKeyboardMarkup)


@pytest.mark.asyncio
async def test_edit_keeps_keyboard(bot):
    gateway = TelegramGateway(bot)

    await gateway.edit(
        TargetMessage(chat_id=42, message_id=7), "new", response_formatter.refresh_keyboard()
    )

    kwargs = bot.edit_message_text.await_args.kwargs
    assert kwargs["chat_id"] == 42
    assert kwargs["message_id"] == 7
    assert kwargs["reply_markup"].inline_keyboard[0][0].callback_data == REFRESH_PRICE_TAG


@pytest.mark.asyncio
async def test_edit_ignores_not_modified(bot):
    """Refreshing to an unchanged price is not an error."""
    bot.edit_message_text.side_effect = BadRequest(
        "Message is not modified: specified new message content and reply markup "
        "are exactly the same as a current content and reply markup of the message"
    )
    gateway = TelegramGateway(bot)

    await gateway.edit(TargetMessage(chat_id=42, message_id=7), "same")


@pytest.mark.asyncio
async def test_edit_reraises_other_bad_requests(bot):
    bot.edit_message_text.side_effect = BadRequest("Message to edit not found")
    gateway = TelegramGateway(bot)

    with pytest.raises(BadRequest):
        await gateway.edit(TargetMessage(chat_id=42, message_id=7), "text")


@pytest.mark.asyncio
async def test_acknowledge(bot):
    await TelegramGateway(bot).acknowledge("cb-1", "notice")

    bot.answer_callback_query.assert_awaited_once_with(callback_query_id="cb-1", text="notice")


@pytest.mark.asyncio
async def test_poll_drops_pending_only_once_and_advances_offset(bot):
    bot.get_updates.side_effect = [
        [_text_update(10, 1, "/help"), _callback_update(11, "cb", REFRESH_PRICE_TAG)],
        [],
    ]
    gateway = TelegramGateway(bot)

    first = await gateway.poll(timeout=30, drop_pending=True)
    second = await gateway.poll(timeout=30, drop_pending=True)

    bot.delete_webhook.assert_awaited_once_with(drop_pending_updates=True)
    assert [type(event) for event in first] == [TextMessage, InteractionEvent]
    assert second == []

    first_call, second_call = bot.get_updates.await_args_list
    assert first_call.kwargs["offset"] is None
    assert first_call.kwargs["timeout"] == 30
    assert first_call.kwargs["allowed_updates"] == ALLOWED_UPDATES
    assert second_call.kwargs["offset"] == 12


@pytest.mark.asyncio
async def test_poll_keeps_backlog_when_not_dropping(bot):
    await TelegramGateway(bot).poll(timeout=5, drop_pending=False)

    bot.delete_webhook.assert_not_awaited()


@pytest.mark.asyncio
async def test_poll_skips_malformed_update(bot):
    bot.get_updates.return_value = [
        _callback_update(20, None, REFRESH_PRICE_TAG),
        _text_update(21, 1, "/info"),
    ]
    gateway = TelegramGateway(bot)

    events = await gateway.poll(timeout=30, drop_pending=False)

    assert events == [TextMessage(chat_id=1, text="/info")]
    assert gateway._offset == 22


@pytest.mark.asyncio
async def test_publish_commands(bot):
    await TelegramGateway(bot).publish_commands()

    commands = bot.set_my_commands.await_args.args[0]
    assert [c.command for c in commands] == [command.value for command, _ in COMMAND_DESCRIPTIONS]


def test_username(bot):
    assert TelegramGateway(bot).username == "cryptocat_test_bot"
