"""Data models for the cryptocat bot.

Defines Pydantic models for the structures passed between the transport,
the update router and the two handler loops: incoming text messages,
parsed command requests, button press events, message handles and price
quotes. All models are immutable.
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict


class Command(str, Enum):
    """Supported bot commands, keyed by their lowercase wire name."""

    INFO = "info"
    HELP = "help"
    GET_PRICE = "getbtcprice"


class TargetMessage(BaseModel):
    """Reference to a previously sent message that can be edited in place.

    Attributes:
        chat_id: Telegram chat identifier.
        message_id: Message identifier within the chat.
    """

    model_config = ConfigDict(frozen=True)

    chat_id: int
    message_id: int


class Button(BaseModel):
    """Inline keyboard button.

    Attributes:
        label: Text shown on the button.
        action_tag: Callback data sent back when the button is pressed.
    """

    model_config = ConfigDict(frozen=True)

    label: str
    action_tag: str


class TextMessage(BaseModel):
    """Incoming text message as delivered by the transport."""

    model_config = ConfigDict(frozen=True)

    chat_id: int
    text: str


class CommandRequest(BaseModel):
    """Parsed command addressed to the dispatcher."""

    model_config = ConfigDict(frozen=True)

    chat_id: int
    command: Command


class InteractionEvent(BaseModel):
    """Button press (callback query) received from Telegram.

    Attributes:
        interaction_id: Callback query id used for acknowledgment.
        action_tag: Callback data of the pressed button, if any.
        target: Message carrying the pressed button, None when Telegram
            did not include it (e.g. inline mode messages).
    """

    model_config = ConfigDict(frozen=True)

    interaction_id: str
    action_tag: str | None = None
    target: TargetMessage | None = None


class PriceQuote(BaseModel):
    """Exchange price quote.

    Attributes:
        symbol: Trading pair symbol the price belongs to.
        price: Exact decimal price as returned by the exchange.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    price: Decimal
