"""Telegram bot message templates and constants.

Contains all user-facing message templates, the static command table used
for /help and the command menu, and the inline button constants. Centralizes
message management for a consistent user experience.
"""

from ..models import Command

# Bot commands and descriptions
HELP_HEADER = "These commands are supported:"

COMMAND_DESCRIPTIONS: tuple[tuple[Command, str], ...] = (
    (Command.INFO, "About this bot."),
    (Command.HELP, "Display this text."),
    (Command.GET_PRICE, "Get USDT/BTC price."),
)

HELP_LINE = "/{name} — {description}"

INFO_MESSAGE = (
    "Meow! I'm {app_name}, version {app_version}. "
    "For now I can only fetch the Bitcoin price ({pair_label})."
)

# Price messages
PRICE_MESSAGE = "The price of the bitcoin is: {price}"
PRICE_ERROR_MESSAGE = "Error fetching bitcoin price: {error}"
UNEXPECTED_ERROR_MESSAGE = "Something went wrong while handling your command. Please try again later."

# Inline button
REFRESH_PRICE_TAG = "update_btc_price"
REFRESH_PRICE_LABEL = "Update Price"

# Callback query notices (shown as a toast, Telegram allows up to 200 chars)
CALLBACK_NOTICE_LIMIT = 200
REFRESH_FETCH_FAILED_NOTICE = "Error fetching bitcoin price: {error}"
REFRESH_UPDATE_FAILED_NOTICE = "Could not update the price message. Please try again."
REFRESH_TARGET_MISSING_NOTICE = "This message is no longer available. Send /getbtcprice again."
