"""Response formatting for bot replies and button notices.

Handles price formatting, reply text for each command and the inline
refresh keyboard attached to price messages.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal, localcontext

from ..errors import FetchError
from ..models import Button, PriceQuote
from .commands import build_help_text
from .messages import (
    CALLBACK_NOTICE_LIMIT,
    INFO_MESSAGE,
    PRICE_ERROR_MESSAGE,
    PRICE_MESSAGE,
    REFRESH_FETCH_FAILED_NOTICE,
    REFRESH_PRICE_LABEL,
    REFRESH_PRICE_TAG,
)

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def format_price(price: Decimal) -> str:
    """Format a price with exactly two decimal places.

    Rounds half up, so ``12.345`` becomes ``12.35``. Precision grows with the
    magnitude so large values never overflow the default 28-digit context.

    Args:
        price: Exact price value.

    Returns:
        Fixed-point string without exponent.
    """
    with localcontext() as ctx:
        ctx.prec = max(28, price.adjusted() + 4)
        return f"{price.quantize(CENTS, ROUND_HALF_UP):f}"


class ResponseFormatter:
    """Formats bot replies for commands and refresh notices."""

    def __init__(self) -> None:
        """Initialize response formatter."""
        self.refresh_button = Button(label=REFRESH_PRICE_LABEL, action_tag=REFRESH_PRICE_TAG)

    def format_info(self, app_name: str, app_version: str, pair_label: str) -> str:
        """Format /info reply from configured identity strings."""
        return INFO_MESSAGE.format(
            app_name=app_name, app_version=app_version, pair_label=pair_label
        )

    def format_help(self) -> str:
        """Format /help reply."""
        return build_help_text()

    def format_price_message(self, quote: PriceQuote) -> str:
        """Format the price message shown for /getbtcprice and refreshes.

        Args:
            quote: Fetched price quote.

        Returns:
            Message text with the price rounded to cents.
        """
        return PRICE_MESSAGE.format(price=format_price(quote.price))

    def format_price_error(self, error: FetchError) -> str:
        """Format the reply sent when /getbtcprice cannot fetch a quote."""
        return PRICE_ERROR_MESSAGE.format(error=error.reason)

    def format_refresh_error_notice(self, error: FetchError) -> str:
        """Format the toast shown when a refresh cannot fetch a quote."""
        return self.truncate_notice(REFRESH_FETCH_FAILED_NOTICE.format(error=error.reason))

    def refresh_keyboard(self) -> list[list[Button]]:
        """Inline keyboard with the single refresh button."""
        return [[self.refresh_button]]

    @staticmethod
    def truncate_notice(text: str) -> str:
        """Trim callback notice text to Telegram's length limit."""
        if len(text) <= CALLBACK_NOTICE_LIMIT:
            return text
        return text[: CALLBACK_NOTICE_LIMIT - 1] + "…"


# Global response formatter instance
response_formatter = ResponseFormatter()
