"""Exchange quote service.

Fetches the current ticker price for the configured trading pair from the
exchange REST API. The price is kept as an exact ``Decimal``; any transport
problem, unexpected status or malformed body is reported as ``FetchError``
instead of being replaced by a default value.
"""

import asyncio
import logging
import re
from decimal import Decimal, InvalidOperation
from typing import Any

import aiohttp

from ..errors import FetchError
from ..models import PriceQuote

logger = logging.getLogger(__name__)

DECIMAL_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?", re.ASCII)

# Integer digits accepted in a quote
MAX_PRICE_DIGITS = 64


def parse_price(raw: Any) -> Decimal:
    """Parse a ticker price string into a finite Decimal.

    Args:
        raw: Value of the ``price`` field from the response body.

    Returns:
        Parsed price.

    Raises:
        FetchError: If the value is not a string holding a finite decimal.
    """
    if not isinstance(raw, str):
        raise FetchError(f"price field has unexpected type {type(raw).__name__}")

    text = raw.strip()
    if not DECIMAL_PATTERN.fullmatch(text):
        raise FetchError(f"price {raw!r} is not a decimal number")

    try:
        price = Decimal(text)
    except InvalidOperation:
        raise FetchError(f"price {raw!r} is not a decimal number") from None

    if price.adjusted() >= MAX_PRICE_DIGITS:
        raise FetchError(f"price {raw!r} is out of range")

    return price


class QuoteService:
    """Client for the exchange ticker price endpoint."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        url: str,
        symbol: str,
        timeout: float = 10.0,
    ) -> None:
        """Initialize quote service.

        Args:
            session: Shared HTTP session.
            url: Ticker price endpoint.
            symbol: Trading pair symbol, e.g. BTCUSDT.
            timeout: Total request timeout in seconds.
        """
        self.session = session
        self.url = url
        self.symbol = symbol
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def fetch_quote(self) -> PriceQuote:
        """Fetch the current price for the configured symbol.

        Returns:
            Freshly fetched PriceQuote.

        Raises:
            FetchError: On network failure, non-200 response or malformed body.
        """
        try:
            async with self.session.get(
                self.url, params={"symbol": self.symbol}, timeout=self.timeout
            ) as response:
                if response.status != 200:
                    raise FetchError(f"exchange responded with HTTP {response.status}")
                payload = await response.json(content_type=None)
        except FetchError:
            raise
        except asyncio.TimeoutError:
            raise FetchError("exchange request timed out") from None
        except aiohttp.ClientError as e:
            raise FetchError(f"exchange request failed: {e}") from e
        except ValueError as e:
            raise FetchError("exchange response is not valid JSON") from e

        if not isinstance(payload, dict) or "price" not in payload:
            raise FetchError("exchange response has no price field")

        price = parse_price(payload["price"])
        logger.debug(f"Fetched {self.symbol} price {price}")
        return PriceQuote(symbol=self.symbol, price=price)


def create_session() -> aiohttp.ClientSession:
    """Create the shared aiohttp session used for quote requests.

    Returns:
        aiohttp.ClientSession: Configured HTTP session.
    """
    connector = aiohttp.TCPConnector(limit=20)
    headers = {
        "Accept": "application/json",
        "User-Agent": "Cryptocat/1.0",
    }
    return aiohttp.ClientSession(connector=connector, headers=headers)
