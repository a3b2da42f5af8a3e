"""Global test configuration and fixtures.

Provides shared fixtures for all test levels: environment setup, an
in-memory chat transport, a scripted quote service and a mocked aiohttp
session.
"""

import asyncio
import os
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from cryptocat.errors import FetchError
from cryptocat.models import PriceQuote, TargetMessage

# Test constants
TEST_BOT_TOKEN = os.getenv("TEST_BOT_TOKEN", "test_bot_token_placeholder")
TEST_BOT_USERNAME = "cryptocat_test_bot"


@pytest.fixture(autouse=True)
def test_environment():
    """Setup test environment variables for all tests."""
    test_env = {
        "BOT_TOKEN": TEST_BOT_TOKEN,
        "APP_NAME": "Cryptocat",
        "APP_VERSION": "1.2.3",
        "LOG_LEVEL": "DEBUG",
    }

    # Store original values
    original_env = {}
    for key, value in test_env.items():
        original_env[key] = os.environ.get(key)
        os.environ[key] = value

    yield

    # Restore original values
    for key, original_value in original_env.items():
        if original_value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = original_value


class FakeTransport:
    """In-memory ChatTransport recording every outbound call in order."""

    def __init__(self, username: str | None = TEST_BOT_USERNAME) -> None:
        self._username = username
        self.calls: list[tuple[str, object]] = []
        self.sent: list[tuple[int, str, object]] = []
        self.edits: list[tuple[TargetMessage, str, object]] = []
        self.acks: list[tuple[str, str | None]] = []
        self.poll_calls: list[tuple[int, bool]] = []
        self.batches: asyncio.Queue = asyncio.Queue()
        self.send_error: Exception | None = None
        self.edit_error: Exception | None = None
        self.ack_error: Exception | None = None
        self.edit_gate: asyncio.Event | None = None
        self._next_message_id = 1000

    @property
    def username(self) -> str | None:
        return self._username

    async def send(self, chat_id, text, buttons=None):
        self.calls.append(("send", chat_id))
        if self.send_error is not None:
            raise self.send_error
        self.sent.append((chat_id, text, buttons))
        self._next_message_id += 1
        return TargetMessage(chat_id=chat_id, message_id=self._next_message_id)

    async def edit(self, target, text, buttons=None):
        self.calls.append(("edit", target.message_id))
        if self.edit_gate is not None:
            await self.edit_gate.wait()
        if self.edit_error is not None:
            raise self.edit_error
        self.edits.append((target, text, buttons))

    async def acknowledge(self, interaction_id, text=None):
        self.calls.append(("ack", interaction_id))
        if self.ack_error is not None:
            raise self.ack_error
        self.acks.append((interaction_id, text))

    async def poll(self, timeout, drop_pending):
        self.poll_calls.append((timeout, drop_pending))
        return await self.batches.get()


class FakeQuoteService:
    """Quote service returning a fixed quote or raising a fixed error."""

    def __init__(self) -> None:
        self.quote = PriceQuote(symbol="BTCUSDT", price=Decimal("50000.123"))
        self.error: FetchError | None = None
        self.calls = 0

    async def fetch_quote(self) -> PriceQuote:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.quote


@pytest.fixture
def fake_transport():
    """In-memory chat transport."""
    return FakeTransport()


@pytest.fixture
def fake_quote_service():
    """Quote service returning 50000.123 unless an error is set."""
    return FakeQuoteService()


@pytest.fixture
def sample_quote():
    """Sample price quote."""
    return PriceQuote(symbol="BTCUSDT", price=Decimal("64123.456"))


@pytest.fixture
def mock_http_session():
    """Mock aiohttp.ClientSession returning a successful ticker response."""
    session = MagicMock()

    response = MagicMock()
    response.status = 200
    response.json = AsyncMock(return_value={"symbol": "BTCUSDT", "price": "50000.12300000"})

    session.get.return_value.__aenter__.return_value = response
    session.get.return_value.__aexit__.return_value = False

    return session
