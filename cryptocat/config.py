"""Configuration management for the cryptocat bot.

Handles all application configuration including environment variables, the
optional ``.env`` file, the YAML quote endpoint file and default settings.
Provides structured configuration classes for the bot, long polling and the
quote endpoint.
"""

from pathlib import Path

import yaml
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BotConfig(BaseSettings):
    """Main Telegram bot configuration.

    Attributes:
        bot_token: Telegram bot API token from environment.
        app_name: Display name used in the /info reply.
        app_version: Version string used in the /info reply.
        log_level: Root logging level name.
        connection_pool_size: HTTP connection pool size for regular Bot API calls.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    bot_token: str = Field(
        default="", validation_alias=AliasChoices("BOT_TOKEN", "TELOXIDE_TOKEN")
    )
    app_name: str = Field(default="Bot", validation_alias="APP_NAME")
    app_version: str = Field(default="0.1", validation_alias="APP_VERSION")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    connection_pool_size: int = Field(default=8, validation_alias="BOT_CONNECTION_POOL_SIZE")


class PollingConfig(BaseSettings):
    """Long-poll retrieval settings.

    Attributes:
        timeout: Seconds Telegram holds a getUpdates call open.
        drop_pending_updates: Whether to discard the backlog on start.
        retry_delay: Initial delay after a failed poll, in seconds.
        max_retry_delay: Upper bound for the exponential backoff.
    """

    model_config = SettingsConfigDict(env_prefix="POLLING_", extra="ignore")

    timeout: int = 30
    drop_pending_updates: bool = True
    retry_delay: float = 1.0
    max_retry_delay: float = 30.0


class QuoteConfig(BaseSettings):
    """Exchange quote endpoint settings.

    Attributes:
        url: Ticker price endpoint.
        symbol: Trading pair symbol sent as query parameter.
        pair_label: Human readable pair name.
        timeout: Total request timeout in seconds.
    """

    model_config = SettingsConfigDict(env_prefix="QUOTE_", extra="ignore")

    url: str = "https://api.binance.com/api/v3/ticker/price"
    symbol: str = "BTCUSDT"
    pair_label: str = "BTC/USDT"
    timeout: float = 10.0


class Config:
    """Application configuration manager.

    Centralizes loading of environment settings and the YAML quote file and
    provides typed access to the configuration sections.
    """

    def __init__(self, resources_dir: Path | None = None):
        """Initialize configuration manager.

        Args:
            resources_dir: Path to the YAML resources directory, defaults to
                cryptocat/resources.
        """
        if resources_dir is None:
            resources_dir = Path(__file__).parent / "resources"

        self.resources_dir = Path(resources_dir)

        self.bot = BotConfig()
        self.polling = PollingConfig()
        self.quote = self._load_quote_config()

    def _load_quote_config(self) -> QuoteConfig:
        """Load quote endpoint settings from quote.yml.

        Returns:
            QuoteConfig built from the file, or defaults if it is missing.
        """
        quote_path = self.resources_dir / "quote.yml"
        if not quote_path.exists():
            return QuoteConfig()

        with open(quote_path) as f:
            data = yaml.safe_load(f) or {}

        endpoint = data.get("endpoint", {})
        defaults = QuoteConfig()
        return QuoteConfig(
            url=endpoint.get("url", defaults.url),
            symbol=endpoint.get("symbol", defaults.symbol),
            pair_label=endpoint.get("pair_label", defaults.pair_label),
            timeout=endpoint.get("timeout", defaults.timeout),
        )

    def as_dict(self) -> dict:
        """Dump all sections for the dependency container."""
        return {
            "bot": self.bot.model_dump(),
            "polling": self.polling.model_dump(),
            "quote": self.quote.model_dump(),
        }


# Global configuration instance
config = Config()
