"""Application entry point.

Main module that configures logging, validates the bot token, wires the
components through the DI container and runs the long-poll, command and
button-press loops until the process is stopped.
"""

import asyncio
import logging

from telegram.error import TelegramError

from .bot.orchestrator import run_bot
from .config import config
from .core.container import Container

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure root logging once for the whole process."""
    logging.basicConfig(
        format="%(asctime)s - %(levelname)s - %(message)s",
        level=getattr(logging, level.upper(), logging.INFO),
    )
    # httpx logs full request URLs, which contain the bot token
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_container() -> Container:
    """Create the DI container populated from the global configuration."""
    container = Container()
    container.config.from_dict(config.as_dict())
    return container


async def serve(container: Container) -> None:
    """Initialize the bot and run all loops.

    Args:
        container: Wired DI container.

    Raises:
        telegram.error.InvalidToken: If Telegram rejects the token.
    """
    bot = container.bot()
    async with bot:
        logger.info(f"Authorized as @{bot.username}")

        gateway = container.gateway()
        try:
            await gateway.publish_commands()
        except TelegramError as e:
            logger.warning(f"Failed to publish command menu: {e}")

        session = container.http_session()
        try:
            await run_bot(
                gateway,
                container.dispatcher(),
                container.poller(),
                timeout=config.polling.timeout,
                drop_pending=config.polling.drop_pending_updates,
                retry_delay=config.polling.retry_delay,
                max_retry_delay=config.polling.max_retry_delay,
            )
        finally:
            await session.close()


def main() -> None:
    """Main application entry point.

    Raises:
        RuntimeError: If neither BOT_TOKEN nor TELOXIDE_TOKEN is set.
    """
    configure_logging(config.bot.log_level)

    if not config.bot.bot_token:
        raise RuntimeError("Set BOT_TOKEN environment variable")

    logger.info("Starting command bot...")
    try:
        asyncio.run(serve(build_container()))
    except KeyboardInterrupt:
        logger.info("Bot stopped")


if __name__ == "__main__":
    main()
