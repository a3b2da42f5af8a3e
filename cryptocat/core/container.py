"""Dependency-injection container.

This module defines a dependency-injection (DI) container that wires together
the application's components. All providers are lazy singletons, so the HTTP
session and the Bot are only created once the event loop is running.
"""

from dependency_injector import containers, providers

from cryptocat.bot.dispatcher import CommandDispatcher
from cryptocat.bot.gateway import TelegramGateway, build_bot
from cryptocat.bot.poller import InteractionPoller
from cryptocat.services.quote import QuoteService, create_session


class Container(containers.DeclarativeContainer):
    """DI container for the application."""

    config = providers.Configuration()

    # Transport
    bot = providers.Singleton(
        build_bot,
        token=config.bot.bot_token,
        connection_pool_size=config.bot.connection_pool_size,
    )
    gateway = providers.Singleton(TelegramGateway, bot=bot)

    # Services
    http_session = providers.Singleton(create_session)
    quote_service = providers.Singleton(
        QuoteService,
        session=http_session,
        url=config.quote.url,
        symbol=config.quote.symbol,
        timeout=config.quote.timeout,
    )

    # Bot components
    dispatcher = providers.Singleton(
        CommandDispatcher,
        gateway=gateway,
        quote_service=quote_service,
        app_name=config.bot.app_name,
        app_version=config.bot.app_version,
        pair_label=config.quote.pair_label,
    )
    poller = providers.Singleton(InteractionPoller, gateway=gateway, quote_service=quote_service)
