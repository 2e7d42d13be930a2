"""Application entrypoint."""

from __future__ import annotations

import asyncio

from aiogram import Bot, Dispatcher
from aiogram.client.session.aiohttp import AiohttpSession

from quotebot.bot.routers import setup_routers
from quotebot.bot.sessions import SearchSessionRegistry
from quotebot.config import get_settings
from quotebot.i18n import I18nService
from quotebot.logging import configure_logging, logger
from quotebot.services.error_monitor import ErrorMonitor
from quotebot.services.quotes import QuoteApiService, build_http_client


async def main() -> None:
    configure_logging()
    settings = get_settings()

    session = (
        AiohttpSession(proxy=settings.telegram_proxy) if settings.telegram_proxy else None
    )
    bot = Bot(token=settings.telegram_token.get_secret_value(), session=session)
    dp = Dispatcher()
    dp.include_router(setup_routers())
    error_monitor = ErrorMonitor(settings=settings)
    dp.errors.register(error_monitor.handle_error)

    http_client = build_http_client(settings.quote_api)
    api = QuoteApiService(http_client, settings=settings.quote_api)
    search_sessions = SearchSessionRegistry(
        api,
        i18n=I18nService(default_locale=settings.default_language),
    )

    logger.info(
        "bot_starting",
        environment=settings.environment,
        quote_api=str(settings.quote_api.base_url),
    )
    try:
        await dp.start_polling(bot, search_sessions=search_sessions)
    finally:
        await search_sessions.wait_pending()
        await http_client.aclose()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
