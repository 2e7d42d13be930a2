"""Telegram handlers for the quote search screen."""

from __future__ import annotations

from aiogram import Bot, F, Router
from aiogram.filters import Command, CommandObject, CommandStart
from aiogram.types import CallbackQuery, Message

from quotebot.bot.screen import REFRESH_CALLBACK, RETRY_CALLBACK
from quotebot.bot.sessions import SearchSession, SearchSessionRegistry
from quotebot.bot.utils.telegram import answer_with_retry
from quotebot.logging import logger

router = Router()


def _language_code(event: Message | CallbackQuery) -> str | None:
    user = event.from_user
    return getattr(user, "language_code", None) if user is not None else None


def _session_for(
    search_sessions: SearchSessionRegistry,
    bot: Bot,
    message: Message,
) -> SearchSession:
    return search_sessions.get_or_create(bot, message.chat.id, language_code=_language_code(message))


@router.message(CommandStart())
async def handle_start(message: Message, bot: Bot, search_sessions: SearchSessionRegistry) -> None:
    search_sessions.reset(message.chat.id)
    session = _session_for(search_sessions, bot, message)
    name = message.from_user.full_name if message.from_user else ""
    greeting = search_sessions.i18n.gettext(
        "start.greeting",
        locale=session.controller.locale,
        name=name,
    )
    await answer_with_retry(message, greeting, parse_mode=None)
    await session.screen.show(session.controller.state)


@router.message(Command("search"))
async def handle_search_command(
    message: Message,
    command: CommandObject,
    bot: Bot,
    search_sessions: SearchSessionRegistry,
) -> None:
    session = _session_for(search_sessions, bot, message)
    if command.args is not None:
        session.controller.set_query(command.args)
    await session.controller.submit_search()


@router.message(Command("clear"))
async def handle_clear(message: Message, bot: Bot, search_sessions: SearchSessionRegistry) -> None:
    session = _session_for(search_sessions, bot, message)
    session.controller.clear_query()
    await answer_with_retry(
        message,
        search_sessions.i18n.gettext("search.query_cleared", locale=session.controller.locale),
        parse_mode=None,
    )


@router.message(F.text & ~F.text.startswith("/"))
async def handle_query_text(message: Message, bot: Bot, search_sessions: SearchSessionRegistry) -> None:
    session = _session_for(search_sessions, bot, message)
    session.controller.set_query(message.text)
    await session.controller.submit_search()


@router.callback_query(F.data.in_({RETRY_CALLBACK, REFRESH_CALLBACK}))
async def handle_screen_button(
    callback: CallbackQuery,
    bot: Bot,
    search_sessions: SearchSessionRegistry,
) -> None:
    await callback.answer()
    message = callback.message
    if message is None:
        logger.info("search_callback_without_message", data=callback.data)
        return

    session = search_sessions.get_or_create(bot, message.chat.id, language_code=_language_code(callback))
    session.screen.message_id = message.message_id
    if callback.data == RETRY_CALLBACK:
        await session.controller.retry()
    else:
        await session.controller.submit_search()


__all__ = [
    "handle_clear",
    "handle_query_text",
    "handle_screen_button",
    "handle_search_command",
    "handle_start",
    "router",
]
