"""Per-chat search sessions."""

from __future__ import annotations

from dataclasses import dataclass

from aiogram import Bot

from quotebot.bot.screen import ChatScreen
from quotebot.i18n import I18nService
from quotebot.services.quotes import QuoteApiService
from quotebot.services.search_controller import SearchController


@dataclass(slots=True)
class SearchSession:
    controller: SearchController
    screen: ChatScreen


class SearchSessionRegistry:
    """Owns one controller and screen per chat, all sharing a single API service."""

    def __init__(self, api: QuoteApiService, *, i18n: I18nService | None = None) -> None:
        self._api = api
        self._i18n = i18n or I18nService()
        self._sessions: dict[int, SearchSession] = {}

    @property
    def i18n(self) -> I18nService:
        return self._i18n

    def get(self, chat_id: int) -> SearchSession | None:
        return self._sessions.get(chat_id)

    def get_or_create(self, bot: Bot, chat_id: int, *, language_code: str | None = None) -> SearchSession:
        session = self._sessions.get(chat_id)
        if session is not None:
            return session

        locale = self._i18n.resolve_locale(language_code)
        screen = ChatScreen(bot, chat_id, i18n=self._i18n, locale=locale)
        controller = SearchController(
            self._api,
            i18n=self._i18n,
            locale=locale,
            on_state_change=screen.show,
            notifier=screen.notify,
        )
        session = SearchSession(controller=controller, screen=screen)
        self._sessions[chat_id] = session
        return session

    def reset(self, chat_id: int) -> None:
        self._sessions.pop(chat_id, None)

    async def wait_pending(self) -> None:
        for session in list(self._sessions.values()):
            await session.controller.wait_pending()

    def __len__(self) -> int:
        return len(self._sessions)


__all__ = ["SearchSession", "SearchSessionRegistry"]
