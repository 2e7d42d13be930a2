"""Render the search view state as a single Telegram message."""

from __future__ import annotations

import asyncio

from aiogram import Bot
from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from quotebot.bot.utils.telegram import bot_edit_with_retry, bot_send_with_retry
from quotebot.domain.models import ErrorState, IdleState, LoadingState, ResultsState, ViewState
from quotebot.i18n import I18nService

RETRY_CALLBACK = "search:retry"
REFRESH_CALLBACK = "search:refresh"


def _button(i18n: I18nService, locale: str | None, callback_data: str) -> InlineKeyboardMarkup:
    label = i18n.gettext("search.refresh", locale=locale)
    return InlineKeyboardMarkup(
        inline_keyboard=[[InlineKeyboardButton(text=label, callback_data=callback_data)]]
    )


def render_screen(
    state: ViewState,
    i18n: I18nService,
    locale: str | None = None,
) -> tuple[str, InlineKeyboardMarkup | None]:
    """Map a view state to message text and an optional keyboard."""

    if isinstance(state, LoadingState):
        return i18n.gettext("search.loading", locale=locale), None
    if isinstance(state, ErrorState):
        return state.message, _button(i18n, locale, RETRY_CALLBACK)
    if isinstance(state, ResultsState):
        if not state.quotes:
            text = i18n.gettext("search.empty", locale=locale)
        else:
            text = "\n\n".join(
                i18n.gettext("search.quote", locale=locale, content=quote.content, author=quote.author)
                for quote in state.quotes
            )
        return text, _button(i18n, locale, REFRESH_CALLBACK)
    if isinstance(state, IdleState):
        return i18n.gettext("search.placeholder", locale=locale), _button(i18n, locale, REFRESH_CALLBACK)
    raise TypeError(f"Unsupported view state: {state!r}")


class ChatScreen:
    """Keeps one message per chat in sync with the controller's view state."""

    def __init__(
        self,
        bot: Bot,
        chat_id: int,
        *,
        i18n: I18nService,
        locale: str | None = None,
    ) -> None:
        self.bot = bot
        self.chat_id = chat_id
        self.i18n = i18n
        self.locale = locale
        self.message_id: int | None = None
        self._lock = asyncio.Lock()

    async def show(self, state: ViewState) -> None:
        text, keyboard = render_screen(state, self.i18n, self.locale)
        async with self._lock:
            await self._deliver(text, keyboard)

    async def _deliver(self, text: str, keyboard: InlineKeyboardMarkup | None) -> None:
        if self.message_id is not None:
            edited = await bot_edit_with_retry(
                self.bot,
                chat_id=self.chat_id,
                message_id=self.message_id,
                text=text,
                reply_markup=keyboard,
                parse_mode=None,
            )
            if edited:
                return
        sent = await bot_send_with_retry(
            self.bot,
            chat_id=self.chat_id,
            text=text,
            reply_markup=keyboard,
            parse_mode=None,
        )
        self.message_id = getattr(sent, "message_id", None)

    async def notify(self, text: str) -> None:
        await bot_send_with_retry(self.bot, chat_id=self.chat_id, text=text, parse_mode=None)


__all__ = ["ChatScreen", "REFRESH_CALLBACK", "RETRY_CALLBACK", "render_screen"]
