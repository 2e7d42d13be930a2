"""Log unhandled bot errors and notify the administrator."""

from __future__ import annotations

import json
import traceback
from typing import Any

from aiogram import Bot
from aiogram.dispatcher.event.bases import UNHANDLED
from aiogram.types import ErrorEvent, Update

from quotebot.bot.utils.telegram import TELEGRAM_MESSAGE_LIMIT, bot_send_with_retry, truncate_message
from quotebot.config import BotSettings
from quotebot.logging import logger

TRACEBACK_CHAR_LIMIT = 1800
PAYLOAD_CHAR_LIMIT = 1200
ACTOR_FIELDS = ("message", "edited_message", "callback_query")


class ErrorMonitor:
    """Error handler registered on the aiogram error observer.

    Fetch failures never reach this point; the search controller turns them
    into view state. What arrives here are failures in the chat plumbing
    itself.
    """

    def __init__(self, settings: BotSettings) -> None:
        self._settings = settings

    async def handle_error(self, event: ErrorEvent, bot: Bot) -> Any:
        logger.error(
            "bot_error_captured",
            exception_type=event.exception.__class__.__name__,
            exception=str(event.exception),
            update_id=getattr(event.update, "update_id", None),
        )
        admin_id = self._settings.admin_telegram_id
        if admin_id is None:
            return UNHANDLED

        try:
            await bot_send_with_retry(bot, chat_id=admin_id, text=self._build_message(event), parse_mode=None)
        except Exception:
            logger.exception(
                "error_monitor_notification_failed",
                update_id=getattr(event.update, "update_id", None),
            )
        return UNHANDLED

    def _build_message(self, event: ErrorEvent) -> str:
        update = event.update
        exception = event.exception
        update_type, payload_preview = self._describe_update(update)

        lines = [
            "QUOTE BOT ERROR",
            f"Environment: {self._settings.environment}",
            f"Exception: {exception.__class__.__name__}: {exception}",
            f"Update ID: {getattr(update, 'update_id', 'unknown')}",
            f"Update Type: {update_type}",
            f"Chat: {self._describe_chat(update)}",
        ]
        trace = self._format_traceback(exception)
        if trace:
            lines.extend(["", "Traceback:", trace])
        if payload_preview:
            lines.extend(["", "Payload:", payload_preview])
        return truncate_message("\n".join(lines).strip(), TELEGRAM_MESSAGE_LIMIT)

    def _describe_update(self, update: Update | None) -> tuple[str, str]:
        if update is None:
            return "unknown", ""

        update_dict = update.model_dump(exclude_unset=True, exclude_none=True)
        update_dict.pop("update_id", None)
        for key, value in update_dict.items():
            if value not in (None, {}, [], ()):
                return key, self._pretty_json(value)
        return "unknown", ""

    @staticmethod
    def _describe_chat(update: Update | None) -> str:
        if update is None:
            return "unknown"
        for field in ACTOR_FIELDS:
            source = getattr(update, field, None)
            if source is None:
                continue
            chat = getattr(source, "chat", None) or getattr(getattr(source, "message", None), "chat", None)
            if chat is not None:
                return f"{chat.id} | {chat.type}"
        return "unknown"

    @staticmethod
    def _format_traceback(exception: BaseException) -> str:
        trace = "".join(traceback.format_exception(exception.__class__, exception, exception.__traceback__))
        return truncate_message(trace.strip(), TRACEBACK_CHAR_LIMIT) if trace.strip() else ""

    @staticmethod
    def _pretty_json(payload: Any) -> str:
        try:
            serialized = json.dumps(payload, ensure_ascii=False, indent=2, default=str)
        except TypeError:
            serialized = str(payload)
        return truncate_message(serialized, PAYLOAD_CHAR_LIMIT)


__all__ = ["ErrorMonitor"]
