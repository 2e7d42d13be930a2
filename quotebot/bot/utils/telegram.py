"""Telegram sending helpers with retry support."""

from __future__ import annotations

from typing import Any

from aiogram import Bot
from aiogram.exceptions import TelegramBadRequest
from aiogram.types import Message

from quotebot.logging import logger
from quotebot.utils.retry import retry_async

TELEGRAM_SEND_MAX_ATTEMPTS = 3
TELEGRAM_SEND_BASE_DELAY = 0.3
# Telegram messages are limited to 4096 characters.
TELEGRAM_MESSAGE_LIMIT = 4000


def truncate_message(text: str, limit: int = TELEGRAM_MESSAGE_LIMIT) -> str:
    if len(text) <= limit:
        return text
    return f"{text[: limit - 15].rstrip()}\n...[truncated]"


async def answer_with_retry(message: Message, text: str, **kwargs: Any) -> Any:
    """Send a reply with retry/backoff."""

    async def _send():
        return await message.answer(truncate_message(text), **kwargs)

    return await retry_async(
        _send,
        max_attempts=TELEGRAM_SEND_MAX_ATTEMPTS,
        base_delay=TELEGRAM_SEND_BASE_DELAY,
        give_up_on=(TelegramBadRequest,),
        logger=logger,
        operation_name="telegram_answer",
    )


async def bot_send_with_retry(bot: Bot, *, chat_id: int, text: str, **kwargs: Any) -> Any:
    """Send a message via Bot with retry/backoff."""

    async def _send():
        return await bot.send_message(chat_id=chat_id, text=truncate_message(text), **kwargs)

    return await retry_async(
        _send,
        max_attempts=TELEGRAM_SEND_MAX_ATTEMPTS,
        base_delay=TELEGRAM_SEND_BASE_DELAY,
        give_up_on=(TelegramBadRequest,),
        logger=logger,
        operation_name="telegram_send_message",
    )


async def bot_edit_with_retry(
    bot: Bot,
    *,
    chat_id: int,
    message_id: int,
    text: str,
    **kwargs: Any,
) -> bool:
    """Edit a message in place.

    Returns ``False`` when Telegram refuses the edit for any reason other
    than the content being unchanged, so callers can send a fresh message.
    """

    async def _edit():
        return await bot.edit_message_text(
            text=truncate_message(text),
            chat_id=chat_id,
            message_id=message_id,
            **kwargs,
        )

    try:
        await retry_async(
            _edit,
            max_attempts=TELEGRAM_SEND_MAX_ATTEMPTS,
            base_delay=TELEGRAM_SEND_BASE_DELAY,
            give_up_on=(TelegramBadRequest,),
            logger=logger,
            operation_name="telegram_edit_message",
        )
    except TelegramBadRequest as exc:
        if "message is not modified" in str(exc):
            return True
        logger.warning("telegram_edit_rejected", chat_id=chat_id, message_id=message_id, error=str(exc))
        return False
    return True


__all__ = [
    "TELEGRAM_MESSAGE_LIMIT",
    "answer_with_retry",
    "bot_edit_with_retry",
    "bot_send_with_retry",
    "truncate_message",
]
