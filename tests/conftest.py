"""Shared pytest fixtures for quote API and search screen tests."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Awaitable, Callable

import httpx
import pytest
import pytest_asyncio
from aiogram.exceptions import TelegramBadRequest

from quotebot.config import QuoteApiSettings
from quotebot.domain.models import QuoteResponse
from quotebot.i18n import I18nService
from quotebot.services.quotes import QuoteApiService

Handler = Callable[[httpx.Request], Awaitable[httpx.Response]]


class FakeQuoteApi:
    """Scripted stand-in for :class:`QuoteApiService`.

    Call N gets outcome N; exceptions are raised, everything else
    is returned. A ``gate`` event holds calls until the test releases it.
    """

    def __init__(self, *outcomes) -> None:
        self.outcomes = list(outcomes)
        self.calls: list[tuple[str, int | None]] = []
        self.gates: list[asyncio.Event | None] = []

    async def search_quotes(self, query: str, limit: int | None = None) -> QuoteResponse:
        index = len(self.calls)
        self.calls.append((query, limit))
        gate = self.gates[index] if index < len(self.gates) else None
        if gate is not None:
            await gate.wait()
        outcome = self.outcomes[index]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture
def i18n() -> I18nService:
    return I18nService(default_locale="en")


@pytest_asyncio.fixture
async def make_api():
    clients: list[httpx.AsyncClient] = []

    def factory(handler: Handler, settings: QuoteApiSettings | None = None) -> QuoteApiService:
        settings = settings or QuoteApiSettings()
        client = httpx.AsyncClient(
            base_url=str(settings.base_url),
            transport=httpx.MockTransport(handler),
        )
        clients.append(client)
        return QuoteApiService(client, settings=settings)

    try:
        yield factory
    finally:
        for client in clients:
            await client.aclose()


class DummyBot:
    def __init__(self, *, edit_error: str | None = None, send_delay: float = 0) -> None:
        self.sent: list[dict] = []
        self.edited: list[dict] = []
        self.edit_error = edit_error
        self.send_delay = send_delay
        self._next_id = 100

    async def send_message(self, chat_id, text, **kwargs):
        if self.send_delay:
            await asyncio.sleep(self.send_delay)
        self._next_id += 1
        self.sent.append({"chat_id": chat_id, "text": text, **kwargs})
        return SimpleNamespace(message_id=self._next_id)

    async def edit_message_text(self, text, chat_id, message_id, **kwargs):
        if self.edit_error is not None:
            raise TelegramBadRequest(method=None, message=self.edit_error)
        self.edited.append({"chat_id": chat_id, "message_id": message_id, "text": text, **kwargs})
        return True


@pytest.fixture
def fake_quote_api():
    return FakeQuoteApi


@pytest.fixture
def dummy_bot():
    return DummyBot
