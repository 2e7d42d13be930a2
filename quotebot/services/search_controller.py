"""Search screen controller: owns the query and the view state."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

from quotebot.domain.models import ErrorState, IdleState, LoadingState, ResultsState, ViewState
from quotebot.i18n import I18nService
from quotebot.logging import logger
from quotebot.services.exceptions import QuoteApiError, QuoteTransportError
from quotebot.services.quotes import QuoteApiService

StateListener = Callable[[ViewState], Awaitable[None]]
Notifier = Callable[[str], Awaitable[None]]


class SearchController:
    """Drives one search screen.

    ``submit_search`` is the only operation that changes the view state. It
    switches to :class:`LoadingState` before returning and runs the fetch in a
    background task that applies exactly one terminal transition. Requests are
    numbered; a completion that belongs to an older request than the latest one
    issued is dropped so a slow response cannot overwrite a fresher one.
    """

    def __init__(
        self,
        api: QuoteApiService,
        *,
        i18n: I18nService | None = None,
        locale: str | None = None,
        limit: int | None = None,
        on_state_change: StateListener | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self._api = api
        self._i18n = i18n or I18nService()
        self.locale = locale
        self._limit = limit
        self._on_state_change = on_state_change
        self._notifier = notifier
        self._query = ""
        self._state: ViewState = IdleState()
        self._sequence = 0
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def query(self) -> str:
        return self._query

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return isinstance(self._state, LoadingState)

    def set_query(self, text: str) -> None:
        self._query = text

    def clear_query(self) -> None:
        self._query = ""

    async def submit_search(self) -> asyncio.Task[None] | None:
        """Start a fetch for the current query.

        Returns the task running the fetch, or ``None`` when the query is
        blank and nothing was sent.
        """

        query = self._query
        if not query.strip():
            logger.info("search_empty_query")
            await self._notify(self._i18n.gettext("search.empty_query", locale=self.locale))
            return None

        self._sequence += 1
        sequence = self._sequence
        self._state = LoadingState()
        logger.info("search_started", query=query, sequence=sequence)
        await self._emit()

        task = asyncio.create_task(self._fetch(sequence, query))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def retry(self) -> asyncio.Task[None] | None:
        return await self.submit_search()

    async def wait_pending(self) -> None:
        """Wait until every fetch issued so far has completed."""

        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def _fetch(self, sequence: int, query: str) -> None:
        try:
            response = await self._api.search_quotes(query, limit=self._limit)
        except QuoteApiError as exc:
            detail = exc.body or self._i18n.gettext("search.error.unknown", locale=self.locale)
            logger.error("quote_api_error", status_code=exc.status_code, body=exc.body, query=query)
            state: ViewState = ErrorState(
                message=self._i18n.gettext("search.error.load", locale=self.locale, detail=detail)
            )
        except QuoteTransportError as exc:
            logger.error("quote_request_failed", error=exc.description, query=query, exc_info=exc)
            state = ErrorState(
                message=self._i18n.gettext(
                    "search.error.connection", locale=self.locale, detail=exc.description
                )
            )
        except Exception as exc:
            logger.exception("quote_request_failed", query=query)
            state = ErrorState(
                message=self._i18n.gettext(
                    "search.error.connection", locale=self.locale, detail=str(exc) or exc.__class__.__name__
                )
            )
        else:
            logger.info("search_completed", query=query, results=len(response.results))
            state = ResultsState(quotes=response.results)

        if sequence != self._sequence:
            logger.info("search_stale_result_dropped", sequence=sequence, latest=self._sequence)
            return
        self._state = state
        await self._emit()

    async def _emit(self) -> None:
        if self._on_state_change is None:
            return
        try:
            await self._on_state_change(self._state)
        except Exception:
            logger.exception("search_state_listener_failed", state=self._state.kind)

    async def _notify(self, text: str) -> None:
        if self._notifier is None:
            return
        try:
            await self._notifier(text)
        except Exception:
            logger.exception("search_notice_failed")


__all__ = ["Notifier", "SearchController", "StateListener"]
