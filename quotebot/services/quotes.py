"""Quote search API integration."""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError

from quotebot.config import QuoteApiSettings
from quotebot.domain.models import QuoteResponse
from quotebot.logging import logger
from quotebot.services.exceptions import QuoteApiError, QuoteTransportError

SEARCH_QUOTES_PATH = "search/quotes"


def build_http_client(settings: QuoteApiSettings | None = None, **kwargs: Any) -> httpx.AsyncClient:
    """Create the HTTP client shared by quote API calls.

    The caller owns the client and must close it. ``insecure_transport``
    turns off certificate and hostname verification and exists only to
    reach endpoints with broken TLS during development.
    """

    settings = settings or QuoteApiSettings()
    options: dict[str, Any] = {"base_url": str(settings.base_url)}
    if settings.request_timeout_seconds is not None:
        options["timeout"] = settings.request_timeout_seconds
    if settings.insecure_transport:
        logger.warning("quote_api_insecure_transport", base_url=str(settings.base_url))
        options["verify"] = False
    options.update(kwargs)
    return httpx.AsyncClient(**options)


class QuoteApiService:
    """Thin wrapper over ``GET search/quotes``."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings: QuoteApiSettings | None = None,
    ) -> None:
        self._client = http_client
        self._settings = settings or QuoteApiSettings()

    @property
    def default_limit(self) -> int:
        return self._settings.result_limit

    async def search_quotes(self, query: str, limit: int | None = None) -> QuoteResponse:
        params = {"query": query, "limit": limit if limit is not None else self.default_limit}
        try:
            response = await self._client.get(SEARCH_QUOTES_PATH, params=params)
        except httpx.RequestError as exc:
            raise QuoteTransportError(str(exc) or exc.__class__.__name__) from exc
        except UnicodeEncodeError as exc:
            raise QuoteTransportError(f"query cannot be encoded: {exc.reason}") from exc

        if not response.is_success:
            raise QuoteApiError(response.status_code, self._read_body(response))

        try:
            return QuoteResponse.model_validate_json(response.content)
        except ValidationError as exc:
            first = exc.errors()[0] if exc.error_count() else {}
            detail = first.get("msg", "invalid payload")
            raise QuoteApiError(response.status_code, f"invalid response payload: {detail}") from exc

    @staticmethod
    def _read_body(response: httpx.Response) -> str | None:
        try:
            text = response.text
        except (httpx.ResponseNotRead, UnicodeDecodeError):
            return None
        return text.strip() or None


__all__ = [
    "QuoteApiService",
    "SEARCH_QUOTES_PATH",
    "build_http_client",
]
