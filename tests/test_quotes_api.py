"""Tests for the quote API client."""

from __future__ import annotations

import httpx
import pytest

from quotebot.config import QuoteApiSettings
from quotebot.domain.models import Quote, QuoteResponse
from quotebot.services import quotes as quotes_module
from quotebot.services.exceptions import QuoteApiError, QuoteTransportError
from quotebot.services.quotes import build_http_client


@pytest.mark.asyncio
async def test_search_quotes_sends_query_and_default_limit(make_api):
    seen: list[httpx.Request] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "count": 1,
                "results": [{"_id": "x1", "content": "C1", "author": "A1", "tags": ["wisdom"]}],
            },
        )

    api = make_api(handler)
    response = await api.search_quotes("life is")

    assert response == QuoteResponse(results=(Quote(content="C1", author="A1"),))
    request = seen[0]
    assert request.method == "GET"
    assert request.url.host == "api.quotable.io"
    assert request.url.path == "/search/quotes"
    assert request.url.params["query"] == "life is"
    assert request.url.params["limit"] == "5"


@pytest.mark.asyncio
async def test_search_quotes_uses_configured_and_explicit_limit(make_api):
    limits: list[str] = []

    async def handler(request: httpx.Request) -> httpx.Response:
        limits.append(request.url.params["limit"])
        return httpx.Response(200, json={"results": []})

    api = make_api(handler, QuoteApiSettings(result_limit=12))
    await api.search_quotes("love")
    await api.search_quotes("love", limit=2)

    assert limits == ["12", "2"]


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{}, {"results": None}, {"results": []}])
async def test_missing_or_null_results_are_empty(make_api, payload):
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=payload)

    api = make_api(handler)
    response = await api.search_quotes("anything")

    assert response.results == ()


@pytest.mark.asyncio
async def test_error_status_carries_body_text(make_api):
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="boom")

    api = make_api(handler)
    with pytest.raises(QuoteApiError) as excinfo:
        await api.search_quotes("x")

    assert excinfo.value.status_code == 500
    assert excinfo.value.body == "boom"


@pytest.mark.asyncio
async def test_error_status_without_body(make_api):
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    api = make_api(handler)
    with pytest.raises(QuoteApiError) as excinfo:
        await api.search_quotes("x")

    assert excinfo.value.status_code == 404
    assert excinfo.value.body is None


@pytest.mark.asyncio
async def test_transport_failure_is_wrapped(make_api):
    async def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timeout", request=request)

    api = make_api(handler)
    with pytest.raises(QuoteTransportError) as excinfo:
        await api.search_quotes("x")

    assert excinfo.value.description == "timeout"
    assert isinstance(excinfo.value.__cause__, httpx.ReadTimeout)


@pytest.mark.asyncio
async def test_transport_failure_without_message_uses_class_name(make_api):
    async def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("", request=request)

    api = make_api(handler)
    with pytest.raises(QuoteTransportError) as excinfo:
        await api.search_quotes("x")

    assert excinfo.value.description == "ConnectError"


@pytest.mark.asyncio
async def test_unencodable_query_is_a_transport_error(make_api):
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"results": []})

    api = make_api(handler)
    with pytest.raises(QuoteTransportError) as excinfo:
        await api.search_quotes("life \ud800")

    assert excinfo.value.description.startswith("query cannot be encoded")
    assert isinstance(excinfo.value.__cause__, UnicodeEncodeError)


@pytest.mark.asyncio
async def test_malformed_success_payload_is_an_api_error(make_api):
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>maintenance</html>")

    api = make_api(handler)
    with pytest.raises(QuoteApiError) as excinfo:
        await api.search_quotes("x")

    assert excinfo.value.status_code == 200
    assert excinfo.value.body.startswith("invalid response payload")


@pytest.mark.asyncio
async def test_build_http_client_defaults():
    client = build_http_client()
    try:
        assert str(client.base_url) == "https://api.quotable.io/"
    finally:
        await client.aclose()


@pytest.mark.asyncio
async def test_build_http_client_applies_timeout():
    client = build_http_client(QuoteApiSettings(request_timeout_seconds=3))
    try:
        assert client.timeout.read == 3
    finally:
        await client.aclose()


def test_build_http_client_verifies_tls_unless_insecure(monkeypatch):
    captured: list[dict] = []
    monkeypatch.setattr(quotes_module.httpx, "AsyncClient", lambda **kwargs: captured.append(kwargs))

    build_http_client(QuoteApiSettings())
    build_http_client(QuoteApiSettings(insecure_transport=True))

    assert "verify" not in captured[0]
    assert captured[1]["verify"] is False
