"""Domain-specific exceptions."""

from __future__ import annotations


class ServiceError(Exception):
    pass


class QuoteApiError(ServiceError):
    """The quote API answered with a non-success status."""

    def __init__(self, status_code: int, body: str | None) -> None:
        super().__init__(f"Quote API returned {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class QuoteTransportError(ServiceError):
    """No response was received from the quote API."""

    def __init__(self, description: str) -> None:
        super().__init__(description)
        self.description = description
