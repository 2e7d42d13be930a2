"""Pydantic models shared across logic/application layers."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Quote(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    content: str
    author: str


class QuoteResponse(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    results: tuple[Quote, ...] = ()

    @field_validator("results", mode="before")
    @classmethod
    def _null_to_empty(cls, value):
        if value is None:
            return ()
        return value


class IdleState(BaseModel):
    """No search performed yet."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["idle"] = "idle"


class LoadingState(BaseModel):
    """A fetch is in flight."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["loading"] = "loading"


class ErrorState(BaseModel):
    """The most recent fetch failed."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["error"] = "error"
    message: str


class ResultsState(BaseModel):
    """The most recent fetch succeeded; ``quotes`` may be empty."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["results"] = "results"
    quotes: tuple[Quote, ...] = ()


ViewState = Annotated[
    Union[IdleState, LoadingState, ErrorState, ResultsState],
    Field(discriminator="kind"),
]


__all__ = [
    "Quote",
    "QuoteResponse",
    "IdleState",
    "LoadingState",
    "ErrorState",
    "ResultsState",
    "ViewState",
]
