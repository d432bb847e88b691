"""Response models for the provider API."""

from __future__ import annotations

__all__ = [
    "AboutResponse",
    "SessionResponse",
    "ValidateResponse",
]

from pydantic import BaseModel


class AboutResponse(BaseModel):
    """Public provider profile (/about)."""

    name: str
    about: str


class ValidateResponse(BaseModel):
    """Result of trading a request token (/auth/validate).

    token is the auth token on success, null otherwise.
    """

    valid: bool
    token: str | None = None


class SessionResponse(BaseModel):
    """Result of a session check (/auth/session).

    Serialized with exclude_none, so a failed check is an empty object.
    """

    name: str | None = None
