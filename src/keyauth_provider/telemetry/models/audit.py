"""Audit event models."""

from __future__ import annotations

__all__ = [
    "HandshakeEvent",
    "HandshakeEventType",
]

from typing import Any, Literal

from pydantic import BaseModel, Field

HandshakeEventType = Literal[
    "consumer_fetch_failed",
    "credential_rejected",
    "request_token_issued",
    "auth_token_issued",
    "validation_rejected",
    "session_confirmed",
    "session_rejected",
]


class HandshakeEvent(BaseModel):
    """One handshake audit entry (audit/handshake.jsonl).

    Tokens and passphrases are never recorded; site and outcome are enough
    to reconstruct a handshake.
    """

    time: str | None = Field(
        None,
        description="ISO 8601 timestamp, added by formatter during serialization",
    )
    event_type: HandshakeEventType
    status: Literal["Success", "Failure"]
    consumer_id: str | None = None  # client_id as sent by the browser/consumer
    site: str | None = None  # canonical consumer name (SiteRecord key)
    message: str | None = None
    details: dict[str, Any] | None = None
