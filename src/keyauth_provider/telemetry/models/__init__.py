"""Pydantic models for log records."""

from keyauth_provider.telemetry.models.audit import HandshakeEvent, HandshakeEventType

__all__ = [
    "HandshakeEvent",
    "HandshakeEventType",
]
