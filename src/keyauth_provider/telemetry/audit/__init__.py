"""Audit logging for handshake events.

Writes to audit/handshake.jsonl when a log directory is configured.
"""

from keyauth_provider.telemetry.audit.handshake_logger import (
    HandshakeLogger,
    create_handshake_logger,
)

__all__ = [
    "HandshakeLogger",
    "create_handshake_logger",
]
