"""Handshake audit logger.

Logs handshake events to audit/handshake.jsonl:
- Consumer profile fetch failures
- Rejected passphrases
- Request and auth token issuance
- Rejected validations
- Session checks (confirmed/rejected)

Failures that the HTTP surface hides from users (wrong passphrase vs.
corrupt key, unknown vs. consumed token) are all visible here as outcomes,
without token values.
"""

from __future__ import annotations

__all__ = [
    "AUDIT_LOGGER_NAME",
    "HandshakeLogger",
    "create_handshake_logger",
]

import logging
from pathlib import Path
from typing import Any, Literal

from keyauth_provider.telemetry.models.audit import HandshakeEvent, HandshakeEventType
from keyauth_provider.telemetry.system.system_logger import JsonLineFormatter

AUDIT_LOGGER_NAME = "keyauth_provider.audit.handshake"


class HandshakeLogger:
    """Typed audit methods for the handshake state machine.

    Usage:
        audit = create_handshake_logger(log_path)
        audit.log_request_token_issued(consumer_id="shop:8000", site="shop:8000")
    """

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def _log(
        self,
        event_type: HandshakeEventType,
        status: Literal["Success", "Failure"],
        *,
        consumer_id: str | None = None,
        site: str | None = None,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        event = HandshakeEvent(
            event_type=event_type,
            status=status,
            consumer_id=consumer_id,
            site=site,
            message=message,
            details=details,
        )
        level = logging.INFO if status == "Success" else logging.WARNING
        self._logger.log(level, event.model_dump(mode="json", exclude={"time"}, exclude_none=True))

    def log_consumer_fetch_failed(self, *, consumer_id: str) -> None:
        self._log(
            "consumer_fetch_failed",
            "Failure",
            consumer_id=consumer_id,
            message="Consumer profile unavailable, handshake cannot proceed",
        )

    def log_credential_rejected(self, *, consumer_id: str, site: str) -> None:
        self._log("credential_rejected", "Failure", consumer_id=consumer_id, site=site)

    def log_request_token_issued(self, *, consumer_id: str, site: str) -> None:
        self._log("request_token_issued", "Success", consumer_id=consumer_id, site=site)

    def log_auth_token_issued(self, *, site: str) -> None:
        self._log("auth_token_issued", "Success", site=site)

    def log_validation_rejected(self, *, site: str) -> None:
        self._log(
            "validation_rejected",
            "Failure",
            site=site,
            message="Unknown, expired or already consumed request token",
        )

    def log_session_checked(self, *, site: str, valid: bool) -> None:
        if valid:
            self._log("session_confirmed", "Success", site=site)
        else:
            self._log("session_rejected", "Failure", site=site)


def create_handshake_logger(log_path: Path | None = None) -> HandshakeLogger:
    """Create a HandshakeLogger, optionally writing to a JSONL file.

    Without a path the audit records propagate to the root logger, which is
    what tests capture with caplog.

    Args:
        log_path: Path to handshake.jsonl, or None.

    Returns:
        Configured HandshakeLogger.
    """
    logger = logging.getLogger(AUDIT_LOGGER_NAME)
    logger.setLevel(logging.INFO)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
        handler.setFormatter(JsonLineFormatter())
        logger.addHandler(handler)
        logger.propagate = False
    else:
        logger.propagate = True

    return HandshakeLogger(logger)
