"""System (operational) logger.

Log calls pass a dict instead of a format string:

    logger.warning(
        {
            "event": "consumer_fetch_failed",
            "message": "Consumer profile unavailable",
            "component": "consumer_fetcher",
            "details": {"consumer_id": consumer_id},
        }
    )

JsonLineFormatter turns each record into one JSON object per line with
"time" and "level" added. Plain string messages are wrapped as
{"message": ...}.
"""

from __future__ import annotations

__all__ = [
    "SYSTEM_LOGGER_NAME",
    "JsonLineFormatter",
    "configure_system_logger",
    "get_system_logger",
]

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

SYSTEM_LOGGER_NAME = "keyauth_provider.system"


class JsonLineFormatter(logging.Formatter):
    """Serialize dict log messages as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
        }
        if isinstance(record.msg, dict):
            payload.update(record.msg)
        else:
            payload["message"] = record.getMessage()
        if record.exc_info and "stacktrace" not in payload:
            payload["stacktrace"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def get_system_logger() -> logging.Logger:
    """Return the shared system logger.

    Handlers are attached by configure_system_logger(); until then records
    propagate to the root logger.
    """
    return logging.getLogger(SYSTEM_LOGGER_NAME)


def configure_system_logger(level: str = "INFO", log_path: Path | None = None) -> logging.Logger:
    """Attach stderr (and optional JSONL file) handlers to the system logger.

    Safe to call more than once: previously attached handlers are replaced.

    Args:
        level: Logging level name.
        log_path: Optional path to system.jsonl.

    Returns:
        The configured system logger.
    """
    logger = get_system_logger()
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = JsonLineFormatter()

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger
