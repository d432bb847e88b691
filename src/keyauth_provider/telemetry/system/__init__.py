"""Operational (system) logging."""

from keyauth_provider.telemetry.system.system_logger import (
    JsonLineFormatter,
    configure_system_logger,
    get_system_logger,
)

__all__ = [
    "JsonLineFormatter",
    "configure_system_logger",
    "get_system_logger",
]
