"""Config and log path resolution."""

from __future__ import annotations

__all__ = [
    "ensure_directories",
    "get_audit_log_path",
    "get_config_path",
    "get_system_log_path",
]

import os
from pathlib import Path
from typing import TYPE_CHECKING

from keyauth_provider.constants import CONFIG_DIR, CONFIG_FILENAME, CONFIG_PATH_ENV_VAR, LOGS_SUBDIR

if TYPE_CHECKING:
    from keyauth_provider.config import AppConfig


def get_config_path() -> Path:
    """Return the config file path.

    KEYAUTH_PROVIDER_CONFIG overrides the OS-specific default.
    """
    override = os.environ.get(CONFIG_PATH_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path(CONFIG_DIR) / CONFIG_FILENAME


def _log_root(config: "AppConfig") -> Path | None:
    if not config.logging.log_dir:
        return None
    return Path(config.logging.log_dir).expanduser() / LOGS_SUBDIR


def get_system_log_path(config: "AppConfig") -> Path | None:
    """Path to system.jsonl, or None when file logging is disabled."""
    root = _log_root(config)
    return root / "system" / "system.jsonl" if root else None


def get_audit_log_path(config: "AppConfig") -> Path | None:
    """Path to handshake.jsonl, or None when file logging is disabled."""
    root = _log_root(config)
    return root / "audit" / "handshake.jsonl" if root else None


def ensure_directories(config: "AppConfig") -> None:
    """Create log directories (0o700) if file logging is enabled."""
    for path in (get_system_log_path(config), get_audit_log_path(config)):
        if path is not None:
            path.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
