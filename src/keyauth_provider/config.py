"""Application configuration for keyauth-provider.

Defines configuration models for the provider identity, HTTP server,
consumer lookups, token lifetime and logging. Users create the config via
`keyauth-provider init`. Config is stored at the OS-appropriate location
(see utils/config.py), log_dir is user-specified.

Example usage:
    # Load from config file
    config = AppConfig.load_from_files(config_path)

    # Save new configuration
    config.save_to_file(config_path)
"""

import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from keyauth_provider.constants import (
    DEFAULT_CALLBACK_PATH,
    DEFAULT_CONSUMER_TIMEOUT_SECONDS,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_TEMPLATE,
    DEFAULT_TOKEN_TTL_SECONDS,
    MAX_CONSUMER_TIMEOUT_SECONDS,
    MIN_CONSUMER_TIMEOUT_SECONDS,
)
from keyauth_provider.utils.file_helpers import load_validated_json, require_file_exists


# =============================================================================
# Provider Identity
# =============================================================================


class ProviderConfig(BaseModel):
    """Identity and assets of this provider.

    Attributes:
        name: Provider name, sent to consumers in the redirect and /auth/session.
        about: Description served at /about.
        private_key_path: Encrypted PEM RSA private key; its passphrase is the login credential.
        public_key_path: PEM public key served at /key (optional).
        avatar_path: Image served at /avatar (optional).
        callback_path: Path on the consumer that receives the post-login redirect.
        template: Login page template name.
        template_dir: Directory holding templates (None = packaged templates).
    """

    name: str = Field(min_length=1)
    about: str = ""
    private_key_path: str
    public_key_path: str | None = None
    avatar_path: str | None = None
    callback_path: str = DEFAULT_CALLBACK_PATH
    template: str = DEFAULT_TEMPLATE
    template_dir: str | None = None

    @field_validator("callback_path")
    @classmethod
    def _callback_path_is_absolute(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("callback_path must start with '/'")
        return value


# =============================================================================
# Runtime Settings
# =============================================================================


class ServerConfig(BaseModel):
    """HTTP server bind settings.

    Attributes:
        host: Interface to bind.
        port: TCP port (1-65535).
    """

    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)


class ConsumerFetchConfig(BaseModel):
    """Consumer profile lookup settings.

    Attributes:
        timeout_seconds: Timeout for GET http://consumer/about.
    """

    timeout_seconds: float = Field(
        default=DEFAULT_CONSUMER_TIMEOUT_SECONDS,
        ge=MIN_CONSUMER_TIMEOUT_SECONDS,
        le=MAX_CONSUMER_TIMEOUT_SECONDS,
    )


class TokenConfig(BaseModel):
    """Handshake token settings.

    Attributes:
        ttl_seconds: Lifetime of a site record. None keeps records until restart.
    """

    ttl_seconds: int | None = Field(default=DEFAULT_TOKEN_TTL_SECONDS, ge=1)


class LoggingConfig(BaseModel):
    """Logging configuration settings.

    When log_dir is set, logs are stored in a keyauth_provider_logs/
    subdirectory:
        <log_dir>/
        └── keyauth_provider_logs/
            ├── system/
            │   └── system.jsonl
            └── audit/
                └── handshake.jsonl

    Without log_dir, system logs go to stderr only.

    Attributes:
        log_dir: Base directory for logs.
        log_level: Logging level.
    """

    log_dir: str | None = None
    log_level: Literal["DEBUG", "INFO", "WARNING"] = "INFO"


class AppConfig(BaseModel):
    """Main application configuration for keyauth-provider.

    Attributes:
        provider: Provider identity and asset paths.
        server: HTTP bind settings.
        consumers: Consumer profile lookup settings.
        tokens: Handshake token settings.
        logging: Logging configuration.
    """

    provider: ProviderConfig
    server: ServerConfig = Field(default_factory=ServerConfig)
    consumers: ConsumerFetchConfig = Field(default_factory=ConsumerFetchConfig)
    tokens: TokenConfig = Field(default_factory=TokenConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to JSON file.

        Creates parent directories if they don't exist.
        Sets secure permissions (0o700) on the config directory.

        Args:
            config_path: Path where keyauth_provider_config.json should be saved.
        """
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.parent.chmod(0o700)

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.model_dump(), f, indent=2)

        config_path.chmod(0o600)

    @classmethod
    def load_from_files(cls, config_path: Path) -> "AppConfig":
        """Load configuration from JSON file.

        Args:
            config_path: Path to the config file (keyauth_provider_config.json).

        Returns:
            AppConfig instance with loaded configuration.

        Raises:
            FileNotFoundError: If config file doesn't exist.
            ValueError: If config file is invalid or missing required fields.
        """
        require_file_exists(config_path, file_type="configuration")
        return load_validated_json(
            config_path,
            cls,
            file_type="config",
            recovery_hint="Run 'keyauth-provider init' to reconfigure.",
            encoding="utf-8",
        )
