"""Security primitives: token generation and passphrase verification."""

from keyauth_provider.security.credentials import CredentialChecker
from keyauth_provider.security.tokens import (
    generate_token,
    is_valid_token_format,
    validate_token,
)

__all__ = [
    "CredentialChecker",
    "generate_token",
    "is_valid_token_format",
    "validate_token",
]
