"""Token generation and comparison.

Request and auth tokens are opaque to every party except the provider:
32 bytes from the OS CSPRNG, hex encoded.
"""

from __future__ import annotations

__all__ = [
    "generate_token",
    "is_valid_token_format",
    "validate_token",
]

import hmac
import secrets

from keyauth_provider.constants import TOKEN_BYTES

_HEX_CHARS = frozenset("0123456789abcdef")


def generate_token() -> str:
    """Generate a secure random token.

    Returns:
        64-character lowercase hex string (32 bytes of randomness).
    """
    return secrets.token_hex(TOKEN_BYTES)


def is_valid_token_format(token: str | None) -> bool:
    """Check that token looks like something generate_token() produced.

    Used to reject junk before it reaches the store.

    Args:
        token: Token to check.

    Returns:
        True if token is hex of the expected length.
    """
    if not token or len(token) != TOKEN_BYTES * 2:
        return False
    return all(c in _HEX_CHARS for c in token.lower())


def validate_token(provided: str, expected: str) -> bool:
    """Compare tokens in constant time.

    Lone surrogates (possible in JSON-decoded input) are encoded with
    surrogatepass, so any str compares without raising.

    Args:
        provided: Token from request.
        expected: Expected token.

    Returns:
        True if tokens match, False otherwise.
    """
    return hmac.compare_digest(
        provided.encode("utf-8", "surrogatepass"),
        expected.encode("utf-8", "surrogatepass"),
    )
