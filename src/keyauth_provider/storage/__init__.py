"""Handshake state storage."""

from keyauth_provider.storage.token_store import SiteRecord, TokenStore

__all__ = [
    "SiteRecord",
    "TokenStore",
]
