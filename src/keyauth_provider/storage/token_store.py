"""In-memory handshake state, one record per consumer site.

TokenStore is the only owner of SiteRecords. A record moves through two
states: pending (request token issued, no auth token) and completed (auth
token set). Completed records answer session checks until they expire or the
site starts a new handshake.

Thread-safety: a single threading.Lock guards every read and write. FastAPI
runs sync dependencies and endpoints in a worker pool, so the store cannot
rely on the event loop for atomicity.
"""

from __future__ import annotations

__all__ = [
    "SiteRecord",
    "TokenStore",
]

import threading
import time
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from keyauth_provider.security.tokens import validate_token


@dataclass(frozen=True)
class SiteRecord:
    """Handshake state for one consumer site.

    Attributes:
        request_token: Token bound to the login attempt, fixed at creation.
        auth_token: Token issued once the request token is validated, else None.
        created_at: Wall-clock creation time (informational).
        created_monotonic: Monotonic creation time, used for expiry.
    """

    request_token: str
    auth_token: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    created_monotonic: float = field(default_factory=lambda: time.monotonic())

    @property
    def is_completed(self) -> bool:
        return self.auth_token is not None


def _tokens_equal(provided: str | None, expected: str | None) -> bool:
    if provided is None or expected is None:
        return False
    return validate_token(provided, expected)


class TokenStore:
    """Authoritative per-site handshake state.

    Usage:
        store = TokenStore(ttl_seconds=600)
        store.create_token("shop.example:8000", request_token)
        if store.promote("shop.example:8000", request_token, auth_token):
            ...
        store.check_session("shop.example:8000", auth_token)

    Args:
        ttl_seconds: Record lifetime. None keeps records for the process lifetime.
    """

    def __init__(self, ttl_seconds: float | None = None) -> None:
        self._records: dict[str, SiteRecord] = {}
        self._ttl = ttl_seconds
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def create_token(self, site: str, token: str) -> str:
        """Start a handshake for site, discarding any previous record.

        Returns:
            The request token, unchanged.
        """
        with self._lock:
            self._records[site] = SiteRecord(request_token=token)
        return token

    def validate_request(self, site: str, token: str) -> bool:
        """True if site has a pending handshake whose request token is token."""
        with self._lock:
            return self._validate_locked(site, token)

    def set_auth(self, site: str, auth_token: str) -> str:
        """Set the auth token for site without any validation.

        Callers must have validated the request token first; prefer promote(),
        which does both under one lock.

        Raises:
            KeyError: If site has no live record.
        """
        with self._lock:
            record = self._live_record(site)
            if record is None:
                raise KeyError(site)
            self._records[site] = replace(record, auth_token=auth_token)
        return auth_token

    def promote(self, site: str, request_token: str, auth_token: str) -> bool:
        """Atomically validate request_token and, if valid, set auth_token.

        Of several concurrent calls for the same (site, request_token) at most
        one returns True.
        """
        with self._lock:
            if not self._validate_locked(site, request_token):
                return False
            record = self._records[site]
            self._records[site] = replace(record, auth_token=auth_token)
            return True

    def check_session(self, site: str, token: str) -> bool:
        """True if token is the auth token currently set for site."""
        with self._lock:
            record = self._live_record(site)
            if record is None:
                return False
            return _tokens_equal(token, record.auth_token)

    def get(self, site: str) -> SiteRecord | None:
        """Return the live record for site (records are immutable snapshots)."""
        with self._lock:
            return self._live_record(site)

    def purge_expired(self) -> int:
        """Drop every expired record.

        Returns:
            Number of records removed.
        """
        with self._lock:
            expired = [site for site, record in self._records.items() if self._is_expired(record)]
            for site in expired:
                del self._records[site]
            return len(expired)

    # -------------------------------------------------------------------------
    # Lock-held helpers
    # -------------------------------------------------------------------------

    def _validate_locked(self, site: str, token: str) -> bool:
        record = self._live_record(site)
        if record is None or record.is_completed:
            return False
        return _tokens_equal(token, record.request_token)

    def _live_record(self, site: str) -> SiteRecord | None:
        record = self._records.get(site)
        if record is None:
            return None
        if self._is_expired(record):
            del self._records[site]
            return None
        return record

    def _is_expired(self, record: SiteRecord) -> bool:
        if self._ttl is None:
            return False
        return time.monotonic() - record.created_monotonic > self._ttl
