"""Handshake state machine.

The provider side of the three-message login:

1. Browser hits /auth?client_id=... -> start_handshake() fetches the consumer
   profile and asks for the login page to be rendered.
2. Browser posts the passphrase -> submit_credential() re-fetches the profile,
   checks the passphrase, mints a request token and redirects the browser to
   the consumer's callback with that token.
3. Consumer calls /auth/validate -> validate_and_authorize() trades the
   request token for an auth token, exactly once.
4. Consumer calls /auth/session -> check_session() confirms the auth token and
   returns the provider name.

Each step is a short pipeline that stops at the first failing stage and
returns a result value. Nothing here raises to the HTTP layer.

Per site the record goes PENDING (request token, no auth token) ->
COMPLETED (auth token set). Lookups that fail are the INVALID outcome and are
never stored.
"""

from __future__ import annotations

__all__ = [
    "CallbackRedirect",
    "HandshakeCoordinator",
    "LoginPrompt",
]

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable
from urllib.parse import urlencode

from keyauth_provider.constants import DEFAULT_CALLBACK_PATH
from keyauth_provider.consumers.fetcher import ConsumerInfoFetcher, ConsumerProfile
from keyauth_provider.security.credentials import CredentialChecker
from keyauth_provider.security.tokens import generate_token
from keyauth_provider.storage.token_store import TokenStore
from keyauth_provider.telemetry.audit.handshake_logger import AUDIT_LOGGER_NAME, HandshakeLogger


@dataclass(frozen=True)
class LoginPrompt:
    """Render the login page.

    Attributes:
        profile: Consumer profile, or None when it could not be fetched.
        failed: The submitted passphrase was rejected.
        consumer_unavailable: The consumer profile could not be fetched.
    """

    profile: ConsumerProfile | None
    failed: bool = False
    consumer_unavailable: bool = False


@dataclass(frozen=True)
class CallbackRedirect:
    """Send the browser back to the consumer.

    Attributes:
        url: Consumer callback URL carrying the request token.
        site: SiteRecord key the token was issued for.
    """

    url: str
    site: str


class HandshakeCoordinator:
    """Orchestrates token issuance, promotion and session checks.

    Usage:
        coordinator = HandshakeCoordinator(
            provider_name="keys.example",
            store=TokenStore(ttl_seconds=600),
            checker=CredentialChecker(private_key_pem),
            fetcher=ConsumerInfoFetcher(timeout_seconds=5),
        )
        result = await coordinator.submit_credential("shop:8000", "passphrase")
    """

    def __init__(
        self,
        provider_name: str,
        store: TokenStore,
        checker: CredentialChecker,
        fetcher: ConsumerInfoFetcher,
        callback_path: str = DEFAULT_CALLBACK_PATH,
        audit_logger: HandshakeLogger | None = None,
        token_factory: Callable[[], str] = generate_token,
    ) -> None:
        """Initialize coordinator.

        Args:
            provider_name: Name asserted to consumers (redirect and /auth/session).
            store: Handshake state.
            checker: Passphrase verifier.
            fetcher: Consumer profile lookup.
            callback_path: Path on the consumer that receives the redirect.
            audit_logger: Handshake audit logger (default: the shared audit logger,
                used as currently configured).
            token_factory: Source of request and auth tokens.
        """
        self._name = provider_name
        self._store = store
        self._checker = checker
        self._fetcher = fetcher
        self._callback_path = callback_path
        self._audit = audit_logger or HandshakeLogger(logging.getLogger(AUDIT_LOGGER_NAME))
        self._new_token = token_factory

    @property
    def provider_name(self) -> str:
        return self._name

    @property
    def store(self) -> TokenStore:
        return self._store

    async def start_handshake(self, consumer_id: str | None) -> LoginPrompt:
        """Fetch the consumer profile for the login page.

        Does not touch the token store.
        """
        profile = await self._fetcher.fetch(consumer_id)
        if profile.is_empty:
            self._audit.log_consumer_fetch_failed(consumer_id=consumer_id or "")
            return LoginPrompt(profile=None, consumer_unavailable=True)
        return LoginPrompt(profile=profile)

    async def submit_credential(
        self, consumer_id: str | None, passphrase: str | None
    ) -> LoginPrompt | CallbackRedirect:
        """Check the passphrase and, on success, issue a request token.

        Pipeline: fetch profile -> check passphrase -> create token -> redirect.

        Returns:
            CallbackRedirect on success, otherwise a LoginPrompt flagged with
            the failing stage. A rejected passphrase leaves the store unchanged.
        """
        profile = await self._fetcher.fetch(consumer_id)
        if profile.is_empty:
            self._audit.log_consumer_fetch_failed(consumer_id=consumer_id or "")
            return LoginPrompt(profile=None, consumer_unavailable=True)

        valid = await asyncio.to_thread(self._checker.check, passphrase or "")
        if not valid:
            self._audit.log_credential_rejected(consumer_id=consumer_id or "", site=profile.name)
            return LoginPrompt(profile=profile, failed=True)

        site = profile.name
        token = self._store.create_token(site, self._new_token())
        self._audit.log_request_token_issued(consumer_id=consumer_id or "", site=site)
        return CallbackRedirect(url=self.callback_url(site, token), site=site)

    def validate_and_authorize(self, consumer_id: str | None, request_token: str | None) -> str | None:
        """Trade a pending request token for an auth token.

        Must stay free of awaits: promote() does the check-and-set under the
        store lock.

        Returns:
            The new auth token, or None if the request token is unknown,
            expired or already used.
        """
        site = consumer_id or ""
        if not site or not request_token:
            self._audit.log_validation_rejected(site=site)
            return None

        auth_token = self._new_token()
        if not self._store.promote(site, request_token, auth_token):
            self._audit.log_validation_rejected(site=site)
            return None

        self._audit.log_auth_token_issued(site=site)
        return auth_token

    def check_session(self, consumer_id: str | None, auth_token: str | None) -> str | None:
        """Confirm an auth token.

        Repeatable: a valid token stays valid across calls.

        Returns:
            The provider name if the token matches, else None.
        """
        site = consumer_id or ""
        valid = bool(site and auth_token) and self._store.check_session(site, auth_token or "")
        self._audit.log_session_checked(site=site, valid=valid)
        return self._name if valid else None

    def callback_url(self, site: str, token: str) -> str:
        """Build http://{site}{callback_path}?token=...&provider=..."""
        query = urlencode({"token": token, "provider": self._name})
        return f"http://{site}{self._callback_path}?{query}"
