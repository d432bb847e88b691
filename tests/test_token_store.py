"""Tests for TokenStore.

Uses the AAA pattern (Arrange-Act-Assert) for clarity.
"""

import threading
from unittest.mock import patch

import pytest

from keyauth_provider.storage.token_store import SiteRecord, TokenStore


@pytest.fixture
def store() -> TokenStore:
    return TokenStore()


class TestCreateToken:
    """Tests for TokenStore.create_token."""

    def test_returns_token_and_validates(self, store: TokenStore):
        """Given a fresh token, validate_request accepts it immediately."""
        # Act
        token = store.create_token("siteA", "tok1")

        # Assert
        assert token == "tok1"
        assert store.validate_request("siteA", "tok1") is True

    def test_new_record_has_no_auth_token(self, store: TokenStore):
        """Given a new handshake, the record starts pending."""
        # Act
        store.create_token("siteA", "tok1")

        # Assert
        record = store.get("siteA")
        assert record is not None
        assert record.request_token == "tok1"
        assert record.auth_token is None
        assert record.is_completed is False

    def test_reissue_discards_previous_record(self, store: TokenStore):
        """Given a second create_token, the first request token stops validating."""
        # Arrange
        store.create_token("siteA", "tok1")

        # Act
        store.create_token("siteA", "tok2")

        # Assert
        assert store.validate_request("siteA", "tok1") is False
        assert store.validate_request("siteA", "tok2") is True

    def test_reissue_resets_completed_handshake(self, store: TokenStore):
        """Given a completed handshake, a new token clears the old auth token."""
        # Arrange
        store.create_token("siteA", "tok1")
        store.set_auth("siteA", "auth1")

        # Act
        store.create_token("siteA", "tok2")

        # Assert
        assert store.check_session("siteA", "auth1") is False
        assert store.validate_request("siteA", "tok2") is True

    def test_sites_are_independent(self, store: TokenStore):
        """Given two sites, tokens do not cross over."""
        # Arrange
        store.create_token("siteA", "tokA")
        store.create_token("siteB", "tokB")

        # Assert
        assert store.validate_request("siteA", "tokB") is False
        assert store.validate_request("siteB", "tokB") is True
        assert len(store) == 2


class TestValidateRequest:
    """Tests for TokenStore.validate_request."""

    def test_unknown_site_returns_false(self, store: TokenStore):
        assert store.validate_request("nowhere", "tok") is False

    def test_wrong_token_returns_false(self, store: TokenStore):
        # Arrange
        store.create_token("siteA", "tok1")

        # Assert
        assert store.validate_request("siteA", "tok2") is False

    def test_false_after_set_auth(self, store: TokenStore):
        """Given a completed handshake, the request token can no longer validate."""
        # Arrange
        store.create_token("siteA", "tok1")

        # Act
        store.set_auth("siteA", "auth1")

        # Assert
        assert store.validate_request("siteA", "tok1") is False
        assert store.validate_request("siteA", "auth1") is False

    def test_repeated_validation_without_promotion_stays_true(self, store: TokenStore):
        """validate_request alone does not consume the request token."""
        # Arrange
        store.create_token("siteA", "tok1")

        # Assert
        assert store.validate_request("siteA", "tok1") is True
        assert store.validate_request("siteA", "tok1") is True


class TestNonAsciiTokens:
    """Tokens decoded from JSON may hold any str, lone surrogates included."""

    def test_lone_surrogate_is_rejected_not_raised(self, store: TokenStore):
        # Arrange
        store.create_token("siteA", "tok1")

        # Act
        validated = store.validate_request("siteA", "\ud800")
        promoted = store.promote("siteA", "\ud800", "auth1")

        # Assert
        assert validated is False
        assert promoted is False
        assert store.validate_request("siteA", "tok1") is True

    def test_lone_surrogate_session_check_is_false(self, store: TokenStore):
        # Arrange
        store.create_token("siteA", "tok1")
        store.set_auth("siteA", "auth1")

        # Act
        session = store.check_session("siteA", "\udfff")

        # Assert
        assert session is False
        assert store.check_session("siteA", "auth1") is True


class TestSetAuth:
    """Tests for TokenStore.set_auth."""

    def test_sets_auth_token(self, store: TokenStore):
        # Arrange
        store.create_token("siteA", "tok1")

        # Act
        result = store.set_auth("siteA", "auth1")

        # Assert
        assert result == "auth1"
        record = store.get("siteA")
        assert record is not None
        assert record.request_token == "tok1"
        assert record.auth_token == "auth1"

    def test_unknown_site_raises_key_error(self, store: TokenStore):
        with pytest.raises(KeyError):
            store.set_auth("nowhere", "auth1")


class TestCheckSession:
    """Tests for TokenStore.check_session."""

    def test_matches_current_auth_token(self, store: TokenStore):
        # Arrange
        store.create_token("siteA", "tok1")
        store.set_auth("siteA", "auth1")

        # Assert
        assert store.check_session("siteA", "auth1") is True

    def test_rejects_wrong_token(self, store: TokenStore):
        # Arrange
        store.create_token("siteA", "tok1")
        store.set_auth("siteA", "auth1")

        # Assert
        assert store.check_session("siteA", "wrong") is False

    def test_rejects_stale_token(self, store: TokenStore):
        """Given an auth token replaced by a later one, the old token fails."""
        # Arrange
        store.create_token("siteA", "tok1")
        store.set_auth("siteA", "auth1")
        store.create_token("siteA", "tok2")
        store.set_auth("siteA", "auth2")

        # Assert
        assert store.check_session("siteA", "auth1") is False
        assert store.check_session("siteA", "auth2") is True

    def test_pending_handshake_has_no_session(self, store: TokenStore):
        """Given a pending record, neither token passes a session check."""
        # Arrange
        store.create_token("siteA", "tok1")

        # Assert
        assert store.check_session("siteA", "tok1") is False

    def test_unknown_site_returns_false(self, store: TokenStore):
        assert store.check_session("nowhere", "auth1") is False

    def test_is_repeatable(self, store: TokenStore):
        """Session checks do not consume the auth token."""
        # Arrange
        store.create_token("siteA", "tok1")
        store.set_auth("siteA", "auth1")

        # Act
        results = [store.check_session("siteA", "auth1") for _ in range(5)]

        # Assert
        assert results == [True] * 5


class TestPromote:
    """Tests for TokenStore.promote (atomic validate + set_auth)."""

    def test_promotes_pending_handshake(self, store: TokenStore):
        # Arrange
        store.create_token("siteA", "tok1")

        # Act
        result = store.promote("siteA", "tok1", "auth1")

        # Assert
        assert result is True
        assert store.check_session("siteA", "auth1") is True

    def test_second_promotion_fails(self, store: TokenStore):
        """Given an already promoted token, replay is rejected and the auth token kept."""
        # Arrange
        store.create_token("siteA", "tok1")
        store.promote("siteA", "tok1", "auth1")

        # Act
        result = store.promote("siteA", "tok1", "auth2")

        # Assert
        assert result is False
        assert store.check_session("siteA", "auth1") is True
        assert store.check_session("siteA", "auth2") is False

    def test_wrong_token_leaves_record_pending(self, store: TokenStore):
        # Arrange
        store.create_token("siteA", "tok1")

        # Act
        result = store.promote("siteA", "bad", "auth1")

        # Assert
        assert result is False
        assert store.validate_request("siteA", "tok1") is True

    def test_unknown_site_returns_false(self, store: TokenStore):
        assert store.promote("nowhere", "tok1", "auth1") is False
        assert len(store) == 0

    def test_concurrent_promotions_have_single_winner(self, store: TokenStore):
        """Given many threads racing on one request token, exactly one wins."""
        # Arrange
        store.create_token("siteA", "tok1")
        workers = 16
        barrier = threading.Barrier(workers)
        results: list[bool] = []
        results_lock = threading.Lock()

        def race(index: int) -> None:
            barrier.wait()
            outcome = store.promote("siteA", "tok1", f"auth{index}")
            with results_lock:
                results.append(outcome)

        threads = [threading.Thread(target=race, args=(i,)) for i in range(workers)]

        # Act
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        # Assert
        assert results.count(True) == 1
        record = store.get("siteA")
        assert record is not None
        assert record.auth_token is not None
        assert store.check_session("siteA", record.auth_token) is True


class TestExpiry:
    """Tests for TTL eviction."""

    def test_records_never_expire_without_ttl(self):
        # Arrange
        store = TokenStore(ttl_seconds=None)
        store.create_token("siteA", "tok1")

        # Act
        with patch("keyauth_provider.storage.token_store.time.monotonic", return_value=10**9):
            valid = store.validate_request("siteA", "tok1")

        # Assert
        assert valid is True

    def test_expired_record_is_a_storage_miss(self):
        """Given a record older than the TTL, every operation treats it as missing."""
        # Arrange
        store = TokenStore(ttl_seconds=60)
        with patch("keyauth_provider.storage.token_store.time.monotonic", return_value=1000.0):
            store.create_token("siteA", "tok1")
            store.set_auth("siteA", "auth1")

        # Act
        with patch("keyauth_provider.storage.token_store.time.monotonic", return_value=1061.0):
            session = store.check_session("siteA", "auth1")
            record = store.get("siteA")

        # Assert
        assert session is False
        assert record is None
        assert len(store) == 0

    def test_record_within_ttl_is_live(self):
        # Arrange
        store = TokenStore(ttl_seconds=60)
        with patch("keyauth_provider.storage.token_store.time.monotonic", return_value=1000.0):
            store.create_token("siteA", "tok1")

        # Act
        with patch("keyauth_provider.storage.token_store.time.monotonic", return_value=1059.0):
            promoted = store.promote("siteA", "tok1", "auth1")

        # Assert
        assert promoted is True

    def test_purge_expired_removes_only_old_records(self):
        # Arrange
        store = TokenStore(ttl_seconds=60)
        with patch("keyauth_provider.storage.token_store.time.monotonic", return_value=1000.0):
            store.create_token("old", "tok1")
        with patch("keyauth_provider.storage.token_store.time.monotonic", return_value=1050.0):
            store.create_token("new", "tok2")

        # Act
        with patch("keyauth_provider.storage.token_store.time.monotonic", return_value=1070.0):
            removed = store.purge_expired()

        # Assert
        assert removed == 1
        assert len(store) == 1


class TestSiteRecord:
    """Tests for the SiteRecord value type."""

    def test_created_at_is_timezone_aware(self):
        record = SiteRecord(request_token="tok1")

        assert record.created_at.tzinfo is not None

    def test_is_frozen(self):
        record = SiteRecord(request_token="tok1")

        with pytest.raises(AttributeError):
            record.auth_token = "auth1"  # type: ignore[misc]
