"""Shared fixtures: provider keys, consumer profile transports, app wiring."""

from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from keyauth_provider.assets import ProviderAssets
from keyauth_provider.config import AppConfig, ProviderConfig, TokenConfig

PASSPHRASE = "correct horse battery staple"

SHOP_ID = "shop.example:8000"

SHOP_PROFILE: dict[str, Any] = {
    "name": SHOP_ID,
    "about": "A shop that sells keys",
    "key": "/key",
    "avatar": "/avatar",
}


# ============================================================================
# Keys
# ============================================================================


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    """Provider RSA key (generated once per test session)."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def encrypted_key_pem(rsa_private_key: rsa.RSAPrivateKey) -> bytes:
    """Provider private key encrypted with PASSPHRASE."""
    return rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.BestAvailableEncryption(PASSPHRASE.encode()),
    )


@pytest.fixture(scope="session")
def plain_key_pem(rsa_private_key: rsa.RSAPrivateKey) -> bytes:
    """Provider private key without encryption."""
    return rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


@pytest.fixture(scope="session")
def public_key_pem(rsa_private_key: rsa.RSAPrivateKey) -> bytes:
    return rsa_private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


# ============================================================================
# Consumer /about transport
# ============================================================================


@pytest.fixture
def consumer_transport() -> Callable[..., httpx.MockTransport]:
    """Factory for MockTransports that play a consumer's /about endpoint.

    Usage:
        transport = consumer_transport()                     # SHOP_PROFILE as JSON
        transport = consumer_transport(body=b"not json")     # raw body
        transport = consumer_transport(exc=httpx.ConnectError("down"))
        transport = consumer_transport(requests=seen)        # records requests
    """

    def _make(
        body: Any = SHOP_PROFILE,
        *,
        status_code: int = 200,
        exc: Exception | None = None,
        requests: list[httpx.Request] | None = None,
    ) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            if requests is not None:
                requests.append(request)
            if exc is not None:
                raise exc
            if isinstance(body, (bytes, str)):
                return httpx.Response(status_code, content=body)
            return httpx.Response(status_code, json=body)

        return httpx.MockTransport(handler)

    return _make


# ============================================================================
# Config and assets
# ============================================================================


@pytest.fixture
def app_config() -> AppConfig:
    """Provider config. Asset paths are never read; tests pass assets directly."""
    return AppConfig(
        provider=ProviderConfig(
            name="keys.example",
            about="Key-based login",
            private_key_path="/nonexistent/provider.pem",
        ),
        tokens=TokenConfig(ttl_seconds=600),
    )


@pytest.fixture
def assets(encrypted_key_pem: bytes, public_key_pem: bytes) -> ProviderAssets:
    return ProviderAssets(
        private_key=encrypted_key_pem,
        public_key=public_key_pem,
        avatar=b"\x89PNG\r\n\x1a\nfake",
        avatar_media_type="image/png",
    )


@pytest.fixture
def passphrase() -> str:
    """Passphrase that decrypts encrypted_key_pem."""
    return PASSPHRASE


@pytest.fixture
def shop_profile() -> dict[str, Any]:
    """Body served by the consumer's /about endpoint."""
    return dict(SHOP_PROFILE)
