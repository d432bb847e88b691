"""FastAPI application for the provider.

Mounts:
- Profile routes (/about, /avatar, /key)
- Handshake routes (/auth, /auth/validate, /auth/session)

Collaborators are built from AppConfig and stored on app.state; see deps.py.
"""

from __future__ import annotations

__all__ = [
    "PACKAGED_TEMPLATE_DIR",
    "build_coordinator",
    "create_app",
]

import asyncio
import contextlib
from collections.abc import AsyncIterator
from pathlib import Path

import httpx
from fastapi import FastAPI
from fastapi.templating import Jinja2Templates

from keyauth_provider import __version__
from keyauth_provider.assets import ProviderAssets
from keyauth_provider.config import AppConfig
from keyauth_provider.consumers.fetcher import ConsumerInfoFetcher
from keyauth_provider.handshake.coordinator import HandshakeCoordinator
from keyauth_provider.security.credentials import CredentialChecker
from keyauth_provider.storage.token_store import TokenStore
from keyauth_provider.telemetry.audit.handshake_logger import HandshakeLogger
from keyauth_provider.telemetry.system.system_logger import get_system_logger

from .routes import auth, profile
from .security import SecurityMiddleware

PACKAGED_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

logger = get_system_logger()


def build_coordinator(
    config: AppConfig,
    assets: ProviderAssets,
    *,
    audit_logger: HandshakeLogger | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> HandshakeCoordinator:
    """Wire a HandshakeCoordinator from configuration.

    Args:
        config: Application configuration.
        assets: Loaded provider files (private key for the credential check).
        audit_logger: Handshake audit logger.
        transport: Optional httpx transport for consumer lookups.
    """
    return HandshakeCoordinator(
        provider_name=config.provider.name,
        store=TokenStore(ttl_seconds=config.tokens.ttl_seconds),
        checker=CredentialChecker(assets.private_key),
        fetcher=ConsumerInfoFetcher(
            timeout_seconds=config.consumers.timeout_seconds,
            transport=transport,
        ),
        callback_path=config.provider.callback_path,
        audit_logger=audit_logger,
    )


async def _purge_expired_loop(store: TokenStore, interval: float) -> None:
    """Evict expired site records every interval seconds."""
    while True:
        await asyncio.sleep(interval)
        removed = store.purge_expired()
        if removed:
            logger.debug(
                {
                    "event": "expired_records_purged",
                    "component": "token_store",
                    "details": {"removed": removed},
                }
            )


def create_app(
    config: AppConfig,
    assets: ProviderAssets,
    *,
    coordinator: HandshakeCoordinator | None = None,
) -> FastAPI:
    """Create the FastAPI application with all routes.

    Args:
        config: Application configuration.
        assets: Loaded provider files.
        coordinator: Pre-built coordinator (default: build_coordinator()).

    Returns:
        Configured FastAPI app.
    """
    coordinator = coordinator or build_coordinator(config, assets)
    ttl = config.tokens.ttl_seconds

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        purger = None
        if ttl is not None:
            purger = asyncio.create_task(_purge_expired_loop(coordinator.store, float(ttl)))
        try:
            yield
        finally:
            if purger is not None:
                purger.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await purger

    app = FastAPI(
        title="keyauth-provider",
        description="Delegated login against an RSA key passphrase",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(SecurityMiddleware)

    template_dir = config.provider.template_dir or str(PACKAGED_TEMPLATE_DIR)
    app.state.config = config
    app.state.assets = assets
    app.state.coordinator = coordinator
    app.state.templates = Jinja2Templates(directory=template_dir)

    app.include_router(profile.router, tags=["profile"])
    app.include_router(auth.router, prefix="/auth", tags=["auth"])

    return app
