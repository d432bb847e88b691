"""Shared dependencies for API routes.

Collaborators live on app.state (set by create_app) and are read here.
Route files import dependencies from this module rather than reaching into
app.state themselves.

Usage with Annotated:
    from keyauth_provider.api.deps import CoordinatorDep

    @router.post("/validate")
    async def validate(coordinator: CoordinatorDep) -> ValidateResponse:
        ...
"""

from __future__ import annotations

__all__ = [
    # Dependency functions
    "get_assets",
    "get_config",
    "get_coordinator",
    "get_templates",
    # Type aliases for Annotated pattern
    "AssetsDep",
    "ConfigDep",
    "CoordinatorDep",
    "TemplatesDep",
]

from typing import Annotated, Any, cast

from fastapi import Depends, HTTPException, Request
from fastapi.templating import Jinja2Templates

from keyauth_provider.assets import ProviderAssets
from keyauth_provider.config import AppConfig
from keyauth_provider.handshake.coordinator import HandshakeCoordinator


def _require_state(request: Request, attribute: str, label: str) -> Any:
    value = getattr(request.app.state, attribute, None)
    if value is None:
        raise HTTPException(
            status_code=503,
            detail=f"{label} not available. Provider may still be starting.",
        )
    return value


def get_config(request: Request) -> AppConfig:
    """Get AppConfig from app.state.

    Raises:
        HTTPException: 503 if config not available.
    """
    return cast(AppConfig, _require_state(request, "config", "Config"))


def get_coordinator(request: Request) -> HandshakeCoordinator:
    """Get HandshakeCoordinator from app.state.

    Raises:
        HTTPException: 503 if coordinator not available.
    """
    return cast(HandshakeCoordinator, _require_state(request, "coordinator", "Handshake coordinator"))


def get_assets(request: Request) -> ProviderAssets:
    """Get ProviderAssets from app.state.

    Raises:
        HTTPException: 503 if assets not loaded.
    """
    return cast(ProviderAssets, _require_state(request, "assets", "Provider assets"))


def get_templates(request: Request) -> Jinja2Templates:
    """Get the Jinja2 template renderer from app.state.

    Raises:
        HTTPException: 503 if templates not configured.
    """
    return cast(Jinja2Templates, _require_state(request, "templates", "Templates"))


# =============================================================================
# Type Aliases for Annotated Pattern
# =============================================================================


ConfigDep = Annotated[AppConfig, Depends(get_config)]
CoordinatorDep = Annotated[HandshakeCoordinator, Depends(get_coordinator)]
AssetsDep = Annotated[ProviderAssets, Depends(get_assets)]
TemplatesDep = Annotated[Jinja2Templates, Depends(get_templates)]
