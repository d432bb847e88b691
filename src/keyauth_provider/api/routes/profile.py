"""Public provider profile endpoints.

- GET /about  - provider name and description
- GET /avatar - avatar image bytes
- GET /key    - public key bytes

Consumers read these to show who they are delegating login to.
"""

from __future__ import annotations

__all__ = ["router"]

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from keyauth_provider.api.deps import AssetsDep, ConfigDep
from keyauth_provider.api.schemas import AboutResponse
from keyauth_provider.constants import PUBLIC_KEY_MEDIA_TYPE

router = APIRouter()


@router.get("/about")
async def get_about(config: ConfigDep) -> AboutResponse:
    """Provider name and description."""
    return AboutResponse(name=config.provider.name, about=config.provider.about)


@router.get("/avatar")
async def get_avatar(assets: AssetsDep) -> Response:
    """Raw avatar bytes. 404 when no avatar is configured."""
    if assets.avatar is None:
        raise HTTPException(status_code=404, detail="No avatar configured")
    return Response(content=assets.avatar, media_type=assets.avatar_media_type)


@router.get("/key")
async def get_public_key(assets: AssetsDep) -> Response:
    """Raw public key bytes. 404 when no public key is configured."""
    if assets.public_key is None:
        raise HTTPException(status_code=404, detail="No public key configured")
    return Response(content=assets.public_key, media_type=PUBLIC_KEY_MEDIA_TYPE)
