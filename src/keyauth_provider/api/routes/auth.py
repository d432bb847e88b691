"""Handshake endpoints.

- GET  /auth          - login page for client_id
- POST /auth          - passphrase submission; redirects to the consumer on success
- POST /auth/validate - consumer trades a request token for an auth token
- POST /auth/session  - consumer confirms an auth token

Routes mounted at: /auth

Failures never surface as errors to consumers: /auth/validate answers
{"valid": false, "token": null} and /auth/session answers {} for unknown,
expired or consumed tokens alike.
"""

from __future__ import annotations

__all__ = ["router"]

from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from keyauth_provider.api.deps import ConfigDep, CoordinatorDep, TemplatesDep
from keyauth_provider.api.params import read_params
from keyauth_provider.api.schemas import SessionResponse, ValidateResponse
from keyauth_provider.config import AppConfig
from keyauth_provider.handshake.coordinator import CallbackRedirect, LoginPrompt

router = APIRouter()


# =============================================================================
# Helpers
# =============================================================================


def _login_status(prompt: LoginPrompt) -> int:
    if prompt.consumer_unavailable:
        return 502
    if prompt.failed:
        return 401
    return 200


def _render_login(
    request: Request,
    templates: Jinja2Templates,
    config: AppConfig,
    prompt: LoginPrompt,
    client_id: str,
) -> Response:
    """Render the login template for a LoginPrompt."""
    context: dict[str, Any] = {
        "client": prompt.profile.model_dump() if prompt.profile else None,
        "client_id": client_id,
        "keyauth": {
            "failed": prompt.failed,
            "valid": not prompt.failed and not prompt.consumer_unavailable,
            "consumer_unavailable": prompt.consumer_unavailable,
        },
        "provider": {"name": config.provider.name, "about": config.provider.about},
    }
    return templates.TemplateResponse(
        request=request,
        name=config.provider.template,
        context=context,
        status_code=_login_status(prompt),
    )


# =============================================================================
# Endpoints
# =============================================================================


@router.get("", response_class=HTMLResponse)
async def show_login(
    request: Request,
    config: ConfigDep,
    coordinator: CoordinatorDep,
    templates: TemplatesDep,
) -> Response:
    """Render the login page for the consumer named by client_id."""
    client_id = request.query_params.get("client_id", "")
    prompt = await coordinator.start_handshake(client_id)
    return _render_login(request, templates, config, prompt, client_id)


@router.post("", response_class=HTMLResponse)
async def process_login(
    request: Request,
    config: ConfigDep,
    coordinator: CoordinatorDep,
    templates: TemplatesDep,
) -> Response:
    """Check the submitted passphrase.

    Success redirects the browser to the consumer callback with a fresh
    request token; failure re-renders the login page with keyauth.failed set.
    """
    params = await read_params(request)
    client_id = params.get("client_id", "")
    result = await coordinator.submit_credential(client_id, params.get("password", ""))

    if isinstance(result, CallbackRedirect):
        return RedirectResponse(url=result.url, status_code=303)
    return _render_login(request, templates, config, result, client_id)


@router.post("/validate")
async def validate_request_token(request: Request, coordinator: CoordinatorDep) -> ValidateResponse:
    """Trade a request token for an auth token (one use per request token)."""
    params = await read_params(request)
    auth_token = coordinator.validate_and_authorize(params.get("client_id"), params.get("token"))
    return ValidateResponse(valid=auth_token is not None, token=auth_token)


@router.post("/session", response_model=SessionResponse, response_model_exclude_none=True)
async def check_session(request: Request, coordinator: CoordinatorDep) -> SessionResponse:
    """Confirm an auth token; returns the provider name or {}."""
    params = await read_params(request)
    name = coordinator.check_session(params.get("client_id"), params.get("token"))
    return SessionResponse(name=name)
