"""Request parameter reading for the handshake endpoints.

Browsers post urlencoded forms while consumers may send forms, JSON or
query strings. read_params() merges all three, body values taking
precedence over query values.
"""

from __future__ import annotations

__all__ = ["read_params"]

import json

from fastapi import Request

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def read_params(request: Request) -> dict[str, str]:
    """Collect string parameters from the query string and request body.

    Non-string values (uploads, nested JSON) are ignored. A malformed or
    too deeply nested body is treated as empty.

    Args:
        request: Incoming request.

    Returns:
        Mapping of parameter name to value.
    """
    params: dict[str, str] = dict(request.query_params)
    if request.method not in ("POST", "PUT"):
        return params

    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith(_FORM_TYPES):
        form = await request.form()
        params.update({key: value for key, value in form.items() if isinstance(value, str)})
    elif content_type.startswith("application/json"):
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
            body = None
        if isinstance(body, dict):
            params.update({key: value for key, value in body.items() if isinstance(value, str)})

    return params
