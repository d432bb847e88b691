"""Security middleware for the provider's HTTP surface.

Applies to every request:
- Request size limit (the largest legitimate body is a passphrase form)
- Security response headers
- Content-Security-Policy on HTML (login page) responses

The provider is public by nature (browsers from any origin are redirected
to /auth, consumers call /auth/validate server-to-server), so there is no
host/origin allow-list here.
"""

from __future__ import annotations

__all__ = [
    "LOGIN_PAGE_CSP",
    "SecurityMiddleware",
]

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from keyauth_provider.constants import MAX_REQUEST_SIZE
from keyauth_provider.telemetry.system.system_logger import get_system_logger

logger = get_system_logger()

# Consumer avatars are remote images, so img-src allows http(s)
LOGIN_PAGE_CSP = (
    "default-src 'self'; "
    "style-src 'self' 'unsafe-inline'; "
    "img-src 'self' http: https: data:; "
    "script-src 'none'; "
    "frame-ancestors 'none'"
)


class SecurityMiddleware(BaseHTTPMiddleware):
    """Size limit and response hardening."""

    def __init__(self, app: ASGIApp, max_request_size: int = MAX_REQUEST_SIZE) -> None:
        super().__init__(app)
        self.max_request_size = max_request_size

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Reject oversized requests, then add headers to the handler's response."""
        content_length = request.headers.get("content-length")
        if content_length:
            try:
                size = int(content_length)
            except ValueError:
                return JSONResponse(
                    status_code=400,
                    content={"error": "Invalid content-length header"},
                )
            if size > self.max_request_size:
                logger.warning(
                    {
                        "event": "oversized_request_rejected",
                        "message": f"Rejected {size}-byte request to {request.url.path}",
                        "component": "api_security",
                        "details": {"path": str(request.url.path), "size": size},
                    }
                )
                return JSONResponse(
                    status_code=413,
                    content={"error": "Request too large"},
                )

        response = await call_next(request)
        self._add_security_headers(response)
        return response

    def _add_security_headers(self, response: Response) -> None:
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Cache-Control"] = "no-store"
        response.headers["Referrer-Policy"] = "no-referrer"
        if response.headers.get("content-type", "").startswith("text/html"):
            response.headers["Content-Security-Policy"] = LOGIN_PAGE_CSP
