"""Unit tests for the provider's security middleware.

Uses AAA pattern (Arrange-Act-Assert) for clarity.
"""

import pytest
from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from fastapi.testclient import TestClient

from keyauth_provider.api.security import LOGIN_PAGE_CSP, SecurityMiddleware
from keyauth_provider.constants import MAX_REQUEST_SIZE


class TestSecurityMiddleware:
    """Tests for SecurityMiddleware."""

    @pytest.fixture
    def client(self):
        """Create test client around a minimal app."""
        app = FastAPI()

        @app.get("/json")
        async def json_endpoint():
            return {"status": "ok"}

        @app.get("/page", response_class=HTMLResponse)
        async def html_endpoint():
            return "<p>hello</p>"

        @app.post("/submit")
        async def submit_endpoint():
            return {"status": "submitted"}

        app.add_middleware(SecurityMiddleware)
        return TestClient(app, raise_server_exceptions=False)

    def test_rejects_oversized_request(self, client):
        """Given request exceeding size limit, returns 413."""
        response = client.post(
            "/submit",
            headers={"content-length": str(MAX_REQUEST_SIZE + 1)},
            content=b"x",
        )

        assert response.status_code == 413
        assert response.json() == {"error": "Request too large"}

    def test_rejects_malformed_content_length(self, client):
        """Given a non-numeric content-length, returns 400."""
        response = client.post(
            "/submit",
            headers={"content-length": "lots"},
            content=b"x",
        )

        assert response.status_code == 400

    def test_accepts_small_request(self, client):
        response = client.post("/submit", data={"password": "secret"})

        assert response.status_code == 200

    def test_adds_security_headers(self, client):
        """Response includes security headers."""
        response = client.get("/json")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Cache-Control"] == "no-store"
        assert response.headers["Referrer-Policy"] == "no-referrer"

    def test_csp_only_on_html(self, client):
        """Given an HTML response, the login page CSP is attached; JSON gets none."""
        # Act
        page = client.get("/page")
        data = client.get("/json")

        # Assert
        assert page.headers["Content-Security-Policy"] == LOGIN_PAGE_CSP
        assert "Content-Security-Policy" not in data.headers

    def test_headers_on_error_responses(self, client):
        response = client.get("/missing")

        assert response.status_code == 404
        assert response.headers["X-Frame-Options"] == "DENY"
