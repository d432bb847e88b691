"""Unit tests for the public profile routes (/about, /avatar, /key).

Uses AAA pattern (Arrange-Act-Assert) for clarity.
"""

from dataclasses import replace

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from keyauth_provider.api.routes.profile import router


# =============================================================================
# Fixtures
# =============================================================================


def _app(config, assets) -> FastAPI:
    app = FastAPI()
    app.state.config = config
    app.state.assets = assets
    app.include_router(router)
    return app


@pytest.fixture
def client(app_config, assets) -> TestClient:
    return TestClient(_app(app_config, assets))


# =============================================================================
# Tests
# =============================================================================


class TestAbout:
    """Tests for GET /about."""

    def test_returns_name_and_about(self, client):
        response = client.get("/about")

        assert response.status_code == 200
        assert response.json() == {"name": "keys.example", "about": "Key-based login"}


class TestAvatar:
    """Tests for GET /avatar."""

    def test_returns_avatar_bytes(self, client, assets):
        # Act
        response = client.get("/avatar")

        # Assert
        assert response.status_code == 200
        assert response.content == assets.avatar
        assert response.headers["content-type"] == "image/png"

    def test_missing_avatar_is_404(self, app_config, assets):
        # Arrange
        client = TestClient(_app(app_config, replace(assets, avatar=None)))

        # Act
        response = client.get("/avatar")

        # Assert
        assert response.status_code == 404
        assert response.json()["detail"] == "No avatar configured"


class TestPublicKey:
    """Tests for GET /key."""

    def test_returns_public_key_pem(self, client, public_key_pem):
        # Act
        response = client.get("/key")

        # Assert
        assert response.status_code == 200
        assert response.content == public_key_pem
        assert response.headers["content-type"].startswith("application/x-pem-file")

    def test_missing_public_key_is_404(self, app_config, assets):
        client = TestClient(_app(app_config, replace(assets, public_key=None)))

        response = client.get("/key")

        assert response.status_code == 404

    def test_private_key_is_never_served(self, client, encrypted_key_pem):
        response = client.get("/key")

        assert encrypted_key_pem not in response.content


class TestMissingState:
    """Dependencies report 503 before the app is wired."""

    def test_about_without_config_is_503(self):
        # Arrange
        app = FastAPI()
        app.include_router(router)
        client = TestClient(app)

        # Act
        response = client.get("/about")

        # Assert
        assert response.status_code == 503
