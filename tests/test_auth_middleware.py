"""Tests for HTTP Basic Auth middleware."""

import base64
from unittest.mock import patch

from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.app import BasicAuthMiddleware, create_app

_TEST_USER = "testuser"
_TEST_PASS = "testpass123"


def _build_app() -> FastAPI:
    """Build a minimal app with BasicAuthMiddleware for testing."""
    app = FastAPI()
    app.add_middleware(BasicAuthMiddleware, username=_TEST_USER, password=_TEST_PASS)

    @app.get("/test")
    async def test_route() -> dict[str, str]:
        return {"status": "ok"}

    return app


def _auth_header(username: str, password: str) -> dict[str, str]:
    """Build a Basic Auth header."""
    creds = base64.b64encode(f"{username}:{password}".encode()).decode()
    return {"Authorization": f"Basic {creds}"}


def test_valid_credentials_pass() -> None:
    """Correct credentials return 200."""
    client = TestClient(_build_app())
    response = client.get("/test", headers=_auth_header("testuser", "testpass123"))
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_missing_auth_header_returns_401() -> None:
    """No Authorization header returns 401 with WWW-Authenticate."""
    client = TestClient(_build_app())
    response = client.get("/test")
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Basic"


def test_invalid_credentials_returns_401() -> None:
    """Wrong password returns 401."""
    client = TestClient(_build_app())
    response = client.get("/test", headers=_auth_header("testuser", "wrongpassword"))
    assert response.status_code == 401


def test_malformed_base64_returns_401() -> None:
    """Garbage in Authorization header returns 401."""
    client = TestClient(_build_app())
    response = client.get("/test", headers={"Authorization": "Basic !!!not-base64!!!"})
    assert response.status_code == 401


def test_create_app_without_credentials_is_open() -> None:
    """No configured credentials means no auth middleware."""
    with patch("src.api.app.settings") as mock_settings:
        mock_settings.auth_enabled = False
        app = create_app()
    app.state.pool = None
    response = TestClient(app).get("/health")
    assert response.status_code == 200


def test_create_app_with_credentials_requires_auth() -> None:
    with patch("src.api.app.settings") as mock_settings:
        mock_settings.auth_enabled = True
        mock_settings.auth_username = _TEST_USER
        mock_settings.auth_password = _TEST_PASS
        app = create_app()
    app.state.pool = None
    client = TestClient(app)
    assert client.get("/health").status_code == 401
    assert client.get("/health", headers=_auth_header(_TEST_USER, _TEST_PASS)).status_code == 200
