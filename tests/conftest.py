"""Shared fixtures for dashboard tests."""

import json
from unittest.mock import MagicMock

import pytest
import requests
from fastapi.testclient import TestClient

from api_client import ApiClient
from auth import AuthService
from schemas.v1.models import Session, User
from session_store import MemorySessionStore

USER_PAYLOAD = {
    "id": "u-1",
    "email": "ann@example.com",
    "firstName": "Ann",
    "lastName": "Lee",
    "isActive": True,
    "createdAt": "2024-05-01T10:00:00Z",
    "updatedAt": "2024-05-01T10:00:00Z",
}

TEMPLATE_PAYLOAD = {
    "id": "tpl-1",
    "name": "Welcome Email",
    "subject": "Welcome, {{firstName}}",
    "htmlContent": "<h1>Hello, {{firstName}}!</h1>",
    "textContent": "Hello, {{firstName}}!",
    "createdAt": "2024-05-01T10:00:00Z",
    "updatedAt": "2024-05-01T10:00:00Z",
}


def make_response(status_code: int = 200, body=None) -> requests.Response:
    """Build a real requests.Response carrying a JSON body."""
    response = requests.Response()
    response.status_code = status_code
    response._content = b"" if body is None else json.dumps(body).encode()
    response.url = "http://api.test"
    return response


@pytest.fixture
def user() -> User:
    return User.model_validate(USER_PAYLOAD)


@pytest.fixture
def http_session() -> MagicMock:
    return MagicMock(spec=requests.Session)


@pytest.fixture
def api(http_session) -> ApiClient:
    return ApiClient(
        base_url="http://api.test/",
        timeout=5,
        token_provider=lambda: "token-123",
        session=http_session,
    )


@pytest.fixture
def remote() -> MagicMock:
    """Stand-in for the campaign API client."""
    return MagicMock(spec=ApiClient)


@pytest.fixture
def auth_service(remote) -> AuthService:
    return AuthService(remote, MemorySessionStore())


@pytest.fixture
def signed_in(auth_service, user) -> Session:
    session = Session(access_token="token-123", user=user)
    auth_service.store.save(session)
    return session


@pytest.fixture
def client(auth_service):
    from app import app

    original = app.state.auth_service
    app.state.auth_service = auth_service
    app.state.last_batch_id = None
    yield TestClient(app)
    app.state.auth_service = original
