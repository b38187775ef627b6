"""Tests for session bootstrap, login and logout."""

import pytest

from api_client import ApiClient, ApiError, AuthExpired
from auth import AuthService, create_auth_service
from schemas.v1.models import AuthResponse, LoginRequest, RegisterRequest, Session
from session_store import MemorySessionStore


class TestBootstrap:
    def test_no_stored_session(self, auth_service, remote):
        assert auth_service.bootstrap() is None
        remote.get_profile.assert_not_called()

    def test_valid_session_refreshes_user(self, auth_service, remote, signed_in, user):
        refreshed = user.model_copy(update={"first_name": "Annie"})
        remote.get_profile.return_value = refreshed

        assert auth_service.bootstrap() == refreshed
        stored = auth_service.store.load()
        assert stored.access_token == "token-123"
        assert stored.user.first_name == "Annie"

    def test_rejected_session_is_cleared(self, auth_service, remote, signed_in):
        remote.get_profile.side_effect = AuthExpired()

        assert auth_service.bootstrap() is None
        assert auth_service.store.load() is None
        assert not auth_service.is_authenticated

    def test_unreachable_api_clears_session(self, auth_service, remote, signed_in):
        remote.get_profile.side_effect = ApiError("Could not reach the API")

        assert auth_service.bootstrap() is None
        assert auth_service.store.load() is None


class TestLogin:
    def test_login_saves_session(self, auth_service, remote, user):
        remote.login.return_value = AuthResponse(access_token="fresh", user=user)

        assert auth_service.login(LoginRequest(email=user.email, password="pw")) == user
        assert auth_service.access_token() == "fresh"
        assert auth_service.current_user() == user

    def test_bad_credentials(self, auth_service, remote):
        remote.login.side_effect = AuthExpired("Invalid credentials")

        with pytest.raises(ApiError) as exc_info:
            auth_service.login(LoginRequest(email="a@x.io", password="wrong"))

        assert exc_info.value.message == "Invalid credentials"
        assert not isinstance(exc_info.value, AuthExpired)
        assert auth_service.store.load() is None

    def test_login_fallback_message(self, auth_service, remote):
        remote.login.side_effect = ApiError("", status_code=500)

        with pytest.raises(ApiError, match="Failed to login. Please try again."):
            auth_service.login(LoginRequest(email="a@x.io", password="pw"))

    def test_register_saves_session(self, auth_service, remote, user):
        remote.register.return_value = AuthResponse(access_token="new", user=user)

        auth_service.register(
            RegisterRequest(
                email=user.email, password="pw", first_name="Ann", last_name="Lee"
            )
        )

        assert auth_service.access_token() == "new"

    def test_register_conflict(self, auth_service, remote):
        remote.register.side_effect = ApiError("Email already exists", status_code=409)

        with pytest.raises(ApiError) as exc_info:
            auth_service.register(
                RegisterRequest(
                    email="a@x.io", password="pw", first_name="A", last_name="B"
                )
            )

        assert exc_info.value.status_code == 409
        assert exc_info.value.message == "Email already exists"


class TestLogout:
    def test_logout_clears_store(self, auth_service, signed_in):
        auth_service.logout()
        assert auth_service.current_user() is None
        assert auth_service.access_token() is None

    def test_expire_clears_store(self, auth_service, signed_in):
        auth_service.expire()
        assert not auth_service.is_authenticated


def test_create_auth_service_wires_token_provider(user):
    store = MemorySessionStore(Session(access_token="abc", user=user))
    client = ApiClient(base_url="http://api.test", timeout=1)

    service = create_auth_service(store=store, client=client)

    assert isinstance(service, AuthService)
    assert client.token_provider() == "abc"
    assert client._get_headers()["Authorization"] == "Bearer abc"
