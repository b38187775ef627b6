# SPDX-License-Identifier: GPL-3.0-only

from typing import Optional

from api_client import ApiClient, ApiError, AuthExpired
from logutils import get_logger
from schemas.v1.models import LoginRequest, RegisterRequest, Session, User
from session_store import FileSessionStore, SessionStore
from utils import obfuscate_email

logger = get_logger(__name__)


class AuthService:
    """Signs the dashboard user in and out against the campaign API."""

    def __init__(self, client: ApiClient, store: SessionStore):
        self.client = client
        self.store = store

    def access_token(self) -> Optional[str]:
        """Token provider for ApiClient."""
        session = self.store.load()
        return session.access_token if session else None

    def current_user(self) -> Optional[User]:
        session = self.store.load()
        return session.user if session else None

    @property
    def is_authenticated(self) -> bool:
        return self.store.load() is not None

    def bootstrap(self) -> Optional[User]:
        """
        Restore a stored session, confirming the token with the server.

        Return:
            Optional[User]: The refreshed user, or None when there is no
                session or the server rejected it (the store is then cleared).
        """
        session = self.store.load()
        if not session:
            return None

        try:
            user = self.client.get_profile()
        except ApiError as e:
            logger.warning(
                "Stored session for %s is no longer valid: %s",
                obfuscate_email(session.user.email),
                e.message,
            )
            self.store.clear()
            return None

        self.store.save(Session(access_token=session.access_token, user=user))
        return user

    def login(self, data: LoginRequest) -> User:
        try:
            response = self.client.login(data)
        except AuthExpired as e:
            raise ApiError(
                e.server_message or "Invalid email or password", status_code=401
            ) from e
        except ApiError as e:
            raise ApiError(
                e.message or "Failed to login. Please try again.", e.status_code
            ) from e

        self.store.save(Session(access_token=response.access_token, user=response.user))
        return response.user

    def register(self, data: RegisterRequest) -> User:
        try:
            response = self.client.register(data)
        except AuthExpired as e:
            raise ApiError(
                e.server_message or "Failed to register. Please try again.", 401
            ) from e
        except ApiError as e:
            raise ApiError(
                e.message or "Failed to register. Please try again.", e.status_code
            ) from e

        self.store.save(Session(access_token=response.access_token, user=response.user))
        return response.user

    def logout(self) -> None:
        user = self.current_user()
        self.store.clear()
        if user:
            logger.info("Logged out %s", obfuscate_email(user.email))

    def expire(self) -> None:
        """Drop the session after the API rejected its token."""
        if self.store.load() is not None:
            logger.warning("Access token expired, clearing session")
        self.store.clear()


def create_auth_service(
    store: Optional[SessionStore] = None, client: Optional[ApiClient] = None
) -> AuthService:
    """Wire an AuthService whose client reads its token from the session store."""
    store = store or FileSessionStore()
    client = client or ApiClient()
    service = AuthService(client, store)
    if client.token_provider is None:
        client.token_provider = service.access_token
    return service
