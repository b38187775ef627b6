# SPDX-License-Identifier: GPL-3.0-only
"""Client for the email-campaign REST API behind the dashboard.

Every dashboard screen is backed by one of the calls below. Failures are
raised, never retried: ``AuthExpired`` for a rejected token, ``ApiError`` for
everything else.
"""

import functools
from typing import Callable, Dict, List, Optional, Type, TypeVar

import requests
from pydantic import BaseModel, TypeAdapter, ValidationError

from logutils import get_logger
from schemas.v1.models import (
    AuthResponse,
    Contact,
    CreateContactRequest,
    CreateSmtpConfigRequest,
    CreateTemplateRequest,
    ImportContactsRequest,
    ImportContactsResponse,
    LoginRequest,
    MailLog,
    MailTemplate,
    RegisterRequest,
    SendMailResponse,
    SendRequest,
    SmtpConfig,
    User,
)
from utils import get_env_float, get_env_var, obfuscate_email, obfuscate_recipients

logger = get_logger(__name__)

T = TypeVar("T")


@functools.lru_cache(maxsize=None)
def _adapter(model) -> TypeAdapter:
    return TypeAdapter(model)


class ApiError(Exception):
    """A call to the campaign API did not succeed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthExpired(ApiError):
    """The API rejected the access token (HTTP 401)."""

    def __init__(self, server_message: Optional[str] = None):
        super().__init__("Session expired. Please log in again.", status_code=401)
        self.server_message = server_message


class ApiClient:
    """Client for the campaign API, authenticated with a bearer token."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client with API configuration.

        Args:
            base_url: API root, defaults to ``API_BASE_URL``.
            timeout: Seconds per request, defaults to ``API_TIMEOUT``.
            token_provider: Returns the current access token, or None when
                signed out.
            session: requests session to reuse connections through.
        """
        self.api_base_url = (
            base_url or get_env_var("API_BASE_URL", "http://localhost:5000")
        ).rstrip("/")
        self.timeout = timeout or get_env_float("API_TIMEOUT", 30.0)
        self.token_provider = token_provider
        self.http = session or requests.Session()

    def _get_headers(self) -> Dict[str, str]:
        """Generate request headers, with the bearer token when signed in."""
        headers = {"Content-Type": "application/json"}
        token = self.token_provider() if self.token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _make_request(self, method: str, path: str, **kwargs):
        """Make an HTTP request and return the decoded JSON body."""
        url = f"{self.api_base_url}{path}"
        try:
            response = self.http.request(
                method, url, headers=self._get_headers(), timeout=self.timeout, **kwargs
            )
        except requests.exceptions.RequestException as e:
            logger.error("%s %s failed: %s", method, path, e)
            raise ApiError(f"Could not reach the API: {e}") from e

        if not response.ok:
            server_message = self._error_message(response)

            if response.status_code == 401:
                logger.warning("%s %s rejected the access token", method, path)
                raise AuthExpired(server_message)

            error_msg = server_message or (
                f"{response.status_code} {response.reason or ''}".strip()
            )
            logger.error("%s %s failed: %s", method, path, error_msg)
            raise ApiError(error_msg, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error("%s %s returned a non-JSON body", method, path)
            raise ApiError("Unexpected response from the API") from e

    @staticmethod
    def _error_message(response: requests.Response) -> Optional[str]:
        """Pull the server's ``message`` (or ``error``) out of an error body."""
        try:
            error_data = response.json()
        except ValueError:
            return None
        if not isinstance(error_data, dict):
            return None
        message = error_data.get("message") or error_data.get("error")
        if isinstance(message, list):
            message = "; ".join(str(m) for m in message)
        return str(message) if message else None

    def _parse(self, model: Type[T], data) -> T:
        """Validate a response body against the expected model."""
        try:
            return _adapter(model).validate_python(data)
        except ValidationError as e:
            logger.error("Unexpected %s payload: %s", getattr(model, "__name__", model), e)
            raise ApiError("Unexpected response from the API") from e

    def _post(self, path: str, body: BaseModel):
        return self._make_request("POST", path, json=body.to_wire())

    # Authentication

    def login(self, data: LoginRequest) -> AuthResponse:
        response = self._post("/auth/login", data)
        logger.info("Logged in as %s", obfuscate_email(data.email))
        return self._parse(AuthResponse, response)

    def register(self, data: RegisterRequest) -> AuthResponse:
        response = self._post("/auth/register", data)
        logger.info("Registered %s", obfuscate_email(data.email))
        return self._parse(AuthResponse, response)

    def get_profile(self) -> User:
        return self._parse(User, self._make_request("GET", "/auth/profile"))

    # Mail templates

    def list_templates(self) -> List[MailTemplate]:
        return self._parse(List[MailTemplate], self._make_request("GET", "/mail/templates"))

    def get_template(self, template_id: str) -> MailTemplate:
        response = self._make_request("GET", f"/mail/templates/{template_id}")
        return self._parse(MailTemplate, response)

    def create_template(self, data: CreateTemplateRequest) -> MailTemplate:
        template = self._parse(MailTemplate, self._post("/mail/templates", data))
        logger.info("Template created: %s", template.id)
        return template

    # SMTP configurations

    def list_smtp_configs(self) -> List[SmtpConfig]:
        response = self._make_request("GET", "/mail/smtp-configs")
        return self._parse(List[SmtpConfig], response)

    def get_smtp_config(self, config_id: str) -> SmtpConfig:
        response = self._make_request("GET", f"/mail/smtp-configs/{config_id}")
        return self._parse(SmtpConfig, response)

    def create_smtp_config(self, data: CreateSmtpConfigRequest) -> SmtpConfig:
        config = self._parse(SmtpConfig, self._post("/mail/smtp-configs", data))
        logger.info(
            "SMTP config created: %s (%s)", config.id, obfuscate_email(config.from_email)
        )
        return config

    # Contacts

    def list_contacts(self) -> List[Contact]:
        return self._parse(List[Contact], self._make_request("GET", "/contacts"))

    def get_contact(self, contact_id: str) -> Contact:
        return self._parse(Contact, self._make_request("GET", f"/contacts/{contact_id}"))

    def create_contact(self, data: CreateContactRequest) -> Contact:
        contact = self._parse(Contact, self._post("/contacts", data))
        logger.info("Contact created: %s", obfuscate_email(contact.email))
        return contact

    def update_contact(self, contact_id: str, data: CreateContactRequest) -> Contact:
        response = self._make_request(
            "PATCH", f"/contacts/{contact_id}", json=data.to_wire()
        )
        return self._parse(Contact, response)

    def delete_contact(self, contact_id: str) -> None:
        self._make_request("DELETE", f"/contacts/{contact_id}")
        logger.info("Contact deleted: %s", contact_id)

    def import_contacts(self, data: ImportContactsRequest) -> ImportContactsResponse:
        result = self._parse(ImportContactsResponse, self._post("/contacts/import", data))
        logger.info(
            "Imported %d contacts, skipped %d", result.total_imported, len(result.skipped)
        )
        return result

    # Sending

    def send_mail(self, data: SendRequest) -> SendMailResponse:
        """Submit a normalized send request as one batch."""
        logger.info(
            "Sending template %s via SMTP config %s to %d recipients: %s",
            data.template_id,
            data.smtp_config_id,
            len(data.recipients),
            obfuscate_recipients(data.recipients),
        )
        result = self._parse(SendMailResponse, self._post("/mail/send", data))
        logger.info("Batch %s accepted", result.batch_id)
        return result

    def list_logs(self) -> List[MailLog]:
        return self._parse(List[MailLog], self._make_request("GET", "/mail/logs"))
