# SPDX-License-Identifier: GPL-3.0-only

from typing import List, Literal
from fastapi import APIRouter, Depends, HTTPException, Request
from api_client import ApiClient, ApiError, AuthExpired
from auth import AuthService
from listing import (
    active_only,
    dashboard_stats,
    filter_logs,
    search_contacts,
    search_templates,
)
from logutils import get_logger
from schemas.v1.models import (
    Contact,
    CreateContactRequest,
    CreateSmtpConfigRequest,
    CreateTemplateRequest,
    DashboardStats,
    ImportContactsRequest,
    ImportContactsResponse,
    LastBatch,
    LoginRequest,
    MailLog,
    MailTemplate,
    MessageResponse,
    PreviewRequest,
    RawSendInput,
    RegisterRequest,
    SendMailResult,
    SendOptions,
    SmtpConfig,
    TemplatePreview,
    User,
)
from send_request import NormalizationError, normalize, parse_template_data, summarize
from template_preview import render_preview
from utils import obfuscate_email

logger = get_logger(__name__)

router = APIRouter()

NORMALIZATION_MESSAGES = {
    NormalizationError.MISSING_TEMPLATE: "Please select a template",
    NormalizationError.MISSING_SMTP_CONFIG: "Please select an SMTP configuration",
    NormalizationError.NO_RECIPIENTS: "Please enter at least one valid recipient",
    NormalizationError.INVALID_TEMPLATE_DATA: "Invalid template data JSON format",
}


def get_auth_service(request: Request) -> AuthService:
    """Dependency returning the auth service the app shell was built with."""
    return request.app.state.auth_service


def get_api_client(auth: AuthService = Depends(get_auth_service)) -> ApiClient:
    return auth.client


def require_user(auth: AuthService = Depends(get_auth_service)) -> User:
    """Dependency rejecting requests made without a stored session."""
    user = auth.current_user()
    if not user:
        logger.warning("Request without a session")
        raise AuthExpired()
    return user


# Authentication


@router.post("/auth/login", response_model=User)
def login(data: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    """Log in and store the session."""
    return auth.login(data)


@router.post("/auth/register", response_model=User)
def register(data: RegisterRequest, auth: AuthService = Depends(get_auth_service)):
    """Create an account and store the session."""
    return auth.register(data)


@router.post("/auth/logout", response_model=MessageResponse)
def logout(auth: AuthService = Depends(get_auth_service)):
    auth.logout()
    return MessageResponse(success=True, message="Logged out successfully")


@router.get("/auth/me", response_model=User)
def me(auth: AuthService = Depends(get_auth_service)):
    """Restore the stored session, confirming it with the API."""
    user = auth.bootstrap()
    if not user:
        raise AuthExpired()
    return user


# Overview


@router.get("/dashboard", response_model=DashboardStats)
def dashboard(
    _: User = Depends(require_user), client: ApiClient = Depends(get_api_client)
):
    return dashboard_stats(
        client.list_templates(), client.list_contacts(), client.list_logs()
    )


# Templates


@router.get("/templates", response_model=List[MailTemplate])
def list_templates(
    search: str = "",
    _: User = Depends(require_user),
    client: ApiClient = Depends(get_api_client),
):
    return search_templates(client.list_templates(), search)


@router.get("/templates/{template_id}", response_model=MailTemplate)
def get_template(
    template_id: str,
    _: User = Depends(require_user),
    client: ApiClient = Depends(get_api_client),
):
    return client.get_template(template_id)


@router.post("/templates", response_model=MailTemplate)
def create_template(
    data: CreateTemplateRequest,
    _: User = Depends(require_user),
    client: ApiClient = Depends(get_api_client),
):
    return client.create_template(data)


@router.post("/templates/{template_id}/preview", response_model=TemplatePreview)
def preview_template(
    template_id: str,
    data: PreviewRequest,
    _: User = Depends(require_user),
    client: ApiClient = Depends(get_api_client),
):
    """Render a template with sample substitutions."""
    is_valid, substitutions = parse_template_data(data.template_data)
    if not is_valid:
        raise HTTPException(
            status_code=400,
            detail=NORMALIZATION_MESSAGES[NormalizationError.INVALID_TEMPLATE_DATA],
        )
    return render_preview(client.get_template(template_id), substitutions)


# SMTP configurations


@router.get("/smtp-configs", response_model=List[SmtpConfig])
def list_smtp_configs(
    _: User = Depends(require_user), client: ApiClient = Depends(get_api_client)
):
    return client.list_smtp_configs()


@router.get("/smtp-configs/{config_id}", response_model=SmtpConfig)
def get_smtp_config(
    config_id: str,
    _: User = Depends(require_user),
    client: ApiClient = Depends(get_api_client),
):
    return client.get_smtp_config(config_id)


@router.post("/smtp-configs", response_model=SmtpConfig)
def create_smtp_config(
    data: CreateSmtpConfigRequest,
    _: User = Depends(require_user),
    client: ApiClient = Depends(get_api_client),
):
    return client.create_smtp_config(data)


# Contacts


@router.get("/contacts", response_model=List[Contact])
def list_contacts(
    search: str = "",
    _: User = Depends(require_user),
    client: ApiClient = Depends(get_api_client),
):
    return search_contacts(client.list_contacts(), search)


@router.get("/contacts/{contact_id}", response_model=Contact)
def get_contact(
    contact_id: str,
    _: User = Depends(require_user),
    client: ApiClient = Depends(get_api_client),
):
    return client.get_contact(contact_id)


@router.post("/contacts", response_model=Contact)
def create_contact(
    data: CreateContactRequest,
    _: User = Depends(require_user),
    client: ApiClient = Depends(get_api_client),
):
    return client.create_contact(data)


@router.patch("/contacts/{contact_id}", response_model=Contact)
def update_contact(
    contact_id: str,
    data: CreateContactRequest,
    _: User = Depends(require_user),
    client: ApiClient = Depends(get_api_client),
):
    return client.update_contact(contact_id, data)


@router.delete("/contacts/{contact_id}", response_model=MessageResponse)
def delete_contact(
    contact_id: str,
    _: User = Depends(require_user),
    client: ApiClient = Depends(get_api_client),
):
    client.delete_contact(contact_id)
    return MessageResponse(success=True, message="Contact deleted successfully")


@router.post("/contacts/import", response_model=ImportContactsResponse)
def import_contacts(
    data: ImportContactsRequest,
    _: User = Depends(require_user),
    client: ApiClient = Depends(get_api_client),
):
    """Forward CSV content to the API for import."""
    if not data.csv_content.strip():
        raise HTTPException(status_code=400, detail="Please enter CSV content")
    return client.import_contacts(data)


# Sending


@router.get("/send/options", response_model=SendOptions)
def send_options(
    _: User = Depends(require_user), client: ApiClient = Depends(get_api_client)
):
    """Templates, active SMTP configs and active contacts for the send form."""
    smtp_configs = active_only(client.list_smtp_configs())
    return SendOptions(
        templates=client.list_templates(),
        smtp_configs=smtp_configs,
        contacts=active_only(client.list_contacts()),
        default_smtp_config_id=smtp_configs[0].id if smtp_configs else None,
    )


@router.post("/send", response_model=SendMailResult)
def send_mail(
    raw: RawSendInput,
    request: Request,
    user: User = Depends(require_user),
    client: ApiClient = Depends(get_api_client),
):
    """Validate the send form, submit the batch and summarize the outcome."""
    send_request, error = normalize(raw)
    if error:
        error_msg = NORMALIZATION_MESSAGES[error]
        logger.warning("Send rejected for %s: %s", obfuscate_email(user.email), error_msg)
        raise HTTPException(status_code=400, detail=error_msg)

    try:
        response = client.send_mail(send_request)
    except AuthExpired:
        raise
    except ApiError as e:
        logger.error("Failed to send email: %s", e.message)
        raise HTTPException(status_code=502, detail="Failed to send email") from e

    request.app.state.last_batch_id = response.batch_id
    message = summarize(response.validation_results)
    logger.info("Batch %s: %s", response.batch_id, message)

    return SendMailResult(
        success=True,
        message=message,
        batch_id=response.batch_id,
        validation_results=response.validation_results,
    )


@router.get("/send/last-batch", response_model=LastBatch)
def last_batch(request: Request, _: User = Depends(require_user)):
    return LastBatch(batch_id=getattr(request.app.state, "last_batch_id", None))


# Logs


@router.get("/logs", response_model=List[MailLog])
def list_logs(
    status: Literal["all", "pending", "sent", "failed"] = "all",
    search: str = "",
    _: User = Depends(require_user),
    client: ApiClient = Depends(get_api_client),
):
    return filter_logs(client.list_logs(), status, search)
