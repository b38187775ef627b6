# SPDX-License-Identifier: GPL-3.0-only

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MailStatus = Literal["pending", "sent", "failed"]


class WireModel(BaseModel):
    """Base for models exchanged with the campaign API (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        """Dump using wire field names, leaving out unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class User(WireModel):
    """Dashboard user as returned by the API."""

    id: str
    email: str
    first_name: str = ""
    last_name: str = ""
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LoginRequest(WireModel):
    email: str
    password: str


class RegisterRequest(WireModel):
    email: str
    password: str
    first_name: str
    last_name: str


class AuthResponse(WireModel):
    access_token: str = Field(alias="access_token")
    user: User


class Session(WireModel):
    """Access token plus the cached user it belongs to."""

    access_token: str
    user: User


class MailTemplate(WireModel):
    id: str
    name: str
    subject: str
    html_content: str
    text_content: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CreateTemplateRequest(WireModel):
    name: str = Field(min_length=1)
    subject: str = Field(min_length=1)
    html_content: str = Field(min_length=1)
    text_content: Optional[str] = None


class SmtpConfig(WireModel):
    id: str
    name: str
    host: str
    port: int
    username: str
    password: Optional[str] = None
    secure: bool = False
    from_email: str
    from_name: str = ""
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CreateSmtpConfigRequest(WireModel):
    name: str = Field(min_length=1)
    host: str = Field(min_length=1)
    port: int = Field(gt=0, le=65535)
    username: str
    password: str
    secure: bool = False
    from_email: str = Field(min_length=1)
    from_name: str = ""


class Contact(WireModel):
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_active: bool = True
    metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CreateContactRequest(WireModel):
    email: str = Field(min_length=1)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class ImportContactsRequest(WireModel):
    csv_content: str


class ImportContactsResponse(WireModel):
    total_imported: int = 0
    skipped: List[str] = []


class RawSendInput(WireModel):
    """Send form exactly as the user filled it in, before normalization."""

    template_id: str = ""
    smtp_config_id: str = ""
    recipients_text: str = Field("", alias="recipients")
    template_data_text: str = Field("", alias="templateData")

    @field_validator(
        "template_id", "smtp_config_id", "recipients_text", "template_data_text",
        mode="before",
    )
    @classmethod
    def blank_if_null(cls, value):
        return "" if value is None else value


class SendRequest(WireModel):
    """Normalized body for ``POST /mail/send``."""

    template_id: str
    smtp_config_id: str
    recipients: List[str] = Field(min_length=1)
    template_data: Optional[Dict[str, Any]] = None


class ValidationTally(WireModel):
    """Server-side classification of the submitted recipients."""

    valid: int = Field(0, ge=0)
    invalid: int = Field(0, ge=0)
    disposable: int = Field(0, ge=0)
    no_mx_record: int = Field(0, ge=0)


class MailLog(WireModel):
    id: str
    recipient: str
    subject: str
    template_id: str
    status: MailStatus
    error_message: Optional[str] = None
    sent_at: Optional[datetime] = None
    template: Optional[MailTemplate] = None


class SendMailResponse(WireModel):
    batch_id: str
    validation_results: ValidationTally
    success: Optional[bool] = None
    logs: List[MailLog] = []


class SendMailResult(WireModel):
    """What the dashboard reports back after a send."""

    success: bool
    message: str
    batch_id: Optional[str] = None
    validation_results: Optional[ValidationTally] = None


class LastBatch(WireModel):
    batch_id: Optional[str] = None


class SendOptions(WireModel):
    """Choices offered on the send form."""

    templates: List[MailTemplate]
    smtp_configs: List[SmtpConfig]
    contacts: List[Contact]
    default_smtp_config_id: Optional[str] = None


class PreviewRequest(WireModel):
    template_data: str = ""


class TemplatePreview(WireModel):
    subject: str
    html_content: str
    text_content: Optional[str] = None
    variables: List[str] = []
    missing_variables: List[str] = []


class DashboardStats(WireModel):
    templates: int
    contacts: int
    sent_emails: int
    failed_emails: int
    recent_logs: List[MailLog] = []


class MessageResponse(WireModel):
    success: bool
    message: str
