# SPDX-License-Identifier: GPL-3.0-only
"""Search and filtering used by the dashboard list screens."""

from typing import List, Optional, Sequence, TypeVar

from schemas.v1.models import Contact, DashboardStats, MailLog, MailTemplate

T = TypeVar("T")

RECENT_LOGS = 5


def _matches(term: str, *fields: Optional[str]) -> bool:
    return any(term in field.lower() for field in fields if field)


def filter_logs(logs: Sequence[MailLog], status: str = "all", search: str = "") -> List[MailLog]:
    """Filter logs by status ("all" keeps every status), then by search term.

    The search is case-insensitive over recipient, subject and template name.
    """
    filtered = list(logs)

    if status and status != "all":
        filtered = [log for log in filtered if log.status == status]

    term = (search or "").strip().lower()
    if term:
        filtered = [
            log
            for log in filtered
            if _matches(
                term, log.recipient, log.subject, log.template.name if log.template else None
            )
        ]

    return filtered


def search_templates(templates: Sequence[MailTemplate], search: str = "") -> List[MailTemplate]:
    term = (search or "").strip().lower()
    if not term:
        return list(templates)
    return [t for t in templates if _matches(term, t.name, t.subject)]


def search_contacts(contacts: Sequence[Contact], search: str = "") -> List[Contact]:
    term = (search or "").strip().lower()
    if not term:
        return list(contacts)
    return [c for c in contacts if _matches(term, c.email, c.first_name, c.last_name)]


def active_only(items: Sequence[T]) -> List[T]:
    """Keep items whose ``is_active`` flag is set."""
    return [item for item in items if getattr(item, "is_active", False)]


def dashboard_stats(
    templates: Sequence[MailTemplate], contacts: Sequence[Contact], logs: Sequence[MailLog]
) -> DashboardStats:
    return DashboardStats(
        templates=len(templates),
        contacts=len(contacts),
        sent_emails=sum(1 for log in logs if log.status == "sent"),
        failed_emails=sum(1 for log in logs if log.status == "failed"),
        recent_logs=list(logs[:RECENT_LOGS]),
    )
