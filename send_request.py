# SPDX-License-Identifier: GPL-3.0-only
"""Turns the raw send form into a ``POST /mail/send`` body and phrases the
server's validation tally for the user.

Both functions are pure: no I/O, no clock, no randomness.
"""

import enum
import json
import re
from typing import Any, Dict, List, Optional, Tuple

from schemas.v1.models import RawSendInput, SendRequest, ValidationTally

RECIPIENT_SEPARATORS = re.compile(r"[,\n]")


class NormalizationError(enum.Enum):
    """Reasons a send form is rejected before anything goes over the wire."""

    MISSING_TEMPLATE = "missing_template"
    MISSING_SMTP_CONFIG = "missing_smtp_config"
    NO_RECIPIENTS = "no_recipients"
    INVALID_TEMPLATE_DATA = "invalid_template_data"


def split_recipients(text: str) -> List[str]:
    """Split on commas and newlines, trim, and drop empty entries.

    Order and duplicates are kept as entered.
    """
    pieces = (piece.strip() for piece in RECIPIENT_SEPARATORS.split(text or ""))
    return [piece for piece in pieces if piece]


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def parse_template_data(text: str) -> Tuple[bool, Optional[Dict[str, Any]]]:
    """Parse the optional JSON object of template substitutions.

    Returns:
        Tuple[bool, Optional[dict]]: ``(True, None)`` for blank input or an
        empty object, ``(True, data)`` for a non-empty object and
        ``(False, None)`` when the text is not a JSON object.
    """
    if not text or not text.strip():
        return True, None

    try:
        data = json.loads(text, parse_constant=_reject_constant)
    except ValueError:
        return False, None

    if not isinstance(data, dict):
        return False, None

    return True, data or None


def normalize(
    raw: RawSendInput,
) -> Tuple[Optional[SendRequest], Optional[NormalizationError]]:
    """Validate the send form and build the request body.

    Exactly one element of the returned pair is set.
    """
    if not raw.template_id.strip():
        return None, NormalizationError.MISSING_TEMPLATE

    if not raw.smtp_config_id.strip():
        return None, NormalizationError.MISSING_SMTP_CONFIG

    recipients = split_recipients(raw.recipients_text)
    if not recipients:
        return None, NormalizationError.NO_RECIPIENTS

    is_valid, template_data = parse_template_data(raw.template_data_text)
    if not is_valid:
        return None, NormalizationError.INVALID_TEMPLATE_DATA

    request = SendRequest(
        template_id=raw.template_id,
        smtp_config_id=raw.smtp_config_id,
        recipients=recipients,
        template_data=template_data,
    )
    return request, None


def summarize(tally: ValidationTally) -> str:
    """Describe a validation tally in one message."""
    message = f"Email queued successfully! {tally.valid} valid emails will be sent."

    if tally.invalid > 0:
        message += f" {tally.invalid} invalid emails were skipped."

    if tally.disposable > 0:
        message += f" {tally.disposable} disposable emails were blocked."

    if tally.no_mx_record > 0:
        message += f" {tally.no_mx_record} emails had no MX record."

    return message
