"""Lead submission validation and the "Name - Phone" convention"""

import logging
import re
from typing import Any, NamedTuple

from pydantic import ValidationError as PydanticValidationError

from ...shared.errors import ValidationError
from ...shared.validators import digits_only, pydantic_errors_to_details
from .schemas import LEAD_FIELD_MESSAGES, LeadSubmission

logger = logging.getLogger(__name__)

NAME_PHONE_PATTERN = re.compile(r"^([^-\d]+)\s*-\s*(.+)$")
MIN_SMS_DIGITS = 10


class NameAndPhone(NamedTuple):
    name: str
    phone: str

    @property
    def can_text(self) -> bool:
        return len(digits_only(self.phone)) >= MIN_SMS_DIGITS


def parse_name_and_phone(value: str) -> NameAndPhone:
    """Split "Jane Doe - 727-555-0100" into name and phone.

    Without a separator the first word is taken as the name and there is no phone.
    """
    match = NAME_PHONE_PATTERN.match(value or "")
    if match:
        return NameAndPhone(match.group(1).strip(), match.group(2).strip())
    words = (value or "").split()
    return NameAndPhone(words[0] if words else "Valued Customer", "")


def validate_lead_submission(payload: Any) -> LeadSubmission:
    """
    Check a raw lead payload against the intake schema.

    Returns the normalized submission. Raises ValidationError listing every
    failing field.
    """
    if not isinstance(payload, dict):
        raise ValidationError([{"field": "body", "message": "Expected a JSON object"}])

    try:
        return LeadSubmission.model_validate(payload)
    except PydanticValidationError as e:
        details = pydantic_errors_to_details(e, LEAD_FIELD_MESSAGES)
        logger.info(f"Lead submission rejected: {[d['field'] for d in details]}")
        raise ValidationError(details) from None
