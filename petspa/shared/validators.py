"""Normalizers shared by the form schemas and notification channels"""

import re
from typing import Optional, Union

from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
US_NUMBER_LENGTH = 10


def digits_only(value: Optional[str]) -> str:
    """Strip everything except 0-9"""
    return re.sub(r"\D", "", value or "")


def validate_us_phone(phone: Optional[str]) -> Optional[str]:
    """
    Normalize a US number typed in any format ("(727) 555-0100", "1-727-...")
    to +1XXXXXXXXXX. Raises ValueError when it is not a 10-digit US number.
    """
    if not phone:
        return phone

    digits = digits_only(phone)
    if len(digits) == US_NUMBER_LENGTH + 1 and digits[0] == "1":
        digits = digits[1:]
    if len(digits) != US_NUMBER_LENGTH:
        raise ValueError("Phone number must be 10 digits for US numbers")
    return "+1" + digits


def validate_email(email: Optional[str]) -> Optional[str]:
    """Trimmed, lower-cased address; ValueError if it does not look like one"""
    if not email:
        return email

    normalized = email.strip().lower()
    if EMAIL_PATTERN.match(normalized) is None:
        raise ValueError("Invalid email format")
    return normalized


def pydantic_errors_to_details(
    exc: Union[PydanticValidationError, RequestValidationError], fallback_messages: Optional[dict[str, str]] = None
) -> list[dict]:
    """
    Flatten a pydantic ValidationError into ``[{field, message}]``.

    Messages raised by our own validators are passed through as-is. Anything
    else (missing field, wrong type) uses the per-field fallback message when
    one is given.
    """
    fallback_messages = fallback_messages or {}
    details = []
    for error in exc.errors():
        loc = tuple(error.get("loc", ()))
        # Request body errors are reported relative to the body itself
        if len(loc) > 1 and loc[0] == "body":
            loc = loc[1:]
        field = ".".join(str(part) for part in loc) or "body"
        if error.get("type") == "value_error" and error.get("ctx", {}).get("error"):
            message = str(error["ctx"]["error"])
        else:
            message = fallback_messages.get(field, error.get("msg", "Invalid value"))
        details.append({"field": field, "message": message})
    return details
