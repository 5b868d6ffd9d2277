from __future__ import annotations

import re
from typing import Any, Optional

from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.exceptions import ValidationError

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_RE = re.compile(r"^\d{10}$")
PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[^A-Za-z0-9]).+$")


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if not isinstance(value, str) or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_fields(payload: dict, fields: tuple[str, ...], message: str) -> None:
    """Raise ``message`` when any of ``fields`` is missing or blank."""
    for name in fields:
        value = payload.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(message)


def normalize_email(value: str) -> str:
    # non-string JSON values normalize to "" and fail the caller's checks
    if not isinstance(value, str):
        return ""
    return value.strip().lower()


def validate_email(value: str) -> str:
    email = normalize_email(value)
    if not EMAIL_RE.match(email):
        raise ValidationError("Invalid email")
    return email


def validate_phone(value: str) -> str:
    phone = value.strip() if isinstance(value, str) else ""
    if not PHONE_RE.match(phone):
        raise ValidationError("Phone must be 10 digits")
    return phone


def validate_password(value: str) -> str:
    require_min_length(value, "Password", MIN_PASSWORD_LENGTH)
    if not PASSWORD_RE.match(value):
        raise ValidationError("Password must have upper, lower, number and special char")
    return value


def optional_text(value: Any) -> Optional[str]:
    """Trimmed string or None for blank / missing values."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_id(value: Any, field_name: str) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is invalid")
    if parsed <= 0:
        raise ValidationError(f"{field_name} is invalid")
    return parsed


def parse_optional_id(value: Any, field_name: str) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_id(value, field_name)
