from __future__ import annotations

import re
from typing import Any, Optional

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _as_text(value: Any, field_name: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    return value


def require_non_empty(value: Any, field_name: str) -> str:
    v = _as_text(value, field_name).strip()
    if not v:
        raise ValidationError(f"{field_name} is required")
    return v


def require_min_length(value: Any, field_name: str, min_len: int) -> str:
    v = _as_text(value, field_name)
    if len(v) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return v


def require_email(value: Any, field_name: str = "Email") -> str:
    email = require_non_empty(value, field_name).lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError(f"{field_name} is not a valid address")
    return email


def optional_text(value: Any, field_name: str = "Value") -> Optional[str]:
    v = _as_text(value, field_name).strip()
    return v or None
