from __future__ import annotations

import re
from typing import Optional

from ..core.exceptions import ValidationError

_MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def require_non_empty(value: Optional[str], message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value.strip()


def require_max_length(value: str, field_name: str, max_len: int) -> str:
    if value is not None and len(value) > max_len:
        raise ValidationError(f"{field_name} must be {max_len} characters or less")
    return value


def require_month(value: Optional[str], field_name: str) -> str:
    v = require_non_empty(value, f"{field_name} is required")
    if not _MONTH_RE.match(v):
        raise ValidationError(f"{field_name} must use YYYY-MM format")
    return v


def parse_enum(enum_cls, value, message: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(message)
