from __future__ import annotations

import re
from typing import Any, Optional

from ..core.exceptions import ValidationError


class FieldErrors:
    """Collects every failed field rule before deciding to abort a mutation."""

    def __init__(self):
        self._errors: dict[str, str] = {}

    def add(self, field: str, message: str) -> None:
        # first failure per field wins
        self._errors.setdefault(field, message)

    def __bool__(self) -> bool:
        return bool(self._errors)

    def as_dict(self) -> dict[str, str]:
        return dict(self._errors)

    def raise_if_any(self) -> None:
        if self._errors:
            raise ValidationError(self._errors)


def clean_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def optional_text(value: Any) -> Optional[str]:
    """Empty strings are stored as NULL."""
    text = clean_text(value)
    return text or None


def require_non_empty(errors: FieldErrors, value: Any, field: str, message: str) -> str:
    text = clean_text(value)
    if not text:
        errors.add(field, message)
    return text


def require_pattern(errors: FieldErrors, value: str, field: str, pattern: str, message: str) -> str:
    if value and not re.fullmatch(pattern, value):
        errors.add(field, message)
    return value


def require_int_between(
    errors: FieldErrors,
    value: Any,
    field: str,
    *,
    low: int,
    high: int,
    message: str,
) -> Optional[int]:
    try:
        number = int(clean_text(value))
    except ValueError:
        errors.add(field, message)
        return None
    if number < low or number > high:
        errors.add(field, message)
        return None
    return number


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return clean_text(value).lower() in {"1", "true", "on", "yes", "si", "sí"}
