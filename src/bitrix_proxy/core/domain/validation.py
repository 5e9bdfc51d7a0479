"""Argument validation primitives.

Each ``ensure_*`` function takes an untyped value coming from a caller's
argument bag together with the message to fail with, and either returns the
narrowed value or raises :class:`ValidationError`. Optional primitives pass an
absent (``None``) value through unchanged.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from typing import Any

from bitrix_proxy.core.domain.errors import ValidationError

ISO_DATE_PATTERN = re.compile(
    r"[0-9]{4}-[0-9]{2}-[0-9]{2}(T[0-9]{2}:[0-9]{2}:[0-9]{2}(\.[0-9]{3})?Z?)?"
)
ISO_DATE_HINT = ". Expected ISO 8601 format (e.g., 2024-01-15 or 2024-01-15T10:30:00)"

ENTITY_TYPE_IDS = {"lead": 1, "deal": 2, "contact": 3, "company": 4}
ENTITY_TYPES = tuple(ENTITY_TYPE_IDS)


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid JSON number argument
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if isinstance(value, int):
        return True
    return math.isfinite(value)


def ensure_string(value: Any, message: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value.strip()


def ensure_positive_number(value: Any, message: str) -> int | float:
    if not _is_number(value) or value <= 0:
        raise ValidationError(message)
    return value


def ensure_number(value: Any, message: str) -> int | float | None:
    if value is None:
        return None
    if not _is_number(value):
        raise ValidationError(message)
    return value


def ensure_non_negative_number(value: Any, message: str) -> int | float | None:
    if value is None:
        return None
    if not _is_number(value) or value < 0:
        raise ValidationError(message)
    return value


def ensure_boolean(value: Any, message: str) -> bool | None:
    if value is None:
        return None
    if not isinstance(value, bool):
        raise ValidationError(message)
    return value


def ensure_object(value: Any, message: str) -> Mapping[str, Any] | None:
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise ValidationError(message)
    return value


def ensure_array(value: Any, message: str) -> list[Any] | None:
    if value is None:
        return None
    if not isinstance(value, list):
        raise ValidationError(message)
    return value


def ensure_iso_date(value: Any, message: str) -> str | None:
    """Check a ``YYYY-MM-DD[THH:MM:SS[.mmm][Z]]`` string.

    Only the shape is checked, not calendar validity.
    """
    if value is None:
        return None
    if not isinstance(value, str) or not ISO_DATE_PATTERN.fullmatch(value):
        raise ValidationError(f"{message}{ISO_DATE_HINT}")
    return value


def ensure_enum(value: Any, allowed: Iterable[str], message: str) -> str:
    """Match ``value`` case-insensitively and return the allowed spelling."""
    text = ensure_string(value, message)
    if text is None:
        raise ValidationError(message)
    for candidate in allowed:
        if candidate.lower() == text.lower():
            return candidate
    raise ValidationError(message)


def optional_positive_number(value: Any, default: int | float) -> int | float:
    """Return ``value`` if it is a positive number, otherwise ``default``."""
    if _is_number(value) and value > 0:
        return value
    return default
