"""
Lenient coercion for applicant numbers and approval text fields.
Neither helper raises: junk input collapses to 0 or "".
"""
from __future__ import annotations

import math
import re
from datetime import date
from decimal import Decimal
from typing import Any

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

# largest integer a float (and a JSON number) holds exactly
MAX_COERCED_INT = 2**53 - 1


def coerce_non_negative_int(value: Any) -> int:
    """
    Parse the leading integer of value the way form input is read ("12.9" -> 12, "12k" -> 12).
    Missing, non-numeric, NaN, infinite and negative values become 0. Anything larger than
    MAX_COERCED_INT is clamped to it, so downstream float arithmetic stays finite.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            return 0
        parsed = MAX_COERCED_INT if value > MAX_COERCED_INT else int(value)
    elif isinstance(value, Decimal):
        if not value.is_finite():
            return 0
        parsed = MAX_COERCED_INT if value > MAX_COERCED_INT else int(value)
    elif isinstance(value, str):
        match = _LEADING_INT.match(value)
        if not match:
            return 0
        digits = match.group(1)
        if len(digits.lstrip("+-").lstrip("0")) > len(str(MAX_COERCED_INT)):
            return 0 if digits.startswith("-") else MAX_COERCED_INT
        parsed = int(digits)
    else:
        return 0
    return min(max(parsed, 0), MAX_COERCED_INT)


def to_text(value: Any) -> str:
    """Render a stored scalar as approval text. None -> "", 10000.0 -> "10000"."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if not math.isfinite(value):
            return ""
        return str(int(value)) if value.is_integer() else repr(value)
    if isinstance(value, Decimal):
        return format(value.normalize(), "f") if value.is_finite() else ""
    if isinstance(value, date):
        return value.isoformat()
    return str(value)
