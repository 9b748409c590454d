"""
Timestamp parsing for persisted decision fields.
Stored dates arrive as ISO strings ("2024-06-01", "2024-06-01T12:00:00.000Z"),
datetimes, or epoch milliseconds. Everything is normalized to aware UTC.
"""
from __future__ import annotations

import math
from datetime import date, datetime, time, timezone
from typing import Any, Optional

from utils.coerce import to_text

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Return an aware UTC datetime, or None when value is missing or unparseable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        return parse_timestamp(parsed)
    return None


def to_date_string(value: Any) -> str:
    """Render as YYYY-MM-DD (UTC). Unparseable text is passed through unchanged."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return to_text(value)
    return parsed.date().isoformat()


def to_iso_string(value: Any) -> str:
    """Render as an ISO-8601 UTC string with a Z suffix, or "" when missing."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return to_text(value)
    return parsed.isoformat(timespec="milliseconds").replace("+00:00", "Z")
