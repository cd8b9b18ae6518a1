"""
Shared utilities.

Identifier generation and the ISO-8601 date helpers used by the model,
the service layer and the GraphQL ``Date`` scalar.
"""

import re
import time
import uuid
from datetime import datetime, timezone
from typing import Optional, Union

from .constants import OBJECT_ID_LENGTH

_OBJECT_ID_RE = re.compile(rf"^[0-9a-f]{{{OBJECT_ID_LENGTH}}}$")


def new_object_id() -> str:
    """Generate a time-sortable 24-char hex id.

    Format: ``{seconds:08x}{uuid16}``, the same shape as a document-database
    object id so clients can treat ids as opaque strings.
    """
    seconds = int(time.time()) & 0xFFFFFFFF
    rand = uuid.uuid4().hex[:16]
    return f"{seconds:08x}{rand}"


def is_object_id(value: object) -> bool:
    """Check whether a value has the store's identifier format."""
    return isinstance(value, str) and bool(_OBJECT_ID_RE.match(value))


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """
    Attach or convert to UTC.

    SQLite returns naive datetimes on round-trip; those are stored as UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_iso(value: Optional[Union[datetime, str]]) -> Optional[str]:
    """
    Format a point in time as an ISO-8601 UTC string with milliseconds.

    Args:
        value: datetime, already-formatted ISO string, or None.

    Returns:
        String like ``2024-06-01T00:00:00.000Z`` or None.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = parse_iso(value)
    if not isinstance(value, datetime):
        raise ValueError(f"Invalid ISO-8601 date: {value!r}")
    value = ensure_utc(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_iso(value: str) -> datetime:
    """
    Parse an ISO-8601 string to a timezone-aware UTC datetime.

    Accepts a trailing ``Z``, an explicit offset, a naive timestamp (taken
    as UTC) or a bare date.

    Raises:
        ValueError: If the string is not ISO-8601.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid ISO-8601 date: {value!r}")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise ValueError(f"Invalid ISO-8601 date: {value!r}") from e
    return ensure_utc(parsed)


__all__ = [
    "new_object_id",
    "is_object_id",
    "utc_now",
    "ensure_utc",
    "to_iso",
    "parse_iso",
]
