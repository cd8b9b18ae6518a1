"""
Custom GraphQL scalars.

``Date`` travels as an ISO-8601 string (``2024-06-01T00:00:00.000Z``) and is
a timezone-aware UTC ``datetime`` inside resolvers.
"""

from datetime import datetime
from typing import Any, NewType, Optional, Union

import strawberry

from core.utils import parse_iso, to_iso


def serialize_date(value: Union[datetime, str]) -> Optional[str]:
    return to_iso(value)


def parse_date(value: Any) -> Optional[datetime]:
    """Parse a variable or literal value. Raises ValueError on malformed input."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    return parse_iso(value)


Date = strawberry.scalar(
    NewType("Date", datetime),
    name="Date",
    description="Point in time as an ISO-8601 string",
    serialize=serialize_date,
    parse_value=parse_date,
)
