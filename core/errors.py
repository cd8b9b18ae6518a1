"""
Exception hierarchy for the issue tracker.

Every error raised by the service layer carries a stable ``code`` which is
exposed to GraphQL clients through ``extensions.code``. Lookups that miss
are not errors: they return ``None`` and the GraphQL field resolves to null.
"""

from typing import Any, Dict, Optional


class IssueTrackerError(Exception):
    """Base class for errors surfaced to API clients."""

    code = "ISSUE_TRACKER_ERROR"

    def __init__(self, message: str, extensions: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        # graphql-core copies ``extensions`` from the raised exception onto the GraphQL error
        self.extensions = {"code": self.code, **(extensions or {})}

    def __str__(self) -> str:
        return self.message


class ValidationError(IssueTrackerError):
    """A required input is missing, blank, or outside its allowed values."""

    code = "VALIDATION_ERROR"


class InvalidArgumentError(IssueTrackerError):
    """An identifier argument does not match the store's id format."""

    code = "INVALID_ARGUMENT"


class InternalError(IssueTrackerError):
    """The document store failed or could not be reached."""

    code = "INTERNAL_ERROR"


__all__ = [
    "IssueTrackerError",
    "ValidationError",
    "InvalidArgumentError",
    "InternalError",
]
