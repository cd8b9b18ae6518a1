"""
Issue service - bridges the GraphQL resolvers with the document store.

Every function takes a SQLAlchemy session and returns issues in their
normalized wire shape (see ``normalize_issue``). Store failures are logged
and re-raised as ``InternalError``; input problems raise ``ValidationError``
or ``InvalidArgumentError`` before anything is written.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.constants import (
    DEFAULT_COMMENT_AUTHOR,
    DEFAULT_COMMENT_TEXT,
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    ISSUE_PRIORITIES,
    ISSUE_STATUSES,
)
from core.errors import InternalError, InvalidArgumentError, ValidationError
from core.logging import get_logger, log_timing
from core.models import Issue
from core.repositories import IssueRepository
from core.utils import is_object_id, new_object_id, to_iso, utc_now

logger = get_logger("api.issue_service")

# Wire name -> model attribute, for fields that may never be null
REQUIRED_TEXT_FIELDS = {
    "title": "title",
    "description": "description",
    "assignedTo": "assigned_to",
}
UPDATABLE_FIELDS = (
    "title",
    "description",
    "status",
    "priority",
    "assigned_to",
    "tags",
    "due_date",
)


# =============================================================================
# Normalization
# =============================================================================


def normalize_comment(comment: dict[str, Any]) -> dict[str, Any]:
    """
    Wire shape of one embedded comment.

    Guarantees non-null ``text``, ``author`` and ``createdAt`` even for
    documents written before the defaults hook existed.
    """
    created_at = comment.get("createdAt")
    try:
        created_at = to_iso(created_at) if created_at else None
    except ValueError:
        created_at = None

    return {
        "id": str(comment.get("id") or new_object_id()),
        "text": comment.get("text") or DEFAULT_COMMENT_TEXT,
        "author": comment.get("author") or DEFAULT_COMMENT_AUTHOR,
        "createdAt": created_at or to_iso(utc_now()),
    }


def normalize_issue(issue: Issue) -> dict[str, Any]:
    """
    Wire shape of an issue: string id, ISO-8601 dates, list tags, normalized comments.
    """
    document = issue.to_dict()
    return {
        **document,
        "id": str(document["id"]),
        "tags": list(document["tags"] or []),
        "dueDate": to_iso(document["dueDate"]),
        "createdAt": to_iso(document["createdAt"]),
        "updatedAt": to_iso(document["updatedAt"]),
        "comments": [normalize_comment(comment) for comment in document["comments"] or []],
    }


# =============================================================================
# Validation helpers
# =============================================================================


def _require_object_id(value: Any, name: str = "id") -> str:
    if not is_object_id(value):
        raise InvalidArgumentError(
            f'Invalid {name} "{value}": expected a 24-character hex string'
        )
    return value


def _require_text(wire_name: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{wire_name} is required")
    return value


def _check_choice(wire_name: str, value: str, choices: tuple[str, ...]) -> str:
    if value not in choices:
        raise ValidationError(
            f"Invalid {wire_name} '{value}'. Expected one of: {', '.join(choices)}"
        )
    return value


@contextmanager
def _store_errors(session: Session, operation: str, message: str) -> Iterator[None]:
    """Roll back and wrap store failures as InternalError."""
    try:
        yield
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(
            "store_error",
            operation=operation,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise InternalError(f"{message}: {e}") from e


# =============================================================================
# Queries
# =============================================================================


def list_issues(session: Session) -> list[dict[str, Any]]:
    """All issues, normalized. Unbounded."""
    with _store_errors(session, "list_issues", "Failed to fetch issues"):
        issues = IssueRepository(session).list_all()
    return [normalize_issue(issue) for issue in issues]


def get_issue(session: Session, issue_id: str) -> dict[str, Any] | None:
    """A single normalized issue, or None when absent."""
    _require_object_id(issue_id)
    with _store_errors(session, "get_issue", "Failed to fetch issue"):
        issue = IssueRepository(session).get_by_id(issue_id)
    return normalize_issue(issue) if issue is not None else None


@log_timing("dashboard_stats", logger=logger)
def dashboard_stats(session: Session) -> dict[str, int]:
    """Total, per-status and per-priority counts from one aggregate query."""
    with _store_errors(session, "dashboard_stats", "Failed to compute dashboard stats"):
        return IssueRepository(session).dashboard_counts()


# =============================================================================
# Mutations
# =============================================================================


def add_issue(
    session: Session,
    *,
    title: str | None,
    description: str | None,
    assigned_to: str | None,
    status: str | None = None,
    priority: str | None = None,
    tags: list[str] | None = None,
    due_date: datetime | None = None,
) -> dict[str, Any]:
    """
    Create an issue with store-assigned id and timestamps.

    Raises:
        ValidationError: Missing required field or unknown status/priority.
        InternalError: The store rejected the write.
    """
    _require_text("title", title)
    _require_text("description", description)
    _require_text("assignedTo", assigned_to)
    status = _check_choice("status", status or DEFAULT_STATUS, ISSUE_STATUSES)
    priority = _check_choice("priority", priority or DEFAULT_PRIORITY, ISSUE_PRIORITIES)

    with _store_errors(session, "add_issue", "Failed to add issue"):
        issue = IssueRepository(session).create(
            title=title,
            description=description,
            assigned_to=assigned_to,
            status=status,
            priority=priority,
            tags=list(tags or []),
            due_date=due_date,
            comments=[],
        )

    logger.info("issue_created", issue_id=issue.id, status=issue.status, priority=issue.priority)
    return normalize_issue(issue)


def update_issue(session: Session, issue_id: str, **fields: Any) -> dict[str, Any] | None:
    """
    Merge the supplied fields into an issue.

    ``None`` leaves a field unchanged, except ``due_date`` where it clears
    the date. Callers pass only the fields the client actually sent.
    ``updated_at`` is stamped on every successful call, even when nothing
    else changes. Last write wins.

    Returns:
        The normalized issue, or None when ``issue_id`` does not exist.
    """
    _require_object_id(issue_id)

    unknown = set(fields) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown field(s): {', '.join(sorted(unknown))}")

    changes = {key: value for key, value in fields.items() if value is not None or key == "due_date"}
    for wire_name, attr in REQUIRED_TEXT_FIELDS.items():
        if attr in changes:
            _require_text(wire_name, changes[attr])
    if "status" in changes:
        _check_choice("status", changes["status"], ISSUE_STATUSES)
    if "priority" in changes:
        _check_choice("priority", changes["priority"], ISSUE_PRIORITIES)
    if "tags" in changes:
        changes["tags"] = list(changes["tags"])

    fields_changed = sorted(changes)
    changes["updated_at"] = utc_now()

    with _store_errors(session, "update_issue", "Failed to update issue"):
        issue = IssueRepository(session).update(issue_id, **changes)

    if issue is None:
        return None

    logger.info("issue_updated", issue_id=issue_id, fields=fields_changed)
    return normalize_issue(issue)


def delete_issue(session: Session, issue_id: str) -> bool:
    """
    Remove an issue. Always True, whether or not it existed.
    """
    _require_object_id(issue_id)
    with _store_errors(session, "delete_issue", "Failed to delete issue"):
        deleted = IssueRepository(session).delete(issue_id)

    logger.info("issue_deleted", issue_id=issue_id, existed=deleted)
    return True


def add_comment(session: Session, issue_id: str, text: str | None, author: str | None) -> dict[str, Any]:
    """
    Append a trimmed comment to an issue.

    All checks run before the issue is touched, so a failed call leaves
    it unchanged.

    Raises:
        InvalidArgumentError: Malformed issue id.
        ValidationError: Issue missing, or blank text/author.
        InternalError: The store rejected the write.
    """
    _require_object_id(issue_id, "issueId")

    with _store_errors(session, "add_comment", "Failed to add comment"):
        repo = IssueRepository(session)
        issue = repo.get_by_id(issue_id)

    if issue is None:
        raise ValidationError("Issue not found")
    if not text or not text.strip():
        raise ValidationError("Comment text is required")
    if not author or not author.strip():
        raise ValidationError("Author name is required")

    with _store_errors(session, "add_comment", "Failed to add comment"):
        comment = repo.append_comment(issue, text.strip(), author.strip())

    logger.info("comment_added", issue_id=issue_id, comment_id=comment["id"])
    return normalize_issue(issue)
