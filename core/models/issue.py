"""
Issue document model.

One row per Issue. Tags and comments are embedded in the row as JSON
arrays; comments have no lifecycle outside their parent issue.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, validates

from core.constants import (
    DEFAULT_COMMENT_AUTHOR,
    DEFAULT_COMMENT_TEXT,
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
)
from core.db import Base
from core.utils import new_object_id, to_iso, utc_now


def prepare_comment(comment: Dict[str, Any]) -> Dict[str, Any]:
    """
    Fill defaults on a comment before it is stored.

    Missing or empty ``text`` becomes "", missing or empty ``author`` becomes
    "Anonymous", a missing or unparseable ``createdAt`` becomes now. Timestamps
    are stored as ISO strings since the comment lives inside a JSON column.
    """
    try:
        created_at = to_iso(comment.get("createdAt") or utc_now())
    except ValueError:
        created_at = to_iso(utc_now())

    return {
        **comment,
        "id": comment.get("id") or new_object_id(),
        "text": comment.get("text") or DEFAULT_COMMENT_TEXT,
        "author": comment.get("author") or DEFAULT_COMMENT_AUTHOR,
        "createdAt": created_at,
    }


class Issue(Base):
    """
    Tracked work item.

    ``updated_at`` is stamped by the repository and service on every write;
    ``onupdate`` covers any other UPDATE of the row.
    """
    __tablename__ = "issues"

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_object_id)
    title: Mapped[str] = mapped_column(String(512))
    description: Mapped[str] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(16), default=DEFAULT_STATUS, index=True)
    priority: Mapped[str] = mapped_column(String(16), default=DEFAULT_PRIORITY, index=True)
    assigned_to: Mapped[str] = mapped_column(String(255))
    tags: Mapped[List[str]] = mapped_column(JSON, default=list)
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )
    comments: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, default=list)

    @validates("comments")
    def _fill_comment_defaults(self, key: str, comments: Optional[List[Dict[str, Any]]]):
        return [prepare_comment(comment) for comment in comments or []]

    @validates("tags")
    def _coerce_tags(self, key: str, tags: Optional[List[str]]):
        return list(tags or [])

    def to_dict(self) -> Dict[str, Any]:
        """
        Raw document view with wire field names.

        Dates are left as stored; see ``issue_service.normalize_issue`` for the
        shape returned to clients.
        """
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "priority": self.priority,
            "assignedTo": self.assigned_to,
            "tags": self.tags,
            "dueDate": self.due_date,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "comments": self.comments,
        }

    def __repr__(self) -> str:
        return f"<Issue id={self.id!r} title={self.title!r} status={self.status!r}>"


__all__ = ["Issue", "prepare_comment"]
