"""
Issue repository: document-level reads and writes plus the dashboard aggregate.
"""

from typing import Any, Dict

from sqlalchemy import case, func, select

from core.constants import IssuePriority, IssueStatus
from core.models import Issue
from core.utils import new_object_id, utc_now

from .base import BaseRepository

# Dashboard counter names, keyed by column value
_STATUS_COUNTERS = {
    IssueStatus.OPEN.value: "open_issues",
    IssueStatus.CLOSED.value: "closed_issues",
    IssueStatus.IN_PROGRESS.value: "in_progress_issues",
    IssueStatus.HOLD.value: "hold_issues",
}
_PRIORITY_COUNTERS = {
    IssuePriority.HIGH.value: "high_priority_issues",
    IssuePriority.MEDIUM.value: "medium_priority_issues",
    IssuePriority.LOW.value: "low_priority_issues",
}


def _count_where(condition):
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


class IssueRepository(BaseRepository[Issue]):
    """
    Repository for Issue documents.

    Key features:
    - append_comment: read-modify-write of the embedded comment array
    - dashboard_counts: all counters from a single aggregate SELECT
    """

    model = Issue

    def list_all(self) -> list[Issue]:
        """Every issue in creation order."""
        return list(self.session.scalars(select(Issue).order_by(Issue.created_at, Issue.id)))

    def append_comment(self, issue: Issue, text: str, author: str) -> Dict[str, Any]:
        """
        Append a comment to an issue and flush the whole document.

        The list is reassigned rather than mutated in place so the JSON
        column is marked dirty and the comment defaults hook runs.

        Returns:
            The stored comment.
        """
        comment = {
            "id": new_object_id(),
            "text": text,
            "author": author,
            "createdAt": utc_now(),
        }
        issue.comments = [*(issue.comments or []), comment]
        issue.updated_at = utc_now()
        self.session.flush()
        return issue.comments[-1]

    def dashboard_counts(self) -> Dict[str, int]:
        """
        Total, per-status and per-priority counts in one query.

        Returns:
            Dict of snake_case counter names to counts.
        """
        columns = [func.count(Issue.id).label("total_issues")]
        columns += [
            _count_where(Issue.status == value).label(name)
            for value, name in _STATUS_COUNTERS.items()
        ]
        columns += [
            _count_where(Issue.priority == value).label(name)
            for value, name in _PRIORITY_COUNTERS.items()
        ]

        row = self.session.execute(select(*columns)).one()
        return {key: int(value or 0) for key, value in row._mapping.items()}
