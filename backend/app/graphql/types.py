"""
GraphQL object types.

Python field names are snake_case; Strawberry exposes them camelCased
(``assigned_to`` -> ``assignedTo``).
"""

from typing import Any, Dict, List, Optional

import strawberry

from .scalars import Date


@strawberry.type(name="Comment")
class CommentType:
    id: strawberry.ID
    text: str
    author: str
    created_at: Date

    @classmethod
    def from_document(cls, comment: Dict[str, Any]) -> "CommentType":
        return cls(
            id=strawberry.ID(comment["id"]),
            text=comment["text"],
            author=comment["author"],
            created_at=comment["createdAt"],
        )


@strawberry.type(name="Issue")
class IssueType:
    id: strawberry.ID
    title: str
    description: str
    status: str
    priority: str
    assigned_to: str
    tags: List[str]
    due_date: Optional[Date]
    created_at: Date
    updated_at: Date
    comments: List[CommentType]

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "IssueType":
        """Build from the normalized dict returned by ``issue_service``."""
        return cls(
            id=strawberry.ID(document["id"]),
            title=document["title"],
            description=document["description"],
            status=document["status"],
            priority=document["priority"],
            assigned_to=document["assignedTo"],
            tags=document["tags"],
            due_date=document["dueDate"],
            created_at=document["createdAt"],
            updated_at=document["updatedAt"],
            comments=[CommentType.from_document(c) for c in document["comments"]],
        )


@strawberry.type(name="DashboardStats")
class DashboardStatsType:
    total_issues: int
    open_issues: int
    closed_issues: int
    in_progress_issues: int
    hold_issues: int
    high_priority_issues: int
    medium_priority_issues: int
    low_priority_issues: int
