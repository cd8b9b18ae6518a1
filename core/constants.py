"""
Application constants for the issue tracker.

Contains the issue status/priority enumerations and the defaults applied
to issues and embedded comments.
"""

from enum import Enum


class IssueStatus(str, Enum):
    """Issue workflow status."""
    OPEN = "open"
    CLOSED = "closed"
    IN_PROGRESS = "in_progress"
    HOLD = "hold"


class IssuePriority(str, Enum):
    """Issue priority."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


ISSUE_STATUSES = tuple(status.value for status in IssueStatus)
ISSUE_PRIORITIES = tuple(priority.value for priority in IssuePriority)

DEFAULT_STATUS = IssueStatus.OPEN.value
DEFAULT_PRIORITY = IssuePriority.MEDIUM.value

# Comment defaults
DEFAULT_COMMENT_TEXT = ""
DEFAULT_COMMENT_AUTHOR = "Anonymous"

# Identifiers are 24 lowercase hex chars: 8 for the creation second, 16 random
OBJECT_ID_LENGTH = 24
