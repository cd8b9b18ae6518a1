"""
SQLAlchemy models for the issue tracker.

Usage:
    from core.models import Issue
"""

from core.db import Base

from .issue import Issue, prepare_comment

__all__ = [
    "Base",
    "Issue",
    "prepare_comment",
]
