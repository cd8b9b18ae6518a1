"""
Repository pattern implementations for data access.

Repositories provide a clean abstraction over the document store.

Usage:
    from core.repositories import IssueRepository
    from core.db import get_db

    def dashboard(session: Session = Depends(get_db)):
        return IssueRepository(session).dashboard_counts()
"""

from .base import BaseRepository
from .issue_repository import IssueRepository

__all__ = [
    "BaseRepository",
    "IssueRepository",
]
