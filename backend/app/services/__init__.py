"""
Backend services for the issue tracker.
"""

from . import issue_service

__all__ = [
    "issue_service",
]
