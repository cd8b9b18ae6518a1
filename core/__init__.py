"""
Issue Tracker Core Library.

This package provides the core functionality for the issue tracker:
document store management, the Issue model, repositories, configuration
and logging.

Usage:
    # Database
    from core.db import db, get_db
    from core.models import Issue
    from core.repositories import IssueRepository

    # Config
    from core.config import get_settings, Settings

    # Logging
    from core.logging import get_logger, configure_logging
"""

__version__ = "1.0.0"
