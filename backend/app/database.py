"""
Database session dependency for the backend.

Re-exports from the core.db module so resolvers and tests share one
``get_db`` object (tests override it through ``app.dependency_overrides``).

Note: Database initialization is handled explicitly in main.py startup,
NOT at import time.
"""

from core.db import db, get_db

__all__ = ["db", "get_db"]
