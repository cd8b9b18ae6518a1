"""
Document store connection.

``db`` owns the engine and session factory for the process; ``get_db`` hands
one session to each request.

Usage:
    from core.db import db, get_db, Base

    db.initialize()
    db.check_connection()
    db.create_all_tables()
"""

from collections.abc import Generator
from typing import Any, Optional

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import get_settings


class Base(DeclarativeBase):
    """Declarative base for stored documents."""


def _engine_options(url: str) -> dict[str, Any]:
    """Pool arguments for a connection string."""
    settings = get_settings()
    if not url.startswith("sqlite"):
        return {
            "pool_size": settings.db_pool_size,
            "max_overflow": settings.db_max_overflow,
            "pool_pre_ping": settings.db_pool_pre_ping,
        }

    # Request threads share SQLite connections
    options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # An in-memory database lives only as long as its one connection
        options["poolclass"] = StaticPool
    return options


class DatabaseManager:
    """Process-wide engine and session factory, created once at startup."""

    _instance: Optional["DatabaseManager"] = None

    def __new__(cls) -> "DatabaseManager":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance.engine = None
            cls._instance.SessionLocal = None
        return cls._instance

    engine: Optional[Engine]
    SessionLocal: Optional[sessionmaker]

    def initialize(self, database_url: str | None = None) -> None:
        """Create the engine. A second call is a no-op until ``reset``."""
        if self.engine is not None:
            return

        url = database_url or get_settings().database_url
        self.engine = create_engine(url, echo=get_settings().debug, **_engine_options(url))
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)

    def create_all_tables(self) -> None:
        """Create missing tables. Existing tables are left as they are."""
        Base.metadata.create_all(bind=self._require_engine())

    def check_connection(self) -> None:
        """
        Run ``SELECT 1`` once.

        Raises:
            sqlalchemy.exc.SQLAlchemyError: The store is unreachable.
        """
        with self._require_engine().connect() as conn:
            conn.execute(text("SELECT 1"))

    def health_check(self) -> tuple[bool, str | None]:
        """``(healthy, error)`` for the readiness endpoint."""
        if self.engine is None:
            return False, "Database not initialized"
        try:
            self.check_connection()
        except SQLAlchemyError as e:
            return False, str(e)
        return True, None

    def reset(self) -> None:
        """Dispose the engine so the next ``initialize`` starts fresh."""
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self.SessionLocal = None

    def _require_engine(self) -> Engine:
        if self.engine is None:
            raise RuntimeError("DatabaseManager not initialized. Call initialize() first.")
        return self.engine


db = DatabaseManager()


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency: one session per request, committed when the request
    succeeds and rolled back when it raises.
    """
    if db.SessionLocal is None:
        raise RuntimeError("DatabaseManager not initialized. Call initialize() first.")
    session = db.SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


__all__ = ["Base", "DatabaseManager", "db", "get_db"]
