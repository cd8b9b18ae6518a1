"""
Pytest fixtures for issue tracker tests.

Every test gets a fresh in-memory SQLite document store.
"""

import os

# Must be set before core.config.get_settings() is first called
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime, timezone  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from core.db import Base  # noqa: E402
from core.models import Issue  # noqa: E402
from core.repositories import IssueRepository  # noqa: E402


@pytest.fixture(scope="function")
def test_db():
    """Create a fresh in-memory database for each test."""
    db_url = "sqlite://"
    engine = create_engine(
        db_url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    yield db_url, TestingSessionLocal, engine

    engine.dispose()


@pytest.fixture
def test_session(test_db):
    """Get a test session from the test database."""
    _, TestingSessionLocal, _ = test_db
    session = TestingSessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture
def sample_issue_fields():
    """Minimal valid issue, model attribute names."""
    return {
        "title": "Bug A",
        "description": "desc",
        "assigned_to": "alice",
        "status": "open",
        "priority": "high",
        "tags": ["backend", "urgent"],
    }


@pytest.fixture
def make_issue(test_session, sample_issue_fields):
    """Insert an issue directly through the repository."""

    def _make(**overrides) -> Issue:
        fields = {**sample_issue_fields, **overrides}
        issue = IssueRepository(test_session).create(**fields)
        test_session.commit()
        return issue

    return _make


@pytest.fixture
def long_ago():
    return datetime(2020, 1, 1, tzinfo=timezone.utc)
