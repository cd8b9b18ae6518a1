import os
import sys
from collections.abc import Callable, Iterator
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.append(PROJECT_ROOT)

from backend.app.database import db, get_db  # noqa: E402
from backend.app.main import create_app  # noqa: E402


@pytest.fixture
def test_app_client(test_db) -> Iterator[tuple[TestClient, sessionmaker]]:
    db_url, TestingSessionLocal, engine = test_db

    app = create_app()

    def override_get_db() -> Iterator[Session]:
        session = TestingSessionLocal()
        try:
            yield session
            session.commit()  # Auto-commit on success like production
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client, TestingSessionLocal

    db.reset()


@pytest.fixture
def graphql(test_app_client) -> Callable[..., dict[str, Any]]:
    """POST a GraphQL document and return the decoded response body."""
    client, _ = test_app_client

    def execute(query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        resp = client.post("/graphql", json={"query": query, "variables": variables or {}})
        assert resp.status_code == 200, resp.text
        return resp.json()

    return execute


@pytest.fixture
def create_issue(graphql) -> Callable[..., dict[str, Any]]:
    """Create an issue through the API and return the addIssue payload."""

    def _create(**overrides: Any) -> dict[str, Any]:
        variables = {
            "title": "Bug A",
            "description": "desc",
            "status": "open",
            "priority": "high",
            "assignedTo": "alice",
            **overrides,
        }
        body = graphql(ADD_ISSUE, variables)
        assert "errors" not in body, body
        return body["data"]["addIssue"]

    return _create


ISSUE_FIELDS = """
    id
    title
    description
    status
    priority
    assignedTo
    tags
    dueDate
    createdAt
    updatedAt
    comments { id text author createdAt }
"""

ADD_ISSUE = f"""
mutation AddIssue(
    $title: String!
    $description: String!
    $assignedTo: String!
    $status: String
    $priority: String
    $tags: [String!]
    $dueDate: Date
) {{
    addIssue(
        title: $title
        description: $description
        assignedTo: $assignedTo
        status: $status
        priority: $priority
        tags: $tags
        dueDate: $dueDate
    ) {{ {ISSUE_FIELDS} }}
}}
"""
