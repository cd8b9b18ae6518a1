import asyncio
import threading

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from backend.app import main
from backend.app.database import db
from backend.app.graphql import schema
from backend.app.graphql.schema import build_context
from backend.app.services import issue_service


def test_health(test_app_client):
    client, _ = test_app_client

    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_readiness_reports_database(test_app_client):
    client, _ = test_app_client

    resp = client.get("/health/ready")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ready", "checks": {"database": True}}


def test_readiness_is_503_when_store_unreachable(test_app_client, monkeypatch):
    client, _ = test_app_client

    def refuse():
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    monkeypatch.setattr(db, "check_connection", refuse)

    resp = client.get("/health/ready")

    assert resp.status_code == 503
    assert resp.json() == {"status": "not_ready", "checks": {"database": False}}


def test_request_id_is_echoed(test_app_client):
    client, _ = test_app_client

    resp = client.get("/health", headers={"X-Request-ID": "abc123"})

    assert resp.headers["x-request-id"] == "abc123"


def test_request_id_generated_when_absent(test_app_client):
    client, _ = test_app_client

    resp = client.get("/health")

    assert resp.headers["x-request-id"]


def test_unknown_route_uses_error_payload(test_app_client):
    client, _ = test_app_client

    resp = client.get("/nope")

    assert resp.status_code == 404
    assert resp.json() == {"detail": "Not Found", "status_code": 404}


def test_unexpected_error_is_generic_500(test_app_client):
    client, _ = test_app_client

    def explode():
        raise RuntimeError("secret detail")

    client.app.add_api_route("/explode", explode)
    safe_client = TestClient(client.app, raise_server_exceptions=False)

    resp = safe_client.get("/explode")

    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal server error", "status_code": 500}


def test_graphiql_page_served(test_app_client):
    client, _ = test_app_client

    resp = client.get("/graphql", headers={"Accept": "text/html"})

    assert resp.status_code == 200
    assert "graphiql" in resp.text.lower()


def test_connect_database_exits_when_store_unreachable(monkeypatch):
    db.reset()

    def refuse():
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    monkeypatch.setattr(db, "check_connection", refuse)

    with pytest.raises(SystemExit) as exc_info:
        main.connect_database("sqlite://")

    assert exc_info.value.code == 1
    db.reset()


def test_schema_declares_expected_surface():
    sdl = schema.as_str()

    assert "scalar Date" in sdl
    for field in ("issues:", "issue(id: ID!)", "dashboardStats:"):
        assert field in sdl
    for field in ("addIssue(", "updateIssue(", "deleteIssue(id: ID!): Boolean!", "addComment("):
        assert field in sdl


def test_missing_required_argument_is_rejected_before_resolvers(test_session):
    result = asyncio.run(
        schema.execute(
            'mutation { addIssue(title: "t", description: "d") { id } }',
            context_value=build_context(test_session),
        )
    )

    assert result.errors
    assert "assignedTo" in result.errors[0].message


def test_resolvers_run_off_the_event_loop_thread(test_session, monkeypatch):
    seen = {}
    list_issues = issue_service.list_issues

    def recording_list_issues(session):
        seen["thread"] = threading.get_ident()
        return list_issues(session)

    monkeypatch.setattr(issue_service, "list_issues", recording_list_issues)

    async def run():
        seen["loop_thread"] = threading.get_ident()
        return await schema.execute("{ issues { id } }", context_value=build_context(test_session))

    result = asyncio.run(run())

    assert result.errors is None
    assert result.data == {"issues": []}
    assert seen["thread"] != seen["loop_thread"]


def test_sibling_root_fields_share_the_request_session(make_issue, test_session):
    make_issue(status="closed")

    result = asyncio.run(
        schema.execute(
            "{ issues { status } dashboardStats { totalIssues closedIssues } }",
            context_value=build_context(test_session),
        )
    )

    assert result.errors is None
    assert result.data["issues"] == [{"status": "closed"}]
    assert result.data["dashboardStats"] == {"totalIssues": 1, "closedIssues": 1}
