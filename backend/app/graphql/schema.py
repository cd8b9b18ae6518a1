"""
GraphQL schema: root Query and Mutation, error logging, and the FastAPI router.

Resolvers are thin: they pull the request's SQLAlchemy session out of the
context and run the matching ``issue_service`` call in the threadpool, so
store I/O never blocks the event loop. A per-request lock keeps sibling
root fields from using the session at the same time.
"""

import asyncio
from typing import Any, Callable, Dict, List, Optional, TypeVar

import strawberry
from fastapi import Depends
from graphql import GraphQLError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool
from strawberry import UNSET
from strawberry.fastapi import GraphQLRouter
from strawberry.types import ExecutionContext, Info

from core.db import get_db
from core.errors import IssueTrackerError
from core.logging import get_logger

from ..services import issue_service
from .scalars import Date
from .types import DashboardStatsType, IssueType

logger = get_logger("api.graphql")

R = TypeVar("R")


def build_context(session: Session) -> Dict[str, Any]:
    """GraphQL context for one request."""
    return {"db": session, "db_lock": asyncio.Lock()}


async def _call(info: Info, func: Callable[..., R], *args: Any, **kwargs: Any) -> R:
    """Run a service function against the request session, off the event loop."""
    async with info.context["db_lock"]:
        return await run_in_threadpool(func, info.context["db"], *args, **kwargs)


def _optional(issue: Optional[Dict[str, Any]]) -> Optional[IssueType]:
    return IssueType.from_document(issue) if issue is not None else None


@strawberry.type
class Query:
    @strawberry.field(description="All issues, unpaginated")
    async def issues(self, info: Info) -> List[IssueType]:
        issues = await _call(info, issue_service.list_issues)
        return [IssueType.from_document(issue) for issue in issues]

    @strawberry.field(description="A single issue, or null if it does not exist")
    async def issue(self, info: Info, id: strawberry.ID) -> Optional[IssueType]:
        return _optional(await _call(info, issue_service.get_issue, id))

    @strawberry.field
    async def dashboard_stats(self, info: Info) -> DashboardStatsType:
        return DashboardStatsType(**await _call(info, issue_service.dashboard_stats))


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def add_issue(
        self,
        info: Info,
        title: str,
        description: str,
        assigned_to: str,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        tags: Optional[List[str]] = None,
        due_date: Optional[Date] = None,
    ) -> IssueType:
        issue = await _call(
            info,
            issue_service.add_issue,
            title=title,
            description=description,
            assigned_to=assigned_to,
            status=status,
            priority=priority,
            tags=tags,
            due_date=due_date,
        )
        return IssueType.from_document(issue)

    @strawberry.mutation(description="Partial update; omitted fields are left unchanged")
    async def update_issue(
        self,
        info: Info,
        id: strawberry.ID,
        title: Optional[str] = UNSET,
        description: Optional[str] = UNSET,
        status: Optional[str] = UNSET,
        priority: Optional[str] = UNSET,
        assigned_to: Optional[str] = UNSET,
        tags: Optional[List[str]] = UNSET,
        due_date: Optional[Date] = UNSET,
    ) -> Optional[IssueType]:
        supplied = {
            "title": title,
            "description": description,
            "status": status,
            "priority": priority,
            "assigned_to": assigned_to,
            "tags": tags,
            "due_date": due_date,
        }
        fields = {key: value for key, value in supplied.items() if value is not UNSET}
        return _optional(await _call(info, issue_service.update_issue, id, **fields))

    @strawberry.mutation(description="Always true, whether or not the issue existed")
    async def delete_issue(self, info: Info, id: strawberry.ID) -> bool:
        return await _call(info, issue_service.delete_issue, id)

    @strawberry.mutation
    async def add_comment(self, info: Info, issue_id: strawberry.ID, text: str, author: str) -> IssueType:
        issue = await _call(info, issue_service.add_comment, issue_id, text, author)
        return IssueType.from_document(issue)

class IssueTrackerSchema(strawberry.Schema):
    """Schema that reports resolver errors through structlog."""

    def process_errors(
        self,
        errors: List[GraphQLError],
        execution_context: Optional[ExecutionContext] = None,
    ) -> None:
        for error in errors:
            original = error.original_error
            fields = {
                "message": error.message,
                "path": error.path,
                "code": (error.extensions or {}).get("code"),
            }
            if original is None or isinstance(original, IssueTrackerError):
                logger.warning("graphql_error", **fields)
            else:
                logger.error(
                    "graphql_error",
                    error_type=type(original).__name__,
                    exc_info=original,
                    **fields,
                )


schema = IssueTrackerSchema(query=Query, mutation=Mutation)


async def get_context(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """Per-request GraphQL context carrying the request's database session."""
    return build_context(db)


def create_graphql_router(graphiql: bool = True) -> GraphQLRouter:
    """Router serving POST operations and, when enabled, the GraphiQL page on GET."""
    return GraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide="graphiql" if graphiql else None,
    )
