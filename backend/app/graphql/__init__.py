"""
GraphQL API for the issue tracker.

Provides:
- The ``Date`` scalar
- ``Issue``, ``Comment`` and ``DashboardStats`` types
- Query and Mutation resolvers
- The FastAPI router mounted at ``/graphql``
"""

from .scalars import Date
from .schema import create_graphql_router, schema

__all__ = [
    "Date",
    "schema",
    "create_graphql_router",
]
