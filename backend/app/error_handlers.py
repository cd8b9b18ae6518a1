"""
JSON error responses for requests that fail outside GraphQL execution.

GraphQL resolver errors never reach these handlers: they are returned in the
GraphQL ``errors`` array with HTTP 200. What lands here is routing errors
(404, 405) and anything unexpected, rendered as
``{"detail": ..., "status_code": ...}``. Unhandled exceptions keep their
details in the log and answer with a generic message.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.logging import get_logger

logger = get_logger("backend.errors")


def _error_response(status_code: int, detail: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "status_code": status_code},
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning("http_exception", path=request.url.path, status_code=exc.status_code)
        return _error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("unhandled_exception", path=request.url.path, error_type=type(exc).__name__)
        return _error_response(500, "Internal server error")
