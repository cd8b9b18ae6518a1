"""
Structured logging for the issue tracker.

Console output while developing, one JSON object per line otherwise
(``LOG_JSON=true``). Every entry carries ``app`` and, inside a request,
the ``request_id`` bound by ``RequestLoggingMiddleware``.
"""

import logging
import sys
import time
import uuid
from collections.abc import Callable, MutableMapping
from functools import wraps
from typing import Any, TypeVar

import structlog
from structlog.types import Processor

F = TypeVar("F", bound=Callable[..., Any])

REQUEST_ID_HEADER = b"x-request-id"


def _add_app_name(logger: Any, method_name: str, event_dict: MutableMapping[str, Any]):
    event_dict["app"] = "issue_tracker"
    return event_dict


def _renderer(json_output: bool) -> list[Processor]:
    if json_output:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(exception_formatter=structlog.dev.plain_traceback)]


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """Route structlog through the stdlib root logger at ``level``."""
    logging.basicConfig(format="%(message)s", stream=sys.stdout)
    logging.getLogger().setLevel(getattr(logging, level.upper(), logging.INFO))
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            _add_app_name,
            *_renderer(json_output),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)  # type: ignore[no-any-return]


def log_timing(operation: str, logger: structlog.stdlib.BoundLogger | None = None) -> Callable[[F], F]:
    """
    Log how long each call takes, as ``operation_complete`` or
    ``operation_failed``.

    Usage:
        @log_timing("dashboard_stats")
        def dashboard_stats(session):
            ...
    """

    def decorator(func: F) -> F:
        _logger = logger or get_logger(func.__module__)

        @wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _logger.error(
                    "operation_failed",
                    operation=operation,
                    duration_seconds=round(time.perf_counter() - start, 3),
                    error_type=type(e).__name__,
                )
                raise
            _logger.info(
                "operation_complete",
                operation=operation,
                duration_seconds=round(time.perf_counter() - start, 3),
            )
            return result

        return wrapper  # type: ignore

    return decorator


class RequestLoggingMiddleware:
    """
    ASGI middleware logging each HTTP request once it completes.

    Reuses an incoming ``X-Request-ID`` header or generates one, binds it to
    the log context for the request and echoes it on the response.
    """

    def __init__(self, app):
        self.app = app
        self.logger = get_logger("http")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        incoming = dict(scope.get("headers") or []).get(REQUEST_ID_HEADER)
        request_id = incoming.decode("latin-1") if incoming else uuid.uuid4().hex[:8]
        structlog.contextvars.bind_contextvars(request_id=request_id)

        response_status = 500
        start = time.perf_counter()

        async def send_with_request_id(message):
            nonlocal response_status
            if message["type"] == "http.response.start":
                response_status = message["status"]
                message["headers"] = [
                    *message.get("headers", []),
                    (REQUEST_ID_HEADER, request_id.encode("latin-1")),
                ]
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            if response_status >= 500:
                log = self.logger.error
            elif response_status >= 400:
                log = self.logger.warning
            else:
                log = self.logger.info
            log(
                "request_complete",
                method=scope.get("method"),
                path=scope.get("path"),
                status_code=response_status,
                duration_seconds=round(time.perf_counter() - start, 3),
            )
            structlog.contextvars.clear_contextvars()


__all__ = [
    "configure_logging",
    "get_logger",
    "log_timing",
    "RequestLoggingMiddleware",
]
