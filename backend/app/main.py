"""
FastAPI application entry point.

Serves the GraphQL endpoint at /graphql (POST for operations, GET for the
GraphiQL page) plus liveness/readiness probes. Uses structured logging from
the core.logging module.
"""

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from core.config import get_settings
from core.logging import RequestLoggingMiddleware, configure_logging, get_logger

from .database import db
from .error_handlers import register_exception_handlers
from .graphql import create_graphql_router

# Configure structured logging
settings = get_settings()
configure_logging(
    level="DEBUG" if settings.debug else settings.log_level,
    json_output=settings.log_json,
)
logger = get_logger("api")


def connect_database(database_url: str | None = None) -> None:
    """
    Connect to the document store and create missing tables.

    There is no retry: if the first connection attempt fails the process
    exits with status 1.
    """
    db.initialize(database_url or settings.database_url)
    try:
        db.check_connection()
    except SQLAlchemyError as e:
        logger.error("database_connection_failed", error=str(e), error_type=type(e).__name__)
        raise SystemExit(1) from e

    db.create_all_tables()
    logger.info("database_connected")


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name, debug=settings.debug)

    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Credentials cannot be combined with a wildcard origin
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # GZip compression for responses > 500 bytes
    app.add_middleware(GZipMiddleware, minimum_size=500)

    # Structured request logging middleware (binds and echoes X-Request-ID)
    app.add_middleware(RequestLoggingMiddleware)

    # Exception handlers
    register_exception_handlers(app)

    @app.on_event("startup")
    async def startup_event():
        """Connect to the document store before serving requests."""
        logger.info("app_startup", app_name=settings.app_name)
        connect_database()

    @app.on_event("shutdown")
    async def shutdown_event():
        """Release database connections."""
        logger.info("app_shutdown")
        db.reset()

    @app.get("/health", tags=["health"])
    def health_check():
        """Liveness probe. Returns minimal information."""
        return {"status": "ok"}

    @app.get("/health/ready", tags=["health"])
    def readiness_check():
        """
        Readiness probe.

        Returns 200 if the document store answers, 503 if not.
        """
        healthy, error = db.health_check()
        checks = {"database": healthy}

        if not healthy:
            logger.warning("readiness_check_failed", error=error)
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "not_ready", "checks": checks},
            )

        return {"status": "ready", "checks": checks}

    app.include_router(
        create_graphql_router(graphiql=settings.graphiql),
        prefix=settings.graphql_path,
        tags=["graphql"],
    )

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn on HOST:PORT."""
    import uvicorn

    logger.info(
        "server_starting",
        url=f"http://{settings.host}:{settings.port}{settings.graphql_path}",
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
