"""simple-vault API server."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from vault_api.config import get_settings
from vault_api.db.session import Database
from vault_api.errors import (
    VaultError,
    request_validation_handler,
    unhandled_error_handler,
    vault_error_handler,
)
from vault_api.logging import configure_logging
from vault_api.middleware import CorrelationIDMiddleware, RequestDeadlineMiddleware
from vault_api.routes import health_router, v1_public_router, v1_router
from vault_api.services import AuthServiceClient

# Configure logging (supports VAULT_LOG_FORMAT=json for structured output).
_boot_settings = get_settings()
configure_logging(log_format=_boot_settings.log_format, debug=_boot_settings.debug)
logger = logging.getLogger(__name__)

REQUIRED_TABLES = {"secrets"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""

    # Startup
    logger.info("Starting simple-vault API server...")

    settings = get_settings()

    # Initialize database (defaults to SQLite if not configured)
    db = Database(settings.effective_database_url, echo=settings.debug)
    await db.connect()

    if settings.is_sqlite:
        logger.info("Database connected (SQLite)")
        # Auto-create tables and indexes for SQLite
        await db.create_tables()
    else:
        logger.info("Database connected")
        missing_tables = await db.get_missing_tables(REQUIRED_TABLES)
        if missing_tables:
            await db.disconnect()
            raise RuntimeError(
                "Database schema is missing required tables: "
                + ", ".join(missing_tables)
                + ". Run Alembic migrations (e.g. `alembic upgrade head`) before starting."
            )

    auth_client = AuthServiceClient(
        settings.auth_service_url, timeout=settings.auth_timeout_seconds
    )
    logger.info("Using auth service at %s", auth_client.base_url)

    app.state.database = db
    app.state.auth_client = auth_client

    yield

    # Shutdown
    logger.info("Shutting down simple-vault API server...")

    await auth_client.aclose()
    app.state.auth_client = None

    await db.disconnect()
    app.state.database = None
    logger.info("Database disconnected")


def create_app() -> FastAPI:
    """Build the FastAPI application with middleware, handlers and routes."""
    settings = get_settings()
    application = FastAPI(
        title="simple-vault API",
        description="Per-user secret storage backed by an external auth service",
        version=settings.version,
        lifespan=lifespan,
        # Interactive docs and the schema stay off in production.
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
        openapi_url=None if settings.is_production else "/openapi.json",
    )

    application.add_exception_handler(VaultError, vault_error_handler)
    application.add_exception_handler(RequestValidationError, request_validation_handler)
    application.add_exception_handler(Exception, unhandled_error_handler)

    # Starlette runs the last-added middleware first: CORS, then request ID,
    # then the deadline closest to the routes.
    application.add_middleware(
        RequestDeadlineMiddleware, timeout_seconds=settings.request_timeout_seconds
    )
    application.add_middleware(CorrelationIDMiddleware)

    allow_origins = settings.cors_allow_origins_list
    allow_credentials = settings.cors_allow_credentials and "*" not in allow_origins
    if settings.cors_allow_credentials and "*" in allow_origins:
        logger.warning(
            "CORS credentials disabled because wildcard origins are configured. "
            "Set VAULT_CORS_ALLOW_ORIGINS to explicit origins to enable credentials."
        )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(health_router)
    application.include_router(v1_public_router)
    application.include_router(v1_router)

    return application


app = create_app()


def main():
    """Run the server."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "vault_api.main:app",
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    main()
