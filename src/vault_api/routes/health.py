"""Health check routes."""

import logging

from fastapi import APIRouter, Request, Response, status
from vault_shared.contracts import HealthResponse

from vault_api.config import get_settings
from vault_api.db.session import Database

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    response_model_exclude_none=True,
    responses={503: {"model": HealthResponse}},
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    """
    Liveness endpoint backed by a database probe.

    Returns 503 when the database is not initialised or does not answer
    ``SELECT 1`` within the health timeout.
    """
    db: Database | None = getattr(request.app.state, "database", None)
    if db is None or not db.is_connected:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(
            status="unhealthy", error="database client not initialized"
        )

    try:
        await db.ping(get_settings().health_timeout_seconds)
    except Exception as exc:
        logger.warning("Database health probe failed: %r", exc)
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="unhealthy", error="database connection failed")

    return HealthResponse(status="healthy")
