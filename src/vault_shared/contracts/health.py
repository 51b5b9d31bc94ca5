"""Health contract payloads."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Liveness probe response."""

    status: str = "healthy"
    error: str | None = None


__all__ = ["HealthResponse"]
