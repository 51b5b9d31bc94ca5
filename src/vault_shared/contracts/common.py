"""Contract payloads shared by every route."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error body returned for every failed request."""

    error: str


class MessageResponse(BaseModel):
    """Plain confirmation body."""

    message: str


__all__ = ["ErrorResponse", "MessageResponse"]
