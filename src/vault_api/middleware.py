"""Server middleware."""

import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from vault_api.errors import UpstreamFailure

CORRELATION_ID_HEADER = "X-Request-ID"

correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)

# Monotonic instant after which outbound calls for this request give up.
request_deadline_var: ContextVar[float | None] = ContextVar(
    "request_deadline", default=None
)


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """Attach a request ID to every request/response cycle.

    A client-supplied ``X-Request-ID`` is kept, otherwise a UUID4 hex is
    generated. The ID lands on ``request.state.correlation_id`` and in a
    ``ContextVar`` read by ``CorrelationIDFilter``.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        cid = request.headers.get(CORRELATION_ID_HEADER) or uuid.uuid4().hex
        request.state.correlation_id = cid
        correlation_id_var.set(cid)
        response = await call_next(request)
        response.headers[CORRELATION_ID_HEADER] = cid
        return response


class RequestDeadlineMiddleware(BaseHTTPMiddleware):
    """Install one deadline per request for ``call_timeout`` to honour."""

    def __init__(self, app: ASGIApp, *, timeout_seconds: float) -> None:
        super().__init__(app)
        self.timeout_seconds = timeout_seconds

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        token = request_deadline_var.set(time.monotonic() + self.timeout_seconds)
        try:
            return await call_next(request)
        finally:
            request_deadline_var.reset(token)


def call_timeout(cap: float) -> float:
    """Timeout for the next outbound call: ``cap`` or less if the request is late.

    Raises ``UpstreamFailure`` once the request deadline has already passed.
    Outside a request (no deadline installed) ``cap`` is returned unchanged.
    """
    deadline = request_deadline_var.get()
    if deadline is None:
        return cap
    remaining = deadline - time.monotonic()
    if remaining <= 0:
        raise UpstreamFailure("Request deadline exceeded")
    return min(cap, remaining)


class CorrelationIDFilter(logging.Filter):
    """Logging filter that injects ``correlation_id`` into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get()  # type: ignore[attr-defined]
        return True
