"""
Middleware for request correlation ID tracking.

HTTP requests get their id from the ``X-Correlation-ID`` header or a fresh
8-char UUID prefix. WebSocket connections set the same context variable
from their upgrade headers (see ``marketplace.api.ws.websocket``).
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

CORRELATION_ID_HEADER = "X-Correlation-ID"
CORRELATION_ID_LENGTH = 8

correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add correlation IDs to requests for distributed tracing.

    The id is stored in ``request.state.request_id``, in a context variable
    for logging, and echoed back in the response headers.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        cid = request.headers.get(
            CORRELATION_ID_HEADER, str(uuid.uuid4())
        )[:CORRELATION_ID_LENGTH]

        request.state.request_id = cid
        correlation_id.set(cid)

        response = await call_next(request)
        response.headers[CORRELATION_ID_HEADER] = cid

        return response


def set_correlation_id(cid: str) -> None:
    """Bind a correlation id to the current task (used by WebSocket endpoints)."""
    correlation_id.set(cid[:CORRELATION_ID_LENGTH])


def get_correlation_id() -> str:
    """
    Get the correlation ID for the current request context.

    Returns:
        The correlation ID string, or empty string if not set.
    """
    return correlation_id.get()
