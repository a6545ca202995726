"""
Middleware for request correlation ID tracking.

This middleware adds correlation IDs to requests so that log lines of one
media server callback can be tied together, and to the media server's own
logs when it sends the X-Correlation-ID header.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

# Context variable for storing correlation ID per request or connection
correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


class CorrelationIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add correlation IDs to HTTP requests.

    This middleware:
    - Extracts correlation ID from X-Correlation-ID header or generates new 8-char UUID
    - Limits all correlation IDs to 8 characters for consistency
    - Stores correlation ID in request.state.request_id
    - Stores correlation ID in context variable for access in handlers/logging
    - Adds correlation ID to response headers for client tracking

    WebSocket scopes are not handled by BaseHTTPMiddleware; the signaling
    endpoint sets its own correlation ID via set_correlation_id().
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        cid = request.headers.get("X-Correlation-ID", str(uuid.uuid4())[:8])
        cid = cid[:8]

        request.state.request_id = cid
        correlation_id.set(cid)

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = cid

        return response


def get_correlation_id() -> str:
    """
    Get the correlation ID for the current request context.

    Returns:
        The correlation ID string, or empty string if not set.
    """
    return correlation_id.get()


def set_correlation_id(cid: str) -> None:
    """Set the correlation ID for the current task (used by WebSocket sessions)."""
    correlation_id.set(cid[:8])
