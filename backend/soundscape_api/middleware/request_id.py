"""
MRI Soundscape Backend - Request ID Middleware
===============================================

What:  Assigns an ID to each incoming request and echoes it in the response.
How:   Reuses the client's X-Request-ID header or generates a short UUID,
       stores it in a ContextVar and on request.state, returns it in a header.
Who:   Outermost application middleware, so the rate limiter and the
       exception handlers all see the ID.

Every log line and error body produced while handling a request carries
the same ID, so a browser error report can be matched to server logs.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local storage for the current request ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"


def get_request_id(request: Request) -> str:
    """
    The ID assigned to `request`.

    request.state lives in the ASGI scope shared by every layer, so this also
    works in the catch-all 500 handler, which runs in ServerErrorMiddleware
    outside the task that set the ContextVar.
    """
    return getattr(request.state, "request_id", "") or request_id_var.get("")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that assigns a unique ID to each request for tracing.

    Behavior:
        1. Use the client's X-Request-ID header when present
        2. Otherwise generate an 8-character UUID prefix
        3. Store in ContextVar (loggers, inner middleware) and request.state
           (routes, exception handlers)
        4. Add to response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())[:8]

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
