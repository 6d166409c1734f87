"""
GeoFeatures Backend — Request ID Middleware
=============================================

What:  Assigns a correlation ID to each incoming request and makes it visible
       on every log line emitted while that request is handled.
How:   RequestIDMiddleware reads X-Request-ID (or generates a short UUID),
       stores it in a ContextVar and echoes it back in the response header.
       RequestIDLogFilter copies the ContextVar onto each LogRecord as
       `request_id`, so the format string can reference %(request_id)s.

Outside a request (startup, shutdown) the field renders as "-".
"""

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"
NO_REQUEST_ID = "-"


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class RequestIDLogFilter(logging.Filter):
    """Stamps the current request ID onto every record it sees."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or NO_REQUEST_ID
        return True


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Tags every request/response pair with an ID.

    A blank or missing X-Request-ID header gets a fresh ID; a client-supplied
    one is reused so traces can start in the browser.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER, "").strip() or new_request_id()

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
