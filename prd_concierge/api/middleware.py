"""Request ID middleware for traceability."""

import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from prd_concierge.core.logging import LogContext

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a request id to request state, log records and the response."""

    async def dispatch(self, request: Request, call_next):
        # Honour an id supplied by an upstream proxy
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        with LogContext(request_id=request_id):
            response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
