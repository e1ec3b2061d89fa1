"""
API Middleware

Request logging. Each request gets an id (taken from ``X-Request-ID`` when the
caller sends one) and the requested property and mode are bound to the
structlog context, so pipeline logs for the request carry them too.
"""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
import structlog

logger = structlog.get_logger(__name__)

# Query parameters copied into the log context
CONTEXT_PARAMS = {"propertyId": "requested_property", "mode": "requested_mode"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each API request with its outcome and duration"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex

        context = {"request_id": request_id}
        for param, key in CONTEXT_PARAMS.items():
            value = request.query_params.get(param)
            if value:
                context[key] = value

        with structlog.contextvars.bound_contextvars(**context):
            logger.debug("Request started", method=request.method, path=request.url.path)
            response = await call_next(request)
            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)

            log = logger.warning if response.status_code >= 400 else logger.info
            log(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=duration_ms,
            )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        return response
