# ==== CORRELATION ID MIDDLEWARE ==== #

"""
Correlation ID middleware for request tracing.

Propagates or generates ``X-Correlation-Id``, wraps each request in a span
and records request latency labelled by method, top-level API resource and
status code.
"""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from procurement.observability.metrics import http_request_latency_seconds
from procurement.observability.tracing import get_tracer


# ==== MODULE INITIALIZATION ==== #

tracer = get_tracer(__name__)

CORRELATION_HEADER = "X-Correlation-Id"


def resource_label(path: str) -> str:
    """
    Collapse a request path to a low-cardinality metric label.

    ``/api/po/PO/2024/001`` becomes ``po``; paths outside ``/api`` keep
    their first segment, and ``/`` becomes ``root``.
    """
    parts = [part for part in path.split("/") if part]
    if not parts:
        return "root"
    if parts[0] == "api" and len(parts) > 1:
        return parts[1]
    return parts[0]


# ==== CORRELATION MIDDLEWARE CLASS ==== #

class CorrelationMiddleware(BaseHTTPMiddleware):
    """Attach a correlation id to every request and response."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process request with correlation ID tracking and observability.

        Args:
            request (Request): Incoming HTTP request
            call_next (Callable): Next middleware/handler in chain

        Returns:
            Response: HTTP response with correlation ID header
        """
        # --► CORRELATION ID MANAGEMENT
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id

        start_time = time.perf_counter()

        with tracer.start_as_current_span("http_request") as span:
            span.set_attribute("http.method", request.method)
            span.set_attribute("http.url", str(request.url))
            span.set_attribute("correlation_id", correlation_id)

            response = await call_next(request)
            response.headers[CORRELATION_HEADER] = correlation_id

            # --► METRICS COLLECTION
            http_request_latency_seconds.labels(
                method=request.method,
                resource=resource_label(request.url.path),
                status_code=str(response.status_code)
            ).observe(time.perf_counter() - start_time)

            span.set_attribute("http.status_code", response.status_code)
            return response
