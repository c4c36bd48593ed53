"""
HTTP middleware: request logging and response hardening.
"""

import time
from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from recipebox.core.logging import bind_correlation_id, log_request, log_response

CORRELATION_HEADER = "X-Correlation-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request and its outcome under a correlation id.

    The id comes from the caller's ``X-Correlation-ID`` header when present
    and is echoed back on the response together with ``X-Response-Time``.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = bind_correlation_id(request.headers.get(CORRELATION_HEADER))
        log_request(request)

        start_time = time.time()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            elapsed_ms = (time.time() - start_time) * 1000
            log_response(request, status_code, elapsed_ms)

        response.headers[CORRELATION_HEADER] = correlation_id
        response.headers["X-Response-Time"] = f"{elapsed_ms:.1f}ms"
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds security headers; responses to authenticated requests are never cached."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if "authorization" in request.headers:
            response.headers["Cache-Control"] = "no-store"

        return response
