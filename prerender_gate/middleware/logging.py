"""
Prerender Gate - Request Logging Middleware
============================================

What:  One access log line per HTTP request.
How:   Measures the time spent in the rest of the stack and logs method,
       path, status, duration, whether a snapshot was served and the client
       User-Agent.
When:  Registered outside PrerenderMiddleware so snapshot responses and
       502s are logged too.

Log line:
    GET /products/42 200 812.4ms snapshot=yes ua="Mozilla/5.0 (compatible; Googlebot/2.1)"

Level by status: 5xx → ERROR, 4xx → WARNING, otherwise INFO.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("prerender_gate.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration; skips /health."""

    SKIPPED_PATHS = {"/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()
        method = request.method
        path = request.url.path

        if path in self.SKIPPED_PATHS:
            return await call_next(request)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        prerendered = getattr(request.state, "prerendered", False)
        user_agent = request.headers.get("user-agent", "")

        logger.log(
            log_level,
            '%s %s %d %.1fms snapshot=%s ua="%s"',
            method,
            path,
            status,
            duration_ms,
            "yes" if prerendered else "no",
            user_agent,
            extra={
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "prerendered": prerendered,
            },
        )

        return response
