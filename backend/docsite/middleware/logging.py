"""
Docsite Backend - Request Logging Middleware
=============================================

What:  One access-log line per page request, on the `docsite.access` logger.

Logged fields:
    method, path, status, duration, request ID, language, and the learning
    track the page was served in (or `-`). The track name makes it possible
    to see how often readers follow tracks versus landing on guides directly.

Not logged: query strings beyond `learn`, headers, client addresses.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from docsite.middleware.request_id import request_id_var

logger = logging.getLogger("docsite.access")

# Probes and API docs are too frequent or too boring to log
SKIPPED_PATHS = {"/health", "/api/docs", "/api/openapi.json"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        # Filled in by ContextMiddleware / LearningTrackMiddleware further in
        context = getattr(request.state, "context", None)
        language = context.language if context is not None else "-"
        track = context.current_learning_track if context is not None else None
        track_name = f"{track.track_product}/{track.track_name}" if track else "-"

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        rid = request_id_var.get("")
        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] lang=%s track=%s",
            request.method,
            request.url.path,
            status,
            duration_ms,
            rid,
            language,
            track_name,
            extra={
                "request_id": rid,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "language": language,
                "learning_track": track_name,
            },
        )
        return response
