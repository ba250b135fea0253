"""
Docsite Backend - Context Middleware
=====================================

What:  Contextualizes every request before any page-level middleware runs.
How:   Splits the URL path into language, version and canonical path, looks
       up the page, and stores the resulting RequestContext on
       `request.state.context`. Paths that are not pages (health checks,
       API docs, typos) get a context whose `page` is None.
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger(__name__)


class ContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        site = request.app.state.site
        request.state.context = site.build_context(request.url.path)
        logger.debug(
            "Context for %s: language=%s version=%s page=%s",
            request.url.path,
            request.state.context.language,
            request.state.context.current_version.name,
            request.state.context.page.path if request.state.context.page else None,
        )
        return await call_next(request)
