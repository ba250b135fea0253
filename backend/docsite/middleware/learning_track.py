"""
Docsite Backend - Learning Track Middleware
============================================

What:  Attaches learning-track navigation to the request context.
Who:   Runs after ContextMiddleware, before the page route.

Behavior:
    - No context on the request    → ContextNotInitializedError (the
                                     middleware chain is misconfigured)
    - Context without a page       → context left untouched
    - Otherwise                    → `context.current_learning_track` set to
                                     the resolved track, or None

    The next stage always runs. A learning track that cannot be resolved
    only removes the banner and prev/next links from the page; it never
    fails the request.
"""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from docsite.exceptions import ContextNotInitializedError


class LearningTrackMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        context = getattr(request.state, "context", None)
        if context is None:
            raise ContextNotInitializedError(context={"path": request.url.path})

        if context.page is not None:
            resolver = request.app.state.site.learning_tracks
            context.current_learning_track = await resolver.resolve(
                context, request.query_params
            )

        return await call_next(request)
