"""
Docsite Backend - FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (`uvicorn docsite.main:app`) and by the tests.

Application Architecture:
    ┌─────────────────────────────────────────────────────────────┐
    │                        FastAPI App                          │
    │                                                             │
    │  Middleware Chain:                                          │
    │  ┌────────┐ ┌─────────┐ ┌─────────┐ ┌────────────────────┐  │
    │  │ Req ID │→│ Logging │→│ Context │→│ Learning Track     │  │
    │  └────────┘ └─────────┘ └─────────┘ └────────────────────┘  │
    │                                                             │
    │  Routes:                                                    │
    │  ┌──────────────┐ ┌────────────────────────────────────┐    │
    │  │ GET /health  │ │ GET /{path}  (page + track)        │    │
    │  └──────────────┘ └────────────────────────────────────┘    │
    │                                                             │
    │  Exception Handlers:                                        │
    │  ┌─────────────────────────────────────────────────────┐    │
    │  │ NotFound→404 │ DocsiteError→500 │ Exception→500     │    │
    │  └─────────────────────────────────────────────────────┘    │
    └─────────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (problems are logged, not fatal)
    3. Load pages and data from SITE_ROOT, unless a Site was injected
    Shutdown:
    1. Log shutdown complete
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from docsite import __version__
from docsite.config import settings
from docsite.exceptions import DataDirectoryError, DocsiteError, NotFoundError
from docsite.middleware.context import ContextMiddleware
from docsite.middleware.learning_track import LearningTrackMiddleware
from docsite.middleware.logging import RequestLoggingMiddleware
from docsite.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from docsite.routes import health, pages
from docsite.services.content_store import ContentStore
from docsite.services.data_directory import DataDirectory
from docsite.services.site import Site, load_site

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Level:  LOG_LEVEL setting.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    # uvicorn's access log duplicates docsite.access
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def empty_site() -> Site:
    """A site with no content; served when SITE_ROOT cannot be loaded."""
    return Site(
        ContentStore(default_language=settings.default_language),
        DataDirectory(default_language=settings.default_language),
        settings.languages_list,
        settings.supported_versions_list,
        settings.default_language,
        settings.default_version,
        settings.template_cache_size,
    )


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("Docsite backend starting up...")

    try:
        settings.validate_site()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))

    if getattr(app.state, "site", None) is None:
        try:
            app.state.site = await load_site(settings)
        except DataDirectoryError as e:
            # Keep serving health checks; pages will 404
            logger.error("Site could not be loaded: %s | Context: %s", e.message, e.context)
            app.state.site = empty_site()

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to JSON error responses.

        NotFoundError  → 404
        DocsiteError   → 500 (message only, context logged)
        Exception      → 500 (generic message, stack trace logged)
    """

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(DocsiteError)
    async def handle_docsite_error(request: Request, exc: DocsiteError):
        rid = request_id_var.get("")
        logger.error("[%s] %s: %s | Context: %s", rid, type(exc).__name__, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again later.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(site: Optional[Site] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        site: Preloaded site content. When omitted, the lifespan loads it
              from SITE_ROOT on startup.
    """
    app = FastAPI(
        title="Docsite API",
        description="Documentation pages with learning-track navigation.",
        version=__version__,
        # Every other path belongs to the documentation
        docs_url="/api/docs",
        redoc_url=None,
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )
    app.state.site = site

    # Last added runs first: RequestID → Logging → Context → LearningTrack
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["GET"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(LearningTrackMiddleware)
    app.add_middleware(ContextMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(pages.router)

    return app


app = create_app()
