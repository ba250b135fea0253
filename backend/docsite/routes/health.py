"""
Docsite Backend - Health Check Route
=====================================

What:  `GET /health` for load balancers and container probes.

Status levels:
    - healthy:  site content is loaded and has at least one page
    - degraded: the process is up but no content is loaded (bad SITE_ROOT)
"""

import time

from fastapi import APIRouter, Request

from docsite import __version__
from docsite.schemas.site import HealthResponse

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/health", response_model=HealthResponse, summary="Service health check")
async def health_check(request: Request) -> HealthResponse:
    site = request.app.state.site
    page_count = len(site.pages)
    return HealthResponse(
        status="healthy" if page_count else "degraded",
        version=__version__,
        pages=page_count,
        languages=sorted(set(site.pages.languages) | set(site.data.languages)),
        uptime_seconds=round(time.time() - _start_time, 2),
    )
