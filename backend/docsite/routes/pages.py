"""
Docsite Backend - Page Route
=============================

What:  `GET /{path}`: the page payload for any documentation URL.
How:   Everything about the request was worked out by the middleware; the
       handler only renders the page's title and intro and copies the
       learning track from the request context.

Example:
    GET /ja/enterprise-server@3.12/get-started/quickstart/hello-world?learn=getting_started

    {
      "path": "/get-started/quickstart/hello-world",
      "language": "ja",
      "version": "enterprise-server@3.12",
      "product": "get-started",
      "title": "...",
      "intro": "...",
      "learning_track": {
        "track_name": "getting_started",
        "track_product": "get-started",
        "track_title": "...",
        "number_of_guides": 3,
        "current_guide_index": 1,
        "prev_guide": {"href": "/ja/enterprise-server@3.12/get-started/quickstart", "title": "..."},
        "next_guide": {"href": "/ja/enterprise-server@3.12/get-started/quickstart/next", "title": "..."}
      }
    }
"""

import logging

from fastapi import APIRouter, Request

from docsite.exceptions import NotFoundError
from docsite.schemas.site import ErrorResponse, PageResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"])


@router.get(
    "/{page_path:path}",
    response_model=PageResponse,
    responses={404: {"description": "No such page", "model": ErrorResponse}},
    summary="Documentation page",
)
async def get_page(page_path: str, request: Request) -> PageResponse:
    context = request.state.context
    page = context.page
    if page is None or not page.applies_to(context.current_version):
        raise NotFoundError(resource="page", resource_id=context.current_path)

    site = request.app.state.site
    english = site.pages.find_page(page.path, site.default_language) or page
    return PageResponse(
        path=page.path,
        language=context.language,
        version=context.current_version.name,
        product=context.current_product,
        title=await site.links.render_text(page.title, english.title, context),
        intro=await site.links.render_text(page.intro, english.intro, context),
        learning_track=context.current_learning_track,
    )
