"""
Docsite Backend - Link Resolution Service
==========================================

What:  Turns raw link paths (possibly templated) into LinkData for the
       current request: localized href plus rendered title/intro.
Who:   Learning-track resolution (guide lists, prev/next links) and any
       page listing that links to other pages.

Per link:
    1. Render the path text-only; links that fail to render or render to
       nothing are dropped.
    2. Strip language and version to get the canonical path.
    3. Find the page in the requested language (English fallback).
    4. Drop pages not published for the current version.
    5. Build `/<lang>[/<version>]/<canonical>` and render the requested
       text fields. A field whose translation does not render falls back to
       the English page's field.

The result keeps the input order and never raises for a bad link.
"""

import logging
from typing import Collection, List, Optional, Sequence, Union

from docsite.schemas.context import RequestContext
from docsite.schemas.site import LinkData
from docsite.services.content_store import ContentStore
from docsite.services.path_utils import build_href, get_canonical_path
from docsite.services.renderer import ContentRenderer, RenderCall, render_with_fallback

logger = logging.getLogger(__name__)


class LinkResolver:
    """
    Resolves raw link paths into LinkData for a request context.

    Holds no per-request state; one instance serves every request of a Site.
    Pages come from the ContentStore (English fallback, redirects followed)
    and text fields are rendered through the shared ContentRenderer.
    """

    def __init__(
        self,
        pages: ContentStore,
        renderer: ContentRenderer,
        languages: Collection[str],
        versions: Collection[str],
        default_language: str = "en",
        default_version: str = "free-pro-team@latest",
    ):
        self.pages = pages
        self.renderer = renderer
        self.languages = languages
        self.versions = versions
        self.default_language = default_language
        self.default_version = default_version

    async def get_link_data(
        self,
        raw_links: Union[str, Sequence[str], None],
        context: RequestContext,
        title: bool = True,
        intro: bool = True,
        full_title: bool = False,
    ) -> List[LinkData]:
        """
        Resolve one or more raw link paths for `context`.

        Args:
            raw_links:  A single path or a sequence of paths; may be templated.
            context:    The request context (language, version).
            title:      Include the short title (falls back to the title).
            intro:      Include the rendered intro.
            full_title: Include the full title.

        Returns:
            LinkData for each link that resolves to a page available in the
            current version, in input order. Empty when nothing resolves.
        """
        if not raw_links:
            return []
        if isinstance(raw_links, str):
            raw_links = [raw_links]

        links: List[LinkData] = []
        for raw_link in raw_links:
            link = await self._process_link(raw_link, context, title, intro, full_title)
            if link is not None:
                links.append(link)
        return links

    async def _process_link(
        self,
        raw_link: str,
        context: RequestContext,
        title: bool,
        intro: bool,
        full_title: bool,
    ) -> Optional[LinkData]:
        rendered = await render_with_fallback(
            lambda: self.renderer.render(raw_link, context, text_only=True)
        )
        if not rendered.value:
            return None

        canonical = get_canonical_path(rendered.value, self.languages, self.versions)
        page = self.pages.find_page(canonical, context.language)
        if page is None:
            logger.debug("No page for link %s (%s)", canonical, context.language)
            return None
        if not page.applies_to(context.current_version):
            return None

        link = LinkData(
            href=build_href(
                canonical,
                context.language,
                context.current_version.name,
                self.default_version,
            )
        )
        english = self.pages.find_page(canonical, self.default_language) or page
        if title:
            link.title = await self.render_text(
                page.short_title or page.title,
                english.short_title or english.title,
                context,
            )
        if full_title:
            link.full_title = await self.render_text(page.title, english.title, context)
        if intro:
            link.intro = await self.render_text(page.intro, english.intro, context)
        return link

    async def render_text(
        self, source: str, english_source: str, context: RequestContext
    ) -> str:
        """Render a page field text-only, falling back to the English source, then to ''."""
        fallback: Optional[RenderCall] = None
        if context.language != self.default_language:
            english_context = context.for_language(self.default_language)
            fallback = lambda: self.renderer.render(  # noqa: E731
                english_source, english_context, text_only=True
            )

        result = await render_with_fallback(
            lambda: self.renderer.render(source, context, text_only=True),
            fallback,
        )
        return result.value

