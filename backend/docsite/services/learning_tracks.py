"""
Docsite Backend - Learning Track Resolution
============================================

What:  Decides whether the requested page is being read as part of a
       learning track and, if so, where in the track the reader is.
Who:   LearningTrackMiddleware, once per page request.

Request contract:
    /<lang>/<version>/<path>?learn=<track name>[&learnProduct=<product>]

    `learn` must appear exactly once. The track is looked up under the
    page's product; when that product has no tracks at all, under
    `learnProduct` instead (first value wins if repeated).

Resolution:
    ┌──────────────┐   ┌──────────────┐   ┌──────────────────┐   ┌────────────┐
    │ Select track │──▶│ Render title │──▶│ Locate the page  │──▶│ Prev/next  │
    │ (query+data) │   │ (w/ English  │   │ in the guide list│   │ guide links│
    └──────────────┘   │  fallback)   │   └──────────────────┘   └────────────┘
                       └──────────────┘

    Locating the page tries three matchers in order and stops at the first
    index found:
        1. exact match of the canonical page path
        2. rendered match: each guide path rendered on its own; guides that
           fail to render are skipped
        3. redirect match: matcher 2 run for every `redirect_from` path of
           the page, in order

    Any step that comes up empty means "no learning track" for the request.
    That includes a neighbour guide that does not resolve: the navigation is
    either complete or absent.

Translations:
    Translated track data is never trusted for `guides` (translators break
    the conditionals). `merge_translated_tracks()` builds a new structure in
    which every track's guides are the English ones and tracks or products
    unknown to English are gone. The merge runs once per language when the
    resolver is built; the loaded data itself is never modified.
"""

import functools
import logging
from typing import Any, Awaitable, Callable, Collection, Dict, Mapping, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import QueryParams

from docsite.schemas.context import RequestContext
from docsite.schemas.learning_track import (
    CurrentLearningTrack,
    GuideLink,
    LearningTrack,
    LearningTracks,
)
from docsite.services.data_directory import DataDirectory
from docsite.services.link_data import LinkResolver
from docsite.services.path_utils import get_canonical_path
from docsite.services.renderer import (
    RENDER_PRIMARY,
    ContentRenderer,
    RenderCall,
    render_with_fallback,
)

logger = logging.getLogger(__name__)

LEARNING_TRACKS_DATA = "learning-tracks"

PathRenderer = Callable[[str], Awaitable[str]]


# ══════════════════════════════════════════════════════════════════════════
# Track data
# ══════════════════════════════════════════════════════════════════════════

def parse_learning_tracks(raw: Mapping[str, Any], language: str) -> LearningTracks:
    """Validate raw YAML data; malformed products or tracks are dropped with a warning."""
    tracks: LearningTracks = {}
    for product, entries in raw.items():
        if not isinstance(entries, dict):
            logger.warning("Learning tracks for %s (%s) are not a mapping", product, language)
            continue
        parsed: Dict[str, LearningTrack] = {}
        for name, entry in entries.items():
            try:
                parsed[name] = LearningTrack.model_validate(entry)
            except PydanticValidationError as exc:
                logger.warning(
                    "Skipping learning track %s/%s (%s): %d validation errors",
                    product,
                    name,
                    language,
                    exc.error_count(),
                )
        tracks[product] = parsed
    return tracks


def merge_translated_tracks(
    translated: LearningTracks, english: LearningTracks
) -> LearningTracks:
    """
    Overlay English guide lists on translated tracks.

    Returns a new structure; neither argument is modified. Products and
    tracks missing from `english` are left out.
    """
    merged: LearningTracks = {}
    for product, tracks in translated.items():
        english_tracks = english.get(product)
        if english_tracks is None:
            logger.warning("No English learning track for %s", product)
            continue
        merged[product] = {
            name: track.model_copy(update={"guides": list(english_tracks[name].guides)})
            for name, track in tracks.items()
            if name in english_tracks
        }
    return merged


# ══════════════════════════════════════════════════════════════════════════
# Track selection
# ══════════════════════════════════════════════════════════════════════════

def single_query_value(query: QueryParams, key: str) -> Optional[str]:
    """The value of `key` when it is present exactly once and non-empty."""
    values = query.getlist(key)
    if len(values) != 1 or not values[0]:
        return None
    return values[0]


def select_track_product(
    tracks: LearningTracks,
    current_product: Optional[str],
    query: QueryParams,
) -> Optional[str]:
    """
    The product whose tracks apply to this request.

    The current product wins when it has a track entry. Otherwise the
    `learnProduct` query parameter is used; guides can live under a
    different product than the track that lists them.
    """
    if current_product is not None and tracks.get(current_product) is not None:
        return current_product
    values = query.getlist("learnProduct")
    if not values or not values[0]:
        return None
    product = values[0]
    return product if tracks.get(product) is not None else None


# ══════════════════════════════════════════════════════════════════════════
# Guide matchers
# ══════════════════════════════════════════════════════════════════════════

async def index_by_exact_path(guide_paths: Sequence[str], page_path: str) -> Optional[int]:
    """Position of `page_path` in the guide list as given, without rendering."""
    try:
        return list(guide_paths).index(page_path)
    except ValueError:
        return None


async def index_by_rendered_path(
    guide_paths: Sequence[str], page_path: str, render: PathRenderer
) -> Optional[int]:
    """
    Position of the first guide whose rendered path equals `page_path`.

    Guide paths may carry version conditionals. `render` returns "" for a
    path that fails to render, and such guides are skipped.
    """
    for index, guide_path in enumerate(guide_paths):
        rendered = await render(guide_path)
        if not rendered:
            continue
        if rendered == page_path:
            return index
    return None


async def index_by_redirects(
    guide_paths: Sequence[str], redirects: Sequence[str], render: PathRenderer
) -> Optional[int]:
    """
    Rendered match for each of the page's old paths in turn.

    A guide path that now redirects to this page still places the reader.
    The first redirect with a match wins.
    """
    for redirect in redirects:
        index = await index_by_rendered_path(guide_paths, redirect, render)
        if index is not None:
            return index
    return None


async def find_guide_index(
    guide_paths: Sequence[str],
    page_path: str,
    redirects: Sequence[str],
    render: PathRenderer,
) -> Optional[int]:
    """Run the matchers in order; the first index found wins."""
    matchers = (
        functools.partial(index_by_exact_path, guide_paths, page_path),
        functools.partial(index_by_rendered_path, guide_paths, page_path, render),
        functools.partial(index_by_redirects, guide_paths, redirects, render),
    )
    for matcher in matchers:
        index = await matcher()
        if index is not None:
            return index
    return None


# ══════════════════════════════════════════════════════════════════════════
# Resolver
# ══════════════════════════════════════════════════════════════════════════

class LearningTrackResolver:
    """
    Computes the CurrentLearningTrack for a request.

    Track data is parsed and merged with English once per language at
    construction. The merged sets are read-only; `resolve()` never modifies
    them.
    """

    def __init__(
        self,
        data: DataDirectory,
        links: LinkResolver,
        renderer: ContentRenderer,
        languages: Collection[str],
        versions: Collection[str],
        default_language: str = "en",
    ):
        self.links = links
        self.renderer = renderer
        self.languages = languages
        self.versions = versions
        self.default_language = default_language
        self._tracks: Dict[str, LearningTracks] = {
            language: parse_learning_tracks(
                data.get_deep_data_by_language(LEARNING_TRACKS_DATA, language), language
            )
            for language in data.languages
        }
        english = self._tracks.get(self.default_language, {})
        self._effective: Dict[str, LearningTracks] = {
            language: tracks
            if language == self.default_language
            else merge_translated_tracks(tracks, english)
            for language, tracks in self._tracks.items()
        }

    def tracks_for_language(self, language: str) -> LearningTracks:
        """Tracks as seen by `language`: translated titles, English guides."""
        english = self._effective.get(self.default_language, {})
        return self._effective.get(language, english)

    async def resolve(
        self, context: RequestContext, query: QueryParams
    ) -> Optional[CurrentLearningTrack]:
        """
        Resolve the learning track for a contextualized page request.

        Returns:
            The track navigation, or None when the request is not part of a
            track or any piece of it fails to resolve. Never raises for bad
            input or broken data.
        """
        track_name = single_query_value(query, "learn")
        if track_name is None:
            return None

        all_tracks = self.tracks_for_language(context.language)
        product = select_track_product(all_tracks, context.current_product, query)
        if product is None:
            return self._no_track("no tracks for product", context, track_name)
        track = all_tracks[product].get(track_name)
        if track is None:
            return self._no_track("unknown track", context, track_name)

        current = CurrentLearningTrack(
            track_name=track_name,
            track_product=product,
            track_title=await self._render_title(product, track_name, track, context),
        )

        page_path = get_canonical_path(context.current_path, self.languages, self.versions)

        # Only guides published in the current version take part
        guides = await self.links.get_link_data(
            track.guides, context, title=False, intro=False
        )
        guide_paths = [
            get_canonical_path(guide.href, self.languages, self.versions) for guide in guides
        ]

        index = await find_guide_index(
            guide_paths,
            page_path,
            context.page.redirect_from if context.page else [],
            functools.partial(self._render_path, context=context),
        )
        if index is None:
            return self._no_track("page is not in track", context, track_name)

        current.number_of_guides = len(guide_paths)
        current.current_guide_index = index

        if index > 0:
            current.prev_guide = await self._guide_link(guide_paths[index - 1], context)
            if current.prev_guide is None:
                return self._no_track("previous guide did not resolve", context, track_name)

        if index < len(guide_paths) - 1:
            current.next_guide = await self._guide_link(guide_paths[index + 1], context)
            if current.next_guide is None:
                return self._no_track("next guide did not resolve", context, track_name)

        return current

    async def _render_title(
        self,
        product: str,
        track_name: str,
        track: LearningTrack,
        context: RequestContext,
    ) -> str:
        # Some translated titles have broken conditionals; English is the fallback
        fallback: Optional[RenderCall] = None
        english_track = self._tracks.get(self.default_language, {}).get(product, {}).get(track_name)
        if english_track is not None and context.language != self.default_language:
            english_context = context.for_language(self.default_language)
            fallback = lambda: self.renderer.render(  # noqa: E731
                english_track.title, english_context, text_only=True
            )

        result = await render_with_fallback(
            lambda: self.renderer.render(track.title, context, text_only=True),
            fallback,
        )
        if result.source != RENDER_PRIMARY:
            logger.warning(
                "Title of learning track %s/%s (%s) did not render, using %s",
                product,
                track_name,
                context.language,
                result.source,
            )
        return result.value

    async def _render_path(self, path: str, context: RequestContext) -> str:
        result = await render_with_fallback(
            lambda: self.renderer.render(path, context, text_only=True)
        )
        return result.value

    async def _guide_link(self, guide_path: str, context: RequestContext) -> Optional[GuideLink]:
        links = await self.links.get_link_data(
            guide_path, context, title=True, intro=False, full_title=False
        )
        if not links:
            return None
        return GuideLink(href=links[0].href, title=links[0].title)

    @staticmethod
    def _no_track(reason: str, context: RequestContext, track_name: str) -> None:
        logger.debug(
            "No learning track %r for %s (%s): %s",
            track_name,
            context.current_path,
            context.language,
            reason,
        )
        return None
