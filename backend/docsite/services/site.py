"""
Docsite Backend - Site Bundle
==============================

What:  Holds the loaded site content and the services built on top of it.
Who:   Created once in the app lifespan (or directly by tests) and stored on
       `app.state.site`; middleware and routes reach it via `request.app`.
"""

import logging
from pathlib import Path
from typing import Collection, Dict

from docsite.config import Settings
from docsite.schemas.context import RequestContext
from docsite.schemas.site import Version
from docsite.services.content_store import ContentStore
from docsite.services.data_directory import DataDirectory
from docsite.services.learning_tracks import LEARNING_TRACKS_DATA, LearningTrackResolver
from docsite.services.link_data import LinkResolver
from docsite.services.path_utils import get_path_parts, get_product, normalize_path
from docsite.services.renderer import ContentRenderer

logger = logging.getLogger(__name__)

# Data sets loaded from `data/` at startup
DATA_SETS = (LEARNING_TRACKS_DATA,)


class Site:
    """
    Loaded pages and data plus the services that work on them.

    Attributes:
        pages:           ContentStore with English pages and translations
        data:            DataDirectory with the YAML datasets
        versions:        Supported versions by name, parsed once
        renderer:        Shared ContentRenderer (compiled-template cache)
        links:           LinkResolver over `pages`
        learning_tracks: LearningTrackResolver over `data` and `links`

    Everything here is read-only once constructed and shared by all requests.
    """

    def __init__(
        self,
        pages: ContentStore,
        data: DataDirectory,
        languages: Collection[str],
        versions: Collection[str],
        default_language: str = "en",
        default_version: str = "free-pro-team@latest",
        template_cache_size: int = 512,
    ):
        self.pages = pages
        self.data = data
        self.languages = list(languages)
        self.default_language = default_language
        self.default_version = default_version
        # Fails at startup on a malformed version string
        self.versions: Dict[str, Version] = {name: Version.parse(name) for name in versions}

        self.renderer = ContentRenderer(cache_size=template_cache_size)
        self.links = LinkResolver(
            pages,
            self.renderer,
            self.languages,
            list(self.versions),
            default_language,
            default_version,
        )
        self.learning_tracks = LearningTrackResolver(
            data,
            self.links,
            self.renderer,
            self.languages,
            list(self.versions),
            default_language,
        )

    def build_context(self, path: str) -> RequestContext:
        """Split `path` and look up its page; the page is None for unknown paths."""
        language, version, canonical = get_path_parts(
            path,
            self.languages,
            list(self.versions),
            self.default_language,
            self.default_version,
        )
        return RequestContext(
            language=language,
            current_version=self.versions[version],
            current_product=get_product(canonical),
            current_path=normalize_path(path),
            page=self.pages.find_page(canonical, language, follow_redirects=False),
        )


async def load_site(config: Settings) -> Site:
    """
    Read pages and data from `config.site_root`.

    Raises:
        DataDirectoryError: English content or data could not be loaded.
    """
    root = Path(config.site_root)
    pages = await ContentStore.from_directory(
        root, config.languages_list, config.default_language
    )
    data = await DataDirectory.from_directory(
        root, DATA_SETS, config.languages_list, config.default_language
    )
    logger.info("Site loaded from %s", root.resolve())
    return Site(
        pages,
        data,
        config.languages_list,
        config.supported_versions_list,
        config.default_language,
        config.default_version,
        config.template_cache_size,
    )
