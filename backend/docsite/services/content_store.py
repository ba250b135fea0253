"""
Docsite Backend - Content Store
================================

What:  In-memory index of documentation pages, keyed by language and
       canonical path.
How:   Markdown files under `<site_root>/content` are read once at startup
       (aiofiles). Only the YAML front matter is kept; page bodies are
       rendered by the frontend.

       content/index.md                              → /
       content/get-started/index.md                  → /get-started
       content/get-started/quickstart/hello-world.md → /get-started/quickstart/hello-world

Translations:
    `<site_root>/translations/<lang>/content` mirrors the English tree. A
    translated page may only override `title`, `shortTitle` and `intro`;
    versions and redirects always come from English. Translated files that
    fail to parse, or that have no English counterpart, are skipped with a
    warning and the English page is served instead.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import aiofiles
import yaml
from pydantic import ValidationError as PydanticValidationError

from docsite.exceptions import DataDirectoryError
from docsite.schemas.site import Page
from docsite.services.path_utils import normalize_path

logger = logging.getLogger(__name__)

# Front matter fields a translation is allowed to change
TRANSLATABLE_FIELDS = ("title", "shortTitle", "intro")


def parse_front_matter(text: str) -> Dict[str, Any]:
    """
    Return the YAML front matter of a Markdown document as a dict.

    Documents without a leading `---` block have empty front matter.

    Raises:
        yaml.YAMLError: The block is not valid YAML.
        ValueError: The block is valid YAML but not a mapping.
    """
    lines = text.splitlines()
    if not lines or lines[0].strip() != "---":
        return {}
    for end, line in enumerate(lines[1:], start=1):
        if line.strip() == "---":
            break
    else:
        raise ValueError("Front matter block is not closed")
    data = yaml.safe_load("\n".join(lines[1:end])) or {}
    if not isinstance(data, dict):
        raise ValueError("Front matter must be a mapping")
    return data


def path_from_file(relative: Path) -> str:
    parts = list(relative.with_suffix("").parts)
    if parts and parts[-1] == "index":
        parts.pop()
    return normalize_path("/".join(parts))


async def _read_front_matter(content_dir: Path) -> Dict[str, Dict[str, Any]]:
    """Map canonical path → raw front matter for every Markdown file under `content_dir`."""
    pages: Dict[str, Dict[str, Any]] = {}
    for file in sorted(content_dir.rglob("*.md")):
        async with aiofiles.open(file, "r", encoding="utf-8") as fh:
            text = await fh.read()
        try:
            pages[path_from_file(file.relative_to(content_dir))] = parse_front_matter(text)
        except (yaml.YAMLError, ValueError) as exc:
            raise DataDirectoryError(
                message="Invalid front matter",
                context={"file": str(file), "error": str(exc)},
            ) from exc
    return pages


class ContentStore:
    """
    Page lookup by canonical path and language.

    English is authoritative: `find_page()` for another language returns the
    translated page when one exists and the English page otherwise. Old paths
    listed in a page's `redirect_from` resolve to that page when
    `follow_redirects` is set.
    """

    def __init__(
        self,
        pages: Iterable[Page] = (),
        translations: Optional[Dict[str, Iterable[Page]]] = None,
        default_language: str = "en",
    ):
        self.default_language = default_language
        self._pages: Dict[str, Dict[str, Page]] = {
            default_language: {page.path: page for page in pages}
        }
        for language, translated in (translations or {}).items():
            self._pages[language] = {page.path: page for page in translated}
        self._redirects: Dict[str, str] = {
            normalize_path(old): page.path
            for page in self._pages[default_language].values()
            for old in page.redirect_from
        }

    def __len__(self) -> int:
        return len(self._pages[self.default_language])

    @property
    def languages(self) -> List[str]:
        return sorted(self._pages)

    def find_page(
        self, path: str, language: str, follow_redirects: bool = True
    ) -> Optional[Page]:
        path = normalize_path(path)
        if follow_redirects and path not in self._pages[self.default_language]:
            path = self._redirects.get(path, path)
        page = self._pages.get(language, {}).get(path)
        if page is None and language != self.default_language:
            page = self._pages[self.default_language].get(path)
        return page

    @classmethod
    async def from_directory(
        cls,
        site_root: Path,
        languages: Iterable[str],
        default_language: str = "en",
    ) -> "ContentStore":
        """
        Load English pages and their translations from `site_root`.

        Raises:
            DataDirectoryError: The English content tree is missing or an
                English page has invalid front matter.
        """
        content_dir = site_root / "content"
        if not content_dir.is_dir():
            raise DataDirectoryError(
                message="Content directory not found",
                context={"path": str(content_dir)},
            )

        english: Dict[str, Page] = {}
        for path, front_matter in (await _read_front_matter(content_dir)).items():
            try:
                english[path] = Page.model_validate({**front_matter, "path": path})
            except PydanticValidationError as exc:
                raise DataDirectoryError(
                    message="Invalid page front matter",
                    context={"path": path, "errors": exc.errors()},
                ) from exc

        translations: Dict[str, List[Page]] = {}
        for language in languages:
            if language == default_language:
                continue
            translated_dir = site_root / "translations" / language / "content"
            if translated_dir.is_dir():
                translations[language] = await cls._load_translation(
                    translated_dir, language, english
                )

        logger.info(
            "Loaded %d pages (%d translated languages)", len(english), len(translations)
        )
        return cls(english.values(), translations, default_language)

    @staticmethod
    async def _load_translation(
        translated_dir: Path, language: str, english: Dict[str, Page]
    ) -> List[Page]:
        pages: List[Page] = []
        for file in sorted(translated_dir.rglob("*.md")):
            path = path_from_file(file.relative_to(translated_dir))
            source = english.get(path)
            if source is None:
                logger.warning("No English page for translated %s (%s)", path, language)
                continue
            async with aiofiles.open(file, "r", encoding="utf-8") as fh:
                text = await fh.read()
            try:
                front_matter = parse_front_matter(text)
            except (yaml.YAMLError, ValueError) as exc:
                logger.warning(
                    "Skipping translated page %s (%s): %s", path, language, exc
                )
                continue
            overrides = {
                key: str(front_matter[key])
                for key in TRANSLATABLE_FIELDS
                if front_matter.get(key)
            }
            pages.append(
                Page.model_validate({**source.model_dump(by_alias=True), **overrides})
            )
        return pages
