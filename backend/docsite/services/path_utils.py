"""
Docsite Backend - Path Utilities
=================================

What:  Split request paths and hrefs into language, version and canonical path.

Path layout:
    /<language>/<version>/<product>/<rest...>

    Both the language and the version segment are optional. A missing
    language means the default language; a missing version means the
    default version. Examples (default version `free-pro-team@latest`):

        /en/get-started/quickstart               → en, fpt,  /get-started/quickstart
        /ja/enterprise-server@3.12/admin/install → ja, ghes, /admin/install
        /get-started                             → en, fpt,  /get-started

    The canonical path (no language, no version) is what learning-track
    guides, redirects and the content store are keyed by.

All helpers default to the configured languages and versions; tests pass
explicit collections instead.
"""

from typing import Collection, List, Optional, Tuple

from docsite.config import settings


def normalize_path(path: str) -> str:
    """Drop query/fragment, ensure a leading slash and no trailing slash."""
    path = path.split("#", 1)[0].split("?", 1)[0].strip()
    if not path.startswith("/"):
        path = "/" + path
    if len(path) > 1:
        path = path.rstrip("/") or "/"
    return path


def _segments(path: str) -> List[str]:
    return [segment for segment in normalize_path(path).split("/") if segment]


def _join(segments: List[str]) -> str:
    return "/" + "/".join(segments)


def get_path_without_language(
    path: str, languages: Optional[Collection[str]] = None
) -> str:
    """`/ja/get-started` → `/get-started`; unknown first segments are kept."""
    languages = settings.languages_list if languages is None else languages
    segments = _segments(path)
    if segments and segments[0] in languages:
        segments = segments[1:]
    return _join(segments)


def get_path_without_version(
    path: str, versions: Optional[Collection[str]] = None
) -> str:
    # The version is either the first segment or the one right after the language
    versions = settings.supported_versions_list if versions is None else versions
    segments = _segments(path)
    for index, segment in enumerate(segments[:2]):
        if segment in versions:
            del segments[index]
            break
    return _join(segments)


def get_canonical_path(
    path: str,
    languages: Optional[Collection[str]] = None,
    versions: Optional[Collection[str]] = None,
) -> str:
    """The path with both the version and the language segment removed."""
    return get_path_without_language(get_path_without_version(path, versions), languages)


def get_path_parts(
    path: str,
    languages: Optional[Collection[str]] = None,
    versions: Optional[Collection[str]] = None,
    default_language: Optional[str] = None,
    default_version: Optional[str] = None,
) -> Tuple[str, str, str]:
    """
    Split a request path into `(language, version, canonical_path)`.

    Missing segments are filled with the defaults.
    """
    languages = settings.languages_list if languages is None else languages
    versions = settings.supported_versions_list if versions is None else versions
    language = default_language or settings.default_language
    version = default_version or settings.default_version

    segments = _segments(path)
    if segments and segments[0] in languages:
        language = segments.pop(0)
    if segments and segments[0] in versions:
        version = segments.pop(0)
    return language, version, _join(segments)


def get_product(canonical_path: str) -> Optional[str]:
    """First segment of a canonical path; None for the site root."""
    segments = _segments(canonical_path)
    return segments[0] if segments else None


def build_href(
    canonical_path: str,
    language: str,
    version: str,
    default_version: Optional[str] = None,
) -> str:
    """Localized, versioned URL for a canonical path."""
    default_version = default_version or settings.default_version
    segments = [language]
    if version != default_version:
        segments.append(version)
    segments.extend(_segments(canonical_path))
    return _join(segments)
