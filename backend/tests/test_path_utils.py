"""
Docsite Backend - Path Utility Tests
=====================================

What:  Tests for splitting request paths and building hrefs.
"""

import pytest

from docsite.services.path_utils import (
    build_href,
    get_canonical_path,
    get_path_parts,
    get_path_without_language,
    get_path_without_version,
    get_product,
    normalize_path,
)

from conftest import LANGUAGES, VERSIONS


class TestNormalizePath:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("", "/"),
            ("/", "/"),
            ("get-started/", "/get-started"),
            ("/get-started/quickstart?learn=x#top", "/get-started/quickstart"),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_path(raw) == expected


class TestPathParts:
    """Tests for language/version extraction."""

    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/en/get-started/quickstart", ("en", "free-pro-team@latest", "/get-started/quickstart")),
            ("/ja/enterprise-server@3.12/admin", ("ja", "enterprise-server@3.12", "/admin")),
            ("/get-started", ("en", "free-pro-team@latest", "/get-started")),
            ("/en", ("en", "free-pro-team@latest", "/")),
            # Unsupported versions are ordinary path segments
            ("/en/enterprise-server@2.0/admin", ("en", "free-pro-team@latest", "/enterprise-server@2.0/admin")),
        ],
    )
    def test_get_path_parts(self, path, expected):
        assert get_path_parts(path, LANGUAGES, VERSIONS, "en", "free-pro-team@latest") == expected

    def test_without_language(self):
        assert get_path_without_language("/ja/get-started", LANGUAGES) == "/get-started"
        assert get_path_without_language("/fr/get-started", LANGUAGES) == "/fr/get-started"

    def test_without_version(self):
        assert get_path_without_version("/en/enterprise-server@3.12/admin", VERSIONS) == "/en/admin"
        assert get_path_without_version("/enterprise-cloud@latest/admin", VERSIONS) == "/admin"

    def test_version_only_near_the_start(self):
        """A version-looking segment deeper in the path is kept."""
        path = "/en/admin/enterprise-server@3.12"
        assert get_path_without_version(path, VERSIONS) == path

    def test_canonical_path(self):
        assert get_canonical_path(
            "/ja/enterprise-server@3.12/get-started/quickstart", LANGUAGES, VERSIONS
        ) == "/get-started/quickstart"

    def test_product(self):
        assert get_product("/get-started/quickstart") == "get-started"
        assert get_product("/") is None


class TestBuildHref:

    def test_default_version_is_omitted(self):
        assert build_href("/get-started", "ja", "free-pro-team@latest", "free-pro-team@latest") == (
            "/ja/get-started"
        )

    def test_other_version_is_included(self):
        assert build_href("/admin", "en", "enterprise-server@3.12", "free-pro-team@latest") == (
            "/en/enterprise-server@3.12/admin"
        )

    def test_root(self):
        assert build_href("/", "en", "free-pro-team@latest", "free-pro-team@latest") == "/en"
