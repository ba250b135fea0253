"""
Docsite Backend - Test Configuration (conftest.py)
===================================================

What:  Shared pytest fixtures for the entire test suite.
How:   The site is built in memory (no files on disk) so every test sees the
       same small documentation tree:

    get-started/                         (product with learning tracks)
    ├── quickstart
    │   ├── hello-world                  redirect_from /get-started/hello
    │   ├── create-a-repo                fpt, ghec only
    │   └── server-setup                 ghes only
    └── using-git/about-git
    admin/overview                       (product without learning tracks)

Function-scoped fixtures:
    ├── pages / data / site:  the in-memory site
    ├── make_context:         builds a RequestContext for a URL path
    └── test_client:          HTTPX AsyncClient against create_app(site=...)
"""

import os

# Before any docsite import: settings are read once at import time
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["SITE_ROOT"] = "./tests-site-does-not-exist"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from docsite.schemas.site import Page
from docsite.services.content_store import ContentStore
from docsite.services.data_directory import DataDirectory
from docsite.services.site import Site

LANGUAGES = ["en", "ja"]
VERSIONS = [
    "free-pro-team@latest",
    "enterprise-cloud@latest",
    "enterprise-server@3.12",
]

ENGLISH_TRACKS = {
    "get-started": {
        "getting_started": {
            "title": "Getting started{% ifversion ghes %} with your server{% endifversion %}",
            "description": "Learn the basics.",
            "guides": [
                "/get-started/quickstart",
                "/get-started/quickstart/hello-world",
                "{% ifversion fpt or ghec %}/get-started/quickstart/create-a-repo"
                "{% else %}/get-started/quickstart/server-setup{% endifversion %}",
            ],
            "featured_track": True,
        },
        "legacy_track": {
            "title": "Legacy tour",
            "guides": [
                "/get-started/quickstart",
                "/get-started/hello",
                "/get-started/using-git/about-git",
            ],
        },
        "admin_tour": {
            "title": "Admin tour",
            "guides": ["/get-started/quickstart", "/admin/overview"],
        },
        "git_basics": {
            "title": "Git basics",
            "guides": ["/get-started/using-git/about-git"],
        },
    },
}

JAPANESE_TRACKS = {
    "get-started": {
        "getting_started": {
            "title": "はじめに",
            # Translators broke the conditional; English guides must be used
            "guides": ["{% ifversion fpt 또는 ghec %}/get-started/quickstart{% endifversion %}"],
        },
        "git_basics": {
            "title": "{% ifversion fpt 또는 ghec %}Git の基本{% endifversion %}",
            "guides": [],
        },
        "translated_only": {
            "title": "翻訳のみ",
            "guides": ["/get-started/quickstart"],
        },
    },
    "retired-product": {
        "old_track": {"title": "古いトラック", "guides": ["/get-started/quickstart"]},
    },
}


@pytest.fixture
def pages():
    english = [
        Page(path="/get-started", title="Get started"),
        Page(path="/get-started/quickstart", title="Quickstart guide", short_title="Quickstart"),
        Page(
            path="/get-started/quickstart/hello-world",
            title="Hello World",
            intro="Say hello.",
            redirect_from=["/get-started/hello"],
        ),
        Page(
            path="/get-started/quickstart/create-a-repo",
            title="Create a repo",
            versions=["fpt", "ghec"],
        ),
        Page(
            path="/get-started/quickstart/server-setup",
            title="Set up your server",
            versions={"ghes": "*"},
        ),
        Page(path="/get-started/using-git/about-git", title="About Git"),
        Page(path="/admin/overview", title="Admin overview"),
    ]
    japanese = [
        Page(
            path="/get-started/quickstart/hello-world",
            title="ハローワールド",
            redirect_from=["/get-started/hello"],
        ),
        Page(
            path="/get-started/quickstart/create-a-repo",
            title="{% ifversion fpt 또는 %}",
            versions=["fpt", "ghec"],
        ),
    ]
    return ContentStore(english, {"ja": japanese})


@pytest.fixture
def data():
    return DataDirectory(
        {
            "en": {"learning-tracks": ENGLISH_TRACKS},
            "ja": {"learning-tracks": JAPANESE_TRACKS},
        }
    )


@pytest.fixture
def site(pages, data):
    return Site(pages, data, LANGUAGES, VERSIONS)


@pytest.fixture
def make_context(site):
    """Usage: context = make_context("/ja/get-started/quickstart")"""
    return site.build_context


@pytest_asyncio.fixture
async def test_client(site):
    """
    HTTPX AsyncClient talking to an app that serves the in-memory site.

    Usage:
        async def test_page(test_client):
            response = await test_client.get("/en/get-started")
    """
    from docsite.main import create_app

    app = create_app(site=site)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
