"""
Docsite Backend - Link Resolution Tests
========================================

What:  Tests for LinkResolver.get_link_data() and render_text().

What we test:
    ✅ Localized, versioned hrefs in input order
    ✅ Links to missing, unrenderable or unpublished pages are dropped
    ✅ Redirected links keep their own path
    ✅ Broken translated fields fall back to English
"""

import pytest


class TestGetLinkData:
    """Tests for LinkResolver.get_link_data()."""

    @pytest.mark.asyncio
    async def test_single_link(self, site, make_context):
        links = await site.links.get_link_data(
            "/get-started/quickstart/hello-world", make_context("/en/get-started")
        )

        assert len(links) == 1
        assert links[0].href == "/en/get-started/quickstart/hello-world"
        assert links[0].title == "Hello World"
        assert links[0].intro == "Say hello."
        assert links[0].full_title is None

    @pytest.mark.asyncio
    async def test_short_title_preferred(self, site, make_context):
        links = await site.links.get_link_data(
            "/get-started/quickstart", make_context("/en"), intro=False, full_title=True
        )

        assert links[0].title == "Quickstart"
        assert links[0].full_title == "Quickstart guide"
        assert links[0].intro is None

    @pytest.mark.asyncio
    async def test_no_fields_requested(self, site, make_context):
        links = await site.links.get_link_data(
            ["/get-started/quickstart"], make_context("/en"), title=False, intro=False
        )

        assert links[0].title is None
        assert links[0].intro is None

    @pytest.mark.asyncio
    async def test_order_kept_and_bad_links_dropped(self, site, make_context):
        context = make_context("/en/enterprise-server@3.12/get-started")
        raw_links = [
            "/get-started/using-git/about-git",
            "/does/not/exist",
            "{% ifversion fpt 또는 ghec %}/get-started{% endifversion %}",
            "{% ifversion fpt %}/get-started{% endifversion %}",
            "/get-started/quickstart/create-a-repo",
            "/en/get-started/quickstart",
        ]

        links = await site.links.get_link_data(raw_links, context, title=False, intro=False)

        assert [link.href for link in links] == [
            "/en/enterprise-server@3.12/get-started/using-git/about-git",
            "/en/enterprise-server@3.12/get-started/quickstart",
        ]

    @pytest.mark.asyncio
    async def test_redirected_link_keeps_its_path(self, site, make_context):
        links = await site.links.get_link_data("/get-started/hello", make_context("/en"))

        assert links[0].href == "/en/get-started/hello"
        assert links[0].title == "Hello World"

    @pytest.mark.asyncio
    async def test_empty_input(self, site, make_context):
        assert await site.links.get_link_data(None, make_context("/en")) == []
        assert await site.links.get_link_data([], make_context("/en")) == []

    @pytest.mark.asyncio
    async def test_translated_title(self, site, make_context):
        links = await site.links.get_link_data(
            "/get-started/quickstart/hello-world", make_context("/ja/get-started")
        )

        assert links[0].href == "/ja/get-started/quickstart/hello-world"
        assert links[0].title == "ハローワールド"

    @pytest.mark.asyncio
    async def test_broken_translated_title_uses_english(self, site, make_context):
        links = await site.links.get_link_data(
            "/get-started/quickstart/create-a-repo", make_context("/ja/get-started")
        )

        assert links[0].title == "Create a repo"


class TestRenderText:

    @pytest.mark.asyncio
    async def test_english_has_no_fallback(self, site, make_context):
        """In the default language a broken field renders to ''."""
        text = await site.links.render_text("{% ifversion %}", "Fallback", make_context("/en"))
        assert text == ""

    @pytest.mark.asyncio
    async def test_translation_falls_back(self, site, make_context):
        text = await site.links.render_text(
            "{% ifversion fpt 또는 %}", "{% ifversion fpt %}English{% endifversion %}", make_context("/ja")
        )
        assert text == "English"
