"""
Docsite Backend - Renderer Unit Tests
======================================

What:  Tests for the ifversion template tags and render_with_fallback().

What we test:
    ✅ ifversion / elsifversion / else branches per version
    ✅ Broken templates raise RenderError, for compile and runtime errors
    ✅ Release comparisons in ifversion do not compile
    ✅ Text-only rendering strips markup
    ✅ Primary → fallback → default chain, empty results included
"""

import pytest

from docsite.exceptions import RenderError
from docsite.services.renderer import (
    RENDER_DEFAULT,
    RENDER_FALLBACK,
    RENDER_PRIMARY,
    ContentRenderer,
    render_with_fallback,
)

CONDITIONAL = (
    "{% ifversion fpt %}dotcom"
    "{% elsifversion ghec %}cloud"
    "{% else %}server {{ currentRelease }}{% endifversion %}"
)


class TestContentRenderer:
    """Tests for ContentRenderer.render()."""

    def setup_method(self):
        self.renderer = ContentRenderer(cache_size=16)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("/en/get-started", "dotcom"),
            ("/en/enterprise-cloud@latest/get-started", "cloud"),
            ("/en/enterprise-server@3.12/get-started", "server 3.12"),
        ],
    )
    async def test_version_branches(self, make_context, path, expected):
        assert await self.renderer.render(CONDITIONAL, make_context(path)) == expected

    @pytest.mark.asyncio
    async def test_boolean_conditions(self, make_context):
        template = "{% ifversion fpt or ghec %}hosted{% endifversion %}"
        assert await self.renderer.render(template, make_context("/en/enterprise-cloud@latest")) == "hosted"
        assert await self.renderer.render(template, make_context("/en/enterprise-server@3.12")) == ""

    @pytest.mark.asyncio
    async def test_negated_condition(self, make_context):
        template = "{% ifversion not ghes %}cloud only{% endifversion %}"
        assert await self.renderer.render(template, make_context("/en/get-started")) == "cloud only"

    @pytest.mark.asyncio
    async def test_plain_text_is_returned_unchanged(self, make_context):
        assert await self.renderer.render("/get-started/quickstart", make_context("/en")) == (
            "/get-started/quickstart"
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "template",
        [
            "{% ifversion fpt 또는 ghec %}x{% endifversion %}",
            "{% ifversion fpt %}never closed",
            "{{ currentVersion | no_such_filter }}",
            # Errors raised while rendering, not while compiling
            "{{ currentRelease - 1 }}",
            "{{ 1 / 0 }}",
            # Release comparisons are not supported
            "{% ifversion ghes > 3.10 %}x{% endifversion %}",
            "{% ifversion fpt %}a{% elsifversion fpt or ghes >= 3.11 %}b{% endifversion %}",
        ],
    )
    async def test_broken_template_raises(self, make_context, template):
        with pytest.raises(RenderError) as exc_info:
            await self.renderer.render(template, make_context("/en"))
        assert exc_info.value.context["template"] == template

    @pytest.mark.asyncio
    async def test_plain_if_comparisons_still_work(self, make_context):
        template = "{% if currentRelease == '3.12' %}new{% else %}old{% endif %}"
        assert await self.renderer.render(template, make_context("/en/enterprise-server@3.12")) == "new"

    @pytest.mark.asyncio
    async def test_text_only_strips_markup(self, make_context):
        template = "<em>Hello</em>   {% ifversion fpt %}<b>world</b>{% endifversion %}"
        rendered = await self.renderer.render(template, make_context("/en"), text_only=True)
        assert rendered == "Hello world"


class TestRenderWithFallback:
    """Tests for the primary → fallback → default chain."""

    @staticmethod
    def returning(value):
        async def call():
            return value

        return call

    @staticmethod
    def failing():
        async def call():
            raise RenderError(message="broken", template="{% x %}")

        return call

    @pytest.mark.asyncio
    async def test_primary(self):
        result = await render_with_fallback(self.returning("ok"), self.returning("fb"))
        assert result == ("ok", RENDER_PRIMARY)

    @pytest.mark.asyncio
    async def test_empty_primary_uses_fallback(self):
        """A primary render that yields nothing is treated like a failure."""
        result = await render_with_fallback(self.returning(""), self.returning("fb"), "d")
        assert result == ("fb", RENDER_FALLBACK)

    @pytest.mark.asyncio
    async def test_empty_primary_without_fallback(self):
        result = await render_with_fallback(self.returning(""), default="d")
        assert result == ("d", RENDER_DEFAULT)

    @pytest.mark.asyncio
    async def test_fallback(self):
        result = await render_with_fallback(self.failing(), self.returning("fb"))
        assert result == ("fb", RENDER_FALLBACK)

    @pytest.mark.asyncio
    async def test_default_without_fallback(self):
        result = await render_with_fallback(self.failing(), default="d")
        assert result == ("d", RENDER_DEFAULT)

    @pytest.mark.asyncio
    async def test_default_when_fallback_fails(self):
        result = await render_with_fallback(self.failing(), self.failing(), "d")
        assert result == ("d", RENDER_DEFAULT)

    @pytest.mark.asyncio
    async def test_default_when_fallback_is_empty(self):
        result = await render_with_fallback(self.failing(), self.returning(""), "d")
        assert result == ("d", RENDER_DEFAULT)

    @pytest.mark.asyncio
    async def test_runtime_template_error_uses_default(self, make_context):
        """Errors raised inside a template never escape the chain."""
        renderer = ContentRenderer()
        context = make_context("/en")

        result = await render_with_fallback(
            lambda: renderer.render("{{ 1 / 0 }}", context, text_only=True),
            lambda: renderer.render("{{ currentRelease - 1 }}", context, text_only=True),
            "d",
        )

        assert result == ("d", RENDER_DEFAULT)

    @pytest.mark.asyncio
    async def test_runtime_template_error_uses_fallback(self, make_context):
        renderer = ContentRenderer()
        context = make_context("/en")

        result = await render_with_fallback(
            lambda: renderer.render("{{ currentRelease - 1 }}", context, text_only=True),
            lambda: renderer.render("Release {{ currentRelease }}", context, text_only=True),
        )

        assert result == ("Release latest", RENDER_FALLBACK)
