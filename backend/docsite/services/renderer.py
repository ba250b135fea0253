"""
Docsite Backend - Template Rendering Service
=============================================

What:  Renders template strings from content and data files (page titles,
       intros, learning-track titles, guide paths) for a request context.
Why:   Data files use version conditionals so one definition serves every
       documentation version:

           {% ifversion fpt or ghec %}/github/setup{% else %}/admin/setup{% endifversion %}

How:   Jinja2 in async mode, plus an extension that adds the `ifversion` /
       `elsifversion` / `endifversion` tags. Plan short names (`fpt`, `ghec`,
       `ghes`) are booleans in the render variables, so conditions compose
       with `and`, `or` and `not`. Plain `{% if %}` works as well.

Failure model:
    `ContentRenderer.render()` raises RenderError on any error
    while compiling or rendering.
    Callers that must not fail use `render_with_fallback()`, which tries a
    primary render, then an optional fallback render, then returns a fixed
    default:

        primary non-empty          → RenderResult(value, "primary")
        primary fails or empty,
        fallback non-empty         → RenderResult(value, "fallback")
        otherwise                  → RenderResult(default, "default")

    Translations are the usual source of broken templates, so the fallback
    is typically "render the English source instead".
"""

import functools
import logging
from typing import Awaitable, Callable, NamedTuple, Optional

from jinja2 import Environment, Template, nodes
from jinja2.ext import Extension
from markupsafe import Markup

from docsite.exceptions import RenderError
from docsite.schemas.context import RequestContext

logger = logging.getLogger(__name__)

RENDER_PRIMARY = "primary"
RENDER_FALLBACK = "fallback"
RENDER_DEFAULT = "default"


class VersionConditionalExtension(Extension):
    """
    `{% ifversion <cond> %}...{% elsifversion <cond> %}...{% else %}...{% endifversion %}`

    Compiles to the same node tree as Jinja's own `if` statement; only the
    tag names differ. Conditions combine plan short names with `and`, `or`
    and `not`. Release comparisons such as `ghes > 3.10` do not compile.
    """

    tags = {"ifversion"}

    def parse(self, parser):
        node = result = nodes.If(lineno=next(parser.stream).lineno)
        while True:
            node.test = self._parse_condition(parser)
            node.body = parser.parse_statements(
                ("name:elsifversion", "name:else", "name:endifversion")
            )
            node.elif_ = []
            node.else_ = []
            token = next(parser.stream)
            if token.test("name:elsifversion"):
                node = nodes.If(lineno=parser.stream.current.lineno)
                result.elif_.append(node)
                continue
            if token.test("name:else"):
                result.else_ = parser.parse_statements(
                    ("name:endifversion",), drop_needle=True
                )
            break
        return result

    @staticmethod
    def _parse_condition(parser):
        lineno = parser.stream.current.lineno
        test = parser.parse_tuple(with_condexpr=False)
        if isinstance(test, nodes.Compare) or any(test.find_all(nodes.Compare)):
            parser.fail("Release comparisons are not supported in ifversion", lineno)
        return test


class RenderResult(NamedTuple):
    value: str
    source: str


RenderCall = Callable[[], Awaitable[str]]


async def render_with_fallback(
    primary: RenderCall,
    fallback: Optional[RenderCall] = None,
    default: str = "",
) -> RenderResult:
    """
    Run `primary`; when it fails or yields nothing run `fallback`; otherwise
    return `default`.

    "Fails" means RenderError, which ContentRenderer raises for every
    template error. An empty string from either call counts as a failure.
    """
    try:
        value = await primary()
    except RenderError as exc:
        logger.debug("Primary render failed: %s | %s", exc.message, exc.context)
    else:
        if value:
            return RenderResult(value, RENDER_PRIMARY)

    if fallback is not None:
        try:
            value = await fallback()
        except RenderError as exc:
            logger.debug("Fallback render failed: %s | %s", exc.message, exc.context)
        else:
            if value:
                return RenderResult(value, RENDER_FALLBACK)

    return RenderResult(default, RENDER_DEFAULT)


class ContentRenderer:
    """
    Compiles and renders template strings against a RequestContext.

    Compiled templates are cached per source string; track titles and guide
    paths repeat on every request for the same track.
    """

    def __init__(self, cache_size: int = 512):
        self.env = Environment(
            extensions=[VersionConditionalExtension],
            enable_async=True,
            autoescape=False,
        )
        self._compile: Callable[[str], Template] = functools.lru_cache(maxsize=cache_size)(
            self.env.from_string
        )

    async def render(
        self,
        template: str,
        context: RequestContext,
        text_only: bool = False,
    ) -> str:
        """
        Render `template` for `context`.

        Args:
            template:  Template source; plain strings are returned as-is.
            context:   Request context providing version/language variables.
            text_only: Strip markup and collapse whitespace (titles, paths).

        Raises:
            RenderError: The template does not compile or raises any error
                while rendering.
        """
        if "{%" in template or "{{" in template:
            try:
                compiled = self._compile(template)
                rendered = await compiled.render_async(context.render_variables())
            except Exception as exc:
                # Compile and runtime errors alike, e.g. TypeError from `{{ currentRelease - 1 }}`
                raise RenderError(
                    message=f"Template could not be rendered: {exc}",
                    template=template,
                    context={
                        "language": context.language,
                        "version": context.current_version.name,
                    },
                ) from exc
        else:
            rendered = template

        if text_only:
            return str(Markup(rendered).striptags())
        return rendered
