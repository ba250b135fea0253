"""
Docsite Backend - Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for the documentation backend.
How:   Each exception carries a user-safe message and an optional context
       dict. Global handlers (registered in main.py) turn them into JSON
       error responses.

Exception Hierarchy:
    DocsiteError (base)
    ├── NotFoundError               → 404 Not Found
    ├── RenderError                 → never reaches the client; caught by
    │                                 render_with_fallback and link resolution
    ├── DataDirectoryError          → 500 (site content could not be loaded)
    └── ContextNotInitializedError  → 500 (middleware ordering bug)

Learning-track resolution never raises to the caller: every failure along
the way turns into "no learning track for this request". The only error
that escapes the learning-track middleware is ContextNotInitializedError,
which signals a misconfigured middleware chain rather than bad input.
"""

from typing import Any, Dict, Optional


class DocsiteError(Exception):
    """
    Base exception for all docsite application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NotFoundError(DocsiteError):
    """Raised when no page exists for the requested path."""

    def __init__(
        self,
        resource: str = "page",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class RenderError(DocsiteError):
    """
    Raised when a template string cannot be compiled or rendered.

    Typical cause: translated data with broken conditional syntax, such as
    `{% ifversion fpt 또는 ghec %}`. The template source is kept in the
    context for logging.
    """

    def __init__(
        self,
        message: str = "Template could not be rendered",
        template: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if template is not None:
            ctx["template"] = template
        super().__init__(message=message, context=ctx)
        self.template = template


class DataDirectoryError(DocsiteError):
    """Raised when site content or data files cannot be read at startup."""

    def __init__(
        self,
        message: str = "Site data could not be loaded",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ContextNotInitializedError(DocsiteError):
    """Raised when a middleware needs the request context before it was built."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="request is not contextualized", context=context)
