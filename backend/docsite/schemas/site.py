"""
Docsite Backend - Site Content and Response Schemas
====================================================

What:  Pydantic models for versions, pages, resolved links and API responses.
Why:   Front matter from Markdown files and query results are validated once,
       at the boundary, so the services can trust their inputs.

Design Decision:
    Front matter keys keep their on-disk spelling (`shortTitle`,
    `redirect_from`) through field aliases, while Python code uses
    snake_case attributes. Both spellings are accepted on input.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from docsite.schemas.learning_track import CurrentLearningTrack

# Plan name → short name used inside `{% ifversion %}` conditions and in
# page `versions` front matter.
PLAN_SHORT_NAMES: Dict[str, str] = {
    "free-pro-team": "fpt",
    "enterprise-cloud": "ghec",
    "enterprise-server": "ghes",
}


class Version(BaseModel):
    """A documentation version such as `enterprise-server@3.12`."""

    plan: str
    release: str

    model_config = {"frozen": True}

    @classmethod
    def parse(cls, value: str) -> "Version":
        plan, sep, release = value.partition("@")
        if not sep or not plan or not release:
            raise ValueError(f"Invalid version '{value}'. Expected '<plan>@<release>'")
        return cls(plan=plan, release=release)

    @property
    def name(self) -> str:
        return f"{self.plan}@{self.release}"

    @property
    def short_name(self) -> str:
        return PLAN_SHORT_NAMES.get(self.plan, self.plan)


class Page(BaseModel):
    """
    A documentation page as loaded from `content/**.md`.

    `path` is the canonical path (no language, no version), e.g.
    `/get-started/quickstart/hello-world`. `versions` holds plan short names
    (`fpt`, `ghes`, ...) or full version names; an empty list means the page
    exists in every version.
    """

    path: str
    title: str
    short_title: Optional[str] = Field(default=None, alias="shortTitle")
    intro: str = ""
    versions: List[str] = Field(default_factory=list)
    redirect_from: List[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    @field_validator("versions", mode="before")
    @classmethod
    def normalize_versions(cls, v: Any) -> List[str]:
        # Front matter may use `{fpt: '*', ghes: '*'}` or a plain list
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        if isinstance(v, dict):
            return [str(key) for key in v]
        return [str(item) for item in v]

    @field_validator("redirect_from", mode="before")
    @classmethod
    def normalize_redirects(cls, v: Any) -> List[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return [str(item) for item in v]

    @property
    def product(self) -> Optional[str]:
        segments = [s for s in self.path.split("/") if s]
        return segments[0] if segments else None

    def applies_to(self, version: Version) -> bool:
        """True when the page is published for `version`."""
        if not self.versions or "*" in self.versions:
            return True
        return bool(
            {version.short_name, version.plan, version.name}.intersection(self.versions)
        )


class LinkData(BaseModel):
    """A resolved link to a page, as produced by the link resolver."""

    href: str = Field(description="Localized, versioned URL of the page")
    title: Optional[str] = Field(default=None, description="Short title (text only)")
    intro: Optional[str] = Field(default=None, description="Rendered intro (text only)")
    full_title: Optional[str] = Field(default=None, description="Full title (text only)")


class PageResponse(BaseModel):
    """
    What:  Page payload returned by `GET /{path}`.
    Who:   Consumed by the page templates, which show the learning-track
           banner and prev/next navigation when `learning_track` is set.
    """

    path: str = Field(description="Canonical page path")
    language: str
    version: str
    product: Optional[str] = None
    title: str
    intro: str = ""
    learning_track: Optional[CurrentLearningTrack] = Field(
        default=None,
        description="Learning-track navigation, null when the page is not read as part of a track",
    )


class ErrorResponse(BaseModel):
    """Standardized error response format for all API errors."""

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, degraded")
    version: str = Field(description="Application version")
    pages: int = Field(description="Number of English pages loaded")
    languages: List[str] = Field(description="Languages with loaded content or data")
    uptime_seconds: float = Field(description="Seconds since service started")
