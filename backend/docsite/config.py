"""
Docsite Backend - Application Configuration
============================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the app factory, the site loader and the path utilities.
When:  Loaded once at module import time; checked again in the lifespan.

Comma-separated values:
    Lists (languages, versions, CORS origins) are kept as plain strings in
    the environment and exposed as lists through properties, so that
    `LANGUAGES=en,ja,es` works without JSON quoting.
"""

from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for local development against the
    `./site` directory.
    """

    # ── Site Content ──────────────────────────────────────────────────────
    # What: Directory holding `content/`, `data/` and `translations/<lang>/`
    site_root: str = Field(default="./site")

    # ── Languages ─────────────────────────────────────────────────────────
    # What: Language whose content and data are authoritative
    # Why: Translations are overlaid on top of it and may be incomplete
    default_language: str = Field(default="en")
    languages: str = Field(default="en,es,ja,pt,zh,ru,fr,ko,de")

    @property
    def languages_list(self) -> List[str]:
        return _split_csv(self.languages)

    # ── Versions ──────────────────────────────────────────────────────────
    # Format: <plan>@<release>, e.g. enterprise-server@3.12
    # The default version never appears in generated hrefs.
    default_version: str = Field(default="free-pro-team@latest")
    supported_versions: str = Field(
        default=(
            "free-pro-team@latest,enterprise-cloud@latest,"
            "enterprise-server@3.12,enterprise-server@3.11"
        )
    )

    @property
    def supported_versions_list(self) -> List[str]:
        return _split_csv(self.supported_versions)

    # ── Rendering ─────────────────────────────────────────────────────────
    # What: Number of compiled template strings kept in memory
    # Why: Track titles and guide paths are re-rendered on every request
    template_cache_size: int = Field(default=512, ge=0, le=100_000)

    # ── CORS ──────────────────────────────────────────────────────────────
    cors_origins: str = Field(default="http://localhost:3000")

    @property
    def cors_origins_list(self) -> List[str]:
        return _split_csv(self.cors_origins)

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    def validate_site(self) -> None:
        """
        What:  Checks that the site root exists and the defaults are coherent.
        When:  Called during app startup (lifespan).
        Raises ValueError listing every problem found.
        """
        errors = []
        if not Path(self.site_root).is_dir():
            errors.append(f"SITE_ROOT '{self.site_root}' is not a directory")
        if self.default_language not in self.languages_list:
            errors.append(
                f"DEFAULT_LANGUAGE '{self.default_language}' is not listed in LANGUAGES"
            )
        if self.default_version not in self.supported_versions_list:
            errors.append(
                f"DEFAULT_VERSION '{self.default_version}' is not listed in SUPPORTED_VERSIONS"
            )
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


settings = Settings()
