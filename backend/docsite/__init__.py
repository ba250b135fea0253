"""
Docsite Backend - Application Package Initializer
==================================================

What: Marks the `docsite` directory as a Python package.
Who:  Imported by uvicorn (`docsite.main:app`), pytest, and every module below.

Architecture Note:
    The backend serves documentation pages and decorates them with
    learning-track navigation. It is layered the same way top to bottom:

    ┌─────────────────────────────────────┐
    │        Routes (API Layer)           │  ← page + health endpoints
    ├─────────────────────────────────────┤
    │        Middleware (Pipeline)        │  ← request ID, logging, context,
    │                                     │    learning track
    ├─────────────────────────────────────┤
    │        Services (Site Logic)        │  ← rendering, links, tracks
    ├─────────────────────────────────────┤
    │        Schemas (Data)               │  ← pydantic models
    └─────────────────────────────────────┘

    Site content (pages, YAML data, translations) is loaded once at startup
    and only read afterwards.
"""

__version__ = "1.0.0"
