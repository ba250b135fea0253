# Routes package init
"""
Docsite Backend - API Routes Package
=====================================

Route Inventory:
    - health.py:  GET /health    (service health check)
    - pages.py:   GET /{path}    (page payload with learning-track navigation)

The page route matches every path, so it must be included last.
"""
