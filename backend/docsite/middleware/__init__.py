# Middleware package init
"""
Docsite Backend - Middleware Package
=====================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [Context] → [Learning Track] → Route Handler

    1. Request ID: correlation ID for every log line of the request
    2. Logging: measures the whole request, logs after the response
    3. Context: language, version, product and page for the path
    4. Learning Track: needs the context; sets current_learning_track

    FastAPI runs middleware in reverse order of registration, so main.py
    adds them last-to-first.
"""
