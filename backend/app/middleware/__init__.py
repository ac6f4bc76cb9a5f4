# Middleware package init
"""
Menu Catalog Backend - Middleware Package
==========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    Request ID runs first so the access log line carries the ID; the
    response passes back through the same chain in reverse.
"""
