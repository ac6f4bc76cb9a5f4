# Services package init
"""
Menu Catalog Backend - Services Layer
======================================

What:  Business logic layer sitting between routes (HTTP) and repositories.
How:   Services receive their collaborators through their constructors; the
       route dependencies in app/dependencies.py build them per request.

Service Inventory:
    - ImageStore (abstract): Interface for uploaded image persistence
    - LocalImageStore: Filesystem implementation (aiofiles)
    - MenuService: Orchestrates validation → image store → repository
"""
