# Routes package init
"""
Menu Catalog Backend - API Routes Package
==========================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - menu_items.py:  GET/POST   /menu-items
                      GET/PUT/DELETE /menu-items/{id}
    - health.py:      GET /health

    Static images are served by the StaticFiles mount at /uploads (main.py).

Routes stay thin: extract inputs, call MenuService, return the schema.
"""
