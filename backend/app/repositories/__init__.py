# Repositories package init
"""
Menu Catalog Backend - Repositories Layer
==========================================

What:  The only layer that issues SQL against the MenuItem table.
How:   A repository wraps one AsyncSession (one per request) and translates
       SQLAlchemy failures into DatabaseError.

Repository Inventory:
    - MenuItemRepository: list / create / find_by_id / update / delete
"""
