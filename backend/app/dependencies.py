"""
Menu Catalog Backend - Route Dependencies
==========================================

What:  FastAPI dependencies that assemble per-request collaborators.
How:   The image store lives on app.state (built by create_app); a fresh
       repository and MenuService are created for each request around the
       request's database session.

Tests override get_menu_service or pass their own image store and database
to create_app().
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.repositories.menu_item_repository import MenuItemRepository
from app.services.image_store import ImageStore
from app.services.menu_service import MenuService


def get_image_store(request: Request) -> ImageStore:
    """Returns the application's image store."""
    return request.app.state.image_store


async def get_menu_service(
    session: AsyncSession = Depends(get_db_session),
    image_store: ImageStore = Depends(get_image_store),
) -> MenuService:
    return MenuService(MenuItemRepository(session), image_store)
