"""
Menu Catalog Backend - Menu Service (Business Logic Orchestrator)
==================================================================

What:  Coordinates the image store with the MenuItem repository.
How:   Receives both collaborators in its constructor (built per request by
       app/dependencies.py) and returns response schemas to the routes.
Who:   Called by the /menu-items route handlers.

Orchestration Flow (POST/PUT with an image):
    ┌──────────┐    ┌─────────────┐    ┌──────────────┐    ┌──────────────┐
    │  Route   │───▶│  Validate   │───▶│ ImageStore   │───▶│  Repository  │
    │ (form)   │    │  fields     │    │ save()       │    │ create/update│
    └──────────┘    └─────────────┘    └──────────────┘    └──────────────┘

    On repository failure: the freshly saved image is deleted again.
    On successful replace/delete: the previous image is deleted (best-effort).
"""

import logging
from typing import List, Optional

from app.exceptions import NotFoundError
from app.repositories.menu_item_repository import MENU_ITEM, MenuItemRepository
from app.schemas.menu_item import MenuItemFields, MenuItemResponse
from app.services.image_store import ImageStore

logger = logging.getLogger(__name__)


class MenuService:
    """
    Business logic layer for menu item operations.

    Responsibilities:
        - list_items(): filtered listing
        - get_item(): single item with not-found handling
        - create_item(), update_item(), delete_item(): writes with image
          bookkeeping
    """

    def __init__(self, repository: MenuItemRepository, image_store: ImageStore):
        self.repository = repository
        self.image_store = image_store

    async def list_items(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[MenuItemResponse]:
        items = await self.repository.list(category=category, search=search)
        return [MenuItemResponse.model_validate(item) for item in items]

    async def get_item(self, item_id: int) -> MenuItemResponse:
        """
        Raises:
            NotFoundError: Item does not exist (→ 404)
        """
        item = await self.repository.find_by_id(item_id)
        if item is None:
            raise NotFoundError(resource=MENU_ITEM, resource_id=item_id)
        return MenuItemResponse.model_validate(item)

    async def _save_image(
        self,
        image_name: Optional[str],
        image_content: Optional[bytes],
    ) -> Optional[str]:
        # No filename means the client sent no file part (or an empty one)
        if not image_name or image_content is None:
            return None
        return await self.image_store.save(image_content, image_name)

    async def create_item(
        self,
        fields: MenuItemFields,
        image_name: Optional[str] = None,
        image_content: Optional[bytes] = None,
    ) -> MenuItemResponse:
        """
        Store the optional image, then insert the row.

        Error Recovery:
            Image save fails      → ValidationError / FileStorageError, nothing written
            Insert fails          → DatabaseError, saved image removed
        """
        image_path = await self._save_image(image_name, image_content)

        try:
            item = await self.repository.create(fields, image_path=image_path)
        except Exception:
            if image_path:
                await self.image_store.delete(image_path)
            raise

        return MenuItemResponse.model_validate(item)

    async def update_item(
        self,
        item_id: int,
        fields: MenuItemFields,
        image_name: Optional[str] = None,
        image_content: Optional[bytes] = None,
    ) -> MenuItemResponse:
        """
        Replace the item's fields; replace its image only when a new one is
        uploaded.

        Existence is checked before any file is written, so an unknown id
        never leaves an orphaned upload behind.
        """
        existing = await self.repository.find_by_id(item_id)
        if existing is None:
            raise NotFoundError(resource=MENU_ITEM, resource_id=item_id)
        previous_image = existing.image

        new_image = await self._save_image(image_name, image_content)

        try:
            item = await self.repository.update(item_id, fields, new_image_path=new_image)
        except Exception:
            if new_image:
                await self.image_store.delete(new_image)
            raise

        if new_image and previous_image and previous_image != new_image:
            await self.image_store.delete(previous_image)

        return MenuItemResponse.model_validate(item)

    async def delete_item(self, item_id: int) -> None:
        """
        Delete the row, then its image file.

        Raises:
            NotFoundError: Item does not exist (→ 404)
        """
        existing = await self.repository.find_by_id(item_id)
        if existing is None:
            raise NotFoundError(resource=MENU_ITEM, resource_id=item_id)
        image = existing.image

        await self.repository.delete(item_id)

        if image:
            await self.image_store.delete(image)
