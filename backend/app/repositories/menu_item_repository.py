"""
Menu Catalog Backend - MenuItem Repository
===========================================

What:  CRUD operations against the MenuItem table.
How:   Wraps one AsyncSession. Writes are committed here so that callers can
       safely remove image files once a method returns. Every SQLAlchemy
       failure is rolled back and re-raised as DatabaseError carrying the
       operation's fixed client message.
Who:   Constructed per request by the route dependencies; used by MenuService.

Query patterns:
    - list:        SELECT ... [WHERE category = :c] [AND lower(name) LIKE lower(:s)]
                   ORDER BY id
    - find_by_id:  session.get() → identity map first, then primary key lookup
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, NotFoundError
from app.models.menu_item import MenuItem
from app.schemas.menu_item import MenuItemFields

logger = logging.getLogger(__name__)

MENU_ITEM = "Menu item"

# Ids are a 32-bit INTEGER column; anything outside can never match a row
MAX_ITEM_ID = 2_147_483_647


class MenuItemRepository:
    """Persistence for MenuItem rows over a single session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _fail(self, message: str, error: SQLAlchemyError, **context) -> DatabaseError:
        logger.error("%s: %s", message, str(error), exc_info=True)
        try:
            await self.session.rollback()
        except SQLAlchemyError:
            logger.warning("Rollback after failure also failed", exc_info=True)
        context["error_type"] = type(error).__name__
        return DatabaseError(message=message, context=context)

    async def list(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[MenuItem]:
        """
        Return items matching every supplied filter.

        Args:
            category: Exact category match; None or "" means no constraint
            search:   Case-insensitive substring of name; None or "" means
                      no constraint. % and _ are matched literally.
        """
        query = select(MenuItem)
        if category:
            query = query.where(MenuItem.category == category)
        if search:
            query = query.where(MenuItem.name.icontains(search, autoescape=True))
        query = query.order_by(MenuItem.id)

        try:
            result = await self.session.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise await self._fail(
                "Error fetching menu items", e, category=category, search=search
            )

    async def find_by_id(self, item_id: int) -> Optional[MenuItem]:
        """Return the item with this id, or None."""
        if not 1 <= item_id <= MAX_ITEM_ID:
            return None
        try:
            return await self.session.get(MenuItem, item_id)
        except SQLAlchemyError as e:
            raise await self._fail("Error fetching menu item", e, item_id=item_id)

    async def create(
        self,
        fields: MenuItemFields,
        image_path: Optional[str] = None,
    ) -> MenuItem:
        """Insert and commit a new row; the database assigns the id."""
        item = MenuItem(
            name=fields.name,
            price=fields.price,
            category=fields.category,
            image=image_path,
        )
        try:
            self.session.add(item)
            await self.session.commit()
        except SQLAlchemyError as e:
            raise await self._fail("Error creating menu item", e, name=fields.name)

        logger.info("Menu item created: %s", item.id)
        return item

    async def update(
        self,
        item_id: int,
        fields: MenuItemFields,
        new_image_path: Optional[str] = None,
    ) -> MenuItem:
        """
        Replace name, price and category; replace image only when a new
        path is supplied.

        Raises:
            NotFoundError: No row with this id
            DatabaseError: The update could not be committed
        """
        item = await self.find_by_id(item_id)
        if item is None:
            raise NotFoundError(resource=MENU_ITEM, resource_id=item_id)

        item.name = fields.name
        item.price = fields.price
        item.category = fields.category
        if new_image_path is not None:
            item.image = new_image_path

        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            raise await self._fail("Error updating menu item", e, item_id=item_id)

        logger.info("Menu item updated: %s", item_id)
        return item

    async def delete(self, item_id: int) -> None:
        """
        Delete and commit the row.

        Raises:
            NotFoundError: No row with this id
            DatabaseError: The delete could not be committed
        """
        item = await self.find_by_id(item_id)
        if item is None:
            raise NotFoundError(resource=MENU_ITEM, resource_id=item_id)

        try:
            await self.session.delete(item)
            await self.session.commit()
        except SQLAlchemyError as e:
            raise await self._fail("Error deleting menu item", e, item_id=item_id)

        logger.info("Menu item deleted: %s", item_id)
