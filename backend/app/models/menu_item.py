"""
Menu Catalog Backend - MenuItem SQLAlchemy Model
=================================================

What:  ORM model representing the `MenuItem` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by MenuItemRepository for CRUD operations.

Table Design:
    - Integer autoincrement primary key, assigned by the database on insert
    - price: FLOAT; the API validates it is finite and non-negative
    - image: stored path "uploads/<timestamp>-<name>", NULL when no image
    - Table name kept as "MenuItem" so existing catalog databases map as-is
"""

from typing import Optional

from sqlalchemy import Float, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class MenuItem(Base):
    """
    A single catalog entry.

    Lifecycle:
        1. Created by POST /menu-items (image optional)
        2. Updated by PUT /menu-items/{id}; image replaced only on new upload
        3. Deleted by DELETE /menu-items/{id}; its image file is removed too
    """

    __tablename__ = "MenuItem"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    price: Mapped[float] = mapped_column(
        Float,
        nullable=False,
    )

    category: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    image: Mapped[Optional[str]] = mapped_column(
        String(512),
        nullable=True,
        default=None,
    )

    # category is the only exact-match filter on the list endpoint
    __table_args__ = (
        Index("idx_menu_item_category", "category"),
    )

    def __repr__(self) -> str:
        return (
            f"<MenuItem(id={self.id}, name='{self.name}', "
            f"category='{self.category}')>"
        )
