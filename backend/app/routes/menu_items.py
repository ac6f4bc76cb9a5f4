"""
Menu Catalog Backend - Menu Item Route Handlers
================================================

What:  The /menu-items resource: list, read, create, update, delete.
How:   Extracts query/form/file inputs, validates fields through
       MenuItemFields, delegates to MenuService, returns JSON.

Route Inventory:
    GET    /menu-items          ?category=&search=   → [MenuItem]
    GET    /menu-items/{id}                          → MenuItem
    POST   /menu-items          multipart form       → MenuItem
    PUT    /menu-items/{id}     multipart form       → MenuItem
    DELETE /menu-items/{id}                          → {"message": ...}

Errors are raised as application exceptions and rendered by the global
handlers in main.py as {"error": "..."}.
"""

import logging
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from app.dependencies import get_menu_service
from app.schemas.menu_item import (
    ErrorResponse,
    MenuItemFields,
    MenuItemResponse,
    MessageResponse,
)
from app.services.menu_service import MenuService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/menu-items", tags=["Menu Items"])

_WRITE_ERRORS = {
    400: {"description": "Invalid form fields or image", "model": ErrorResponse},
    500: {"description": "Storage failure", "model": ErrorResponse},
}


async def _read_upload(image: Optional[UploadFile]) -> Tuple[Optional[str], Optional[bytes]]:
    """Returns (filename, content), or (None, None) when no file was sent."""
    if image is None or not image.filename:
        return None, None
    try:
        content = await image.read()
    finally:
        await image.close()
    logger.info("Received image upload: filename=%s, size=%d bytes", image.filename, len(content))
    return image.filename, content


@router.get(
    "",
    response_model=List[MenuItemResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List menu items",
    description=(
        "Returns all menu items. `category` filters by exact category and "
        "`search` by case-insensitive substring of the name; both apply together."
    ),
)
async def list_menu_items(
    category: Optional[str] = Query(default=None, description="Exact category match"),
    search: Optional[str] = Query(default=None, description="Case-insensitive name substring"),
    service: MenuService = Depends(get_menu_service),
) -> List[MenuItemResponse]:
    return await service.list_items(category=category, search=search)


@router.get(
    "/{item_id}",
    response_model=MenuItemResponse,
    responses={404: {"description": "Menu item not found", "model": ErrorResponse}},
    summary="Get a single menu item",
)
async def get_menu_item(
    item_id: int,
    service: MenuService = Depends(get_menu_service),
) -> MenuItemResponse:
    return await service.get_item(item_id)


@router.post(
    "",
    response_model=MenuItemResponse,
    responses=_WRITE_ERRORS,
    summary="Create a menu item",
    description="Multipart form with name, price, category and an optional `image` file.",
)
async def create_menu_item(
    name: Optional[str] = Form(default=None),
    price: Optional[str] = Form(default=None),
    category: Optional[str] = Form(default=None),
    image: Optional[UploadFile] = File(default=None, description="Optional item image"),
    service: MenuService = Depends(get_menu_service),
) -> MenuItemResponse:
    # Validate before reading the file so bad forms never touch the disk
    fields = MenuItemFields.from_form(name=name, price=price, category=category)
    image_name, image_content = await _read_upload(image)
    return await service.create_item(
        fields,
        image_name=image_name,
        image_content=image_content,
    )


@router.put(
    "/{item_id}",
    response_model=MenuItemResponse,
    responses={
        **_WRITE_ERRORS,
        404: {"description": "Menu item not found", "model": ErrorResponse},
    },
    summary="Update a menu item",
    description=(
        "Replaces name, price and category. The image is replaced only when a "
        "new `image` file is uploaded; the previous file is then deleted."
    ),
)
async def update_menu_item(
    item_id: int,
    name: Optional[str] = Form(default=None),
    price: Optional[str] = Form(default=None),
    category: Optional[str] = Form(default=None),
    image: Optional[UploadFile] = File(default=None, description="Optional replacement image"),
    service: MenuService = Depends(get_menu_service),
) -> MenuItemResponse:
    fields = MenuItemFields.from_form(name=name, price=price, category=category)
    image_name, image_content = await _read_upload(image)
    return await service.update_item(
        item_id,
        fields,
        image_name=image_name,
        image_content=image_content,
    )


@router.delete(
    "/{item_id}",
    response_model=MessageResponse,
    responses={
        404: {"description": "Menu item not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a menu item",
    description="Deletes the item and, best-effort, its image file.",
)
async def delete_menu_item(
    item_id: int,
    service: MenuService = Depends(get_menu_service),
) -> MessageResponse:
    await service.delete_item(item_id)
    return MessageResponse(message="Menu item deleted")
