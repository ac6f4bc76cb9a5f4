"""
Menu Catalog Backend - /menu-items Endpoint Tests
==================================================

What:  End-to-end HTTP tests through the FastAPI app.
How:   HTTPX AsyncClient over ASGITransport; SQLite database per test; the
       in-memory image store for most tests and the real LocalImageStore
       for static serving.

Scenarios covered:
    ✅ POST with image → 200 item JSON with uploads/<ts>-<file> path
    ✅ GET filters (category, search, both)
    ✅ PUT unknown id → 404 {"error": "Menu item not found"}
    ✅ PUT keeps / replaces image
    ✅ DELETE twice → 200 then 404
    ✅ Validation failures → 400 {"error": ...}
    ✅ Storage faults → 500 {"error": "Error fetching menu items"}
    ✅ GET /uploads/<file> serves stored bytes
"""

import re
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.dependencies import get_menu_service
from app.repositories.menu_item_repository import MenuItemRepository
from app.services.menu_service import MenuService

BURGER = {"name": "Burger", "price": "9.99", "category": "Mains"}


async def create(client, data=None, image=None):
    files = {"image": image} if image else None
    response = await client.post("/menu-items", data=data or BURGER, files=files)
    assert response.status_code == 200, response.text
    return response.json()


class TestCreate:

    @pytest.mark.asyncio
    async def test_create_with_image(self, test_client, image_store, sample_image_bytes):
        response = await test_client.post(
            "/menu-items",
            data=BURGER,
            files={"image": ("burger.jpg", sample_image_bytes, "image/jpeg")},
        )

        assert response.status_code == 200
        body = response.json()
        assert isinstance(body["id"], int)
        assert body["name"] == "Burger"
        assert body["price"] == 9.99
        assert body["category"] == "Mains"
        assert re.fullmatch(r"uploads/\d+-burger\.jpg", body["image"])
        assert image_store.files[body["image"]] == sample_image_bytes

    @pytest.mark.asyncio
    async def test_create_without_image_stores_null(self, test_client):
        body = await create(test_client)
        assert body["image"] is None

    @pytest.mark.asyncio
    async def test_create_then_get_round_trips(self, test_client):
        created = await create(test_client, image=("fries.png", b"png-bytes", "image/png"))

        response = await test_client.get(f"/menu-items/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, test_client):
        ids = {(await create(test_client, {**BURGER, "name": f"Item {n}"}))["id"] for n in range(4)}
        assert len(ids) == 4

    @pytest.mark.asyncio
    async def test_non_numeric_price_rejected(self, test_client, image_store):
        response = await test_client.post(
            "/menu-items",
            data={**BURGER, "price": "cheap"},
            files={"image": ("burger.jpg", b"data", "image/jpeg")},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "price must be a number, got 'cheap'"}
        assert image_store.files == {}

    @pytest.mark.asyncio
    async def test_missing_name_rejected(self, test_client):
        response = await test_client.post("/menu-items", data={"price": "1", "category": "Mains"})

        assert response.status_code == 400
        assert response.json() == {"error": "name is required"}

    @pytest.mark.asyncio
    async def test_empty_image_rejected(self, test_client):
        response = await test_client.post(
            "/menu-items",
            data=BURGER,
            files={"image": ("burger.jpg", b"", "image/jpeg")},
        )

        assert response.status_code == 400
        assert "error" in response.json()


class TestList:

    @pytest.mark.asyncio
    async def test_filters(self, test_client):
        await create(test_client, {"name": "Cheese Burger", "price": "10", "category": "Mains"})
        await create(test_client, {"name": "Fries", "price": "3", "category": "Sides"})
        await create(test_client, {"name": "Burger Sauce", "price": "1", "category": "Sides"})

        all_items = (await test_client.get("/menu-items")).json()
        sides = (await test_client.get("/menu-items", params={"category": "Sides"})).json()
        burgers = (await test_client.get("/menu-items", params={"search": "bUrGeR"})).json()
        both = (await test_client.get(
            "/menu-items", params={"category": "Sides", "search": "burger"}
        )).json()

        assert len(all_items) == 3
        assert {i["name"] for i in sides} == {"Fries", "Burger Sauce"}
        assert {i["name"] for i in burgers} == {"Cheese Burger", "Burger Sauce"}
        assert [i["name"] for i in both] == ["Burger Sauce"]

    @pytest.mark.asyncio
    async def test_empty_catalog(self, test_client):
        response = await test_client.get("/menu-items")
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_repository_fault_returns_500(self, test_app, test_client, image_store, mock_db_session):
        mock_db_session.execute = AsyncMock(side_effect=SQLAlchemyError("connection lost"))
        test_app.dependency_overrides[get_menu_service] = lambda: MenuService(
            MenuItemRepository(mock_db_session), image_store
        )

        response = await test_client.get("/menu-items")

        assert response.status_code == 500
        assert response.json() == {"error": "Error fetching menu items"}


class TestUpdate:

    @pytest.mark.asyncio
    async def test_update_unknown_id_returns_404(self, test_client, image_store):
        response = await test_client.put(
            "/menu-items/999",
            data=BURGER,
            files={"image": ("new.jpg", b"new", "image/jpeg")},
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Menu item not found"}
        assert image_store.files == {}

    @pytest.mark.asyncio
    async def test_update_without_image_preserves_it(self, test_client):
        created = await create(test_client, image=("old.jpg", b"old", "image/jpeg"))

        response = await test_client.put(
            f"/menu-items/{created['id']}",
            data={"name": "Double Burger", "price": "13.5", "category": "Specials"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "id": created["id"],
            "name": "Double Burger",
            "price": 13.5,
            "category": "Specials",
            "image": created["image"],
        }

    @pytest.mark.asyncio
    async def test_update_with_image_replaces_and_deletes_old(self, test_client, image_store):
        created = await create(test_client, image=("old.jpg", b"old", "image/jpeg"))

        response = await test_client.put(
            f"/menu-items/{created['id']}",
            data=BURGER,
            files={"image": ("new.jpg", b"new", "image/jpeg")},
        )

        body = response.json()
        assert response.status_code == 200
        assert body["image"] != created["image"]
        assert body["image"].endswith("-new.jpg")
        assert image_store.deleted == [created["image"]]
        assert created["image"] not in image_store.files

    @pytest.mark.asyncio
    async def test_update_with_invalid_price_rejected(self, test_client):
        created = await create(test_client)

        response = await test_client.put(
            f"/menu-items/{created['id']}",
            data={**BURGER, "price": "NaN"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "price must be a finite number"}

    @pytest.mark.asyncio
    async def test_get_and_update_id_beyond_integer_range_return_404(self, test_client, image_store):
        get_response = await test_client.get("/menu-items/2147483648")
        put_response = await test_client.put(
            "/menu-items/99999999999999999999",
            data=BURGER,
            files={"image": ("new.jpg", b"new", "image/jpeg")},
        )

        assert get_response.status_code == 404
        assert put_response.status_code == 404
        assert put_response.json() == {"error": "Menu item not found"}
        assert image_store.files == {}

    @pytest.mark.asyncio
    async def test_non_integer_id_rejected(self, test_client):
        response = await test_client.put("/menu-items/abc", data=BURGER)

        assert response.status_code == 400
        assert "item_id" in response.json()["error"]


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_twice(self, test_client, image_store):
        created = await create(test_client, image=("burger.jpg", b"img", "image/jpeg"))

        first = await test_client.delete(f"/menu-items/{created['id']}")
        second = await test_client.delete(f"/menu-items/{created['id']}")

        assert first.status_code == 200
        assert first.json() == {"message": "Menu item deleted"}
        assert second.status_code == 404
        assert second.json() == {"error": "Menu item not found"}
        assert image_store.deleted == [created["image"]]

    @pytest.mark.asyncio
    async def test_delete_id_beyond_integer_range_returns_404(self, test_client):
        response = await test_client.delete("/menu-items/99999999999999999999")

        assert response.status_code == 404
        assert response.json() == {"error": "Menu item not found"}

    @pytest.mark.asyncio
    async def test_deleted_item_is_gone(self, test_client):
        created = await create(test_client)

        await test_client.delete(f"/menu-items/{created['id']}")
        response = await test_client.get(f"/menu-items/{created['id']}")

        assert response.status_code == 404


class TestUploadsAndHealth:

    @pytest.mark.asyncio
    async def test_stored_image_is_served(self, local_client, sample_image_bytes):
        created = await create(
            local_client, image=("burger.jpg", sample_image_bytes, "image/jpeg")
        )

        response = await local_client.get(f"/{created['image']}")

        assert response.status_code == 200
        assert response.content == sample_image_bytes

    @pytest.mark.asyncio
    async def test_delete_removes_served_file(self, local_client):
        created = await create(local_client, image=("burger.jpg", b"img", "image/jpeg"))

        await local_client.delete(f"/menu-items/{created['id']}")
        response = await local_client.get(f"/{created['image']}")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_with_image_removes_served_old_file(self, local_client):
        created = await create(local_client, image=("old.jpg", b"old", "image/jpeg"))

        response = await local_client.put(
            f"/menu-items/{created['id']}",
            data=BURGER,
            files={"image": ("new.jpg", b"new", "image/jpeg")},
        )
        updated = response.json()

        assert response.status_code == 200
        assert (await local_client.get(f"/{created['image']}")).status_code == 404
        new_file = await local_client.get(f"/{updated['image']}")
        assert new_file.status_code == 200
        assert new_file.content == b"new"

    @pytest.mark.asyncio
    async def test_missing_upload_returns_404(self, local_client):
        response = await local_client.get("/uploads/123-nothing.jpg")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    @pytest.mark.asyncio
    async def test_request_id_header(self, test_client):
        response = await test_client.get("/menu-items", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"
