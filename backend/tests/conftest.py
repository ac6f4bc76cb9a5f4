"""
Menu Catalog Backend - Test Configuration (conftest.py)
========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Each test gets a throwaway SQLite database (aiosqlite) and upload
       directory under tmp_path; endpoint tests talk to a fresh app through
       HTTPX's ASGITransport.

Fixture Hierarchy (all function-scoped):
    ├── test_settings: Settings pointing at tmp_path
    ├── database: Database with tables created, disposed after the test
    ├── db_session: AsyncSession on that database
    ├── image_store: InMemoryImageStore fake (no disk I/O)
    ├── mock_db_session: AsyncMock session for fault injection
    ├── test_app / test_client: App wired to the fake image store
    └── local_app / local_client: App wired to a real LocalImageStore
"""

import itertools
import os
import tempfile
from typing import Dict, List

# Must run before any app import: app.main builds a module-level app from
# environment settings.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="menu_catalog_db_"), "default.db"
)
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="menu_catalog_uploads_")
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402

from app.config import Settings  # noqa: E402
from app.database import Database  # noqa: E402
from app.exceptions import ValidationError  # noqa: E402
from app.main import create_app  # noqa: E402
from app.services.image_store import (  # noqa: E402
    UPLOADS_URL_PREFIX,
    ImageStore,
    LocalImageStore,
    sanitize_filename,
)


class InMemoryImageStore(ImageStore):
    """
    ImageStore fake that keeps files in a dict.

    Attributes:
        files:   stored_path → bytes for every live image
        deleted: every stored_path passed to delete(), in call order
    """

    def __init__(self):
        self.files: Dict[str, bytes] = {}
        self.deleted: List[str] = []
        self._counter = itertools.count(1_700_000_000_000)

    async def save(self, content: bytes, original_name: str) -> str:
        if not content:
            raise ValidationError(message="Uploaded image is empty", field="image")
        stored_path = f"{UPLOADS_URL_PREFIX}/{next(self._counter)}-{sanitize_filename(original_name)}"
        self.files[stored_path] = content
        return stored_path

    async def delete(self, stored_path: str) -> None:
        self.deleted.append(stored_path)
        self.files.pop(stored_path, None)


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'menu.db'}",
        upload_dir=str(tmp_path / "uploads"),
        max_file_size=1024 * 1024,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def database(test_settings):
    db = Database.from_settings(test_settings)
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def image_store():
    return InMemoryImageStore()


@pytest.fixture
def mock_db_session():
    """
    Mock async session for simulating database faults.

    Usage:
        mock_db_session.execute.side_effect = SQLAlchemyError("boom")
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_image_bytes():
    """Minimal JPEG: SOI marker + JFIF header + EOI marker."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest.fixture
def test_app(test_settings, database, image_store):
    return create_app(settings=test_settings, database=database, image_store=image_store)


@pytest_asyncio.fixture
async def test_client(test_app):
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def local_app(test_settings, database):
    store = LocalImageStore(test_settings.upload_dir, max_file_size=test_settings.max_file_size)
    return create_app(settings=test_settings, database=database, image_store=store)


@pytest_asyncio.fixture
async def local_client(local_app):
    transport = ASGITransport(app=local_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
