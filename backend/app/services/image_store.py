"""
Menu Catalog Backend - Image Store
===================================

What:  Persists uploaded menu item images and removes them again.
How:   `ImageStore` is the abstract contract; `LocalImageStore` writes to a
       single upload directory with async file I/O (aiofiles). Tests use an
       in-memory implementation of the same contract.
Who:   Called by MenuService on create, update and delete.

Stored path format:
    uploads/<millis>-<original filename>

    The same string is the URL path the file is served from: main.py mounts
    the upload directory read-only at /uploads.

Deletion is best-effort: a missing file or an OS error is logged and never
fails the enclosing request.
"""

import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import Optional

import aiofiles
import aiofiles.os

from app.exceptions import FileStorageError, ValidationError

logger = logging.getLogger(__name__)

# URL prefix under which stored images are served, and the first segment of
# every stored path
UPLOADS_URL_PREFIX = "uploads"

# Exclusive-create retries when two uploads land on the same millisecond
_MAX_NAME_ATTEMPTS = 5

# UTF-8 bytes kept from the client filename; with the "<millis>-" prefix the
# stored name stays well under the usual 255-byte filesystem limit
_MAX_NAME_BYTES = 200
_MAX_SUFFIX_BYTES = 16


def _truncate_utf8(text: str, max_bytes: int) -> str:
    return text.encode("utf-8")[:max_bytes].decode("utf-8", "ignore")


def sanitize_filename(original_name: Optional[str]) -> str:
    """
    Reduce a client-supplied filename to its final path component.

    "../../etc/passwd" → "passwd", "C:\\photos\\burger.png" → "burger.png"

    Over-long names have their stem shortened; a short extension is kept.
    """
    name = (original_name or "").replace("\\", "/").split("/")[-1].strip()
    if name in ("", ".", ".."):
        return "upload"
    if len(name.encode("utf-8")) <= _MAX_NAME_BYTES:
        return name

    suffix = PurePosixPath(name).suffix
    if len(suffix.encode("utf-8")) > _MAX_SUFFIX_BYTES:
        suffix = ""
    stem = name[: len(name) - len(suffix)]
    budget = _MAX_NAME_BYTES - len(suffix.encode("utf-8"))
    return (_truncate_utf8(stem, budget) or "upload") + suffix


class ImageStore(ABC):
    """
    Abstract interface for image persistence.

    Contract:
        - save() returns the stored path to record on the MenuItem
        - delete() never raises; failures are logged
    """

    @abstractmethod
    async def save(self, content: bytes, original_name: str) -> str:
        """
        Persist image bytes.

        Returns:
            Stored path, e.g. "uploads/1718000000000-burger.png"

        Raises:
            ValidationError: Empty or oversized upload
            FileStorageError: The file could not be written
        """

    @abstractmethod
    async def delete(self, stored_path: str) -> None:
        """Remove a stored image (best-effort)."""


class LocalImageStore(ImageStore):
    """
    Filesystem-backed image store.

    Directory Structure:
        uploads/
        ├── 1718000000000-burger.png
        └── 1718000004211-fries.jpg
    """

    def __init__(self, upload_dir: str, max_file_size: Optional[int] = None):
        self.upload_dir = Path(upload_dir).resolve()
        self.max_file_size = max_file_size
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        logger.info("LocalImageStore initialized with upload_dir=%s", self.upload_dir)

    def validate_upload(self, content: bytes, original_name: str) -> None:
        """
        Reject uploads that cannot be a usable image.

        Raises:
            ValidationError for empty files or files above max_file_size
        """
        if not content:
            raise ValidationError(
                message="Uploaded image is empty",
                field="image",
                context={"filename": original_name},
            )

        if self.max_file_size and len(content) > self.max_file_size:
            max_mb = self.max_file_size / (1024 * 1024)
            raise ValidationError(
                message=f"Image is too large. Maximum size is {max_mb:.0f}MB.",
                field="image",
                context={"max_size": self.max_file_size, "actual_size": len(content)},
            )

    def resolve(self, stored_path: str) -> Optional[Path]:
        """
        Map a stored path back to a file inside upload_dir.

        Returns None for paths that do not start with the uploads prefix or
        that would escape the upload directory.
        """
        parts = PurePosixPath(stored_path.replace("\\", "/")).parts
        if len(parts) < 2 or parts[0] != UPLOADS_URL_PREFIX:
            return None
        candidate = self.upload_dir.joinpath(*parts[1:]).resolve()
        if not candidate.is_relative_to(self.upload_dir):
            return None
        return candidate

    async def save(self, content: bytes, original_name: str) -> str:
        self.validate_upload(content, original_name)
        name = sanitize_filename(original_name)
        timestamp = int(time.time() * 1000)

        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)

            for attempt in range(_MAX_NAME_ATTEMPTS):
                filename = f"{timestamp + attempt}-{name}"
                absolute_path = self.upload_dir / filename
                try:
                    # "xb": fail instead of overwriting a same-millisecond upload
                    async with aiofiles.open(absolute_path, "xb") as f:
                        await f.write(content)
                except FileExistsError:
                    continue

                stored_path = f"{UPLOADS_URL_PREFIX}/{filename}"
                logger.info("Image stored: %s (%d bytes)", stored_path, len(content))
                return stored_path

        except OSError as e:
            logger.error("Failed to store image %s: %s", name, str(e))
            raise FileStorageError(
                message="Failed to save uploaded image",
                context={"filename": name, "os_error": str(e)},
            )

        raise FileStorageError(
            message="Failed to save uploaded image",
            context={"filename": name, "reason": "name collision"},
        )

    async def delete(self, stored_path: str) -> None:
        path = self.resolve(stored_path)
        if path is None:
            logger.warning("Refusing to delete image outside upload dir: %s", stored_path)
            return

        try:
            await aiofiles.os.remove(path)
            logger.info("Deleted image: %s", stored_path)
        except FileNotFoundError:
            logger.warning("Image already gone: %s", stored_path)
        except OSError as e:
            logger.warning("Failed to delete image %s: %s", stored_path, str(e))
