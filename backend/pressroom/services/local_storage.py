"""
Pressroom Backend — Local Image Storage
=========================================

What:  Stores uploaded images on the local file system.
Who:   Selected with IMAGE_STORAGE_BACKEND=local (development, tests).
How:   Writes with aiofiles under STORAGE_ROOT and returns a `/files/<key>`
       reference that the files route serves back.
"""

import logging
import os
from pathlib import Path
from typing import Optional

import aiofiles

from pressroom.config import settings
from pressroom.exceptions import StorageError
from pressroom.services.storage_base import ImageStorage

logger = logging.getLogger(__name__)

FILES_PREFIX = "/files/"


class LocalImageStorage(ImageStorage):
    """
    Directory layout:
        storage/
        └── article_images/
            ├── 0b7c...e1.jpg
            └── 9f21...4a.png
    """

    def __init__(self, storage_root: Optional[str] = None):
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True)
        logger.info("LocalImageStorage initialized with storage_root=%s", self.storage_root)

    def resolve(self, relative_path: str) -> Path:
        """
        Map a relative key to an absolute path inside the storage root.

        Raises:
            ValueError if the path escapes the root (e.g. ../../etc/passwd)
        """
        full_path = (self.storage_root / relative_path).resolve()
        if not full_path.is_relative_to(self.storage_root):
            raise ValueError(f"Path escapes storage root: {relative_path}")
        return full_path

    async def store(self, key: str, content: bytes, content_type: str) -> str:
        absolute_path = self.resolve(key)
        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", absolute_path, str(e))
            raise StorageError(
                message="Failed to save uploaded image. Please try again.",
                context={"path": str(absolute_path), "os_error": str(e)},
            )

        logger.info("File stored: %s (%d bytes)", key, len(content))
        return FILES_PREFIX + key

    async def delete(self, reference: str) -> None:
        if not reference.startswith(FILES_PREFIX):
            logger.debug("Cleanup: not a local reference: %s", reference)
            return
        try:
            path = self.resolve(reference[len(FILES_PREFIX):])
            if path.exists():
                os.remove(path)
                logger.info("Cleaned up file: %s", path.name)
        except (OSError, ValueError) as e:
            logger.warning("Failed to clean up file %s: %s", reference, str(e))

    async def health_check(self) -> bool:
        return self.storage_root.is_dir() and os.access(self.storage_root, os.W_OK)
