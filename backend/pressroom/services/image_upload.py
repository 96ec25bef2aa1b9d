"""
Pressroom Backend — Image Upload Adapter
==========================================

What:  Turns the optional `image` file field of a multipart request into a
       stable reference before any store operation runs.
Why:   Article handlers only ever see a string reference (or None), never
       raw bytes; the storage backend behind it is interchangeable.
How:   Validate → generate key → store via the configured ImageStorage.

Validation order (cheapest first):
    1. Extension check   — rejects obviously wrong files without reading them
    2. Size check        — empty files and files above MAX_FILE_SIZE
    3. MIME type check   — magic bytes, catches renamed files

Outcomes:
    - No file / empty filename → None (not an error)
    - Encoding outside the accepted set → UploadRejectedError (415)
    - Size problem → ValidationError (400)
    - Storage failure → StorageError (503)
"""

import logging
import uuid
from pathlib import Path
from typing import Dict, Optional

from fastapi import UploadFile

from pressroom.config import settings
from pressroom.exceptions import StorageError, UploadRejectedError, ValidationError
from pressroom.services.storage_base import ImageStorage

logger = logging.getLogger(__name__)

# Extension → MIME type for the encodings this service understands.
# The accepted subset is configured with ALLOWED_IMAGE_FORMATS.
EXTENSION_MIME_TYPES: Dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
}


class ImageUploadAdapter:
    """Validates an uploaded image and hands it to the storage backend."""

    def __init__(self, storage: ImageStorage, folder: Optional[str] = None):
        self.storage = storage
        self.folder = (folder or settings.image_folder).strip("/")
        self.allowed_extensions = [
            ext for ext in settings.allowed_image_extensions if ext in EXTENSION_MIME_TYPES
        ]
        self.allowed_mime_types = {EXTENSION_MIME_TYPES[ext] for ext in self.allowed_extensions}

    def validate_extension(self, filename: str) -> str:
        """Returns the normalized extension (lowercase with dot)."""
        ext = Path(filename).suffix.lower()
        if ext not in self.allowed_extensions:
            raise UploadRejectedError(
                message=(
                    f"File type '{ext or filename}' is not supported. "
                    f"Allowed types: {', '.join(sorted(self.allowed_extensions))}"
                ),
                context={"extension": ext, "allowed": sorted(self.allowed_extensions)},
            )
        return ext

    def validate_size(self, content_length: Optional[int], actual_size: int) -> None:
        """
        Checks the Content-Length reported by the client first, then the
        actual byte count (clients can misreport).
        """
        max_mb = settings.max_file_size / (1024 * 1024)

        if actual_size == 0:
            raise ValidationError(
                message="Uploaded image is empty.",
                field="image",
            )

        if content_length and content_length > settings.max_file_size:
            raise ValidationError(
                message=f"File size exceeds maximum of {max_mb:.0f}MB. Please upload a smaller image.",
                field="image",
                context={"max_size_mb": max_mb, "reported_size": content_length},
            )

        if actual_size > settings.max_file_size:
            raise ValidationError(
                message=f"File size ({actual_size / (1024 * 1024):.1f}MB) exceeds maximum of {max_mb:.0f}MB.",
                field="image",
                context={"max_size_mb": max_mb, "actual_size": actual_size},
            )

    def validate_mime_type(self, content: bytes, filename: str) -> str:
        """
        Detects the real MIME type from the file header bytes.

        python-magic needs the libmagic system library; where it is missing
        the type is taken from the (already validated) extension.
        """
        try:
            import magic
            mime_type = magic.from_buffer(content, mime=True)
        except ImportError:
            logger.warning(
                "python-magic not available — falling back to extension-based type detection. "
                "Install libmagic for production security."
            )
            mime_type = EXTENSION_MIME_TYPES.get(
                Path(filename).suffix.lower(), "application/octet-stream"
            )
        except Exception as e:
            logger.error("MIME type detection failed: %s", str(e))
            raise StorageError(
                message="Could not verify file type. Please try again.",
                context={"error": str(e)},
            )

        if mime_type not in self.allowed_mime_types:
            raise UploadRejectedError(
                message=f"File content type '{mime_type}' is not supported.",
                context={"detected_mime": mime_type, "allowed": sorted(self.allowed_mime_types)},
            )
        return mime_type

    def generate_key(self, extension: str) -> str:
        # Normalize .jpeg → .jpg so keys carry one extension per encoding
        if extension == ".jpeg":
            extension = ".jpg"
        return f"{self.folder}/{uuid.uuid4()}{extension}"

    async def store_bytes(
        self,
        filename: str,
        content: bytes,
        content_length: Optional[int] = None,
    ) -> str:
        ext = self.validate_extension(filename)
        self.validate_size(content_length, len(content))
        mime_type = self.validate_mime_type(content, filename)
        return await self.storage.store(self.generate_key(ext), content, mime_type)

    async def accept(self, upload: Optional[UploadFile]) -> Optional[str]:
        """
        Process the request's image field.

        Returns:
            The stored image reference, or None when no file was sent.
        """
        if upload is None or not upload.filename:
            return None

        try:
            content = await upload.read()
            logger.info(
                "Received image upload: filename=%s, size=%d bytes",
                upload.filename,
                len(content),
            )
            return await self.store_bytes(upload.filename, content, upload.size)
        finally:
            await upload.close()

    async def discard(self, reference: Optional[str]) -> None:
        """Best-effort removal of an image whose store operation failed."""
        if reference:
            await self.storage.delete(reference)


def create_image_storage() -> ImageStorage:
    """Build the backend selected by IMAGE_STORAGE_BACKEND."""
    if settings.image_storage_backend == "local":
        from pressroom.services.local_storage import LocalImageStorage
        return LocalImageStorage()

    from pressroom.services.object_storage import ObjectImageStorage
    return ObjectImageStorage()
