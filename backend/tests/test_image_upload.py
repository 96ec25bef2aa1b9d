"""
Pressroom Backend — Image Upload Adapter Unit Tests
=====================================================

What:  Tests for ImageUploadAdapter validation and LocalImageStorage.
Why:   The upload adapter is the only place raw bytes enter the service;
       anything it lets through ends up referenced from an article.
How:   Local storage in a temporary directory; MIME detection is pinned by
       substituting a fake `magic` module where the test depends on it.

Test Strategy:
    ✅ Allowed extensions (.jpg, .jpeg, .png, .gif), case-insensitive
    ✅ Rejected extensions raise UploadRejectedError (415)
    ✅ Size limits (empty, boundary at MAX_FILE_SIZE)
    ✅ Content that contradicts its extension is rejected
    ✅ Keys live under the image folder with a UUID name
    ✅ Local storage rejects path traversal
"""

import sys
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from pressroom.config import settings
from pressroom.exceptions import StorageError, UploadRejectedError, ValidationError
from pressroom.services.image_upload import ImageUploadAdapter
from pressroom.services.local_storage import FILES_PREFIX, LocalImageStorage


def _fake_magic(mime_type):
    return SimpleNamespace(from_buffer=lambda content, mime=True: mime_type)


class TestExtensionValidation:

    def setup_method(self):
        self.adapter = ImageUploadAdapter(storage=MagicMock())

    @pytest.mark.parametrize("filename", ["photo.jpg", "photo.jpeg", "photo.png", "anim.gif"])
    def test_allowed(self, filename):
        self.adapter.validate_extension(filename)

    def test_case_insensitive(self):
        assert self.adapter.validate_extension("photo.JPG") == ".jpg"
        assert self.adapter.validate_extension("photo.Png") == ".png"

    @pytest.mark.parametrize("filename", ["doc.pdf", "virus.exe", "image.bmp", "notes.txt", "noext"])
    def test_rejected(self, filename):
        with pytest.raises(UploadRejectedError, match="not supported") as exc_info:
            self.adapter.validate_extension(filename)
        assert exc_info.value.status_code == 415

    def test_rejected_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            self.adapter.validate_extension("photo.webp")


class TestSizeValidation:

    def setup_method(self):
        self.adapter = ImageUploadAdapter(storage=MagicMock())

    def test_empty_file(self):
        with pytest.raises(ValidationError, match="empty"):
            self.adapter.validate_size(None, 0)

    def test_exactly_at_limit(self):
        self.adapter.validate_size(settings.max_file_size, settings.max_file_size)

    def test_over_limit(self):
        with pytest.raises(ValidationError, match="exceeds"):
            self.adapter.validate_size(None, settings.max_file_size + 1)

    def test_reported_length_over_limit(self):
        """A client-reported Content-Length over the limit fails before reading."""
        with pytest.raises(ValidationError, match="exceeds"):
            self.adapter.validate_size(settings.max_file_size + 1, 100)


class TestMimeValidation:

    def setup_method(self):
        self.adapter = ImageUploadAdapter(storage=MagicMock())

    def test_detected_type_accepted(self):
        with patch.dict(sys.modules, {"magic": _fake_magic("image/png")}):
            assert self.adapter.validate_mime_type(b"...", "photo.png") == "image/png"

    def test_renamed_file_rejected(self):
        """A text file renamed to .jpg fails on its content."""
        with patch.dict(sys.modules, {"magic": _fake_magic("text/plain")}):
            with pytest.raises(UploadRejectedError, match="text/plain"):
                self.adapter.validate_mime_type(b"hello", "photo.jpg")

    def test_detection_failure_is_storage_error(self):
        broken = SimpleNamespace(from_buffer=MagicMock(side_effect=RuntimeError("libmagic")))
        with patch.dict(sys.modules, {"magic": broken}):
            with pytest.raises(StorageError):
                self.adapter.validate_mime_type(b"...", "photo.png")

    def test_falls_back_to_extension_without_libmagic(self):
        # None in sys.modules makes `import magic` raise ImportError
        with patch.dict(sys.modules, {"magic": None}):
            assert self.adapter.validate_mime_type(b"...", "photo.gif") == "image/gif"


class TestKeysAndStorage:

    def test_key_layout(self):
        adapter = ImageUploadAdapter(storage=MagicMock(), folder="article_images")
        key = adapter.generate_key(".png")
        folder, name = key.split("/")
        assert folder == "article_images"
        assert name.endswith(".png")
        assert len(name) == 36 + len(".png")

    def test_jpeg_normalized(self):
        adapter = ImageUploadAdapter(storage=MagicMock())
        assert adapter.generate_key(".jpeg").endswith(".jpg")

    def test_keys_unique(self):
        adapter = ImageUploadAdapter(storage=MagicMock())
        assert adapter.generate_key(".jpg") != adapter.generate_key(".jpg")

    @pytest.mark.asyncio
    async def test_store_bytes_to_local(self, image_storage, sample_png_bytes):
        adapter = ImageUploadAdapter(storage=image_storage)
        with patch.dict(sys.modules, {"magic": _fake_magic("image/png")}):
            reference = await adapter.store_bytes("photo.png", sample_png_bytes)

        assert reference.startswith(FILES_PREFIX + "article_images/")
        stored = image_storage.resolve(reference[len(FILES_PREFIX):])
        assert stored.read_bytes() == sample_png_bytes

    @pytest.mark.asyncio
    async def test_rejected_upload_never_reaches_storage(self):
        storage = MagicMock()
        storage.store = AsyncMock()
        adapter = ImageUploadAdapter(storage=storage)
        with pytest.raises(UploadRejectedError):
            await adapter.store_bytes("notes.txt", b"hello")
        storage.store.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_accept_without_file(self):
        adapter = ImageUploadAdapter(storage=MagicMock())
        assert await adapter.accept(None) is None

    @pytest.mark.asyncio
    async def test_discard_removes_local_file(self, image_storage, sample_gif_bytes):
        reference = await image_storage.store("article_images/x.gif", sample_gif_bytes, "image/gif")
        path = image_storage.resolve("article_images/x.gif")
        assert path.exists()

        await ImageUploadAdapter(storage=image_storage).discard(reference)
        assert not path.exists()


class TestLocalStorage:

    def test_traversal_rejected(self, tmp_path):
        storage = LocalImageStorage(storage_root=str(tmp_path))
        with pytest.raises(ValueError, match="escapes"):
            storage.resolve("../../etc/passwd")

    def test_resolve_inside_root(self, tmp_path):
        storage = LocalImageStorage(storage_root=str(tmp_path))
        assert storage.resolve("article_images/a.jpg") == (tmp_path / "article_images" / "a.jpg").resolve()

    @pytest.mark.asyncio
    async def test_delete_ignores_foreign_references(self, tmp_path):
        storage = LocalImageStorage(storage_root=str(tmp_path))
        await storage.delete("https://elsewhere.example/a.jpg")
        await storage.delete(FILES_PREFIX + "missing.jpg")

    @pytest.mark.asyncio
    async def test_health_check(self, tmp_path):
        assert await LocalImageStorage(storage_root=str(tmp_path)).health_check() is True
