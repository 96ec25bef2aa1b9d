"""
Pressroom Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Each test gets two fresh SQLite databases (articles, admins) in its
       own tmp_path and a local image storage directory; the app is built
       with create_app(...) so no lifespan or real services are involved.

Fixture Hierarchy (all function-scoped):
    ├── articles_db / admins_db: real Database handles on aiosqlite
    ├── image_storage: LocalImageStorage under tmp_path
    ├── app: FastAPI instance wired to the fixtures above
    ├── test_client: HTTPX AsyncClient over ASGITransport
    └── sample_*_bytes: minimal valid JPEG / PNG / GIF payloads
"""

import os
import tempfile

# Settings are read at import time; override BEFORE any pressroom import
os.environ["ARTICLES_DATABASE_URL"] = "sqlite+aiosqlite:///./test_articles.db"
os.environ["ADMINS_DATABASE_URL"] = "sqlite+aiosqlite:///./test_admins.db"
os.environ["IMAGE_STORAGE_BACKEND"] = "local"
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="pressroom_test_")
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "10000"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from pressroom.database import create_admins_database, create_articles_database
from pressroom.main import create_app
from pressroom.services.local_storage import LocalImageStorage


@pytest_asyncio.fixture
async def articles_db(tmp_path):
    database = create_articles_database(f"sqlite+aiosqlite:///{tmp_path / 'articles.db'}")
    await database.create_tables()
    yield database
    await database.dispose()


@pytest_asyncio.fixture
async def admins_db(tmp_path):
    database = create_admins_database(f"sqlite+aiosqlite:///{tmp_path / 'admins.db'}")
    await database.create_tables()
    yield database
    await database.dispose()


@pytest.fixture
def image_storage(tmp_path):
    return LocalImageStorage(storage_root=str(tmp_path / "storage"))


@pytest.fixture
def app(articles_db, admins_db, image_storage):
    return create_app(
        articles_db=articles_db,
        admins_db=admins_db,
        image_storage=image_storage,
    )


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the ASGI app.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def sample_image_bytes():
    """Smallest valid JPEG: SOI marker + JFIF header + EOI marker."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest.fixture
def sample_png_bytes():
    """PNG signature followed by a 1x1 IHDR chunk."""
    return (
        b'\x89PNG\r\n\x1a\n'
        b'\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x02\x00\x00\x00\x90wS\xde'
    )


@pytest.fixture
def sample_gif_bytes():
    """1x1 transparent GIF89a."""
    return (
        b'GIF89a\x01\x00\x01\x00\x80\x00\x00\x00\x00\x00\xff\xff\xff'
        b'!\xf9\x04\x01\x00\x00\x00\x00,\x00\x00\x00\x00\x01\x00\x01\x00\x00\x02\x02D\x01\x00;'
    )


@pytest.fixture
def article_form():
    return {"title": "A", "content": "B", "author": "C"}


@pytest.fixture
def mock_db_session():
    """
    AsyncSession stand-in for service unit tests that need to force a
    database failure without a real engine.
    """
    session = MagicMock()
    session.add = MagicMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.delete = AsyncMock()
    return session
