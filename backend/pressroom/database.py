"""
Pressroom Backend — Database Connections
==========================================

What:  Async SQLAlchemy engines, session factories and declarative bases for
       the two independent stores (articles, administrators).
Why:   Each store has its own connection URL and its own metadata; there is
       no foreign key and no transaction spanning both.
How:   `Database` wraps one engine + session factory. The application builds
       one instance per store during startup (see main.lifespan), keeps them
       on `app.state`, and disposes them on shutdown.
Who:   Route dependencies (pressroom.dependencies) open per-request sessions.

Pooling:
    Server databases (PostgreSQL) get a sized pool with pre-ping.
    SQLite (used in tests) keeps SQLAlchemy's default pool; it does not
    accept pool sizing arguments.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict

from sqlalchemy import MetaData, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from pressroom.config import settings

logger = logging.getLogger(__name__)

# What a store operation can raise when the database is down or rejects it.
# Drivers report refused or dropped connections as a bare OSError
# (ConnectionRefusedError, socket.gaierror, TimeoutError), outside SQLAlchemy.
DATABASE_ERRORS = (SQLAlchemyError, OSError)


async def rollback_quietly(session: AsyncSession) -> None:
    """Roll back after a failure; a broken connection can fail the rollback too."""
    try:
        await session.rollback()
    except DATABASE_ERRORS as e:
        logger.warning("Rollback failed: %s", str(e))


# ── Declarative Bases ─────────────────────────────────────────────────────
# Separate bases → separate MetaData objects, so create_all() on the article
# engine never touches the admin table and vice versa.
class ArticleBase(DeclarativeBase):
    """Base class for models stored in the article database."""
    pass


class AdminBase(DeclarativeBase):
    """Base class for models stored in the administrator database."""
    pass


def _engine_kwargs(url: str) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if not url.startswith("sqlite"):
        kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return kwargs


class Database:
    """
    One connection handle per backing store, shared by all requests.

    The engine connects lazily, so constructing a Database never fails on an
    unreachable server; `ping()` and `create_tables()` are the first calls
    that actually open a connection.
    """

    def __init__(self, name: str, url: str, metadata: MetaData):
        self.name = name
        self.url = url
        self.metadata = metadata
        self.engine = create_async_engine(url, **_engine_kwargs(url))
        # expire_on_commit=False: records stay readable after commit, which
        # the services rely on when building responses
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Yield a session; roll back on any error, always close.

        Commits are explicit in the services so that a write is durable
        before its response is serialized.
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await rollback_quietly(session)
                raise
            finally:
                await session.close()

    async def create_tables(self) -> None:
        """Create any missing tables for this store's metadata."""
        async with self.engine.begin() as conn:
            await conn.run_sync(self.metadata.create_all)
        logger.info("Tables ready in %s database", self.name)

    async def ping(self) -> bool:
        """Lightweight connectivity check (SELECT 1)."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("%s database unreachable: %s", self.name, str(e))
            return False

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()
        logger.info("%s database connections closed", self.name)


def create_articles_database(url: str = None) -> Database:
    return Database("articles", url or settings.articles_database_url, ArticleBase.metadata)


def create_admins_database(url: str = None) -> Database:
    return Database("admins", url or settings.admins_database_url, AdminBase.metadata)
