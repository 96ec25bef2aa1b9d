"""
Pressroom Backend — Article SQLAlchemy Model
==============================================

What:  ORM model for the `articles` table in the article database.
Who:   Used by ArticleService for CRUD operations.

Column notes:
    - id: UUID generated in Python, so the value is known before the INSERT
      and works the same on PostgreSQL and SQLite
    - title/content/author: free text, all nullable (no non-empty rule)
    - image: stable reference (URL or /files path) returned by the storage
      backend; NULL when no image was supplied
    - timestamp: creation time, set once at insert and never touched by updates
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from pressroom.database import ArticleBase


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Article(ArticleBase):
    """
    An editable article.

    Lifecycle:
        1. Created by POST /create (timestamp defaulted here)
        2. Any of title/content/author/image overwritten by PUT /update/{id}
        3. Removed by DELETE /delete/{id}; no soft-delete, no versions
    """

    __tablename__ = "articles"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    author: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    image: Mapped[Optional[str]] = mapped_column(
        String(1024),
        nullable=True,
        default=None,
        comment="Reference to the stored image (URL or /files path)",
    )

    # No onupdate: editing an article keeps its creation time
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        comment="When this article was created (UTC)",
    )

    def __repr__(self) -> str:
        return f"<Article(id={self.id}, title={self.title!r})>"
