"""
Pressroom Backend — Article Service
=====================================

What:  CRUD operations on the article store.
Why:   Keeps persistence and failure translation out of the route handlers.
How:   Each method takes the request's AsyncSession (article database),
       performs one statement, commits writes explicitly, and converts
       SQLAlchemy and connection failures into DatabaseError.

Not-found contract:
    By default get/update/delete of an unknown id return None; the routes
    answer 200 with a null article. With STRICT_NOT_FOUND=true they raise
    NotFoundError (404) instead.
"""

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pressroom.config import settings
from pressroom.database import DATABASE_ERRORS, rollback_quietly
from pressroom.exceptions import DatabaseError, NotFoundError, ValidationError
from pressroom.models.article import Article
from pressroom.schemas.article import ArticleFields, ArticleResponse

logger = logging.getLogger(__name__)


def parse_article_id(article_id: str) -> UUID:
    """Malformed ids are a client error, not a storage failure."""
    try:
        return UUID(str(article_id))
    except ValueError:
        raise ValidationError(
            message=f"'{article_id}' is not a valid article id",
            field="id",
            context={"article_id": article_id},
        )


class ArticleService:
    """
    Responsibilities:
        - list_articles(): every article, store-native order
        - get_article(): one article or None
        - create_article(): insert with generated id/timestamp
        - update_article(): partial update, image only when a new one arrived
        - delete_article(): remove and return the prior record
    """

    def __init__(self, strict_not_found: Optional[bool] = None):
        self._strict_not_found = strict_not_found

    @property
    def strict_not_found(self) -> bool:
        if self._strict_not_found is None:
            return settings.strict_not_found
        return self._strict_not_found

    def _missing(self, article_id: UUID) -> None:
        if self.strict_not_found:
            raise NotFoundError(resource="article", resource_id=str(article_id))
        logger.info("Article %s not found", article_id)
        return None

    async def list_articles(self, db: AsyncSession) -> List[ArticleResponse]:
        # No ORDER BY: callers get whatever order the database returns
        try:
            result = await db.execute(select(Article))
            articles = result.scalars().all()
        except DATABASE_ERRORS as e:
            logger.error("Database error listing articles: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve articles. Please try again.",
                context={"error_type": type(e).__name__, "error": str(e)},
            )
        return [ArticleResponse.model_validate(article) for article in articles]

    async def _fetch(self, db: AsyncSession, article_id: UUID) -> Optional[Article]:
        try:
            return await db.get(Article, article_id)
        except DATABASE_ERRORS as e:
            logger.error("Database error fetching article %s: %s", article_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the article. Please try again.",
                context={"article_id": str(article_id), "error": str(e)},
            )

    async def get_article(self, db: AsyncSession, article_id: str) -> Optional[ArticleResponse]:
        uid = parse_article_id(article_id)
        article = await self._fetch(db, uid)
        if article is None:
            return self._missing(uid)
        return ArticleResponse.model_validate(article)

    async def create_article(
        self,
        db: AsyncSession,
        fields: ArticleFields,
        image: Optional[str] = None,
    ) -> ArticleResponse:
        """
        Insert a new article.

        The id and timestamp are filled in by the model defaults on flush,
        so the returned record already carries them.
        """
        article = Article(
            title=fields.title,
            content=fields.content,
            author=fields.author,
            image=image,
        )
        try:
            db.add(article)
            await db.flush()
            await db.commit()
        except DATABASE_ERRORS as e:
            await rollback_quietly(db)
            logger.error("Database error creating article: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the article. Please try again.",
                context={"error_type": type(e).__name__, "error": str(e)},
            )

        logger.info("Article created: %s", article.id)
        return ArticleResponse.model_validate(article)

    async def update_article(
        self,
        db: AsyncSession,
        article_id: str,
        fields: ArticleFields,
        image: Optional[str] = None,
    ) -> Optional[ArticleResponse]:
        """
        Apply only the supplied fields.

        title/content/author are written whenever the client sent them, even
        as empty strings. `image` is written only when a new upload produced
        a reference; otherwise the stored reference is left as it is.
        """
        uid = parse_article_id(article_id)
        changes: Dict[str, Any] = fields.supplied()
        if image is not None:
            changes["image"] = image

        article = await self._fetch(db, uid)
        if article is None:
            return self._missing(uid)

        for name, value in changes.items():
            setattr(article, name, value)

        try:
            await db.flush()
            await db.commit()
        except DATABASE_ERRORS as e:
            await rollback_quietly(db)
            logger.error("Database error updating article %s: %s", uid, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the article. Please try again.",
                context={"article_id": str(uid), "error": str(e)},
            )

        logger.info("Article %s updated: %s", uid, sorted(changes))
        return ArticleResponse.model_validate(article)

    async def delete_article(self, db: AsyncSession, article_id: str) -> Optional[ArticleResponse]:
        uid = parse_article_id(article_id)
        article = await self._fetch(db, uid)
        if article is None:
            return self._missing(uid)

        # Snapshot before the row is gone
        deleted = ArticleResponse.model_validate(article)
        try:
            await db.delete(article)
            await db.commit()
        except DATABASE_ERRORS as e:
            await rollback_quietly(db)
            logger.error("Database error deleting article %s: %s", uid, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the article. Please try again.",
                context={"article_id": str(uid), "error": str(e)},
            )

        logger.info("Article deleted: %s", uid)
        return deleted


article_service = ArticleService()
