"""
Pressroom Backend — Article Route Handlers
============================================

What:  The five article endpoints.
How:   Form fields arrive as multipart; the optional `image` file is handled
       by the `uploaded_image` dependency before the handler body runs, so
       the handlers only see a reference string (or None).

Request Flow (create/update):
    1. Multipart parsed; upload adapter validates + stores the image
    2. Handler calls ArticleService with the fields and the image reference
    3. If the database write fails, the freshly stored image is discarded
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pressroom.dependencies import (
    article_fields,
    get_articles_session,
    get_upload_adapter,
    uploaded_image,
)
from pressroom.exceptions import PressroomError
from pressroom.schemas.article import ArticleDeleteResponse, ArticleFields, ArticleResponse
from pressroom.schemas.common import ErrorResponse
from pressroom.services.article_service import article_service
from pressroom.services.image_upload import ImageUploadAdapter

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Articles"])

_ERRORS = {
    400: {"description": "Malformed id or invalid input", "model": ErrorResponse},
    503: {"description": "Database unavailable", "model": ErrorResponse},
}

_UPLOAD_ERRORS = {
    **_ERRORS,
    415: {"description": "Image encoding not accepted", "model": ErrorResponse},
}


@router.get(
    "/",
    response_model=List[ArticleResponse],
    responses=_ERRORS,
    summary="List all articles",
)
async def list_articles(
    db: AsyncSession = Depends(get_articles_session),
) -> List[ArticleResponse]:
    return await article_service.list_articles(db)


@router.get(
    "/article/{article_id}",
    response_model=Optional[ArticleResponse],
    responses=_ERRORS,
    summary="Get one article",
    description="Returns the article, or null when no article has this id.",
)
async def get_article(
    article_id: str,
    db: AsyncSession = Depends(get_articles_session),
) -> Optional[ArticleResponse]:
    return await article_service.get_article(db, article_id)


@router.post(
    "/create",
    status_code=201,
    response_model=ArticleResponse,
    responses=_UPLOAD_ERRORS,
    summary="Create an article",
    description="Multipart form with title, content, author and an optional image file.",
)
async def create_article(
    db: AsyncSession = Depends(get_articles_session),
    fields: ArticleFields = Depends(article_fields),
    image: Optional[str] = Depends(uploaded_image),
    adapter: ImageUploadAdapter = Depends(get_upload_adapter),
) -> ArticleResponse:
    try:
        return await article_service.create_article(db, fields, image=image)
    except PressroomError:
        await adapter.discard(image)
        raise


@router.put(
    "/update/{article_id}",
    response_model=Optional[ArticleResponse],
    responses=_UPLOAD_ERRORS,
    summary="Update an article",
    description=(
        "Replaces only the fields present in the form. The image is replaced "
        "only when a new file is supplied. Returns null for an unknown id."
    ),
)
async def update_article(
    article_id: str,
    db: AsyncSession = Depends(get_articles_session),
    fields: ArticleFields = Depends(article_fields),
    image: Optional[str] = Depends(uploaded_image),
    adapter: ImageUploadAdapter = Depends(get_upload_adapter),
) -> Optional[ArticleResponse]:
    try:
        result = await article_service.update_article(db, article_id, fields, image=image)
    except PressroomError:
        await adapter.discard(image)
        raise
    if result is None:
        # Nothing was updated; the new upload has no owner
        await adapter.discard(image)
    return result


@router.delete(
    "/delete/{article_id}",
    response_model=ArticleDeleteResponse,
    responses=_ERRORS,
    summary="Delete an article",
)
async def delete_article(
    article_id: str,
    db: AsyncSession = Depends(get_articles_session),
) -> ArticleDeleteResponse:
    deleted = await article_service.delete_article(db, article_id)
    return ArticleDeleteResponse(message="Article deleted", article=deleted)
