"""
Pressroom Backend — Request Dependencies
==========================================

What:  FastAPI dependencies that hand each request its database session and
       the shared upload adapter.
Why:   The connection handles are created once in the lifespan (or passed to
       create_app by tests) and stored on `app.state`. Handlers reach them
       only through these functions, never through module globals.
"""

from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import File, Form, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from pressroom.database import Database
from pressroom.exceptions import DatabaseError, ValidationError
from pressroom.schemas.article import ArticleFields
from pressroom.services.image_upload import ImageUploadAdapter

ARTICLE_FIELD_NAMES = ("title", "content", "author")


def _database(request: Request, name: str) -> Database:
    database: Optional[Database] = getattr(request.app.state, name, None)
    if database is None:
        raise DatabaseError(
            message="The database is not configured. Please try again later.",
            context={"store": name},
        )
    return database


async def get_articles_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Per-request session on the article database."""
    async with _database(request, "articles_db").session() as session:
        yield session


async def get_admins_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Per-request session on the administrator database."""
    async with _database(request, "admins_db").session() as session:
        yield session


def get_upload_adapter(request: Request) -> ImageUploadAdapter:
    return request.app.state.upload_adapter


async def uploaded_image(
    request: Request,
    image: Optional[UploadFile] = File(
        default=None,
        description="Optional article image (JPG, PNG or GIF)",
    ),
) -> Optional[str]:
    """
    Runs the upload adapter before the route handler.

    The handler receives the stored image's reference (or None when the
    request carried no file), never the raw bytes.
    """
    return await get_upload_adapter(request).accept(image)


async def read_payload(request: Request) -> Dict[str, Any]:
    """
    Request body as a flat dict, from JSON or from a (multipart or
    urlencoded) form. Fields keep the client's exact values, empty strings
    included.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            raise ValidationError(message="Request body is not valid JSON")
        if not isinstance(body, dict):
            raise ValidationError(message="Request body must be a JSON object")
        return body

    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}


async def article_fields(
    request: Request,
    title: Optional[str] = Form(default=None),
    content: Optional[str] = Form(default=None),
    author: Optional[str] = Form(default=None),
) -> ArticleFields:
    """
    The title/content/author the client actually sent.

    Form() maps an empty string to None, so presence is taken from the raw
    payload; a field sent as "" is still applied on update.
    """
    payload = await read_payload(request)
    parsed = {"title": title, "content": content, "author": author}
    sent = {}
    for name in ARTICLE_FIELD_NAMES:
        if name in payload:
            value = parsed[name] if parsed[name] is not None else payload[name]
            if value is not None and not isinstance(value, str):
                raise ValidationError(message=f"'{name}' must be a string", field=name)
            sent[name] = value
    return ArticleFields(**sent)
