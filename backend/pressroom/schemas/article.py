"""
Pressroom Backend — Article Request/Response Schemas
======================================================

What:  Pydantic models defining the article API contract.
Why:   Schemas are separate from the SQLAlchemy model so that the wire
       format (string ids, ISO timestamps) is controlled in one place.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator


class ArticleFields(BaseModel):
    """
    What:  User-supplied article fields from a multipart form.
    How:   Every field is optional. Only fields the client actually sent are
           applied on update, via model_dump(exclude_unset=True).
    """
    title: Optional[str] = None
    content: Optional[str] = None
    author: Optional[str] = None

    def supplied(self) -> Dict[str, Any]:
        """Fields present in the request (empty strings included)."""
        return self.model_dump(exclude_unset=True)


class ArticleResponse(BaseModel):
    """
    What:  Full representation of an article.
    Who:   Returned by GET /, GET /article/{id}, POST /create, PUT /update/{id}.
    """
    id: uuid.UUID = Field(description="Server-assigned article identifier")
    title: Optional[str] = Field(default=None)
    content: Optional[str] = Field(default=None)
    author: Optional[str] = Field(default=None)
    image: Optional[str] = Field(
        default=None,
        description="Reference to the stored image; null when none was uploaded",
    )
    timestamp: datetime = Field(description="Creation time (UTC)")

    model_config = {"from_attributes": True}

    @field_validator("timestamp")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """SQLite returns naive datetimes; stored values are always UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class ArticleDeleteResponse(BaseModel):
    """Returned by DELETE /delete/{id}; `article` echoes the removed record."""
    message: str = Field(default="Article deleted")
    article: Optional[ArticleResponse] = Field(
        default=None,
        description="The deleted article, or null if the id did not exist",
    )
