"""
Pressroom Backend — Shared Response Schemas
=============================================

What:  Error and health payloads shared by every route module.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    What:  Standardized error body for all API errors.

    Example:
        {
            "error": "upload_rejected",
            "message": "File type '.bmp' is not supported. Allowed types: .gif, .jpeg, .jpg, .png",
            "details": {"field": "image", "extension": ".bmp"},
            "request_id": "1f0c2a9b"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    What:  Health of the service and each backing store.
    Status levels:
        healthy:   both databases and image storage reachable
        degraded:  databases reachable, image storage not
        unhealthy: at least one database unreachable (HTTP 503)
    """
    status: str = Field(description="healthy, degraded or unhealthy")
    version: str = Field(description="Application version")
    articles_database: str = Field(description="connected or disconnected")
    admins_database: str = Field(description="connected or disconnected")
    image_storage: str = Field(description="available or unavailable")
    uptime_seconds: float = Field(description="Seconds since service started")
