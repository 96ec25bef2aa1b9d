"""
Pressroom Backend — Custom Exception Hierarchy
================================================

What:  Defines application-specific exceptions for each failure kind.
Why:   Every failure maps to exactly one HTTP status and one error code.
       Raw backend text (SQL errors, storage client errors) stays in the
       server log and never reaches the client.
How:   Each exception class carries a safe message and an optional context
       dict. Global handlers (registered in main.py) turn them into JSON.
Who:   Raised by services and the upload adapter; caught by global handlers.

Exception Hierarchy:
    PressroomError (base)                → 500 server_error
    ├── ValidationError                  → 400 validation_error
    │   └── UploadRejectedError          → 415 upload_rejected
    ├── NotFoundError                    → 404 not_found
    ├── BackendUnavailableError          → 503 backend_unavailable
    │   ├── DatabaseError
    │   └── StorageError
    └── RateLimitExceededError           → 429 rate_limit_exceeded
"""

from typing import Any, Dict, Optional


class PressroomError(Exception):
    """
    Base exception for all Pressroom application errors.

    Attributes:
        message:  Client-facing description (safe to return in an API response)
        context:  Debug details (logged, NOT returned to the client)
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(PressroomError):
    """
    Raised when client input fails validation.

    When:    Malformed article id, missing admin fields, oversized or empty upload.
    HTTP:    400 Bad Request
    """

    status_code = 400
    error_code = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class UploadRejectedError(ValidationError):
    """
    Raised when an uploaded image is not in the accepted encodings.

    HTTP:    415 Unsupported Media Type
    Effect:  The request fails before any store operation runs.
    """

    status_code = 415
    error_code = "upload_rejected"

    def __init__(
        self,
        message: str = "Uploaded file type is not supported",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, field="image", context=context)


class NotFoundError(PressroomError):
    """
    Raised when a requested record does not exist.

    Only raised when STRICT_NOT_FOUND is enabled; the default contract
    answers with a null article instead.
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class BackendUnavailableError(PressroomError):
    """
    Raised when a backing service (database, object store) fails.

    HTTP:    503 Service Unavailable
    Security: The client sees only the generic message; the original error
              is kept in `context` for the server log.
    """

    status_code = 503
    error_code = "backend_unavailable"

    def __init__(
        self,
        message: str = "A backing service is unavailable. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(BackendUnavailableError):
    """A query, insert, update or delete failed in one of the two stores."""

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StorageError(BackendUnavailableError):
    """Uploading to (or deleting from) the image storage backend failed."""

    def __init__(
        self,
        message: str = "Image storage is unavailable. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(PressroomError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests (with a Retry-After header)
    """

    status_code = 429
    error_code = "rate_limit_exceeded"

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
