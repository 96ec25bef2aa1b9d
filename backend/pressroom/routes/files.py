"""
Pressroom Backend — Local Image Files Route
=============================================

What:  Serves images stored by the local storage backend.
Who:   Fetched by clients through the `/files/...` references that
       LocalImageStorage returns. With the object backend, references point
       at the bucket and this route is never used.
"""

import mimetypes

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse

from pressroom.exceptions import NotFoundError, ValidationError
from pressroom.schemas.common import ErrorResponse
from pressroom.services.local_storage import LocalImageStorage

router = APIRouter(tags=["Files"])


@router.get(
    "/files/{file_path:path}",
    summary="Serve a locally stored image",
    responses={
        200: {"description": "Image file"},
        400: {"description": "Invalid path", "model": ErrorResponse},
        404: {"description": "File not found", "model": ErrorResponse},
    },
)
async def serve_file(file_path: str, request: Request) -> FileResponse:
    storage = request.app.state.upload_adapter.storage
    if not isinstance(storage, LocalImageStorage):
        raise NotFoundError(resource="file", resource_id=file_path)

    # Rejects ../ traversal out of the storage root
    try:
        full_path = storage.resolve(file_path)
    except ValueError:
        raise ValidationError(message="Invalid file path")

    if not full_path.is_file():
        raise NotFoundError(resource="file", resource_id=file_path)

    media_type, _ = mimetypes.guess_type(full_path.name)
    return FileResponse(
        path=str(full_path),
        media_type=media_type or "application/octet-stream",
        headers={"Cache-Control": "public, max-age=86400"},
    )
