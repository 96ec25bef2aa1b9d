"""
Pressroom Backend — Administrator Registration Route
======================================================

What:  POST /admin registers an administrator.
How:   Accepts a JSON object or a form with name, email and password.
       The response carries the new record without its password hash.
"""

import logging

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from pressroom.dependencies import get_admins_session, read_payload
from pressroom.exceptions import ValidationError
from pressroom.schemas.admin import AdminCreate, AdminCreatedResponse
from pressroom.schemas.common import ErrorResponse
from pressroom.services.admin_service import admin_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Admin"])


async def admin_payload(request: Request) -> AdminCreate:
    payload = await read_payload(request)
    try:
        return AdminCreate.model_validate(payload)
    except PydanticValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
        raise ValidationError(
            message=f"Invalid or missing fields: {', '.join(fields)}",
            context={"fields": fields},
        )


@router.post(
    "/admin",
    status_code=201,
    response_model=AdminCreatedResponse,
    responses={
        400: {"description": "Missing or invalid fields", "model": ErrorResponse},
        503: {"description": "Admin database unavailable", "model": ErrorResponse},
    },
    summary="Register an administrator",
    description="JSON or form body with name, email and password. The password is stored as a bcrypt hash.",
)
async def register_admin(
    payload: AdminCreate = Depends(admin_payload),
    db: AsyncSession = Depends(get_admins_session),
) -> AdminCreatedResponse:
    admin = await admin_service.register(db, payload)
    return AdminCreatedResponse(
        message="Admin created successfully",
        admin=admin_service.to_response(admin),
    )
