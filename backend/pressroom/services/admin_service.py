"""
Pressroom Backend — Administrator Service
===========================================

What:  Registers administrators in the admin store.
How:   bcrypt-hashes the password in a worker thread (hashing is CPU-bound and
       would otherwise stall the event loop), then inserts one row through
       the admin database session.

Scope: create only. There is no lookup, update, delete or login here.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from pressroom.database import DATABASE_ERRORS, rollback_quietly
from pressroom.exceptions import DatabaseError, ValidationError
from pressroom.models.admin import Admin
from pressroom.schemas.admin import AdminCreate, AdminResponse
from pressroom.services.security import hash_password

logger = logging.getLogger(__name__)


class AdminService:

    async def register(self, db: AsyncSession, payload: AdminCreate) -> Admin:
        """
        Hash the password and persist a new administrator.

        Returns the ORM record, hash included; callers expose it only through
        AdminResponse, which has no password field.

        Raises:
            ValidationError: password rejected by bcrypt (empty, over 72 bytes)
            DatabaseError: insert failed
        """
        try:
            hashed = await run_in_threadpool(hash_password, payload.password)
        except ValueError as e:
            raise ValidationError(message=str(e), field="password")

        admin = Admin(name=payload.name, email=payload.email, password=hashed)
        try:
            db.add(admin)
            await db.flush()
            await db.commit()
        except DATABASE_ERRORS as e:
            await rollback_quietly(db)
            logger.error("Database error registering admin: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the administrator. Please try again.",
                context={"error_type": type(e).__name__, "error": str(e)},
            )

        logger.info("Admin registered: %s", admin.id)
        return admin

    def to_response(self, admin: Admin) -> AdminResponse:
        return AdminResponse.model_validate(admin)


admin_service = AdminService()
