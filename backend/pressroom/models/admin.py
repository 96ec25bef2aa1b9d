"""
Pressroom Backend — Administrator SQLAlchemy Model
====================================================

What:  ORM model for the `admins` table in the administrator database.
Why:   Lives on AdminBase, so its table is created and queried through the
       admin engine only.

The `password` column holds a bcrypt hash. The plaintext is never stored,
and AdminResponse never returns this column.
"""

import uuid

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from pressroom.database import AdminBase


class Admin(AdminBase):
    """A registered administrator. Create-only; no uniqueness on name/email."""

    __tablename__ = "admins"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)

    # bcrypt output is 60 characters
    password: Mapped[str] = mapped_column(String(128), nullable=False)

    def __repr__(self) -> str:
        # Never include the password hash
        return f"<Admin(id={self.id}, email={self.email!r})>"
