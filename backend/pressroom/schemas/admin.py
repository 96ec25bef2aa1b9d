"""
Pressroom Backend — Administrator Schemas
===========================================

What:  Input and output models for POST /admin.
Security:
    AdminResponse has no password field, so the stored hash can never be
    serialized into a response, whatever the service returns.
"""

import uuid

from pydantic import BaseModel, Field


class AdminCreate(BaseModel):
    """Registration payload, accepted as JSON or as a form."""
    name: str
    email: str
    password: str = Field(min_length=1)


class AdminResponse(BaseModel):
    id: uuid.UUID
    name: str
    email: str

    model_config = {"from_attributes": True}


class AdminCreatedResponse(BaseModel):
    message: str = Field(default="Admin created successfully")
    admin: AdminResponse
