"""Foundry — Role Schemas."""

import uuid
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class RoleRead(BaseModel):
    id: uuid.UUID
    name: str
    slug: str
    description: Optional[str] = None

    model_config = {"from_attributes": True}


class RoleCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=255)


class RoleAssignment(BaseModel):
    """Body of POST /api/roles/{slug}/assign and /revoke."""

    user_email: EmailStr
