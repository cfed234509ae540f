"""
Foundry — User Schemas
=======================

Read models are built from ORM rows (from_attributes); write models carry
only the fields a caller may set. Passwords are accepted in plaintext and
hashed by UserService; they are never part of a read model.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from foundry.models.team import TeamRoles


class UserRoleRead(BaseModel):
    role_id: uuid.UUID
    role_slug: str
    role_name: str
    assigned_at: datetime

    model_config = {"from_attributes": True}


class UserTeamRead(BaseModel):
    team_id: uuid.UUID
    team_name: str
    role: TeamRoles
    is_owner: bool

    model_config = {"from_attributes": True}


class UserRead(BaseModel):
    """Public representation of an account."""

    id: uuid.UUID
    email: EmailStr
    name: Optional[str] = None
    is_active: bool
    is_superuser: bool
    is_verified: bool
    has_password: bool
    roles: List[UserRoleRead] = Field(default_factory=list)
    teams: List[UserTeamRead] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class UserCreate(BaseModel):
    """Admin-side account creation (POST /api/users)."""

    email: EmailStr
    password: Optional[str] = Field(default=None, min_length=8, max_length=128)
    name: Optional[str] = Field(default=None, max_length=255)
    is_superuser: bool = False
    is_active: bool = True
    is_verified: bool = False


class UserUpdate(BaseModel):
    """Admin-side partial update (PATCH /api/users/{id}); unset fields are untouched."""

    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=8, max_length=128)
    name: Optional[str] = Field(default=None, max_length=255)
    is_superuser: Optional[bool] = None
    is_active: Optional[bool] = None
    is_verified: Optional[bool] = None


class ProfileUpdate(BaseModel):
    """Self-service profile update (PATCH /api/me)."""

    name: Optional[str] = Field(default=None, max_length=255)


class PasswordUpdate(BaseModel):
    current_password: str
    new_password: str = Field(min_length=8, max_length=128)
