"""Foundry — Team Schemas."""

import uuid
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from foundry.models.team import TeamRoles


class TeamMemberRead(BaseModel):
    user_id: uuid.UUID
    email: EmailStr
    name: Optional[str] = None
    role: TeamRoles
    is_owner: bool

    model_config = {"from_attributes": True}


class TeamRead(BaseModel):
    id: uuid.UUID
    name: str
    slug: str
    description: Optional[str] = None
    is_active: bool
    members: List[TeamMemberRead] = Field(default_factory=list)

    model_config = {"from_attributes": True}


class TeamCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None


class TeamUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class TeamMemberAdd(BaseModel):
    user_email: EmailStr
    role: TeamRoles = TeamRoles.MEMBER
