"""
Foundry — Team SQLAlchemy Models
=================================

What:  `team` and `team_member` tables.
How:   Every team has exactly one owner (is_owner=True, role=ADMIN) created
       together with the team. Admins manage members; members can read.
"""

from __future__ import annotations

import enum
import uuid
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, Enum, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from foundry.database import UUIDAuditBase

if TYPE_CHECKING:
    from foundry.models.user import User


class TeamRoles(str, enum.Enum):
    """Roles a user can hold inside a team."""

    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class Team(UUIDAuditBase):
    __tablename__ = "team"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    slug: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    members: Mapped[List["TeamMember"]] = relationship(
        back_populates="team",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Team(id={self.id}, slug='{self.slug}')>"


class TeamMember(UUIDAuditBase):
    __tablename__ = "team_member"
    __table_args__ = (UniqueConstraint("user_id", "team_id", name="uq_team_member"),)

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("user_account.id", ondelete="cascade"), nullable=False
    )
    team_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("team.id", ondelete="cascade"), nullable=False
    )
    role: Mapped[TeamRoles] = mapped_column(
        Enum(TeamRoles, name="team_roles_enum", native_enum=False, length=50),
        nullable=False,
        default=TeamRoles.MEMBER,
    )
    is_owner: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    user: Mapped["User"] = relationship(back_populates="teams", innerjoin=True, lazy="joined")
    team: Mapped[Team] = relationship(back_populates="members", innerjoin=True, lazy="joined")

    @property
    def email(self) -> str:
        return self.user.email

    @property
    def name(self) -> Optional[str]:
        return self.user.name

    @property
    def team_name(self) -> str:
        return self.team.name
