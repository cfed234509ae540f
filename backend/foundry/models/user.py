"""
Foundry — User SQLAlchemy Model
================================

What:  ORM model for the `user_account` table.
Who:   Used by UserService, the auth dependencies and the guards; read by
       Alembic for migrations.

Table Design:
    - email: unique, stored lowercased (UserService normalises it)
    - hashed_password: argon2 hash; NULL for accounts that never set one
    - is_active: inactive accounts cannot log in or use existing tokens
    - is_superuser: bypasses every guard
    - is_verified / verified_at: email verification state
    - roles / teams: eager-loaded (selectin) so guards never trigger lazy IO
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, Date, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from foundry.database import UUIDAuditBase

if TYPE_CHECKING:
    from foundry.models.role import UserRole
    from foundry.models.team import TeamMember


class User(UUIDAuditBase):
    """An account that can authenticate against the API."""

    __tablename__ = "user_account"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, default=None)
    hashed_password: Mapped[Optional[str]] = mapped_column(
        String(255), nullable=True, default=None
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_superuser: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    verified_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )
    joined_at: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)

    # ── Relationships ─────────────────────────────────────────────────────
    roles: Mapped[List["UserRole"]] = relationship(
        back_populates="user",
        lazy="selectin",
        cascade="all, delete-orphan",
    )
    teams: Mapped[List["TeamMember"]] = relationship(
        back_populates="user",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    @property
    def has_password(self) -> bool:
        return self.hashed_password is not None

    @property
    def role_slugs(self) -> List[str]:
        return [assignment.role_slug for assignment in self.roles]

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
