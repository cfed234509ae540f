"""
Foundry — Role SQLAlchemy Models
=================================

What:  `role` (named permission bundles) and `user_account_role` (assignment
       of a role to a user).
How:   Two built-in roles are created by RoleService.ensure_default_roles():
       "Superuser" (treated like is_superuser by the guards) and
       "Application Access" (assigned to every new account).
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from foundry.database import UUIDAuditBase, utcnow

if TYPE_CHECKING:
    from foundry.models.user import User


class Role(UUIDAuditBase):
    __tablename__ = "role"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<Role(slug='{self.slug}')>"


class UserRole(UUIDAuditBase):
    """Association row: one role granted to one user."""

    __tablename__ = "user_account_role"
    __table_args__ = (UniqueConstraint("user_id", "role_id", name="uq_user_account_role"),)

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("user_account.id", ondelete="cascade"), nullable=False
    )
    role_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("role.id", ondelete="cascade"), nullable=False
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    user: Mapped["User"] = relationship(back_populates="roles", innerjoin=True)
    role: Mapped[Role] = relationship(innerjoin=True, lazy="joined")

    @property
    def role_name(self) -> str:
        return self.role.name

    @property
    def role_slug(self) -> str:
        return self.role.slug
