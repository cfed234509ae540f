"""
Foundry — User Service
=======================

What:  Account business rules on top of ModelService[User].
How:   Normalises emails, hashes passwords (auth.security), assigns the
       default role to new accounts and authenticates credentials.
Who:   Access/account/user controllers, the CLI and worker tasks.

Authentication failures (unknown email, no password, wrong password,
inactive account) share a single message so the login endpoint does not
reveal which accounts exist.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, or_, select

from foundry.auth.security import hash_password, password_needs_rehash, verify_password
from foundry.config import settings
from foundry.exceptions import AuthenticationError, ConflictError, ValidationError
from foundry.models.role import Role, UserRole
from foundry.models.team import TeamMember
from foundry.models.user import User
from foundry.services.base import ModelService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Incorrect email or password"


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService(ModelService[User]):
    model = User
    resource_name = "user"

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self.get_one_or_none(email=normalize_email(email))

    async def create(self, data: Dict[str, Any]) -> User:
        """
        Create an account.

        `data` may contain a plaintext `password`; it is hashed and stored as
        hashed_password. The default role is granted when it exists.

        Raises:
            ConflictError: the email is already registered
        """
        data = dict(data)
        data["email"] = normalize_email(data["email"])
        if await self.exists(email=data["email"]):
            raise ConflictError(
                message="A user with this email already exists",
                context={"field": "email"},
            )
        password = data.pop("password", None)
        if password:
            data["hashed_password"] = hash_password(password)
        if data.get("is_verified") and not data.get("verified_at"):
            data["verified_at"] = datetime.now(timezone.utc)

        user = await super().create(data)
        await self._assign_default_role(user)
        logger.info("User created: %s", user.id)
        return user

    async def _assign_default_role(self, user: User) -> None:
        result = await self.session.execute(
            select(Role).where(Role.name == settings.default_user_role_name)
        )
        role = result.scalar_one_or_none()
        if role is None:
            return
        self.session.add(UserRole(user_id=user.id, role=role))
        await self._flush(user)
        await self.refresh(user, ["roles"])

    async def update(self, item: User, data: Dict[str, Any]) -> User:
        """Partial update; re-hashes `password` and normalises `email` when present."""
        data = dict(data)
        if "email" in data and data["email"] is not None:
            data["email"] = normalize_email(data["email"])
            if data["email"] != item.email and await self.exists(email=data["email"]):
                raise ConflictError(
                    message="A user with this email already exists",
                    context={"field": "email"},
                )
        password = data.pop("password", None)
        if password:
            data["hashed_password"] = hash_password(password)
        if data.get("is_verified") and not item.is_verified:
            data["verified_at"] = datetime.now(timezone.utc)
        return await super().update(item, data)

    async def delete(self, item_id: UUID) -> User:
        """
        Delete an account and its role and team memberships.

        Raises:
            ConflictError: the user still owns teams; every team keeps
                exactly one owner, so those teams must go first.
        """
        result = await self.session.execute(
            select(func.count())
            .select_from(TeamMember)
            .where(TeamMember.user_id == item_id, TeamMember.is_owner.is_(True))
        )
        owned = result.scalar_one()
        if owned:
            raise ConflictError(
                message=f"User owns {owned} team(s); delete them before the account",
                context={"user_id": str(item_id), "owned_teams": owned},
            )
        return await super().delete(item_id)

    async def authenticate(self, email: str, password: str) -> User:
        """
        Verify login credentials.

        Returns:
            The active user the credentials belong to.
        Raises:
            AuthenticationError: for any failure (single message).
        """
        user = await self.get_by_email(email)
        if user is None or not verify_password(password, user.hashed_password):
            raise AuthenticationError(INVALID_CREDENTIALS)
        if not user.is_active:
            raise AuthenticationError(INVALID_CREDENTIALS)
        if password_needs_rehash(user.hashed_password):
            user.hashed_password = hash_password(password)
            await self._flush(user)
        return user

    async def update_password(self, user: User, current_password: str, new_password: str) -> User:
        """Self-service password change; the current password must match."""
        if not verify_password(current_password, user.hashed_password):
            raise ValidationError("Current password is incorrect", field="current_password")
        user.hashed_password = hash_password(new_password)
        await self._flush(user)
        return user

    async def search(
        self,
        search: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> Tuple[List[User], int]:
        """Paginated listing, optionally filtered by a case-insensitive email/name match."""
        criteria = []
        if search:
            pattern = f"%{search.strip()}%"
            criteria.append(or_(User.email.ilike(pattern), User.name.ilike(pattern)))
        return await self.list_and_count(
            *criteria,
            limit=limit,
            offset=offset,
            order_by=order_by,
            descending=descending,
        )
