"""
Foundry — Role Service
=======================

What:  Role creation and assignment.
How:   Roles are looked up by slug; assignment and revocation are idempotent
       so the CLI and admin endpoints can be re-run safely.
"""

import logging
from typing import Any, Dict, List, Optional

from foundry.config import settings
from foundry.exceptions import NotFoundError
from foundry.models.role import Role, UserRole
from foundry.models.user import User
from foundry.services.base import ModelService
from foundry.services.slugs import slugify

logger = logging.getLogger(__name__)


def default_roles() -> List[Dict[str, str]]:
    return [
        {
            "name": settings.superuser_role_name,
            "description": "Full administrative access to every resource",
        },
        {
            "name": settings.default_user_role_name,
            "description": "Default role granted to every account",
        },
    ]


class RoleService(ModelService[Role]):
    model = Role
    resource_name = "role"

    async def create(self, data: Dict[str, Any]) -> Role:
        data = dict(data)
        data.setdefault("slug", slugify(data["name"]))
        return await super().create(data)

    async def get_by_slug(self, slug: str) -> Role:
        role = await self.get_one_or_none(slug=slug)
        if role is None:
            raise NotFoundError(resource="role", resource_id=slug)
        return role

    async def ensure_default_roles(self) -> List[Role]:
        """Create the built-in roles that do not exist yet; returns the ones created."""
        created = []
        for role_data in default_roles():
            if await self.exists(name=role_data["name"]):
                continue
            created.append(await self.create(role_data))
            logger.info("Created role: %s", role_data["name"])
        return created

    def _find_assignment(self, user: User, role: Role) -> Optional[UserRole]:
        return next((a for a in user.roles if a.role_id == role.id), None)

    async def assign_role(self, user: User, role_slug: str) -> User:
        """Grant a role. Granting a role the user already holds is a no-op."""
        role = await self.get_by_slug(role_slug)
        if self._find_assignment(user, role) is None:
            self.session.add(UserRole(user_id=user.id, role=role))
            await self._flush(role)
            await self.session.refresh(user, ["roles"])
            logger.info("Assigned role %s to user %s", role.slug, user.id)
        return user

    async def revoke_role(self, user: User, role_slug: str) -> User:
        """Remove a role. Revoking a role the user does not hold is a no-op."""
        role = await self.get_by_slug(role_slug)
        assignment = self._find_assignment(user, role)
        if assignment is not None:
            user.roles.remove(assignment)
            await self.session.delete(assignment)
            await self._flush(role)
            logger.info("Revoked role %s from user %s", role.slug, user.id)
        return user
