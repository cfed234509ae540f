"""
Foundry — Route Guards
=======================

What:  Authorization checks for controllers.
How:   Two layers:
       1. Predicates: plain functions of (user[, team_id]) → bool. No IO;
          they read the eager-loaded User.roles / User.teams collections.
       2. Guard dependencies: wrap a predicate, raise PermissionDeniedError
          (403) when it fails and return the current user otherwise.

Superusers (is_superuser flag or the Superuser role) pass every guard.

Usage:
    @router.delete("/{team_id}")
    async def delete_team(team_id: UUID, user: User = Depends(requires_team_ownership)):
        ...
"""

from uuid import UUID

from fastapi import Depends

from foundry.auth.dependencies import get_current_user
from foundry.config import settings
from foundry.exceptions import PermissionDeniedError
from foundry.models.team import TeamRoles
from foundry.models.user import User
from foundry.services.slugs import slugify


# ══════════════════════════════════════════════════════════════════════════
# Predicates
# ══════════════════════════════════════════════════════════════════════════

def is_superuser(user: User) -> bool:
    superuser_slug = slugify(settings.superuser_role_name)
    return bool(user.is_superuser) or superuser_slug in user.role_slugs


def is_team_member(user: User, team_id: UUID) -> bool:
    return is_superuser(user) or any(m.team_id == team_id for m in user.teams)


def is_team_admin(user: User, team_id: UUID) -> bool:
    return is_superuser(user) or any(
        m.team_id == team_id and m.role == TeamRoles.ADMIN for m in user.teams
    )


def is_team_owner(user: User, team_id: UUID) -> bool:
    return is_superuser(user) or any(m.team_id == team_id and m.is_owner for m in user.teams)


# ══════════════════════════════════════════════════════════════════════════
# Guard Dependencies
# ══════════════════════════════════════════════════════════════════════════

async def requires_active_user(user: User = Depends(get_current_user)) -> User:
    """
    Entry point the other guards chain on.

    get_current_user already answers 401 for inactive accounts, so any user
    reaching this guard is active.
    """
    return user


async def requires_verified_user(user: User = Depends(requires_active_user)) -> User:
    if not (user.is_verified or is_superuser(user)):
        raise PermissionDeniedError("Email address has not been verified")
    return user


async def requires_superuser(user: User = Depends(requires_active_user)) -> User:
    if not is_superuser(user):
        raise PermissionDeniedError("Superuser access required")
    return user


async def requires_team_membership(
    team_id: UUID, user: User = Depends(requires_active_user)
) -> User:
    if not is_team_member(user, team_id):
        raise PermissionDeniedError(
            "You are not a member of this team", context={"team_id": str(team_id)}
        )
    return user


async def requires_team_admin(team_id: UUID, user: User = Depends(requires_active_user)) -> User:
    if not is_team_admin(user, team_id):
        raise PermissionDeniedError(
            "Only team admins can perform this action", context={"team_id": str(team_id)}
        )
    return user


async def requires_team_ownership(
    team_id: UUID, user: User = Depends(requires_active_user)
) -> User:
    if not is_team_owner(user, team_id):
        raise PermissionDeniedError(
            "Only the team owner can perform this action", context={"team_id": str(team_id)}
        )
    return user
