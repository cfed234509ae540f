"""
Foundry — Services Layer
=========================

What:  Business logic between controllers (HTTP) and the database.
How:   Each service wraps one AsyncSession. Controllers receive a service
       through the provide_* dependencies below; the CLI and worker build
       services directly inside session_scope().

Service Inventory:
    - ModelService (base): generic get/list/create/update/delete
    - UserService: accounts, password hashing, authentication
    - RoleService: built-in roles, role assignment
    - TeamService: teams and membership
"""

from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from foundry.database import get_db_session
from foundry.services.role_service import RoleService
from foundry.services.team_service import TeamService
from foundry.services.user_service import UserService


async def provide_users_service(
    db: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[UserService, None]:
    yield UserService(db)


async def provide_roles_service(
    db: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[RoleService, None]:
    yield RoleService(db)


async def provide_teams_service(
    db: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[TeamService, None]:
    yield TeamService(db)


__all__ = [
    "RoleService",
    "TeamService",
    "UserService",
    "provide_roles_service",
    "provide_teams_service",
    "provide_users_service",
]
