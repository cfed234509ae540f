"""Foundry — Role Routes (superuser only)."""

from typing import List

from fastapi import APIRouter, Depends

from foundry.auth.guards import requires_superuser
from foundry.exceptions import NotFoundError
from foundry.models.user import User
from foundry.schemas.common import ErrorResponse
from foundry.schemas.role import RoleAssignment, RoleCreate, RoleRead
from foundry.schemas.user import UserRead
from foundry.services import (
    RoleService,
    UserService,
    provide_roles_service,
    provide_users_service,
)

router = APIRouter(
    prefix="/api/roles",
    tags=["Roles"],
    dependencies=[Depends(requires_superuser)],
    responses={
        403: {"description": "Superuser required", "model": ErrorResponse},
        404: {"description": "Role or user not found", "model": ErrorResponse},
    },
)


async def _user_by_email(users: UserService, email: str) -> User:
    user = await users.get_by_email(email)
    if user is None:
        raise NotFoundError(resource="user", resource_id=email)
    return user


@router.get("", response_model=List[RoleRead], summary="List roles")
async def list_roles(roles: RoleService = Depends(provide_roles_service)) -> List[RoleRead]:
    return [RoleRead.model_validate(r) for r in await roles.list()]


@router.post("", status_code=201, response_model=RoleRead, summary="Create a role")
async def create_role(
    data: RoleCreate, roles: RoleService = Depends(provide_roles_service)
) -> RoleRead:
    return RoleRead.model_validate(await roles.create(data.model_dump()))


@router.post("/{role_slug}/assign", response_model=UserRead, summary="Grant a role")
async def assign_role(
    role_slug: str,
    data: RoleAssignment,
    roles: RoleService = Depends(provide_roles_service),
    users: UserService = Depends(provide_users_service),
) -> UserRead:
    user = await _user_by_email(users, data.user_email)
    return UserRead.model_validate(await roles.assign_role(user, role_slug))


@router.post("/{role_slug}/revoke", response_model=UserRead, summary="Remove a role")
async def revoke_role(
    role_slug: str,
    data: RoleAssignment,
    roles: RoleService = Depends(provide_roles_service),
    users: UserService = Depends(provide_users_service),
) -> UserRead:
    user = await _user_by_email(users, data.user_email)
    return UserRead.model_validate(await roles.revoke_role(user, role_slug))
