"""Foundry — Current Account Routes (/api/me)."""

from fastapi import APIRouter, Depends

from foundry.auth.guards import requires_active_user
from foundry.models.user import User
from foundry.schemas.common import MessageResponse
from foundry.schemas.user import PasswordUpdate, ProfileUpdate, UserRead
from foundry.services import UserService, provide_users_service

router = APIRouter(prefix="/api/me", tags=["Account"])


@router.get("", response_model=UserRead, summary="Get the logged-in account")
async def get_me(user: User = Depends(requires_active_user)) -> UserRead:
    return UserRead.model_validate(user)


@router.patch("", response_model=UserRead, summary="Update own profile")
async def update_me(
    data: ProfileUpdate,
    user: User = Depends(requires_active_user),
    users: UserService = Depends(provide_users_service),
) -> UserRead:
    user = await users.update(user, data.model_dump(exclude_unset=True))
    return UserRead.model_validate(user)


@router.patch("/password", response_model=MessageResponse, summary="Change own password")
async def update_password(
    data: PasswordUpdate,
    user: User = Depends(requires_active_user),
    users: UserService = Depends(provide_users_service),
) -> MessageResponse:
    await users.update_password(user, data.current_password, data.new_password)
    return MessageResponse(message="Password updated")
