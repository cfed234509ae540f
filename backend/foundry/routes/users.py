"""
Foundry — User Administration Routes
=====================================

Superuser-only CRUD over accounts. Listing is paginated with ?limit=&offset=
and filtered with ?search= (case-insensitive on email and name); the total
is returned both in the body and the X-Total-Count header.
"""

from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response

from foundry.auth.guards import requires_superuser
from foundry.schemas.common import ErrorResponse, OffsetPagination
from foundry.schemas.user import UserCreate, UserRead, UserUpdate
from foundry.services import UserService, provide_users_service

router = APIRouter(
    prefix="/api/users",
    tags=["Users"],
    dependencies=[Depends(requires_superuser)],
    responses={
        401: {"description": "Not authenticated", "model": ErrorResponse},
        403: {"description": "Superuser required", "model": ErrorResponse},
    },
)


@router.get("", response_model=OffsetPagination[UserRead], summary="List users")
async def list_users(
    response: Response,
    limit: int = Query(20, ge=1, le=100, description="Page size"),
    offset: int = Query(0, ge=0, description="Rows to skip"),
    search: Optional[str] = Query(None, max_length=255, description="Email or name contains"),
    order_by: Literal["created_at", "email", "name"] = Query("created_at"),
    sort_order: Literal["asc", "desc"] = Query("desc"),
    users: UserService = Depends(provide_users_service),
) -> OffsetPagination[UserRead]:
    items, total = await users.search(
        search=search,
        limit=limit,
        offset=offset,
        order_by=order_by,
        descending=sort_order == "desc",
    )
    response.headers["X-Total-Count"] = str(total)
    return OffsetPagination[UserRead](
        items=[UserRead.model_validate(u) for u in items],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/{user_id}",
    response_model=UserRead,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
    summary="Get a user",
)
async def get_user(
    user_id: UUID, users: UserService = Depends(provide_users_service)
) -> UserRead:
    return UserRead.model_validate(await users.get(user_id))


@router.post(
    "",
    status_code=201,
    response_model=UserRead,
    responses={409: {"description": "Email already registered", "model": ErrorResponse}},
    summary="Create a user",
)
async def create_user(
    data: UserCreate, users: UserService = Depends(provide_users_service)
) -> UserRead:
    user = await users.create(data.model_dump())
    return UserRead.model_validate(user)


@router.patch("/{user_id}", response_model=UserRead, summary="Update a user")
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    users: UserService = Depends(provide_users_service),
) -> UserRead:
    user = await users.get(user_id)
    user = await users.update(user, data.model_dump(exclude_unset=True, exclude_none=True))
    return UserRead.model_validate(user)


@router.delete(
    "/{user_id}",
    status_code=204,
    responses={409: {"description": "User still owns teams", "model": ErrorResponse}},
    summary="Delete a user",
)
async def delete_user(
    user_id: UUID, users: UserService = Depends(provide_users_service)
) -> None:
    await users.delete(user_id)
