"""
Foundry — Team Routes
======================

Who may do what:
    - any active user:  list own teams, create a team (becomes owner + admin)
    - team member:      read the team
    - team admin:       rename/update, add and remove members
    - team owner:       delete the team
Superusers pass every check and see every team in the listing.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response

from foundry.auth.guards import (
    is_superuser,
    requires_active_user,
    requires_team_admin,
    requires_team_membership,
    requires_team_ownership,
)
from foundry.exceptions import NotFoundError
from foundry.models.user import User
from foundry.schemas.common import ErrorResponse, OffsetPagination
from foundry.schemas.team import TeamCreate, TeamMemberAdd, TeamRead, TeamUpdate
from foundry.services import (
    TeamService,
    UserService,
    provide_teams_service,
    provide_users_service,
)

router = APIRouter(
    prefix="/api/teams",
    tags=["Teams"],
    responses={
        401: {"description": "Not authenticated", "model": ErrorResponse},
        403: {"description": "Insufficient team permissions", "model": ErrorResponse},
    },
)


@router.get("", response_model=OffsetPagination[TeamRead], summary="List teams")
async def list_teams(
    response: Response,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    user: User = Depends(requires_active_user),
    teams: TeamService = Depends(provide_teams_service),
) -> OffsetPagination[TeamRead]:
    if is_superuser(user):
        items, total = await teams.list_and_count(limit=limit, offset=offset, descending=True)
    else:
        items, total = await teams.list_for_user(user, limit=limit, offset=offset)
    response.headers["X-Total-Count"] = str(total)
    return OffsetPagination[TeamRead](
        items=[TeamRead.model_validate(t) for t in items],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.post("", status_code=201, response_model=TeamRead, summary="Create a team")
async def create_team(
    data: TeamCreate,
    user: User = Depends(requires_active_user),
    teams: TeamService = Depends(provide_teams_service),
) -> TeamRead:
    team = await teams.create(data.model_dump(), owner=user)
    return TeamRead.model_validate(team)


@router.get(
    "/{team_id}",
    response_model=TeamRead,
    dependencies=[Depends(requires_team_membership)],
    summary="Get a team",
)
async def get_team(
    team_id: UUID, teams: TeamService = Depends(provide_teams_service)
) -> TeamRead:
    return TeamRead.model_validate(await teams.get(team_id))


@router.patch(
    "/{team_id}",
    response_model=TeamRead,
    dependencies=[Depends(requires_team_admin)],
    summary="Update a team",
)
async def update_team(
    team_id: UUID,
    data: TeamUpdate,
    teams: TeamService = Depends(provide_teams_service),
) -> TeamRead:
    team = await teams.get(team_id)
    team = await teams.update(team, data.model_dump(exclude_unset=True, exclude_none=True))
    return TeamRead.model_validate(team)


@router.delete(
    "/{team_id}",
    status_code=204,
    dependencies=[Depends(requires_team_ownership)],
    summary="Delete a team",
)
async def delete_team(
    team_id: UUID, teams: TeamService = Depends(provide_teams_service)
) -> None:
    await teams.delete(team_id)


@router.post(
    "/{team_id}/members",
    status_code=201,
    response_model=TeamRead,
    dependencies=[Depends(requires_team_admin)],
    responses={
        404: {"description": "Team or user not found", "model": ErrorResponse},
        409: {"description": "Already a member", "model": ErrorResponse},
    },
    summary="Add a team member",
)
async def add_member(
    team_id: UUID,
    data: TeamMemberAdd,
    teams: TeamService = Depends(provide_teams_service),
    users: UserService = Depends(provide_users_service),
) -> TeamRead:
    team = await teams.get(team_id)
    member = await users.get_by_email(data.user_email)
    if member is None:
        raise NotFoundError(resource="user", resource_id=data.user_email)
    team = await teams.add_member(team, member, role=data.role)
    return TeamRead.model_validate(team)


@router.delete(
    "/{team_id}/members/{user_id}",
    response_model=TeamRead,
    dependencies=[Depends(requires_team_admin)],
    responses={400: {"description": "Owner cannot be removed", "model": ErrorResponse}},
    summary="Remove a team member",
)
async def remove_member(
    team_id: UUID,
    user_id: UUID,
    teams: TeamService = Depends(provide_teams_service),
) -> TeamRead:
    team = await teams.get(team_id)
    team = await teams.remove_member(team, user_id)
    return TeamRead.model_validate(team)
