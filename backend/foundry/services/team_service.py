"""
Foundry — Team Service
=======================

What:  Team lifecycle and membership rules.
How:   Built on ModelService[Team]; membership rows are TeamMember objects
       kept in Team.members (delete-orphan cascade).

Rules:
    - create(): the creating user becomes owner (ADMIN, is_owner=True)
    - slugs are unique; a taken slug gets a random hex suffix
    - a user can be a member of a team at most once (ConflictError)
    - the owner cannot be removed (ValidationError)
"""

import logging
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select

from foundry.exceptions import ConflictError, NotFoundError, ValidationError
from foundry.models.team import Team, TeamMember, TeamRoles
from foundry.models.user import User
from foundry.services.base import ModelService
from foundry.services.slugs import slug_with_suffix, slugify

logger = logging.getLogger(__name__)


class TeamService(ModelService[Team]):
    model = Team
    resource_name = "team"

    async def get(self, item_id: UUID) -> Team:
        """
        Fetch a team with its members loaded.

        A Team reached through User.teams (TeamMember.team) can already sit in
        the identity map without its members; Session.get() would return it
        as is, while a SELECT runs the selectin loader for the missing
        collection.
        """
        result = await self.session.execute(select(Team).where(Team.id == item_id))
        team = result.unique().scalar_one_or_none()
        if team is None:
            raise NotFoundError(resource=self.resource_name, resource_id=str(item_id))
        return team

    async def _slug_taken(self, slug: str, exclude_id: Optional[UUID]) -> bool:
        result = await self.session.execute(select(Team.id).where(Team.slug == slug))
        existing_id = result.scalar_one_or_none()
        return existing_id is not None and existing_id != exclude_id

    async def _unique_slug(self, name: str, exclude_id: Optional[UUID] = None) -> str:
        base = slugify(name) or "team"
        slug = base
        while await self._slug_taken(slug, exclude_id):
            slug = slug_with_suffix(base)
        return slug

    async def create(self, data: Dict[str, Any], owner: Optional[User] = None) -> Team:
        """Create a team; when `owner` is given they are added as owning admin."""
        data = dict(data)
        data["slug"] = await self._unique_slug(data["name"])
        team = await super().create(data)
        if owner is not None:
            self.session.add(
                TeamMember(team=team, user=owner, role=TeamRoles.ADMIN, is_owner=True)
            )
            await self._flush(team)
            await self.refresh(team, ["members"])
            await self.session.refresh(owner, ["teams"])
        logger.info("Team created: %s (%s)", team.slug, team.id)
        return team

    async def update(self, item: Team, data: Dict[str, Any]) -> Team:
        data = dict(data)
        if data.get("name") and data["name"] != item.name:
            data["slug"] = await self._unique_slug(data["name"], exclude_id=item.id)
        return await super().update(item, data)

    async def list_for_user(
        self, user: User, limit: int = 20, offset: int = 0
    ) -> Tuple[List[Team], int]:
        """Teams `user` belongs to, newest first."""
        member_of = select(TeamMember.team_id).where(TeamMember.user_id == user.id)
        return await self.list_and_count(
            Team.id.in_(member_of),
            limit=limit,
            offset=offset,
            descending=True,
        )

    @staticmethod
    def find_member(team: Team, user_id: UUID) -> Optional[TeamMember]:
        return next((m for m in team.members if m.user_id == user_id), None)

    async def add_member(
        self, team: Team, user: User, role: TeamRoles = TeamRoles.MEMBER
    ) -> Team:
        if self.find_member(team, user.id) is not None:
            raise ConflictError(
                message=f"{user.email} is already a member of this team",
                context={"team_id": str(team.id), "user_id": str(user.id)},
            )
        self.session.add(TeamMember(team=team, user=user, role=role))
        await self._flush(team)
        await self.refresh(team, ["members"])
        logger.info("Added %s to team %s as %s", user.id, team.id, role.value)
        return team

    async def remove_member(self, team: Team, user_id: UUID) -> Team:
        member = self.find_member(team, user_id)
        if member is None:
            raise NotFoundError(resource="team member", resource_id=str(user_id))
        if member.is_owner:
            raise ValidationError("The team owner cannot be removed", field="user_id")
        team.members.remove(member)
        await self.session.delete(member)
        await self._flush(team)
        logger.info("Removed %s from team %s", user_id, team.id)
        return team
