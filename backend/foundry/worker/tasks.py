"""
Foundry — Background Tasks (Consumer Side)
===========================================

Every task follows the SAQ signature `async def task(ctx, **kwargs)`; `ctx`
carries the worker, queue and job. Tasks open their own database
transaction with session_scope() and return a JSON-serialisable dict that
SAQ stores as the job result.
"""

import logging
from typing import Any, Dict
from uuid import UUID

from foundry.database import session_scope
from foundry.exceptions import NotFoundError
from foundry.models.team import Team
from foundry.models.user import User
from foundry.services import TeamService, UserService

logger = logging.getLogger(__name__)


async def user_registered(ctx: Dict[str, Any], *, user_id: str) -> Dict[str, Any]:
    """
    Post-signup hand-off.

    Runs after POST /api/access/signup. Loads the new account and records the
    welcome step; a user deleted before the job runs is skipped.
    """
    async with session_scope() as db:
        try:
            user = await UserService(db).get(UUID(user_id))
        except NotFoundError:
            logger.warning("user_registered: user %s no longer exists", user_id)
            return {"user_id": user_id, "status": "skipped"}
        logger.info("Welcome hand-off for %s (%s)", user.email, user.id)
        return {"user_id": user_id, "email": user.email, "status": "welcomed"}


async def background_worker_task(ctx: Dict[str, Any], *, message: str = "") -> Dict[str, Any]:
    """Echo task used to check the worker end to end (POST /api/system/jobs/echo)."""
    job = ctx.get("job")
    logger.info("background_worker_task received: %s", message)
    return {"message": message, "job": getattr(job, "key", None)}


async def system_upkeep(ctx: Dict[str, Any]) -> Dict[str, Any]:
    """Periodic cron job: reports active users and teams."""
    async with session_scope() as db:
        active_users = await UserService(db).count(User.is_active.is_(True))
        active_teams = await TeamService(db).count(Team.is_active.is_(True))
    logger.info("System upkeep: %d active users, %d active teams", active_users, active_teams)
    return {"active_users": active_users, "active_teams": active_teams}
