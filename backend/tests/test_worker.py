"""
Foundry — Worker Task & Settings Tests
=======================================

Tasks run against the SQLite test database through session_scope(), the
same way the worker process runs them.
"""

from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest

from foundry.config import settings
from foundry.database import session_scope
from foundry.services import TeamService
from foundry.worker.settings import TASKS, on_shutdown, worker_settings
from foundry.worker.tasks import background_worker_task, system_upkeep, user_registered


@pytest.mark.asyncio
async def test_user_registered_welcomes_new_user(make_user):
    user, _ = await make_user("new@example.com")
    result = await user_registered({}, user_id=str(user.id))
    assert result == {"user_id": str(user.id), "email": "new@example.com", "status": "welcomed"}


@pytest.mark.asyncio
async def test_user_registered_skips_deleted_user(db_schema):
    missing = str(uuid4())
    result = await user_registered({}, user_id=missing)
    assert result == {"user_id": missing, "status": "skipped"}


@pytest.mark.asyncio
async def test_background_worker_task_echoes():
    ctx = {"job": MagicMock(key="saq:job:echo")}
    assert await background_worker_task(ctx, message="hello") == {
        "message": "hello",
        "job": "saq:job:echo",
    }


@pytest.mark.asyncio
async def test_system_upkeep_counts_active_rows(make_user):
    await make_user("a@example.com")
    await make_user("b@example.com", is_active=False)
    async with session_scope() as db:
        await TeamService(db).create({"name": "Ops"})
        await TeamService(db).create({"name": "Archive", "is_active": False})

    assert await system_upkeep({}) == {"active_users": 1, "active_teams": 1}


def test_worker_settings():
    with patch("foundry.worker.settings.get_queue") as get_queue:
        config = worker_settings()

    assert config["queue"] is get_queue.return_value
    assert config["functions"] == TASKS
    assert config["concurrency"] == settings.worker_concurrency
    cron = config["cron_jobs"][0]
    assert cron.function is system_upkeep
    assert cron.cron == settings.upkeep_cron


@pytest.mark.asyncio
async def test_on_shutdown_disposes_engine():
    with patch("foundry.worker.settings.dispose_engine") as dispose:
        await on_shutdown({})
    dispose.assert_awaited_once()
