"""
Foundry — Migration Tests
==========================

What:  Runs the real Alembic revisions against a throwaway SQLite file.
How:   Synchronous tests; env.py starts its own event loop through
       asyncio.run(), so these must not run inside pytest-asyncio's loop.

What we test:
    ✅ upgrade head produces exactly the schema declared by the models
    ✅ downgrade base removes every application table
"""

import pytest
from alembic import command
from alembic.autogenerate import compare_metadata
from alembic.migration import MigrationContext
from sqlalchemy import create_engine, inspect

import foundry.models  # noqa: F401  registers every table on Base.metadata
from foundry.cli import _alembic_config
from foundry.database import Base

APP_TABLES = {"user_account", "role", "user_account_role", "team", "team_member"}


@pytest.fixture
def migration_db(tmp_path):
    """Alembic config pointed at an empty SQLite file, plus a sync engine on it."""
    db_path = tmp_path / "migrations.db"
    config = _alembic_config()
    config.attributes["database_url"] = f"sqlite+aiosqlite:///{db_path}"
    sync_engine = create_engine(f"sqlite:///{db_path}")
    yield config, sync_engine
    sync_engine.dispose()


def test_upgrade_matches_models(migration_db):
    config, sync_engine = migration_db
    command.upgrade(config, "head")

    with sync_engine.connect() as conn:
        context = MigrationContext.configure(conn, opts={"compare_type": True})
        diff = compare_metadata(context, Base.metadata)

    assert diff == []


def test_upgrade_then_downgrade(migration_db):
    config, sync_engine = migration_db
    command.upgrade(config, "head")
    assert APP_TABLES <= set(inspect(sync_engine).get_table_names())

    command.downgrade(config, "base")
    assert not APP_TABLES & set(inspect(sync_engine).get_table_names())
