"""
Foundry — Management CLI Tests
===============================

Argument parsing and the account commands. Async command bodies run against
the SQLite test database; the synchronous wrappers are exercised with the
coroutine runner patched out.
"""

import json
from unittest.mock import patch

import pytest

from foundry.cli import build_parser, create_roles, create_user, main, promote_to_superuser
from foundry.database import session_scope
from foundry.exceptions import ConflictError, NotFoundError
from foundry.services import UserService


class TestParser:
    def test_run_defaults(self):
        ns = build_parser().parse_args(["run", "--port", "9000", "--with-worker"])
        assert ns.port == 9000
        assert ns.with_worker is True
        assert ns.reload is False

    def test_db_commands(self):
        parser = build_parser()
        assert parser.parse_args(["db", "upgrade"]).revision == "head"
        assert parser.parse_args(["db", "downgrade"]).revision == "-1"

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestMain:
    def test_short_password_rejected(self, capsys):
        assert main(["create-user", "--email", "a@example.com", "--password", "short"]) == 1
        assert "at least 8 characters" in capsys.readouterr().err

    def test_application_errors_exit_1(self, capsys):
        def fail(coro):
            coro.close()
            raise NotFoundError(resource="user", resource_id="ghost@example.com")

        with patch("foundry.cli._run_async", side_effect=fail):
            assert main(["promote-to-superuser", "--email", "ghost@example.com"]) == 1
        assert "ghost@example.com" in capsys.readouterr().err

    def test_create_roles_output(self, capsys):
        def fake_run(coro):
            coro.close()
            return ["Superuser", "Application Access"]

        with patch("foundry.cli._run_async", side_effect=fake_run):
            assert main(["create-roles"]) == 0
        assert "Superuser, Application Access" in capsys.readouterr().out

    def test_export_openapi(self, tmp_path):
        out = tmp_path / "openapi.json"
        assert main(["export-openapi", "--out", str(out)]) == 0
        document = json.loads(out.read_text(encoding="utf-8"))
        assert "/api/access/login" in document["paths"]
        assert "/api/teams/{team_id}/members" in document["paths"]

    def test_db_upgrade_calls_alembic(self):
        with patch("alembic.command.upgrade") as upgrade:
            assert main(["db", "upgrade"]) == 0
        config, revision = upgrade.call_args.args
        assert revision == "head"
        assert config.get_main_option("script_location").endswith("alembic")

    def test_db_commands_need_migration_scripts(self, tmp_path, capsys):
        with patch("foundry.cli.ALEMBIC_INI", tmp_path / "alembic.ini"):
            assert main(["db", "upgrade"]) == 1
        assert "pip install -e ." in capsys.readouterr().err


class TestAccountCommands:
    @pytest.mark.asyncio
    async def test_create_user(self, db_schema):
        user_id = await create_user("Root@Example.com", "correct-horse", "Root", superuser=True)
        async with session_scope() as db:
            user = await UserService(db).get_by_email("root@example.com")
        assert str(user.id) == user_id
        assert user.is_superuser and user.is_verified

    @pytest.mark.asyncio
    async def test_create_user_twice(self, db_schema):
        await create_user("root@example.com", "correct-horse")
        with pytest.raises(ConflictError):
            await create_user("root@example.com", "correct-horse")

    @pytest.mark.asyncio
    async def test_promote_grants_flag_and_role(self, db_schema):
        assert await create_roles() == ["Superuser", "Application Access"]
        await create_user("bob@example.com", "correct-horse")

        await promote_to_superuser("bob@example.com")

        async with session_scope() as db:
            user = await UserService(db).get_by_email("bob@example.com")
        assert user.is_superuser
        assert "superuser" in user.role_slugs

    @pytest.mark.asyncio
    async def test_promote_unknown_user(self, db_schema):
        with pytest.raises(NotFoundError):
            await promote_to_superuser("ghost@example.com")
