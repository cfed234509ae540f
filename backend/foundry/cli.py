"""Foundry management CLI.

Usage
-----
foundry run [--host 0.0.0.0] [--port 8000] [--reload] [--with-worker]
foundry worker
foundry create-user --email admin@example.com [--password ...] [--name ...] [--superuser]
foundry promote-to-superuser --email admin@example.com
foundry create-roles
foundry db upgrade [--revision head]
foundry db downgrade [--revision -1]
foundry export-openapi [--out openapi.json]

Every command returns a process exit code; application errors are printed to
stderr and exit with 1.
"""

import argparse
import asyncio
import getpass
import json
import logging
import subprocess
import sys
from pathlib import Path
from typing import Any, Awaitable, List, Optional

from foundry.config import settings
from foundry.database import dispose_engine, session_scope
from foundry.exceptions import FoundryError, NotFoundError, ValidationError
from foundry.logging_config import setup_logging
from foundry.services import RoleService, UserService
from foundry.services.slugs import slugify

logger = logging.getLogger("foundry.cli")

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"


def _run_async(coro: Awaitable[Any]) -> Any:
    async def runner() -> Any:
        try:
            return await coro
        finally:
            await dispose_engine()

    return asyncio.run(runner())


# ── Server & worker ───────────────────────────────────────────────────────

def _cmd_run(args: argparse.Namespace) -> int:
    import uvicorn

    worker_proc: Optional[subprocess.Popen] = None
    if args.with_worker:
        worker_proc = subprocess.Popen([sys.executable, "-m", "foundry.cli", "worker"])
        logger.info("Started worker process (pid=%d)", worker_proc.pid)
    try:
        uvicorn.run(
            "foundry.main:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_config=None,
        )
    finally:
        if worker_proc is not None:
            worker_proc.terminate()
            worker_proc.wait(timeout=15)
    return 0


def _cmd_worker(args: argparse.Namespace) -> int:
    from foundry.worker.settings import run_worker

    run_worker()
    return 0


# ── Accounts & roles ──────────────────────────────────────────────────────

async def create_user(
    email: str, password: str, name: Optional[str] = None, superuser: bool = False
) -> str:
    async with session_scope() as db:
        user = await UserService(db).create(
            {
                "email": email,
                "password": password,
                "name": name,
                "is_superuser": superuser,
                "is_verified": True,
            }
        )
        return str(user.id)


async def promote_to_superuser(email: str) -> str:
    async with session_scope() as db:
        users = UserService(db)
        user = await users.get_by_email(email)
        if user is None:
            raise NotFoundError(resource="user", resource_id=email)
        await users.update(user, {"is_superuser": True})
        try:
            await RoleService(db).assign_role(user, slugify(settings.superuser_role_name))
        except NotFoundError:
            logger.info("Role '%s' does not exist; only the flag was set", settings.superuser_role_name)
        return str(user.id)


async def create_roles() -> List[str]:
    async with session_scope() as db:
        created = await RoleService(db).ensure_default_roles()
        return [role.name for role in created]


def _cmd_create_user(args: argparse.Namespace) -> int:
    password = args.password or getpass.getpass("Password: ")
    if len(password) < 8:
        raise ValidationError("Password must be at least 8 characters", field="password")
    user_id = _run_async(create_user(args.email, password, args.name, args.superuser))
    print(f"Created user {args.email} ({user_id})")
    return 0


def _cmd_promote(args: argparse.Namespace) -> int:
    user_id = _run_async(promote_to_superuser(args.email))
    print(f"Promoted {args.email} ({user_id}) to superuser")
    return 0


def _cmd_create_roles(args: argparse.Namespace) -> int:
    created = _run_async(create_roles())
    if created:
        print("Created roles: " + ", ".join(created))
    else:
        print("All default roles already exist")
    return 0


# ── Database migrations ───────────────────────────────────────────────────

def _alembic_config():
    from alembic.config import Config

    # alembic.ini and the revision scripts live beside the package, not in it
    if not ALEMBIC_INI.is_file():
        raise FoundryError(
            message=(
                f"Migration scripts not found at {ALEMBIC_INI.parent}; "
                "`foundry db` needs a source checkout installed with `pip install -e .`"
            ),
            context={"alembic_ini": str(ALEMBIC_INI)},
        )
    config = Config(str(ALEMBIC_INI))
    config.set_main_option("script_location", str(ALEMBIC_INI.parent / "alembic"))
    config.attributes["configure_logger"] = False
    return config


def _cmd_db_upgrade(args: argparse.Namespace) -> int:
    from alembic import command

    command.upgrade(_alembic_config(), args.revision)
    print(f"Database upgraded to {args.revision}")
    return 0


def _cmd_db_downgrade(args: argparse.Namespace) -> int:
    from alembic import command

    command.downgrade(_alembic_config(), args.revision)
    print(f"Database downgraded to {args.revision}")
    return 0


# ── OpenAPI ───────────────────────────────────────────────────────────────

def _cmd_export_openapi(args: argparse.Namespace) -> int:
    from foundry.main import app

    document = json.dumps(app.openapi(), indent=2)
    if args.out:
        Path(args.out).write_text(document + "\n", encoding="utf-8")
        print(str(Path(args.out)))
    else:
        print(document)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="foundry", description="Foundry management commands")
    sp = p.add_subparsers(dest="cmd", required=True)

    pr = sp.add_parser("run", help="Run the API server with uvicorn")
    pr.add_argument("--host", default=settings.backend_host)
    pr.add_argument("--port", type=int, default=settings.backend_port)
    pr.add_argument("--reload", action="store_true", help="Reload on code changes")
    pr.add_argument("--with-worker", action="store_true", help="Also start a SAQ worker process")
    pr.set_defaults(func=_cmd_run)

    pw = sp.add_parser("worker", help="Run the SAQ background worker")
    pw.set_defaults(func=_cmd_worker)

    pu = sp.add_parser("create-user", help="Create a user account")
    pu.add_argument("--email", required=True)
    pu.add_argument("--password", help="Prompted for when omitted")
    pu.add_argument("--name")
    pu.add_argument("--superuser", action="store_true")
    pu.set_defaults(func=_cmd_create_user)

    pp = sp.add_parser("promote-to-superuser", help="Grant superuser rights to an account")
    pp.add_argument("--email", required=True)
    pp.set_defaults(func=_cmd_promote)

    pc = sp.add_parser("create-roles", help="Create the built-in roles")
    pc.set_defaults(func=_cmd_create_roles)

    pd = sp.add_parser("db", help="Database migrations")
    dsp = pd.add_subparsers(dest="db_cmd", required=True)
    pdu = dsp.add_parser("upgrade", help="Apply migrations")
    pdu.add_argument("--revision", default="head")
    pdu.set_defaults(func=_cmd_db_upgrade)
    pdd = dsp.add_parser("downgrade", help="Revert migrations")
    pdd.add_argument("--revision", default="-1")
    pdd.set_defaults(func=_cmd_db_downgrade)

    po = sp.add_parser("export-openapi", help="Write the OpenAPI document")
    po.add_argument("--out", help="Output path (stdout when omitted)")
    po.set_defaults(func=_cmd_export_openapi)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    ns = build_parser().parse_args(argv)
    setup_logging()
    try:
        return int(ns.func(ns))
    except FoundryError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
