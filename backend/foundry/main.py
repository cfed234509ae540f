"""
Foundry — FastAPI Application Factory
======================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() assembles middleware, exception handlers, routers and the
       static asset mount; `app` at module level is what uvicorn imports
       (uvicorn foundry.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────────┐
    │                      FastAPI App                        │
    │                                                         │
    │  Middleware Chain (outermost first):                    │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐            │
    │  │  Req ID  │→│ Logging  │→│ GZip │→│ CORS │            │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘            │
    │                                                         │
    │  Routes:                                                │
    │  /api/access  /api/me  /api/users  /api/roles           │
    │  /api/teams   /api/system  /health                      │
    │  /static/* (Vite bundle)   /* (React shell, last)       │
    │                                                         │
    │  Exception Handlers:                                    │
    │  FoundryError → its status_code │ Exception → 500       │
    └─────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, configuration check
    Shutdown: close the SAQ queue connection, dispose the database engine
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from foundry import __version__
from foundry.config import settings
from foundry.database import dispose_engine
from foundry.exceptions import AuthenticationError, DatabaseError, FoundryError
from foundry.logging_config import setup_logging
from foundry.middleware.logging import RequestLoggingMiddleware
from foundry.middleware.request_id import RequestIDMiddleware, request_id_var
from foundry.routes import access, account, frontend, health, roles, system, teams, users
from foundry.vite import vite_loader
from foundry.worker.queue import close_queue

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("%s %s starting (environment=%s)", settings.app_name, __version__, settings.environment)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # The server keeps running so /health can report the problem
        logger.error("Configuration error: %s", str(e))

    if settings.vite_dev_mode:
        logger.info("Frontend served by Vite dev server at %s", vite_loader.dev_server_url)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("%s shutting down...", settings.app_name)
    await close_queue()
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the FoundryError hierarchy onto JSON error responses.

    Every FoundryError subclass declares its own status_code and error_code,
    so a single handler covers them. Server-side failures (5xx) log their
    context and return the message only; DatabaseError hides even that.
    """

    @app.exception_handler(FoundryError)
    async def handle_foundry_error(request: Request, exc: FoundryError):
        rid = request_id_var.get("")
        status = exc.status_code
        content = {
            "error": exc.error_code,
            "message": exc.message,
            "request_id": rid,
        }
        headers = {}

        if isinstance(exc, DatabaseError):
            logger.error("Database error: %s | Context: %s", exc.message, exc.context)
            content["message"] = "An internal error occurred. Please try again later."
        elif status >= 500:
            logger.error("%s: %s | Context: %s", type(exc).__name__, exc.message, exc.context)
        else:
            if exc.context:
                content["details"] = exc.context
            if status != 404:
                logger.warning("%s: %s", type(exc).__name__, exc.message)

        if isinstance(exc, AuthenticationError):
            headers["WWW-Authenticate"] = "Bearer"
        return JSONResponse(status_code=status, content=content, headers=headers)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("Unexpected error: %s", str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again or contact support.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title=f"{settings.app_name} API",
        description=(
            "Fullstack application template: accounts, roles and teams over a JSON API, "
            "a Vite/React frontend and SAQ background jobs."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(access.router)
    app.include_router(account.router)
    app.include_router(users.router)
    app.include_router(roles.router)
    app.include_router(teams.router)
    app.include_router(system.router)

    # Static mount precedes the SPA catch-all
    bundle_dir = Path(settings.vite_bundle_dir)
    if bundle_dir.is_dir():
        app.mount(
            settings.vite_asset_url.rstrip("/"),
            StaticFiles(directory=str(bundle_dir)),
            name="static",
        )
    else:
        logger.debug("Vite bundle directory %s not found; static mount skipped", bundle_dir)

    app.include_router(frontend.router)

    return app


app = create_app()
