"""
Foundry — Frontend Routes
==========================

What:  Serves the HTML shell that boots the React app.
How:   Renders templates/index.html with the Vite asset tags. Every GET that
       no other route claims falls through to the same shell so client-side
       routing (e.g. /teams/42) survives a page reload.

This router must be included last: its catch-all would otherwise shadow
API routes and the static mount.
"""

from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from foundry.config import settings
from foundry.exceptions import NotFoundError
from foundry.vite import vite_loader

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

# Paths that never render the SPA shell
RESERVED_PREFIXES = ("api/", "docs", "redoc", "openapi.json", "health")

router = APIRouter(include_in_schema=False)


def render_shell(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "index.html",
        {"app_name": settings.app_name, "vite_tags": vite_loader.generate_tags()},
    )


@router.get("/", response_class=HTMLResponse)
async def index(request: Request) -> HTMLResponse:
    return render_shell(request)


@router.get("/{full_path:path}", response_class=HTMLResponse)
async def spa_fallback(request: Request, full_path: str) -> HTMLResponse:
    asset_prefix = settings.vite_asset_url.lstrip("/")
    if full_path.startswith(RESERVED_PREFIXES) or (asset_prefix and full_path.startswith(asset_prefix)):
        raise NotFoundError(resource="page", resource_id=f"/{full_path}")
    return render_shell(request)
