"""HTML pages and the /search redirect."""

import secrets
from pathlib import Path
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import FileResponse, RedirectResponse

from kanri.api.deps import BANNED_PLUS_PATH, get_current_user
from kanri.config import settings
from kanri.models.user import User

STATIC_DIR = Path(__file__).resolve().parent / "static"
ADMIN_PAGE = "/kanri.html"
LOGIN_PAGE = "/login.html"
ADMIN_FILE = STATIC_DIR / "kanri.html"

router = APIRouter(tags=["pages"])


def _page(name: str) -> FileResponse:
    return FileResponse(str(STATIC_DIR / name))


def _redirect(location: str) -> RedirectResponse:
    return RedirectResponse(location, status_code=302)


def _is_admin(user: User | None) -> bool:
    return user is not None and user.role == "admin"


async def _search_query(request: Request) -> str:
    content_type = request.headers.get("content-type", "")
    q = None
    if content_type.startswith("application/json"):
        try:
            payload = await request.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            q = payload.get("q")
    elif content_type.startswith(
        ("application/x-www-form-urlencoded", "multipart/form-data")
    ):
        form = await request.form()
        q = form.get("q")
    if not q:
        q = request.query_params.get("q")
    return q if isinstance(q, str) else ""


@router.get("/")
async def index():
    return _page("index.html")


@router.get(ADMIN_PAGE)
async def admin_page(user: User | None = Depends(get_current_user)):
    if not _is_admin(user):
        return _redirect("/")
    return _page("kanri.html")


@router.get(BANNED_PLUS_PATH)
async def banned_plus_page():
    return _page("banned_plus.html")


@router.post("/search")
async def search(request: Request, user: User | None = Depends(get_current_user)):
    q = await _search_query(request)
    if q and secrets.compare_digest(q.encode(), settings.admin_pass.encode()):
        if _is_admin(user):
            return _redirect(ADMIN_PAGE)
        return _redirect(f"{LOGIN_PAGE}?{urlencode({'next': ADMIN_PAGE}, safe='/')}")
    return _redirect(settings.search_redirect_url)


@router.get("/{full_path:path}")
async def static_file(full_path: str, user: User | None = Depends(get_current_user)):
    """Serve any other file from the static directory."""
    file_path = (STATIC_DIR / full_path).resolve()
    if not file_path.is_relative_to(STATIC_DIR) or not file_path.is_file():
        raise HTTPException(status_code=404, detail="Not Found")
    # Spellings like "kanri.html/" resolve to the admin page too
    if file_path == ADMIN_FILE and not _is_admin(user):
        return _redirect("/")
    return FileResponse(str(file_path))
