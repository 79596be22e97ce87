from fastapi import Depends, Request
from sqlmodel import Session

from kanri.config import settings
from kanri.database import get_session
from kanri.errors import Forbidden, Redirect
from kanri.models.user import User
from kanri.sessions import SessionStore, session_store

BANNED_PLUS_PATH = "/banned_plus.html"


def get_session_store() -> SessionStore:
    return session_store


def get_session_token(request: Request) -> str | None:
    return request.cookies.get(settings.session_cookie)


async def get_current_user(
    token: str | None = Depends(get_session_token),
    store: SessionStore = Depends(get_session_store),
    session: Session = Depends(get_session),
) -> User | None:
    """Resolve the logged-in user, re-reading the row on every request."""
    user_id = store.resolve(token)
    if user_id is None:
        return None
    return session.get(User, user_id)


async def enforce_ban(
    request: Request,
    user: User | None = Depends(get_current_user),
) -> None:
    if user is None or not user.is_banned:
        return
    if user.ban_type == "plus":
        if request.url.path == BANNED_PLUS_PATH:
            return
        raise Redirect(BANNED_PLUS_PATH)
    raise Redirect(settings.banned_redirect_url)


async def get_admin_user(user: User | None = Depends(get_current_user)) -> User:
    if user is None or user.role != "admin":
        raise Forbidden()
    return user
