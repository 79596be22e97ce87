"""Settings API endpoints for the registration auth mode."""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from kanri.api.deps import get_admin_user
from kanri.config import settings
from kanri.database import get_session
from kanri.errors import InvalidArgument, StorageError
from kanri.models.setting import AppSetting
from kanri.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])

AUTH_MODE_KEY = "auth_mode"
AUTH_MODES = {"free", "approval"}


def get_auth_mode(session: Session) -> str:
    row = session.get(AppSetting, AUTH_MODE_KEY)
    return row.value if row else settings.default_auth_mode


def set_auth_mode(session: Session, mode: str) -> str:
    """Persist the auth mode; unknown modes leave the stored value untouched."""
    if mode not in AUTH_MODES:
        raise InvalidArgument("invalid mode")
    row = session.get(AppSetting, AUTH_MODE_KEY)
    if row:
        row.value = mode
    else:
        row = AppSetting(key=AUTH_MODE_KEY, value=mode)
    session.add(row)
    try:
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Failed to store auth mode")
        raise StorageError()
    return mode


class AuthModeRequest(BaseModel):
    mode: str = ""


class AuthModeResponse(BaseModel):
    mode: str


class AuthModeUpdateResponse(AuthModeResponse):
    ok: bool = True


@router.get("/auth-mode", response_model=AuthModeResponse)
async def read_auth_mode(
    session: Session = Depends(get_session),
    _admin: User = Depends(get_admin_user),
):
    return AuthModeResponse(mode=get_auth_mode(session))


@router.post("/auth-mode", response_model=AuthModeUpdateResponse)
async def update_auth_mode(
    body: AuthModeRequest,
    session: Session = Depends(get_session),
    admin: User = Depends(get_admin_user),
):
    mode = set_auth_mode(session, body.mode)
    logger.info(f"Admin {admin.username} set auth mode to {mode}")
    return AuthModeUpdateResponse(mode=mode)
