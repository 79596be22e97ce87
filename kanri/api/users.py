import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, col, select

from kanri.api.deps import get_admin_user
from kanri.database import get_session
from kanri.errors import InvalidArgument, StorageError
from kanri.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

BAN_TYPES = {"normal", "plus", "unban"}


class UserResponse(BaseModel):
    id: int
    username: str
    device_code: str
    role: str
    is_banned: bool
    ban_type: str | None
    created_at: datetime


class UserListResponse(BaseModel):
    users: list[UserResponse]


class BanRequest(BaseModel):
    type: str = ""


@router.get("", response_model=UserListResponse)
async def list_users(
    session: Session = Depends(get_session),
    _admin: User = Depends(get_admin_user),
):
    users = session.exec(
        select(User).order_by(col(User.created_at).desc(), col(User.id).desc())
    ).all()
    return UserListResponse(
        users=[UserResponse.model_validate(u, from_attributes=True) for u in users]
    )


@router.post("/{user_id}/ban")
async def ban_user(
    user_id: int,
    body: BanRequest,
    session: Session = Depends(get_session),
    admin: User = Depends(get_admin_user),
):
    if body.type not in BAN_TYPES:
        raise InvalidArgument("invalid type")

    user = session.get(User, user_id)
    if not user:
        # Unknown ids are a no-op, same as an UPDATE matching no rows.
        return {"ok": True}

    if body.type == "unban":
        user.is_banned = False
        user.ban_type = None
    else:
        user.is_banned = True
        user.ban_type = body.type
    session.add(user)
    try:
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        logger.exception(f"Failed to apply {body.type} to user {user_id}")
        raise StorageError()

    logger.info(f"Admin {admin.username} applied {body.type} to user {user_id}")
    return {"ok": True}
