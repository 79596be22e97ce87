import logging

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from kanri.api.deps import get_current_user, get_session_store, get_session_token
from kanri.auth import generate_device_code, hash_password, verify_password_or_dummy
from kanri.config import settings
from kanri.database import get_session
from kanri.errors import DuplicateUsername, InvalidCredentials, MissingField, StorageError
from kanri.models.user import User
from kanri.sessions import SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


class CredentialsRequest(BaseModel):
    username: str = ""
    password: str = ""


class RegisterResponse(BaseModel):
    ok: bool = True
    id: int
    device_code: str


class OkResponse(BaseModel):
    ok: bool = True


class MeUser(BaseModel):
    id: int
    username: str
    role: str
    device_code: str


class MeResponse(BaseModel):
    loggedIn: bool
    user: MeUser | None = None


def _start_session(
    response: Response,
    store: SessionStore,
    user_id: int,
    previous_token: str | None,
) -> None:
    store.destroy(previous_token)
    token = store.create(user_id)
    response.set_cookie(
        key=settings.session_cookie,
        value=token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )


@router.post("/register", response_model=RegisterResponse)
async def register(
    body: CredentialsRequest,
    response: Response,
    session: Session = Depends(get_session),
    store: SessionStore = Depends(get_session_store),
    token: str | None = Depends(get_session_token),
):
    if not body.username or not body.password:
        raise MissingField()

    user = User(
        username=body.username,
        password_hash=hash_password(body.password),
        device_code=generate_device_code(),
    )
    session.add(user)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise DuplicateUsername()
    except SQLAlchemyError:
        session.rollback()
        logger.exception(f"Failed to register {body.username!r}")
        raise StorageError()
    session.refresh(user)

    logger.info(f"Registered user {user.id} ({user.username})")
    _start_session(response, store, user.id, token)
    return RegisterResponse(id=user.id, device_code=user.device_code)


@router.post("/login", response_model=OkResponse)
async def login(
    body: CredentialsRequest,
    response: Response,
    session: Session = Depends(get_session),
    store: SessionStore = Depends(get_session_store),
    token: str | None = Depends(get_session_token),
):
    if not body.username or not body.password:
        raise MissingField()

    user = session.exec(select(User).where(User.username == body.username)).first()
    hashed = user.password_hash if user else None
    if not verify_password_or_dummy(body.password, hashed):
        logger.info(f"Failed login for {body.username!r}")
        raise InvalidCredentials()

    _start_session(response, store, user.id, token)
    return OkResponse()


@router.post("/logout", response_model=OkResponse)
async def logout(
    response: Response,
    store: SessionStore = Depends(get_session_store),
    token: str | None = Depends(get_session_token),
):
    store.destroy(token)
    response.delete_cookie(settings.session_cookie)
    return OkResponse()


@router.get("/me", response_model=MeResponse, response_model_exclude_none=True)
async def me(user: User | None = Depends(get_current_user)):
    if user is None:
        return MeResponse(loggedIn=False)
    return MeResponse(
        loggedIn=True,
        user=MeUser(
            id=user.id,
            username=user.username,
            role=user.role,
            device_code=user.device_code,
        ),
    )
