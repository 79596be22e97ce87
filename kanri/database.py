import logging
from collections.abc import Generator

from sqlmodel import Session, SQLModel, create_engine, select

from kanri.auth import hash_password
from kanri.config import settings
from kanri.models.user import User

logger = logging.getLogger(__name__)

engine = create_engine(settings.database_url, echo=False)


def init_db() -> None:
    import kanri.models  # noqa: F401 - register all models with SQLModel metadata

    SQLModel.metadata.create_all(engine)


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


def seed_admin(session: Session) -> bool:
    """Create the configured admin account unless it already exists."""
    existing = session.exec(
        select(User).where(User.username == settings.admin_username)
    ).first()
    if existing:
        logger.info(f"Admin already exists: {settings.admin_username}")
        return False
    admin = User(
        username=settings.admin_username,
        password_hash=hash_password(settings.admin_password),
        device_code=settings.admin_device_code,
        role="admin",
    )
    session.add(admin)
    session.commit()
    logger.info(f"Admin user created: {settings.admin_username}")
    return True
