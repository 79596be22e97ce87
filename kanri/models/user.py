from datetime import UTC, datetime

from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(UTC)


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True)
    password_hash: str
    device_code: str
    role: str = Field(default="user")  # "admin" | "user"
    is_banned: bool = Field(default=False)
    ban_type: str | None = Field(default=None)  # "normal" | "plus"
    created_at: datetime = Field(default_factory=utcnow)
