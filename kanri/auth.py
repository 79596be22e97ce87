import secrets
import string
from functools import lru_cache

import bcrypt

from kanri.config import settings

DEVICE_CODE_LENGTH = 4


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode(), salt).decode()


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password(secrets.token_urlsafe(16))


def verify_password_or_dummy(plain: str, hashed: str | None) -> bool:
    """Check a password, spending one bcrypt round-trip even for unknown users.

    Unknown usernames are compared against a throwaway hash so that both
    failure paths take about the same time.
    """
    if hashed is None:
        verify_password(plain, _dummy_hash())
        return False
    return verify_password(plain, hashed)


def generate_device_code() -> str:
    return "".join(secrets.choice(string.digits) for _ in range(DEVICE_CODE_LENGTH))
