"""Password hashing and JWT creation/verification for authentication."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from farmapp.core.config import settings

USERNAME_MIN_LEN = 3
USERNAME_MAX_LEN = 64
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128
# bcrypt only looks at the first 72 bytes of the password.
BCRYPT_MAX_BYTES = 72


def _password_bytes(plain_password: str) -> bytes:
    return plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """bcrypt hash at the given cost (default BCRYPT_ROUNDS)."""
    salt = bcrypt.gensalt(rounds=rounds if rounds is not None else settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(plain_password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """False for a wrong password and for anything that is not a bcrypt hash."""
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def needs_rehash(hashed: str) -> bool:
    """True when a stored hash ("$2b$<cost>$...") was made with a cost other than BCRYPT_ROUNDS."""
    try:
        cost = int(hashed.split("$")[2])
    except (IndexError, ValueError):
        return True
    return cost != settings.BCRYPT_ROUNDS


def create_access_token(
    sub: str | int,
    role: str,
    username: str | None = None,
    expires_minutes: int | None = None,
) -> str:
    """Create a JWT access token with sub (user id), role, username, iat and exp."""
    now = datetime.now(UTC)
    minutes = expires_minutes if expires_minutes is not None else settings.JWT_EXPIRE_MINUTES
    payload: dict[str, Any] = {
        "sub": str(sub),
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=minutes),
    }
    if username is not None:
        payload["username"] = username
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(
    token: str,
    secret: str | None = None,
    algorithm: str | None = None,
) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (sub, role, username, exp, iat).
    Raises jwt.PyJWTError on invalid, expired, or sub-less tokens.
    """
    if secret is None:
        secret = settings.JWT_SECRET.get_secret_value()
    return jwt.decode(
        token,
        secret,
        algorithms=[algorithm or settings.JWT_ALGORITHM],
        options={"require": ["exp", "sub"]},
    )
