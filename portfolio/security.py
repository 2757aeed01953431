"""
Password hashing and signed access tokens for the admin account.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import jwt
from passlib.context import CryptContext

from portfolio.config import Settings
from portfolio.db import DbClient, UserRecord

# pbkdf2_sha256 avoids the native bcrypt dependency.
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

_dummy_hash: Optional[str] = None


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(plain, hashed)
    except (TypeError, ValueError):
        # Unknown or corrupt hash format.
        return False


def _get_dummy_hash() -> str:
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = hash_password("dummy-password-for-timing")
    return _dummy_hash


def authenticate(db: DbClient, username: str, password: str) -> Optional[UserRecord]:
    """
    Return the user when the password matches. Unknown usernames still pay
    for one hash verification so both failure paths take the same time.
    """
    user = db.get_user(username)
    if user is None:
        verify_password(password, _get_dummy_hash())
        return None
    if not verify_password(password, user.password):
        return None
    return user


def create_access_token(
    username: str, settings: Settings, expires_delta: timedelta | None = None
) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(hours=settings.access_token_expire_hours)
    )
    to_encode = {"username": username, "exp": expire}
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Settings) -> Any:
    """Raises jose.JWTError on a bad signature, malformed token or expiry."""
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
