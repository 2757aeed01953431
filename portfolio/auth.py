"""
Bearer-token guard for the admin endpoints.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from portfolio.config import Settings
from portfolio.dependencies import get_app_settings
from portfolio.security import decode_token

# auto_error=False so a missing token can be told apart from a bad one.
bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AdminIdentity:
    username: str


def require_admin(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    settings: Settings = Depends(get_app_settings),
) -> AdminIdentity:
    """
    401 when no bearer token is sent, 403 when the token does not verify or
    has expired.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = decode_token(credentials.credentials, settings)
    except JWTError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")

    username = payload.get("username")
    if not isinstance(username, str) or not username:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")

    identity = AdminIdentity(username=username)
    request.state.user = identity
    return identity
