"""
Authentication for the HTTP API.

Local accounts only. Passwords are hashed with bcrypt over a SHA-256
pre-hash; sessions are signed JWTs carrying the user id as `sub`, sent back
as an http-only cookie and in the response body. A request may authenticate
with a Bearer header, the `X-Auth-Token` header or the cookie.
"""

import hashlib
import logging
import time
from typing import Optional

import bcrypt
from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from config import settings
from ..database.models import UserDB
from ..database.repositories.users import get_user_repository

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


def _pw_prehash(password: str) -> bytes:
    """SHA-256 first so passwords longer than bcrypt's 72 bytes still count in full."""
    return hashlib.sha256(password.encode("utf-8")).digest()


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=12)
    return bcrypt.hashpw(_pw_prehash(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(_pw_prehash(password), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


def create_token(user_id: int) -> str:
    expires = int(time.time()) + settings.jwt_ttl_seconds
    return jwt.encode(
        {"sub": str(user_id), "exp": expires},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )


def decode_token(token: str) -> Optional[int]:
    """User id from a token, or None when it is invalid or expired."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    subject = payload.get("sub")
    if subject is None:
        return None
    try:
        return int(subject)
    except (TypeError, ValueError):
        return None


def set_auth_cookie(response: Response, token: str):
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=settings.jwt_ttl_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.auth_cookie_secure,
        path="/",
    )


def clear_auth_cookie(response: Response):
    response.delete_cookie(key=settings.auth_cookie_name, path="/")


def _unauthorized() -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


async def require_user(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
) -> UserDB:
    """Dependency resolving the authenticated user, 401 otherwise."""
    token = None
    if creds and creds.credentials:
        token = creds.credentials
    elif request.headers.get("x-auth-token"):
        token = request.headers.get("x-auth-token")
    else:
        token = request.cookies.get(settings.auth_cookie_name)

    if not token:
        raise _unauthorized()

    user_id = decode_token(token)
    if user_id is None:
        raise _unauthorized()

    user = await get_user_repository().get_by_id(user_id)
    if not user:
        raise _unauthorized()
    return user
