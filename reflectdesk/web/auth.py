"""
Account routes: register, login, logout and the current user.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from config import settings
from ..database.exceptions import DatabaseConstraintError
from ..database.models import UserDB
from ..database.repositories.users import get_user_repository
from ..middleware.slowapi_limiter import limiter
from ..models.api_validation import LoginRequest, RegisterRequest
from .security import (
    clear_auth_cookie,
    create_token,
    hash_password,
    require_user,
    set_auth_cookie,
    verify_password,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/auth/register", status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.auth_rate_limit)
async def register(request: Request, response: Response, payload: RegisterRequest):
    """Create a local account and sign it in."""
    try:
        user_repo = get_user_repository()

        if await user_repo.get_by_username(payload.username):
            raise HTTPException(status_code=400, detail="Username already exists")
        if await user_repo.get_by_email(payload.email):
            raise HTTPException(status_code=400, detail="Email already exists")

        user = await user_repo.create({
            "username": payload.username,
            "email": payload.email,
            "password_hash": hash_password(payload.password),
            "display_name": payload.display_name,
            "photo_url": payload.photo_url,
            "provider": "local",
        })

        token = create_token(user.id)
        set_auth_cookie(response, token)
        return {"user": user.to_dict(), "token": token}

    except HTTPException:
        raise
    except DatabaseConstraintError:
        raise HTTPException(status_code=400, detail="Username or email already exists")
    except Exception as e:
        logger.error(f"Error registering user: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to register")


@router.post("/auth/login")
@limiter.limit(settings.auth_rate_limit)
async def login(request: Request, response: Response, payload: LoginRequest):
    """Exchange username and password for a session token."""
    try:
        user = await get_user_repository().get_by_username(payload.username)
        if not user or not verify_password(payload.password, user.password_hash):
            raise HTTPException(status_code=401, detail="Invalid username or password")

        token = create_token(user.id)
        set_auth_cookie(response, token)
        logger.info(f"User {user.id} logged in")
        return {"user": user.to_dict(), "token": token}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error logging in: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to log in")


@router.post("/auth/logout")
async def logout(response: Response):
    clear_auth_cookie(response)
    return {"message": "Logged out"}


@router.get("/user")
async def current_user(user: UserDB = Depends(require_user)):
    return user.to_dict()
