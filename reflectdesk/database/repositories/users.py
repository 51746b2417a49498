"""User repository for local accounts."""

import logging
from typing import Optional, Dict, Any
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from ..connection import get_database
from ..models import UserDB
from ..exceptions import DatabaseConstraintError, DatabaseOperationError, EntityNotFoundError

logger = logging.getLogger(__name__)


class UserRepository:
    """Repository for user operations."""

    def __init__(self):
        self.db = get_database()

    async def create(self, user_data: Dict[str, Any]) -> UserDB:
        """Create a user. Username and email must be unique."""
        async with self.db.session() as session:
            try:
                user = UserDB(
                    username=user_data.get("username"),
                    email=user_data.get("email"),
                    password_hash=user_data.get("password_hash"),
                    display_name=user_data.get("display_name") or user_data.get("username"),
                    photo_url=user_data.get("photo_url"),
                    provider=user_data.get("provider") or "local",
                    provider_id=user_data.get("provider_id"),
                )
                session.add(user)
                await session.flush()
                await session.refresh(user)

                logger.info(f"Created user {user.username} ({user.id})")
                return user

            except IntegrityError as e:
                logger.error(f"Constraint violation creating user: {e}")
                raise DatabaseConstraintError(
                    f"Cannot create user {user_data.get('username')}: duplicate username or email"
                )

            except Exception as e:
                logger.error(f"CRITICAL: User creation failed: {e}", exc_info=True)
                raise DatabaseOperationError(f"Failed to create user: {e}")

    async def get_by_id(self, user_id: int) -> Optional[UserDB]:
        async with self.db.session() as session:
            result = await session.execute(select(UserDB).where(UserDB.id == user_id))
            return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Optional[UserDB]:
        async with self.db.session() as session:
            result = await session.execute(select(UserDB).where(UserDB.username == username))
            return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[UserDB]:
        async with self.db.session() as session:
            result = await session.execute(select(UserDB).where(UserDB.email == email))
            return result.scalar_one_or_none()

    async def update(self, user_id: int, updates: Dict[str, Any]) -> UserDB:
        """Update profile fields of a user."""
        async with self.db.session() as session:
            updates = dict(updates)
            updates["updated_at"] = datetime.now()

            await session.execute(
                update(UserDB).where(UserDB.id == user_id).values(**updates)
            )
            result = await session.execute(select(UserDB).where(UserDB.id == user_id))
            user = result.scalar_one_or_none()
            if not user:
                raise EntityNotFoundError("User", user_id)
            return user


# Singleton
_user_repository: Optional[UserRepository] = None


def get_user_repository() -> UserRepository:
    """Get the user repository singleton."""
    global _user_repository
    if _user_repository is None:
        _user_repository = UserRepository()
    return _user_repository
