"""
Work session repository.

A work session is a timeboxed plan (important action, SMART goals,
metastrategic thinking, murphyjitsu) that is later closed out, usually by
saving a session reflection.
"""

import logging
from typing import Optional, List, Dict, Any
from datetime import datetime

from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError

from ..connection import get_database
from ..models import WorkSessionDB
from ..exceptions import DatabaseConstraintError, DatabaseOperationError
from ...utils.datetime_utils import get_local_now

logger = logging.getLogger(__name__)


class WorkSessionRepository:
    """Repository for work session operations."""

    def __init__(self):
        self.db = get_database()

    async def create(self, user_id: int, data: Dict[str, Any]) -> WorkSessionDB:
        """Create a work session. startedAt defaults to now."""
        async with self.db.session() as session:
            try:
                work_session = WorkSessionDB(
                    title=data.get("title"),
                    important_action=data.get("important_action"),
                    smart_goals=data.get("smart_goals"),
                    metastrategic_thinking=data.get("metastrategic_thinking"),
                    murphyjitsu=data.get("murphyjitsu"),
                    is_completed=data.get("is_completed", False),
                    started_at=data.get("started_at") or get_local_now(),
                    completed_at=data.get("completed_at"),
                    user_id=user_id,
                )
                session.add(work_session)
                await session.flush()
                await session.refresh(work_session)

                logger.info(f"Created work session {work_session.id} for user {user_id}")
                return work_session

            except IntegrityError as e:
                logger.error(f"Constraint violation creating work session: {e}")
                raise DatabaseConstraintError("Cannot create work session: constraint violation")

            except Exception as e:
                logger.error(f"CRITICAL: Work session creation failed: {e}", exc_info=True)
                raise DatabaseOperationError(f"Failed to create work session: {e}")

    async def get(self, user_id: int, session_id: int) -> Optional[WorkSessionDB]:
        """Get a work session by id if it belongs to the user."""
        async with self.db.session() as session:
            result = await session.execute(
                select(WorkSessionDB)
                .where(WorkSessionDB.id == session_id, WorkSessionDB.user_id == user_id)
            )
            return result.scalar_one_or_none()

    async def list_for_user(self, user_id: int) -> List[WorkSessionDB]:
        """A user's work sessions, newest first."""
        async with self.db.session() as session:
            result = await session.execute(
                select(WorkSessionDB)
                .where(WorkSessionDB.user_id == user_id)
                .order_by(WorkSessionDB.created_at.desc(), WorkSessionDB.id.desc())
            )
            return list(result.scalars().all())

    async def update(
        self,
        user_id: int,
        session_id: int,
        updates: Dict[str, Any]
    ) -> Optional[WorkSessionDB]:
        """Update a work session. Returns None when missing or not owned."""
        async with self.db.session() as session:
            try:
                updates = dict(updates)
                updates["updated_at"] = datetime.now()

                result = await session.execute(
                    update(WorkSessionDB)
                    .where(WorkSessionDB.id == session_id, WorkSessionDB.user_id == user_id)
                    .values(**updates)
                )
                if not result.rowcount:
                    return None

                result = await session.execute(
                    select(WorkSessionDB).where(WorkSessionDB.id == session_id)
                )
                return result.scalar_one_or_none()

            except Exception as e:
                logger.error(f"CRITICAL: Work session update failed for {session_id}: {e}", exc_info=True)
                raise DatabaseOperationError(f"Failed to update work session {session_id}: {e}")

    async def complete(self, user_id: int, session_id: int) -> Optional[WorkSessionDB]:
        """Mark a work session completed now."""
        return await self.update(
            user_id, session_id, {"is_completed": True, "completed_at": get_local_now()}
        )

    async def delete(self, user_id: int, session_id: int) -> bool:
        """Delete a work session. Its reviews are not touched."""
        async with self.db.session() as session:
            try:
                result = await session.execute(
                    delete(WorkSessionDB)
                    .where(WorkSessionDB.id == session_id, WorkSessionDB.user_id == user_id)
                )
                deleted = bool(result.rowcount)
                if deleted:
                    logger.info(f"Deleted work session {session_id}")
                return deleted

            except Exception as e:
                logger.error(f"CRITICAL: Work session deletion failed for {session_id}: {e}", exc_info=True)
                raise DatabaseOperationError(f"Failed to delete work session {session_id}: {e}")


# Singleton
_work_session_repository: Optional[WorkSessionRepository] = None


def get_work_session_repository() -> WorkSessionRepository:
    """Get the work session repository singleton."""
    global _work_session_repository
    if _work_session_repository is None:
        _work_session_repository = WorkSessionRepository()
    return _work_session_repository
