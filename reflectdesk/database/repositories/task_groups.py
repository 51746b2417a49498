"""
Task group repository.

Task groups are the columns of the Next Actions board. Every query is scoped
to the owning user; a group owned by someone else is treated as missing.
"""

import logging
from typing import Optional, List, Dict, Any
from datetime import datetime

from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError

from ..connection import get_database
from ..models import TaskGroupDB, TaskDB
from ..exceptions import DatabaseConstraintError, DatabaseOperationError

logger = logging.getLogger(__name__)


class TaskGroupRepository:
    """Repository for task group operations."""

    def __init__(self):
        self.db = get_database()

    async def create(self, user_id: int, data: Dict[str, Any]) -> TaskGroupDB:
        """Create a new task group for a user."""
        async with self.db.session() as session:
            try:
                group = TaskGroupDB(
                    title=data.get("title"),
                    color=data.get("color") or "#2563EB",
                    order=data.get("order", 0),
                    user_id=user_id,
                )
                session.add(group)
                await session.flush()
                await session.refresh(group)

                logger.info(f"Created task group '{group.title}' for user {user_id}")
                return group

            except IntegrityError as e:
                logger.error(f"Constraint violation creating task group: {e}")
                raise DatabaseConstraintError(f"Cannot create task group {data.get('title')}: constraint violation")

            except Exception as e:
                logger.error(f"CRITICAL: Task group creation failed: {e}", exc_info=True)
                raise DatabaseOperationError(f"Failed to create task group: {e}")

    async def get(self, user_id: int, group_id: int) -> Optional[TaskGroupDB]:
        """Get a group by id if it belongs to the user."""
        async with self.db.session() as session:
            result = await session.execute(
                select(TaskGroupDB)
                .where(TaskGroupDB.id == group_id, TaskGroupDB.user_id == user_id)
            )
            return result.scalar_one_or_none()

    async def list_for_user(self, user_id: int) -> List[TaskGroupDB]:
        """All of a user's groups in board order (ties broken by id)."""
        async with self.db.session() as session:
            result = await session.execute(
                select(TaskGroupDB)
                .where(TaskGroupDB.user_id == user_id)
                .order_by(TaskGroupDB.order.asc(), TaskGroupDB.id.asc())
            )
            return list(result.scalars().all())

    async def update(
        self,
        user_id: int,
        group_id: int,
        updates: Dict[str, Any]
    ) -> Optional[TaskGroupDB]:
        """Update a group. Returns None when the group is missing or not owned."""
        async with self.db.session() as session:
            try:
                updates = dict(updates)
                updates["updated_at"] = datetime.now()

                result = await session.execute(
                    update(TaskGroupDB)
                    .where(TaskGroupDB.id == group_id, TaskGroupDB.user_id == user_id)
                    .values(**updates)
                )
                if not result.rowcount:
                    return None

                result = await session.execute(
                    select(TaskGroupDB).where(TaskGroupDB.id == group_id)
                )
                return result.scalar_one_or_none()

            except IntegrityError as e:
                logger.error(f"Constraint violation updating task group {group_id}: {e}")
                raise DatabaseConstraintError(f"Cannot update task group {group_id}: constraint violation")

            except Exception as e:
                logger.error(f"CRITICAL: Task group update failed for {group_id}: {e}", exc_info=True)
                raise DatabaseOperationError(f"Failed to update task group {group_id}: {e}")

    async def delete(self, user_id: int, group_id: int) -> bool:
        """Delete a group together with all of its tasks."""
        async with self.db.session() as session:
            try:
                result = await session.execute(
                    select(TaskGroupDB)
                    .where(TaskGroupDB.id == group_id, TaskGroupDB.user_id == user_id)
                )
                group = result.scalar_one_or_none()
                if not group:
                    return False

                # Explicit so the cascade holds on backends without FK enforcement
                await session.execute(
                    delete(TaskDB).where(TaskDB.group_id == group_id)
                )
                await session.execute(
                    delete(TaskGroupDB).where(TaskGroupDB.id == group_id)
                )

                logger.info(f"Deleted task group {group_id} ('{group.title}') and its tasks")
                return True

            except Exception as e:
                logger.error(f"CRITICAL: Task group deletion failed for {group_id}: {e}", exc_info=True)
                raise DatabaseOperationError(f"Failed to delete task group {group_id}: {e}")


# Singleton
_task_group_repository: Optional[TaskGroupRepository] = None


def get_task_group_repository() -> TaskGroupRepository:
    """Get the task group repository singleton."""
    global _task_group_repository
    if _task_group_repository is None:
        _task_group_repository = TaskGroupRepository()
    return _task_group_repository
