"""
Task repository for the Next Actions board.

Handles:
- Task CRUD scoped to the owning user
- Ordered listing per group (ascending `order`, ties broken by id)
"""

import logging
from typing import Optional, List, Dict, Any
from datetime import datetime

from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError

from ..connection import get_database
from ..models import TaskDB
from ..exceptions import DatabaseConstraintError, DatabaseOperationError

logger = logging.getLogger(__name__)


class TaskRepository:
    """Repository for task operations."""

    def __init__(self):
        self.db = get_database()

    # ==================== TASK CRUD ====================

    async def create(self, user_id: int, task_data: Dict[str, Any]) -> TaskDB:
        """Create a new task."""
        async with self.db.session() as session:
            try:
                task = TaskDB(
                    title=task_data.get("title"),
                    description=task_data.get("description") or "",
                    completed=task_data.get("completed", False),
                    group_id=task_data.get("group_id"),
                    order=task_data.get("order", 0),
                    due_date=task_data.get("due_date"),
                    priority=task_data.get("priority") or "medium",
                    user_id=user_id,
                )
                session.add(task)
                await session.flush()
                await session.refresh(task)

                logger.info(f"Created task {task.id} in group {task.group_id}")
                return task

            except IntegrityError as e:
                logger.error(f"Constraint violation creating task: {e}")
                raise DatabaseConstraintError(
                    f"Cannot create task {task_data.get('title')}: constraint violation"
                )

            except Exception as e:
                logger.error(f"CRITICAL: Task creation failed: {e}", exc_info=True)
                raise DatabaseOperationError(f"Failed to create task: {e}")

    async def get(self, user_id: int, task_id: int) -> Optional[TaskDB]:
        """Get a task by id if it belongs to the user."""
        async with self.db.session() as session:
            result = await session.execute(
                select(TaskDB).where(TaskDB.id == task_id, TaskDB.user_id == user_id)
            )
            return result.scalar_one_or_none()

    async def update(
        self,
        user_id: int,
        task_id: int,
        updates: Dict[str, Any]
    ) -> Optional[TaskDB]:
        """Update a task. Returns None when the task is missing or not owned."""
        async with self.db.session() as session:
            try:
                updates = dict(updates)
                updates["updated_at"] = datetime.now()

                result = await session.execute(
                    update(TaskDB)
                    .where(TaskDB.id == task_id, TaskDB.user_id == user_id)
                    .values(**updates)
                )
                if not result.rowcount:
                    return None

                result = await session.execute(
                    select(TaskDB).where(TaskDB.id == task_id)
                )
                return result.scalar_one_or_none()

            except IntegrityError as e:
                logger.error(f"Constraint violation updating task {task_id}: {e}")
                raise DatabaseConstraintError(f"Cannot update task {task_id}: constraint violation")

            except Exception as e:
                logger.error(f"CRITICAL: Task update failed for {task_id}: {e}", exc_info=True)
                raise DatabaseOperationError(f"Failed to update task {task_id}: {e}")

    async def delete(self, user_id: int, task_id: int) -> bool:
        """Delete a task. Returns False when the task is missing or not owned."""
        async with self.db.session() as session:
            try:
                result = await session.execute(
                    delete(TaskDB).where(TaskDB.id == task_id, TaskDB.user_id == user_id)
                )
                deleted = bool(result.rowcount)
                if deleted:
                    logger.info(f"Deleted task {task_id}")
                return deleted

            except Exception as e:
                logger.error(f"CRITICAL: Task deletion failed for {task_id}: {e}", exc_info=True)
                raise DatabaseOperationError(f"Failed to delete task {task_id}: {e}")

    # ==================== QUERY METHODS ====================

    async def list_for_user(self, user_id: int) -> List[TaskDB]:
        """All of a user's tasks, grouped and in board order."""
        async with self.db.session() as session:
            result = await session.execute(
                select(TaskDB)
                .where(TaskDB.user_id == user_id)
                .order_by(TaskDB.group_id.asc(), TaskDB.order.asc(), TaskDB.id.asc())
            )
            return list(result.scalars().all())

    async def list_for_group(self, user_id: int, group_id: int) -> List[TaskDB]:
        """Tasks of one group in ascending order."""
        async with self.db.session() as session:
            result = await session.execute(
                select(TaskDB)
                .where(TaskDB.group_id == group_id, TaskDB.user_id == user_id)
                .order_by(TaskDB.order.asc(), TaskDB.id.asc())
            )
            return list(result.scalars().all())


# Singleton
_task_repository: Optional[TaskRepository] = None


def get_task_repository() -> TaskRepository:
    """Get the task repository singleton."""
    global _task_repository
    if _task_repository is None:
        _task_repository = TaskRepository()
    return _task_repository
