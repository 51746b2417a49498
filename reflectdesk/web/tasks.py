"""
Task routes.

A task may only reference one of the caller's own groups; anything else is
rejected with 400 "Invalid task group".
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..board.service import next_task_order
from ..database.models import UserDB
from ..database.repositories.task_groups import get_task_group_repository
from ..database.repositories.tasks import get_task_repository
from ..models.api_validation import TaskCreate, TaskUpdate
from ..utils.datetime_utils import to_naive_local
from .security import require_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


async def _check_group(user_id: int, group_id: Optional[int]):
    if group_id is None:
        return
    if not await get_task_group_repository().get(user_id, group_id):
        raise HTTPException(status_code=400, detail="Invalid task group")


@router.get("")
async def list_tasks(user: UserDB = Depends(require_user)):
    try:
        tasks = await get_task_repository().list_for_user(user.id)
        return [t.to_dict() for t in tasks]
    except Exception as e:
        logger.error(f"Error listing tasks: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch tasks")


@router.get("/{task_id}")
async def get_task(task_id: int, user: UserDB = Depends(require_user)):
    try:
        task = await get_task_repository().get(user.id, task_id)
        if not task:
            raise HTTPException(status_code=404, detail="Task not found")
        return task.to_dict()

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching task {task_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch task")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task(payload: TaskCreate, user: UserDB = Depends(require_user)):
    """Create a task; without an explicit order it goes to the end of its group."""
    try:
        await _check_group(user.id, payload.group_id)

        task_repo = get_task_repository()
        data = payload.model_dump()
        data["due_date"] = to_naive_local(payload.due_date)
        if data.get("order") is None:
            siblings = (
                await task_repo.list_for_group(user.id, payload.group_id)
                if payload.group_id is not None else []
            )
            data["order"] = next_task_order(siblings, payload.group_id)

        task = await task_repo.create(user.id, data)
        return task.to_dict()

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error creating task: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create task")


@router.put("/{task_id}")
async def update_task(task_id: int, payload: TaskUpdate, user: UserDB = Depends(require_user)):
    try:
        updates = payload.to_updates()
        if "group_id" in updates:
            await _check_group(user.id, updates["group_id"])
        if "due_date" in updates:
            updates["due_date"] = to_naive_local(updates["due_date"])

        task = await get_task_repository().update(user.id, task_id, updates)
        if not task:
            raise HTTPException(status_code=404, detail="Task not found")
        return task.to_dict()

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating task {task_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update task")


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(task_id: int, user: UserDB = Depends(require_user)):
    try:
        if not await get_task_repository().delete(user.id, task_id):
            raise HTTPException(status_code=404, detail="Task not found")
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting task {task_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete task")
