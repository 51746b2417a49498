"""
Task group routes (the columns of the Next Actions board).
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..board.service import next_group_order
from ..database.models import UserDB
from ..database.repositories.task_groups import get_task_group_repository
from ..database.repositories.tasks import get_task_repository
from ..models.api_validation import TaskGroupCreate, TaskGroupUpdate
from .security import require_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/task-groups", tags=["task-groups"])


@router.get("")
async def list_task_groups(user: UserDB = Depends(require_user)):
    try:
        groups = await get_task_group_repository().list_for_user(user.id)
        return [g.to_dict() for g in groups]
    except Exception as e:
        logger.error(f"Error listing task groups: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch task groups")


@router.get("/{group_id}")
async def get_task_group(group_id: int, user: UserDB = Depends(require_user)):
    try:
        group = await get_task_group_repository().get(user.id, group_id)
        if not group:
            raise HTTPException(status_code=404, detail="Task group not found")
        return group.to_dict()

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching task group {group_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch task group")


@router.get("/{group_id}/tasks")
async def list_group_tasks(group_id: int, user: UserDB = Depends(require_user)):
    """Tasks of one group in board order."""
    try:
        group = await get_task_group_repository().get(user.id, group_id)
        if not group:
            raise HTTPException(status_code=404, detail="Task group not found")

        tasks = await get_task_repository().list_for_group(user.id, group_id)
        return [t.to_dict() for t in tasks]

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error listing tasks of group {group_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch tasks")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_task_group(payload: TaskGroupCreate, user: UserDB = Depends(require_user)):
    """Create a group; without an explicit order it goes to the end of the board."""
    try:
        group_repo = get_task_group_repository()
        data = payload.model_dump()
        if data.get("order") is None:
            data["order"] = next_group_order(await group_repo.list_for_user(user.id))

        group = await group_repo.create(user.id, data)
        return group.to_dict()

    except Exception as e:
        logger.error(f"Error creating task group: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create task group")


@router.put("/{group_id}")
async def update_task_group(
    group_id: int,
    payload: TaskGroupUpdate,
    user: UserDB = Depends(require_user),
):
    try:
        group = await get_task_group_repository().update(user.id, group_id, payload.to_updates())
        if not group:
            raise HTTPException(status_code=404, detail="Task group not found")
        return group.to_dict()

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating task group {group_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update task group")


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task_group(group_id: int, user: UserDB = Depends(require_user)):
    """Delete a group and every task in it."""
    try:
        if not await get_task_group_repository().delete(user.id, group_id):
            raise HTTPException(status_code=404, detail="Task group not found")
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting task group {group_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete task group")
