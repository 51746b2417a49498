"""
Board service for the Next Actions board.

Loads a user's groups and tasks, plans drag-and-drop moves with the reorder
engine and writes the resulting order updates back through the repositories.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from ..database.repositories.task_groups import get_task_group_repository
from ..database.repositories.tasks import get_task_repository
from .reorder import (
    GroupSnapshot,
    ItemType,
    MoveEvent,
    MovePlan,
    TaskSnapshot,
    plan_move,
    sort_groups,
    tasks_by_group,
)

logger = logging.getLogger(__name__)


def next_group_order(groups: Iterable[Any]) -> int:
    """Order value that appends a new group at the end of the board."""
    orders = [g.order for g in groups if g.order is not None]
    return max(orders) + 1 if orders else 0


def next_task_order(tasks: Iterable[Any], group_id: Optional[int]) -> int:
    """Order value that appends a new task at the end of a group."""
    orders = [t.order for t in tasks if t.group_id == group_id and t.order is not None]
    return max(orders) + 1 if orders else 0


class BoardService:
    """Reads and reorders the board of one user at a time."""

    def __init__(self, group_repository=None, task_repository=None):
        self.groups = group_repository or get_task_group_repository()
        self.tasks = task_repository or get_task_repository()

    async def get_board(self, user_id: int) -> List[Dict[str, Any]]:
        """Groups in board order, each carrying its ordered tasks."""
        groups = await self.groups.list_for_user(user_id)
        tasks = await self.tasks.list_for_user(user_id)

        rows_by_id = {t.id: t for t in tasks}
        partitioned = tasks_by_group(_task_snapshots(tasks))

        board = []
        for snapshot in sort_groups(_group_snapshots(groups)):
            group = next(g for g in groups if g.id == snapshot.id)
            data = group.to_dict()
            data["tasks"] = [
                rows_by_id[t.id].to_dict() for t in partitioned.get(group.id, [])
            ]
            board.append(data)
        return board

    async def apply_move(self, user_id: int, move: MoveEvent) -> MovePlan:
        """
        Plan a move against the current board and persist it.

        Each update is written separately; a failure part way through leaves
        the earlier updates in place. InvalidMoveError is raised before any
        write happens.
        """
        groups = await self.groups.list_for_user(user_id)
        tasks = await self.tasks.list_for_user(user_id)

        plan = plan_move(move, _group_snapshots(groups), _task_snapshots(tasks))
        if plan.is_noop:
            return plan

        for update in plan.updates:
            if plan.item_type == ItemType.GROUP:
                await self.groups.update(user_id, update.id, {"order": update.order})
                continue

            values: Dict[str, Any] = {"order": update.order}
            if update.group_id is not None:
                values["group_id"] = update.group_id
            await self.tasks.update(user_id, update.id, values)

        logger.info(
            f"Applied {plan.item_type.value} move for user {user_id}: {len(plan.updates)} updates"
        )
        return plan


def _group_snapshots(groups: Iterable[Any]) -> List[GroupSnapshot]:
    return [GroupSnapshot(id=g.id, order=g.order or 0) for g in groups]


def _task_snapshots(tasks: Iterable[Any]) -> List[TaskSnapshot]:
    return [TaskSnapshot(id=t.id, group_id=t.group_id, order=t.order or 0) for t in tasks]


# Singleton
_board_service: Optional[BoardService] = None


def get_board_service() -> BoardService:
    """Get the board service singleton."""
    global _board_service
    if _board_service is None:
        _board_service = BoardService()
    return _board_service
