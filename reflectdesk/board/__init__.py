"""Next Actions board: reorder planning and the board service."""

from .reorder import (
    BOARD_CONTAINER,
    GroupSnapshot,
    InvalidMoveError,
    ItemType,
    MoveEvent,
    MovePlan,
    OrderUpdate,
    TaskSnapshot,
    apply_plan,
    plan_move,
    sort_groups,
    tasks_by_group,
)
from .service import BoardService, get_board_service, next_group_order, next_task_order

__all__ = [
    "BOARD_CONTAINER",
    "GroupSnapshot",
    "InvalidMoveError",
    "ItemType",
    "MoveEvent",
    "MovePlan",
    "OrderUpdate",
    "TaskSnapshot",
    "apply_plan",
    "plan_move",
    "sort_groups",
    "tasks_by_group",
    "BoardService",
    "get_board_service",
    "next_group_order",
    "next_task_order",
]
