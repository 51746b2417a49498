"""
Drag-and-drop reorder planning for the Next Actions board.

Given a snapshot of the board (groups and tasks with their `order` values)
and a single move event, compute the order updates that realise the move.
Planning is pure: nothing here touches the database. The caller applies the
resulting updates one by one.

Containers:
- group moves happen inside the board container, BOARD_CONTAINER;
- task moves happen between task groups, identified by group id.

Renumbering rules:
- group move: every group gets its new positional index (0..n-1);
- task move within a group: every task of that group is renumbered;
- task move across groups: the moved task takes the destination index and
  the destination group id, the source group is renumbered densely and the
  destination group's other tasks get their new positional index.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Union

logger = logging.getLogger(__name__)

BOARD_CONTAINER = "groups"

ContainerId = Union[int, str]


class InvalidMoveError(ValueError):
    """Move event refers to a missing container or an out-of-range index."""
    pass


class ItemType(str, Enum):
    """What is being dragged."""
    GROUP = "GROUP"
    TASK = "TASK"


@dataclass(frozen=True)
class MoveEvent:
    """A single drag-and-drop result."""
    item_type: ItemType
    source_container_id: ContainerId
    source_index: int
    dest_container_id: ContainerId
    dest_index: int


@dataclass(frozen=True)
class GroupSnapshot:
    id: int
    order: int


@dataclass(frozen=True)
class TaskSnapshot:
    id: int
    group_id: Optional[int]
    order: int


@dataclass(frozen=True)
class OrderUpdate:
    """New order for one row; group_id is set only when the row changes group."""
    id: int
    order: int
    group_id: Optional[int] = None

    def to_dict(self) -> Dict[str, int]:
        data = {"id": self.id, "order": self.order}
        if self.group_id is not None:
            data["groupId"] = self.group_id
        return data


@dataclass
class MovePlan:
    """Ordered updates produced for one move."""
    item_type: ItemType
    updates: List[OrderUpdate] = field(default_factory=list)

    @property
    def is_noop(self) -> bool:
        return not self.updates

    def to_dict(self) -> Dict:
        return {
            "itemType": self.item_type.value,
            "updates": [u.to_dict() for u in self.updates],
        }


# ==================== SNAPSHOT HELPERS ====================

def sort_groups(groups: Iterable[GroupSnapshot]) -> List[GroupSnapshot]:
    """Groups in board order; ties broken by id."""
    return sorted(groups, key=lambda g: (g.order, g.id))


def tasks_by_group(tasks: Iterable[TaskSnapshot]) -> Dict[int, List[TaskSnapshot]]:
    """Partition tasks by group, each list in ascending order (ties by id)."""
    partitioned: Dict[int, List[TaskSnapshot]] = defaultdict(list)
    for task in tasks:
        if task.group_id is None:
            continue
        partitioned[task.group_id].append(task)
    return {
        group_id: sorted(items, key=lambda t: (t.order, t.id))
        for group_id, items in partitioned.items()
    }


def _group_key(container_id: ContainerId) -> int:
    # Droppable ids arrive as strings from the client
    try:
        return int(container_id)
    except (TypeError, ValueError):
        raise InvalidMoveError(f"Invalid task group reference: {container_id!r}")


def _check_index(index: int, upper: int, what: str) -> None:
    """Reject indices outside 0..upper (inclusive). No clamping."""
    if not isinstance(index, int) or isinstance(index, bool) or index < 0 or index > upper:
        raise InvalidMoveError(f"{what} index {index!r} out of range 0..{upper}")


def _reinsert(items: Sequence, source_index: int, dest_index: int) -> list:
    reordered = list(items)
    moved = reordered.pop(source_index)
    reordered.insert(dest_index, moved)
    return reordered


# ==================== PLANNING ====================

def plan_move(
    move: MoveEvent,
    groups: Iterable[GroupSnapshot],
    tasks: Iterable[TaskSnapshot],
) -> MovePlan:
    """
    Compute the order updates for a move.

    A move that leaves an item where it was is a no-op and is never rejected.
    Otherwise InvalidMoveError is raised before producing any update when a
    container does not exist or an index is out of bounds.
    """
    item_type = ItemType(move.item_type)
    if item_type == ItemType.GROUP:
        return _plan_group_move(move, sort_groups(groups))
    return _plan_task_move(move, {g.id for g in groups}, tasks_by_group(tasks))


def _plan_group_move(move: MoveEvent, groups: List[GroupSnapshot]) -> MovePlan:
    for container_id in (move.source_container_id, move.dest_container_id):
        if container_id != BOARD_CONTAINER:
            raise InvalidMoveError(f"Unknown group container: {container_id!r}")

    plan = MovePlan(item_type=ItemType.GROUP)
    if move.source_index == move.dest_index:
        return plan

    if not groups:
        raise InvalidMoveError("Board has no groups to move")
    _check_index(move.source_index, len(groups) - 1, "Source")
    _check_index(move.dest_index, len(groups) - 1, "Destination")

    reordered = _reinsert(groups, move.source_index, move.dest_index)
    plan.updates = [OrderUpdate(id=g.id, order=index) for index, g in enumerate(reordered)]
    return plan


def _plan_task_move(
    move: MoveEvent,
    group_ids: set,
    tasks: Dict[int, List[TaskSnapshot]],
) -> MovePlan:
    source_group = _group_key(move.source_container_id)
    dest_group = _group_key(move.dest_container_id)

    if dest_group not in group_ids:
        raise InvalidMoveError(f"Destination group {dest_group} does not exist")
    if source_group not in group_ids:
        raise InvalidMoveError(f"Source group {source_group} does not exist")

    plan = MovePlan(item_type=ItemType.TASK)
    if source_group == dest_group and move.source_index == move.dest_index:
        return plan

    source_tasks = tasks.get(source_group, [])
    if not source_tasks:
        raise InvalidMoveError(f"Source group {source_group} has no tasks to move")
    _check_index(move.source_index, len(source_tasks) - 1, "Source")

    if source_group == dest_group:
        _check_index(move.dest_index, len(source_tasks) - 1, "Destination")
        reordered = _reinsert(source_tasks, move.source_index, move.dest_index)
        plan.updates = [OrderUpdate(id=t.id, order=index) for index, t in enumerate(reordered)]
        return plan

    dest_tasks = tasks.get(dest_group, [])
    _check_index(move.dest_index, len(dest_tasks), "Destination")

    moved = source_tasks[move.source_index]
    remaining = [t for t in source_tasks if t.id != moved.id]
    new_dest = list(dest_tasks)
    new_dest.insert(move.dest_index, replace(moved, group_id=dest_group))

    plan.updates.append(OrderUpdate(id=moved.id, order=move.dest_index, group_id=dest_group))
    plan.updates.extend(OrderUpdate(id=t.id, order=index) for index, t in enumerate(remaining))
    # Whole destination group is renumbered, including tasks before the insertion point
    plan.updates.extend(
        OrderUpdate(id=t.id, order=index)
        for index, t in enumerate(new_dest)
        if t.id != moved.id
    )

    logger.debug(
        f"Task {moved.id} moved from group {source_group} to {dest_group} at {move.dest_index}"
    )
    return plan


def apply_plan(
    plan: MovePlan,
    groups: Iterable[GroupSnapshot],
    tasks: Iterable[TaskSnapshot],
):
    """Return (groups, tasks) snapshots with the plan's updates applied."""
    by_id = {u.id: u for u in plan.updates}
    if plan.item_type == ItemType.GROUP:
        new_groups = [
            replace(g, order=by_id[g.id].order) if g.id in by_id else g
            for g in groups
        ]
        return new_groups, list(tasks)

    new_tasks = []
    for task in tasks:
        update = by_id.get(task.id)
        if update is None:
            new_tasks.append(task)
            continue
        group_id = update.group_id if update.group_id is not None else task.group_id
        new_tasks.append(replace(task, order=update.order, group_id=group_id))
    return list(groups), new_tasks
