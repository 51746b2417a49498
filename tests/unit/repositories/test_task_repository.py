"""
Unit tests for TaskRepository.

Covers creation defaults, ownership scoping on update/delete and error
translation.
"""

import pytest
from sqlalchemy.exc import IntegrityError

from reflectdesk.database.repositories.tasks import TaskRepository
from reflectdesk.database.models import TaskDB
from reflectdesk.database.exceptions import DatabaseConstraintError, DatabaseOperationError


@pytest.fixture
def task_repository(mock_database):
    """Create TaskRepository with mocked database."""
    db, session = mock_database
    repo = TaskRepository()
    repo.db = db
    return repo, session


# ============================================================
# CREATE TESTS
# ============================================================

@pytest.mark.asyncio
async def test_create_task_defaults(task_repository):
    repo, session = task_repository

    await repo.create(1, {"title": "Write tests", "group_id": 3})

    session.add.assert_called_once()
    session.flush.assert_awaited_once()
    added = session.add.call_args[0][0]
    assert isinstance(added, TaskDB)
    assert added.title == "Write tests"
    assert added.user_id == 1
    assert added.group_id == 3
    assert added.order == 0
    assert added.priority == "medium"
    assert added.completed is False
    assert added.description == ""


@pytest.mark.asyncio
async def test_create_task_integrity_error(task_repository):
    repo, session = task_repository
    session.flush.side_effect = IntegrityError("INSERT", {}, Exception("fk"))

    with pytest.raises(DatabaseConstraintError):
        await repo.create(1, {"title": "Orphan", "group_id": 999})


@pytest.mark.asyncio
async def test_create_task_unexpected_error(task_repository):
    repo, session = task_repository
    session.flush.side_effect = Exception("Database error")

    with pytest.raises(DatabaseOperationError, match="Failed to create task"):
        await repo.create(1, {"title": "x"})


# ============================================================
# READ / UPDATE / DELETE
# ============================================================

@pytest.mark.asyncio
async def test_get_not_owned_returns_none(task_repository, result_factory):
    repo, session = task_repository
    session.execute.return_value = result_factory(scalar=None)

    assert await repo.get(2, 1) is None


@pytest.mark.asyncio
async def test_update_returns_none_when_no_row_matched(task_repository, result_factory):
    repo, session = task_repository
    session.execute.return_value = result_factory(rowcount=0)

    assert await repo.update(2, 1, {"completed": True}) is None
    assert session.execute.await_count == 1


@pytest.mark.asyncio
async def test_update_returns_fresh_row(task_repository, result_factory):
    repo, session = task_repository
    updated = TaskDB(id=1, title="Done", completed=True, user_id=1)
    session.execute.side_effect = [
        result_factory(rowcount=1),
        result_factory(scalar=updated),
    ]

    assert await repo.update(1, 1, {"completed": True}) is updated


@pytest.mark.asyncio
async def test_delete_reports_ownership(task_repository, result_factory):
    repo, session = task_repository

    session.execute.return_value = result_factory(rowcount=1)
    assert await repo.delete(1, 1) is True

    session.execute.return_value = result_factory(rowcount=0)
    assert await repo.delete(2, 1) is False


@pytest.mark.asyncio
async def test_list_for_group(task_repository, result_factory):
    repo, session = task_repository
    rows = [TaskDB(id=1, title="a", group_id=3, order=0), TaskDB(id=2, title="b", group_id=3, order=1)]
    session.execute.return_value = result_factory(scalars=rows)

    assert await repo.list_for_group(1, 3) == rows


def test_task_to_dict_uses_camel_case():
    task = TaskDB(id=1, title="a", group_id=3, user_id=1, order=2, completed=False, priority="low")
    data = task.to_dict()
    assert data["groupId"] == 3
    assert data["order"] == 2
    assert data["dueDate"] is None
    assert data["description"] == ""
