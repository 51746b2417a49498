"""
Unit tests for the review storage backends.
"""

import pytest
from datetime import datetime
from unittest.mock import patch

from reflectdesk.reviews.store import DatabaseReviewStore, InMemoryReviewStore, Review
from reflectdesk.database.models import ReviewDB
from reflectdesk.database.exceptions import DatabaseOperationError


@pytest.fixture
def db_store(mock_database):
    db, session = mock_database
    with patch("reflectdesk.reviews.store.get_database", return_value=db):
        store = DatabaseReviewStore()
    return store, session


def _row(**overrides):
    values = dict(
        id=7, user_id=1, title="Daily", preview="Achievements: x",
        type="daily", session_id=None,
        created_at=datetime(2026, 3, 14, 9, 0), updated_at=datetime(2026, 3, 14, 9, 0),
    )
    values.update(overrides)
    return ReviewDB(**values)


# ==================== DATABASE STORE ====================

@pytest.mark.asyncio
async def test_add_persists_known_columns_only(db_store):
    store, session = db_store

    async def fake_refresh(row):
        row.id = 7
        row.created_at = datetime(2026, 3, 14, 9, 0)

    session.refresh.side_effect = fake_refresh

    review = await store.add(1, {"title": "Daily", "preview": "p", "type": "daily", "bogus": 1})

    added = session.add.call_args[0][0]
    assert isinstance(added, ReviewDB)
    assert not hasattr(added, "bogus")
    assert review.id == 7
    assert review.created_at == datetime(2026, 3, 14, 9, 0)
    session.refresh.assert_awaited_once_with(added)


@pytest.mark.asyncio
async def test_add_failure(db_store):
    store, session = db_store
    session.flush.side_effect = Exception("disk full")

    with pytest.raises(DatabaseOperationError, match="Failed to create review"):
        await store.add(1, {"title": "Daily", "type": "daily"})


@pytest.mark.asyncio
async def test_get_maps_row(db_store, result_factory):
    store, session = db_store
    session.execute.return_value = result_factory(scalar=_row())

    review = await store.get(1, 7)

    assert isinstance(review, Review)
    assert review.to_dict()["createdAt"] == "2026-03-14T09:00:00"


@pytest.mark.asyncio
async def test_get_missing(db_store, result_factory):
    store, session = db_store
    session.execute.return_value = result_factory(scalar=None)

    assert await store.get(1, 7) is None


@pytest.mark.asyncio
async def test_update_not_owned(db_store, result_factory):
    store, session = db_store
    session.execute.return_value = result_factory(rowcount=0)

    assert await store.update(2, 7, {"title": "x"}) is None


@pytest.mark.asyncio
async def test_delete(db_store, result_factory):
    store, session = db_store
    session.execute.return_value = result_factory(rowcount=1)

    assert await store.delete(1, 7) is True


# ==================== IN-MEMORY STORE ====================

@pytest.mark.asyncio
async def test_memory_store_scopes_by_user():
    store = InMemoryReviewStore()
    first = await store.add(1, {"title": "a", "type": "daily"})
    second = await store.add(2, {"title": "b", "type": "daily"})

    assert first.id != second.id
    assert await store.get(2, first.id) is None
    assert [r.id for r in await store.list(1)] == [first.id]


@pytest.mark.asyncio
async def test_memory_store_update_and_delete():
    store = InMemoryReviewStore()
    review = await store.add(1, {"title": "a", "type": "daily"})

    updated = await store.update(1, review.id, {"title": "renamed", "user_id": 99})
    assert updated.title == "renamed"
    assert updated.user_id == 1

    assert await store.delete(2, review.id) is False
    assert await store.delete(1, review.id) is True
    assert await store.list(1) == []
