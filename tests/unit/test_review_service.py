"""
Tests for ReviewService on the in-memory store.
"""

import pytest
from unittest.mock import AsyncMock, Mock, patch

from reflectdesk.database.exceptions import EntityNotFoundError, ValidationError
from reflectdesk.reviews.service import ReviewService, get_review_service, normalize_session_id
from reflectdesk.reviews.store import DatabaseReviewStore, InMemoryReviewStore


@pytest.fixture
def session_repo():
    repo = Mock()
    repo.complete = AsyncMock()
    return repo


@pytest.fixture
def service(session_repo):
    return ReviewService(InMemoryReviewStore(), session_repository=session_repo)


@pytest.fixture
def work_session():
    ws = Mock()
    ws.id = 12
    ws.title = "Deep work"
    ws.is_completed = False
    return ws


# ==================== CRUD ====================

@pytest.mark.asyncio
async def test_create_and_get(service):
    review = await service.create_review(1, {"title": "Monday", "preview": "p", "type": "daily"})

    assert review.id == 1
    assert review.created_at is not None
    assert (await service.get_review(1, review.id)).title == "Monday"


@pytest.mark.asyncio
async def test_reviews_are_scoped_per_user(service):
    review = await service.create_review(1, {"title": "Mine", "type": "daily"})

    with pytest.raises(EntityNotFoundError):
        await service.get_review(2, review.id)
    assert await service.list_reviews(2) == []


@pytest.mark.asyncio
async def test_ids_are_not_reused(service):
    first = await service.create_review(1, {"title": "a", "type": "daily"})
    await service.delete_review(1, first.id)
    second = await service.create_review(1, {"title": "b", "type": "daily"})

    assert second.id != first.id


@pytest.mark.asyncio
async def test_list_filters_by_type(service):
    await service.create_review(1, {"title": "d", "type": "daily"})
    await service.create_review(1, {"title": "w", "type": "weekly"})

    weekly = await service.list_reviews(1, "weekly")
    assert [r.title for r in weekly] == ["w"]
    assert len(await service.list_reviews(1)) == 2


@pytest.mark.asyncio
async def test_invalid_type_rejected(service):
    with pytest.raises(ValidationError):
        await service.create_review(1, {"title": "x", "type": "hourly"})


@pytest.mark.asyncio
async def test_session_id_normalised(service):
    review = await service.create_review(1, {"title": "x", "type": "session", "session_id": "7"})
    assert review.session_id == 7


def test_normalize_session_id():
    assert normalize_session_id(None) is None
    assert normalize_session_id("") is None
    assert normalize_session_id("3") == 3
    with pytest.raises(ValidationError):
        normalize_session_id("abc")


@pytest.mark.asyncio
async def test_update_missing_review(service):
    with pytest.raises(EntityNotFoundError):
        await service.update_review(1, 99, {"title": "x"})


@pytest.mark.asyncio
async def test_update_review(service):
    review = await service.create_review(1, {"title": "old", "type": "daily"})
    updated = await service.update_review(1, review.id, {"title": "new"})
    assert updated.title == "new"
    assert updated.type == "daily"


@pytest.mark.asyncio
async def test_delete_missing_review(service):
    with pytest.raises(EntityNotFoundError):
        await service.delete_review(1, 42)


# ==================== SESSION REFLECTIONS ====================

@pytest.mark.asyncio
async def test_save_reflection_creates_review_and_completes_session(
    service, session_repo, work_session, reflection_fields
):
    review = await service.save_session_reflection(1, work_session, reflection_fields)

    assert review.type == "session"
    assert review.session_id == 12
    assert review.title == "[Session#12] Work Session Reflection - Deep work"
    assert service.parse_review(review) == reflection_fields
    session_repo.complete.assert_awaited_once_with(1, 12)


@pytest.mark.asyncio
async def test_save_reflection_updates_given_review(service, work_session, reflection_fields):
    first = await service.save_session_reflection(1, work_session, reflection_fields)
    second = await service.save_session_reflection(
        1, work_session, {**reflection_fields, "extrapolate": "Sleep earlier"}, review_id=first.id
    )

    assert second.id == first.id
    assert len(await service.list_reviews(1)) == 1
    assert service.parse_review(second)["extrapolate"] == "Sleep earlier"


@pytest.mark.asyncio
async def test_save_reflection_without_review_id_always_creates(service, work_session, reflection_fields):
    first = await service.save_session_reflection(1, work_session, reflection_fields)
    second = await service.save_session_reflection(1, work_session, reflection_fields)

    assert second.id != first.id
    assert len(await service.list_reviews(1)) == 2


@pytest.mark.asyncio
async def test_similar_session_titles_keep_separate_reflections(service, reflection_fields):
    plan_v2 = Mock(id=2, title="Plan v2", is_completed=False)
    plan = Mock(id=1, title="Plan", is_completed=False)

    other = await service.save_session_reflection(1, plan_v2, reflection_fields)
    mine = await service.save_session_reflection(1, plan, reflection_fields)

    assert mine.id != other.id
    stored = {r.id: (r.session_id, r.title) for r in await service.list_reviews(1)}
    assert stored[other.id] == (2, "[Session#2] Work Session Reflection - Plan v2")
    assert stored[mine.id] == (1, "[Session#1] Work Session Reflection - Plan")
    assert [r.id for r in await service.reviews_for_session(1, plan)] == [mine.id]


@pytest.mark.asyncio
async def test_save_reflection_rejects_review_of_another_session(service, reflection_fields):
    plan_v2 = Mock(id=2, title="Plan v2", is_completed=False)
    plan = Mock(id=1, title="Plan", is_completed=False)
    other = await service.save_session_reflection(1, plan_v2, reflection_fields)

    with pytest.raises(ValidationError):
        await service.save_session_reflection(1, plan, reflection_fields, review_id=other.id)

    assert (await service.get_review(1, other.id)).session_id == 2


@pytest.mark.asyncio
async def test_completed_session_not_completed_again(
    service, session_repo, work_session, reflection_fields
):
    work_session.is_completed = True
    await service.save_session_reflection(1, work_session, reflection_fields)
    session_repo.complete.assert_not_awaited()


@pytest.mark.asyncio
async def test_reviews_for_session_uses_fallback_chain(service, work_session):
    await service.create_review(1, {"title": "Session Reflection - Deep work", "type": "session"})
    await service.create_review(1, {"title": "Unrelated", "type": "session"})

    matched = await service.reviews_for_session(1, work_session)
    assert [r.title for r in matched] == ["Session Reflection - Deep work"]


@pytest.mark.asyncio
async def test_save_reflection_with_unknown_review_id(service, work_session, reflection_fields):
    with pytest.raises(EntityNotFoundError):
        await service.save_session_reflection(1, work_session, reflection_fields, review_id=404)


def test_parse_review_for_type_without_template(service):
    review = Mock(type="weekly", preview="Anything")
    assert service.parse_review(review) == {}


# ==================== SERVICE FACTORY ====================

def test_get_review_service_uses_configured_store():
    with patch("reflectdesk.reviews.service._review_service", None), \
         patch("reflectdesk.reviews.service.settings") as mock_settings:
        mock_settings.review_store = "memory"
        assert isinstance(get_review_service().store, InMemoryReviewStore)

    with patch("reflectdesk.reviews.service._review_service", None), \
         patch("reflectdesk.reviews.service.settings") as mock_settings:
        mock_settings.review_store = "database"
        assert isinstance(get_review_service().store, DatabaseReviewStore)
