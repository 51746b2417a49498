"""
Tests for API request validation models.
"""

import pytest
from datetime import datetime
from pydantic import ValidationError

from reflectdesk.board.reorder import ItemType
from reflectdesk.models.api_validation import (
    DocumentUpdate,
    MoveRequest,
    RegisterRequest,
    ReviewCreate,
    ReviewUpdate,
    SessionCreate,
    SessionReflection,
    SessionUpdate,
    TaskCreate,
    TaskGroupCreate,
    TaskGroupUpdate,
    TaskUpdate,
)


class TestTaskModels:

    def test_camel_case_payload(self):
        task = TaskCreate(**{
            "title": "Write tests",
            "groupId": 4,
            "dueDate": "2026-03-01T10:00:00Z",
            "priority": "high",
        })
        assert task.group_id == 4
        assert isinstance(task.due_date, datetime)
        assert task.priority == "high"
        assert task.completed is False
        assert task.order is None

    def test_title_stripped(self):
        assert TaskCreate(title="  Write tests  ").title == "Write tests"

    def test_blank_title_rejected(self):
        with pytest.raises(ValidationError):
            TaskCreate(title="   ")

    def test_unknown_priority_rejected(self):
        with pytest.raises(ValidationError):
            TaskCreate(title="x", priority="urgent")

    def test_negative_order_rejected(self):
        with pytest.raises(ValidationError):
            TaskCreate(title="x", order=-1)

    def test_update_keeps_only_sent_fields(self):
        update = TaskUpdate(**{"completed": True, "groupId": None})
        assert update.to_updates() == {"completed": True, "group_id": None}


class TestTaskGroupModels:

    def test_defaults(self):
        group = TaskGroupCreate(title="Today")
        assert group.color == "#2563EB"
        assert group.order is None

    def test_color_must_be_hex(self):
        with pytest.raises(ValidationError):
            TaskGroupCreate(title="Today", color="blue")


class TestMoveRequest:

    def test_group_move(self):
        move = MoveRequest(**{
            "itemType": "GROUP",
            "sourceContainerId": "groups",
            "sourceIndex": 0,
            "destContainerId": "groups",
            "destIndex": 2,
        })
        assert move.item_type == ItemType.GROUP
        assert move.dest_index == 2

    def test_unknown_item_type_rejected(self):
        with pytest.raises(ValidationError):
            MoveRequest(**{
                "itemType": "CARD",
                "sourceContainerId": 1,
                "sourceIndex": 0,
                "destContainerId": 1,
                "destIndex": 0,
            })


class TestSessionModels:

    def test_session_create_requires_plan_fields(self, sample_session_data):
        data = dict(sample_session_data)
        del data["smartGoals"]
        with pytest.raises(ValidationError):
            SessionCreate(**data)

    def test_session_create(self, sample_session_data):
        session = SessionCreate(**sample_session_data)
        assert session.important_action == "Draft the summary section"
        assert session.is_completed is False
        assert session.started_at is None

    def test_reflection_fields_use_codec_keys(self, reflection_fields):
        reflection = SessionReflection(**reflection_fields, reviewId=3)
        assert reflection.fields() == reflection_fields
        assert reflection.review_id == 3


class TestOtherModels:

    def test_register_requires_valid_email(self):
        with pytest.raises(ValidationError):
            RegisterRequest(username="alice", email="not-an-email", password="secret1")

    def test_register_photo_url_alias(self):
        request = RegisterRequest(**{
            "username": "alice",
            "email": "alice@example.com",
            "password": "secret1",
            "photoURL": "https://example.com/a.png",
        })
        assert request.photo_url == "https://example.com/a.png"

    def test_review_type_checked(self):
        with pytest.raises(ValidationError):
            ReviewCreate(title="x", type="hourly")

    def test_review_session_id_alias(self):
        review = ReviewCreate(**{"title": "x", "type": "session", "sessionId": 9})
        assert review.session_id == 9

    def test_document_update_partial(self):
        assert DocumentUpdate(title="New").to_updates() == {"title": "New"}


class TestNullUpdates:
    """Explicit null is only accepted where the column may hold NULL."""

    @pytest.mark.parametrize("field", ["title", "completed", "order", "priority"])
    def test_task_update_rejects_null(self, field):
        with pytest.raises(ValidationError):
            TaskUpdate(**{field: None})

    def test_task_update_allows_clearing_nullable_fields(self):
        update = TaskUpdate(**{"description": None, "dueDate": None, "groupId": None})
        assert update.to_updates() == {"description": None, "due_date": None, "group_id": None}

    def test_group_update_rejects_null_order(self):
        with pytest.raises(ValidationError):
            TaskGroupUpdate(order=None)
        assert TaskGroupUpdate(color=None).to_updates() == {"color": None}

    @pytest.mark.parametrize("field", ["smartGoals", "importantAction", "isCompleted"])
    def test_session_update_rejects_null(self, field):
        with pytest.raises(ValidationError):
            SessionUpdate(**{field: None})

    def test_session_update_allows_clearing_murphyjitsu(self):
        assert SessionUpdate(murphyjitsu=None).to_updates() == {"murphyjitsu": None}

    def test_review_update_rejects_null_preview(self):
        with pytest.raises(ValidationError):
            ReviewUpdate(preview=None)
        assert ReviewUpdate(sessionId=None).to_updates() == {"session_id": None}

    def test_document_update_rejects_null_content(self):
        with pytest.raises(ValidationError):
            DocumentUpdate(content=None)


class TestUpdateTitles:

    def test_update_title_stripped(self):
        assert TaskUpdate(title="  Renamed  ").title == "Renamed"
        assert SessionUpdate(title=" Plan ").title == "Plan"

    @pytest.mark.parametrize("model", [TaskUpdate, TaskGroupUpdate, SessionUpdate, ReviewUpdate, DocumentUpdate])
    def test_blank_update_title_rejected(self, model):
        with pytest.raises(ValidationError):
            model(title="   ")
