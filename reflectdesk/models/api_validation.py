"""
Pydantic models for API request validation.

Every request body is validated here before it reaches a repository or
service, so malformed payloads are rejected as a whole. Bodies use camelCase
keys on the wire; models expose snake_case attributes.

Update models are partial: omitted fields are left alone, but an explicit
null is only accepted for columns that may hold NULL.
"""

from datetime import datetime
from typing import Any, Dict, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from ..board.reorder import ItemType


class ApiModel(BaseModel):
    """Base for request bodies: camelCase aliases, snake_case names accepted too."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_updates(self) -> Dict[str, Any]:
        """Only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


def _strip_required(v: str) -> str:
    stripped = v.strip()
    if not stripped:
        raise ValueError("cannot be empty after stripping whitespace")
    return stripped


def _not_null(v: Any) -> Any:
    if v is None:
        raise ValueError("cannot be null")
    return v


# ============================================
# AUTH
# ============================================

class RegisterRequest(ApiModel):
    """New local account."""
    username: str = Field(..., min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=200)
    display_name: Optional[str] = Field(None, max_length=255)
    photo_url: Optional[str] = Field(None, alias="photoURL", max_length=2000)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v):
        return _strip_required(v)


class LoginRequest(ApiModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1, max_length=200)


# ============================================
# DOCUMENTS
# ============================================

class DocumentCreate(ApiModel):
    title: str = Field(..., min_length=1, max_length=500)
    content: Dict[str, Any] = Field(default_factory=dict)
    category: str = Field("default", min_length=1, max_length=255)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _strip_required(v)


class DocumentUpdate(ApiModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    content: Optional[Dict[str, Any]] = None
    category: Optional[str] = Field(None, min_length=1, max_length=255)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _strip_required(_not_null(v))

    @field_validator("content", "category")
    @classmethod
    def validate_not_null(cls, v):
        return _not_null(v)


# ============================================
# TASK BOARD
# ============================================

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class TaskGroupCreate(ApiModel):
    title: str = Field(..., min_length=1, max_length=255)
    color: Optional[str] = Field("#2563EB", pattern=HEX_COLOR)
    order: Optional[int] = Field(None, ge=0)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _strip_required(v)


class TaskGroupUpdate(ApiModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    color: Optional[str] = Field(None, pattern=HEX_COLOR)
    order: Optional[int] = Field(None, ge=0)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _strip_required(_not_null(v))

    @field_validator("order")
    @classmethod
    def validate_not_null(cls, v):
        return _not_null(v)


class TaskCreate(ApiModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = Field("", max_length=10000)
    completed: bool = False
    group_id: Optional[int] = None
    order: Optional[int] = Field(None, ge=0)
    due_date: Optional[datetime] = None
    priority: Literal["low", "medium", "high"] = "medium"

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _strip_required(v)


class TaskUpdate(ApiModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = Field(None, max_length=10000)
    completed: Optional[bool] = None
    group_id: Optional[int] = None
    order: Optional[int] = Field(None, ge=0)
    due_date: Optional[datetime] = None
    priority: Optional[Literal["low", "medium", "high"]] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _strip_required(_not_null(v))

    @field_validator("completed", "order", "priority")
    @classmethod
    def validate_not_null(cls, v):
        return _not_null(v)


class MoveRequest(ApiModel):
    """A drag-and-drop result from the board."""
    item_type: ItemType
    source_container_id: Union[int, str]
    source_index: int
    dest_container_id: Union[int, str]
    dest_index: int


# ============================================
# WORK SESSIONS
# ============================================

class SessionCreate(ApiModel):
    title: str = Field(..., min_length=1, max_length=500)
    important_action: str = Field(..., min_length=1)
    smart_goals: str = Field(..., min_length=1)
    metastrategic_thinking: str = Field(..., min_length=1)
    murphyjitsu: Optional[str] = None
    is_completed: bool = False
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _strip_required(v)


class SessionUpdate(ApiModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    important_action: Optional[str] = None
    smart_goals: Optional[str] = None
    metastrategic_thinking: Optional[str] = None
    murphyjitsu: Optional[str] = None
    is_completed: Optional[bool] = None
    completed_at: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _strip_required(_not_null(v))

    @field_validator("important_action", "smart_goals", "metastrategic_thinking", "is_completed")
    @classmethod
    def validate_not_null(cls, v):
        return _not_null(v)


class SessionReflection(ApiModel):
    """Form fields of a work session reflection."""
    goals_achieved: str = ""
    metastrategic_reflection: str = ""
    extrapolate: str = ""
    review_id: Optional[int] = None

    def fields(self) -> Dict[str, str]:
        return self.model_dump(by_alias=True, exclude={"review_id"})


# ============================================
# REVIEWS
# ============================================

ReviewType = Literal["daily", "weekly", "monthly", "yearly", "experiential", "session"]


class ReviewCreate(ApiModel):
    title: str = Field(..., min_length=1, max_length=500)
    preview: str = Field("", max_length=20000)
    type: ReviewType
    session_id: Optional[int] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _strip_required(v)


class ReviewUpdate(ApiModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    preview: Optional[str] = Field(None, max_length=20000)
    type: Optional[ReviewType] = None
    session_id: Optional[int] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _strip_required(_not_null(v))

    @field_validator("preview", "type")
    @classmethod
    def validate_not_null(cls, v):
        return _not_null(v)
