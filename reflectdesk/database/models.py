"""
SQLAlchemy models for the ReflectDesk database.

Schema includes:
- Users (local accounts)
- Documents filed by category
- Task groups (board columns) and their ordered tasks
- Work sessions
- Reviews (self-reviews and session reflections)
"""

from datetime import datetime
from typing import Optional, List, Dict, Any
from sqlalchemy import (
    String,
    Text,
    Integer,
    Boolean,
    DateTime,
    ForeignKey,
    JSON,
    Index,
)
from sqlalchemy.orm import DeclarativeBase, relationship, Mapped, mapped_column
from sqlalchemy.sql import func
import enum


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


# ==================== ENUMS ====================

class TaskPriorityEnum(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ReviewTypeEnum(str, enum.Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    EXPERIENTIAL = "experiential"
    SESSION = "session"


# ==================== USERS ====================

class UserDB(Base):
    """Application user. Password is null for accounts created by an identity provider."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    display_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    photo_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    provider: Mapped[str] = mapped_column(String(50), default="local")
    provider_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())

    def to_dict(self) -> Dict[str, Any]:
        # Never exposes password_hash
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "displayName": self.display_name,
            "photoURL": self.photo_url,
            "provider": self.provider,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


# ==================== DOCUMENTS ====================

class DocumentDB(Base):
    """Rich-text document; content is the editor's JSON tree."""
    __tablename__ = "documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    content: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    category: Mapped[str] = mapped_column(String(255), nullable=False, default="default")
    user_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("idx_documents_user_category", "user_id", "category"),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content if self.content is not None else {},
            "category": self.category,
            "userId": self.user_id,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


# ==================== TASK BOARD ====================

class TaskGroupDB(Base):
    """A board column holding an ordered list of tasks."""
    __tablename__ = "task_groups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    color: Mapped[Optional[str]] = mapped_column(String(20), default="#2563EB")
    user_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True
    )
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())

    tasks: Mapped[List["TaskDB"]] = relationship(
        "TaskDB", back_populates="group", cascade="all, delete-orphan", passive_deletes=True
    )

    __table_args__ = (
        Index("idx_task_groups_user_order", "user_id", "order"),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "color": self.color,
            "userId": self.user_id,
            "order": self.order,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


class TaskDB(Base):
    """A task inside a group; `order` is its position key within the group."""
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    description: Mapped[Optional[str]] = mapped_column(Text, default="")
    group_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("task_groups.id", ondelete="CASCADE"), nullable=True
    )
    user_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True
    )
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    priority: Mapped[str] = mapped_column(String(20), default=TaskPriorityEnum.MEDIUM.value)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())

    group: Mapped[Optional["TaskGroupDB"]] = relationship("TaskGroupDB", back_populates="tasks")

    __table_args__ = (
        Index("idx_tasks_user", "user_id"),
        Index("idx_tasks_group_order", "group_id", "order"),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description or "",
            "completed": bool(self.completed),
            "groupId": self.group_id,
            "userId": self.user_id,
            "order": self.order,
            "dueDate": _iso(self.due_date),
            "priority": self.priority,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


# ==================== WORK SESSIONS ====================

class WorkSessionDB(Base):
    """A timeboxed planning record, optionally closed out by a session reflection."""
    __tablename__ = "sessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    important_action: Mapped[str] = mapped_column(Text, nullable=False)
    smart_goals: Mapped[str] = mapped_column(Text, nullable=False)
    metastrategic_thinking: Mapped[str] = mapped_column(Text, nullable=False)
    murphyjitsu: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    user_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True
    )
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    started_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("idx_sessions_user_created", "user_id", "created_at"),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "importantAction": self.important_action,
            "smartGoals": self.smart_goals,
            "metastrategicThinking": self.metastrategic_thinking,
            "murphyjitsu": self.murphyjitsu,
            "userId": self.user_id,
            "isCompleted": bool(self.is_completed),
            "startedAt": _iso(self.started_at),
            "completedAt": _iso(self.completed_at),
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


# ==================== REVIEWS ====================

class ReviewDB(Base):
    """
    Stored review. `preview` holds the condensed text written by the review codec.

    session_id is not a foreign key: deleting a session leaves its
    reviews in place.
    """
    __tablename__ = "reviews"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    preview: Mapped[str] = mapped_column(Text, nullable=False, default="")
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    session_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("idx_reviews_user_type", "user_id", "type"),
        Index("idx_reviews_session", "session_id"),
    )


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None
