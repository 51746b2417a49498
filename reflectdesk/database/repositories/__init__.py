"""
Repository classes for database operations.

Each repository handles CRUD for its entity type, scoped to the owning user.
"""

from .users import UserRepository, get_user_repository
from .documents import DocumentRepository, get_document_repository
from .task_groups import TaskGroupRepository, get_task_group_repository
from .tasks import TaskRepository, get_task_repository
from .sessions import WorkSessionRepository, get_work_session_repository

__all__ = [
    "UserRepository",
    "get_user_repository",
    "DocumentRepository",
    "get_document_repository",
    "TaskGroupRepository",
    "get_task_group_repository",
    "TaskRepository",
    "get_task_repository",
    "WorkSessionRepository",
    "get_work_session_repository",
]
