"""
Relational storage for ReflectDesk.

Handles:
- Users and their documents
- Task groups and ordered tasks for the Next Actions board
- Work sessions and reviews

PostgreSQL in production, SQLite for local runs and tests.
"""

from .connection import (
    get_database,
    Database,
    init_database,
    close_database,
)
from .models import (
    Base,
    UserDB,
    DocumentDB,
    TaskGroupDB,
    TaskDB,
    WorkSessionDB,
    ReviewDB,
)

__all__ = [
    "get_database",
    "Database",
    "init_database",
    "close_database",
    "Base",
    "UserDB",
    "DocumentDB",
    "TaskGroupDB",
    "TaskDB",
    "WorkSessionDB",
    "ReviewDB",
]
