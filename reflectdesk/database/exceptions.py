"""
Errors raised below the web layer.

Repositories and the review service raise these; routes decide which HTTP
status each one becomes. StorageError covers failures of the database itself,
the rest are outcomes a caller is expected to handle.
"""

from typing import Any


class ReflectDeskError(Exception):
    """Base for every error ReflectDesk raises on purpose."""


class StorageError(ReflectDeskError):
    """The database could not complete a request."""


class DatabaseConnectionError(StorageError):
    """Engine not initialised, or the database is unreachable."""


class DatabaseConstraintError(StorageError):
    """A write hit a unique or foreign key constraint (taken username, unknown group)."""


class DatabaseOperationError(StorageError):
    """Any other failed query; the driver error is in the message."""


class EntityNotFoundError(ReflectDeskError):
    """
    A row is missing or belongs to another user.

    The two cases are indistinguishable to callers so ownership is never
    leaked.
    """

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class ValidationError(ReflectDeskError):
    """A value broke a domain rule that request validation cannot see."""
