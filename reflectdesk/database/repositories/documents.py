"""
Document repository.

Documents are filed under a category path such as ``actionables/projects``.
Category lookups match on the first path segment, so asking for
``actionables/next_actions`` returns the ``actionables`` documents.
"""

import logging
from typing import Optional, List, Dict, Any
from datetime import datetime

from sqlalchemy import select, update, delete

from ..connection import get_database
from ..models import DocumentDB
from ..exceptions import DatabaseOperationError

logger = logging.getLogger(__name__)


def main_category(category: str) -> str:
    """First segment of a category path."""
    return category.strip("/").split("/")[0]


class DocumentRepository:
    """Repository for document operations."""

    def __init__(self):
        self.db = get_database()

    async def create(self, user_id: int, data: Dict[str, Any]) -> DocumentDB:
        """Create a new document."""
        async with self.db.session() as session:
            try:
                document = DocumentDB(
                    title=data.get("title"),
                    content=data.get("content") or {},
                    category=data.get("category") or "default",
                    user_id=user_id,
                )
                session.add(document)
                await session.flush()
                await session.refresh(document)

                logger.info(f"Created document {document.id} in category {document.category}")
                return document

            except Exception as e:
                logger.error(f"CRITICAL: Document creation failed: {e}", exc_info=True)
                raise DatabaseOperationError(f"Failed to create document: {e}")

    async def get(self, user_id: int, document_id: int) -> Optional[DocumentDB]:
        """Get a document if it belongs to the user."""
        async with self.db.session() as session:
            result = await session.execute(
                select(DocumentDB)
                .where(DocumentDB.id == document_id, DocumentDB.user_id == user_id)
            )
            return result.scalar_one_or_none()

    async def list_for_user(self, user_id: int) -> List[DocumentDB]:
        """All documents owned by a user, most recently updated first."""
        async with self.db.session() as session:
            result = await session.execute(
                select(DocumentDB)
                .where(DocumentDB.user_id == user_id)
                .order_by(DocumentDB.updated_at.desc(), DocumentDB.id.desc())
            )
            return list(result.scalars().all())

    async def list_by_category(self, user_id: int, category: str) -> List[DocumentDB]:
        """A user's documents for the main category of a category path."""
        async with self.db.session() as session:
            result = await session.execute(
                select(DocumentDB)
                .where(
                    DocumentDB.user_id == user_id,
                    DocumentDB.category == main_category(category),
                )
                .order_by(DocumentDB.updated_at.desc(), DocumentDB.id.desc())
            )
            return list(result.scalars().all())

    async def update(
        self,
        user_id: int,
        document_id: int,
        updates: Dict[str, Any]
    ) -> Optional[DocumentDB]:
        """Update a document. Returns None when missing or not owned."""
        async with self.db.session() as session:
            try:
                updates = dict(updates)
                updates["updated_at"] = datetime.now()

                result = await session.execute(
                    update(DocumentDB)
                    .where(DocumentDB.id == document_id, DocumentDB.user_id == user_id)
                    .values(**updates)
                )
                if not result.rowcount:
                    return None

                result = await session.execute(
                    select(DocumentDB).where(DocumentDB.id == document_id)
                )
                return result.scalar_one_or_none()

            except Exception as e:
                logger.error(f"CRITICAL: Document update failed for {document_id}: {e}", exc_info=True)
                raise DatabaseOperationError(f"Failed to update document {document_id}: {e}")

    async def delete(self, user_id: int, document_id: int) -> bool:
        """Delete a document. Returns False when missing or not owned."""
        async with self.db.session() as session:
            try:
                result = await session.execute(
                    delete(DocumentDB)
                    .where(DocumentDB.id == document_id, DocumentDB.user_id == user_id)
                )
                return bool(result.rowcount)

            except Exception as e:
                logger.error(f"CRITICAL: Document deletion failed for {document_id}: {e}", exc_info=True)
                raise DatabaseOperationError(f"Failed to delete document {document_id}: {e}")


# Singleton
_document_repository: Optional[DocumentRepository] = None


def get_document_repository() -> DocumentRepository:
    """Get the document repository singleton."""
    global _document_repository
    if _document_repository is None:
        _document_repository = DocumentRepository()
    return _document_repository
