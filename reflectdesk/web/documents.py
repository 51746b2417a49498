"""
Document routes.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..database.models import UserDB
from ..database.repositories.documents import get_document_repository
from ..models.api_validation import DocumentCreate, DocumentUpdate
from .security import require_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/documents", tags=["documents"])


@router.get("")
async def list_documents(user: UserDB = Depends(require_user)):
    try:
        documents = await get_document_repository().list_for_user(user.id)
        return [d.to_dict() for d in documents]
    except Exception as e:
        logger.error(f"Error listing documents: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch documents")


@router.get("/category/{category:path}")
async def list_documents_by_category(category: str, user: UserDB = Depends(require_user)):
    """Documents of the main category of a path like `actionables/projects`."""
    try:
        documents = await get_document_repository().list_by_category(user.id, category)
        return [d.to_dict() for d in documents]
    except Exception as e:
        logger.error(f"Error listing documents for category {category}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch documents")


@router.get("/{document_id}")
async def get_document(document_id: int, user: UserDB = Depends(require_user)):
    try:
        document = await get_document_repository().get(user.id, document_id)
        if not document:
            raise HTTPException(status_code=404, detail="Document not found")
        return document.to_dict()

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching document {document_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch document")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_document(payload: DocumentCreate, user: UserDB = Depends(require_user)):
    try:
        document = await get_document_repository().create(user.id, payload.model_dump())
        return document.to_dict()
    except Exception as e:
        logger.error(f"Error creating document: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create document")


@router.put("/{document_id}")
async def update_document(
    document_id: int,
    payload: DocumentUpdate,
    user: UserDB = Depends(require_user),
):
    try:
        document = await get_document_repository().update(
            user.id, document_id, payload.to_updates()
        )
        if not document:
            raise HTTPException(status_code=404, detail="Document not found")
        return document.to_dict()

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating document {document_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update document")


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(document_id: int, user: UserDB = Depends(require_user)):
    try:
        if not await get_document_repository().delete(user.id, document_id):
            raise HTTPException(status_code=404, detail="Document not found")
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting document {document_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete document")
