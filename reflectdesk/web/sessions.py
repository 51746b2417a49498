"""
Work session routes, including session reflections.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..database.exceptions import EntityNotFoundError, ValidationError
from ..database.models import UserDB
from ..database.repositories.sessions import get_work_session_repository
from ..models.api_validation import SessionCreate, SessionReflection, SessionUpdate
from ..reviews.service import get_review_service
from ..utils.datetime_utils import get_local_now, to_naive_local
from .security import require_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


async def _get_owned_session(user_id: int, session_id: int):
    work_session = await get_work_session_repository().get(user_id, session_id)
    if not work_session:
        raise HTTPException(status_code=404, detail="Session not found")
    return work_session


@router.get("")
async def list_sessions(user: UserDB = Depends(require_user)):
    try:
        sessions = await get_work_session_repository().list_for_user(user.id)
        return [s.to_dict() for s in sessions]
    except Exception as e:
        logger.error(f"Error listing sessions: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch sessions")


@router.get("/{session_id}")
async def get_session(session_id: int, user: UserDB = Depends(require_user)):
    try:
        work_session = await _get_owned_session(user.id, session_id)
        return work_session.to_dict()

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching session {session_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch session")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_session(payload: SessionCreate, user: UserDB = Depends(require_user)):
    try:
        data = payload.model_dump()
        data["started_at"] = to_naive_local(payload.started_at)
        data["completed_at"] = to_naive_local(payload.completed_at)
        if data["is_completed"] and data["completed_at"] is None:
            data["completed_at"] = get_local_now()

        work_session = await get_work_session_repository().create(user.id, data)
        return work_session.to_dict()

    except Exception as e:
        logger.error(f"Error creating session: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create session")


@router.put("/{session_id}")
async def update_session(
    session_id: int,
    payload: SessionUpdate,
    user: UserDB = Depends(require_user),
):
    """Update a session. Completing it stamps completedAt unless one is given."""
    try:
        updates = payload.to_updates()
        if "completed_at" in updates:
            updates["completed_at"] = to_naive_local(updates["completed_at"])
        if updates.get("is_completed") is True and updates.get("completed_at") is None:
            updates["completed_at"] = get_local_now()
        elif updates.get("is_completed") is False:
            updates["completed_at"] = None

        work_session = await get_work_session_repository().update(user.id, session_id, updates)
        if not work_session:
            raise HTTPException(status_code=404, detail="Session not found")
        return work_session.to_dict()

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating session {session_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update session")


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: int, user: UserDB = Depends(require_user)):
    """
    Delete a session.

    Its reflections are removed first on a best-effort basis; a reflection
    that cannot be deleted is logged and does not block the session delete.
    """
    try:
        work_session = await _get_owned_session(user.id, session_id)

        review_service = get_review_service()
        for review in await review_service.reviews_for_session(user.id, work_session):
            try:
                await review_service.delete_review(user.id, review.id)
            except Exception as e:
                logger.warning(f"Could not delete reflection {review.id} of session {session_id}: {e}")

        if not await get_work_session_repository().delete(user.id, session_id):
            raise HTTPException(status_code=404, detail="Session not found")
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting session {session_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete session")


@router.get("/{session_id}/reviews")
async def list_session_reviews(session_id: int, user: UserDB = Depends(require_user)):
    """Reflections written for this session."""
    try:
        work_session = await _get_owned_session(user.id, session_id)
        reviews = await get_review_service().reviews_for_session(user.id, work_session)
        return [r.to_dict() for r in reviews]

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error listing reflections of session {session_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch session reviews")


@router.put("/{session_id}/reflection")
async def save_session_reflection(
    session_id: int,
    payload: SessionReflection,
    user: UserDB = Depends(require_user),
):
    """Create or update the session's reflection and close the session out."""
    try:
        work_session = await _get_owned_session(user.id, session_id)

        review_service = get_review_service()
        review = await review_service.save_session_reflection(
            user.id, work_session, payload.fields(), review_id=payload.review_id
        )
        return {"review": review.to_dict(), "fields": review_service.parse_review(review)}

    except HTTPException:
        raise
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Review not found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error saving reflection of session {session_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to save session reflection")
