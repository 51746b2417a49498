"""
Review routes.

A review may only be linked to one of the caller's own work sessions;
anything else is rejected with 400 "Invalid session".
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ..database.exceptions import EntityNotFoundError, ValidationError
from ..database.models import UserDB
from ..database.repositories.sessions import get_work_session_repository
from ..models.api_validation import ReviewCreate, ReviewUpdate
from ..reviews.service import get_review_service
from .security import require_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reviews", tags=["reviews"])


async def _check_session(user_id: int, session_id: Optional[int]):
    if session_id is None:
        return
    if not await get_work_session_repository().get(user_id, session_id):
        raise HTTPException(status_code=400, detail="Invalid session")


@router.get("")
async def list_reviews(
    review_type: Optional[str] = Query(None, alias="type"),
    user: UserDB = Depends(require_user),
):
    try:
        reviews = await get_review_service().list_reviews(user.id, review_type)
        return [r.to_dict() for r in reviews]
    except Exception as e:
        logger.error(f"Error listing reviews: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch reviews")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_review(payload: ReviewCreate, user: UserDB = Depends(require_user)):
    try:
        await _check_session(user.id, payload.session_id)
        review = await get_review_service().create_review(user.id, payload.model_dump())
        return review.to_dict()

    except HTTPException:
        raise
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error creating review: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create review")


@router.get("/{review_id}")
async def get_review(review_id: int, user: UserDB = Depends(require_user)):
    try:
        review = await get_review_service().get_review(user.id, review_id)
        return review.to_dict()

    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Review not found")
    except Exception as e:
        logger.error(f"Error fetching review {review_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch review")


@router.get("/{review_id}/content")
async def get_review_content(review_id: int, user: UserDB = Depends(require_user)):
    """Form fields decoded from the review preview."""
    try:
        review_service = get_review_service()
        review = await review_service.get_review(user.id, review_id)
        return {
            "id": review.id,
            "type": review.type,
            "fields": review_service.parse_review(review),
        }

    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Review not found")
    except Exception as e:
        logger.error(f"Error decoding review {review_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch review")


@router.put("/{review_id}")
async def update_review(
    review_id: int,
    payload: ReviewUpdate,
    user: UserDB = Depends(require_user),
):
    try:
        updates = payload.to_updates()
        await _check_session(user.id, updates.get("session_id"))
        review = await get_review_service().update_review(user.id, review_id, updates)
        return review.to_dict()

    except HTTPException:
        raise
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Review not found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating review {review_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update review")


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(review_id: int, user: UserDB = Depends(require_user)):
    try:
        await get_review_service().delete_review(user.id, review_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Review not found")
    except Exception as e:
        logger.error(f"Error deleting review {review_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete review")
