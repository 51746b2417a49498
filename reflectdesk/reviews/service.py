"""
Review service.

Reviews are stored through an injected ReviewStore. The service owns the
rules around them: type checks, sessionId normalisation, preview encoding for
session reflections and closing out the reflected session.
"""

import logging
from typing import Any, Dict, List, Optional

from config import settings
from ..database.exceptions import EntityNotFoundError, ValidationError
from ..database.models import ReviewTypeEnum
from ..database.repositories.sessions import get_work_session_repository
from .association import find_session_reviews, reflection_title
from .codec import SESSION_TEMPLATE, decode_for, encode
from .store import DatabaseReviewStore, InMemoryReviewStore, Review, ReviewStore

logger = logging.getLogger(__name__)

REVIEW_TYPES = {t.value for t in ReviewTypeEnum}


def normalize_session_id(value: Any) -> Optional[int]:
    """sessionId as an int; blank values become None."""
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid sessionId: {value!r}")


class ReviewService:
    """Review operations for one storage backend."""

    def __init__(self, store: ReviewStore, session_repository=None):
        self.store = store
        self._session_repository = session_repository

    @property
    def sessions(self):
        if self._session_repository is None:
            self._session_repository = get_work_session_repository()
        return self._session_repository

    # ==================== CRUD ====================

    async def list_reviews(self, user_id: int, review_type: Optional[str] = None) -> List[Review]:
        """A user's reviews, newest first, optionally of one type."""
        reviews = await self.store.list(user_id)
        if review_type:
            reviews = [r for r in reviews if r.type == review_type]
        return sorted(reviews, key=lambda r: (r.created_at is not None, r.created_at, r.id), reverse=True)

    async def get_review(self, user_id: int, review_id: int) -> Review:
        review = await self.store.get(user_id, review_id)
        if review is None:
            raise EntityNotFoundError("Review", review_id)
        return review

    async def create_review(self, user_id: int, data: Dict[str, Any]) -> Review:
        values = self._prepare(data)
        if values.get("type") not in REVIEW_TYPES:
            raise ValidationError(f"Invalid review type: {values.get('type')!r}")
        if not values.get("title"):
            raise ValidationError("Review title is required")

        review = await self.store.add(user_id, values)
        logger.info(f"Stored {review.type} review {review.id} for user {user_id}")
        return review

    async def update_review(self, user_id: int, review_id: int, updates: Dict[str, Any]) -> Review:
        values = self._prepare(updates)
        if "type" in values and values["type"] not in REVIEW_TYPES:
            raise ValidationError(f"Invalid review type: {values['type']!r}")

        review = await self.store.update(user_id, review_id, values)
        if review is None:
            raise EntityNotFoundError("Review", review_id)
        return review

    async def delete_review(self, user_id: int, review_id: int) -> None:
        if not await self.store.delete(user_id, review_id):
            raise EntityNotFoundError("Review", review_id)
        logger.info(f"Deleted review {review_id} for user {user_id}")

    # ==================== SESSION REFLECTIONS ====================

    async def reviews_for_session(self, user_id: int, session: Any) -> List[Review]:
        """Reflections written for a work session."""
        reviews = await self.store.list(user_id)
        return find_session_reviews(reviews, session.id, session.title)

    async def save_session_reflection(
        self,
        user_id: int,
        session: Any,
        fields: Dict[str, Any],
        review_id: Optional[int] = None,
    ) -> Review:
        """
        Create or update the reflection of a work session.

        Without review_id a new reflection is created. With one, that review is
        rewritten, unless it is linked to a different session. An open session
        is marked completed.
        """
        values = {
            "title": reflection_title(session.id, session.title),
            "preview": encode(fields, SESSION_TEMPLATE),
            "type": ReviewTypeEnum.SESSION.value,
            "session_id": session.id,
        }

        if review_id is None:
            review = await self.create_review(user_id, values)
        else:
            existing = await self.get_review(user_id, review_id)
            if existing.session_id is not None and existing.session_id != session.id:
                raise ValidationError(
                    f"Review {review_id} belongs to session {existing.session_id}"
                )
            review = await self.update_review(user_id, review_id, values)

        if not session.is_completed:
            await self.sessions.complete(user_id, session.id)
            logger.info(f"Work session {session.id} completed by reflection {review.id}")

        return review

    def parse_review(self, review: Review) -> Dict[str, str]:
        """Form fields recovered from a review's preview."""
        return decode_for(review.type, review.preview)

    @staticmethod
    def _prepare(data: Dict[str, Any]) -> Dict[str, Any]:
        values = dict(data)
        if "session_id" in values:
            values["session_id"] = normalize_session_id(values["session_id"])
        return values


# Singleton
_review_service: Optional[ReviewService] = None


def build_review_store(backend: str) -> ReviewStore:
    if backend == "memory":
        return InMemoryReviewStore()
    return DatabaseReviewStore()


def get_review_service() -> ReviewService:
    """Get the review service, backed by the store named in settings."""
    global _review_service
    if _review_service is None:
        _review_service = ReviewService(build_review_store(settings.review_store))
        logger.info(f"Review service using {settings.review_store} store")
    return _review_service
