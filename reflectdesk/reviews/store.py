"""
Storage backends for reviews.

ReviewService talks to a ReviewStore; which one is used is decided when the
service is built. InMemoryReviewStore keeps everything in process (tests and
throwaway runs), DatabaseReviewStore persists to the `reviews` table.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol

from sqlalchemy import select, update, delete

from ..database.connection import get_database
from ..database.models import ReviewDB
from ..database.exceptions import DatabaseOperationError
from ..utils.datetime_utils import get_local_now

logger = logging.getLogger(__name__)

REVIEW_COLUMNS = ("title", "preview", "type", "session_id")


@dataclass
class Review:
    """A stored review, independent of the backend it came from."""
    id: int
    user_id: int
    title: str
    preview: str
    type: str
    session_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: ReviewDB) -> "Review":
        return cls(
            id=row.id,
            user_id=row.user_id,
            title=row.title,
            preview=row.preview or "",
            type=row.type,
            session_id=row.session_id,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "preview": self.preview,
            "type": self.type,
            "sessionId": self.session_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


class ReviewStore(Protocol):
    """Per-user review persistence."""

    async def list(self, user_id: int) -> List[Review]: ...

    async def get(self, user_id: int, review_id: int) -> Optional[Review]: ...

    async def add(self, user_id: int, data: Dict[str, Any]) -> Review: ...

    async def update(self, user_id: int, review_id: int, data: Dict[str, Any]) -> Optional[Review]: ...

    async def delete(self, user_id: int, review_id: int) -> bool: ...


def _columns(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if k in REVIEW_COLUMNS}


class InMemoryReviewStore:
    """Reviews kept in process, one list per user."""

    def __init__(self):
        self._reviews: Dict[int, List[Review]] = {}
        self._next_id = 1

    async def list(self, user_id: int) -> List[Review]:
        return list(self._reviews.get(user_id, []))

    async def get(self, user_id: int, review_id: int) -> Optional[Review]:
        for review in self._reviews.get(user_id, []):
            if review.id == review_id:
                return review
        return None

    async def add(self, user_id: int, data: Dict[str, Any]) -> Review:
        now = get_local_now()
        values = _columns(data)
        review = Review(
            id=self._next_id,
            user_id=user_id,
            title=values.get("title") or "",
            preview=values.get("preview") or "",
            type=values.get("type"),
            session_id=values.get("session_id"),
            created_at=data.get("created_at") or now,
            updated_at=now,
        )
        self._next_id += 1
        self._reviews.setdefault(user_id, []).append(review)
        return review

    async def update(self, user_id: int, review_id: int, data: Dict[str, Any]) -> Optional[Review]:
        review = await self.get(user_id, review_id)
        if review is None:
            return None
        for key, value in _columns(data).items():
            setattr(review, key, value)
        review.updated_at = get_local_now()
        return review

    async def delete(self, user_id: int, review_id: int) -> bool:
        reviews = self._reviews.get(user_id, [])
        remaining = [r for r in reviews if r.id != review_id]
        self._reviews[user_id] = remaining
        return len(remaining) != len(reviews)


class DatabaseReviewStore:
    """Reviews persisted in the `reviews` table."""

    def __init__(self):
        self.db = get_database()

    async def list(self, user_id: int) -> List[Review]:
        async with self.db.session() as session:
            result = await session.execute(
                select(ReviewDB)
                .where(ReviewDB.user_id == user_id)
                .order_by(ReviewDB.created_at.asc(), ReviewDB.id.asc())
            )
            return [Review.from_row(row) for row in result.scalars().all()]

    async def get(self, user_id: int, review_id: int) -> Optional[Review]:
        async with self.db.session() as session:
            result = await session.execute(
                select(ReviewDB).where(ReviewDB.id == review_id, ReviewDB.user_id == user_id)
            )
            row = result.scalar_one_or_none()
            return Review.from_row(row) if row else None

    async def add(self, user_id: int, data: Dict[str, Any]) -> Review:
        async with self.db.session() as session:
            try:
                values = _columns(data)
                row = ReviewDB(
                    user_id=user_id,
                    title=values.get("title") or "",
                    preview=values.get("preview") or "",
                    type=values.get("type"),
                    session_id=values.get("session_id"),
                )
                session.add(row)
                await session.flush()
                await session.refresh(row)

                logger.info(f"Created {row.type} review {row.id} for user {user_id}")
                return Review.from_row(row)

            except Exception as e:
                logger.error(f"CRITICAL: Review creation failed: {e}", exc_info=True)
                raise DatabaseOperationError(f"Failed to create review: {e}")

    async def update(self, user_id: int, review_id: int, data: Dict[str, Any]) -> Optional[Review]:
        async with self.db.session() as session:
            try:
                values = _columns(data)
                values["updated_at"] = datetime.now()

                result = await session.execute(
                    update(ReviewDB)
                    .where(ReviewDB.id == review_id, ReviewDB.user_id == user_id)
                    .values(**values)
                )
                if not result.rowcount:
                    return None

                result = await session.execute(select(ReviewDB).where(ReviewDB.id == review_id))
                row = result.scalar_one_or_none()
                return Review.from_row(row) if row else None

            except Exception as e:
                logger.error(f"CRITICAL: Review update failed for {review_id}: {e}", exc_info=True)
                raise DatabaseOperationError(f"Failed to update review {review_id}: {e}")

    async def delete(self, user_id: int, review_id: int) -> bool:
        async with self.db.session() as session:
            try:
                result = await session.execute(
                    delete(ReviewDB).where(ReviewDB.id == review_id, ReviewDB.user_id == user_id)
                )
                deleted = bool(result.rowcount)
                if deleted:
                    logger.info(f"Deleted review {review_id}")
                return deleted

            except Exception as e:
                logger.error(f"CRITICAL: Review deletion failed for {review_id}: {e}", exc_info=True)
                raise DatabaseOperationError(f"Failed to delete review {review_id}: {e}")
