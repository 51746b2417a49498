"""Reviews: preview codec, session association and storage."""

from .codec import (
    ReviewField,
    ReviewTemplate,
    SESSION_TEMPLATE,
    DAILY_TEMPLATE,
    EXPERIENTIAL_TEMPLATE,
    TEMPLATES,
    truncate,
    encode,
    decode,
    encode_for,
    decode_for,
)
from .association import find_session_reviews, session_tag, reflection_title
from .store import Review, ReviewStore, InMemoryReviewStore, DatabaseReviewStore
from .service import ReviewService, get_review_service

__all__ = [
    "ReviewField",
    "ReviewTemplate",
    "SESSION_TEMPLATE",
    "DAILY_TEMPLATE",
    "EXPERIENTIAL_TEMPLATE",
    "TEMPLATES",
    "truncate",
    "encode",
    "decode",
    "encode_for",
    "decode_for",
    "find_session_reviews",
    "session_tag",
    "reflection_title",
    "Review",
    "ReviewStore",
    "InMemoryReviewStore",
    "DatabaseReviewStore",
    "ReviewService",
    "get_review_service",
]
