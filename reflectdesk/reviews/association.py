"""
Matching session reflections to work sessions.

New reflections carry a sessionId. Older ones only identify their session
through the title, either with a `[Session#<id>]` tag or by quoting the
session title, so lookups fall back to those in turn.
"""

import logging
from typing import Any, Iterable, List, Optional

logger = logging.getLogger(__name__)

SESSION_REVIEW_TYPE = "session"


def session_tag(session_id: int) -> str:
    return f"[Session#{session_id}]"


def reflection_title(session_id: int, session_title: str) -> str:
    """Canonical title for a new session reflection."""
    return f"{session_tag(session_id)} Work Session Reflection - {session_title}"


def _field(review: Any, name: str, default: Any = None) -> Any:
    if isinstance(review, dict):
        return review.get(name, default)
    return getattr(review, name, default)


def _same_id(value: Any, session_id: int) -> bool:
    if value is None or value == "":
        return False
    try:
        return int(value) == int(session_id)
    except (TypeError, ValueError):
        return False


def _linked(review: Any) -> bool:
    value = _field(review, "session_id")
    return value is not None and value != ""


def find_session_reviews(
    reviews: Iterable[Any],
    session_id: int,
    session_title: Optional[str] = None,
) -> List[Any]:
    """
    Session reflections for one session.

    Only reviews of type "session" are considered. Returns the first
    non-empty result of: matching sessionId, the `[Session#<id>]` tag in the
    title, then the session title quoted in the review title. The title
    fallbacks only look at reviews without a sessionId, so a reflection
    linked to another session is never claimed through its title.
    """
    candidates = [r for r in reviews if _field(r, "type") == SESSION_REVIEW_TYPE]

    by_id = [r for r in candidates if _same_id(_field(r, "session_id"), session_id)]
    if by_id:
        return by_id

    unlinked = [r for r in candidates if not _linked(r)]

    tag = session_tag(session_id)
    by_tag = [r for r in unlinked if tag in (_field(r, "title") or "")]
    if by_tag:
        logger.debug(f"Matched {len(by_tag)} reflections for session {session_id} by title tag")
        return by_tag

    title = (session_title or "").strip()
    if not title:
        return []

    phrasings = (
        title,
        f"Session Reflection - {title}",
        f"Work Session Reflection - {title}",
    )
    by_title = [
        r for r in unlinked
        if any(p in (_field(r, "title") or "") for p in phrasings)
    ]
    if by_title:
        logger.debug(f"Matched {len(by_title)} reflections for session {session_id} by title")
    return by_title
