"""
Tests for matching session reflections to work sessions.
"""

from reflectdesk.reviews.association import (
    find_session_reviews,
    reflection_title,
    session_tag,
)
from reflectdesk.reviews.store import Review


def review(id, title, type="session", session_id=None):
    return Review(id=id, user_id=1, title=title, preview="", type=type, session_id=session_id)


def ids(reviews):
    return [r.id for r in reviews]


def test_canonical_title():
    assert session_tag(7) == "[Session#7]"
    assert reflection_title(7, "Deep work") == "[Session#7] Work Session Reflection - Deep work"


def test_session_id_match_wins():
    reviews = [
        review(1, "[Session#5] Work Session Reflection - Deep work"),
        review(2, "anything", session_id=5),
    ]
    assert ids(find_session_reviews(reviews, 5, "Deep work")) == [2]


def test_session_id_given_as_string():
    reviews = [review(1, "x", session_id="5")]
    assert ids(find_session_reviews(reviews, 5, "Deep work")) == [1]


def test_tag_fallback():
    reviews = [
        review(1, "[Session#5] Work Session Reflection - Deep work"),
        review(2, "[Session#6] Work Session Reflection - Deep work"),
    ]
    assert ids(find_session_reviews(reviews, 5, "Deep work")) == [1]


def test_title_fallback_phrasings():
    reviews = [
        review(1, "Session Reflection - Deep work"),
        review(2, "Work Session Reflection - Deep work"),
        review(3, "Notes on Deep work"),
        review(4, "Unrelated"),
    ]
    assert ids(find_session_reviews(reviews, 5, "Deep work")) == [1, 2, 3]


def test_only_session_reviews_considered():
    reviews = [
        review(1, "[Session#5] Daily", type="daily", session_id=5),
        review(2, "Deep work", type="weekly"),
    ]
    assert find_session_reviews(reviews, 5, "Deep work") == []


def test_blank_session_title_never_matches_by_title():
    reviews = [review(1, "Anything at all")]
    assert find_session_reviews(reviews, 5, "") == []
    assert find_session_reviews(reviews, 5, "   ") == []
    assert find_session_reviews(reviews, 5, None) == []


def test_accepts_plain_dicts():
    reviews = [{"id": 1, "title": "t", "type": "session", "session_id": 3}]
    assert find_session_reviews(reviews, 3, "t") == reviews


def test_no_match_is_empty():
    assert find_session_reviews([review(1, "Other")], 5, "Deep work") == []


def test_title_fallback_skips_reflections_linked_elsewhere():
    reviews = [review(1, "[Session#2] Work Session Reflection - Plan v2", session_id=2)]
    assert find_session_reviews(reviews, 1, "Plan") == []


def test_tag_fallback_skips_reflections_linked_elsewhere():
    reviews = [
        review(1, "[Session#5] Work Session Reflection - Deep work", session_id=9),
        review(2, "[Session#5] imported"),
    ]
    assert ids(find_session_reviews(reviews, 5, "Deep work")) == [2]
