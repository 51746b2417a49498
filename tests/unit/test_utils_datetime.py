"""
Unit tests for datetime utilities.
"""

import pytest
from datetime import datetime, timezone, timedelta
from unittest.mock import patch

import pytz

from reflectdesk.utils.datetime_utils import get_local_tz, get_local_now, to_naive_local


@pytest.fixture
def karachi():
    with patch("reflectdesk.utils.datetime_utils.settings") as mock_settings:
        mock_settings.timezone = "Asia/Karachi"
        yield mock_settings


def test_get_local_tz(karachi):
    assert get_local_tz() == pytz.timezone("Asia/Karachi")


def test_get_local_now_is_naive(karachi):
    now = get_local_now()
    assert now.tzinfo is None

    expected = datetime.now(pytz.timezone("Asia/Karachi")).replace(tzinfo=None)
    assert abs((expected - now).total_seconds()) < 5


def test_to_naive_local_none():
    assert to_naive_local(None) is None


def test_to_naive_local_keeps_naive():
    dt = datetime(2026, 3, 14, 9, 30)
    assert to_naive_local(dt) is dt


def test_to_naive_local_converts_utc(karachi):
    # Karachi is UTC+5 with no DST
    result = to_naive_local(datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc))
    assert result == datetime(2026, 3, 14, 14, 30)
    assert result.tzinfo is None


def test_to_naive_local_converts_offset(karachi):
    result = to_naive_local(datetime(2026, 3, 14, 9, 30, tzinfo=timezone(timedelta(hours=-3))))
    assert result == datetime(2026, 3, 14, 17, 30)
