"""
Pytest configuration and shared fixtures.
"""

import os

# Settings are read at import time; pin the test environment first.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("REVIEW_STORE", "memory")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from datetime import datetime
from unittest.mock import AsyncMock, Mock

# Configure pytest-asyncio
pytest_plugins = ('pytest_asyncio',)


@pytest.fixture
def mock_database():
    """Mock database with session context manager."""
    db = Mock()
    session = AsyncMock()

    # Mock session context manager
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock(return_value=None)

    # Mock session methods
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.commit = AsyncMock()
    session.add = Mock()

    db.session = Mock(return_value=session)

    return db, session


@pytest.fixture
def sample_user():
    """Authenticated user as returned by require_user."""
    user = Mock()
    user.id = 1
    user.username = "alice"
    user.to_dict = Mock(return_value={"id": 1, "username": "alice", "email": "alice@example.com"})
    return user


@pytest.fixture
def sample_session_data():
    """Sample work session payload (camelCase, as sent by the client)."""
    return {
        "title": "Write quarterly report",
        "importantAction": "Draft the summary section",
        "smartGoals": "Finish the first draft by noon",
        "metastrategicThinking": "Timebox each section to 25 minutes",
        "murphyjitsu": "Email will distract me; close the inbox",
    }


@pytest.fixture
def reflection_fields():
    return {
        "goalsAchieved": "Finished the report",
        "metastrategicReflection": "Used timeboxing",
        "extrapolate": "Need more breaks",
    }


def make_result(scalar=None, scalars=None, rowcount=1):
    """Mock of an AsyncSession.execute() result."""
    result = Mock()
    result.scalar_one_or_none = Mock(return_value=scalar)
    scalars_result = Mock()
    scalars_result.all = Mock(return_value=list(scalars or []))
    result.scalars = Mock(return_value=scalars_result)
    result.rowcount = rowcount
    return result


@pytest.fixture
def now():
    return datetime(2026, 3, 14, 9, 30)


@pytest.fixture
def result_factory():
    """Build mocked execute() results: result_factory(scalar=..., scalars=[...], rowcount=...)."""
    return make_result
