"""
Tests for environment-driven settings.
"""

import pytest
from pydantic import ValidationError

from config.settings import Settings


def test_cors_origins_split(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "http://localhost:5173, https://app.example.com,")
    settings = Settings(_env_file=None)
    assert settings.cors_origins == ["http://localhost:5173", "https://app.example.com"]


def test_review_store_from_env(monkeypatch):
    monkeypatch.setenv("REVIEW_STORE", "memory")
    assert Settings(_env_file=None).review_store == "memory"


def test_review_store_rejects_unknown(monkeypatch):
    monkeypatch.setenv("REVIEW_STORE", "redis")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_defaults(monkeypatch):
    for name in ("RATE_LIMIT_ENABLED", "TIMEZONE", "JWT_ALGORITHM"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.rate_limit_enabled is True
    assert settings.timezone == "UTC"
    assert settings.jwt_algorithm == "HS256"
