"""Utility modules for ReflectDesk."""

from .datetime_utils import (
    get_local_tz,
    get_local_now,
    to_naive_local,
)

__all__ = [
    "get_local_tz",
    "get_local_now",
    "to_naive_local",
]
