"""Timestamp formatting utilities."""

from datetime import datetime


def now() -> str:
    """Compact timestamp for directory names, e.g. 20251114_123456."""
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def now_exact() -> str:
    """Timestamp with microseconds, for names that must not collide within a second."""
    return datetime.now().strftime("%Y%m%d_%H%M%S_%f")
