"""Database ORM models."""

from .series_progress import SeriesProgressORM
from .user import UserORM
from .watch_entry import WatchEntryORM

__all__ = [
    "SeriesProgressORM",
    "UserORM",
    "WatchEntryORM",
]
