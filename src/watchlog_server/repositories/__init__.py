"""Repository layer for database access."""

from .base import BaseRepository
from .series_progress_repository import SeriesProgressRepository
from .user_repository import UserRepository
from .watch_entry_repository import WatchEntryRepository

__all__ = [
    "BaseRepository",
    "SeriesProgressRepository",
    "UserRepository",
    "WatchEntryRepository",
]
