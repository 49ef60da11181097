"""Watch entry models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class EntryKind(str, Enum):
    """What was watched."""

    MOVIE = "movie"
    SERIES = "series"


class EntryStatus(str, Enum):
    """Viewing status of an entry."""

    COMPLETED = "completed"
    WATCHING = "watching"
    DROPPED = "dropped"
    WATCHLIST = "watchlist"


class WatchEntryCreate(BaseModel):
    """Form data for creating or updating a watch entry.

    Title and watch date are checked by the watch log service rather than
    here, so a blank form yields a single friendly validation error.
    """

    title: str = ""
    watch_date: str = ""  # ISO date, YYYY-MM-DD
    kind: EntryKind = EntryKind.MOVIE
    rating: int = Field(default=0, ge=0, le=5)

    platform: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[EntryStatus] = None

    # Manual season/episode for series instalments
    season: Optional[int] = Field(default=None, ge=0)
    episode: Optional[int] = Field(default=None, ge=0)

    cover_image: Optional[str] = None
    genres: Optional[list[str]] = None
    watch_again: bool = False
    tmdb_id: Optional[int] = None


class WatchEntry(WatchEntryCreate):
    """A stored watch entry."""

    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_series(self) -> bool:
        return self.kind == EntryKind.SERIES
