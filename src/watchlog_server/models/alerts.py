"""Season tracking and new-season alert models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SeriesSeasonTracker(BaseModel):
    """Last observed season count for a series (device-local baseline)."""

    tmdb_id: int
    series_name: str
    last_known_season_count: int
    last_checked: datetime
    cover_image: Optional[str] = None


class NewSeasonAlert(BaseModel):
    """A newly released season, shown until dismissed."""

    id: str  # alert-{tmdb_id}-{count}-{epoch_ms}
    tmdb_id: int
    series_name: str
    new_season_number: int
    total_seasons: int
    cover_image: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.now)
