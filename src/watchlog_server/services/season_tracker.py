"""Device-local season count baselines for new-season detection."""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from ..models.alerts import SeriesSeasonTracker
from .local_store import JsonFileStore

logger = logging.getLogger(__name__)

STORAGE_FILE = "season-tracker.json"


class SeasonTrackerStore:
    """Last known season count per TMDB series."""

    def __init__(self, state_dir: Path):
        self._store = JsonFileStore(Path(state_dir) / STORAGE_FILE)

    def get_tracked_series(self) -> dict[int, SeriesSeasonTracker]:
        """
        Get all tracked series.

        Returns:
            Mapping of TMDB id to tracker; unreadable records are skipped
        """
        data = self._store.load()
        if not isinstance(data, dict):
            return {}

        tracked: dict[int, SeriesSeasonTracker] = {}
        for key, value in data.items():
            try:
                tracked[int(key)] = SeriesSeasonTracker.model_validate(value)
            except (ValueError, ValidationError):
                logger.warning(f"Skipping invalid tracker record: {key}")
        return tracked

    def get_series_season_count(self, tmdb_id: int) -> Optional[SeriesSeasonTracker]:
        """Get tracker data for a single series."""
        return self.get_tracked_series().get(tmdb_id)

    def update_series_season_count(
        self,
        tmdb_id: int,
        season_count: int,
        series_name: str,
        cover_image: Optional[str] = None,
    ) -> SeriesSeasonTracker:
        """
        Add or replace the tracker for a series and stamp it as checked now.

        A missing cover image keeps the previously stored one.
        """
        tracked = self.get_tracked_series()
        existing = tracked.get(tmdb_id)

        tracker = SeriesSeasonTracker(
            tmdb_id=tmdb_id,
            series_name=series_name,
            last_known_season_count=season_count,
            last_checked=datetime.now(timezone.utc),
            cover_image=cover_image or (existing.cover_image if existing else None),
        )
        tracked[tmdb_id] = tracker
        self._save(tracked)
        return tracker

    def remove_tracked_series(self, tmdb_id: int) -> None:
        """Stop tracking a series."""
        tracked = self.get_tracked_series()
        if tracked.pop(tmdb_id, None) is not None:
            self._save(tracked)

    def _save(self, tracked: dict[int, SeriesSeasonTracker]) -> None:
        self._store.save(
            {
                str(tmdb_id): tracker.model_dump(mode="json", exclude_none=True)
                for tmdb_id, tracker in tracked.items()
            }
        )
