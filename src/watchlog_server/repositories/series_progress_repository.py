"""Series progress repository for database operations."""

import json
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from ..database.models.series_progress import SeriesProgressORM
from .base import BaseRepository


def _leaf(seen: bool) -> dict[str, Any]:
    return {"seen": seen, "updated_at": datetime.now(timezone.utc).isoformat()}


class SeriesProgressRepository(BaseRepository[SeriesProgressORM]):
    """Repository for per-series seen state.

    Every write reads the full document for the series, changes a single
    leaf and writes the document back, so sibling seasons and episodes keep
    their state.
    """

    def __init__(self, session: AsyncSession):
        """Initialize series progress repository."""
        super().__init__(SeriesProgressORM, session)

    async def get_seasons(self, series_id: int) -> dict[str, Any]:
        """
        Get the raw seasons document for a series.

        Args:
            series_id: TMDB series ID

        Returns:
            Mapping of season number (as string) to seen record
        """
        progress = await self.get(series_id)
        return json.loads(progress.seasons) if progress and progress.seasons else {}

    async def get_episodes(self, series_id: int) -> dict[str, Any]:
        """
        Get the raw episodes document for a series.

        Args:
            series_id: TMDB series ID

        Returns:
            Mapping of season number to episode number to seen record
        """
        progress = await self.get(series_id)
        return json.loads(progress.episodes) if progress and progress.episodes else {}

    async def set_season(self, series_id: int, season_number: int, seen: bool) -> None:
        """Set the seen flag of one season, keeping all other state."""
        progress = await self._get_or_create(series_id)

        seasons = json.loads(progress.seasons or "{}")
        seasons[str(season_number)] = _leaf(seen)
        progress.seasons = json.dumps(seasons)

        await self.update(progress)

    async def set_episode(
        self, series_id: int, season_number: int, episode_number: int, seen: bool
    ) -> None:
        """Set the seen flag of one episode, keeping all other state."""
        progress = await self._get_or_create(series_id)

        episodes = json.loads(progress.episodes or "{}")
        season = episodes.setdefault(str(season_number), {})
        season[str(episode_number)] = _leaf(seen)
        progress.episodes = json.dumps(episodes)

        await self.update(progress)

    async def _get_or_create(self, series_id: int) -> SeriesProgressORM:
        return await self.get_or_create(
            series_id,
            lambda: SeriesProgressORM(series_id=series_id, seasons="{}", episodes="{}"),
        )
