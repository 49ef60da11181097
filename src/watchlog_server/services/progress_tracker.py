"""Per-series season and episode seen state."""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import ConfigurationError, classify_database_error
from ..database.session import SessionLocal
from ..models.progress import SeasonProgress
from ..repositories.series_progress_repository import SeriesProgressRepository
from .optimistic import optimistic_update
from .tmdb_client import TMDBClient

logger = logging.getLogger(__name__)

COLLECTION = "series_progress"


def _parse_int(value: str) -> Optional[int]:
    try:
        return int(value)
    except ValueError:
        return None


class ProgressTracker:
    """Reads and writes seen flags, independent of watch entries."""

    def __init__(self, tmdb_client: Optional[TMDBClient] = None):
        """
        Initialize progress tracker.

        Args:
            tmdb_client: Metadata client used for season totals
        """
        self.tmdb_client = tmdb_client

    async def _get_session(self) -> AsyncSession:
        """Get a new database session."""
        return SessionLocal()

    async def set_season_seen(self, series_id: int, season_number: int, seen: bool) -> None:
        """
        Mark a season as seen or unseen.

        Raises:
            PersistencePermissionError, NetworkError: If the write fails
        """
        try:
            async with await self._get_session() as session:
                repo = SeriesProgressRepository(session)
                await repo.set_season(series_id, season_number, seen)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error setting season {season_number} of series {series_id}: {e}")
            raise classify_database_error(e, COLLECTION) from e

        logger.info(f"Series {series_id} season {season_number} seen={seen}")

    async def get_all_seen_seasons(self, series_id: int) -> dict[int, bool]:
        """
        Get seen flags of all seasons that were ever toggled.

        Returns:
            Mapping of season number to seen flag, empty on read failure
        """
        try:
            async with await self._get_session() as session:
                seasons = await SeriesProgressRepository(session).get_seasons(series_id)
        except SQLAlchemyError as e:
            logger.error(f"Error getting seen seasons for series {series_id}: {e}")
            return {}

        seen_map: dict[int, bool] = {}
        for season_str, record in seasons.items():
            season_number = _parse_int(season_str)
            if season_number is None:
                continue
            seen_map[season_number] = isinstance(record, dict) and record.get("seen") is True
        return seen_map

    async def get_season_seen(self, series_id: int, season_number: int) -> bool:
        return (await self.get_all_seen_seasons(series_id)).get(season_number, False)

    async def set_episode_seen(
        self, series_id: int, season_number: int, episode_number: int, seen: bool
    ) -> None:
        """
        Mark an episode as seen or unseen.

        Raises:
            PersistencePermissionError, NetworkError: If the write fails
        """
        try:
            async with await self._get_session() as session:
                repo = SeriesProgressRepository(session)
                await repo.set_episode(series_id, season_number, episode_number, seen)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(
                f"Error setting episode S{season_number}E{episode_number} "
                f"of series {series_id}: {e}"
            )
            raise classify_database_error(e, COLLECTION) from e

    async def get_all_seen_episodes(self, series_id: int) -> dict[int, dict[int, bool]]:
        """
        Get seen flags of all toggled episodes.

        Returns:
            Mapping of season number to episode number to seen flag.
            Seasons without any valid episode are left out.
        """
        try:
            async with await self._get_session() as session:
                episodes = await SeriesProgressRepository(session).get_episodes(series_id)
        except SQLAlchemyError as e:
            logger.error(f"Error getting seen episodes for series {series_id}: {e}")
            return {}

        seen_map: dict[int, dict[int, bool]] = {}
        for season_str, season_data in episodes.items():
            season_number = _parse_int(season_str)
            if season_number is None or not isinstance(season_data, dict):
                continue

            season_map: dict[int, bool] = {}
            for episode_str, record in season_data.items():
                episode_number = _parse_int(episode_str)
                if episode_number is None:
                    continue
                season_map[episode_number] = isinstance(record, dict) and record.get("seen") is True

            if season_map:
                seen_map[season_number] = season_map
        return seen_map

    async def get_episode_seen(self, series_id: int, season_number: int, episode_number: int) -> bool:
        episodes = await self.get_all_seen_episodes(series_id)
        return episodes.get(season_number, {}).get(episode_number, False)

    async def get_progress(self, series_id: int) -> SeasonProgress:
        """
        Compute watched/total seasons.

        The total is the number of non-empty seasons TMDB lists, so seasons
        that were never toggled count as unseen.

        Raises:
            ConfigurationError: If no metadata client is available
            NetworkError: If the season list cannot be fetched
        """
        if self.tmdb_client is None:
            raise ConfigurationError("TMDB API key is not configured. Please set WATCHLOG_TMDB_API_KEY.")

        seasons = await self.tmdb_client.get_all_seasons(series_id)
        seen = await self.get_all_seen_seasons(series_id)

        watched = sum(1 for season in seasons if seen.get(season.season_number))
        return SeasonProgress.compute(watched, len(seasons))


class SeasonChecklist:
    """Seen flags of one series as shown in a season checklist."""

    def __init__(self, tracker: ProgressTracker, series_id: int, seen: dict[int, bool]):
        self.tracker = tracker
        self.series_id = series_id
        self.seen = seen

    @classmethod
    async def load(cls, tracker: ProgressTracker, series_id: int) -> "SeasonChecklist":
        return cls(tracker, series_id, await tracker.get_all_seen_seasons(series_id))

    def is_seen(self, season_number: int) -> bool:
        return self.seen.get(season_number) is True

    async def toggle(self, season_number: int) -> bool:
        """
        Flip a season's flag, showing the new value before the write lands.

        Returns:
            The new seen flag

        Raises:
            PersistencePermissionError, NetworkError: If the write fails;
                the flag is rolled back first
        """
        new_seen = not self.is_seen(season_number)

        async def commit() -> None:
            await self.tracker.set_season_seen(self.series_id, season_number, new_seen)

        await optimistic_update(self.seen, season_number, new_seen, commit)
        return new_seen
