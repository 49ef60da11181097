"""New-season detection for tracked series."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from ..core.config import settings
from ..models.alerts import NewSeasonAlert, SeriesSeasonTracker
from .alert_dismissals import AlertDismissalStore
from .season_tracker import SeasonTrackerStore
from .tmdb_client import TMDBClient

logger = logging.getLogger(__name__)


def make_alert_id(tmdb_id: int, season_count: int, created_at: datetime) -> str:
    """
    Build a unique alert id.

    The creation instant is part of the id so that an alert re-emitted for
    the same series and count does not inherit an earlier dismissal.
    """
    return f"alert-{tmdb_id}-{season_count}-{int(created_at.timestamp() * 1000)}"


class SeasonChecker:
    """Polls TMDB for season counts above the stored baselines."""

    def __init__(
        self,
        tmdb_client: TMDBClient,
        tracker_store: SeasonTrackerStore,
        dismissals: AlertDismissalStore,
        poll_delay_seconds: Optional[float] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize season checker.

        Args:
            tmdb_client: Metadata client for current season counts
            tracker_store: Device-local baselines
            dismissals: Dismissed alert ids
            poll_delay_seconds: Pause between series (defaults to settings)
            sleep: Sleep function (injectable for tests)
        """
        self.tmdb_client = tmdb_client
        self.tracker_store = tracker_store
        self.dismissals = dismissals
        self.poll_delay_seconds = (
            settings.season_poll_delay_seconds if poll_delay_seconds is None else poll_delay_seconds
        )
        self._sleep = sleep
        self._is_checking = False
        self.pending_alerts: list[NewSeasonAlert] = []

    @property
    def is_checking(self) -> bool:
        return self._is_checking

    async def check_for_new_seasons(self, tmdb_id: int) -> Optional[NewSeasonAlert]:
        """
        Check one series against its stored baseline.

        Untracked series are skipped. When the current count exceeds the
        baseline, the baseline is raised and an alert is returned. Otherwise
        only the last-checked time is refreshed; the stored count is kept even
        if TMDB now reports fewer seasons.

        Args:
            tmdb_id: TMDB series ID

        Returns:
            NewSeasonAlert if a new season appeared, None otherwise

        Raises:
            ConfigurationError, NetworkError: From the metadata lookup
        """
        tracked = self.tracker_store.get_series_season_count(tmdb_id)
        if not tracked:
            return None

        details = await self.tmdb_client.get_series_details(tmdb_id)
        current_count = details.season_count

        if current_count > tracked.last_known_season_count:
            self.tracker_store.update_series_season_count(
                tmdb_id, current_count, tracked.series_name, tracked.cover_image
            )

            created_at = datetime.now(timezone.utc)
            logger.info(
                f"New season for {tracked.series_name} ({tmdb_id}): "
                f"{tracked.last_known_season_count} -> {current_count}"
            )
            return NewSeasonAlert(
                id=make_alert_id(tmdb_id, current_count, created_at),
                tmdb_id=tmdb_id,
                series_name=tracked.series_name,
                new_season_number=current_count,
                total_seasons=current_count,
                cover_image=tracked.cover_image,
                timestamp=created_at,
            )

        self.tracker_store.update_series_season_count(
            tmdb_id, tracked.last_known_season_count, tracked.series_name, tracked.cover_image
        )
        return None

    async def check_all(self) -> list[NewSeasonAlert]:
        """
        Check every tracked series, one at a time.

        A call made while a pass is already running returns an empty list.
        Failures are logged per series and do not stop the pass.

        Returns:
            Alerts emitted during this pass
        """
        if self._is_checking:
            logger.debug("Season check already running, skipping")
            return []

        self._is_checking = True
        try:
            tracked = self.tracker_store.get_tracked_series()
            logger.info(f"Checking {len(tracked)} tracked series for new seasons")

            alerts: list[NewSeasonAlert] = []
            for tmdb_id in tracked:
                try:
                    alert = await self.check_for_new_seasons(tmdb_id)
                    if alert:
                        alerts.append(alert)
                except Exception as e:
                    logger.error(f"Error checking series {tmdb_id}: {e}")

                await self._sleep(self.poll_delay_seconds)

            # Alerts dismissed before this pass are not kept any longer
            self.pending_alerts = self.dismissals.filter_visible(self.pending_alerts) + alerts
            return alerts
        finally:
            self._is_checking = False

    async def seed_series(
        self, tmdb_id: int, series_name: Optional[str] = None, cover_image: Optional[str] = None
    ) -> SeriesSeasonTracker:
        """
        Make sure a series has a baseline.

        A new series is stored with its current season count, so the first
        pass does not report seasons that already existed. An existing
        baseline keeps its count and only picks up a newer name or cover.

        Args:
            tmdb_id: TMDB series ID
            series_name: Display name (defaults to the TMDB name)
            cover_image: Cover image URL (defaults to the TMDB poster)

        Returns:
            Stored tracker
        """
        existing = self.tracker_store.get_series_season_count(tmdb_id)
        if existing:
            return self.tracker_store.update_series_season_count(
                tmdb_id,
                existing.last_known_season_count,
                series_name or existing.series_name,
                cover_image,
            )

        details = await self.tmdb_client.get_series_details(tmdb_id)
        logger.info(f"Tracking {details.name} ({tmdb_id}) at {details.season_count} seasons")
        return self.tracker_store.update_series_season_count(
            tmdb_id,
            details.season_count,
            series_name or details.name,
            cover_image or details.poster_url,
        )

    def untrack_series(self, tmdb_id: int) -> None:
        """Forget a series baseline and drop its pending alerts."""
        self.tracker_store.remove_tracked_series(tmdb_id)
        self.pending_alerts = [a for a in self.pending_alerts if a.tmdb_id != tmdb_id]

    def visible_alerts(self) -> list[NewSeasonAlert]:
        """Pending alerts that have not been dismissed."""
        return self.dismissals.filter_visible(self.pending_alerts)
