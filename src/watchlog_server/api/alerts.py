"""New-season alert API endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel

from watchlog_server.api.deps import AlertDismissalsDep, SeasonCheckerDep, UserDep
from watchlog_server.core.errors import NotFoundError
from watchlog_server.models.alerts import NewSeasonAlert, SeriesSeasonTracker

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/alerts", tags=["alerts"])


class TrackSeriesRequest(BaseModel):
    """Optional display fields for a newly tracked series."""

    series_name: Optional[str] = None
    cover_image: Optional[str] = None


@router.get("", response_model=list[NewSeasonAlert])
async def list_alerts(
    season_checker: SeasonCheckerDep,
    _: UserDep,
) -> list[NewSeasonAlert]:
    """List alerts that have not been dismissed."""
    return season_checker.visible_alerts()


@router.post("/check", response_model=list[NewSeasonAlert])
async def check_now(
    season_checker: SeasonCheckerDep,
    _: UserDep,
) -> list[NewSeasonAlert]:
    """Run a check pass and return the alerts it produced."""
    alerts = await season_checker.check_all()
    return season_checker.dismissals.filter_visible(alerts)


@router.post("/{alert_id}/dismiss")
async def dismiss_alert(
    alert_id: str,
    dismissals: AlertDismissalsDep,
    _: UserDep,
) -> dict:
    """Dismiss an alert."""
    dismissals.dismiss(alert_id)
    logger.info(f"Alert {alert_id} dismissed")
    return {"status": "ok", "id": alert_id}


@router.delete("/dismissed")
async def clear_dismissed(
    dismissals: AlertDismissalsDep,
    _: UserDep,
) -> dict:
    """Forget all dismissals."""
    dismissals.clear_all()
    return {"status": "ok"}


@router.get("/tracked", response_model=list[SeriesSeasonTracker])
async def list_tracked(
    season_checker: SeasonCheckerDep,
    _: UserDep,
) -> list[SeriesSeasonTracker]:
    """List tracked series with their season baselines."""
    return list(season_checker.tracker_store.get_tracked_series().values())


@router.post("/tracked/{tmdb_id}", response_model=SeriesSeasonTracker)
async def track_series(
    tmdb_id: int,
    season_checker: SeasonCheckerDep,
    _: UserDep,
    request: Optional[TrackSeriesRequest] = None,
) -> SeriesSeasonTracker:
    """Start tracking a series at its current season count."""
    request = request or TrackSeriesRequest()
    return await season_checker.seed_series(tmdb_id, request.series_name, request.cover_image)


@router.delete("/tracked/{tmdb_id}")
async def untrack_series(
    tmdb_id: int,
    season_checker: SeasonCheckerDep,
    _: UserDep,
) -> dict:
    """Stop tracking a series."""
    if not season_checker.tracker_store.get_series_season_count(tmdb_id):
        raise NotFoundError(f"Series {tmdb_id} is not tracked")

    season_checker.untrack_series(tmdb_id)
    return {"status": "ok", "tmdb_id": tmdb_id}
