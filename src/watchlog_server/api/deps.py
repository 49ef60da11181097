"""API dependencies."""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request

from watchlog_server.auth.oidc import OIDCClient
from watchlog_server.auth.session import get_session
from watchlog_server.core.config import settings
from watchlog_server.models.user import SessionData
from watchlog_server.services.alert_dismissals import AlertDismissalStore
from watchlog_server.services.progress_tracker import ProgressTracker
from watchlog_server.services.season_checker import SeasonChecker
from watchlog_server.services.tmdb_client import TMDBClient
from watchlog_server.services.watch_log import WatchLog

# Global service instances
_watch_log: WatchLog | None = None
_tmdb_client: TMDBClient | None = None
_progress_tracker: ProgressTracker | None = None
_season_checker: SeasonChecker | None = None
_oidc_client: OIDCClient | None = None


def init_services(
    watch_log: WatchLog,
    tmdb_client: TMDBClient,
    progress_tracker: ProgressTracker,
    season_checker: SeasonChecker,
    oidc_client: OIDCClient,
) -> None:
    """Initialize service instances."""
    global _watch_log, _tmdb_client, _progress_tracker, _season_checker, _oidc_client
    _watch_log = watch_log
    _tmdb_client = tmdb_client
    _progress_tracker = progress_tracker
    _season_checker = season_checker
    _oidc_client = oidc_client


def get_watch_log() -> WatchLog:
    """Get the watch log instance."""
    if _watch_log is None:
        raise RuntimeError("Services not initialized")
    return _watch_log


def get_tmdb_client() -> TMDBClient:
    """Get the TMDB client instance."""
    if _tmdb_client is None:
        raise RuntimeError("Services not initialized")
    return _tmdb_client


def get_progress_tracker() -> ProgressTracker:
    """Get the progress tracker instance."""
    if _progress_tracker is None:
        raise RuntimeError("Services not initialized")
    return _progress_tracker


def get_season_checker() -> SeasonChecker:
    """Get the season checker instance."""
    if _season_checker is None:
        raise RuntimeError("Services not initialized")
    return _season_checker


def get_alert_dismissals(
    season_checker: Annotated[SeasonChecker, Depends(get_season_checker)],
) -> AlertDismissalStore:
    """Get the dismissal store shared with the season checker."""
    return season_checker.dismissals


def get_oidc_client() -> OIDCClient:
    """Get the OIDC client instance."""
    if _oidc_client is None:
        raise RuntimeError("Services not initialized")
    return _oidc_client


async def require_user(request: Request) -> Optional[SessionData]:
    """Require a logged-in session when login is configured."""
    if not settings.auth_enabled:
        return None  # Login not configured, endpoints are open

    session = get_session(request)
    if not session.is_logged_in or not session.user_id:
        raise HTTPException(status_code=401, detail="Not logged in")
    return session


# Type aliases for dependency injection
WatchLogDep = Annotated[WatchLog, Depends(get_watch_log)]
TMDBClientDep = Annotated[TMDBClient, Depends(get_tmdb_client)]
ProgressTrackerDep = Annotated[ProgressTracker, Depends(get_progress_tracker)]
SeasonCheckerDep = Annotated[SeasonChecker, Depends(get_season_checker)]
AlertDismissalsDep = Annotated[AlertDismissalStore, Depends(get_alert_dismissals)]
OIDCClientDep = Annotated[OIDCClient, Depends(get_oidc_client)]
UserDep = Annotated[Optional[SessionData], Depends(require_user)]
