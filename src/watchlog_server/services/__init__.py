"""Server services."""

from .alert_dismissals import AlertDismissalStore
from .progress_tracker import ProgressTracker
from .season_checker import SeasonChecker
from .season_tracker import SeasonTrackerStore
from .tmdb_client import TMDBClient
from .watch_log import WatchLog

__all__ = [
    "AlertDismissalStore",
    "ProgressTracker",
    "SeasonChecker",
    "SeasonTrackerStore",
    "TMDBClient",
    "WatchLog",
]
