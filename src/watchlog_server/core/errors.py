"""Error taxonomy shared by services and API handlers.

Services catch library exceptions (httpx, SQLAlchemy) at their boundary and
re-raise one of these, so route handlers only ever see this hierarchy.
"""


class WatchlogError(Exception):
    """Base class for all application errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(WatchlogError):
    """Required configuration (e.g. the TMDB API key) is missing."""

    status_code = 503


class PersistencePermissionError(WatchlogError):
    """The database refused access. Carries remediation text for the user."""

    status_code = 403


class NetworkError(WatchlogError):
    """An external call (metadata API, database, identity provider) failed."""

    status_code = 502


class EntryValidationError(WatchlogError):
    """User input failed validation before any I/O happened."""

    status_code = 422


class NotFoundError(WatchlogError):
    """The requested record does not exist."""

    status_code = 404


def permission_denied(collection: str) -> PersistencePermissionError:
    """Build a permission error with remediation text for a collection."""
    return PersistencePermissionError(
        f"Database permission denied for '{collection}'. "
        f"Check that the database file and its directory are writable by the server "
        f"process (WATCHLOG_DATABASE_URL), then retry."
    )


_PERMISSION_MARKERS = (
    "permission denied",
    "readonly database",
    "access denied",
    "unable to open database",
)


def classify_database_error(error: Exception, collection: str) -> WatchlogError:
    """
    Map a database driver error onto the taxonomy.

    Args:
        error: Exception raised by the database layer
        collection: Table the operation touched

    Returns:
        PersistencePermissionError for access problems, NetworkError otherwise
    """
    message = str(error).lower()
    if any(marker in message for marker in _PERMISSION_MARKERS):
        return permission_denied(collection)
    return NetworkError(f"Database operation on '{collection}' failed: {error}")
