"""Tests for settings and the error taxonomy."""

from sqlalchemy.exc import OperationalError

from watchlog_server.core.config import Settings
from watchlog_server.core.errors import (
    NetworkError,
    PersistencePermissionError,
    classify_database_error,
)


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("WATCHLOG_TMDB_API_KEY", "abc123")
    monkeypatch.setenv("WATCHLOG_SEARCH_DEBOUNCE_SECONDS", "0.5")

    settings = Settings()

    assert settings.tmdb_api_key == "abc123"
    assert settings.search_debounce_seconds == 0.5
    assert settings.metadata_cache_ttl_seconds == 300.0
    assert settings.auth_enabled is False


def test_auth_enabled_with_client_id(monkeypatch):
    monkeypatch.setenv("WATCHLOG_OIDC_CLIENT_ID", "client")

    assert Settings().auth_enabled is True


def test_permission_errors_get_remediation():
    error = OperationalError("INSERT", {}, Exception("attempt to write a readonly database"))

    classified = classify_database_error(error, "watch_entries")

    assert isinstance(classified, PersistencePermissionError)
    assert classified.status_code == 403
    assert "watch_entries" in classified.message
    assert "writable" in classified.message


def test_other_database_errors_are_network_errors():
    error = OperationalError("SELECT", {}, Exception("disk I/O error"))

    classified = classify_database_error(error, "series_progress")

    assert isinstance(classified, NetworkError)
    assert classified.status_code == 502
