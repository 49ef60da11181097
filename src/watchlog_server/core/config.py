"""Server configuration."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Server configuration loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="WATCHLOG_",
        env_file=".env",
        extra="ignore",
    )

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # TMDB settings
    tmdb_api_key: Optional[str] = None  # Required for search, season lists and alerts
    tmdb_base_url: str = "https://api.themoviedb.org/3"
    tmdb_image_base_url: str = "https://image.tmdb.org/t/p/w500"
    tmdb_language: str = "en-US"
    metadata_cache_ttl_seconds: float = 300.0  # 5 minutes

    # Search settings
    search_min_query_length: int = 2
    search_result_limit: int = 10
    search_debounce_seconds: float = 0.3

    # New-season polling
    season_poll_delay_seconds: float = 0.2  # Pause between series to respect rate limits
    check_seasons_on_startup: bool = True

    # Database settings
    database_url: Optional[str] = None  # Default: sqlite+aiosqlite:////data/database/watchlog.db
    database_echo: bool = False

    # Device-local state (tracker baselines, dismissed alerts)
    state_dir: str = "/data/state"

    # OIDC settings (login is only enforced when client id is set)
    oidc_issuer_url: str = "https://replit.com/oidc"
    oidc_client_id: Optional[str] = None
    oidc_client_secret: Optional[str] = None
    oidc_scope: str = "openid email profile offline_access"
    oidc_config_ttl_seconds: float = 3600.0

    # Session cookie
    session_secret: str = "watchlog-dev-session-secret"
    session_cookie_name: str = "watchlog-session"
    session_cookie_secure: bool = False

    @property
    def auth_enabled(self) -> bool:
        """Whether data endpoints require a logged-in session."""
        return bool(self.oidc_client_id)


settings = Settings()
