"""FastAPI application entry point."""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from watchlog_server import __version__
from watchlog_server.api import (
    alerts_router,
    auth_router,
    entries_router,
    search_router,
    series_router,
)
from watchlog_server.api.deps import init_services
from watchlog_server.auth.oidc import OIDCClient
from watchlog_server.core.config import settings
from watchlog_server.core.errors import WatchlogError
from watchlog_server.database import close_db, init_db
from watchlog_server.services import (
    AlertDismissalStore,
    ProgressTracker,
    SeasonChecker,
    SeasonTrackerStore,
    TMDBClient,
    WatchLog,
)

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Service instances
watch_log = WatchLog()

if settings.tmdb_api_key:
    logger.info("TMDB API key configured")
else:
    logger.warning("TMDB API key not configured, search, season lists and alerts will be disabled")
tmdb_client = TMDBClient(settings.tmdb_api_key)

progress_tracker = ProgressTracker(tmdb_client)

state_dir = Path(settings.state_dir)
season_checker = SeasonChecker(
    tmdb_client,
    SeasonTrackerStore(state_dir),
    AlertDismissalStore(state_dir),
)

if settings.auth_enabled:
    logger.info("Login enabled")
else:
    logger.info("Login disabled, API endpoints are open")
oidc_client = OIDCClient(
    settings.oidc_issuer_url,
    settings.oidc_client_id,
    settings.oidc_client_secret,
)

_startup_check: Optional[asyncio.Task] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    global _startup_check

    # Startup
    logger.info(f"Starting Watchlog Server v{__version__}")

    # Initialize database
    logger.info("Initializing database...")
    await init_db()
    logger.info("Database initialized")

    init_services(watch_log, tmdb_client, progress_tracker, season_checker, oidc_client)

    if settings.tmdb_api_key and settings.check_seasons_on_startup:
        _startup_check = asyncio.create_task(season_checker.check_all())

    logger.info(f"Server ready on {settings.host}:{settings.port}")

    yield

    # Shutdown
    logger.info("Shutting down...")
    if _startup_check and not _startup_check.done():
        _startup_check.cancel()
    await tmdb_client.close()
    await oidc_client.close()
    await close_db()


app = FastAPI(
    title="Watchlog Server",
    description="Movie and series watch tracking with new-season alerts",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(WatchlogError)
async def watchlog_error_handler(request: Request, exc: WatchlogError) -> JSONResponse:
    """Render application errors with their status code."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": type(exc).__name__},
    )


# Include routers
app.include_router(auth_router)
app.include_router(entries_router)
app.include_router(series_router)
app.include_router(alerts_router)
app.include_router(search_router)


@app.get("/")
async def root() -> dict:
    """Root endpoint with server info."""
    return {
        "name": "Watchlog Server",
        "version": __version__,
        "status": "running",
    }


@app.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": __version__,
        "tmdb_configured": bool(settings.tmdb_api_key),
        "auth_enabled": settings.auth_enabled,
        "tracked_series": len(season_checker.tracker_store.get_tracked_series()),
        "pending_alerts": len(season_checker.visible_alerts()),
    }


def run() -> None:
    """Run the server with uvicorn."""
    import uvicorn

    uvicorn.run(
        "watchlog_server.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
