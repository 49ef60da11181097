"""Series metadata and progress API endpoints."""

import logging

from fastapi import APIRouter

from watchlog_server.api.deps import ProgressTrackerDep, TMDBClientDep, UserDep
from watchlog_server.models.metadata import FullSeriesData, SeasonEpisodes, SeriesDetails
from watchlog_server.models.progress import (
    EpisodeSeenState,
    SeasonProgress,
    SeasonSeenState,
    SeenUpdate,
)
from watchlog_server.services.progress_tracker import SeasonChecklist

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/series", tags=["series"])


@router.get("/{tmdb_id}/details", response_model=SeriesDetails)
async def get_series_details(
    tmdb_id: int,
    tmdb_client: TMDBClientDep,
    _: UserDep,
) -> SeriesDetails:
    """Get series details from TMDB."""
    return await tmdb_client.get_series_details(tmdb_id)


@router.get("/{tmdb_id}/seasons", response_model=list[SeasonEpisodes])
async def get_series_seasons(
    tmdb_id: int,
    tmdb_client: TMDBClientDep,
    _: UserDep,
) -> list[SeasonEpisodes]:
    """Get non-empty seasons with episodes, oldest first."""
    return await tmdb_client.get_all_seasons(tmdb_id)


@router.get("/{tmdb_id}/full", response_model=FullSeriesData)
async def get_full_series(
    tmdb_id: int,
    tmdb_client: TMDBClientDep,
    _: UserDep,
) -> FullSeriesData:
    """Get series title with all seasons and episodes."""
    return await tmdb_client.get_full_series_data(tmdb_id)


@router.get("/{tmdb_id}/progress", response_model=SeasonProgress)
async def get_series_progress(
    tmdb_id: int,
    progress_tracker: ProgressTrackerDep,
    _: UserDep,
) -> SeasonProgress:
    """Get watched/total seasons."""
    return await progress_tracker.get_progress(tmdb_id)


@router.get("/{tmdb_id}/seasons/seen", response_model=SeasonSeenState)
async def get_seen_seasons(
    tmdb_id: int,
    progress_tracker: ProgressTrackerDep,
    _: UserDep,
) -> SeasonSeenState:
    """Get seen flags of all seasons."""
    seasons = await progress_tracker.get_all_seen_seasons(tmdb_id)
    return SeasonSeenState(tmdb_id=tmdb_id, seasons=seasons)


@router.put("/{tmdb_id}/seasons/{season_number}/seen", response_model=SeasonSeenState)
async def set_season_seen(
    tmdb_id: int,
    season_number: int,
    request: SeenUpdate,
    progress_tracker: ProgressTrackerDep,
    _: UserDep,
) -> SeasonSeenState:
    """Set the seen flag of a season."""
    await progress_tracker.set_season_seen(tmdb_id, season_number, request.seen)
    seasons = await progress_tracker.get_all_seen_seasons(tmdb_id)
    return SeasonSeenState(tmdb_id=tmdb_id, seasons=seasons)


@router.post("/{tmdb_id}/seasons/{season_number}/toggle", response_model=SeasonSeenState)
async def toggle_season_seen(
    tmdb_id: int,
    season_number: int,
    progress_tracker: ProgressTrackerDep,
    _: UserDep,
) -> SeasonSeenState:
    """Flip the seen flag of a season."""
    checklist = await SeasonChecklist.load(progress_tracker, tmdb_id)
    await checklist.toggle(season_number)
    return SeasonSeenState(tmdb_id=tmdb_id, seasons=checklist.seen)


@router.get("/{tmdb_id}/episodes/seen", response_model=EpisodeSeenState)
async def get_seen_episodes(
    tmdb_id: int,
    progress_tracker: ProgressTrackerDep,
    _: UserDep,
) -> EpisodeSeenState:
    """Get seen flags of all episodes, grouped by season."""
    episodes = await progress_tracker.get_all_seen_episodes(tmdb_id)
    return EpisodeSeenState(tmdb_id=tmdb_id, episodes=episodes)


@router.put(
    "/{tmdb_id}/seasons/{season_number}/episodes/{episode_number}/seen",
    response_model=EpisodeSeenState,
)
async def set_episode_seen(
    tmdb_id: int,
    season_number: int,
    episode_number: int,
    request: SeenUpdate,
    progress_tracker: ProgressTrackerDep,
    _: UserDep,
) -> EpisodeSeenState:
    """Set the seen flag of an episode."""
    await progress_tracker.set_episode_seen(tmdb_id, season_number, episode_number, request.seen)
    episodes = await progress_tracker.get_all_seen_episodes(tmdb_id)
    return EpisodeSeenState(tmdb_id=tmdb_id, episodes=episodes)
