"""Watch entry API endpoints."""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Response

from watchlog_server.api.deps import SeasonCheckerDep, UserDep, WatchLogDep
from watchlog_server.core.errors import WatchlogError
from watchlog_server.models.series import EntryFilters, GroupedEntriesView, SortOrder
from watchlog_server.models.watch_entry import EntryKind, EntryStatus, WatchEntry, WatchEntryCreate
from watchlog_server.services.csv_export import export_entries_csv
from watchlog_server.services.season_checker import SeasonChecker
from watchlog_server.services.series_grouper import (
    aggregate_group,
    filter_entries,
    group_entries,
    sort_entries,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/entries", tags=["entries"])


def entry_filters(
    search: Optional[str] = None,
    kind: Optional[EntryKind] = None,
    platform: Optional[str] = None,
    status: Optional[EntryStatus] = None,
    sort: SortOrder = SortOrder.DATE_DESC,
) -> EntryFilters:
    """Build filters from query parameters."""
    return EntryFilters(search=search, kind=kind, platform=platform, status=status, sort=sort)


FiltersDep = Annotated[EntryFilters, Depends(entry_filters)]


async def refresh_series_tracking(season_checker: SeasonChecker, entry: WatchEntry) -> None:
    """Seed the season baseline of a series entry, then run a check pass."""
    try:
        await season_checker.seed_series(entry.tmdb_id, entry.title, entry.cover_image)
    except WatchlogError as e:
        logger.warning(f"Could not track series {entry.tmdb_id}: {e.message}")
        return

    await season_checker.check_all()


def _schedule_tracking(
    background_tasks: BackgroundTasks, season_checker: SeasonChecker, entry: WatchEntry
) -> None:
    if entry.kind == EntryKind.SERIES and entry.tmdb_id is not None:
        background_tasks.add_task(refresh_series_tracking, season_checker, entry)


@router.get("", response_model=list[WatchEntry], response_model_exclude_none=True)
async def list_entries(
    watch_log: WatchLogDep,
    filters: FiltersDep,
    _: UserDep,
) -> list[WatchEntry]:
    """List entries, filtered and sorted."""
    entries = await watch_log.get_entries()
    return sort_entries(filter_entries(entries, filters), filters.sort)


@router.get("/grouped", response_model=GroupedEntriesView, response_model_exclude_none=True)
async def list_grouped_entries(
    watch_log: WatchLogDep,
    filters: FiltersDep,
    _: UserDep,
) -> GroupedEntriesView:
    """List standalone movies and series groups."""
    grouped = group_entries(await watch_log.get_entries(), filters)
    return GroupedEntriesView(
        standalone_movies=grouped.standalone_movies,
        series_groups=[
            aggregate_group(key, entries) for key, entries in grouped.series_groups.items()
        ],
    )


@router.get("/export")
async def export_entries(
    watch_log: WatchLogDep,
    _: UserDep,
) -> Response:
    """Download all entries as CSV."""
    filename, content = export_entries_csv(await watch_log.get_entries())
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("", response_model=WatchEntry, response_model_exclude_none=True)
async def create_entry(
    request: WatchEntryCreate,
    watch_log: WatchLogDep,
    season_checker: SeasonCheckerDep,
    background_tasks: BackgroundTasks,
    _: UserDep,
) -> WatchEntry:
    """Create a new entry."""
    entry = await watch_log.create_entry(request)
    _schedule_tracking(background_tasks, season_checker, entry)
    return entry


@router.get("/{entry_id}", response_model=WatchEntry, response_model_exclude_none=True)
async def get_entry(
    entry_id: str,
    watch_log: WatchLogDep,
    _: UserDep,
) -> WatchEntry:
    """Get a specific entry."""
    return await watch_log.get_entry(entry_id)


@router.put("/{entry_id}", response_model=WatchEntry, response_model_exclude_none=True)
async def update_entry(
    entry_id: str,
    request: WatchEntryCreate,
    watch_log: WatchLogDep,
    season_checker: SeasonCheckerDep,
    background_tasks: BackgroundTasks,
    _: UserDep,
) -> WatchEntry:
    """Replace an entry."""
    entry = await watch_log.update_entry(entry_id, request)
    _schedule_tracking(background_tasks, season_checker, entry)
    return entry


@router.delete("/{entry_id}")
async def delete_entry(
    entry_id: str,
    watch_log: WatchLogDep,
    _: UserDep,
) -> dict:
    """Delete an entry."""
    await watch_log.delete_entry(entry_id)
    return {"status": "ok", "id": entry_id}
