"""Filtering, sorting and series grouping of watch entries."""

import logging
from typing import Optional, Union

from ..models.series import ById, ByTitle, EntryFilters, GroupedEntries, SeriesGroup, SortOrder
from ..models.watch_entry import EntryKind, WatchEntry

logger = logging.getLogger(__name__)


def normalize_title(title: str) -> str:
    """Normalize a title for grouping (lowercase, trimmed)."""
    return title.strip().lower()


def filter_entries(entries: list[WatchEntry], filters: EntryFilters) -> list[WatchEntry]:
    """
    Apply the title search and equality filters.

    Args:
        entries: Entries to filter
        filters: Active filters (all conditions must match)

    Returns:
        Matching entries in their original order
    """
    needle = filters.search.strip().lower() if filters.search else ""

    def matches(entry: WatchEntry) -> bool:
        if needle and needle not in entry.title.lower():
            return False
        if filters.kind and entry.kind != filters.kind:
            return False
        if filters.platform and entry.platform != filters.platform:
            return False
        if filters.status and entry.status != filters.status:
            return False
        return True

    return [entry for entry in entries if matches(entry)]


def sort_entries(entries: list[WatchEntry], order: SortOrder) -> list[WatchEntry]:
    """Sort entries by the selected order. The sort is stable."""
    if order == SortOrder.DATE_ASC:
        return sorted(entries, key=lambda e: e.watch_date)
    if order == SortOrder.DATE_DESC:
        return sorted(entries, key=lambda e: e.watch_date, reverse=True)
    if order == SortOrder.RATING_ASC:
        return sorted(entries, key=lambda e: e.rating)
    if order == SortOrder.RATING_DESC:
        return sorted(entries, key=lambda e: e.rating, reverse=True)
    if order == SortOrder.TITLE_ASC:
        return sorted(entries, key=lambda e: e.title.lower())
    if order == SortOrder.TITLE_DESC:
        return sorted(entries, key=lambda e: e.title.lower(), reverse=True)
    raise ValueError(f"Unknown sort order: {order}")


def group_key(entry: WatchEntry) -> Optional[Union[ById, ByTitle]]:
    """
    Get the series group key of an entry.

    Returns:
        ById for series with a TMDB id, ByTitle for other series,
        None for movies (which never group)
    """
    if entry.kind != EntryKind.SERIES:
        return None
    if entry.tmdb_id is not None:
        return ById(tmdb_id=entry.tmdb_id)
    return ByTitle(title=normalize_title(entry.title))


def group_entries(entries: list[WatchEntry], filters: Optional[EntryFilters] = None) -> GroupedEntries:
    """
    Filter, sort, then partition entries into standalone movies and series groups.

    Groups appear in the order of their first member in the sorted list.

    Args:
        entries: All watch entries
        filters: Optional filters and sort order

    Returns:
        GroupedEntries
    """
    filters = filters or EntryFilters()
    ordered = sort_entries(filter_entries(entries, filters), filters.sort)

    grouped = GroupedEntries()
    for entry in ordered:
        key = group_key(entry)
        if key is None:
            grouped.standalone_movies.append(entry)
        else:
            grouped.series_groups.setdefault(key, []).append(entry)

    logger.debug(
        f"Grouped {len(ordered)} entries: {len(grouped.standalone_movies)} movies, "
        f"{len(grouped.series_groups)} series"
    )
    return grouped


def pick_representative(entries: list[WatchEntry]) -> WatchEntry:
    """
    Choose the entry whose metadata is displayed for a series group.

    Preference: cover image and TMDB id, then cover image, then TMDB id,
    then the first entry.
    """
    if not entries:
        raise ValueError("Cannot pick a representative from an empty group")

    for predicate in (
        lambda e: bool(e.cover_image) and e.tmdb_id is not None,
        lambda e: bool(e.cover_image),
        lambda e: e.tmdb_id is not None,
    ):
        for entry in entries:
            if predicate(entry):
                return entry
    return entries[0]


def group_tmdb_id(entries: list[WatchEntry]) -> Optional[int]:
    """TMDB id of any member of the group that has one."""
    return next((e.tmdb_id for e in entries if e.tmdb_id is not None), None)


def aggregate_group(key: Union[ById, ByTitle], entries: list[WatchEntry]) -> SeriesGroup:
    """Build the display view of a series group with metadata merged across entries."""
    platforms: list[str] = []
    statuses = []
    genres: list[str] = []

    for entry in entries:
        if entry.platform and entry.platform not in platforms:
            platforms.append(entry.platform)
        if entry.status and entry.status not in statuses:
            statuses.append(entry.status)
        for genre in entry.genres or []:
            if genre not in genres:
                genres.append(genre)

    return SeriesGroup(
        key=key,
        representative=pick_representative(entries),
        entries=entries,
        tmdb_id=group_tmdb_id(entries),
        platforms=platforms,
        statuses=statuses,
        max_rating=max((e.rating for e in entries), default=0),
        watch_again=any(e.watch_again for e in entries),
        genres=genres,
    )
