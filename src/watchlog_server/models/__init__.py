"""Pydantic models for API requests/responses and domain objects."""

from .alerts import NewSeasonAlert, SeriesSeasonTracker
from .metadata import EpisodeInfo, FullSeriesData, SearchResult, SeasonEpisodes, SeriesDetails
from .progress import SeasonProgress
from .series import (
    ById,
    ByTitle,
    EntryFilters,
    GroupedEntries,
    GroupedEntriesView,
    GroupKey,
    SeriesGroup,
    SortOrder,
)
from .user import SessionData, User
from .watch_entry import EntryKind, EntryStatus, WatchEntry, WatchEntryCreate

__all__ = [
    "ById",
    "ByTitle",
    "EntryFilters",
    "EntryKind",
    "EntryStatus",
    "EpisodeInfo",
    "FullSeriesData",
    "GroupKey",
    "GroupedEntries",
    "GroupedEntriesView",
    "NewSeasonAlert",
    "SearchResult",
    "SeasonEpisodes",
    "SeasonProgress",
    "SeriesDetails",
    "SeriesGroup",
    "SeriesSeasonTracker",
    "SessionData",
    "SortOrder",
    "User",
    "WatchEntry",
    "WatchEntryCreate",
]
