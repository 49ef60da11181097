"""Series grouping models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .watch_entry import EntryKind, EntryStatus, WatchEntry


class ById(BaseModel):
    """Group key for series entries that carry a TMDB id."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["id"] = "id"
    tmdb_id: int


class ByTitle(BaseModel):
    """Group key for series entries without a TMDB id (normalized title)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["title"] = "title"
    title: str


GroupKey = Annotated[Union[ById, ByTitle], Field(discriminator="kind")]


class SortOrder(str, Enum):
    """Selectable ordering for the entry list."""

    DATE_DESC = "date_desc"
    DATE_ASC = "date_asc"
    RATING_DESC = "rating_desc"
    RATING_ASC = "rating_asc"
    TITLE_ASC = "title_asc"
    TITLE_DESC = "title_desc"


class EntryFilters(BaseModel):
    """Filters applied before grouping. All conditions are ANDed."""

    search: Optional[str] = None  # Case-insensitive substring on title
    kind: Optional[EntryKind] = None
    platform: Optional[str] = None
    status: Optional[EntryStatus] = None
    sort: SortOrder = SortOrder.DATE_DESC


@dataclass
class GroupedEntries:
    """Result of grouping: standalone movies plus series groups in display order."""

    standalone_movies: list[WatchEntry] = field(default_factory=list)
    series_groups: dict[Union[ById, ByTitle], list[WatchEntry]] = field(default_factory=dict)


class SeriesGroup(BaseModel):
    """Display view of one series group."""

    key: GroupKey
    representative: WatchEntry
    entries: list[WatchEntry]
    tmdb_id: Optional[int] = None

    # Aggregated across all entries of the group
    platforms: list[str] = Field(default_factory=list)
    statuses: list[EntryStatus] = Field(default_factory=list)
    max_rating: int = 0
    watch_again: bool = False
    genres: list[str] = Field(default_factory=list)


class GroupedEntriesView(BaseModel):
    """Response body for the grouped entry list."""

    standalone_movies: list[WatchEntry]
    series_groups: list[SeriesGroup]
