"""Normalized TMDB metadata records."""

from typing import Literal, Optional

from pydantic import BaseModel, Field


class SearchResult(BaseModel):
    """A movie or series candidate from multi-search."""

    id: int
    title: str
    year: str = ""  # 4-digit year or empty when unknown
    type: Literal["Movie", "Series"]
    poster_url: Optional[str] = None
    media_type: Literal["movie", "tv"]


class SeriesDetails(BaseModel):
    """Top-level series information."""

    id: int
    name: str
    season_count: int = 0
    episode_count: int = 0
    poster_url: Optional[str] = None
    first_air_date: Optional[str] = None


class EpisodeInfo(BaseModel):
    """An episode within a season."""

    episode_number: int
    title: str
    air_date: Optional[str] = None
    tmdb_id: int
    overview: Optional[str] = None
    runtime: Optional[int] = None  # Duration in minutes
    still_url: Optional[str] = None


class SeasonEpisodes(BaseModel):
    """A season with all of its episodes."""

    season_number: int
    tmdb_season_id: Optional[int] = None
    episodes: list[EpisodeInfo] = Field(default_factory=list)
    year: Optional[str] = None
    air_date: Optional[str] = None

    @property
    def year_value(self) -> Optional[int]:
        """Numeric release year, or None when no year can be derived."""
        if self.year and self.year.isdigit():
            return int(self.year)
        return None


class FullSeriesData(BaseModel):
    """Series title plus every non-empty season, ordered by release year."""

    title: str
    tmdb_id: int
    seasons: list[SeasonEpisodes] = Field(default_factory=list)
