"""Series progress models."""

from pydantic import BaseModel


class SeasonProgress(BaseModel):
    """Watched/total seasons for a series."""

    watched: int = 0
    total: int = 0
    percentage: int = 0

    @classmethod
    def compute(cls, watched: int, total: int) -> "SeasonProgress":
        percentage = round(watched / total * 100) if total > 0 else 0
        return cls(watched=watched, total=total, percentage=percentage)


class SeenUpdate(BaseModel):
    """Request body for setting a seen flag."""

    seen: bool


class SeasonSeenState(BaseModel):
    """Seen flags for the seasons of one series."""

    tmdb_id: int
    seasons: dict[int, bool]


class EpisodeSeenState(BaseModel):
    """Seen flags for the episodes of one series, grouped by season."""

    tmdb_id: int
    episodes: dict[int, dict[int, bool]]
