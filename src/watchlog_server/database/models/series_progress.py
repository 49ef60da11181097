"""Series progress ORM model."""

from datetime import datetime

from sqlalchemy import Integer, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from ..base import Base


class SeriesProgressORM(Base):
    """ORM model for series_progress table.

    One row per TMDB series. ``seasons`` and ``episodes`` hold JSON documents:

        seasons:  {"<season>": {"seen": bool, "updated_at": iso}}
        episodes: {"<season>": {"<episode>": {"seen": bool, "updated_at": iso}}}
    """

    __tablename__ = "series_progress"

    # Primary key
    series_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)

    seasons: Mapped[str] = mapped_column(Text, default="{}")
    episodes: Mapped[str] = mapped_column(Text, default="{}")

    updated_at: Mapped[datetime] = mapped_column(
        default=func.now(), onupdate=func.now()
    )
