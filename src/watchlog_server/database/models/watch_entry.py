"""Watch entry ORM model."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from ..base import Base


class WatchEntryORM(Base):
    """ORM model for watch_entries table."""

    __tablename__ = "watch_entries"

    # Primary key
    id: Mapped[str] = mapped_column(String(36), primary_key=True)

    # Required fields
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    watch_date: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    kind: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    rating: Mapped[int] = mapped_column(Integer, default=0)
    watch_again: Mapped[bool] = mapped_column(Boolean, default=False)

    # Optional fields (NULL means the field was never set)
    platform: Mapped[Optional[str]] = mapped_column(String(100))
    notes: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[Optional[str]] = mapped_column(String(20))
    season: Mapped[Optional[int]] = mapped_column(Integer)
    episode: Mapped[Optional[int]] = mapped_column(Integer)
    cover_image: Mapped[Optional[str]] = mapped_column(String(512))
    genres: Mapped[Optional[str]] = mapped_column(Text)  # JSON array string
    tmdb_id: Mapped[Optional[int]] = mapped_column(Integer, index=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        default=func.now(), onupdate=func.now()
    )
