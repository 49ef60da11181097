"""Watch entry repository for database operations."""

import json
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.models.watch_entry import WatchEntryORM
from ..models.watch_entry import EntryKind, EntryStatus, WatchEntry, WatchEntryCreate
from .base import BaseRepository


class WatchEntryRepository(BaseRepository[WatchEntryORM]):
    """Repository for watch entry database operations."""

    def __init__(self, session: AsyncSession):
        """Initialize watch entry repository."""
        super().__init__(WatchEntryORM, session)

    async def create_from_pydantic(self, entry_id: str, data: WatchEntryCreate) -> WatchEntryORM:
        """
        Create a watch entry from form data.

        Args:
            entry_id: New entry ID
            data: Validated form data

        Returns:
            ORM entry instance
        """
        entry_orm = WatchEntryORM(id=entry_id)
        self._apply(entry_orm, data)
        return await self.create(entry_orm)

    async def update_from_pydantic(
        self, entry_id: str, data: WatchEntryCreate
    ) -> Optional[WatchEntryORM]:
        """
        Replace the fields of an existing entry.

        Args:
            entry_id: Entry ID
            data: Validated form data

        Returns:
            Updated ORM entry or None if not found
        """
        entry_orm = await self.get(entry_id)
        if not entry_orm:
            return None

        self._apply(entry_orm, data)
        return await self.update(entry_orm)

    async def get_all_ordered(self) -> list[WatchEntryORM]:
        """
        Get all entries, most recent watch date first.

        Returns:
            List of ORM entries
        """
        result = await self.session.execute(
            select(WatchEntryORM).order_by(
                WatchEntryORM.watch_date.desc(), WatchEntryORM.created_at.desc()
            )
        )
        return list(result.scalars().all())

    @staticmethod
    def _apply(entry_orm: WatchEntryORM, data: WatchEntryCreate) -> None:
        """Copy form fields onto the ORM row. Unset optional fields stay NULL."""
        entry_orm.title = data.title.strip()
        entry_orm.watch_date = data.watch_date
        entry_orm.kind = data.kind.value
        entry_orm.rating = data.rating
        entry_orm.watch_again = data.watch_again
        entry_orm.platform = data.platform or None
        entry_orm.notes = data.notes or None
        entry_orm.status = data.status.value if data.status else None
        entry_orm.season = data.season
        entry_orm.episode = data.episode
        entry_orm.cover_image = data.cover_image or None
        entry_orm.genres = json.dumps(data.genres) if data.genres else None
        entry_orm.tmdb_id = data.tmdb_id

    def to_pydantic(self, entry_orm: WatchEntryORM) -> WatchEntry:
        """
        Convert ORM model to Pydantic model.

        Args:
            entry_orm: ORM entry instance

        Returns:
            Pydantic WatchEntry model
        """
        optional = {
            "platform": entry_orm.platform,
            "notes": entry_orm.notes,
            "status": EntryStatus(entry_orm.status) if entry_orm.status else None,
            "season": entry_orm.season,
            "episode": entry_orm.episode,
            "cover_image": entry_orm.cover_image,
            "genres": json.loads(entry_orm.genres) if entry_orm.genres else None,
            "tmdb_id": entry_orm.tmdb_id,
        }

        return WatchEntry(
            id=entry_orm.id,
            title=entry_orm.title,
            watch_date=entry_orm.watch_date,
            kind=EntryKind(entry_orm.kind),
            rating=entry_orm.rating,
            watch_again=bool(entry_orm.watch_again),
            created_at=entry_orm.created_at,
            updated_at=entry_orm.updated_at,
            **{key: value for key, value in optional.items() if value is not None},
        )
