"""Database-backed watch entry log."""

import logging
from datetime import date
from uuid import uuid4

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import EntryValidationError, NotFoundError, classify_database_error
from ..database.session import SessionLocal
from ..models.watch_entry import WatchEntry, WatchEntryCreate
from ..repositories.watch_entry_repository import WatchEntryRepository

logger = logging.getLogger(__name__)

COLLECTION = "watch_entries"


def validate_entry(data: WatchEntryCreate) -> WatchEntryCreate:
    """
    Check required fields before any I/O.

    Args:
        data: Form data

    Returns:
        Form data with the title trimmed

    Raises:
        EntryValidationError: If a required field is missing or invalid
    """
    title = data.title.strip()
    if not title or not data.watch_date:
        raise EntryValidationError("Please fill in all required fields")

    try:
        date.fromisoformat(data.watch_date)
    except ValueError:
        raise EntryValidationError(f"Invalid watch date: {data.watch_date}")

    if not 0 <= data.rating <= 5:
        raise EntryValidationError("Rating must be between 0 and 5")

    return data.model_copy(update={"title": title})


class WatchLog:
    """Manages watch entries with database persistence."""

    async def _get_session(self) -> AsyncSession:
        """Get a new database session."""
        return SessionLocal()

    async def get_entries(self) -> list[WatchEntry]:
        """Get all entries, most recent watch date first."""
        try:
            async with await self._get_session() as session:
                repo = WatchEntryRepository(session)
                return [repo.to_pydantic(e) for e in await repo.get_all_ordered()]
        except SQLAlchemyError as e:
            logger.error(f"Error fetching entries: {e}")
            raise classify_database_error(e, COLLECTION) from e

    async def get_entry(self, entry_id: str) -> WatchEntry:
        """
        Get a single entry.

        Raises:
            NotFoundError: If the entry does not exist
        """
        try:
            async with await self._get_session() as session:
                repo = WatchEntryRepository(session)
                entry_orm = await repo.get(entry_id)
                if entry_orm:
                    return repo.to_pydantic(entry_orm)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching entry {entry_id}: {e}")
            raise classify_database_error(e, COLLECTION) from e

        raise NotFoundError(f"Entry not found: {entry_id}")

    async def create_entry(self, data: WatchEntryCreate) -> WatchEntry:
        """Validate and store a new entry."""
        data = validate_entry(data)

        try:
            async with await self._get_session() as session:
                repo = WatchEntryRepository(session)
                entry_orm = await repo.create_from_pydantic(str(uuid4()), data)
                await session.commit()
                entry = repo.to_pydantic(entry_orm)
        except SQLAlchemyError as e:
            logger.error(f"Error creating entry: {e}")
            raise classify_database_error(e, COLLECTION) from e

        logger.info(f"Entry created: {entry.id} - {entry.title} ({entry.kind.value})")
        return entry

    async def update_entry(self, entry_id: str, data: WatchEntryCreate) -> WatchEntry:
        """
        Validate and replace an existing entry.

        Raises:
            NotFoundError: If the entry does not exist
        """
        data = validate_entry(data)

        try:
            async with await self._get_session() as session:
                repo = WatchEntryRepository(session)
                entry_orm = await repo.update_from_pydantic(entry_id, data)
                if not entry_orm:
                    raise NotFoundError(f"Entry not found: {entry_id}")
                await session.commit()
                entry = repo.to_pydantic(entry_orm)
        except SQLAlchemyError as e:
            logger.error(f"Error updating entry {entry_id}: {e}")
            raise classify_database_error(e, COLLECTION) from e

        logger.info(f"Entry updated: {entry.id} - {entry.title}")
        return entry

    async def delete_entry(self, entry_id: str) -> None:
        """
        Delete an entry.

        Raises:
            NotFoundError: If the entry does not exist
        """
        try:
            async with await self._get_session() as session:
                repo = WatchEntryRepository(session)
                deleted = await repo.delete_by_id(entry_id)
                if not deleted:
                    raise NotFoundError(f"Entry not found: {entry_id}")
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error deleting entry {entry_id}: {e}")
            raise classify_database_error(e, COLLECTION) from e

        logger.info(f"Entry deleted: {entry_id}")
