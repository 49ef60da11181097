"""Shared repository plumbing for the watch log tables."""

from typing import Callable, Generic, Optional, Type, TypeVar, Union

from sqlalchemy.ext.asyncio import AsyncSession

from ..database.base import Base

T = TypeVar("T", bound=Base)

RowKey = Union[str, int]


class BaseRepository(Generic[T]):
    """Primary-key access to one table within a caller-owned session.

    Writes are flushed but never committed; the service that opened the
    session decides when the unit of work ends.
    """

    def __init__(self, model: Type[T], session: AsyncSession):
        self.model = model
        self.session = session

    async def get(self, key: RowKey) -> Optional[T]:
        """Load a row by primary key (entry UUID, TMDB series ID or OIDC subject)."""
        return await self.session.get(self.model, key)

    async def create(self, row: T) -> T:
        """Insert a row and reload server-side defaults such as timestamps."""
        self.session.add(row)
        await self.session.flush()
        await self.session.refresh(row)
        return row

    async def update(self, row: T) -> T:
        """Flush in-place changes to a loaded row and reload it."""
        await self.session.flush()
        await self.session.refresh(row)
        return row

    async def get_or_create(self, key: RowKey, factory: Callable[[], T]) -> T:
        """
        Load a row, inserting the one built by factory when it is missing.

        Args:
            key: Primary key value
            factory: Builds the empty row for key

        Returns:
            Existing or newly inserted row
        """
        row = await self.get(key)
        if row is not None:
            return row
        return await self.create(factory())

    async def delete_by_id(self, key: RowKey) -> bool:
        """
        Delete a row by primary key.

        Returns:
            True if a row was deleted, False if none matched
        """
        row = await self.get(key)
        if row is None:
            return False
        await self.session.delete(row)
        await self.session.flush()
        return True
