"""User repository for database operations."""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..database.models.user import UserORM
from ..models.user import User
from .base import BaseRepository


class UserRepository(BaseRepository[UserORM]):
    """Repository for user database operations."""

    def __init__(self, session: AsyncSession):
        """Initialize user repository."""
        super().__init__(UserORM, session)

    async def upsert(self, user: User) -> User:
        """
        Insert a user or refresh the stored profile fields.

        Args:
            user: User built from OIDC claims

        Returns:
            Stored user
        """
        user_orm = await self.get(user.id)
        if user_orm:
            user_orm.email = user.email
            user_orm.name = user.name
            user_orm.profile_image_url = user.profile_image_url
            user_orm = await self.update(user_orm)
        else:
            user_orm = await self.create(
                UserORM(
                    id=user.id,
                    email=user.email,
                    name=user.name,
                    profile_image_url=user.profile_image_url,
                )
            )
        return self.to_pydantic(user_orm)

    async def get_user(self, user_id: str) -> Optional[User]:
        """Get a user by OIDC subject."""
        user_orm = await self.get(user_id)
        return self.to_pydantic(user_orm) if user_orm else None

    def to_pydantic(self, user_orm: UserORM) -> User:
        """Convert ORM model to Pydantic model."""
        return User(
            id=user_orm.id,
            email=user_orm.email,
            name=user_orm.name,
            profile_image_url=user_orm.profile_image_url,
        )
