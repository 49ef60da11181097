"""User ORM model."""

from datetime import datetime
from typing import Optional

from sqlalchemy import String, func
from sqlalchemy.orm import Mapped, mapped_column

from ..base import Base


class UserORM(Base):
    """ORM model for users table."""

    __tablename__ = "users"

    # Primary key (OIDC subject)
    id: Mapped[str] = mapped_column(String(255), primary_key=True)

    email: Mapped[Optional[str]] = mapped_column(String(255))
    name: Mapped[Optional[str]] = mapped_column(String(255))
    profile_image_url: Mapped[Optional[str]] = mapped_column(String(512))

    created_at: Mapped[datetime] = mapped_column(default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        default=func.now(), onupdate=func.now()
    )
