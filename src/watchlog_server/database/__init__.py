"""Database package initialization."""

from .base import Base
from .config import get_database_url
from .session import SessionLocal, close_db, engine, init_db

__all__ = [
    "Base",
    "SessionLocal",
    "close_db",
    "engine",
    "get_database_url",
    "init_db",
]
