"""Database package initialization."""

from .base import Base
from .config import get_database_url
from .session import SessionLocal, enable_sqlite_foreign_keys, engine, get_db, init_db

__all__ = [
    "Base",
    "SessionLocal",
    "enable_sqlite_foreign_keys",
    "engine",
    "get_db",
    "get_database_url",
    "init_db",
]
