"""Shared test fixtures."""

import os

# Keep the application engine off the real data directory
os.environ.setdefault("DISCARCHIVE_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from discarchive.database import enable_sqlite_foreign_keys, init_db


@pytest.fixture
async def engine(tmp_path):
    """Create a file-backed SQLite engine with all tables."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    enable_sqlite_foreign_keys(engine)
    await init_db(bind=engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    """Session factory configured like the application's."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def session(session_factory):
    """Open a database session."""
    async with session_factory() as session:
        yield session
