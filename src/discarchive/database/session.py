"""Database session management."""

import logging
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ..core.exceptions import StoreError
from .base import Base
from .config import get_database_echo, get_database_url

logger = logging.getLogger(__name__)


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """
    Turn on foreign key enforcement for every new SQLite connection.

    Args:
        engine: Async engine to instrument
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Create async engine
engine = create_async_engine(
    get_database_url(),
    echo=get_database_echo(),
    future=True,
)
enable_sqlite_foreign_keys(engine)

# Create session factory
SessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting database sessions.

    The whole request runs in one transaction: it is committed when the
    handler returns and rolled back on any exception.

    Yields:
        AsyncSession instance
    """
    async with SessionLocal() as session:
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Database error, transaction rolled back: {e}")
            raise StoreError("Database operation failed") from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db(bind: AsyncEngine | None = None) -> None:
    """
    Initialize database tables.

    Creates all tables defined in ORM models.

    Args:
        bind: Engine to create tables on (defaults to the application engine)
    """
    async with (bind or engine).begin() as conn:
        # Import all models to register them with Base
        from .models import (  # noqa: F401
            DiscEpisodeORM,
            DiscMovieORM,
            DiscORM,
            DiscOtherORM,
            DiscVolumeORM,
            EpisodeORM,
            InspectionRecordORM,
            MovieORM,
            OtherORM,
            PhotoSetORM,
            SeriesORM,
            VolumeORM,
        )

        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database initialized successfully")
