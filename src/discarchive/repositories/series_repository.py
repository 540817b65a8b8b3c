"""Series and episode repositories for database operations."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..database.models import DiscEpisodeORM, EpisodeORM, SeriesORM
from ..models.resources import Episode, Series
from .base import BaseRepository
from .movie_repository import disc_ref

SORT_COLUMNS = {
    "name": SeriesORM.name,
    "created_at": SeriesORM.created_at,
}


def episode_to_pydantic(
    episode_orm: EpisodeORM, series_name: str, with_discs: bool = True
) -> Episode:
    """
    Convert an episode ORM to its Pydantic model.

    Args:
        episode_orm: ORM episode
        series_name: Name of the owning series
        with_discs: Include disc references (links must be loaded)

    Returns:
        Pydantic Episode model
    """
    return Episode(
        id=episode_orm.id,
        series_id=episode_orm.series_id,
        series_name=series_name,
        season=episode_orm.season,
        episode=episode_orm.episode,
        size=episode_orm.size,
        format=episode_orm.format,
        codec=episode_orm.codec,
        discs=[disc_ref(link) for link in episode_orm.disc_links] if with_discs else [],
    )


class SeriesRepository(BaseRepository[SeriesORM]):
    """Repository for series database operations."""

    def __init__(self, session: AsyncSession):
        """Initialize series repository."""
        super().__init__(SeriesORM, session)

    def _select_with_episodes(self):
        return (
            select(SeriesORM)
            .options(
                selectinload(SeriesORM.episodes)
                .selectinload(EpisodeORM.disc_links)
                .selectinload(DiscEpisodeORM.disc)
            )
            .execution_options(populate_existing=True)
        )

    async def get_with_episodes(self, series_id: int) -> Optional[SeriesORM]:
        """
        Get series with episodes and their disc links eagerly loaded.

        Args:
            series_id: Series ID

        Returns:
            Series ORM or None
        """
        result = await self.session.execute(
            self._select_with_episodes().where(SeriesORM.id == series_id)
        )
        return result.scalar_one_or_none()

    async def list_page(
        self,
        page: int,
        page_size: int,
        sort_field: Optional[str] = None,
        descending: bool = True,
    ) -> tuple[list[Series], int]:
        """List series with their episodes."""
        column = SORT_COLUMNS.get(sort_field or "created_at", SeriesORM.created_at)
        stmt = self._select_with_episodes().order_by(
            column.desc() if descending else column.asc()
        )
        series, total = await self.paginate(stmt, page, page_size)
        return [self.to_pydantic(s) for s in series], total

    def to_pydantic(self, series_orm: SeriesORM) -> Series:
        """
        Convert ORM model to Pydantic model.

        Args:
            series_orm: ORM series loaded by ``get_with_episodes``

        Returns:
            Pydantic Series model
        """
        return Series(
            id=series_orm.id,
            name=series_orm.name,
            size=series_orm.size,
            created_at=series_orm.created_at,
            episodes=[episode_to_pydantic(ep, series_orm.name) for ep in series_orm.episodes],
        )


class EpisodeRepository(BaseRepository[EpisodeORM]):
    """Repository for episode database operations."""

    def __init__(self, session: AsyncSession):
        """Initialize episode repository."""
        super().__init__(EpisodeORM, session)

    async def get_with_discs(self, episode_id: int) -> Optional[EpisodeORM]:
        """
        Get episode with its series and disc links eagerly loaded.

        Args:
            episode_id: Episode ID

        Returns:
            Episode ORM or None
        """
        result = await self.session.execute(
            select(EpisodeORM)
            .where(EpisodeORM.id == episode_id)
            .options(
                selectinload(EpisodeORM.series),
                selectinload(EpisodeORM.disc_links).selectinload(DiscEpisodeORM.disc),
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def ids_for_series(self, series_id: int) -> set[int]:
        """Get the IDs of every episode of a series."""
        result = await self.session.execute(
            select(EpisodeORM.id).where(EpisodeORM.series_id == series_id)
        )
        return set(result.scalars().all())

    async def sizes_for_series(self, series_id: int) -> list[Optional[int]]:
        """
        Get the size of every episode of a series.

        Args:
            series_id: Series ID

        Returns:
            Episode sizes in KiB (None where unknown)
        """
        result = await self.session.execute(
            select(EpisodeORM.size).where(EpisodeORM.series_id == series_id)
        )
        return list(result.scalars().all())

    def to_pydantic(self, episode_orm: EpisodeORM) -> Episode:
        """Convert ORM model loaded by ``get_with_discs`` to Pydantic model."""
        return episode_to_pydantic(episode_orm, episode_orm.series.name)
