"""Photo set and volume repositories for database operations."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..database.models import DiscVolumeORM, PhotoSetORM, VolumeORM
from ..models.resources import PhotoSet, Volume
from .base import BaseRepository
from .movie_repository import disc_ref

SORT_COLUMNS = {
    "name": PhotoSetORM.name,
    "created_at": PhotoSetORM.created_at,
}


def volume_to_pydantic(
    volume_orm: VolumeORM, photo_set_name: str, with_discs: bool = True
) -> Volume:
    """
    Convert a volume ORM to its Pydantic model.

    Args:
        volume_orm: ORM volume
        photo_set_name: Name of the owning photo set
        with_discs: Include disc references (links must be loaded)

    Returns:
        Pydantic Volume model
    """
    return Volume(
        id=volume_orm.id,
        photo_set_id=volume_orm.photo_set_id,
        photo_set_name=photo_set_name,
        vol=volume_orm.vol,
        size=volume_orm.size,
        discs=[disc_ref(link) for link in volume_orm.disc_links] if with_discs else [],
    )


class PhotoSetRepository(BaseRepository[PhotoSetORM]):
    """Repository for photo set database operations."""

    def __init__(self, session: AsyncSession):
        """Initialize photo set repository."""
        super().__init__(PhotoSetORM, session)

    def _select_with_volumes(self):
        return (
            select(PhotoSetORM)
            .options(
                selectinload(PhotoSetORM.volumes)
                .selectinload(VolumeORM.disc_links)
                .selectinload(DiscVolumeORM.disc)
            )
            .execution_options(populate_existing=True)
        )

    async def get_with_volumes(self, photo_set_id: int) -> Optional[PhotoSetORM]:
        """
        Get photo set with volumes and their disc links eagerly loaded.

        Args:
            photo_set_id: Photo set ID

        Returns:
            Photo set ORM or None
        """
        result = await self.session.execute(
            self._select_with_volumes().where(PhotoSetORM.id == photo_set_id)
        )
        return result.scalar_one_or_none()

    async def list_page(
        self,
        page: int,
        page_size: int,
        sort_field: Optional[str] = None,
        descending: bool = True,
    ) -> tuple[list[PhotoSet], int]:
        """List photo sets with their volumes."""
        column = SORT_COLUMNS.get(sort_field or "created_at", PhotoSetORM.created_at)
        stmt = self._select_with_volumes().order_by(
            column.desc() if descending else column.asc()
        )
        photo_sets, total = await self.paginate(stmt, page, page_size)
        return [self.to_pydantic(p) for p in photo_sets], total

    def to_pydantic(self, photo_set_orm: PhotoSetORM) -> PhotoSet:
        """Convert ORM model loaded by ``get_with_volumes`` to Pydantic model."""
        return PhotoSet(
            id=photo_set_orm.id,
            name=photo_set_orm.name,
            size=photo_set_orm.size,
            created_at=photo_set_orm.created_at,
            volumes=[volume_to_pydantic(v, photo_set_orm.name) for v in photo_set_orm.volumes],
        )


class VolumeRepository(BaseRepository[VolumeORM]):
    """Repository for volume database operations."""

    def __init__(self, session: AsyncSession):
        """Initialize volume repository."""
        super().__init__(VolumeORM, session)

    async def get_with_discs(self, volume_id: int) -> Optional[VolumeORM]:
        """
        Get volume with its photo set and disc links eagerly loaded.

        Args:
            volume_id: Volume ID

        Returns:
            Volume ORM or None
        """
        result = await self.session.execute(
            select(VolumeORM)
            .where(VolumeORM.id == volume_id)
            .options(
                selectinload(VolumeORM.photo_set),
                selectinload(VolumeORM.disc_links).selectinload(DiscVolumeORM.disc),
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def ids_for_photo_set(self, photo_set_id: int) -> set[int]:
        """Get the IDs of every volume of a photo set."""
        result = await self.session.execute(
            select(VolumeORM.id).where(VolumeORM.photo_set_id == photo_set_id)
        )
        return set(result.scalars().all())

    async def sizes_for_photo_set(self, photo_set_id: int) -> list[Optional[int]]:
        """
        Get the size of every volume of a photo set.

        Args:
            photo_set_id: Photo set ID

        Returns:
            Volume sizes in KiB (None where unknown)
        """
        result = await self.session.execute(
            select(VolumeORM.size).where(VolumeORM.photo_set_id == photo_set_id)
        )
        return list(result.scalars().all())

    def to_pydantic(self, volume_orm: VolumeORM) -> Volume:
        """Convert ORM model loaded by ``get_with_discs`` to Pydantic model."""
        return volume_to_pydantic(volume_orm, volume_orm.photo_set.name)
