"""Disc repository for database operations."""

import datetime as dt
from typing import Optional

from sqlalchemy import exists, select, union_all
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..database.models import (
    DiscEpisodeORM,
    DiscMovieORM,
    DiscORM,
    DiscOtherORM,
    DiscVolumeORM,
    EpisodeORM,
    InspectionRecordORM,
    MovieORM,
    OtherORM,
    VolumeORM,
)
from ..models.disc import (
    Disc,
    DiscEpisodeEntry,
    DiscMovieEntry,
    DiscOtherEntry,
    DiscType,
    DiscVolumeEntry,
    InspectionRecord,
    MovieInfo,
    OtherInfo,
)
from .base import BaseRepository
from .photo_set_repository import volume_to_pydantic
from .series_repository import episode_to_pydantic

SORT_COLUMNS = {
    "code": DiscORM.code,
    "created_at": DiscORM.created_at,
}

# Everything needed to render a disc without lazy loads
DISC_LOAD_OPTIONS = (
    selectinload(DiscORM.movie_links).selectinload(DiscMovieORM.movie),
    selectinload(DiscORM.episode_links)
    .selectinload(DiscEpisodeORM.episode)
    .selectinload(EpisodeORM.series),
    selectinload(DiscORM.volume_links)
    .selectinload(DiscVolumeORM.volume)
    .selectinload(VolumeORM.photo_set),
    selectinload(DiscORM.other_links).selectinload(DiscOtherORM.other),
    selectinload(DiscORM.history),
)


def inspection_to_pydantic(record: InspectionRecordORM) -> InspectionRecord:
    """Convert an inspection record ORM to its Pydantic model."""
    return InspectionRecord(
        id=record.id,
        disc_id=record.disc_id,
        date=record.date,
        status=record.status,
        note=record.note,
    )


class DiscRepository(BaseRepository[DiscORM]):
    """Repository for disc database operations."""

    def __init__(self, session: AsyncSession):
        """Initialize disc repository."""
        super().__init__(DiscORM, session)

    async def code_exists(self, code: str) -> bool:
        """
        Check whether a disc code is taken.

        Args:
            code: Disc code

        Returns:
            True if a disc already uses the code
        """
        return bool(await self.session.scalar(select(exists().where(DiscORM.code == code))))

    async def get_with_resources(self, disc_id: int) -> Optional[DiscORM]:
        """
        Get disc with every linked resource and its history eagerly loaded.

        Args:
            disc_id: Disc ID

        Returns:
            Disc ORM or None
        """
        result = await self.session.execute(
            select(DiscORM)
            .where(DiscORM.id == disc_id)
            .options(*DISC_LOAD_OPTIONS)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_page(
        self,
        page: int,
        page_size: int,
        disc_type: Optional[DiscType] = None,
        sort_field: Optional[str] = None,
        descending: bool = True,
    ) -> tuple[list[Disc], int]:
        """
        List discs with their resources and latest inspection.

        Args:
            page: 1-based page number
            page_size: Rows per page
            disc_type: Only discs of this media type
            sort_field: "code" or "created_at"
            descending: Sort direction

        Returns:
            Tuple of (discs, total)
        """
        column = SORT_COLUMNS.get(sort_field or "created_at", DiscORM.created_at)
        stmt = (
            select(DiscORM)
            .options(*DISC_LOAD_OPTIONS)
            .execution_options(populate_existing=True)
            .order_by(column.desc() if descending else column.asc())
        )
        if disc_type is not None:
            stmt = stmt.where(DiscORM.type == disc_type.value)
        discs, total = await self.paginate(stmt, page, page_size)
        return [self.to_pydantic(d, history_limit=1) for d in discs], total

    async def sizes_for_disc(self, disc_id: int) -> list[Optional[int]]:
        """
        Get the size of every resource of every kind linked to a disc.

        Args:
            disc_id: Disc ID

        Returns:
            Resource sizes in KiB (None where unknown)
        """
        stmt = union_all(
            select(MovieORM.size)
            .join(DiscMovieORM, DiscMovieORM.movie_id == MovieORM.id)
            .where(DiscMovieORM.disc_id == disc_id),
            select(EpisodeORM.size)
            .join(DiscEpisodeORM, DiscEpisodeORM.episode_id == EpisodeORM.id)
            .where(DiscEpisodeORM.disc_id == disc_id),
            select(VolumeORM.size)
            .join(DiscVolumeORM, DiscVolumeORM.volume_id == VolumeORM.id)
            .where(DiscVolumeORM.disc_id == disc_id),
            select(OtherORM.size)
            .join(DiscOtherORM, DiscOtherORM.other_id == OtherORM.id)
            .where(DiscOtherORM.disc_id == disc_id),
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def series_ids_on_disc(self, disc_id: int) -> set[int]:
        """Get the series of every episode linked to a disc."""
        result = await self.session.execute(
            select(EpisodeORM.series_id)
            .join(DiscEpisodeORM, DiscEpisodeORM.episode_id == EpisodeORM.id)
            .where(DiscEpisodeORM.disc_id == disc_id)
        )
        return set(result.scalars().all())

    async def photo_set_ids_on_disc(self, disc_id: int) -> set[int]:
        """Get the photo sets of every volume linked to a disc."""
        result = await self.session.execute(
            select(VolumeORM.photo_set_id)
            .join(DiscVolumeORM, DiscVolumeORM.volume_id == VolumeORM.id)
            .where(DiscVolumeORM.disc_id == disc_id)
        )
        return set(result.scalars().all())

    async def add_inspection(
        self, disc_id: int, date: dt.date, status: bool, note: Optional[str]
    ) -> InspectionRecordORM:
        """
        Append an inspection record to a disc.

        Args:
            disc_id: Disc ID
            date: Inspection date
            status: True when the disc read back fine
            note: Free-text note

        Returns:
            Created record
        """
        record = InspectionRecordORM(disc_id=disc_id, date=date, status=status, note=note)
        self.session.add(record)
        await self.session.flush()
        return record

    async def get_inspections(self, disc_id: int) -> list[InspectionRecord]:
        """
        Get a disc's inspection history, newest first.

        Args:
            disc_id: Disc ID

        Returns:
            Inspection records
        """
        result = await self.session.execute(
            select(InspectionRecordORM)
            .where(InspectionRecordORM.disc_id == disc_id)
            .order_by(InspectionRecordORM.date.desc(), InspectionRecordORM.id.desc())
        )
        return [inspection_to_pydantic(r) for r in result.scalars().all()]

    def to_pydantic(self, disc_orm: DiscORM, history_limit: Optional[int] = None) -> Disc:
        """
        Convert ORM model to Pydantic model.

        Args:
            disc_orm: ORM disc loaded by ``get_with_resources``
            history_limit: Keep only this many of the newest inspection records

        Returns:
            Pydantic Disc model
        """
        history = disc_orm.history if history_limit is None else disc_orm.history[:history_limit]

        return Disc(
            id=disc_orm.id,
            code=disc_orm.code,
            type=DiscType(disc_orm.type),
            size=disc_orm.size,
            size_locked=disc_orm.size_locked,
            created_at=disc_orm.created_at,
            movies=[
                DiscMovieEntry(
                    movie=MovieInfo(
                        id=link.movie.id,
                        name=link.movie.name,
                        size=link.movie.size,
                        format=link.movie.format,
                        codec=link.movie.codec,
                    ),
                    burned_at=link.burned_at,
                    notes=link.notes,
                )
                for link in disc_orm.movie_links
            ],
            episodes=[
                DiscEpisodeEntry(
                    episode=episode_to_pydantic(
                        link.episode, link.episode.series.name, with_discs=False
                    ),
                    burned_at=link.burned_at,
                    notes=link.notes,
                )
                for link in disc_orm.episode_links
            ],
            volumes=[
                DiscVolumeEntry(
                    volume=volume_to_pydantic(
                        link.volume, link.volume.photo_set.name, with_discs=False
                    ),
                    burned_at=link.burned_at,
                    notes=link.notes,
                )
                for link in disc_orm.volume_links
            ],
            others=[
                DiscOtherEntry(
                    other=OtherInfo(
                        id=link.other.id,
                        name=link.other.name,
                        description=link.other.description,
                        size=link.other.size,
                    ),
                    burned_at=link.burned_at,
                    notes=link.notes,
                )
                for link in disc_orm.other_links
            ],
            history=[inspection_to_pydantic(r) for r in history],
        )
