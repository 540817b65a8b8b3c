"""Disc link repository for the four junction tables."""

from dataclasses import dataclass
from typing import Iterable, Optional, Type, Union

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..database.models import (
    DiscEpisodeORM,
    DiscMovieORM,
    DiscOtherORM,
    DiscVolumeORM,
    EpisodeORM,
    MovieORM,
    OtherORM,
    VolumeORM,
)
from ..models.resources import ResourceKind

LinkORM = Union[DiscMovieORM, DiscEpisodeORM, DiscVolumeORM, DiscOtherORM]


@dataclass(frozen=True)
class LinkTable:
    """How one resource kind is joined to discs."""

    link_model: Type[LinkORM]
    resource_model: type
    resource_key: str  # Foreign key column on the link table
    resource_attr: str  # Relationship from link to resource


LINK_TABLES: dict[ResourceKind, LinkTable] = {
    ResourceKind.MOVIE: LinkTable(DiscMovieORM, MovieORM, "movie_id", "movie"),
    ResourceKind.EPISODE: LinkTable(DiscEpisodeORM, EpisodeORM, "episode_id", "episode"),
    ResourceKind.VOLUME: LinkTable(DiscVolumeORM, VolumeORM, "volume_id", "volume"),
    ResourceKind.OTHER: LinkTable(DiscOtherORM, OtherORM, "other_id", "other"),
}


class LinkRepository:
    """Repository for disc link rows of every resource kind."""

    def __init__(self, session: AsyncSession):
        """Initialize link repository."""
        self.session = session

    async def get(
        self, kind: ResourceKind, disc_id: int, resource_id: int
    ) -> Optional[LinkORM]:
        """
        Get the link between a disc and a resource.

        Args:
            kind: Resource kind
            disc_id: Disc ID
            resource_id: Resource ID

        Returns:
            Link ORM or None
        """
        table = LINK_TABLES[kind]
        return await self.session.get(table.link_model, (disc_id, resource_id))

    async def create(
        self,
        kind: ResourceKind,
        disc_id: int,
        resource_id: int,
        notes: Optional[str] = None,
    ) -> LinkORM:
        """
        Link a resource to a disc.

        Args:
            kind: Resource kind
            disc_id: Disc ID
            resource_id: Resource ID
            notes: Free-text note for this burn

        Returns:
            Created link ORM
        """
        table = LINK_TABLES[kind]
        link = table.link_model(
            disc_id=disc_id,
            notes=notes or None,
            **{table.resource_key: resource_id},
        )
        self.session.add(link)
        await self.session.flush()
        return link

    async def delete(self, kind: ResourceKind, disc_id: int, resource_id: int) -> bool:
        """
        Remove the link between a disc and a resource.

        Returns:
            True if a link was removed
        """
        table = LINK_TABLES[kind]
        key = getattr(table.link_model, table.resource_key)
        result = await self.session.execute(
            delete(table.link_model)
            .where(table.link_model.disc_id == disc_id)
            .where(key == resource_id)
        )
        await self.session.flush()
        return result.rowcount > 0

    async def disc_ids_for(self, kind: ResourceKind, resource_ids: Iterable[int]) -> set[int]:
        """
        Get the IDs of every disc holding any of the given resources.

        Args:
            kind: Resource kind
            resource_ids: Resource IDs

        Returns:
            Disc IDs
        """
        ids = set(resource_ids)
        if not ids:
            return set()
        table = LINK_TABLES[kind]
        key = getattr(table.link_model, table.resource_key)
        result = await self.session.execute(
            select(table.link_model.disc_id).where(key.in_(ids))
        )
        return set(result.scalars().all())

    async def links_for(self, kind: ResourceKind, resource_ids: Iterable[int]) -> list[LinkORM]:
        """
        Get every link of the given resources with disc and resource loaded.

        Episodes come with their series and volumes with their photo set so
        callers can build labels.

        Args:
            kind: Resource kind
            resource_ids: Resource IDs

        Returns:
            Link ORMs ordered by resource then burn time
        """
        ids = set(resource_ids)
        if not ids:
            return []
        table = LINK_TABLES[kind]
        model = table.link_model
        key = getattr(model, table.resource_key)

        resource_load = selectinload(getattr(model, table.resource_attr))
        if kind is ResourceKind.EPISODE:
            resource_load = resource_load.selectinload(EpisodeORM.series)
        elif kind is ResourceKind.VOLUME:
            resource_load = resource_load.selectinload(VolumeORM.photo_set)

        result = await self.session.execute(
            select(model)
            .where(key.in_(ids))
            .options(selectinload(model.disc), resource_load)
            .order_by(key, model.burned_at)
        )
        return list(result.scalars().all())