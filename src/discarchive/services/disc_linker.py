"""Disc creation with resource linking.

Creating a disc links any mix of existing resources and brand-new ones
(including new series with episodes and new photo sets with volumes), then
re-aggregates sizes bottom-up. The whole flow runs in the caller's session
transaction so a failure anywhere leaves no partial disc behind.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.exceptions import ConflictError, NotFoundError
from ..database.models import DiscORM, EpisodeORM, MovieORM, OtherORM, PhotoSetORM, SeriesORM, VolumeORM
from ..models.disc import Disc, DiscCreate, DiscType
from ..models.resources import EpisodeSpec, ResourceKind, VolumeSpec
from ..repositories.base import BaseRepository
from ..repositories.disc_repository import DiscRepository
from ..repositories.link_repository import LinkRepository
from ..repositories.movie_repository import MovieRepository
from ..repositories.other_repository import OtherRepository
from ..repositories.photo_set_repository import PhotoSetRepository, VolumeRepository
from ..repositories.series_repository import EpisodeRepository, SeriesRepository
from .disc_codes import DiscCodeAllocator
from .size_aggregator import SizeAggregator
from .size_units import to_kib

logger = logging.getLogger(__name__)

# Whole-transaction retries when another request claims the same code
CODE_RACE_RETRIES = 3


class DiscCodeTakenError(ConflictError):
    """Raised when the disc insert loses a race for its code."""


@dataclass
class _CreationPlan:
    """Sizes converted and references checked before anything is written."""

    declared_size: Optional[int] = None
    movie_sizes: list[Optional[int]] = field(default_factory=list)
    other_sizes: list[Optional[int]] = field(default_factory=list)
    episode_sizes: list[Optional[int]] = field(default_factory=list)
    series_sizes: list[list[Optional[int]]] = field(default_factory=list)
    volume_sizes: list[Optional[int]] = field(default_factory=list)
    photo_set_sizes: list[list[Optional[int]]] = field(default_factory=list)


def unique_ids(ids: Iterable[int]) -> list[int]:
    """Drop repeated IDs, keeping first-seen order."""
    return list(dict.fromkeys(ids))


class DiscLinker:
    """Creates discs and links resources to them."""

    def __init__(
        self,
        session: AsyncSession,
        code_allocator: Optional[DiscCodeAllocator] = None,
        creation_note: Optional[str] = None,
    ):
        """
        Initialize disc linker.

        Args:
            session: Database session; the caller owns commit and rollback
            code_allocator: Disc code source (defaults to checking the discs table)
            creation_note: Note on the first inspection record of a new disc
        """
        self.session = session
        self.discs = DiscRepository(session)
        self.links = LinkRepository(session)
        self.movies = MovieRepository(session)
        self.others = OtherRepository(session)
        self.series = SeriesRepository(session)
        self.episodes = EpisodeRepository(session)
        self.photo_sets = PhotoSetRepository(session)
        self.volumes = VolumeRepository(session)
        self.aggregator = SizeAggregator(session)
        self.code_allocator = code_allocator or DiscCodeAllocator(self.discs.code_exists)
        self.creation_note = creation_note or settings.creation_note

    async def create_disc(self, request: DiscCreate) -> Disc:
        """
        Create a disc with its existing and new resources.

        Args:
            request: Disc creation request

        Returns:
            The disc with every linked resource, its size and history
        """
        plan = await self._prepare(request)

        attempt = 1
        while True:
            try:
                return await self._create(request, plan)
            except DiscCodeTakenError as e:
                await self.session.rollback()
                if attempt >= CODE_RACE_RETRIES:
                    raise
                logger.warning(f"{e.message}, retrying with a fresh code")
            attempt += 1

    async def _prepare(self, request: DiscCreate) -> _CreationPlan:
        """Convert every size and check every reference before writing."""
        plan = _CreationPlan(
            declared_size=to_kib(request.size),
            movie_sizes=[to_kib(m.size) for m in request.new_movies],
            other_sizes=[to_kib(o.size) for o in request.new_others],
            episode_sizes=[to_kib(e.size) for e in request.new_episodes],
            series_sizes=[[to_kib(e.size) for e in s.episodes] for s in request.new_series],
            volume_sizes=[to_kib(v.size) for v in request.new_volumes],
            photo_set_sizes=[[to_kib(v.size) for v in p.volumes] for p in request.new_photo_sets],
        )

        await self._require(self.movies, "movie", request.selected_movie_ids)
        await self._require(self.episodes, "episode", request.selected_episode_ids)
        await self._require(self.volumes, "volume", request.selected_volume_ids)
        await self._require(self.others, "other", request.selected_other_ids)
        await self._require(self.series, "series", [e.series_id for e in request.new_episodes])
        await self._require(
            self.photo_sets, "photo set", [v.photo_set_id for v in request.new_volumes]
        )
        return plan

    async def _require(self, repo: BaseRepository, kind: str, ids: list[int]) -> None:
        missing = set(ids) - await repo.existing_ids(ids)
        if missing:
            raise NotFoundError(kind, min(missing))

    async def _create(self, request: DiscCreate, plan: _CreationPlan) -> Disc:
        code = await self.code_allocator.allocate()
        disc = await self._insert_disc(code, request.type, plan.declared_size)

        # Existing resources
        selected = (
            (ResourceKind.MOVIE, request.selected_movie_ids, request.movie_notes),
            (ResourceKind.EPISODE, request.selected_episode_ids, request.episode_notes),
            (ResourceKind.VOLUME, request.selected_volume_ids, request.volume_notes),
            (ResourceKind.OTHER, request.selected_other_ids, request.other_notes),
        )
        for kind, ids, notes in selected:
            for resource_id in unique_ids(ids):
                await self.links.create(kind, disc.id, resource_id, notes.get(resource_id))

        # New standalone resources
        for spec, size in zip(request.new_movies, plan.movie_sizes):
            movie = await self.movies.create(
                MovieORM(name=spec.name, size=size, format=spec.format, codec=spec.codec)
            )
            await self.links.create(ResourceKind.MOVIE, disc.id, movie.id, spec.notes)

        for spec, size in zip(request.new_others, plan.other_sizes):
            other = await self.others.create(
                OtherORM(name=spec.name, description=spec.description, size=size)
            )
            await self.links.create(ResourceKind.OTHER, disc.id, other.id, spec.notes)

        # New episodes, under existing or new series
        recomputed_series: set[int] = set()
        for spec, size in zip(request.new_episodes, plan.episode_sizes):
            await self._add_episode(disc.id, spec.series_id, spec, size)

        for series_spec, sizes in zip(request.new_series, plan.series_sizes):
            series = await self.series.create(SeriesORM(name=series_spec.name, size=None))
            for spec, size in zip(series_spec.episodes, sizes):
                await self._add_episode(disc.id, series.id, spec, size)
            await self.aggregator.recompute_series(series.id)
            recomputed_series.add(series.id)

        # New volumes, under existing or new photo sets
        recomputed_photo_sets: set[int] = set()
        for spec, size in zip(request.new_volumes, plan.volume_sizes):
            await self._add_volume(disc.id, spec.photo_set_id, spec, size)

        for photo_set_spec, sizes in zip(request.new_photo_sets, plan.photo_set_sizes):
            photo_set = await self.photo_sets.create(
                PhotoSetORM(name=photo_set_spec.name, size=None)
            )
            for spec, size in zip(photo_set_spec.volumes, sizes):
                await self._add_volume(disc.id, photo_set.id, spec, size)
            await self.aggregator.recompute_photo_set(photo_set.id)
            recomputed_photo_sets.add(photo_set.id)

        # Disc total, unless declared
        await self.aggregator.recompute_disc(disc.id)

        # Every series/photo set with a child on this disc
        for series_id in sorted(await self.discs.series_ids_on_disc(disc.id) - recomputed_series):
            await self.aggregator.recompute_series(series_id)
        for photo_set_id in sorted(
            await self.discs.photo_set_ids_on_disc(disc.id) - recomputed_photo_sets
        ):
            await self.aggregator.recompute_photo_set(photo_set_id)

        await self.discs.add_inspection(disc.id, date.today(), True, self.creation_note)

        disc_orm = await self.discs.get_with_resources(disc.id)
        result = self.discs.to_pydantic(disc_orm)
        logger.info(
            f"Disc created: {result.code} ({result.type.value}) with "
            f"{result.resource_count} resource(s), size={result.size}"
        )
        return result

    async def _insert_disc(
        self, code: str, disc_type: DiscType, declared_size: Optional[int]
    ) -> DiscORM:
        disc = DiscORM(
            code=code,
            type=disc_type.value,
            size=declared_size,
            size_locked=declared_size is not None,
        )
        self.session.add(disc)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise DiscCodeTakenError(f"Disc code {code} already taken") from e
        return disc

    async def _add_episode(
        self, disc_id: int, series_id: int, spec: EpisodeSpec, size: Optional[int]
    ) -> EpisodeORM:
        episode = await self.episodes.create(
            EpisodeORM(
                series_id=series_id,
                season=spec.season,
                episode=spec.episode,
                size=size,
                format=spec.format,
                codec=spec.codec,
            )
        )
        await self.links.create(ResourceKind.EPISODE, disc_id, episode.id, spec.notes)
        return episode

    async def _add_volume(
        self, disc_id: int, photo_set_id: int, spec: VolumeSpec, size: Optional[int]
    ) -> VolumeORM:
        volume = await self.volumes.create(
            VolumeORM(photo_set_id=photo_set_id, vol=spec.vol, size=size)
        )
        await self.links.create(ResourceKind.VOLUME, disc_id, volume.id, spec.notes)
        return volume
