"""Catalog services: disc maintenance and resource CRUD.

Every mutation that can change a size hands off to ``SizeAggregator`` before
returning, so series, photo sets and discs stay consistent with their
children inside the same transaction.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..database.models import EpisodeORM, MovieORM, OtherORM, PhotoSetORM, SeriesORM, VolumeORM
from ..models.disc import Disc, DiscPage, DiscType, DiscUpdate, InspectionCreate, InspectionRecord
from ..models.page import Page
from ..models.resources import (
    Episode,
    EpisodeCreate,
    EpisodeUpdate,
    Movie,
    MovieCreate,
    MovieUpdate,
    Other,
    OtherCreate,
    OtherUpdate,
    PhotoSet,
    PhotoSetSpec,
    ResourceKind,
    Series,
    SeriesSpec,
    Volume,
    VolumeCreate,
    VolumeUpdate,
)
from ..repositories.disc_repository import DiscRepository, inspection_to_pydantic
from ..repositories.link_repository import LINK_TABLES, LinkRepository
from ..repositories.movie_repository import MovieRepository
from ..repositories.other_repository import OtherRepository
from ..repositories.photo_set_repository import PhotoSetRepository, VolumeRepository
from ..repositories.series_repository import EpisodeRepository, SeriesRepository
from .size_aggregator import SizeAggregator
from .size_units import to_kib

logger = logging.getLogger(__name__)


def clamp_page(page: int, page_size: Optional[int]) -> tuple[int, int]:
    """
    Normalize paging parameters.

    Args:
        page: Requested 1-based page
        page_size: Requested rows per page, None for the default

    Returns:
        Tuple of (page, page_size) within configured bounds
    """
    size = page_size or settings.default_page_size
    return max(page, 1), max(1, min(size, settings.max_page_size))


def _require_text(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field} must not be empty")
    return value


class DiscCatalog:
    """Reads, updates and deletes discs and manages their links."""

    def __init__(self, session: AsyncSession):
        """
        Initialize disc catalog.

        Args:
            session: Database session
        """
        self.session = session
        self.discs = DiscRepository(session)
        self.links = LinkRepository(session)
        self.aggregator = SizeAggregator(session)

    async def _require_disc(self, disc_id: int):
        disc = await self.discs.get(disc_id)
        if not disc:
            raise NotFoundError("disc", disc_id)
        return disc

    async def get_disc(self, disc_id: int) -> Disc:
        """
        Get a disc with everything burned on it.

        Args:
            disc_id: Disc ID

        Returns:
            Disc with resources and full history
        """
        disc_orm = await self.discs.get_with_resources(disc_id)
        if not disc_orm:
            raise NotFoundError("disc", disc_id)
        return self.discs.to_pydantic(disc_orm)

    async def list_discs(
        self,
        page: int = 1,
        page_size: Optional[int] = None,
        disc_type: Optional[DiscType] = None,
        sort_field: Optional[str] = None,
        descending: bool = True,
    ) -> DiscPage:
        """
        List discs one page at a time.

        Each disc carries only its latest inspection record.

        Args:
            page: 1-based page number
            page_size: Rows per page
            disc_type: Only discs of this media type
            sort_field: "code" or "created_at"
            descending: Sort direction

        Returns:
            Page of discs
        """
        page, page_size = clamp_page(page, page_size)
        discs, total = await self.discs.list_page(
            page, page_size, disc_type=disc_type, sort_field=sort_field, descending=descending
        )
        return DiscPage(data=discs, total=total, page=page, page_size=page_size)

    async def update_disc(self, disc_id: int, update: DiscUpdate) -> Disc:
        """
        Update a disc's type and/or declared size.

        Args:
            disc_id: Disc ID
            update: Fields to change

        Returns:
            Updated disc
        """
        disc = await self._require_disc(disc_id)
        fields = update.model_fields_set

        if "size" in fields:
            declared = to_kib(update.size)
            if declared is None:
                disc.size_locked = False
            else:
                disc.size = declared
                disc.size_locked = True
        if update.type is not None:
            disc.type = update.type.value

        await self.discs.update(disc)
        if "size" in fields and not disc.size_locked:
            await self.aggregator.recompute_disc(disc_id)

        logger.info(f"Disc {disc.code} updated")
        return await self.get_disc(disc_id)

    async def delete_disc(self, disc_id: int) -> None:
        """
        Delete a disc with its links and history.

        Resources stay in the catalog; resource sizes do not depend on discs.

        Args:
            disc_id: Disc ID
        """
        disc = await self._require_disc(disc_id)
        code = disc.code
        await self.discs.delete(disc)
        logger.info(f"Disc {code} deleted")

    async def link_resource(
        self,
        disc_id: int,
        kind: ResourceKind,
        resource_id: int,
        notes: Optional[str] = None,
    ) -> Disc:
        """
        Link an existing resource to a disc.

        Args:
            disc_id: Disc ID
            kind: Resource kind
            resource_id: Resource ID
            notes: Free-text note for this burn

        Returns:
            Disc with its recomputed size
        """
        disc = await self._require_disc(disc_id)
        table = LINK_TABLES[kind]
        if not await self.session.get(table.resource_model, resource_id):
            raise NotFoundError(kind.value, resource_id)
        if await self.links.get(kind, disc_id, resource_id):
            raise ConflictError(f"{kind.value.capitalize()} {resource_id} is already on disc {disc.code}")

        await self.links.create(kind, disc_id, resource_id, notes)
        await self.aggregator.recompute_disc(disc_id)
        logger.info(f"Linked {kind.value} {resource_id} to disc {disc.code}")
        return await self.get_disc(disc_id)

    async def unlink_resource(self, disc_id: int, kind: ResourceKind, resource_id: int) -> Disc:
        """
        Remove a resource from a disc.

        Args:
            disc_id: Disc ID
            kind: Resource kind
            resource_id: Resource ID

        Returns:
            Disc with its recomputed size
        """
        disc = await self._require_disc(disc_id)
        if not await self.links.delete(kind, disc_id, resource_id):
            raise NotFoundError(f"{kind.value} link", resource_id)

        await self.aggregator.recompute_disc(disc_id)
        logger.info(f"Unlinked {kind.value} {resource_id} from disc {disc.code}")
        return await self.get_disc(disc_id)

    async def add_inspection(self, disc_id: int, inspection: InspectionCreate) -> InspectionRecord:
        """
        Record an inspection of a disc.

        Args:
            disc_id: Disc ID
            inspection: Inspection date, result and note

        Returns:
            Created record
        """
        disc = await self._require_disc(disc_id)
        record = await self.discs.add_inspection(
            disc_id, inspection.date, inspection.status, inspection.note
        )
        if not inspection.status:
            logger.warning(f"Disc {disc.code} failed inspection on {inspection.date}")
        return inspection_to_pydantic(record)

    async def list_inspections(self, disc_id: int) -> list[InspectionRecord]:
        """Get a disc's inspection history, newest first."""
        await self._require_disc(disc_id)
        return await self.discs.get_inspections(disc_id)


class ResourceCatalog:
    """CRUD for movies, others, series/episodes and photo sets/volumes."""

    def __init__(self, session: AsyncSession):
        """
        Initialize resource catalog.

        Args:
            session: Database session
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

    async def _require_disc(self, disc_id: Optional[int]) -> None:
        if disc_id is not None and not await self.discs.get(disc_id):
            raise NotFoundError("disc", disc_id)

    async def _link_new(
        self, kind: ResourceKind, disc_id: Optional[int], resource_id: int, notes: Optional[str]
    ) -> None:
        if disc_id is None:
            return
        await self.links.create(kind, disc_id, resource_id, notes)
        await self.aggregator.recompute_disc(disc_id)

    # -- Movies -------------------------------------------------------------

    async def list_movies(
        self,
        page: int = 1,
        page_size: Optional[int] = None,
        disc_id: Optional[int] = None,
        sort_field: Optional[str] = None,
        descending: bool = True,
    ) -> Page[Movie]:
        """List movies, optionally only those on one disc."""
        page, page_size = clamp_page(page, page_size)
        movies, total = await self.movies.list_page(page, page_size, disc_id, sort_field, descending)
        return Page[Movie](data=movies, total=total, page=page, page_size=page_size)

    async def get_movie(self, movie_id: int) -> Movie:
        """Get a movie with the discs it is burned on."""
        movie = await self.movies.get_with_discs(movie_id)
        if not movie:
            raise NotFoundError("movie", movie_id)
        return self.movies.to_pydantic(movie)

    async def create_movie(self, request: MovieCreate) -> Movie:
        """
        Create a movie, optionally burning it to an existing disc.

        Args:
            request: Movie fields plus optional disc ID and link note

        Returns:
            Created movie
        """
        size = to_kib(request.size)
        await self._require_disc(request.disc_id)

        movie = await self.movies.create(
            MovieORM(name=request.name, size=size, format=request.format, codec=request.codec)
        )
        await self._link_new(ResourceKind.MOVIE, request.disc_id, movie.id, request.notes)
        logger.info(f"Movie created: {movie.name} ({movie.id})")
        return await self.get_movie(movie.id)

    async def update_movie(self, movie_id: int, update: MovieUpdate) -> Movie:
        """
        Update a movie; a size change re-aggregates every disc holding it.

        Args:
            movie_id: Movie ID
            update: Fields to change

        Returns:
            Updated movie
        """
        movie = await self.movies.get(movie_id)
        if not movie:
            raise NotFoundError("movie", movie_id)
        fields = update.model_fields_set
        size = to_kib(update.size)

        if update.name is not None:
            movie.name = _require_text(update.name, "name")
        if update.format is not None:
            movie.format = update.format
        if update.codec is not None:
            movie.codec = update.codec
        if "size" in fields:
            movie.size = size

        await self.movies.update(movie)
        if "size" in fields:
            await self.aggregator.recompute_discs(
                await self.links.disc_ids_for(ResourceKind.MOVIE, [movie_id])
            )
        return await self.get_movie(movie_id)

    async def delete_movie(self, movie_id: int) -> None:
        """
        Delete a movie and re-aggregate every disc that held it.

        Args:
            movie_id: Movie ID
        """
        movie = await self.movies.get(movie_id)
        if not movie:
            raise NotFoundError("movie", movie_id)

        disc_ids = await self.links.disc_ids_for(ResourceKind.MOVIE, [movie_id])
        await self.movies.delete(movie)
        await self.aggregator.recompute_discs(disc_ids)
        logger.info(f"Movie {movie_id} deleted, {len(disc_ids)} disc(s) recomputed")

    # -- Others -------------------------------------------------------------

    async def list_others(
        self,
        page: int = 1,
        page_size: Optional[int] = None,
        disc_id: Optional[int] = None,
        sort_field: Optional[str] = None,
        descending: bool = True,
    ) -> Page[Other]:
        """List other resources, optionally only those on one disc."""
        page, page_size = clamp_page(page, page_size)
        others, total = await self.others.list_page(page, page_size, disc_id, sort_field, descending)
        return Page[Other](data=others, total=total, page=page, page_size=page_size)

    async def get_other(self, other_id: int) -> Other:
        """Get an other resource with the discs it is burned on."""
        other = await self.others.get_with_discs(other_id)
        if not other:
            raise NotFoundError("other", other_id)
        return self.others.to_pydantic(other)

    async def create_other(self, request: OtherCreate) -> Other:
        """Create an other resource, optionally burning it to an existing disc."""
        size = to_kib(request.size)
        await self._require_disc(request.disc_id)

        other = await self.others.create(
            OtherORM(name=request.name, description=request.description, size=size)
        )
        await self._link_new(ResourceKind.OTHER, request.disc_id, other.id, request.notes)
        logger.info(f"Other created: {other.name} ({other.id})")
        return await self.get_other(other.id)

    async def update_other(self, other_id: int, update: OtherUpdate) -> Other:
        """Update an other resource; a size change re-aggregates its discs."""
        other = await self.others.get(other_id)
        if not other:
            raise NotFoundError("other", other_id)
        fields = update.model_fields_set
        size = to_kib(update.size)

        if update.name is not None:
            other.name = _require_text(update.name, "name")
        if "description" in fields:
            other.description = update.description
        if "size" in fields:
            other.size = size

        await self.others.update(other)
        if "size" in fields:
            await self.aggregator.recompute_discs(
                await self.links.disc_ids_for(ResourceKind.OTHER, [other_id])
            )
        return await self.get_other(other_id)

    async def delete_other(self, other_id: int) -> None:
        """Delete an other resource and re-aggregate every disc that held it."""
        other = await self.others.get(other_id)
        if not other:
            raise NotFoundError("other", other_id)

        disc_ids = await self.links.disc_ids_for(ResourceKind.OTHER, [other_id])
        await self.others.delete(other)
        await self.aggregator.recompute_discs(disc_ids)
        logger.info(f"Other {other_id} deleted, {len(disc_ids)} disc(s) recomputed")

    # -- Series and episodes ------------------------------------------------

    async def list_series(
        self,
        page: int = 1,
        page_size: Optional[int] = None,
        sort_field: Optional[str] = None,
        descending: bool = True,
    ) -> Page[Series]:
        """List series with their episodes."""
        page, page_size = clamp_page(page, page_size)
        series, total = await self.series.list_page(page, page_size, sort_field, descending)
        return Page[Series](data=series, total=total, page=page, page_size=page_size)

    async def get_series(self, series_id: int) -> Series:
        """Get a series with its episodes."""
        series = await self.series.get_with_episodes(series_id)
        if not series:
            raise NotFoundError("series", series_id)
        return self.series.to_pydantic(series)

    async def create_series(self, spec: SeriesSpec) -> Series:
        """
        Create a series together with its episodes.

        Episodes created here are not on any disc yet.

        Args:
            spec: Series name and episodes

        Returns:
            Created series with its aggregated size
        """
        sizes = [to_kib(e.size) for e in spec.episodes]

        series = await self.series.create(SeriesORM(name=spec.name, size=None))
        for episode_spec, size in zip(spec.episodes, sizes):
            await self.episodes.create(
                EpisodeORM(
                    series_id=series.id,
                    season=episode_spec.season,
                    episode=episode_spec.episode,
                    size=size,
                    format=episode_spec.format,
                    codec=episode_spec.codec,
                )
            )
        await self.aggregator.recompute_series(series.id)
        logger.info(f"Series created: {series.name} with {len(sizes)} episode(s)")
        return await self.get_series(series.id)

    async def rename_series(self, series_id: int, name: str) -> Series:
        """Rename a series."""
        series = await self.series.get(series_id)
        if not series:
            raise NotFoundError("series", series_id)
        series.name = _require_text(name, "name")
        await self.series.update(series)
        return await self.get_series(series_id)

    async def delete_series(self, series_id: int) -> None:
        """
        Delete a series with all its episodes.

        Every disc that held any of the episodes is re-aggregated.

        Args:
            series_id: Series ID
        """
        series = await self.series.get(series_id)
        if not series:
            raise NotFoundError("series", series_id)

        episode_ids = await self.episodes.ids_for_series(series_id)
        disc_ids = await self.links.disc_ids_for(ResourceKind.EPISODE, episode_ids)
        await self.series.delete(series)
        await self.aggregator.recompute_discs(disc_ids)
        logger.info(
            f"Series {series_id} deleted with {len(episode_ids)} episode(s), "
            f"{len(disc_ids)} disc(s) recomputed"
        )

    async def get_episode(self, episode_id: int) -> Episode:
        """Get an episode with the discs it is burned on."""
        episode = await self.episodes.get_with_discs(episode_id)
        if not episode:
            raise NotFoundError("episode", episode_id)
        return self.episodes.to_pydantic(episode)

    async def add_episode(self, series_id: int, request: EpisodeCreate) -> Episode:
        """
        Add an episode to a series, optionally burning it to a disc.

        Args:
            series_id: Series ID
            request: Episode fields plus optional disc ID and link note

        Returns:
            Created episode
        """
        size = to_kib(request.size)
        if not await self.series.get(series_id):
            raise NotFoundError("series", series_id)
        await self._require_disc(request.disc_id)

        episode = await self.episodes.create(
            EpisodeORM(
                series_id=series_id,
                season=request.season,
                episode=request.episode,
                size=size,
                format=request.format,
                codec=request.codec,
            )
        )
        await self.aggregator.recompute_series(series_id)
        await self._link_new(ResourceKind.EPISODE, request.disc_id, episode.id, request.notes)
        return await self.get_episode(episode.id)

    async def update_episode(self, episode_id: int, update: EpisodeUpdate) -> Episode:
        """
        Update an episode.

        A size change re-aggregates the series and every disc holding the
        episode.

        Args:
            episode_id: Episode ID
            update: Fields to change

        Returns:
            Updated episode
        """
        episode = await self.episodes.get(episode_id)
        if not episode:
            raise NotFoundError("episode", episode_id)
        fields = update.model_fields_set
        size = to_kib(update.size)

        if update.season is not None:
            episode.season = _require_text(update.season, "season")
        if update.episode is not None:
            episode.episode = update.episode
        if update.format is not None:
            episode.format = update.format
        if update.codec is not None:
            episode.codec = update.codec
        if "size" in fields:
            episode.size = size

        await self.episodes.update(episode)
        if "size" in fields:
            await self.aggregator.recompute_series(episode.series_id)
            await self.aggregator.recompute_discs(
                await self.links.disc_ids_for(ResourceKind.EPISODE, [episode_id])
            )
        return await self.get_episode(episode_id)

    async def delete_episode(self, episode_id: int) -> None:
        """
        Delete an episode, re-aggregating its series and every disc that held it.

        Args:
            episode_id: Episode ID
        """
        episode = await self.episodes.get(episode_id)
        if not episode:
            raise NotFoundError("episode", episode_id)

        series_id = episode.series_id
        disc_ids = await self.links.disc_ids_for(ResourceKind.EPISODE, [episode_id])
        await self.episodes.delete(episode)
        await self.aggregator.recompute_series(series_id)
        await self.aggregator.recompute_discs(disc_ids)
        logger.info(f"Episode {episode_id} deleted, {len(disc_ids)} disc(s) recomputed")

    # -- Photo sets and volumes ---------------------------------------------

    async def list_photo_sets(
        self,
        page: int = 1,
        page_size: Optional[int] = None,
        sort_field: Optional[str] = None,
        descending: bool = True,
    ) -> Page[PhotoSet]:
        """List photo sets with their volumes."""
        page, page_size = clamp_page(page, page_size)
        photo_sets, total = await self.photo_sets.list_page(page, page_size, sort_field, descending)
        return Page[PhotoSet](data=photo_sets, total=total, page=page, page_size=page_size)

    async def get_photo_set(self, photo_set_id: int) -> PhotoSet:
        """Get a photo set with its volumes."""
        photo_set = await self.photo_sets.get_with_volumes(photo_set_id)
        if not photo_set:
            raise NotFoundError("photo set", photo_set_id)
        return self.photo_sets.to_pydantic(photo_set)

    async def create_photo_set(self, spec: PhotoSetSpec) -> PhotoSet:
        """Create a photo set together with its volumes."""
        sizes = [to_kib(v.size) for v in spec.volumes]

        photo_set = await self.photo_sets.create(PhotoSetORM(name=spec.name, size=None))
        for volume_spec, size in zip(spec.volumes, sizes):
            await self.volumes.create(
                VolumeORM(photo_set_id=photo_set.id, vol=volume_spec.vol, size=size)
            )
        await self.aggregator.recompute_photo_set(photo_set.id)
        logger.info(f"Photo set created: {photo_set.name} with {len(sizes)} volume(s)")
        return await self.get_photo_set(photo_set.id)

    async def rename_photo_set(self, photo_set_id: int, name: str) -> PhotoSet:
        """Rename a photo set."""
        photo_set = await self.photo_sets.get(photo_set_id)
        if not photo_set:
            raise NotFoundError("photo set", photo_set_id)
        photo_set.name = _require_text(name, "name")
        await self.photo_sets.update(photo_set)
        return await self.get_photo_set(photo_set_id)

    async def delete_photo_set(self, photo_set_id: int) -> None:
        """Delete a photo set with all its volumes, re-aggregating affected discs."""
        photo_set = await self.photo_sets.get(photo_set_id)
        if not photo_set:
            raise NotFoundError("photo set", photo_set_id)

        volume_ids = await self.volumes.ids_for_photo_set(photo_set_id)
        disc_ids = await self.links.disc_ids_for(ResourceKind.VOLUME, volume_ids)
        await self.photo_sets.delete(photo_set)
        await self.aggregator.recompute_discs(disc_ids)
        logger.info(
            f"Photo set {photo_set_id} deleted with {len(volume_ids)} volume(s), "
            f"{len(disc_ids)} disc(s) recomputed"
        )

    async def get_volume(self, volume_id: int) -> Volume:
        """Get a volume with the discs it is burned on."""
        volume = await self.volumes.get_with_discs(volume_id)
        if not volume:
            raise NotFoundError("volume", volume_id)
        return self.volumes.to_pydantic(volume)

    async def add_volume(self, photo_set_id: int, request: VolumeCreate) -> Volume:
        """Add a volume to a photo set, optionally burning it to a disc."""
        size = to_kib(request.size)
        if not await self.photo_sets.get(photo_set_id):
            raise NotFoundError("photo set", photo_set_id)
        await self._require_disc(request.disc_id)

        volume = await self.volumes.create(
            VolumeORM(photo_set_id=photo_set_id, vol=request.vol, size=size)
        )
        await self.aggregator.recompute_photo_set(photo_set_id)
        await self._link_new(ResourceKind.VOLUME, request.disc_id, volume.id, request.notes)
        return await self.get_volume(volume.id)

    async def update_volume(self, volume_id: int, update: VolumeUpdate) -> Volume:
        """Update a volume; a size change re-aggregates its photo set and discs."""
        volume = await self.volumes.get(volume_id)
        if not volume:
            raise NotFoundError("volume", volume_id)
        fields = update.model_fields_set
        size = to_kib(update.size)

        if update.vol is not None:
            volume.vol = update.vol
        if "size" in fields:
            volume.size = size

        await self.volumes.update(volume)
        if "size" in fields:
            await self.aggregator.recompute_photo_set(volume.photo_set_id)
            await self.aggregator.recompute_discs(
                await self.links.disc_ids_for(ResourceKind.VOLUME, [volume_id])
            )
        return await self.get_volume(volume_id)

    async def delete_volume(self, volume_id: int) -> None:
        """Delete a volume, re-aggregating its photo set and every disc that held it."""
        volume = await self.volumes.get(volume_id)
        if not volume:
            raise NotFoundError("volume", volume_id)

        photo_set_id = volume.photo_set_id
        disc_ids = await self.links.disc_ids_for(ResourceKind.VOLUME, [volume_id])
        await self.volumes.delete(volume)
        await self.aggregator.recompute_photo_set(photo_set_id)
        await self.aggregator.recompute_discs(disc_ids)
        logger.info(f"Volume {volume_id} deleted, {len(disc_ids)} disc(s) recomputed")
