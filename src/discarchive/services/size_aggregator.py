"""Size aggregation across the resource hierarchy.

Sizes roll up episode -> series, volume -> photo set, and every linked
resource -> disc. Every mutation path calls into ``SizeAggregator`` so the
derived totals are always recomputed from the current rows, never patched
with deltas.
"""

import logging
from typing import Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..repositories.disc_repository import DiscRepository
from ..repositories.photo_set_repository import PhotoSetRepository, VolumeRepository
from ..repositories.series_repository import EpisodeRepository, SeriesRepository

logger = logging.getLogger(__name__)


def aggregate(sizes: Iterable[Optional[int]]) -> Optional[int]:
    """
    Sum child sizes, skipping unknown ones.

    Args:
        sizes: Child sizes in KiB, None where unknown

    Returns:
        The sum, or None when no child has a size
    """
    known = [size for size in sizes if size is not None]
    if not known:
        return None
    return sum(known)


class SizeAggregator:
    """Recomputes and persists derived sizes."""

    def __init__(self, session: AsyncSession):
        """
        Initialize size aggregator.

        Args:
            session: Database session shared with the calling service
        """
        self.session = session
        self.discs = DiscRepository(session)
        self.series = SeriesRepository(session)
        self.episodes = EpisodeRepository(session)
        self.photo_sets = PhotoSetRepository(session)
        self.volumes = VolumeRepository(session)

    async def recompute_series(self, series_id: int) -> Optional[int]:
        """
        Recompute a series size from its episodes.

        Args:
            series_id: Series ID

        Returns:
            New size, or None if unknown or the series is gone
        """
        await self.session.flush()
        series = await self.series.get(series_id)
        if not series:
            return None

        series.size = aggregate(await self.episodes.sizes_for_series(series_id))
        await self.session.flush()
        logger.debug(f"Series {series_id} size recomputed: {series.size}")
        return series.size

    async def recompute_photo_set(self, photo_set_id: int) -> Optional[int]:
        """
        Recompute a photo set size from its volumes.

        Args:
            photo_set_id: Photo set ID

        Returns:
            New size, or None if unknown or the photo set is gone
        """
        await self.session.flush()
        photo_set = await self.photo_sets.get(photo_set_id)
        if not photo_set:
            return None

        photo_set.size = aggregate(await self.volumes.sizes_for_photo_set(photo_set_id))
        await self.session.flush()
        logger.debug(f"Photo set {photo_set_id} size recomputed: {photo_set.size}")
        return photo_set.size

    async def recompute_disc(self, disc_id: int) -> Optional[int]:
        """
        Recompute a disc size from every resource linked to it.

        A declared (locked) size is left alone.

        Args:
            disc_id: Disc ID

        Returns:
            The disc's size after the call, or None if the disc is gone
        """
        await self.session.flush()
        disc = await self.discs.get(disc_id)
        if not disc:
            return None
        if disc.size_locked:
            return disc.size

        disc.size = aggregate(await self.discs.sizes_for_disc(disc_id))
        await self.session.flush()
        logger.debug(f"Disc {disc.code} size recomputed: {disc.size}")
        return disc.size

    async def recompute_discs(self, disc_ids: Iterable[int]) -> None:
        """
        Recompute several disc sizes.

        Args:
            disc_ids: Disc IDs, duplicates allowed
        """
        for disc_id in sorted(set(disc_ids)):
            await self.recompute_disc(disc_id)
