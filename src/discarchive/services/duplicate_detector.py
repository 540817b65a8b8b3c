"""Detection of resources already burned to a disc."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ..models.duplicates import DuplicateCheckRequest, DuplicateReport
from ..models.resources import ResourceKind
from ..repositories.link_repository import LINK_TABLES, LinkRepository

logger = logging.getLogger(__name__)


def resource_label(kind: ResourceKind, resource) -> str:
    """
    Human-readable label of a resource.

    Args:
        kind: Resource kind
        resource: Resource ORM (episodes need ``series``, volumes ``photo_set`` loaded)

    Returns:
        Label such as ``"Show S1E3"`` (season label as stored) or ``"Album Vol.2"``
    """
    if kind is ResourceKind.EPISODE:
        return f"{resource.series.name} S{resource.season}E{resource.episode}"
    if kind is ResourceKind.VOLUME:
        return f"{resource.photo_set.name} Vol.{resource.vol}"
    return resource.name


class DuplicateDetector:
    """Reports existing disc links of resources about to be burned."""

    def __init__(self, session: AsyncSession):
        """
        Initialize duplicate detector.

        Args:
            session: Database session
        """
        self.links = LinkRepository(session)

    async def find_duplicates(self, request: DuplicateCheckRequest) -> list[DuplicateReport]:
        """
        Find every disc link of the candidate resources.

        One report per link row: a resource on two discs yields two reports.
        This is advisory only and never rejects anything.

        Args:
            request: Candidate resource IDs by kind

        Returns:
            Duplicate reports
        """
        candidates = {
            ResourceKind.MOVIE: request.movie_ids,
            ResourceKind.EPISODE: request.episode_ids,
            ResourceKind.VOLUME: request.volume_ids,
            ResourceKind.OTHER: request.other_ids,
        }

        reports: list[DuplicateReport] = []
        for kind, ids in candidates.items():
            if not ids:
                continue
            table = LINK_TABLES[kind]
            for link in await self.links.links_for(kind, ids):
                resource = getattr(link, table.resource_attr)
                reports.append(
                    DuplicateReport(
                        kind=kind,
                        resource_id=getattr(link, table.resource_key),
                        resource_label=resource_label(kind, resource),
                        disc_code=link.disc.code,
                        disc_id=link.disc.id,
                        burned_at=link.burned_at,
                        notes=link.notes,
                    )
                )

        if reports:
            logger.warning(f"Duplicate check found {len(reports)} existing disc link(s)")
        return reports
