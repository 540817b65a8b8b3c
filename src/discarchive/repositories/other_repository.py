"""Other-resource repository for database operations."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..database.models import DiscOtherORM, OtherORM
from ..models.resources import Other
from .base import BaseRepository
from .movie_repository import disc_ref

SORT_COLUMNS = {
    "name": OtherORM.name,
    "created_at": OtherORM.created_at,
}


class OtherRepository(BaseRepository[OtherORM]):
    """Repository for other-resource database operations."""

    def __init__(self, session: AsyncSession):
        """Initialize other repository."""
        super().__init__(OtherORM, session)

    def _select_with_discs(self):
        return (
            select(OtherORM)
            .options(selectinload(OtherORM.disc_links).selectinload(DiscOtherORM.disc))
            .execution_options(populate_existing=True)
        )

    async def get_with_discs(self, other_id: int) -> Optional[OtherORM]:
        """
        Get other resource with its disc links eagerly loaded.

        Args:
            other_id: Resource ID

        Returns:
            Other ORM with links or None
        """
        result = await self.session.execute(
            self._select_with_discs().where(OtherORM.id == other_id)
        )
        return result.scalar_one_or_none()

    async def list_page(
        self,
        page: int,
        page_size: int,
        disc_id: Optional[int] = None,
        sort_field: Optional[str] = None,
        descending: bool = True,
    ) -> tuple[list[Other], int]:
        """List other resources, optionally only those on one disc."""
        column = SORT_COLUMNS.get(sort_field or "created_at", OtherORM.created_at)
        stmt = self._select_with_discs().order_by(column.desc() if descending else column.asc())
        if disc_id is not None:
            stmt = stmt.where(OtherORM.disc_links.any(DiscOtherORM.disc_id == disc_id))
        others, total = await self.paginate(stmt, page, page_size)
        return [self.to_pydantic(o) for o in others], total

    def to_pydantic(self, other_orm: OtherORM) -> Other:
        """Convert ORM model (disc links loaded) to Pydantic model."""
        return Other(
            id=other_orm.id,
            name=other_orm.name,
            description=other_orm.description,
            size=other_orm.size,
            created_at=other_orm.created_at,
            discs=[disc_ref(link) for link in other_orm.disc_links],
        )
