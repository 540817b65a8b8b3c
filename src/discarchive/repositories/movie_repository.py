"""Movie repository for database operations."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..database.models import DiscMovieORM, MovieORM
from ..models.resources import DiscRef, Movie
from .base import BaseRepository

SORT_COLUMNS = {
    "name": MovieORM.name,
    "created_at": MovieORM.created_at,
}


def disc_ref(link) -> DiscRef:
    """Build a disc reference from a link row with its disc loaded."""
    return DiscRef(
        disc_id=link.disc.id,
        code=link.disc.code,
        burned_at=link.burned_at,
        notes=link.notes,
    )


class MovieRepository(BaseRepository[MovieORM]):
    """Repository for movie database operations."""

    def __init__(self, session: AsyncSession):
        """Initialize movie repository."""
        super().__init__(MovieORM, session)

    def _select_with_discs(self):
        return (
            select(MovieORM)
            .options(selectinload(MovieORM.disc_links).selectinload(DiscMovieORM.disc))
            .execution_options(populate_existing=True)
        )

    async def get_with_discs(self, movie_id: int) -> Optional[MovieORM]:
        """
        Get movie with its disc links eagerly loaded.

        Args:
            movie_id: Movie ID

        Returns:
            Movie ORM with links or None
        """
        result = await self.session.execute(
            self._select_with_discs().where(MovieORM.id == movie_id)
        )
        return result.scalar_one_or_none()

    async def list_page(
        self,
        page: int,
        page_size: int,
        disc_id: Optional[int] = None,
        sort_field: Optional[str] = None,
        descending: bool = True,
    ) -> tuple[list[Movie], int]:
        """
        List movies, newest first unless another sort is requested.

        Args:
            page: 1-based page number
            page_size: Rows per page
            disc_id: Only movies burned on this disc
            sort_field: "name" or "created_at"
            descending: Sort direction

        Returns:
            Tuple of (movies, total)
        """
        column = SORT_COLUMNS.get(sort_field or "created_at", MovieORM.created_at)
        stmt = self._select_with_discs().order_by(column.desc() if descending else column.asc())
        if disc_id is not None:
            stmt = stmt.where(MovieORM.disc_links.any(DiscMovieORM.disc_id == disc_id))
        movies, total = await self.paginate(stmt, page, page_size)
        return [self.to_pydantic(m) for m in movies], total

    def to_pydantic(self, movie_orm: MovieORM) -> Movie:
        """
        Convert ORM model to Pydantic model.

        Args:
            movie_orm: ORM movie with disc links loaded

        Returns:
            Pydantic Movie model
        """
        return Movie(
            id=movie_orm.id,
            name=movie_orm.name,
            size=movie_orm.size,
            format=movie_orm.format,
            codec=movie_orm.codec,
            created_at=movie_orm.created_at,
            discs=[disc_ref(link) for link in movie_orm.disc_links],
        )
