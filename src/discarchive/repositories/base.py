"""Base repository with common database operations."""

from typing import Generic, Iterable, Optional, Type, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..database.base import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Base repository with common CRUD operations."""

    def __init__(self, model: Type[T], session: AsyncSession):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy ORM model class
            session: Database session
        """
        self.model = model
        self.session = session

    async def get(self, id: int) -> Optional[T]:
        """
        Get a single record by ID.

        Args:
            id: Primary key value

        Returns:
            Model instance or None
        """
        return await self.session.get(self.model, id)

    async def existing_ids(self, ids: Iterable[int]) -> set[int]:
        """
        Find which of the given IDs exist.

        Args:
            ids: Candidate primary key values

        Returns:
            The subset of IDs that have a row
        """
        wanted = set(ids)
        if not wanted:
            return set()
        result = await self.session.execute(
            select(self.model.id).where(self.model.id.in_(wanted))
        )
        return set(result.scalars().all())

    async def paginate(self, stmt: Select, page: int, page_size: int) -> tuple[list[T], int]:
        """
        Run a select one page at a time.

        Args:
            stmt: Select of this repository's model, already filtered and ordered
            page: 1-based page number
            page_size: Rows per page

        Returns:
            Tuple of (rows on the page, total matching rows)
        """
        total = await self.session.scalar(
            select(func.count()).select_from(stmt.order_by(None).subquery())
        )
        result = await self.session.execute(
            stmt.offset((page - 1) * page_size).limit(page_size)
        )
        return list(result.scalars().all()), total or 0

    async def create(self, instance: T) -> T:
        """
        Create a new record.

        Args:
            instance: Model instance to create

        Returns:
            Created instance
        """
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(self, instance: T) -> T:
        """
        Write pending changes of an existing record.

        Args:
            instance: Modified model instance

        Returns:
            Updated instance
        """
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, instance: T) -> None:
        """
        Delete a record.

        Args:
            instance: Model instance to delete
        """
        await self.session.delete(instance)
        await self.session.flush()

