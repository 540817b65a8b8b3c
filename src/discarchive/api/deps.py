"""API dependencies."""

from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from discarchive.core.config import settings
from discarchive.core.exceptions import UnauthorizedError
from discarchive.database import get_db
from discarchive.services.catalog import DiscCatalog, ResourceCatalog
from discarchive.services.disc_linker import DiscLinker
from discarchive.services.duplicate_detector import DuplicateDetector

SessionDep = Annotated[AsyncSession, Depends(get_db)]


def get_disc_catalog(session: SessionDep) -> DiscCatalog:
    """Get a disc catalog bound to the request session."""
    return DiscCatalog(session)


def get_resource_catalog(session: SessionDep) -> ResourceCatalog:
    """Get a resource catalog bound to the request session."""
    return ResourceCatalog(session)


def get_disc_linker(session: SessionDep) -> DiscLinker:
    """Get a disc linker bound to the request session."""
    return DiscLinker(session)


def get_duplicate_detector(session: SessionDep) -> DuplicateDetector:
    """Get a duplicate detector bound to the request session."""
    return DuplicateDetector(session)


async def verify_api_key(
    authorization: Annotated[str | None, Header()] = None,
) -> None:
    """Verify API key if configured."""
    if not settings.api_key:
        return  # No API key required

    if not authorization:
        raise UnauthorizedError("Missing authorization header")

    # Expect "Bearer <token>"
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise UnauthorizedError("Invalid authorization format")

    if parts[1] != settings.api_key:
        raise UnauthorizedError("Invalid API key")


# Type aliases for dependency injection
DiscCatalogDep = Annotated[DiscCatalog, Depends(get_disc_catalog)]
ResourceCatalogDep = Annotated[ResourceCatalog, Depends(get_resource_catalog)]
DiscLinkerDep = Annotated[DiscLinker, Depends(get_disc_linker)]
DuplicateDetectorDep = Annotated[DuplicateDetector, Depends(get_duplicate_detector)]
ApiKeyDep = Annotated[None, Depends(verify_api_key)]
