"""Series and episode API endpoints."""

from typing import Literal

from fastapi import APIRouter, Query, Response

from discarchive.api.deps import ApiKeyDep, ResourceCatalogDep
from discarchive.models.page import Page
from discarchive.models.resources import (
    Episode,
    EpisodeCreate,
    EpisodeUpdate,
    RenameRequest,
    Series,
    SeriesSpec,
)

router = APIRouter(prefix="/api/series", tags=["series"])
episodes_router = APIRouter(prefix="/api/episodes", tags=["series"])


@router.get("", response_model=Page[Series])
async def list_series(
    catalog: ResourceCatalogDep,
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1),
    sort_field: Literal["name", "created_at"] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
) -> Page[Series]:
    """List series with their episodes."""
    return await catalog.list_series(page, page_size, sort_field, descending=sort_order == "desc")


@router.post("", response_model=Series, status_code=201)
async def create_series(
    spec: SeriesSpec,
    catalog: ResourceCatalogDep,
    _: ApiKeyDep,
) -> Series:
    """Create a series with its episodes."""
    return await catalog.create_series(spec)


@router.get("/{series_id}", response_model=Series)
async def get_series(
    series_id: int,
    catalog: ResourceCatalogDep,
) -> Series:
    """Get a specific series."""
    return await catalog.get_series(series_id)


@router.put("/{series_id}", response_model=Series)
async def rename_series(
    series_id: int,
    request: RenameRequest,
    catalog: ResourceCatalogDep,
    _: ApiKeyDep,
) -> Series:
    """Rename a series."""
    return await catalog.rename_series(series_id, request.name)


@router.delete("/{series_id}", status_code=204)
async def delete_series(
    series_id: int,
    catalog: ResourceCatalogDep,
    _: ApiKeyDep,
) -> Response:
    """Delete a series with all its episodes."""
    await catalog.delete_series(series_id)
    return Response(status_code=204)


@router.post("/{series_id}/episodes", response_model=Episode, status_code=201)
async def add_episode(
    series_id: int,
    request: EpisodeCreate,
    catalog: ResourceCatalogDep,
    _: ApiKeyDep,
) -> Episode:
    """Add an episode to a series, optionally burning it to a disc."""
    return await catalog.add_episode(series_id, request)


@episodes_router.get("/{episode_id}", response_model=Episode)
async def get_episode(
    episode_id: int,
    catalog: ResourceCatalogDep,
) -> Episode:
    """Get a specific episode."""
    return await catalog.get_episode(episode_id)


@episodes_router.put("/{episode_id}", response_model=Episode)
async def update_episode(
    episode_id: int,
    update: EpisodeUpdate,
    catalog: ResourceCatalogDep,
    _: ApiKeyDep,
) -> Episode:
    """Update an episode."""
    return await catalog.update_episode(episode_id, update)


@episodes_router.delete("/{episode_id}", status_code=204)
async def delete_episode(
    episode_id: int,
    catalog: ResourceCatalogDep,
    _: ApiKeyDep,
) -> Response:
    """Delete an episode and remove it from every disc."""
    await catalog.delete_episode(episode_id)
    return Response(status_code=204)
