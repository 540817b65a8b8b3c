"""Photo set and volume API endpoints."""

from typing import Literal

from fastapi import APIRouter, Query, Response

from discarchive.api.deps import ApiKeyDep, ResourceCatalogDep
from discarchive.models.page import Page
from discarchive.models.resources import (
    PhotoSet,
    PhotoSetSpec,
    RenameRequest,
    Volume,
    VolumeCreate,
    VolumeUpdate,
)

router = APIRouter(prefix="/api/photo-sets", tags=["photo sets"])
volumes_router = APIRouter(prefix="/api/volumes", tags=["photo sets"])


@router.get("", response_model=Page[PhotoSet])
async def list_photo_sets(
    catalog: ResourceCatalogDep,
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1),
    sort_field: Literal["name", "created_at"] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
) -> Page[PhotoSet]:
    """List photo sets with their volumes."""
    return await catalog.list_photo_sets(
        page, page_size, sort_field, descending=sort_order == "desc"
    )


@router.post("", response_model=PhotoSet, status_code=201)
async def create_photo_set(
    spec: PhotoSetSpec,
    catalog: ResourceCatalogDep,
    _: ApiKeyDep,
) -> PhotoSet:
    """Create a photo set with its volumes."""
    return await catalog.create_photo_set(spec)


@router.get("/{photo_set_id}", response_model=PhotoSet)
async def get_photo_set(
    photo_set_id: int,
    catalog: ResourceCatalogDep,
) -> PhotoSet:
    """Get a specific photo set."""
    return await catalog.get_photo_set(photo_set_id)


@router.put("/{photo_set_id}", response_model=PhotoSet)
async def rename_photo_set(
    photo_set_id: int,
    request: RenameRequest,
    catalog: ResourceCatalogDep,
    _: ApiKeyDep,
) -> PhotoSet:
    """Rename a photo set."""
    return await catalog.rename_photo_set(photo_set_id, request.name)


@router.delete("/{photo_set_id}", status_code=204)
async def delete_photo_set(
    photo_set_id: int,
    catalog: ResourceCatalogDep,
    _: ApiKeyDep,
) -> Response:
    """Delete a photo set with all its volumes."""
    await catalog.delete_photo_set(photo_set_id)
    return Response(status_code=204)


@router.post("/{photo_set_id}/volumes", response_model=Volume, status_code=201)
async def add_volume(
    photo_set_id: int,
    request: VolumeCreate,
    catalog: ResourceCatalogDep,
    _: ApiKeyDep,
) -> Volume:
    """Add a volume to a photo set, optionally burning it to a disc."""
    return await catalog.add_volume(photo_set_id, request)


@volumes_router.get("/{volume_id}", response_model=Volume)
async def get_volume(
    volume_id: int,
    catalog: ResourceCatalogDep,
) -> Volume:
    """Get a specific volume."""
    return await catalog.get_volume(volume_id)


@volumes_router.put("/{volume_id}", response_model=Volume)
async def update_volume(
    volume_id: int,
    update: VolumeUpdate,
    catalog: ResourceCatalogDep,
    _: ApiKeyDep,
) -> Volume:
    """Update a volume."""
    return await catalog.update_volume(volume_id, update)


@volumes_router.delete("/{volume_id}", status_code=204)
async def delete_volume(
    volume_id: int,
    catalog: ResourceCatalogDep,
    _: ApiKeyDep,
) -> Response:
    """Delete a volume and remove it from every disc."""
    await catalog.delete_volume(volume_id)
    return Response(status_code=204)
