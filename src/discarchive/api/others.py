"""Miscellaneous resource API endpoints."""

from typing import Literal

from fastapi import APIRouter, Query, Response

from discarchive.api.deps import ApiKeyDep, ResourceCatalogDep
from discarchive.models.page import Page
from discarchive.models.resources import Other, OtherCreate, OtherUpdate

router = APIRouter(prefix="/api/others", tags=["others"])


@router.get("", response_model=Page[Other])
async def list_others(
    catalog: ResourceCatalogDep,
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1),
    disc_id: int | None = None,
    sort_field: Literal["name", "created_at"] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
) -> Page[Other]:
    """List other resources, optionally only those on one disc."""
    return await catalog.list_others(
        page, page_size, disc_id, sort_field, descending=sort_order == "desc"
    )


@router.post("", response_model=Other, status_code=201)
async def create_other(
    request: OtherCreate,
    catalog: ResourceCatalogDep,
    _: ApiKeyDep,
) -> Other:
    """Create an other resource, optionally burning it to a disc."""
    return await catalog.create_other(request)


@router.get("/{other_id}", response_model=Other)
async def get_other(
    other_id: int,
    catalog: ResourceCatalogDep,
) -> Other:
    """Get a specific other resource."""
    return await catalog.get_other(other_id)


@router.put("/{other_id}", response_model=Other)
async def update_other(
    other_id: int,
    update: OtherUpdate,
    catalog: ResourceCatalogDep,
    _: ApiKeyDep,
) -> Other:
    """Update an other resource."""
    return await catalog.update_other(other_id, update)


@router.delete("/{other_id}", status_code=204)
async def delete_other(
    other_id: int,
    catalog: ResourceCatalogDep,
    _: ApiKeyDep,
) -> Response:
    """Delete an other resource and remove it from every disc."""
    await catalog.delete_other(other_id)
    return Response(status_code=204)
