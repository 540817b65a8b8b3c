"""Disc API endpoints."""

import logging
from typing import Literal

from fastapi import APIRouter, Query, Response

from discarchive.api.deps import ApiKeyDep, DiscCatalogDep, DiscLinkerDep, DuplicateDetectorDep
from discarchive.models.disc import (
    Disc,
    DiscCreate,
    DiscPage,
    DiscType,
    DiscUpdate,
    InspectionCreate,
    InspectionRecord,
    LinkRequest,
)
from discarchive.models.duplicates import DuplicateCheckRequest, DuplicateCheckResponse
from discarchive.models.resources import ResourceKind

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/discs", tags=["discs"])


@router.post("", response_model=Disc, status_code=201)
async def create_disc(
    request: DiscCreate,
    linker: DiscLinkerDep,
    _: ApiKeyDep,
) -> Disc:
    """Create a disc with existing and new resources."""
    return await linker.create_disc(request)


@router.get("", response_model=DiscPage)
async def list_discs(
    catalog: DiscCatalogDep,
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1),
    type: DiscType | None = None,
    sort_field: Literal["code", "created_at"] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
) -> DiscPage:
    """List discs with their resources and latest inspection."""
    return await catalog.list_discs(
        page=page,
        page_size=page_size,
        disc_type=type,
        sort_field=sort_field,
        descending=sort_order == "desc",
    )


@router.post("/validate-resources", response_model=DuplicateCheckResponse)
async def validate_resources(
    request: DuplicateCheckRequest,
    detector: DuplicateDetectorDep,
) -> DuplicateCheckResponse:
    """Report candidate resources that are already burned to a disc."""
    duplicates = await detector.find_duplicates(request)
    return DuplicateCheckResponse(duplicates=duplicates)


@router.get("/{disc_id}", response_model=Disc)
async def get_disc(
    disc_id: int,
    catalog: DiscCatalogDep,
) -> Disc:
    """Get a specific disc."""
    return await catalog.get_disc(disc_id)


@router.put("/{disc_id}", response_model=Disc)
async def update_disc(
    disc_id: int,
    update: DiscUpdate,
    catalog: DiscCatalogDep,
    _: ApiKeyDep,
) -> Disc:
    """Change a disc's type or declared size."""
    return await catalog.update_disc(disc_id, update)


@router.delete("/{disc_id}", status_code=204)
async def delete_disc(
    disc_id: int,
    catalog: DiscCatalogDep,
    _: ApiKeyDep,
) -> Response:
    """Delete a disc; its resources stay in the catalog."""
    await catalog.delete_disc(disc_id)
    return Response(status_code=204)


@router.get("/{disc_id}/history", response_model=list[InspectionRecord])
async def list_inspections(
    disc_id: int,
    catalog: DiscCatalogDep,
) -> list[InspectionRecord]:
    """Get a disc's inspection history, newest first."""
    return await catalog.list_inspections(disc_id)


@router.post("/{disc_id}/history", response_model=InspectionRecord, status_code=201)
async def add_inspection(
    disc_id: int,
    inspection: InspectionCreate,
    catalog: DiscCatalogDep,
    _: ApiKeyDep,
) -> InspectionRecord:
    """Record an inspection of a disc."""
    return await catalog.add_inspection(disc_id, inspection)


@router.post("/{disc_id}/links/{kind}/{resource_id}", response_model=Disc)
async def link_resource(
    disc_id: int,
    kind: ResourceKind,
    resource_id: int,
    catalog: DiscCatalogDep,
    _: ApiKeyDep,
    request: LinkRequest | None = None,
) -> Disc:
    """Burn an existing resource to a disc."""
    notes = request.notes if request else None
    return await catalog.link_resource(disc_id, kind, resource_id, notes)


@router.delete("/{disc_id}/links/{kind}/{resource_id}", response_model=Disc)
async def unlink_resource(
    disc_id: int,
    kind: ResourceKind,
    resource_id: int,
    catalog: DiscCatalogDep,
    _: ApiKeyDep,
) -> Disc:
    """Remove a resource from a disc."""
    return await catalog.unlink_resource(disc_id, kind, resource_id)
