"""Movie API endpoints."""

from typing import Literal

from fastapi import APIRouter, Query, Response

from discarchive.api.deps import ApiKeyDep, ResourceCatalogDep
from discarchive.models.page import Page
from discarchive.models.resources import Movie, MovieCreate, MovieUpdate

router = APIRouter(prefix="/api/movies", tags=["movies"])


@router.get("", response_model=Page[Movie])
async def list_movies(
    catalog: ResourceCatalogDep,
    page: int = Query(1, ge=1),
    page_size: int | None = Query(None, ge=1),
    disc_id: int | None = None,
    sort_field: Literal["name", "created_at"] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
) -> Page[Movie]:
    """List movies, optionally only those on one disc."""
    return await catalog.list_movies(
        page, page_size, disc_id, sort_field, descending=sort_order == "desc"
    )


@router.post("", response_model=Movie, status_code=201)
async def create_movie(
    request: MovieCreate,
    catalog: ResourceCatalogDep,
    _: ApiKeyDep,
) -> Movie:
    """Create a movie, optionally burning it to a disc."""
    return await catalog.create_movie(request)


@router.get("/{movie_id}", response_model=Movie)
async def get_movie(
    movie_id: int,
    catalog: ResourceCatalogDep,
) -> Movie:
    """Get a specific movie."""
    return await catalog.get_movie(movie_id)


@router.put("/{movie_id}", response_model=Movie)
async def update_movie(
    movie_id: int,
    update: MovieUpdate,
    catalog: ResourceCatalogDep,
    _: ApiKeyDep,
) -> Movie:
    """Update a movie."""
    return await catalog.update_movie(movie_id, update)


@router.delete("/{movie_id}", status_code=204)
async def delete_movie(
    movie_id: int,
    catalog: ResourceCatalogDep,
    _: ApiKeyDep,
) -> Response:
    """Delete a movie and remove it from every disc."""
    await catalog.delete_movie(movie_id)
    return Response(status_code=204)
