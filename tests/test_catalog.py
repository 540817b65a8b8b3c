"""Tests for catalog update, delete and link propagation."""

from datetime import date

import pytest
from sqlalchemy import select

from discarchive.core.exceptions import ConflictError, NotFoundError, ValidationError
from discarchive.database.models import DiscMovieORM, EpisodeORM
from discarchive.models.disc import DiscCreate, DiscType, DiscUpdate, InspectionCreate
from discarchive.models.resources import (
    EpisodeCreate,
    EpisodeSpec,
    EpisodeUpdate,
    MovieCreate,
    MovieUpdate,
    OtherCreate,
    PhotoSetSpec,
    ResourceKind,
    SeriesSpec,
    VolumeCreate,
    VolumeSpec,
    VolumeUpdate,
)
from discarchive.services.catalog import DiscCatalog, ResourceCatalog, clamp_page
from discarchive.services.disc_linker import DiscLinker


@pytest.fixture
def discs(session):
    return DiscCatalog(session)


@pytest.fixture
def resources(session):
    return ResourceCatalog(session)


async def new_disc(session, **fields):
    return await DiscLinker(session).create_disc(DiscCreate.model_validate({"type": "BD-R", **fields}))


async def test_delete_other_recomputes_disc(session, discs, resources):
    """A 512MiB movie and a 256MiB other add up, and deleting the other shrinks the disc."""
    disc = await new_disc(session)
    await resources.create_movie(
        MovieCreate(name="M", size="512MiB", format="mkv", codec="h264", disc_id=disc.id)
    )
    other = await resources.create_other(OtherCreate(name="O", size="256MiB", disc_id=disc.id))

    assert (await discs.get_disc(disc.id)).size == 786432

    await resources.delete_other(other.id)

    assert (await discs.get_disc(disc.id)).size == 524288


async def test_update_movie_size_recomputes_every_disc(session, discs, resources):
    """Resizing a movie re-aggregates all discs holding it."""
    movie = await resources.create_movie(MovieCreate(name="M", size="1MiB", format="mkv", codec="h264"))
    first = await new_disc(session, selected_movie_ids=[movie.id])
    second = await new_disc(session, selected_movie_ids=[movie.id])

    updated = await resources.update_movie(movie.id, MovieUpdate(size="2MiB"))

    assert updated.size == 2048
    assert (await discs.get_disc(first.id)).size == 2048
    assert (await discs.get_disc(second.id)).size == 2048


async def test_clearing_movie_size_makes_disc_unsized(session, discs, resources):
    """An explicit null size clears it; other fields alone leave it."""
    movie = await resources.create_movie(MovieCreate(name="M", size="1MiB", format="mkv", codec="h264"))
    disc = await new_disc(session, selected_movie_ids=[movie.id])

    renamed = await resources.update_movie(movie.id, MovieUpdate(name="Renamed"))
    assert renamed.size == 1024

    await resources.update_movie(movie.id, MovieUpdate.model_validate({"size": None}))
    assert (await discs.get_disc(disc.id)).size is None


async def test_delete_movie_removes_links(session, discs, resources):
    """Deleting a movie removes its disc links."""
    movie = await resources.create_movie(MovieCreate(name="M", size="1MiB", format="mkv", codec="h264"))
    disc = await new_disc(session, selected_movie_ids=[movie.id])

    await resources.delete_movie(movie.id)

    assert (await session.scalars(select(DiscMovieORM))).all() == []
    refreshed = await discs.get_disc(disc.id)
    assert refreshed.movies == []
    assert refreshed.size is None


async def test_episode_update_and_delete_propagate(session, discs, resources):
    """Episode changes reach both the series and the disc."""
    series = await resources.create_series(
        SeriesSpec(
            name="Show",
            episodes=[
                EpisodeSpec(season="S01", episode=1, size="1MiB", format="mkv", codec="h264"),
                EpisodeSpec(season="S01", episode=2, size="2MiB", format="mkv", codec="h264"),
            ],
        )
    )
    first, second = series.episodes
    disc = await new_disc(session, selected_episode_ids=[first.id, second.id])
    assert disc.size == 3072

    await resources.update_episode(first.id, EpisodeUpdate(size="4MiB"))
    assert (await resources.get_series(series.id)).size == 6144
    assert (await discs.get_disc(disc.id)).size == 6144

    await resources.delete_episode(second.id)
    assert (await resources.get_series(series.id)).size == 4096
    assert (await discs.get_disc(disc.id)).size == 4096

    await resources.delete_episode(first.id)
    assert (await resources.get_series(series.id)).size is None
    assert (await discs.get_disc(disc.id)).size is None


async def test_delete_series_cascades(session, discs, resources):
    """Deleting a series deletes its episodes and re-aggregates their discs."""
    movie = await resources.create_movie(MovieCreate(name="M", size="1MiB", format="mkv", codec="h264"))
    disc = await new_disc(
        session,
        selected_movie_ids=[movie.id],
        new_series=[
            {"name": "Show", "episodes": [{"season": "S01", "episode": 1, "size": "5MiB", "format": "mkv", "codec": "h264"}]}
        ],
    )
    assert disc.size == 6144
    series_id = disc.episodes[0].episode.series_id

    await resources.delete_series(series_id)

    assert (await session.scalars(select(EpisodeORM))).all() == []
    refreshed = await discs.get_disc(disc.id)
    assert refreshed.episodes == []
    assert refreshed.size == 1024

    with pytest.raises(NotFoundError):
        await resources.get_series(series_id)


async def test_volumes_propagate(session, discs, resources):
    """Volumes added with a disc ID size their photo set and the disc."""
    photo_set = await resources.create_photo_set(PhotoSetSpec(name="Album", volumes=[VolumeSpec(vol=1, size="1MiB")]))
    disc = await new_disc(session)

    volume = await resources.add_volume(photo_set.id, VolumeCreate(vol=2, size="3MiB", disc_id=disc.id, notes="scan"))

    assert volume.label == "Album Vol.2"
    assert volume.discs[0].notes == "scan"
    assert (await resources.get_photo_set(photo_set.id)).size == 4096
    assert (await discs.get_disc(disc.id)).size == 3072

    await resources.update_volume(volume.id, VolumeUpdate(size="1MiB"))
    assert (await discs.get_disc(disc.id)).size == 1024

    await resources.delete_photo_set(photo_set.id)
    assert (await discs.get_disc(disc.id)).size is None


async def test_add_episode_to_missing_series(resources):
    """Adding to an unknown series is not found."""
    with pytest.raises(NotFoundError):
        await resources.add_episode(99, EpisodeCreate(season="S01", episode=1, format="mkv", codec="h264"))


async def test_link_and_unlink(session, discs, resources):
    """Linking recomputes the disc; linking twice conflicts; unlinking recomputes again."""
    movie = await resources.create_movie(MovieCreate(name="M", size="1MiB", format="mkv", codec="h264"))
    disc = await new_disc(session)

    linked = await discs.link_resource(disc.id, ResourceKind.MOVIE, movie.id, "late addition")
    assert linked.size == 1024
    assert linked.movies[0].notes == "late addition"

    with pytest.raises(ConflictError):
        await discs.link_resource(disc.id, ResourceKind.MOVIE, movie.id)

    unlinked = await discs.unlink_resource(disc.id, ResourceKind.MOVIE, movie.id)
    assert unlinked.movies == []
    assert unlinked.size is None

    with pytest.raises(NotFoundError):
        await discs.unlink_resource(disc.id, ResourceKind.MOVIE, movie.id)
    with pytest.raises(NotFoundError):
        await discs.link_resource(disc.id, ResourceKind.OTHER, 404)


async def test_update_disc_locks_and_unlocks_size(session, discs, resources):
    """Declaring a size locks it; clearing it derives the size again."""
    movie = await resources.create_movie(MovieCreate(name="M", size="1MiB", format="mkv", codec="h264"))
    disc = await new_disc(session, selected_movie_ids=[movie.id])

    locked = await discs.update_disc(disc.id, DiscUpdate(size="4GiB", type=DiscType.BD_RE))
    assert locked.size == 4 * 1048576
    assert locked.size_locked
    assert locked.type == DiscType.BD_RE

    await resources.update_movie(movie.id, MovieUpdate(size="2MiB"))
    assert (await discs.get_disc(disc.id)).size == 4 * 1048576

    unlocked = await discs.update_disc(disc.id, DiscUpdate.model_validate({"size": None}))
    assert not unlocked.size_locked
    assert unlocked.size == 2048


async def test_inspection_history(session, discs):
    """Inspections are listed newest first after the creation record."""
    disc = await new_disc(session)

    await discs.add_inspection(disc.id, InspectionCreate(date=date(2000, 1, 1), status=False, note="unreadable"))
    await discs.add_inspection(disc.id, InspectionCreate(date=date(2100, 1, 1), status=True))

    history = await discs.list_inspections(disc.id)
    assert [r.date for r in history][0] == date(2100, 1, 1)
    assert history[-1].note == "unreadable"
    assert len(history) == 3


async def test_list_discs(session, discs):
    """Listing filters by type, pages, and carries only the latest inspection."""
    for disc_type in ("BD-R", "BD-R", "DVD-R"):
        await new_disc(session, type=disc_type)

    page = await discs.list_discs(page=1, page_size=2, disc_type=DiscType.BD_R, sort_field="code", descending=False)
    assert page.total == 2
    assert len(page.data) == 2
    assert page.data[0].code < page.data[1].code
    assert all(len(d.history) == 1 for d in page.data)

    second_page = await discs.list_discs(page=2, page_size=2)
    assert second_page.total == 3
    assert len(second_page.data) == 1


async def test_delete_disc_keeps_resources(session, discs, resources):
    """Deleting a disc leaves its resources in place."""
    movie = await resources.create_movie(MovieCreate(name="M", size="1MiB", format="mkv", codec="h264"))
    disc = await new_disc(session, selected_movie_ids=[movie.id])

    await discs.delete_disc(disc.id)

    with pytest.raises(NotFoundError):
        await discs.get_disc(disc.id)
    assert (await resources.get_movie(movie.id)).discs == []


async def test_rename_requires_text(session, resources):
    """Blank names are rejected."""
    series = await resources.create_series(SeriesSpec(name="Show"))
    with pytest.raises(ValidationError):
        await resources.rename_series(series.id, "   ")
    assert (await resources.rename_series(series.id, "Renamed")).name == "Renamed"


def test_clamp_page():
    """Page sizes fall back to the default and are capped."""
    assert clamp_page(0, None) == (1, 10)
    assert clamp_page(2, 1000) == (2, 100)
