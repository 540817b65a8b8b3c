"""Tests for disc creation."""

import random

import pytest
from sqlalchemy import func, select

from discarchive.core.exceptions import ConflictError, FormatError, NotFoundError
from discarchive.database.models import DiscORM, EpisodeORM, MovieORM, SeriesORM
from discarchive.models.disc import DiscCreate, DiscType
from discarchive.models.resources import EpisodeSpec, SeriesSpec
from discarchive.services.catalog import ResourceCatalog
from discarchive.services.disc_codes import DiscCodeAllocator
from discarchive.services.disc_linker import CODE_RACE_RETRIES, DiscLinker


async def count(session, model) -> int:
    return await session.scalar(select(func.count()).select_from(model))


async def test_create_disc_links_new_episode(session):
    """A disc with one new 1GiB episode sizes the series and the disc."""
    series = await ResourceCatalog(session).create_series(
        SeriesSpec(
            name="X",
            episodes=[EpisodeSpec(season="S01", episode=1, size="1GiB", format="mkv", codec="h264")],
        )
    )
    assert series.size == 1048576
    episode_id = series.episodes[0].id

    disc = await DiscLinker(session).create_disc(
        DiscCreate(type=DiscType.BD_R, selected_episode_ids=[episode_id])
    )

    assert disc.size == 1048576
    assert disc.size_display == "1.00 GiB"
    assert not disc.size_locked
    assert [e.episode.id for e in disc.episodes] == [episode_id]


async def test_create_disc_with_new_resources(session):
    """New movies, series, photo sets and others are created and linked."""
    request = DiscCreate.model_validate(
        {
            "type": "DVD+R",
            "new_movies": [
                {"name": "M", "size": {"value": 512, "unit": "MiB"}, "format": "mkv", "codec": "h264", "notes": "first burn"}
            ],
            "new_series": [
                {
                    "name": "Show",
                    "episodes": [
                        {"season": "S01", "episode": 1, "size": "100KiB", "format": "mp4", "codec": "h264"},
                        {"season": "S01", "episode": 2, "size": "200KiB", "format": "mp4", "codec": "h264"},
                    ],
                }
            ],
            "new_photo_sets": [{"name": "Album", "volumes": [{"vol": 1, "size": "1MiB"}]}],
            "new_others": [{"name": "Backup", "description": "docs", "size": "10KiB"}],
        }
    )

    disc = await DiscLinker(session).create_disc(request)

    assert len(disc.code) == 6
    assert disc.type == DiscType.DVD_PLUS_R
    assert disc.movies[0].movie.name == "M"
    assert disc.movies[0].notes == "first burn"
    assert len(disc.episodes) == 2
    assert disc.volumes[0].volume.label == "Album Vol.1"
    assert disc.others[0].other.description == "docs"
    assert disc.size == 524288 + 100 + 200 + 1024 + 10

    series = await session.scalar(select(SeriesORM).where(SeriesORM.name == "Show"))
    assert series.size == 300

    assert len(disc.history) == 1
    assert disc.history[0].status is True
    assert disc.history[0].note == "Disc created"


async def test_create_disc_under_existing_series(session):
    """New episodes of an existing series re-aggregate that series."""
    catalog = ResourceCatalog(session)
    series = await catalog.create_series(
        SeriesSpec(
            name="Long running",
            episodes=[EpisodeSpec(season="S01", episode=1, size="1MiB", format="mkv", codec="h264")],
        )
    )

    disc = await DiscLinker(session).create_disc(
        DiscCreate.model_validate(
            {
                "type": "BD-R",
                "new_episodes": [
                    {"series_id": series.id, "season": "S01", "episode": 2, "size": "2MiB", "format": "mkv", "codec": "h264"}
                ],
            }
        )
    )

    assert disc.size == 2048
    assert (await catalog.get_series(series.id)).size == 3072


async def test_create_disc_series_with_null_sizes(session):
    """A new series whose episodes have no size stays unsized."""
    disc = await DiscLinker(session).create_disc(
        DiscCreate(
            type=DiscType.DVD_R,
            new_series=[
                SeriesSpec(
                    name="Unknown",
                    episodes=[
                        EpisodeSpec(season="S01", episode=1, format="mkv", codec="h264"),
                        EpisodeSpec(season="S01", episode=2, format="mkv", codec="h264"),
                    ],
                )
            ],
        )
    )

    assert disc.size is None
    assert disc.size_display == "-"
    series = await session.scalar(select(SeriesORM).where(SeriesORM.name == "Unknown"))
    assert series.size is None


async def test_declared_size_is_sticky(session):
    """A declared size is kept and locked even when resources have sizes."""
    disc = await DiscLinker(session).create_disc(
        DiscCreate.model_validate(
            {
                "type": "BD-R",
                "size": "25GiB",
                "new_movies": [{"name": "M", "size": "1GiB", "format": "mkv", "codec": "h264"}],
            }
        )
    )

    assert disc.size == 25 * 1048576
    assert disc.size_locked


async def test_selected_ids_are_deduplicated(session):
    """Repeating an ID links the resource once, with its note."""
    movie = MovieORM(name="M", size=10, format="mkv", codec="h264")
    session.add(movie)
    await session.flush()

    disc = await DiscLinker(session).create_disc(
        DiscCreate(
            type=DiscType.CD_R,
            selected_movie_ids=[movie.id, movie.id],
            movie_notes={movie.id: "again"},
        )
    )

    assert len(disc.movies) == 1
    assert disc.movies[0].notes == "again"
    assert disc.size == 10


async def test_bad_size_writes_nothing(session):
    """An invalid size anywhere in the request fails before any row is written."""
    request = DiscCreate.model_validate(
        {
            "type": "BD-R",
            "new_movies": [
                {"name": "Good", "size": "1GiB", "format": "mkv", "codec": "h264"},
                {"name": "Bad", "size": "1 GiB", "format": "mkv", "codec": "h264"},
            ],
        }
    )

    with pytest.raises(FormatError):
        await DiscLinker(session).create_disc(request)

    assert await count(session, DiscORM) == 0
    assert await count(session, MovieORM) == 0


async def test_missing_reference_writes_nothing(session):
    """Unknown selected IDs and parent IDs are rejected up front."""
    with pytest.raises(NotFoundError) as exc_info:
        await DiscLinker(session).create_disc(
            DiscCreate(type=DiscType.BD_R, selected_movie_ids=[404])
        )
    assert exc_info.value.message == "Movie 404 not found"

    with pytest.raises(NotFoundError):
        await DiscLinker(session).create_disc(
            DiscCreate.model_validate(
                {
                    "type": "BD-R",
                    "new_episodes": [
                        {"series_id": 77, "season": "S01", "episode": 1, "format": "mkv", "codec": "h264"}
                    ],
                }
            )
        )

    assert await count(session, DiscORM) == 0
    assert await count(session, EpisodeORM) == 0


async def test_failure_after_writes_rolls_back(session_factory):
    """A failure midway leaves no partial disc once the transaction is rolled back."""

    class FailingLinker(DiscLinker):
        async def _add_episode(self, *args, **kwargs):
            raise RuntimeError("store went away")

    async with session_factory() as session:
        with pytest.raises(RuntimeError):
            await FailingLinker(session).create_disc(
                DiscCreate(
                    type=DiscType.BD_R,
                    new_series=[
                        SeriesSpec(
                            name="Doomed",
                            episodes=[EpisodeSpec(season="S01", episode=1, format="mkv", codec="h264")],
                        )
                    ],
                )
            )
        await session.rollback()

    async with session_factory() as session:
        assert await count(session, DiscORM) == 0
        assert await count(session, SeriesORM) == 0


async def test_code_race_retries_with_fresh_code(session_factory):
    """Losing the race for a code reruns the creation with another code."""
    async with session_factory() as session:
        session.add(DiscORM(code="TAKEN1", type="BD-R"))
        await session.commit()

    codes = iter(["TAKEN1", "FRESH1"])

    async def never_taken(code: str) -> bool:
        return False

    class ScriptedAllocator(DiscCodeAllocator):
        async def allocate(self) -> str:
            return next(codes)

    async with session_factory() as session:
        linker = DiscLinker(session, code_allocator=ScriptedAllocator(never_taken))
        disc = await linker.create_disc(DiscCreate(type=DiscType.BD_R))
        await session.commit()

    assert disc.code == "FRESH1"
    async with session_factory() as session:
        assert await count(session, DiscORM) == 2


async def test_code_race_gives_up(session_factory):
    """Repeatedly losing the race surfaces a conflict."""
    async with session_factory() as session:
        session.add(DiscORM(code="TAKEN1", type="BD-R"))
        await session.commit()

    async def never_taken(code: str) -> bool:
        return False

    class StuckAllocator(DiscCodeAllocator):
        calls = 0

        async def allocate(self) -> str:
            self.calls += 1
            return "TAKEN1"

    allocator = StuckAllocator(never_taken)
    async with session_factory() as session:
        linker = DiscLinker(session, code_allocator=allocator)
        with pytest.raises(ConflictError):
            await linker.create_disc(DiscCreate(type=DiscType.BD_R))

    assert allocator.calls == CODE_RACE_RETRIES


async def test_random_codes_are_unique(session):
    """Several discs in a row all get distinct codes."""
    linker = DiscLinker(
        session,
        code_allocator=DiscCodeAllocator(
            DiscLinker(session).discs.code_exists, rng=random.Random(5)
        ),
    )
    codes = {(await linker.create_disc(DiscCreate(type=DiscType.CD_RW))).code for _ in range(5)}
    assert len(codes) == 5
