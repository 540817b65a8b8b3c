"""Tests for size aggregation."""

import random

import pytest

from discarchive.database.models import DiscORM, EpisodeORM, MovieORM, SeriesORM
from discarchive.models.resources import ResourceKind
from discarchive.repositories import LinkRepository
from discarchive.services.size_aggregator import SizeAggregator, aggregate


def test_aggregate_empty_and_unknown():
    """No known child size means unknown, not zero."""
    assert aggregate([]) is None
    assert aggregate([None, None]) is None


def test_aggregate_skips_unknown():
    """Unknown sizes are skipped, known ones summed."""
    assert aggregate([100, None, 200]) == 300
    assert aggregate([0]) == 0


def test_aggregate_matches_sum():
    """Without unknowns the aggregate is the plain sum."""
    rng = random.Random(7)
    for _ in range(50):
        sizes = [rng.randint(0, 10**9) for _ in range(rng.randint(1, 20))]
        assert aggregate(sizes) == sum(sizes)


@pytest.fixture
async def disc_with_movies(session):
    """A disc holding two movies of known size."""
    disc = DiscORM(code="AGG001", type="BD-R")
    first = MovieORM(name="First", size=1000, format="mkv", codec="h264")
    second = MovieORM(name="Second", size=2000, format="mkv", codec="h265")
    session.add_all([disc, first, second])
    await session.flush()

    links = LinkRepository(session)
    await links.create(ResourceKind.MOVIE, disc.id, first.id)
    await links.create(ResourceKind.MOVIE, disc.id, second.id)
    return disc


async def test_recompute_disc_is_idempotent(session, disc_with_movies):
    """Recomputing twice with no change in between gives the same size."""
    aggregator = SizeAggregator(session)

    first = await aggregator.recompute_disc(disc_with_movies.id)
    second = await aggregator.recompute_disc(disc_with_movies.id)

    assert first == 3000
    assert second == first


async def test_recompute_disc_leaves_locked_size(session, disc_with_movies):
    """A declared size is never overwritten by aggregation."""
    disc_with_movies.size = 42
    disc_with_movies.size_locked = True

    assert await SizeAggregator(session).recompute_disc(disc_with_movies.id) == 42
    assert disc_with_movies.size == 42


async def test_recompute_series_all_null_stays_null(session):
    """A series whose episodes have no size has no size."""
    series = SeriesORM(name="Unknown sizes")
    session.add(series)
    await session.flush()
    session.add_all(
        [
            EpisodeORM(series_id=series.id, season="S01", episode=n, format="mkv", codec="h264")
            for n in (1, 2)
        ]
    )

    assert await SizeAggregator(session).recompute_series(series.id) is None
    assert series.size is None


async def test_recompute_missing_rows(session):
    """Recomputing rows that do not exist is a no-op."""
    aggregator = SizeAggregator(session)
    assert await aggregator.recompute_disc(999) is None
    assert await aggregator.recompute_series(999) is None
    assert await aggregator.recompute_photo_set(999) is None
