"""Tests for disc code generation."""

import random

import pytest

from discarchive.core.config import settings
from discarchive.core.exceptions import ExhaustedRetriesError
from discarchive.database.models import DiscORM
from discarchive.repositories import DiscRepository
from discarchive.services.disc_codes import (
    CODE_ALPHABET,
    CODE_LENGTH,
    DiscCodeAllocator,
    generate_disc_code,
)


def test_generate_disc_code_shape():
    """Codes are six characters from 0-9A-Z."""
    rng = random.Random(1)
    for _ in range(200):
        code = generate_disc_code(rng)
        assert len(code) == CODE_LENGTH
        assert set(code) <= set(CODE_ALPHABET)


async def test_allocate_skips_taken_codes():
    """Collisions are retried until a free code comes up."""
    taken = {generate_disc_code(random.Random(3))}
    rng = random.Random(3)  # First draw repeats the taken code

    async def exists(code: str) -> bool:
        return code in taken

    code = await DiscCodeAllocator(exists, rng=rng).allocate()
    assert code not in taken


async def test_allocate_terminates_with_crowded_store():
    """10,000 allocations against 9,999 taken codes all succeed and stay unique."""
    rng = random.Random(42)
    taken = set()
    while len(taken) < 9999:
        taken.add(generate_disc_code(rng))

    async def exists(code: str) -> bool:
        return code in taken

    allocator = DiscCodeAllocator(exists, rng=random.Random(99))
    for _ in range(10_000):
        code = await allocator.allocate()
        assert code not in taken
        taken.add(code)

    assert len(taken) == 19_999


async def test_allocate_gives_up_after_max_attempts():
    """A store where every code is taken exhausts the retry cap."""

    async def exists(code: str) -> bool:
        return True

    with pytest.raises(ExhaustedRetriesError):
        await DiscCodeAllocator(exists, max_attempts=5).allocate()


async def test_allocate_honours_zero_attempts():
    """An explicit zero cap never draws a code; only None means the default."""
    checked = []

    async def exists(code: str) -> bool:
        checked.append(code)
        return False

    with pytest.raises(ExhaustedRetriesError):
        await DiscCodeAllocator(exists, max_attempts=0).allocate()
    assert checked == []

    assert DiscCodeAllocator(exists).max_attempts == settings.disc_code_max_attempts


async def test_allocate_against_database(session):
    """The repository check sees codes already stored."""
    session.add(DiscORM(code="ABC123", type="DVD-R"))
    await session.flush()
    repo = DiscRepository(session)

    assert await repo.code_exists("ABC123")
    assert not await repo.code_exists("ZZZ999")

    code = await DiscCodeAllocator(repo.code_exists).allocate()
    assert code != "ABC123"
