"""Disc code generation."""

import logging
import random
import string
from typing import Awaitable, Callable, Optional

from ..core.config import settings
from ..core.exceptions import ExhaustedRetriesError

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.digits + string.ascii_uppercase
CODE_LENGTH = 6


def generate_disc_code(rng: Optional[random.Random] = None) -> str:
    """
    Generate a random disc code.

    Not cryptographically secure; uniqueness is enforced by the caller.

    Args:
        rng: Random source (defaults to the module-level generator)

    Returns:
        Six characters from 0-9A-Z
    """
    choice = (rng or random).choice
    return "".join(choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


class DiscCodeAllocator:
    """Finds a disc code no existing disc uses."""

    def __init__(
        self,
        exists: Callable[[str], Awaitable[bool]],
        max_attempts: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize disc code allocator.

        Args:
            exists: Async check whether a code is already taken
            max_attempts: Give up after this many draws
            rng: Random source
        """
        self.exists = exists
        if max_attempts is None:
            max_attempts = settings.disc_code_max_attempts
        self.max_attempts = max_attempts
        self.rng = rng

    async def allocate(self) -> str:
        """
        Draw codes until an unused one comes up.

        Returns:
            An unused disc code
        """
        for attempt in range(1, self.max_attempts + 1):
            code = generate_disc_code(self.rng)
            if not await self.exists(code):
                return code
            logger.warning(f"Disc code collision on {code} (attempt {attempt})")

        raise ExhaustedRetriesError(
            f"No unused disc code found after {self.max_attempts} attempts"
        )
