"""Hostname allocation for hosted (multi-tenant) deployments.

The base subdomain is the workspace name lower-cased, stripped to
``[a-z0-9]`` and cut to 20 characters. On collision a 3-digit random
suffix is appended (``base-123``, cut to 25 characters) and re-checked,
up to a fixed attempt budget.

The existence check is not isolated from the insert that follows it.
Callers must treat a uniqueness violation at insert time as a collision
and allocate again.
"""

import logging
import random
import re
from typing import Protocol

from src.workspaces.errors import AllocationExhaustedError, ValidationFailedError

logger = logging.getLogger(__name__)

BASE_MAX_LENGTH = 20
HOSTNAME_MAX_LENGTH = 25
SUFFIX_LENGTH = 3
DEFAULT_MAX_ATTEMPTS = 20

_DISALLOWED = re.compile(r"[^a-z0-9]")


class HostnameLookup(Protocol):
    async def hostname_exists(self, hostname: str) -> bool: ...


def normalize_hostname(name: str) -> str:
    """Derive the base subdomain from a workspace name."""
    return _DISALLOWED.sub("", name.lower())[:BASE_MAX_LENGTH]


def random_suffix(rng: random.Random, length: int = SUFFIX_LENGTH) -> str:
    """Fixed-length numeric suffix, zero-padded (``"007"``)."""
    return str(rng.randrange(10**length)).zfill(length)


class HostnameAllocator:
    """Resolve a unique hostname for a new workspace.

    Args:
        workspaces: Lookup used for the existence check.
        rng: Randomness source for suffixes. Inject a seeded
            ``random.Random`` for deterministic tests.
        max_attempts: Suffixed candidates tried after the base collides.
    """

    def __init__(
        self,
        workspaces: HostnameLookup,
        *,
        rng: random.Random | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        if max_attempts < 1:
            msg = "max_attempts must be >= 1"
            raise ValueError(msg)
        self._workspaces = workspaces
        self._rng = rng or random.Random()
        self._max_attempts = max_attempts

    async def allocate(self, candidate_name: str) -> str:
        """Return an unused hostname derived from ``candidate_name``.

        Raises:
            ValidationFailedError: If nothing usable survives normalization.
            AllocationExhaustedError: If every attempt collided.
        """
        base = normalize_hostname(candidate_name)
        if not base:
            msg = f"Cannot derive a hostname from {candidate_name!r}."
            raise ValidationFailedError(msg)

        if not await self._workspaces.hostname_exists(base):
            return base

        for attempt in range(1, self._max_attempts + 1):
            hostname = f"{base}-{random_suffix(self._rng)}"[:HOSTNAME_MAX_LENGTH]
            if not await self._workspaces.hostname_exists(hostname):
                logger.info("Hostname %s taken; allocated %s (attempt %d)", base, hostname, attempt)
                return hostname

        logger.warning("Hostname allocation exhausted for %s after %d attempts", base, self._max_attempts)
        msg = f"Could not allocate a unique hostname for {base!r} after {self._max_attempts} attempts."
        raise AllocationExhaustedError(msg)
