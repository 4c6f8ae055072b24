# Copyright (c) 2025 Henru Wang
# All rights reserved.

"""Identifier generation for new project objects.

Identifiers are 24 uppercase hex characters, the shape Xcode writes:
- 8 chars: stable hash of the object kind's isa name
- 8 chars: random seed drawn once per process
- 8 chars: per-store counter, bumped on every attempt

A candidate is accepted only if no object of any kind already uses it.
"""

import hashlib
import logging
import random
import re
from typing import Collection, Dict

from pbxgraph.errors import ReferenceGenerationError

logger = logging.getLogger(__name__)

REFERENCE_LENGTH = 24

_PROCESS_SEED = random.SystemRandom().getrandbits(32)
_COUNTER_MASK = 0xFFFFFFFF
_REFERENCE_PATTERN = re.compile("[0-9A-Fa-f]{%d}" % REFERENCE_LENGTH)


def kind_seed(isa: str) -> int:
    """Return a 32-bit seed for an isa name that is stable across processes."""
    return int(hashlib.md5(isa.encode("utf-8")).hexdigest()[:8], 16)


def is_valid_reference(reference: str) -> bool:
    """True if ``reference`` has the 24-hex-character shape of generated identifiers."""
    return _REFERENCE_PATTERN.fullmatch(reference) is not None


class ReferenceGenerator:
    """Produces identifiers that are unique within one store.

    Owned by an ObjectStore, so the counter is per store and there is no
    process-wide state besides the random seed.
    """

    def __init__(self, process_seed: int = _PROCESS_SEED) -> None:
        self._process_seed = process_seed & _COUNTER_MASK
        self._counter = 0
        self._kind_seeds: Dict[str, int] = {}

    def _seed_for(self, isa: str) -> int:
        seed = self._kind_seeds.get(isa)
        if seed is None:
            seed = kind_seed(isa)
            self._kind_seeds[isa] = seed
        return seed

    def generate(self, isa: str, existing: Collection[str]) -> str:
        """Return an identifier for an ``isa`` object not present in ``existing``.

        Args:
            isa: Kind of the object the identifier is for.
            existing: Every identifier currently in the store, all kinds.

        Raises:
            ReferenceGenerationError: If len(existing) + 1 consecutive candidates
                are all taken. Each attempt uses a fresh counter value, so this
                only happens if the counter wraps around.
        """
        seed = self._seed_for(isa)
        max_attempts = len(existing) + 1
        for _attempt in range(max_attempts):
            self._counter = (self._counter + 1) & _COUNTER_MASK
            candidate = f"{seed:08X}{self._process_seed:08X}{self._counter:08X}"
            if candidate not in existing:
                return candidate
            logger.debug(f"Identifier {candidate} already in use, retrying")

        raise ReferenceGenerationError(
            f"No free identifier for {isa} after {max_attempts} attempts"
        )
