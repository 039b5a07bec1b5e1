"""Seeded random fill: the first phase of cave generation.

The same (width, height, fill percent, seed text) always yields a bit-identical
grid. Seed text is hashed with SHA-256 rather than ``hash()`` so results do not
depend on interpreter hash randomisation.
"""
from __future__ import annotations

import hashlib
import random
import time
from typing import Callable, Optional

from .cells import Grid
from .tiles import OPEN, SOLID

SEED_INT_MAX = 9223372036854775807


def time_seed() -> str:
    """Default seed source for random-seed mode."""
    return str(time.time())


def resolve_seed(seed: str, use_random_seed: bool, seed_source: Optional[Callable[[], str]] = None) -> str:
    """Return the seed text actually used for a generation.

    In random-seed mode the text comes from ``seed_source`` (current time by
    default); callers record the result so the map can be replayed later.
    """
    if use_random_seed:
        source = seed_source or time_seed
        return str(source())
    return seed


def seed_to_int(seed: str) -> int:
    """Convert seed text into a bounded non-negative integer.

    Digit-only text maps to its own value so numeric seeds stay readable.
    """
    s = seed.strip()
    if s.isdigit():
        return int(s) % SEED_INT_MAX
    h = hashlib.sha256(seed.encode("utf-8")).digest()
    return int.from_bytes(h[:8], "big") % SEED_INT_MAX


def random_fill_map(width: int, height: int, fill_percent: int, seed: str) -> Grid:
    rng = random.Random(seed_to_int(seed))
    grid: Grid = [[SOLID for _ in range(height)] for _ in range(width)]
    for x in range(width):
        for y in range(height):
            if x == 0 or x == width - 1 or y == 0 or y == height - 1:
                continue
            grid[x][y] = SOLID if rng.randrange(100) < fill_percent else OPEN
    return grid


__all__ = ["resolve_seed", "seed_to_int", "random_fill_map", "time_seed"]
