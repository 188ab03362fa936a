from __future__ import annotations

import random
from typing import Callable, List, Optional, Sequence, TypeVar

T = TypeVar("T")

# A seeder is called with no argument for a float in [0, 1),
# or with an integer max_value for an int in [0, max_value].
Seeder = Callable[..., float]


def seeded_random(seed: Optional[str] = None) -> Seeder:
    """
    Build a reproducible random function from an optional seed string.

    Two seeders made from the same seed give the same sequence. With no seed
    (or a blank one) the stdlib picks ambient entropy, so runs differ.
    """
    rng = random.Random(seed if seed else None)

    def _seeder(max_value: Optional[int] = None):
        if max_value is None:
            return rng.random()
        if max_value < 0:
            raise ValueError(f"max_value must be >= 0, got {max_value}")
        res = int(rng.random() * (max_value + 1))
        # floating point can still land on max_value + 1
        return min(res, max_value)

    return _seeder


def seeded_shuffle(sequence: Sequence[T], seeder: Optional[Seeder] = None) -> List[T]:
    """Fisher-Yates shuffle into a new list. The input is left untouched."""
    if seeder is None:
        seeder = seeded_random()
    result = list(sequence)
    for i in range(len(result) - 1, 0, -1):
        j = int(seeder() * (i + 1))
        result[i], result[j] = result[j], result[i]
    return result
