"""
generators.py — Input Array Supply
===================================
Builds the shared source array both panels sort.

Every distribution starts from the sequence 1..count, so all values are
positive integers and (except `few-unique`) the array is a permutation
of 1..count:

  • random            – Fisher–Yates shuffle
  • ascending         – 1, 2, …, count
  • descending        – count, …, 2, 1
  • split-ascending   – upper half ascending, then lower half ascending
  • split-descending  – upper half descending, then lower half descending
  • nearly-sorted     – ascending with max(1, count // 10) random swaps
  • few-unique        – count draws from 1..max(2, min(10, count // 10))

Randomness comes from an injectable `random.Random` so tests and demos
can reproduce an array exactly with a seed.
"""

import random
from enum import Enum
from typing import List, Optional, Sequence, Union

from errors import ConfigOutOfRange


class Distribution(str, Enum):
    RANDOM           = "random"
    ASCENDING        = "ascending"
    DESCENDING       = "descending"
    SPLIT_ASCENDING  = "split-ascending"
    SPLIT_DESCENDING = "split-descending"
    NEARLY_SORTED    = "nearly-sorted"
    FEW_UNIQUE       = "few-unique"

    @property
    def label(self) -> str:
        return self.value.replace("-", " ").title()


def parse_distribution(name: Union[str, Distribution]) -> Distribution:
    """Accept an enum member or its string value.  Unknown names raise."""
    if isinstance(name, Distribution):
        return name
    try:
        return Distribution(str(name).strip().lower())
    except ValueError:
        raise ConfigOutOfRange(f"Unknown distribution: {name!r}") from None


def generate_array(
    count: int,
    distribution: Union[str, Distribution] = Distribution.RANDOM,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
) -> List[int]:
    """
    Return `count` positive integers shaped by `distribution`.

    Args:
        count        : Number of elements (callers clamp it beforehand).
        distribution : A Distribution or its string value.
        rng          : Random source; defaults to a fresh Random(seed).
        seed         : Used only when `rng` is not given.
    """
    dist  = parse_distribution(distribution)
    rng   = rng or random.Random(seed)
    count = max(0, int(count))
    base  = list(range(1, count + 1))
    half  = count // 2

    if dist is Distribution.RANDOM:
        for i in range(len(base) - 1, 0, -1):
            j = rng.randint(0, i)
            base[i], base[j] = base[j], base[i]
        return base

    if dist is Distribution.ASCENDING:
        return base

    if dist is Distribution.DESCENDING:
        return base[::-1]

    if dist is Distribution.SPLIT_ASCENDING:
        return base[half:] + base[:half]

    if dist is Distribution.SPLIT_DESCENDING:
        return base[half:][::-1] + base[:half][::-1]

    if dist is Distribution.NEARLY_SORTED:
        for _ in range(max(1, count // 10) if count else 0):
            i, j = rng.randrange(count), rng.randrange(count)
            base[i], base[j] = base[j], base[i]
        return base

    # few-unique
    unique = max(2, min(10, count // 10))
    return [rng.randint(1, unique) for _ in range(count)]


def is_sorted(values: Sequence[float]) -> bool:
    """True if `values` is in non-decreasing order."""
    return all(values[i] <= values[i + 1] for i in range(len(values) - 1))
