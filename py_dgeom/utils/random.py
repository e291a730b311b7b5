"""
Seeded random site sets.

Sites are drawn with NumPy's ``default_rng`` so that a seed always gives the
same set, which keeps randomized map comparisons reproducible.
"""

from typing import Set

import numpy as np

from ..core.domain import HyperRectDomain, Point


def random_sites(domain: HyperRectDomain, count: int, seed: int = 0) -> Set[Point]:
    """
    Draw ``count`` points uniformly in ``domain``.

    Duplicates are merged, so the set may hold fewer than ``count`` points.

    Args:
        domain: Domain to sample
        count: Number of draws
        seed: Seed for the generator

    Returns:
        Set of distinct points
    """
    rng = np.random.default_rng(seed)
    draws = rng.integers(
        low=np.array(domain.lower), high=np.array(domain.upper) + 1,
        size=(count, domain.dimension),
    )
    return set(map(tuple, draws.tolist()))
