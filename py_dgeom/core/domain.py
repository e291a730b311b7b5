"""Axis-aligned integer hyper-rectangle domains."""

import itertools
from dataclasses import dataclass, field
from typing import Iterator, Sequence, Tuple

import numpy as np

from .errors import InvalidDomainError, OutOfDomainError

Point = Tuple[int, ...]


def to_point(coords) -> Point:
    """Normalise a sequence or numpy array of integers to a tuple of ints."""
    if isinstance(coords, np.ndarray):
        coords = coords.tolist()
    return tuple(int(c) for c in coords)


@dataclass(frozen=True)
class HyperRectDomain:
    """
    Rectangular domain of Z^d bounded by two points (both included).

    Points are enumerated in lexicographic order with the last axis varying
    fastest, which is the C order of the arrays built over the domain.
    """
    lower: Point
    upper: Point
    shape: Tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        lower = to_point(self.lower)
        upper = to_point(self.upper)
        if len(lower) == 0:
            raise InvalidDomainError("Domain must have at least one dimension")
        if len(lower) != len(upper):
            raise InvalidDomainError(
                f"Bound dimensions differ: lower={lower} upper={upper}"
            )
        for axis, (lo, hi) in enumerate(zip(lower, upper)):
            if lo > hi:
                raise InvalidDomainError(
                    f"Lower bound exceeds upper bound on axis {axis}: {lo} > {hi}"
                )
        # frozen dataclass: bypass __setattr__ for normalised fields
        object.__setattr__(self, "lower", lower)
        object.__setattr__(self, "upper", upper)
        object.__setattr__(
            self, "shape", tuple(hi - lo + 1 for lo, hi in zip(lower, upper))
        )

    @property
    def dimension(self) -> int:
        return len(self.lower)

    @property
    def size(self) -> int:
        """Number of points in the domain."""
        n = 1
        for extent in self.shape:
            n *= extent
        return n

    def contains(self, point: Sequence[int]) -> bool:
        if len(point) != self.dimension:
            return False
        return all(lo <= c <= hi for c, lo, hi in zip(point, self.lower, self.upper))

    def __contains__(self, point) -> bool:
        return self.contains(to_point(point))

    def index_of(self, point: Sequence[int]) -> Tuple[int, ...]:
        """Array index of ``point`` in buffers laid out over this domain."""
        point = to_point(point)
        if not self.contains(point):
            raise OutOfDomainError(f"Point {point} is outside domain {self.lower}..{self.upper}")
        return tuple(c - lo for c, lo in zip(point, self.lower))

    def point_at(self, index: Sequence[int]) -> Point:
        """Inverse of :meth:`index_of`."""
        return tuple(int(i) + lo for i, lo in zip(index, self.lower))

    def __iter__(self) -> Iterator[Point]:
        ranges = [range(lo, hi + 1) for lo, hi in zip(self.lower, self.upper)]
        return iter(itertools.product(*ranges))

    def __len__(self) -> int:
        return self.size

    def coordinates(self) -> np.ndarray:
        """All domain points as an ``(size, d)`` int64 array, in iteration order."""
        axes = [np.arange(lo, hi + 1, dtype=np.int64) for lo, hi in zip(self.lower, self.upper)]
        grids = np.meshgrid(*axes, indexing="ij")
        return np.stack([g.ravel() for g in grids], axis=1)

    def line(self, point: Sequence[int], axis: int) -> Tuple[Point, Point]:
        """End points of the domain line through ``point`` along ``axis``."""
        start = list(point)
        end = list(point)
        start[axis] = self.lower[axis]
        end[axis] = self.upper[axis]
        return tuple(start), tuple(end)
