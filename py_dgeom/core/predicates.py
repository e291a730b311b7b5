"""
Point predicates selecting the sites of a Voronoi map.

A predicate is a pure ``Point -> bool`` test: True marks a site. The sweep
only needs :meth:`PointPredicate.mask`, which evaluates the predicate over a
whole domain at once; subclasses backed by sets or arrays override it with a
vectorised version.
"""

from abc import ABC, abstractmethod
from typing import Callable, Iterable

import numpy as np

from .domain import HyperRectDomain, Point, to_point


class PointPredicate(ABC):
    """Boolean membership test over integer points."""

    @abstractmethod
    def __call__(self, point: Point) -> bool:
        ...

    def mask(self, domain: HyperRectDomain) -> np.ndarray:
        """Evaluate the predicate at every domain point."""
        out = np.zeros(domain.shape, dtype=bool)
        for point in domain:
            if self(point):
                out[domain.index_of(point)] = True
        return out

    def __invert__(self) -> "NotPointPredicate":
        return NotPointPredicate(self)

    def __and__(self, other) -> "AndPointPredicate":
        return AndPointPredicate(self, as_predicate(other))

    def __or__(self, other) -> "OrPointPredicate":
        return OrPointPredicate(self, as_predicate(other))


class FunctionPredicate(PointPredicate):
    """Wraps a plain callable."""

    def __init__(self, fn: Callable[[Point], bool]):
        self.fn = fn

    def __call__(self, point: Point) -> bool:
        return bool(self.fn(point))


class SetPredicate(PointPredicate):
    """True on the points of a finite set."""

    def __init__(self, points: Iterable):
        self.points = frozenset(to_point(p) for p in points)

    def __call__(self, point: Point) -> bool:
        return to_point(point) in self.points

    def __len__(self) -> int:
        return len(self.points)

    def mask(self, domain: HyperRectDomain) -> np.ndarray:
        out = np.zeros(domain.shape, dtype=bool)
        for point in self.points:
            if domain.contains(point):
                out[domain.index_of(point)] = True
        return out


class MaskPredicate(PointPredicate):
    """
    True where a boolean array is set.

    ``array[i0, i1, ...]`` holds the value at point ``lower + (i0, i1, ...)``;
    points outside the array are False.
    """

    def __init__(self, array, lower=None):
        self.array = np.asarray(array, dtype=bool)
        if lower is None:
            lower = (0,) * self.array.ndim
        self.lower = to_point(lower)
        if len(self.lower) != self.array.ndim:
            raise ValueError(
                f"Origin {self.lower} does not match array dimension {self.array.ndim}"
            )

    def __call__(self, point: Point) -> bool:
        index = tuple(c - lo for c, lo in zip(point, self.lower))
        if any(i < 0 or i >= n for i, n in zip(index, self.array.shape)):
            return False
        return bool(self.array[index])

    def mask(self, domain: HyperRectDomain) -> np.ndarray:
        out = np.zeros(domain.shape, dtype=bool)
        src, dst = [], []
        for axis in range(domain.dimension):
            # overlap of the array extent with the domain extent on this axis
            lo = max(domain.lower[axis], self.lower[axis])
            hi = min(domain.upper[axis], self.lower[axis] + self.array.shape[axis] - 1)
            if lo > hi:
                return out
            src.append(slice(lo - self.lower[axis], hi - self.lower[axis] + 1))
            dst.append(slice(lo - domain.lower[axis], hi - domain.lower[axis] + 1))
        out[tuple(dst)] = self.array[tuple(src)]
        return out


class ConstantPointPredicate(PointPredicate):
    def __init__(self, value: bool):
        self.value = bool(value)

    def __call__(self, point: Point) -> bool:
        return self.value

    def mask(self, domain: HyperRectDomain) -> np.ndarray:
        return np.full(domain.shape, self.value, dtype=bool)


class DomainPredicate(PointPredicate):
    """True inside a domain."""

    def __init__(self, domain: HyperRectDomain):
        self.domain = domain

    def __call__(self, point: Point) -> bool:
        return self.domain.contains(to_point(point))


class NotPointPredicate(PointPredicate):
    """
    Negation of another predicate.

    Useful for inputs where the sites are the points where a predicate is
    *false*, e.g. a foreground mask whose background should act as sites.
    """

    def __init__(self, predicate: PointPredicate):
        self.predicate = predicate

    def __call__(self, point: Point) -> bool:
        return not self.predicate(point)

    def mask(self, domain: HyperRectDomain) -> np.ndarray:
        return ~self.predicate.mask(domain)


class AndPointPredicate(PointPredicate):
    def __init__(self, first: PointPredicate, second: PointPredicate):
        self.first = first
        self.second = second

    def __call__(self, point: Point) -> bool:
        return self.first(point) and self.second(point)

    def mask(self, domain: HyperRectDomain) -> np.ndarray:
        return self.first.mask(domain) & self.second.mask(domain)


class OrPointPredicate(PointPredicate):
    def __init__(self, first: PointPredicate, second: PointPredicate):
        self.first = first
        self.second = second

    def __call__(self, point: Point) -> bool:
        return self.first(point) or self.second(point)

    def mask(self, domain: HyperRectDomain) -> np.ndarray:
        return self.first.mask(domain) | self.second.mask(domain)


def as_predicate(obj) -> PointPredicate:
    """
    Normalise a predicate-like object.

    Accepts a PointPredicate, a boolean numpy array (origin at 0), any
    callable, or an iterable of points.
    """
    if isinstance(obj, PointPredicate):
        return obj
    if isinstance(obj, np.ndarray):
        if obj.dtype != bool:
            raise TypeError(f"Mask arrays must be boolean, got {obj.dtype}")
        return MaskPredicate(obj)
    if callable(obj):
        return FunctionPredicate(obj)
    if isinstance(obj, (set, frozenset, list, tuple)):
        return SetPredicate(obj)
    raise TypeError(f"Cannot build a point predicate from {type(obj).__name__}")
