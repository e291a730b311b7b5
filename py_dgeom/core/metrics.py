"""
Separable Lp metrics used by the Voronoi map sweep.

Two back-ends share one interface:

- ``ExactLpSeparableMetric``: integer exponent, all comparisons on Python
  ints, so no rounding can misclassify a site.
- ``InexactLpSeparableMetric``: float exponent, comparisons on floats. Faster
  to set up for arbitrary p, but near-ties may be decided either way within
  rounding error.

Ordering never needs the p-th root: ``raw_distance`` returns the sum of
powered absolute differences, a monotone surrogate of the Lp distance.

Along a line parallel to an axis, the profile of a site is
``|x - a|^p + h`` where ``a`` is the site's coordinate on the axis and ``h``
its raw distance to the line. For p >= 1 the difference of two profiles is
monotone in ``x``, so two sites exchange ranks at most once along a line.
This is what makes the Hidden-Point-Removal test a comparison of two
takeover positions.
"""

import math
import numbers
from abc import ABC, abstractmethod
from enum import Enum
from typing import Sequence

from .errors import InvalidMetricParameterError


class Closest(Enum):
    """Outcome of comparing two sites against a query point."""
    FIRST = 0
    SECOND = 1
    BOTH = 2


class SeparableMetric(ABC):
    """Common operations of the Lp separable metrics."""

    exact: bool = True

    def __init__(self, p):
        self.p = self._check_exponent(p)

    @staticmethod
    @abstractmethod
    def _check_exponent(p):
        ...

    @abstractmethod
    def power(self, delta):
        """|delta|^p in the metric's number type."""

    @property
    def exponent(self):
        return self.p

    def raw_distance(self, p: Sequence[int], q: Sequence[int]):
        """Sum of |p_i - q_i|^p; ordered like the true Lp distance."""
        return sum(self.power(a - b) for a, b in zip(p, q))

    def distance(self, p: Sequence[int], q: Sequence[int]) -> float:
        """True Lp distance between two points."""
        return self.raw_to_distance(self.raw_distance(p, q))

    def raw_to_distance(self, raw) -> float:
        if self.p == 1:
            return float(raw)
        if self.p == 2:
            return math.sqrt(raw)
        return float(raw) ** (1.0 / self.p)

    def closest(self, origin: Sequence[int], first: Sequence[int],
                second: Sequence[int]) -> Closest:
        d_first = self.raw_distance(origin, first)
        d_second = self.raw_distance(origin, second)
        if d_first < d_second:
            return Closest.FIRST
        if d_second < d_first:
            return Closest.SECOND
        return Closest.BOTH

    def raw_distance_to_line(self, site: Sequence[int], line_point: Sequence[int],
                             axis: int):
        """Raw distance from ``site`` to the line through ``line_point`` along ``axis``."""
        return sum(
            self.power(s - c) for i, (s, c) in enumerate(zip(site, line_point)) if i != axis
        )

    def takeover_position(self, u: Sequence[int], v: Sequence[int],
                          line_point: Sequence[int], axis: int, lo: int, hi: int) -> int:
        """
        First position in ``[lo, hi]`` where ``v`` is strictly closer than ``u``.

        Requires ``u[axis] < v[axis]``. Returns ``hi + 1`` when ``u`` is never
        beaten on the segment.
        """
        a, b = u[axis], v[axis]
        du = self.raw_distance_to_line(u, line_point, axis)
        dv = self.raw_distance_to_line(v, line_point, axis)

        def v_wins(x):
            return self.power(x - b) + dv < self.power(x - a) + du

        if not v_wins(hi):
            return hi + 1
        # v_wins is monotone on the line: binary search its first True
        left, right = lo, hi
        while left < right:
            mid = (left + right) // 2
            if v_wins(mid):
                right = mid
            else:
                left = mid + 1
        return left

    def hidden_by(self, u: Sequence[int], v: Sequence[int], w: Sequence[int],
                  start: Sequence[int], end: Sequence[int], axis: int) -> bool:
        """
        Hidden-Point-Removal test.

        ``u``, ``v`` and ``w`` are sites with strictly increasing coordinates
        along ``axis``; ``start`` and ``end`` bound the current line. Returns
        True when ``v`` wins at no position of the line, given that ties go to
        the site with the lower coordinate along ``axis``.
        """
        lo, hi = start[axis], end[axis]
        v_from = self.takeover_position(u, v, start, axis, lo, hi)
        w_from = self.takeover_position(v, w, start, axis, lo, hi)
        return v_from >= w_from

    def __eq__(self, other):
        return type(self) is type(other) and self.p == other.p

    def __hash__(self):
        return hash((type(self).__name__, self.p))

    def __repr__(self):
        return f"{type(self).__name__}(p={self.p})"


class ExactLpSeparableMetric(SeparableMetric):
    """Lp metric with integer exponent evaluated in exact integer arithmetic."""

    exact = True

    @staticmethod
    def _check_exponent(p):
        if isinstance(p, bool):
            raise InvalidMetricParameterError("Exponent must be a number, got bool")
        if isinstance(p, numbers.Integral):
            p = int(p)
        elif isinstance(p, numbers.Real) and float(p).is_integer():
            p = int(p)
        else:
            raise InvalidMetricParameterError(
                f"Exact metric needs an integer exponent, got {p!r}; "
                "use InexactLpSeparableMetric for real exponents"
            )
        if p < 1:
            raise InvalidMetricParameterError(f"Exponent must be >= 1, got {p}")
        return p

    def power(self, delta):
        return abs(int(delta)) ** self.p

    def takeover_position(self, u, v, line_point, axis, lo, hi):
        if self.p != 2:
            return super().takeover_position(u, v, line_point, axis, lo, hi)
        # (x-b)^2 + dv < (x-a)^2 + du  <=>  2(b-a)x > b^2 - a^2 + dv - du
        a, b = u[axis], v[axis]
        du = self.raw_distance_to_line(u, line_point, axis)
        dv = self.raw_distance_to_line(v, line_point, axis)
        x = (b * b - a * a + dv - du) // (2 * (b - a)) + 1
        return min(max(x, lo), hi + 1)


class InexactLpSeparableMetric(SeparableMetric):
    """Lp metric with a real exponent evaluated in floating point."""

    exact = False

    @staticmethod
    def _check_exponent(p):
        if isinstance(p, bool) or not isinstance(p, numbers.Real):
            raise InvalidMetricParameterError(f"Exponent must be a real number, got {p!r}")
        p = float(p)
        if not math.isfinite(p):
            raise InvalidMetricParameterError(f"Exponent must be finite, got {p}")
        if p < 1.0:
            raise InvalidMetricParameterError(f"Exponent must be >= 1, got {p}")
        return p

    def power(self, delta):
        return abs(float(delta)) ** self.p


def make_metric(p=2, exact: bool = True) -> SeparableMetric:
    """Build an exact or inexact Lp metric for exponent ``p``."""
    if exact:
        return ExactLpSeparableMetric(p)
    return InexactLpSeparableMetric(p)
