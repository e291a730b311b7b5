"""Voronoi map: nearest site of every point of a rectangular domain."""

import math
from typing import Iterator, Optional, Tuple, Union

import numpy as np
import structlog

from ..config import settings
from .domain import HyperRectDomain, Point, to_point
from .errors import OutOfDomainError
from .metrics import SeparableMetric, make_metric
from .predicates import as_predicate
from .sweep import SeparableSweep

logger = structlog.get_logger()

# largest value an int64 raw distance may reach before switching to Python ints
_INT64_LIMIT = 2 ** 62


class VoronoiMap:
    """
    Discrete Voronoi map of a site set under a separable Lp metric.

    The map is computed once at construction by the separable sweep and is
    read-only afterwards. A changed site set needs a new map.

    Args:
        domain: HyperRectDomain, or a (lower, upper) pair of points
        predicate: Site test; PointPredicate, callable, bool array or point set
        metric: SeparableMetric, or an exponent for ``make_metric``; defaults
            to ``settings.default_exponent`` / ``settings.exact_metric``
        workers: Threads used per pass; defaults to ``settings.sweep_workers``
    """

    def __init__(self, domain, predicate, metric: Union[SeparableMetric, int, float, None] = None,
                 workers: Optional[int] = None):
        if not isinstance(domain, HyperRectDomain):
            lower, upper = domain
            domain = HyperRectDomain(lower, upper)
        if metric is None:
            metric = make_metric(settings.default_exponent, settings.exact_metric)
        elif not isinstance(metric, SeparableMetric):
            metric = make_metric(metric, settings.exact_metric)
        if workers is None:
            workers = settings.sweep_workers

        self._domain = domain
        self._metric = metric

        logger.info("Building Voronoi map", lower=domain.lower, upper=domain.upper,
                    metric=repr(metric), workers=workers)
        sweep = SeparableSweep(domain, metric, workers=workers)
        self._site_count = sweep.seed(as_predicate(predicate))
        self._sites, self._found = sweep.run()

    @classmethod
    def build(cls, domain, predicate, metric=None, workers: Optional[int] = None):
        """Alias of the constructor."""
        return cls(domain, predicate, metric, workers)

    @property
    def domain(self) -> HyperRectDomain:
        return self._domain

    @property
    def metric(self) -> SeparableMetric:
        return self._metric

    @property
    def site_count(self) -> int:
        """Number of sites the map was built from."""
        return self._site_count

    def _index(self, point) -> Tuple[Tuple[int, ...], Point]:
        point = to_point(point)
        if not self._domain.contains(point):
            raise OutOfDomainError(
                f"Point {point} is outside domain {self._domain.lower}..{self._domain.upper}"
            )
        return self._domain.index_of(point), point

    def has_site(self, point) -> bool:
        index, _ = self._index(point)
        return bool(self._found[index])

    def nearest_site(self, point) -> Optional[Point]:
        """Nearest site of ``point``, or None when the site set is empty."""
        index, _ = self._index(point)
        if not self._found[index]:
            return None
        return tuple(self._sites[index].tolist())

    def distance(self, point) -> float:
        """Lp distance to the nearest site, ``math.inf`` when there is none."""
        index, point = self._index(point)
        if not self._found[index]:
            return math.inf
        return self._metric.distance(point, self._sites[index].tolist())

    def raw_distance(self, point):
        """Metric surrogate (sum of powered differences) to the nearest site."""
        index, point = self._index(point)
        if not self._found[index]:
            return math.inf
        return self._metric.raw_distance(point, self._sites[index].tolist())

    def voronoi_vector(self, point) -> Optional[Tuple[int, ...]]:
        """Vector from ``point`` to its nearest site."""
        site = self.nearest_site(point)
        if site is None:
            return None
        return tuple(s - c for s, c in zip(site, to_point(point)))

    def __getitem__(self, point) -> Optional[Point]:
        return self.nearest_site(point)

    def __contains__(self, point) -> bool:
        return point in self._domain

    def __iter__(self) -> Iterator[Point]:
        return iter(self._domain)

    def __len__(self) -> int:
        return self._domain.size

    def sites(self) -> np.ndarray:
        """Read-only ``shape + (d,)`` array of nearest-site coordinates."""
        return self._sites

    def found(self) -> np.ndarray:
        """Read-only mask of points that have a nearest site."""
        return self._found

    def raw_distance_array(self) -> np.ma.MaskedArray:
        """
        Raw distance of every point to its nearest site.

        Exact metrics give int64 values, or Python ints in an object array
        when int64 could overflow. Points without a site are masked.
        """
        d = self._domain.dimension
        coords = self._domain.coordinates().reshape(self._domain.shape + (d,))
        delta = np.abs(np.where(self._found[..., None], self._sites - coords, 0))
        p = self._metric.p

        if not self._metric.exact:
            raw = np.sum(delta.astype(np.float64) ** p, axis=-1)
        elif d * max(self._domain.shape) ** p < _INT64_LIMIT:
            raw = np.sum(delta ** p, axis=-1)
        else:
            raw = np.sum(delta.astype(object) ** p, axis=-1)
        return np.ma.MaskedArray(raw, mask=~self._found)

    def __repr__(self):
        return (f"{type(self).__name__}(lower={self._domain.lower}, upper={self._domain.upper}, "
                f"metric={self._metric!r}, sites={self._site_count})")
