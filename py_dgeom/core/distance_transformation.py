"""Distance transformation built on top of the Voronoi map."""

import math
from typing import Optional

import numpy as np
import structlog

from .voronoi_map import VoronoiMap

logger = structlog.get_logger()


class DistanceTransformation(VoronoiMap):
    """
    Lp distance from every domain point to the closest site.

    Same construction as :class:`VoronoiMap`; indexing returns the distance
    instead of the site. Points with no site anywhere get ``math.inf``.
    """

    def __init__(self, domain, predicate, metric=None, workers: Optional[int] = None):
        super().__init__(domain, predicate, metric, workers)
        self._distances: Optional[np.ndarray] = None

    def __getitem__(self, point) -> float:
        return self.distance(point)

    def distance_array(self) -> np.ndarray:
        """Read-only float array of distances, ``inf`` where no site exists."""
        if self._distances is None:
            raw = self.raw_distance_array()
            values = np.asarray(raw.filled(0), dtype=np.float64)
            p = self.metric.p
            if p == 2:
                values = np.sqrt(values)
            elif p != 1:
                values = values ** (1.0 / p)
            values[~self.found()] = math.inf
            values.flags.writeable = False
            self._distances = values
            logger.debug("Distance array computed", shape=values.shape,
                         max_distance=float(values[self.found()].max()) if self.site_count else None)
        return self._distances
