"""
Dimension sweep driver for the separable Voronoi map.

The working buffer holds, for every domain point, the coordinates of its
current nearest site and a flag telling whether a site was found. It is
seeded from the predicate (each site is its own nearest site), then reduced
along axis 0, axis 1, ..., axis d-1. After the pass along axis k, every
point holds its nearest site among the sites sharing its coordinates on
axes k+1..d-1; after the last pass, its nearest site overall.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np
import structlog

from .domain import HyperRectDomain
from .envelope import reduce_column
from .metrics import SeparableMetric
from .predicates import PointPredicate, as_predicate

logger = structlog.get_logger()


class SweepState(Enum):
    UNINITIALIZED = "uninitialized"
    SEEDED = "seeded"
    SWEEPING = "sweeping"
    COMPLETE = "complete"


class SeparableSweep:
    """
    Runs the d one-dimensional passes over a working buffer.

    Columns of one pass are independent and write disjoint cells, so they can
    be spread over a thread pool. A pass only starts once every column of the
    previous pass has been written.
    """

    def __init__(self, domain: HyperRectDomain, metric: SeparableMetric, workers: int = 1):
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        self.domain = domain
        self.metric = metric
        self.workers = workers
        self.state = SweepState.UNINITIALIZED
        self.axis: Optional[int] = None
        self.sites: Optional[np.ndarray] = None
        self.found: Optional[np.ndarray] = None

    def seed(self, predicate: PointPredicate) -> int:
        """
        Fill the buffer from the predicate.

        Returns:
            Number of sites in the domain
        """
        if self.state is not SweepState.UNINITIALIZED:
            raise RuntimeError(f"Cannot seed a sweep in state {self.state.value}")

        predicate = as_predicate(predicate)
        mask = np.asarray(predicate.mask(self.domain), dtype=bool)
        if mask.shape != self.domain.shape:
            raise ValueError(
                f"Predicate mask has shape {mask.shape}, domain has shape {self.domain.shape}"
            )

        d = self.domain.dimension
        self.found = mask.copy()
        self.sites = np.zeros(self.domain.shape + (d,), dtype=np.int64)
        self.sites[self.found] = self.domain.coordinates().reshape(self.domain.shape + (d,))[self.found]
        self.state = SweepState.SEEDED

        n_sites = int(self.found.sum())
        logger.info("Sweep seeded", shape=self.domain.shape, sites=n_sites)
        return n_sites

    def run(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Reduce all axes in order.

        Returns:
            Tuple of (sites, found) buffers, both read-only
        """
        if self.state is not SweepState.SEEDED:
            raise RuntimeError(f"Cannot run a sweep in state {self.state.value}")

        self.state = SweepState.SWEEPING
        if not self.found.any():
            # nothing to propagate: every entry stays "no site"
            logger.warning("No site in domain", shape=self.domain.shape)
        elif self.workers > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                for axis in range(self.domain.dimension):
                    self.sweep_axis(axis, executor)
        else:
            for axis in range(self.domain.dimension):
                self.sweep_axis(axis)

        self.axis = None
        self.sites.flags.writeable = False
        self.found.flags.writeable = False
        self.state = SweepState.COMPLETE
        logger.info("Sweep complete", dimension=self.domain.dimension, workers=self.workers)
        return self.sites, self.found

    def sweep_axis(self, axis: int, executor: Optional[ThreadPoolExecutor] = None) -> None:
        """Reduce every column parallel to ``axis``."""
        if self.state is not SweepState.SWEEPING:
            raise RuntimeError(f"Cannot sweep an axis in state {self.state.value}")
        if self.axis is not None and axis != self.axis + 1:
            raise RuntimeError(f"Axis {axis} swept out of order after axis {self.axis}")
        if self.axis is None and axis != 0:
            raise RuntimeError(f"Sweep must start at axis 0, got {axis}")
        self.axis = axis

        if self.domain.shape[axis] == 1:
            # every column is a single cell, already its own nearest candidate
            logger.debug("Axis of extent 1 skipped", axis=axis)
            return

        columns = list(np.ndindex(*self._column_grid_shape(axis)))
        if executor is None:
            self._reduce_columns(axis, columns)
        else:
            chunk = max(1, len(columns) // (self.workers * 4))
            futures = [
                executor.submit(self._reduce_columns, axis, columns[i:i + chunk])
                for i in range(0, len(columns), chunk)
            ]
            # barrier: axis + 1 reads what every column of this axis wrote
            for future in as_completed(futures):
                future.result()

        logger.debug("Axis reduced", axis=axis, columns=len(columns))

    def _column_grid_shape(self, axis: int) -> Tuple[int, ...]:
        return tuple(n for i, n in enumerate(self.domain.shape) if i != axis)

    def _reduce_columns(self, axis: int, columns: List[Tuple[int, ...]]) -> None:
        d = self.domain.dimension
        lower = self.domain.lower
        sites_view = np.moveaxis(self.sites, axis, -2)
        found_view = np.moveaxis(self.found, axis, -1)

        for index in columns:
            column_found = found_view[index]
            if not column_found.any():
                continue

            column_sites = sites_view[index].tolist()
            candidates = [
                tuple(site) if flag else None
                for site, flag in zip(column_sites, column_found.tolist())
            ]

            # line end points: fixed coordinates on the other axes
            start = []
            j = 0
            for i in range(d):
                if i == axis:
                    start.append(lower[i])
                else:
                    start.append(lower[i] + index[j])
                    j += 1
            start = tuple(start)
            end = start[:axis] + (self.domain.upper[axis],) + start[axis + 1:]

            nearest = reduce_column(candidates, start, end, axis, self.metric)
            sites_view[index] = [site if site is not None else (0,) * d for site in nearest]
            found_view[index] = [site is not None for site in nearest]
