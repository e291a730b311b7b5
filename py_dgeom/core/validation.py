"""
Cross-checks of Voronoi maps against independent computations.

``brute_force_check`` compares every point against every site and is meant
for small domains. ``reference_distances`` and ``edt_reference`` use scipy
(k-d tree queries and the Euclidean distance transform) and scale to larger
domains.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

import numpy as np
import structlog
from scipy import ndimage
from scipy.spatial import cKDTree

from .domain import HyperRectDomain, Point, to_point
from .predicates import PointPredicate
from .voronoi_map import VoronoiMap

logger = structlog.get_logger()


@dataclass
class CheckReport:
    """Result of a brute-force validation."""
    ok: bool
    checked: int
    # (query point, site stored in the map, strictly closer site)
    counterexample: Optional[Tuple[Point, Optional[Point], Optional[Point]]] = None

    def __bool__(self):
        return self.ok


def site_array(domain: HyperRectDomain, sites) -> np.ndarray:
    """Sites inside ``domain`` as an ``(m, d)`` int64 array."""
    if isinstance(sites, PointPredicate):
        mask = sites.mask(domain)
        return domain.coordinates()[mask.ravel()]
    points = [to_point(s) for s in sites]
    points = [p for p in points if domain.contains(p)]
    if not points:
        return np.zeros((0, domain.dimension), dtype=np.int64)
    return np.array(sorted(set(points)), dtype=np.int64)


def brute_force_check(vmap: VoronoiMap, sites, rtol: Optional[float] = None,
                      chunk_size: Optional[int] = None) -> CheckReport:
    """
    Check that no site is closer to any point than the site stored in the map.

    Args:
        vmap: Map to validate
        sites: Iterable of points, or the PointPredicate the map was built from
        rtol: Relative tolerance on raw distances; 0 for exact metrics,
            1e-9 for inexact ones by default
        chunk_size: Domain points compared per vectorised batch; sized from
            the number of sites by default

    Returns:
        CheckReport with the first counterexample found, if any
    """
    domain = vmap.domain
    metric = vmap.metric
    if rtol is None:
        rtol = 0.0 if metric.exact else 1e-9

    site_points = site_array(domain, sites)
    coords = domain.coordinates()
    found = vmap.found().ravel()
    stored = vmap.sites().reshape(-1, domain.dimension)

    if len(site_points) == 0:
        if found.any():
            first = int(np.argmax(found))
            point = tuple(coords[first].tolist())
            logger.error("Site reported for an empty site set", point=point)
            return CheckReport(False, len(coords), (point, tuple(stored[first].tolist()), None))
        return CheckReport(True, len(coords))

    site_set = set(map(tuple, site_points.tolist()))
    map_raw = vmap.raw_distance_array().filled(0).ravel()

    if chunk_size is None:
        chunk_size = max(1, 2_000_000 // len(site_points))

    p = metric.p
    overflow = metric.exact and domain.dimension * max(domain.shape) ** p >= 2 ** 62
    for begin in range(0, len(coords), chunk_size):
        block = coords[begin:begin + chunk_size]
        delta = np.abs(block[:, None, :] - site_points[None, :, :])
        if not metric.exact:
            raw = np.sum(delta.astype(np.float64) ** p, axis=-1)
        elif overflow:
            raw = np.sum(delta.astype(object) ** p, axis=-1)
        else:
            raw = np.sum(delta ** p, axis=-1)
        best = raw.min(axis=1)

        for offset in range(len(block)):
            k = begin + offset
            point = tuple(block[offset].tolist())
            if not found[k]:
                logger.error("No site reported", point=point)
                return CheckReport(False, k + 1, (point, None, tuple(site_points[0].tolist())))
            site = tuple(stored[k].tolist())
            if site not in site_set:
                logger.error("Reported site is not a site", point=point, site=site)
                return CheckReport(False, k + 1, (point, site, None))
            limit = best[offset] if rtol == 0 else best[offset] * (1 + rtol)
            if map_raw[k] > limit:
                closer = tuple(site_points[int(np.argmin(raw[offset]))].tolist())
                logger.error("Closer site exists", point=point, site=site, closer=closer,
                             stored_raw=map_raw[k], closer_raw=best[offset])
                return CheckReport(False, k + 1, (point, site, closer))

    return CheckReport(True, len(coords))


def reference_distances(domain: HyperRectDomain, sites: Iterable, p: float = 2) -> np.ndarray:
    """Nearest-site Lp distances from a k-d tree, ``inf`` where no site exists."""
    site_points = site_array(domain, sites)
    if len(site_points) == 0:
        return np.full(domain.shape, np.inf)
    tree = cKDTree(site_points)
    distances, _ = tree.query(domain.coordinates(), k=1, p=p)
    return distances.reshape(domain.shape)


def edt_reference(domain: HyperRectDomain, sites: Iterable) -> np.ndarray:
    """Euclidean distance to the nearest site from ``scipy.ndimage``."""
    site_points = site_array(domain, sites)
    if len(site_points) == 0:
        return np.full(domain.shape, np.inf)
    background = np.ones(domain.shape, dtype=bool)
    background[tuple((site_points - np.array(domain.lower)).T)] = False
    return ndimage.distance_transform_edt(background)
