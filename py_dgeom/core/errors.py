"""Exceptions raised by the separable map engine."""


class DGeomError(Exception):
    """Base class for all py_dgeom errors."""


class InvalidDomainError(DGeomError, ValueError):
    """Domain bounds are inconsistent (lower > upper, dimension mismatch)."""


class InvalidMetricParameterError(DGeomError, ValueError):
    """Metric exponent outside its valid range."""


class OutOfDomainError(DGeomError, IndexError):
    """A query point lies outside the map's domain."""
