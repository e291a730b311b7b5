"""
Separable Voronoi map and distance transformation.
"""

from .domain import HyperRectDomain, Point
from .errors import DGeomError, InvalidDomainError, InvalidMetricParameterError, OutOfDomainError
from .metrics import (Closest, SeparableMetric, ExactLpSeparableMetric,
                      InexactLpSeparableMetric, make_metric)
from .predicates import (PointPredicate, FunctionPredicate, SetPredicate, MaskPredicate,
                         ConstantPointPredicate, DomainPredicate, NotPointPredicate,
                         AndPointPredicate, OrPointPredicate, as_predicate)
from .envelope import LowerEnvelope, build_envelope, reduce_column
from .sweep import SeparableSweep, SweepState
from .voronoi_map import VoronoiMap
from .distance_transformation import DistanceTransformation

__all__ = ['HyperRectDomain', 'Point',
           'DGeomError', 'InvalidDomainError', 'InvalidMetricParameterError', 'OutOfDomainError',
           'Closest', 'SeparableMetric', 'ExactLpSeparableMetric', 'InexactLpSeparableMetric',
           'make_metric',
           'PointPredicate', 'FunctionPredicate', 'SetPredicate', 'MaskPredicate',
           'ConstantPointPredicate', 'DomainPredicate', 'NotPointPredicate',
           'AndPointPredicate', 'OrPointPredicate', 'as_predicate',
           'LowerEnvelope', 'build_envelope', 'reduce_column',
           'SeparableSweep', 'SweepState', 'VoronoiMap', 'DistanceTransformation']
