"""
1-D lower-envelope reduction.

Given the candidate sites of one column (one entry per position along the
swept axis, ``None`` where there is no candidate), compute the nearest
candidate of every position.

Candidates come from the previous pass, so the candidate stored at position
``x`` always has coordinate ``x`` along the swept axis. Positions along the
column are therefore strictly increasing in the stack, which is what
``SeparableMetric.hidden_by`` expects.

Ties between equidistant candidates go to the one with the lower coordinate
along the swept axis.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .domain import Point
from .metrics import SeparableMetric


@dataclass
class LowerEnvelope:
    """Sites forming the lower envelope of a column, left to right."""
    sites: List[Point] = field(default_factory=list)
    # first line position where sites[k] becomes the nearest one
    starts: List[int] = field(default_factory=list)

    def __len__(self):
        return len(self.sites)


def build_envelope(candidates: Sequence[Optional[Point]], start: Point, end: Point,
                   axis: int, metric: SeparableMetric) -> LowerEnvelope:
    """
    Forward pass: stack the candidates that win somewhere on the line.

    Args:
        candidates: Site or None for each position from start[axis] to end[axis]
        start: First point of the line
        end: Last point of the line
        axis: Axis the line is parallel to
        metric: Separable metric providing the hidden-by test

    Returns:
        LowerEnvelope with the surviving sites and where each one takes over
    """
    stack: List[Point] = []
    for site in candidates:
        if site is None:
            continue
        while len(stack) >= 2 and metric.hidden_by(stack[-2], stack[-1], site, start, end, axis):
            stack.pop()
        stack.append(site)

    envelope = LowerEnvelope(sites=stack)
    if stack:
        lo, hi = start[axis], end[axis]
        envelope.starts.append(lo)
        for left, right in zip(stack, stack[1:]):
            envelope.starts.append(metric.takeover_position(left, right, start, axis, lo, hi))
    return envelope


def reduce_column(candidates: Sequence[Optional[Point]], start: Point, end: Point,
                  axis: int, metric: SeparableMetric) -> List[Optional[Point]]:
    """Nearest candidate (or None) for every position of the column."""
    n = len(candidates)
    present = [site for site in candidates if site is not None]
    if not present:
        return [None] * n
    if len(present) == 1:
        return [present[0]] * n

    stack = build_envelope(candidates, start, end, axis, metric).sites

    # query pass: the cursor only moves right
    result: List[Optional[Point]] = [None] * n
    cursor = 0
    line_point = list(start)
    for i in range(n):
        line_point[axis] = start[axis] + i
        while (cursor + 1 < len(stack)
               and metric.raw_distance(line_point, stack[cursor + 1])
               < metric.raw_distance(line_point, stack[cursor])):
            cursor += 1
        result[i] = stack[cursor]
    return result
