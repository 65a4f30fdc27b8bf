from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from beartype import beartype
from jaxtyping import jaxtyped

from . import vec2
from .stroke_types import Point2

# |cross(r, s)| below this counts as parallel.
PARALLEL_EPS = 1e-4


@dataclass(frozen=True, eq=False)
class LineSegment:
    """Directed segment from a to b."""

    a: Point2
    b: Point2

    def direction(self, normalized: bool = True) -> Point2:
        vec = vec2.subtract(self.b, self.a)
        return vec2.normalized(vec) if normalized else vec

    def normal(self) -> Point2:
        """Unit direction rotated 90 degrees counter-clockwise."""
        d = self.direction()
        return np.array([-d[1], d[0]], dtype=np.float64)


def translate(segment: LineSegment, offset: Point2) -> LineSegment:
    return LineSegment(vec2.add(segment.a, offset), vec2.add(segment.b, offset))


@jaxtyped(typechecker=beartype)
def intersection(
    seg_a: LineSegment,
    seg_b: LineSegment,
    infinite_lines: bool,
) -> Point2 | None:
    """
    Intersection point of two segments, or None.

    Returns None for (near-)parallel lines, and, unless infinite_lines is set,
    when the crossing lies outside either finite segment.
    """
    r = seg_a.direction(normalized=False)
    s = seg_b.direction(normalized=False)
    origin_dist = vec2.subtract(seg_b.a, seg_a.a)

    denominator = vec2.cross(r, s)
    if abs(denominator) < PARALLEL_EPS:
        return None

    u = vec2.cross(origin_dist, r) / denominator
    t = vec2.cross(origin_dist, s) / denominator

    if not infinite_lines and (t < 0.0 or t > 1.0 or u < 0.0 or u > 1.0):
        return None

    return vec2.add(seg_a.a, vec2.scale(r, t))
