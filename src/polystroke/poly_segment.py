from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from beartype import beartype
from jaxtyping import jaxtyped

from . import vec2
from .line_segment import LineSegment, translate
from .stroke_types import PointArray
from ..utils import debug


@dataclass(frozen=True, eq=False)
class PolySegment:
    """
    A center line plus its two offset edges.
    edge1 lies left of the center direction (+normal), edge2 right (-normal).
    """

    center: LineSegment
    edge1: LineSegment
    edge2: LineSegment


def make_poly_segment(center: LineSegment, half_thickness: float) -> PolySegment:
    offset = vec2.scale(center.normal(), half_thickness)
    return PolySegment(
        center=center,
        edge1=translate(center, offset),
        edge2=translate(center, -offset),
    )


@jaxtyped(typechecker=beartype)
def build_poly_segments(
    points: PointArray,
    half_thickness: float,
    *,
    closed: bool = False,
) -> list[PolySegment]:
    """
    One PolySegment per consecutive pair of distinct points.
    Pairs of identical points are skipped. With closed=True a segment from the
    last point back to the first is appended (same rule applies).
    """
    P = np.asarray(points, dtype=np.float64)
    N = P.shape[0]

    segments: list[PolySegment] = []
    skipped = 0
    for i in range(N - 1):
        p1 = P[i]
        p2 = P[i + 1]
        if vec2.equal(p1, p2):
            skipped += 1
            continue
        segments.append(make_poly_segment(LineSegment(p1, p2), half_thickness))

    if closed and N >= 2:
        p1 = P[N - 1]
        p2 = P[0]
        if vec2.equal(p1, p2):
            skipped += 1
        else:
            segments.append(make_poly_segment(LineSegment(p1, p2), half_thickness))

    if skipped and debug.is_verbose():
        debug.log(f"stroke: skipped {skipped} duplicate point(s)")
    return segments
