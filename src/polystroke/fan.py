from __future__ import annotations

import math

import numpy as np
from beartype import beartype
from jaxtyping import jaxtyped

from . import vec2
from .stroke_types import Point2, Vertices

# Minimum angle covered by one fan triangle (~10 degrees).
ROUND_MIN_ANGLE = 0.174533


@jaxtyped(typechecker=beartype)
def fan_sweep(
    origin: Point2,
    start: Point2,
    end: Point2,
    clockwise: bool,
) -> float:
    """
    Signed angle swept from start to end around origin in the given direction.
    Negative for clockwise sweeps.
    """
    p1 = vec2.subtract(start, origin)
    p2 = vec2.subtract(end, origin)
    angle1 = math.atan2(float(p1[1]), float(p1[0]))
    angle2 = math.atan2(float(p2[1]), float(p2[0]))

    if clockwise:
        if angle2 > angle1:
            angle2 -= 2.0 * math.pi
    elif angle1 > angle2:
        angle1 -= 2.0 * math.pi

    return angle2 - angle1


def fan_triangle_count(sweep: float) -> int:
    return max(1, int(math.floor(abs(sweep) / ROUND_MIN_ANGLE)))


@jaxtyped(typechecker=beartype)
def emit_triangle_fan(
    vertices: Vertices,
    connect_to: Point2,
    origin: Point2,
    start: Point2,
    end: Point2,
    clockwise: bool,
) -> Vertices:
    """
    Append triangles approximating the arc from start to end around origin.

    Every triangle is (previous arc point, next arc point, connect_to). The
    last arc point is `end` itself, so the fan closes without drift.
    """
    sweep = fan_sweep(origin, start, end, clockwise)
    n_tri = fan_triangle_count(sweep)
    tri_angle = sweep / n_tri

    p1 = vec2.subtract(start, origin)
    start_point = start
    for t in range(n_tri):
        if t + 1 == n_tri:
            end_point = end
        else:
            rot = (t + 1) * tri_angle
            c = math.cos(rot)
            s = math.sin(rot)
            end_point = np.array(
                [
                    c * p1[0] - s * p1[1] + origin[0],
                    s * p1[0] + c * p1[1] + origin[1],
                ],
                dtype=np.float64,
            )

        vertices.append(start_point)
        vertices.append(end_point)
        vertices.append(connect_to)

        start_point = end_point

    return vertices
