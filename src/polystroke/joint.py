from __future__ import annotations

import math
from typing import NamedTuple

from . import vec2
from .fan import emit_triangle_fan
from .line_segment import intersection
from .poly_segment import PolySegment
from .stroke_types import JointStyle, Point2, Vertices
from ..utils import debug_helpers

# Corners sharper than this (~20 degrees) are beveled instead of mitered.
MITER_MIN_ANGLE = 0.349066


class JointEnds(NamedTuple):
    """Boundary points on both sides of a joint, edge1 side first."""

    end1: Point2
    end2: Point2
    next_start1: Point2
    next_start2: Point2


def effective_joint_style(angle: float, joint_style: JointStyle) -> JointStyle:
    """
    angle: unsigned angle between the two segment directions, in [0, pi].
    Miter joints demote to bevel when the angle, wrapped around 90 degrees,
    is below MITER_MIN_ANGLE.
    """
    wrapped = math.pi - angle if angle > math.pi / 2 else angle
    if joint_style is JointStyle.MITER and wrapped < MITER_MIN_ANGLE:
        return JointStyle.BEVEL
    return joint_style


def resolve_joint(
    vertices: Vertices,
    segment1: PolySegment,
    segment2: PolySegment,
    joint_style: JointStyle,
    allow_overlap: bool = False,
) -> JointEnds:
    """
    Compute where segment1 ends and segment2 starts on both edges.
    Bevel and round joints append their extra triangles to `vertices`.
    """
    dir1 = segment1.center.direction()
    dir2 = segment2.center.direction()

    angle = vec2.angle_between(dir1, dir2)
    style = effective_joint_style(angle, joint_style)
    if style is not joint_style:
        debug_helpers.log_once(
            "joint.miter_demoted",
            f"joint: miter demoted to bevel (angle={math.degrees(angle):.3g} deg)",
        )

    if style is JointStyle.MITER:
        sec1 = intersection(segment1.edge1, segment2.edge1, True)
        sec2 = intersection(segment1.edge2, segment2.edge2, True)

        end1 = sec1 if sec1 is not None else segment1.edge1.b
        end2 = sec2 if sec2 is not None else segment1.edge2.b
        return JointEnds(end1, end2, end1, end2)

    if style not in (JointStyle.BEVEL, JointStyle.ROUND):
        raise ValueError(f"unsupported joint style: {joint_style!r}")

    # The normal is a CCW rotation of the direction, so edge1 is the left
    # edge. Turning clockwise puts it on the outside of the corner.
    clockwise = vec2.cross(dir1, dir2) < 0.0
    if clockwise:
        outer1, outer2 = segment1.edge1, segment2.edge1
        inner1, inner2 = segment1.edge2, segment2.edge2
    else:
        outer1, outer2 = segment1.edge2, segment2.edge2
        inner1, inner2 = segment1.edge1, segment2.edge1

    inner_sec_opt = intersection(inner1, inner2, allow_overlap)
    # Parallel or non-overlapping inner edges are connected directly.
    inner_sec = inner_sec_opt if inner_sec_opt is not None else inner1.b

    # Without an inner intersection, near-180 degree turns restart from the
    # outer edge to avoid a self-crossing sliver.
    if inner_sec_opt is not None:
        inner_start = inner_sec
    elif angle > math.pi / 2:
        inner_start = outer1.b
    else:
        inner_start = inner1.b

    if clockwise:
        ends = JointEnds(outer1.b, inner_sec, outer2.a, inner_start)
    else:
        ends = JointEnds(inner_sec, outer1.b, inner_start, outer2.a)

    if style is JointStyle.BEVEL:
        vertices.append(outer1.b)
        vertices.append(outer2.a)
        vertices.append(inner_sec)
    else:
        # Arc around the path vertex with half the thickness as radius.
        emit_triangle_fan(
            vertices,
            inner_sec,
            segment1.center.b,
            outer1.b,
            outer2.a,
            clockwise,
        )

    return ends
