from __future__ import annotations

from typing import NamedTuple

from . import vec2
from .fan import emit_triangle_fan
from .joint import resolve_joint
from .poly_segment import PolySegment
from .stroke_types import EndCapStyle, JointStyle, Point2, Vertices


class PathEnds(NamedTuple):
    start1: Point2
    start2: Point2
    end1: Point2
    end2: Point2


def resolve_end_caps(
    vertices: Vertices,
    first: PolySegment,
    last: PolySegment,
    end_cap_style: EndCapStyle,
    half_thickness: float,
    joint_style: JointStyle = JointStyle.MITER,
    allow_overlap: bool = False,
) -> PathEnds:
    """
    Boundary points where the stroked path starts and ends.

    ROUND caps append a half-disc fan at each end. JOINT resolves the joint
    between the closing segment (`last`) and `first` and appends its
    triangles, so the path start is that joint's next start.
    """
    start1 = first.edge1.a
    start2 = first.edge2.a
    end1 = last.edge1.b
    end2 = last.edge2.b

    if end_cap_style is EndCapStyle.BUTT:
        pass
    elif end_cap_style is EndCapStyle.SQUARE:
        h = half_thickness
        start1 = vec2.subtract(start1, vec2.scale(first.edge1.direction(), h))
        start2 = vec2.subtract(start2, vec2.scale(first.edge2.direction(), h))
        end1 = vec2.add(end1, vec2.scale(last.edge1.direction(), h))
        end2 = vec2.add(end2, vec2.scale(last.edge2.direction(), h))
    elif end_cap_style is EndCapStyle.ROUND:
        # half circles centered on the path end points
        start = first.center.a
        end = last.center.b
        emit_triangle_fan(vertices, start, start, first.edge1.a, first.edge2.a, False)
        emit_triangle_fan(vertices, end, end, last.edge1.b, last.edge2.b, True)
    elif end_cap_style is EndCapStyle.JOINT:
        ends = resolve_joint(vertices, last, first, joint_style, allow_overlap)
        end1, end2 = ends.end1, ends.end2
        start1, start2 = ends.next_start1, ends.next_start2
    else:
        raise ValueError(f"unsupported end cap style: {end_cap_style!r}")

    return PathEnds(start1, start2, end1, end2)
