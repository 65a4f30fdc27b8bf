from __future__ import annotations

import math

import numpy as np
from beartype import beartype
from jaxtyping import jaxtyped

from .end_cap import resolve_end_caps
from .joint import resolve_joint
from .poly_segment import build_poly_segments
from .stroke_types import (
    EndCapStyle,
    JointStyle,
    PointsLike,
    TriangleArray,
    VertexArray,
    Vertices,
)
from ..utils import debug

__all__ = [
    "stroke_polyline",
    "tessellate",
    "as_triangles",
]


@jaxtyped(typechecker=beartype)
def stroke_polyline(
    vertices: Vertices,
    points: PointsLike,
    thickness: float | int,
    joint_style: JointStyle = JointStyle.MITER,
    end_cap_style: EndCapStyle = EndCapStyle.BUTT,
    allow_overlap: bool = False,
) -> Vertices:
    """
    Append the triangles of `points` stroked with `thickness` to `vertices`.

    vertices: output buffer, consumed in groups of 3 as independent triangles.
    points: (N,2) polyline, an array or a sequence of (x, y) pairs.
      Consecutive duplicates are skipped; with fewer than two distinct points
      nothing is appended.
    allow_overlap: intersect the inner edges of bevel/round joints as infinite
      lines, so joints between short segments may overlap neighbours.
    Returns `vertices`.
    """
    if not math.isfinite(thickness) or thickness <= 0:
        raise ValueError("thickness must be a finite positive number")
    P = np.asarray(points, dtype=np.float64)
    if P.size == 0:
        P = P.reshape(0, 2)
    if P.ndim != 2 or P.shape[1] != 2:
        raise ValueError(f"points must have shape (N,2), got {P.shape}")
    if not np.isfinite(P).all():
        raise ValueError("points contains non-finite coordinates")

    # operate on half the thickness from here on
    half = float(thickness) / 2.0

    segments = build_poly_segments(
        P, half, closed=end_cap_style is EndCapStyle.JOINT
    )
    if debug.is_verbose():
        debug.log(
            f"stroke: points={P.shape[0]} segments={len(segments)} "
            f"joint={joint_style.value} cap={end_cap_style.value}"
        )
    if not segments:
        return vertices

    path = resolve_end_caps(
        vertices,
        segments[0],
        segments[-1],
        end_cap_style,
        half,
        joint_style,
        allow_overlap,
    )

    start1, start2 = path.start1, path.start2
    for i, segment in enumerate(segments):
        if i + 1 == len(segments):
            end1, end2 = path.end1, path.end2
            next_start1, next_start2 = start1, start2
        else:
            end1, end2, next_start1, next_start2 = resolve_joint(
                vertices, segment, segments[i + 1], joint_style, allow_overlap
            )

        vertices.append(start1)
        vertices.append(start2)
        vertices.append(end1)

        vertices.append(end1)
        vertices.append(start2)
        vertices.append(end2)

        start1, start2 = next_start1, next_start2

    return vertices


@jaxtyped(typechecker=beartype)
def tessellate(
    points: PointsLike,
    thickness: float | int,
    joint_style: JointStyle = JointStyle.MITER,
    end_cap_style: EndCapStyle = EndCapStyle.BUTT,
    allow_overlap: bool = False,
) -> VertexArray:
    """
    Stroke a polyline into a (V,2) float64 triangle list, V a multiple of 3.
    Degenerate input gives a (0,2) array.
    """
    vertices = stroke_polyline(
        [],
        points,
        thickness,
        joint_style=joint_style,
        end_cap_style=end_cap_style,
        allow_overlap=allow_overlap,
    )
    if not vertices:
        return np.zeros((0, 2), dtype=np.float64)
    return np.stack(vertices).astype(np.float64)


@jaxtyped(typechecker=beartype)
def as_triangles(vertices: VertexArray) -> TriangleArray:
    if vertices.shape[0] % 3 != 0:
        raise ValueError("vertex count must be a multiple of 3")
    return vertices.reshape(-1, 3, 2)
