from __future__ import annotations

import numpy as np
import svgwrite  # type: ignore[reportMissingTypeStubs]
from beartype import beartype
from jaxtyping import jaxtyped

from .stroke_types import PointArray, VertexArray


@jaxtyped(typechecker=beartype)
def triangles_viewbox(
    vertices: VertexArray,
    pad: float = 0.0,
) -> tuple[float, float, float, float]:
    """(minx, miny, width, height) of the vertices, grown by pad on each side."""
    if vertices.shape[0] == 0:
        return (-pad, -pad, 2 * pad, 2 * pad)
    minx, miny = vertices.min(axis=0)
    maxx, maxy = vertices.max(axis=0)
    return (
        float(minx - pad),
        float(miny - pad),
        float((maxx - minx) + 2 * pad),
        float((maxy - miny) + 2 * pad),
    )


@jaxtyped(typechecker=beartype)
def export_triangles_svg(
    out_path: str,
    vertices: VertexArray,
    fill: str = "#2e7d32",
    stroke: str = "#1b5e20",
    stroke_width: float | str = 0.0,
    fill_opacity: float = 1.0,
    viewbox: tuple[float, float, float, float] | None = None,
    canvas_size: tuple[float, float] | tuple[str, str] | None = None,
    flip_y: bool = False,
    reference_polyline: PointArray | None = None,
    reference_stroke: str = "#777777",
    reference_stroke_width: float | str = 1.0,
    reference_opacity: float = 0.5,
    reference_dasharray: str | None = "4,4",
) -> None:
    """
    vertices: (V,2) triangle list, one <polygon> per consecutive triple.
    flip_y: mirror y so y-up world coordinates render upright.
    reference_polyline: (N,2) optional source polyline drawn on top.
    """
    if vertices.shape[0] % 3 != 0:
        raise ValueError("vertex count must be a multiple of 3")

    sign = np.array([1.0, -1.0 if flip_y else 1.0], dtype=np.float64)
    V = vertices * sign
    ref = reference_polyline * sign if reference_polyline is not None else None

    if viewbox is None:
        allp = V if ref is None else np.vstack([V, ref])
        extent = triangles_viewbox(allp)
        pad = 0.05 * max(extent[2], extent[3], 1e-9)
        viewbox = triangles_viewbox(allp, pad=pad)

    if canvas_size is None:
        dwg = svgwrite.Drawing(out_path, profile="tiny")
    else:
        dwg = svgwrite.Drawing(out_path, profile="tiny", size=canvas_size)
    viewbox_str = f"{viewbox[0]} {viewbox[1]} {viewbox[2]} {viewbox[3]}"
    dwg.attribs["viewBox"] = viewbox_str

    def to_point_list(points: np.ndarray) -> list[tuple[float, float]]:
        return [(float(p[0]), float(p[1])) for p in points]

    tri_kwargs: dict[str, object] = {
        "fill": fill,
        "fill_opacity": fill_opacity,
    }
    if stroke_width:
        tri_kwargs["stroke"] = stroke
        tri_kwargs["stroke_width"] = stroke_width

    for i in range(0, V.shape[0], 3):
        dwg.add(dwg.polygon(points=to_point_list(V[i : i + 3]), **tri_kwargs))

    if ref is not None:
        ref_kwargs: dict[str, object] = {
            "stroke": reference_stroke,
            "fill": "none",
            "stroke_width": reference_stroke_width,
            "opacity": reference_opacity,
        }
        if reference_dasharray is not None:
            ref_kwargs["stroke_dasharray"] = reference_dasharray
        dwg.add(dwg.polyline(points=to_point_list(ref), **ref_kwargs))

    dwg.save()
