from __future__ import annotations

import re

import numpy as np
from svgpathtools import Line, Path, svg2paths2  # type: ignore[reportMissingTypeStubs]


def load_svg_polyline(
    svg_path: str,
    flat_tol: float = 1.0,
) -> tuple[np.ndarray, bool]:
    """
    Returns (points, closed) for the first <path> of the SVG.
    points: (N,2) float64 in SVG user units. Straight segments contribute their
    end points only; curves are sampled by length / flat_tol.
    closed: True if the path ends where it starts. The repeated end point is
    dropped, the caller closes the stroke itself.
    """
    if flat_tol <= 0:
        raise ValueError("flat_tol must be positive")
    paths = svg2paths2(svg_path)[0]
    if len(paths) == 0:
        raise ValueError("No <path> found in SVG.")
    p: Path = paths[0]
    if len(p) == 0:
        raise ValueError("First <path> in SVG is empty.")

    pts: list[tuple[float, float]] = []
    for seg in p:
        if isinstance(seg, Line):
            z = seg.start
            pts.append((z.real, z.imag))
            continue
        L = max(float(seg.length(error=1e-3)), 1e-6)
        n = max(4, int(np.ceil(L / flat_tol)))
        ts = np.linspace(0.0, 1.0, n, endpoint=False)
        for t in ts:
            z = seg.point(t)
            pts.append((z.real, z.imag))
    z = p[-1].end
    pts.append((z.real, z.imag))

    vertices = np.asarray(pts, dtype=np.float64)
    # Remove near-duplicates
    keep: list[int] = [0]
    for i in range(1, len(vertices)):
        if np.linalg.norm(vertices[i] - vertices[keep[-1]]) > (flat_tol * 1e-3):
            keep.append(i)
    vertices = vertices[keep]

    closed = bool(p.isclosed())
    if closed and len(vertices) > 1:
        if np.linalg.norm(vertices[0] - vertices[-1]) <= flat_tol * 1e-3:
            vertices = vertices[:-1]
    return vertices, closed


def load_svg_canvas(
    svg_path: str,
) -> tuple[tuple[float, float, float, float] | None, tuple[str, str] | None]:
    """
    Returns (viewbox, canvas_size) if present.
    viewbox: (minx, miny, width, height)
    canvas_size: (width, height) strings with units if provided in the SVG.
    """
    svg_result = svg2paths2(svg_path)
    svg_attributes = svg_result[2] if len(svg_result) > 2 else {}
    viewbox = _parse_viewbox(
        svg_attributes.get("viewBox") or svg_attributes.get("viewbox")
    )

    width = svg_attributes.get("width")
    height = svg_attributes.get("height")
    canvas_size = (width, height) if width and height else None

    if viewbox is None:
        w = _parse_length(width)
        h = _parse_length(height)
        if w is not None and h is not None:
            viewbox = (0.0, 0.0, w, h)

    return viewbox, canvas_size


def _parse_viewbox(viewbox_raw: str | None) -> tuple[float, float, float, float] | None:
    if not viewbox_raw:
        return None
    parts = viewbox_raw.replace(",", " ").split()
    if len(parts) != 4:
        return None
    try:
        minx, miny, w, h = (float(p) for p in parts)
    except ValueError:
        return None
    return minx, miny, w, h


def _parse_length(value: str | None) -> float | None:
    if value is None or "%" in value:
        return None
    # plain number with an optional unit suffix; the unit is ignored
    match = re.match(
        r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)([a-zA-Z]*)\s*$",
        value,
    )
    if not match:
        return None
    return float(match.group(1))
