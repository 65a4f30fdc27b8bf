from __future__ import annotations

import numpy as np
from beartype import beartype
from jaxtyping import Bool, Float, jaxtyped
from PIL import Image, ImageDraw

from .stroke_types import VertexArray


def _pixel_grid(
    vertices: np.ndarray,
    h: float,
    pad: float,
) -> tuple[int, int, float, float]:
    if vertices.shape[0] == 0:
        raise ValueError("Nothing to rasterize: no triangles.")
    minx, miny = vertices.min(axis=0)
    maxx, maxy = vertices.max(axis=0)
    minx -= pad
    miny -= pad
    maxx += pad
    maxy += pad

    W = max(1, int(np.ceil((maxx - minx) / h)))
    H = max(1, int(np.ceil((maxy - miny) / h)))
    return W, H, float(minx), float(maxy)


def _to_pixels(
    tri: np.ndarray, minx: float, maxy: float, h: float
) -> list[tuple[float, float]]:
    # Raster coordinates: image y increases downward, world y increases upward
    return [(float((x - minx) / h), float((maxy - y) / h)) for x, y in tri]


@jaxtyped(typechecker=beartype)
def triangles_to_mask(
    vertices: VertexArray,
    h: float,
    pad: float = 0.0,
) -> tuple[Bool[np.ndarray, "H W"], Float[np.ndarray, "2"], float]:
    """
    vertices: (V,2) triangle list in world coords
    h: pixel size in world units
    Returns:
      mask: (H,W) bool, True where any triangle covers the pixel
      origin: (2,) world coord of the pixel grid's top-left corner
      h: pixel size
    """
    if h <= 0:
        raise ValueError("h must be positive")
    if vertices.shape[0] % 3 != 0:
        raise ValueError("vertex count must be a multiple of 3")
    W, H, minx, maxy = _pixel_grid(vertices, h, pad)

    img = Image.new("L", (W, H), 0)
    draw = ImageDraw.Draw(img)
    for i in range(0, vertices.shape[0], 3):
        pts = _to_pixels(vertices[i : i + 3], minx, maxy, h)
        draw.polygon(pts, outline=1, fill=1)

    mask = np.array(img, dtype=np.uint8) > 0
    origin = np.array([minx, maxy], dtype=np.float64)
    return mask, origin, h


@jaxtyped(typechecker=beartype)
def render_triangles_png(
    out_path: str,
    vertices: VertexArray,
    h: float,
    pad: float = 0.0,
    outline: str = "green",
    background: str = "black",
    fill: str | None = None,
) -> tuple[int, int]:
    """
    Draw each triangle's outline (and optional fill) and save as PNG.
    Returns the image size (W,H).
    """
    if h <= 0:
        raise ValueError("h must be positive")
    if vertices.shape[0] % 3 != 0:
        raise ValueError("vertex count must be a multiple of 3")
    W, H, minx, maxy = _pixel_grid(vertices, h, pad)

    img = Image.new("RGB", (W, H), background)
    draw = ImageDraw.Draw(img)
    for i in range(0, vertices.shape[0], 3):
        pts = _to_pixels(vertices[i : i + 3], minx, maxy, h)
        draw.polygon(pts, outline=outline, fill=fill)
    img.save(out_path, format="PNG")
    return W, H
