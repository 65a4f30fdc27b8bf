from . import (
    end_cap,
    export_svg,
    fan,
    joint,
    line_segment,
    poly_segment,
    raster,
    svg_io,
    tessellate,
    vec2,
)
from .stroke_types import EndCapStyle, JointStyle

__all__ = [
    "vec2",
    "line_segment",
    "poly_segment",
    "fan",
    "joint",
    "end_cap",
    "tessellate",
    "export_svg",
    "raster",
    "svg_io",
    "JointStyle",
    "EndCapStyle",
]
