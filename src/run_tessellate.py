from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Protocol, Sequence, cast

import numpy as np

from . import PROJECT_ROOT
from .polystroke.export_svg import export_triangles_svg
from .polystroke.raster import render_triangles_png
from .polystroke.stroke_types import EndCapStyle, JointStyle
from .polystroke.svg_io import load_svg_canvas, load_svg_polyline
from .polystroke.tessellate import tessellate
from .utils import debug, debug_helpers

DEMO_POINTS = np.array(
    [
        [-0.25, -0.5],
        [-0.25, 0.5],
        [0.25, 0.25],
        [0.0, 0.0],
        [0.25, -0.25],
        [-0.4, -0.25],
    ],
    dtype=np.float64,
)
DEMO_THICKNESS = 0.1


class CliArgs(Protocol):
    input: str | None
    output: str
    png: str | None
    png_h: float | None
    thickness: float | None
    joint: str
    cap: str | None
    allow_overlap: bool
    flat_tol: float
    print_vertices: bool
    metadata: str | None
    verbose: bool


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Tessellate a polyline into a triangle mesh of given thickness."
    )
    ap.add_argument(
        "--input",
        default=None,
        help="Input SVG; the first <path> is stroked (default: built-in demo polyline)",
    )
    ap.add_argument(
        "--output",
        default=str(PROJECT_ROOT / "data" / "output" / "polyline.svg"),
        help="Output SVG with one polygon per triangle",
    )
    ap.add_argument("--png", default=None, help="Optional PNG of triangle outlines")
    ap.add_argument(
        "--png_h",
        type=float,
        default=None,
        help="PNG pixel size in world units (default: extent / 800)",
    )
    ap.add_argument(
        "--thickness",
        type=float,
        default=None,
        help=f"Stroke thickness (default: {DEMO_THICKNESS} for the demo, "
        "1%% of the polyline extent for SVG input)",
    )
    ap.add_argument(
        "--joint",
        choices=[s.value for s in JointStyle],
        default=JointStyle.ROUND.value,
    )
    ap.add_argument(
        "--cap",
        choices=[s.value for s in EndCapStyle],
        default=None,
        help="End cap style (default: joint for closed paths, square otherwise)",
    )
    ap.add_argument(
        "--allow_overlap",
        action="store_true",
        help="Intersect inner joint edges as infinite lines",
    )
    ap.add_argument(
        "--flat_tol", type=float, default=1.0, help="SVG curve flatten tolerance"
    )
    ap.add_argument(
        "--print_vertices", action="store_true", help="Print every output vertex"
    )
    ap.add_argument(
        "--metadata", default=None, help="Optional JSON file with the run parameters"
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logs")
    return ap


def main(argv: Sequence[str] | None = None) -> None:
    args = cast(CliArgs, build_parser().parse_args(argv))
    debug.set_verbose(args.verbose)

    if args.thickness is not None and args.thickness <= 0:
        raise ValueError("thickness must be positive")
    if args.flat_tol <= 0:
        raise ValueError("flat_tol must be positive")
    if args.png_h is not None and args.png_h <= 0:
        raise ValueError("png_h must be positive")

    viewbox = None
    canvas_size = None
    if args.input is None:
        points = DEMO_POINTS
        closed = False
        thickness = DEMO_THICKNESS if args.thickness is None else args.thickness
        # demo coordinates are y-up
        flip_y = True
    else:
        points, closed = load_svg_polyline(args.input, flat_tol=args.flat_tol)
        viewbox, canvas_size = load_svg_canvas(args.input)
        if args.thickness is not None:
            thickness = args.thickness
        else:
            span = np.ptp(points, axis=0) if points.shape[0] else np.ones(2)
            thickness = max(0.01 * float(max(span.max(), 1e-9)), 1e-6)
        flip_y = False
    debug_helpers.log_array("points", points)

    if args.cap is not None:
        cap = EndCapStyle(args.cap)
    else:
        cap = EndCapStyle.JOINT if closed else EndCapStyle.SQUARE
    joint = JointStyle(args.joint)

    vertices = tessellate(
        points,
        float(thickness),
        joint_style=joint,
        end_cap_style=cap,
        allow_overlap=args.allow_overlap,
    )
    debug_helpers.log_array("vertices", vertices)
    debug_helpers.log_triangles("triangles", vertices)

    if args.print_vertices:
        for idx, v in enumerate(vertices):
            print(f"vert {idx} : ({v[0]:.2f},{v[1]:.2f})")

    out_path = Path(args.output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    export_triangles_svg(
        str(out_path),
        vertices,
        viewbox=viewbox,
        canvas_size=canvas_size,
        flip_y=flip_y,
        reference_polyline=points,
        reference_stroke_width=float(thickness) * 0.1,
        reference_dasharray=None,
    )

    if args.png is not None and vertices.shape[0] == 0:
        print(f"Skipped PNG: {args.png} (no triangles)")
    elif args.png is not None:
        png_path = Path(args.png)
        png_path.parent.mkdir(parents=True, exist_ok=True)
        if args.png_h is not None:
            png_h = args.png_h
        else:
            extent = float(np.ptp(vertices, axis=0).max()) if vertices.size else 1.0
            png_h = max(extent, 1e-9) / 800.0
        size = render_triangles_png(str(png_path), vertices, png_h, pad=10 * png_h)
        debug.log(f"png: {png_path} size={size[0]}x{size[1]}")

    if args.metadata is not None:
        run_params = {
            "input": args.input,
            "thickness": float(thickness),
            "joint": joint.value,
            "cap": cap.value,
            "allow_overlap": bool(args.allow_overlap),
            "points": int(points.shape[0]),
            "triangles": int(vertices.shape[0] // 3),
        }
        Path(args.metadata).write_text(
            json.dumps(run_params, indent=2, sort_keys=True), encoding="utf-8"
        )

    print(f"Saved: {out_path}  triangles={vertices.shape[0] // 3}")


if __name__ == "__main__":
    main()
