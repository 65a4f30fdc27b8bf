from __future__ import annotations

from enum import Enum
from typing import Sequence, TypeAlias, Union

import numpy as np
from jaxtyping import Float, Real

Point2: TypeAlias = Float[np.ndarray, "2"]
Vertices: TypeAlias = list[Point2]
PointArray: TypeAlias = Float[np.ndarray, "N 2"]
VertexArray: TypeAlias = Float[np.ndarray, "V 2"]
TriangleArray: TypeAlias = Float[np.ndarray, "T 3 2"]
# polyline input: any real (N,2) array, or a sequence of (x, y) pairs
PointsLike: TypeAlias = Union[
    Real[np.ndarray, "N 2"], Sequence[Sequence[Union[float, int]]]
]


class JointStyle(Enum):
    # Sharp corners. Falls back to BEVEL when the corner angle is too small,
    # so the miter spike stays bounded.
    MITER = "miter"
    # Flattened corners.
    BEVEL = "bevel"
    # Corners rounded off with a triangle fan.
    ROUND = "round"


class EndCapStyle(Enum):
    # Flat ends that stop at the end points.
    BUTT = "butt"
    # Flat ends extended beyond the end points by half the thickness.
    SQUARE = "square"
    # Half-disc ends.
    ROUND = "round"
    # The path is closed: last and first point are connected with a joint.
    # Don't repeat the start point at the end of the input.
    JOINT = "joint"
