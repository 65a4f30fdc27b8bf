from __future__ import annotations

import math

import numpy as np
from beartype import beartype
from jaxtyping import jaxtyped

from .stroke_types import Point2


@jaxtyped(typechecker=beartype)
def vec2(x: float, y: float) -> Point2:
    return np.array([x, y], dtype=np.float64)


@jaxtyped(typechecker=beartype)
def equal(a: Point2, b: Point2) -> bool:
    """Exact coordinate equality (no tolerance)."""
    return bool(a[0] == b[0] and a[1] == b[1])


@jaxtyped(typechecker=beartype)
def add(a: Point2, b: Point2) -> Point2:
    return a + b


@jaxtyped(typechecker=beartype)
def subtract(a: Point2, b: Point2) -> Point2:
    return a - b


@jaxtyped(typechecker=beartype)
def multiply(a: Point2, b: Point2) -> Point2:
    """Component-wise product."""
    return a * b


@jaxtyped(typechecker=beartype)
def scale(v: Point2, factor: float) -> Point2:
    return v * factor


@jaxtyped(typechecker=beartype)
def divide(v: Point2, factor: float) -> Point2:
    return v / factor


@jaxtyped(typechecker=beartype)
def magnitude(v: Point2) -> float:
    return math.hypot(float(v[0]), float(v[1]))


@jaxtyped(typechecker=beartype)
def with_length(v: Point2, length: float) -> Point2:
    mag = magnitude(v)
    if mag == 0.0:
        raise ValueError("cannot rescale a zero-length vector")
    return v * (length / mag)


@jaxtyped(typechecker=beartype)
def normalized(v: Point2) -> Point2:
    return with_length(v, 1.0)


@jaxtyped(typechecker=beartype)
def dot(a: Point2, b: Point2) -> float:
    return float(a[0] * b[0] + a[1] * b[1])


@jaxtyped(typechecker=beartype)
def cross(a: Point2, b: Point2) -> float:
    """2D scalar cross product; positive when b lies counter-clockwise of a."""
    return float(a[0] * b[1] - a[1] * b[0])


@jaxtyped(typechecker=beartype)
def angle_between(a: Point2, b: Point2) -> float:
    """
    Unsigned angle between a and b in [0, pi].
    The cosine is clipped to [-1, 1] so (anti)parallel inputs never give NaN.
    """
    cos_th = dot(a, b) / (magnitude(a) * magnitude(b))
    cos_th = min(1.0, max(-1.0, cos_th))
    return math.acos(cos_th)
