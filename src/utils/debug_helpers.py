from __future__ import annotations

import numpy as np

from . import debug

_seen: set[str] = set()


def log_once(key: str, message: str) -> None:
    if debug.is_verbose() and key not in _seen:
        _seen.add(key)
        debug.log(message)


def reset_once() -> None:
    _seen.clear()


def log_array(name: str, arr: np.ndarray) -> None:
    if not debug.is_verbose():
        return
    if arr.size == 0:
        debug.log(f"{name}: shape={arr.shape} dtype={arr.dtype} empty")
        return
    finite_mask = np.isfinite(arr)
    finite_all = bool(finite_mask.all())
    if arr.ndim == 2 and arr.shape[1] == 2 and finite_all:
        minx, miny = arr.min(axis=0)
        maxx, maxy = arr.max(axis=0)
        debug.log(
            f"{name}: shape={arr.shape} dtype={arr.dtype} "
            f"bbox=({minx:.6g},{miny:.6g})-({maxx:.6g},{maxy:.6g})"
        )
        return
    if finite_mask.any():
        min_val = float(np.min(arr[finite_mask]))
        max_val = float(np.max(arr[finite_mask]))
    else:
        min_val = float("nan")
        max_val = float("nan")
    debug.log(
        f"{name}: shape={arr.shape} dtype={arr.dtype} "
        f"finite_all={finite_all} min={min_val:.6g} max={max_val:.6g}"
    )


def log_triangles(name: str, vertices: np.ndarray, eps: float = 1e-12) -> None:
    """Triangle count plus how many of them have (near) zero area."""
    if not debug.is_verbose():
        return
    tris = vertices.reshape(-1, 3, 2)
    e1 = tris[:, 1] - tris[:, 0]
    e2 = tris[:, 2] - tris[:, 0]
    area2 = np.abs(e1[:, 0] * e2[:, 1] - e1[:, 1] * e2[:, 0])
    degenerate = int(np.sum(area2 <= eps))
    debug.log(
        f"{name}: triangles={tris.shape[0]} degenerate={degenerate} "
        f"area={0.5 * float(np.sum(area2)):.6g}"
    )
