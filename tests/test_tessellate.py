import math

import numpy as np
import pytest
from shapely.geometry import Polygon
from shapely.ops import unary_union

from src.polystroke.fan import fan_triangle_count
from src.polystroke.joint import resolve_joint
from src.polystroke.poly_segment import build_poly_segments
from src.polystroke.stroke_types import EndCapStyle, JointStyle
from src.polystroke.tessellate import as_triangles, stroke_polyline, tessellate

DEMO = np.array(
    [
        [-0.25, -0.5],
        [-0.25, 0.5],
        [0.25, 0.25],
        [0.0, 0.0],
        [0.25, -0.25],
        [-0.4, -0.25],
    ]
)


def _union_area(vertices: np.ndarray) -> float:
    tris = [Polygon(t) for t in as_triangles(vertices) if Polygon(t).area > 0]
    return float(unary_union(tris).area)


def test_single_segment_butt() -> None:
    P = np.array([[0.0, 0.0], [1.0, 0.0]])
    V = tessellate(P, 0.2, JointStyle.MITER, EndCapStyle.BUTT)
    assert V.shape == (6, 2)
    expected = np.array(
        [
            [0.0, 0.1],
            [0.0, -0.1],
            [1.0, 0.1],
            [1.0, 0.1],
            [0.0, -0.1],
            [1.0, -0.1],
        ]
    )
    np.testing.assert_allclose(V, expected, atol=1e-12)
    assert float(V[:, 0].min()) == pytest.approx(0.0)
    assert float(V[:, 0].max()) == pytest.approx(1.0)
    assert float(V[:, 1].min()) == pytest.approx(-0.1)
    assert float(V[:, 1].max()) == pytest.approx(0.1)


def test_quad_width_and_length_on_diagonal() -> None:
    P = np.array([[1.0, 1.0], [4.0, 5.0]])
    V = tessellate(P, 0.5)
    start1, start2, end1 = V[0], V[1], V[2]
    assert float(np.linalg.norm(start1 - start2)) == pytest.approx(0.5)
    assert float(np.linalg.norm(end1 - start1)) == pytest.approx(5.0)
    # the width is measured perpendicular to the path
    assert float(np.dot(start1 - start2, [3.0, 4.0])) == pytest.approx(0.0, abs=1e-12)
    assert _union_area(V) == pytest.approx(2.5)


def test_square_caps_add_half_thickness_per_end() -> None:
    P = np.array([[0.0, 0.0], [1.0, 0.0]])
    butt = tessellate(P, 0.2, end_cap_style=EndCapStyle.BUTT)
    square = tessellate(P, 0.2, end_cap_style=EndCapStyle.SQUARE)
    assert square.shape == butt.shape
    assert float(square[:, 0].min()) == pytest.approx(-0.1)
    assert float(square[:, 0].max()) == pytest.approx(1.1)
    length_butt = float(np.ptp(butt[:, 0]))
    length_square = float(np.ptp(square[:, 0]))
    assert length_square - length_butt == pytest.approx(0.2)
    assert _union_area(square) == pytest.approx(1.2 * 0.2)


def test_round_caps_are_half_discs() -> None:
    P = np.array([[0.0, 0.0], [1.0, 0.0]])
    V = tessellate(P, 0.2, end_cap_style=EndCapStyle.ROUND)
    n = fan_triangle_count(math.pi)
    assert V.shape == (3 * (2 * n + 2), 2)
    # cap fans come before the segment quad
    np.testing.assert_allclose(V[3 * 2 * n :], tessellate(P, 0.2), atol=1e-12)
    half_disc = n * 0.5 * 0.1**2 * math.sin(math.pi / n)
    assert _union_area(V) == pytest.approx(0.2 + 2 * half_disc, rel=1e-9)


@pytest.mark.parametrize("joint", list(JointStyle))
@pytest.mark.parametrize("cap", list(EndCapStyle))
def test_equal_points_produce_nothing(joint: JointStyle, cap: EndCapStyle) -> None:
    P = np.array([[0.5, 0.5], [0.5, 0.5]])
    V = tessellate(P, 0.3, joint, cap)
    assert V.shape == (0, 2)


@pytest.mark.parametrize("cap", list(EndCapStyle))
def test_too_few_points_is_a_no_op(cap: EndCapStyle) -> None:
    assert tessellate(np.zeros((0, 2)), 1.0, end_cap_style=cap).shape == (0, 2)
    assert tessellate(np.array([[1.0, 2.0]]), 1.0, end_cap_style=cap).shape == (0, 2)


def test_stroke_polyline_appends_to_buffer() -> None:
    marker = [np.array([7.0, 7.0]), np.array([8.0, 7.0]), np.array([7.0, 8.0])]
    buf = list(marker)
    out = stroke_polyline(buf, np.array([[0.0, 0.0], [0.0, 0.0]]), 1.0)
    assert out is buf
    assert len(out) == 3

    out = stroke_polyline(buf, np.array([[0.0, 0.0], [2.0, 0.0]]), 1.0)
    assert out is buf
    assert len(out) == 9
    for a, b in zip(out[:3], marker):
        assert a is b


@pytest.mark.parametrize("thickness", [0.0, -1.0, float("nan"), float("inf")])
def test_invalid_thickness_raises(thickness: float) -> None:
    with pytest.raises(ValueError):
        tessellate(np.array([[0.0, 0.0], [1.0, 0.0]]), thickness)


def test_non_finite_points_raise() -> None:
    with pytest.raises(ValueError):
        tessellate(np.array([[0.0, 0.0], [np.nan, 1.0]]), 1.0)


def test_integer_and_sequence_inputs_match_float_array() -> None:
    expected = tessellate(np.array([[0.0, 0.0], [2.0, 0.0], [2.0, 1.0]]), 1.0)
    ints = np.array([[0, 0], [2, 0], [2, 1]])
    np.testing.assert_array_equal(tessellate(ints, 1), expected)
    np.testing.assert_array_equal(tessellate(ints, 1.0), expected)
    pairs = [(0.0, 0.0), (2.0, 0.0), (2.0, 1.0)]
    np.testing.assert_array_equal(tessellate(pairs, 1.0), expected)
    assert tessellate(ints, 1).dtype == np.float64
    assert tessellate([], 1.0).shape == (0, 2)


def test_points_with_wrong_shape_raise() -> None:
    with pytest.raises(ValueError):
        tessellate([(0.0, 0.0, 0.0), (1.0, 0.0, 0.0)], 1.0)


def test_miter_demotes_to_bevel_at_shallow_turn() -> None:
    turn = math.radians(5.0)
    P = np.array([[0.0, 0.0], [1.0, 0.0], [1.0 + math.cos(turn), math.sin(turn)]])
    miter = tessellate(P, 0.2, JointStyle.MITER)
    bevel = tessellate(P, 0.2, JointStyle.BEVEL)

    # two quads plus one bevel triangle
    assert miter.shape == (15, 2)
    np.testing.assert_array_equal(miter, bevel)
    assert float(np.abs(miter).max()) < 2.2


def test_miter_at_right_angle_adds_no_triangles() -> None:
    P = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0]])
    V = tessellate(P, 0.2, JointStyle.MITER)
    assert V.shape == (12, 2)
    # the shared corner points are the miter points
    np.testing.assert_allclose(V[2], [0.9, 0.1])
    np.testing.assert_allclose(V[5], [1.1, -0.1])
    np.testing.assert_array_equal(V[6], V[2])
    np.testing.assert_array_equal(V[7], V[5])
    # L-shape: two 1.1 x 0.2 arms overlapping in a 0.2 x 0.2 square
    assert _union_area(V) == pytest.approx(2 * 1.1 * 0.2 - 0.2 * 0.2)


def test_round_joint_fan_ends_on_next_segment() -> None:
    P = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0]])
    V = tessellate(P, 0.2, JointStyle.ROUND)
    n = fan_triangle_count(math.pi / 2)
    assert V.shape == (3 * (n + 4), 2)

    fan = as_triangles(V[: 3 * n])
    quad2_start2 = V[3 * n + 6 + 1]
    # last fan vertex is exactly the next segment's outer start point
    np.testing.assert_array_equal(fan[-1, 1], quad2_start2)
    np.testing.assert_allclose(fan[-1, 1], [1.1, 0.0], atol=1e-12)

    arc = np.vstack([fan[:, 0], fan[-1:, 1]])
    np.testing.assert_allclose(np.linalg.norm(arc - [1.0, 0.0], axis=1), 0.1)
    angles = np.unwrap(np.arctan2(arc[:, 1], arc[:, 0] - 1.0))
    steps = np.diff(angles)
    np.testing.assert_allclose(steps, (math.pi / 2) / n, atol=1e-9)


def test_closed_square_has_no_gap() -> None:
    P = np.array([[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0]])
    V = tessellate(P, 0.2, JointStyle.MITER, EndCapStyle.JOINT)
    assert V.shape == (24, 2)
    # the closing quad ends where the first quad starts
    np.testing.assert_array_equal(V[-4], V[0])
    np.testing.assert_array_equal(V[-1], V[1])
    np.testing.assert_allclose(V[0], [0.1, 0.1])
    np.testing.assert_allclose(V[1], [-0.1, -0.1])

    union = unary_union([Polygon(t) for t in as_triangles(V)])
    assert union.geom_type == "Polygon"
    assert len(union.interiors) == 1
    assert union.area == pytest.approx(1.2**2 - 0.8**2)


@pytest.mark.parametrize("joint", list(JointStyle))
def test_closed_path_start_matches_wraparound_joint(joint: JointStyle) -> None:
    P = np.array([[0.0, 0.0], [2.0, 0.5], [1.0, 2.0], [-0.5, 1.0]])
    V = tessellate(P, 0.3, joint, EndCapStyle.JOINT)

    segs = build_poly_segments(P, 0.15, closed=True)
    wrap_tris: list[np.ndarray] = []
    wrap = resolve_joint(wrap_tris, segs[-1], segs[0], joint)
    joint01_tris: list[np.ndarray] = []
    resolve_joint(joint01_tris, segs[0], segs[1], joint)
    # wrap-around joint, then the first corner's joint, then the first quad
    first = len(wrap_tris) + len(joint01_tris)
    np.testing.assert_array_equal(V[first], wrap.next_start1)
    np.testing.assert_array_equal(V[first + 1], wrap.next_start2)
    np.testing.assert_array_equal(V[-4], wrap.end1)
    np.testing.assert_array_equal(V[-1], wrap.end2)


def test_closed_triangle_with_round_joints() -> None:
    P = np.array([[0.0, 0.0], [1.0, 0.0], [0.5, math.sqrt(3.0) / 2.0]])
    V = tessellate(P, 0.2, JointStyle.ROUND, EndCapStyle.JOINT)
    n = fan_triangle_count(2.0 * math.pi / 3.0)
    assert V.shape == (3 * (3 * 2 + 3 * n), 2)

    union = unary_union([Polygon(t) for t in as_triangles(V)])
    assert union.geom_type == "Polygon"
    assert len(union.interiors) == 1

    h = 0.1
    area = math.sqrt(3.0) / 4.0
    perimeter = 3.0
    inradius = 1.0 / (2.0 * math.sqrt(3.0))
    inner_side = 2.0 * math.sqrt(3.0) * (inradius - h)
    outer = area + perimeter * h + math.pi * h**2
    inner = math.sqrt(3.0) / 4.0 * inner_side**2
    assert union.area == pytest.approx(outer - inner, rel=1e-3)


def test_repeat_calls_are_identical() -> None:
    a = tessellate(DEMO, 0.1, JointStyle.ROUND, EndCapStyle.SQUARE)
    b = tessellate(DEMO, 0.1, JointStyle.ROUND, EndCapStyle.SQUARE)
    assert a.shape[0] % 3 == 0
    np.testing.assert_array_equal(a, b)


@pytest.mark.parametrize("joint", list(JointStyle))
@pytest.mark.parametrize("cap", list(EndCapStyle))
@pytest.mark.parametrize("allow_overlap", [False, True])
def test_demo_polyline_all_styles(
    joint: JointStyle, cap: EndCapStyle, allow_overlap: bool
) -> None:
    V = tessellate(DEMO, 0.1, joint, cap, allow_overlap)
    assert V.dtype == np.float64
    assert V.shape[0] > 0
    assert V.shape[0] % 3 == 0
    assert bool(np.isfinite(V).all())
    # everything stays within half the thickness (plus miter reach) of the path
    lo = DEMO.min(axis=0) - 0.3
    hi = DEMO.max(axis=0) + 0.3
    assert bool(np.all(V >= lo)) and bool(np.all(V <= hi))


def test_as_triangles_rejects_partial_triangles() -> None:
    with pytest.raises(ValueError):
        as_triangles(np.zeros((4, 2)))
    assert as_triangles(np.zeros((6, 2))).shape == (2, 3, 2)
