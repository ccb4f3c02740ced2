"""Tests for models/geometry.py primitives."""
import math
import pytest

from plankernel.models.geometry import (
    Angle, Area, Length, Line2D, LineSegment2D, Polygon2D,
    canonical_polygon_key, degrees, format_length, line_intersection, meters,
    vec2, vec3,
)


# --- units ---

def test_length_addition_keeps_unit():
    total = Length(3) + Length(4)
    assert isinstance(total, Length)
    assert total == 7


def test_length_scaling_keeps_unit():
    assert isinstance(Length(3) * 2, Length)
    assert isinstance(2 * Length(3), Length)
    assert Length(9) / 3 == 3


def test_length_times_length_is_area():
    a = Length(2) * Length(3)
    assert isinstance(a, Area)
    assert a == 6


def test_area_divided_by_length_is_length():
    ln = Area(6) / Length(2)
    assert isinstance(ln, Length)
    assert ln == 3


def test_length_ratio_is_plain_number():
    r = Length(6) / Length(3)
    assert not isinstance(r, Length)
    assert r == 2


def test_mixing_units_raises():
    with pytest.raises(TypeError):
        Length(1) + Angle(1)
    with pytest.raises(TypeError):
        Angle(1) - Length(1)


def test_unit_helpers():
    assert meters(1.5) == 1500
    assert abs(degrees(180) - math.pi) < 1e-12
    assert abs(Angle(math.pi / 2).degrees - 90) < 1e-9


def test_format_length():
    assert format_length(3300) == "3300mm"
    assert format_length(3300.0004) == "3300mm"
    assert format_length(12.5) == "12.5mm"


# --- vectors ---

def test_vec2_arithmetic():
    v = vec2(1, 2) + vec2(3, 4) * 2
    assert v.x == 7 and v.y == 10
    assert vec2(3, 4).length() == 5
    assert vec2(1, 0).cross(vec2(0, 1)) == 1
    assert vec2(1, 2).dot(vec2(3, 4)) == 11


def test_vec2_perpendiculars():
    p = vec2(1, 0).perpendicular()
    assert p.x == 0 and p.y == 1
    q = vec2(1, 0).perpendicular_cw()
    assert q.x == 0 and q.y == -1


def test_vec2_normalized_zero_is_zero():
    z = vec2(0, 0).normalized()
    assert z.x == 0 and z.y == 0


def test_vec2_is_immutable():
    v = vec2(1, 2)
    with pytest.raises(Exception):
        v.x = 5


def test_vec3_volume():
    assert vec3(2, 3, 4).volume() == 24


# --- lines ---

def test_line_intersection_perpendicular():
    horizontal = Line2D(point=vec2(0, 1), direction=vec2(1, 0))
    vertical = Line2D(point=vec2(2, 0), direction=vec2(0, 1))
    p = line_intersection(horizontal, vertical)
    assert abs(p.x - 2) < 1e-10
    assert abs(p.y - 1) < 1e-10


def test_line_intersection_parallel_is_none():
    a = Line2D(point=vec2(0, 0), direction=vec2(1, 0))
    b = Line2D(point=vec2(0, 1), direction=vec2(1, 0))
    assert line_intersection(a, b) is None


def test_line_from_degenerate_points_is_none():
    assert Line2D.from_points(vec2(1, 1), vec2(1, 1)) is None


def test_line_offset_and_distance():
    line = Line2D(point=vec2(0, 0), direction=vec2(1, 0))
    shifted = line.offset(5)
    assert abs(shifted.point.y - 5) < 1e-12
    assert abs(line.distance_to(vec2(10, -3)) - 3) < 1e-12
    proj = line.project(vec2(7, 9))
    assert abs(proj.x - 7) < 1e-12 and abs(proj.y) < 1e-12


def test_segment_distance_clamps_to_ends():
    seg = LineSegment2D(start=vec2(0, 0), end=vec2(10, 0))
    assert abs(seg.distance_to(vec2(13, 4)) - 5) < 1e-12
    assert abs(seg.length - 10) < 1e-12


# --- polygons ---

def test_polygon_winding():
    cw = Polygon2D(points=[vec2(0, 0), vec2(0, 1), vec2(1, 1), vec2(1, 0)])
    assert cw.is_clockwise()
    assert abs(cw.area() - 1) < 1e-12
    ccw = cw.ensure_counter_clockwise()
    assert not ccw.is_clockwise()
    assert ccw.ensure_clockwise().is_clockwise()


def test_polygon_bounds():
    poly = Polygon2D(points=[vec2(-1, 2), vec2(3, 5), vec2(0, -4)])
    lo, hi = poly.bounds()
    assert (lo.x, lo.y, hi.x, hi.y) == (-1, -4, 3, 5)


def _transform(points, angle, dx, dy, mirror=False):
    c, s = math.cos(angle), math.sin(angle)
    out = []
    for p in points:
        x = -p.x if mirror else p.x
        out.append(vec2(c * x - s * p.y + dx, s * x + c * p.y + dy))
    return out


def test_canonical_polygon_key_is_placement_independent():
    trapezoid = [vec2(0, 0), vec2(400, 0), vec2(300, 200), vec2(0, 200)]
    key = canonical_polygon_key(trapezoid)

    moved = _transform(trapezoid, math.pi / 2, 1000, -250)
    assert canonical_polygon_key(moved) == key

    mirrored = _transform(trapezoid, 0.3, 50, 50, mirror=True)
    assert canonical_polygon_key(mirrored) == key

    reindexed = trapezoid[2:] + trapezoid[:2]
    assert canonical_polygon_key(list(reversed(reindexed))) == key


def test_canonical_polygon_key_distinguishes_shapes():
    trapezoid = [vec2(0, 0), vec2(400, 0), vec2(300, 200), vec2(0, 200)]
    rectangle = [vec2(0, 0), vec2(400, 0), vec2(400, 200), vec2(0, 200)]
    assert canonical_polygon_key(trapezoid) != canonical_polygon_key(rectangle)
