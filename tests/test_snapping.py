"""Tests for core/snapping.py: point and guide line snapping."""
from plankernel.core.snapping import (
    RANK_POINT_AXIS, RANK_REFERENCE_AXIS, SnappingService, find_snap_position,
    find_snap_result,
)
from plankernel.models import (
    Length, LineSegment2D, SnapConfig, SnapLineKind, SnapPoint, SnappingContext, vec2,
)

NO_ALIGN = SnapConfig(align_to_points=False)


def _at(p, x, y, tol=1e-6):
    return abs(p.x - x) < tol and abs(p.y - y) < tol


# --- point snaps ---

def test_snaps_to_nearby_point():
    context = SnappingContext(points=[SnapPoint(id="p1", position=vec2(5, 5))])
    result = find_snap_result(vec2(0, 0), context)
    assert _at(result.position, 5, 5)
    assert result.point_id == "p1"
    assert result.lines == []


def test_point_out_of_range_is_ignored():
    context = SnappingContext(points=[SnapPoint(id="p1", position=vec2(300, 0))])
    result = find_snap_result(vec2(0, 50), context, NO_ALIGN)
    assert result.point_id is None
    assert _at(result.position, 0, 50)


def test_first_point_wins_ties():
    context = SnappingContext(points=[
        SnapPoint(id="a", position=vec2(10, 0)),
        SnapPoint(id="b", position=vec2(-10, 0)),
    ])
    assert find_snap_result(vec2(0, 0), context).point_id == "a"


def test_closest_point_wins():
    context = SnappingContext(points=[
        SnapPoint(id="far", position=vec2(100, 0)),
        SnapPoint(id="near", position=vec2(0, 20)),
    ])
    assert find_snap_result(vec2(0, 0), context).point_id == "near"


def test_reference_point_is_not_a_snap_target():
    context = SnappingContext(
        points=[SnapPoint(id="p1", position=vec2(5, 5))],
        reference_point=vec2(5, 5),
        reference_point_id="p1",
    )
    result = find_snap_result(vec2(0, 0), context, NO_ALIGN)
    assert result.point_id is None


# --- line snaps ---

def test_snaps_to_reference_axis():
    context = SnappingContext(reference_point=vec2(0, 0))
    result = find_snap_result(vec2(1000, 30), context, NO_ALIGN)
    assert _at(result.position, 1000, 0)
    assert len(result.lines) == 1
    assert result.lines[0].kind == SnapLineKind.HORIZONTAL


def test_intersection_of_two_guides_wins():
    context = SnappingContext(
        points=[SnapPoint(id="p", position=vec2(2000, 3000))],
        reference_point=vec2(0, 0),
    )
    result = find_snap_result(vec2(2040, 30), context)
    assert _at(result.position, 2000, 0)
    assert len(result.lines) == 2
    assert {line.kind for line in result.lines} == {SnapLineKind.HORIZONTAL, SnapLineKind.VERTICAL}


def test_snap_too_close_to_reference_is_rejected():
    context = SnappingContext(reference_point=vec2(0, 0))
    result = find_snap_result(vec2(20, 10), context, NO_ALIGN)
    assert _at(result.position, 20, 10)
    assert result.lines == []


def test_snaps_to_wall_extension():
    context = SnappingContext(
        reference_point=vec2(1000, 1000),
        reference_line_segments=[LineSegment2D(start=vec2(0, 0), end=vec2(1000, 1000))],
    )
    result = find_snap_result(vec2(2010, 1990), context, NO_ALIGN)
    assert _at(result.position, 2000, 2000)
    assert result.lines[0].kind == SnapLineKind.EXTENSION


def test_snaps_to_perpendicular_at_wall_end():
    context = SnappingContext(
        reference_point=vec2(0, 0),
        reference_line_segments=[LineSegment2D(start=vec2(0, 0), end=vec2(1000, 1000))],
    )
    # Far from both axes of the reference point, close to the perpendicular at (1000, 1000)
    result = find_snap_result(vec2(500, 1520), context, NO_ALIGN)
    assert result.lines[0].kind == SnapLineKind.PERPENDICULAR
    assert _at(result.position, 490, 1510)


def test_no_candidates_returns_cursor():
    result = find_snap_result(vec2(123, 456), SnappingContext(), NO_ALIGN)
    assert _at(result.position, 123, 456)
    assert result.lines == [] and result.point_id is None


# --- guide generation ---

def test_duplicate_guides_are_removed():
    service = SnappingService()
    candidates = service.generate_snap_lines(SnappingContext(reference_point=vec2(0, 0)))
    # Axes through the origin coincide with the reference axes
    assert len(candidates) == 2
    assert all(c.rank == RANK_REFERENCE_AXIS for c in candidates)


def test_point_axes_follow_reference_axes():
    service = SnappingService()
    context = SnappingContext(
        points=[SnapPoint(id="p", position=vec2(500, 700))],
        reference_point=vec2(100, 100),
    )
    ranks = [c.rank for c in service.generate_snap_lines(context)]
    assert ranks == [RANK_REFERENCE_AXIS] * 2 + [RANK_POINT_AXIS] * 4


def test_find_snap_position_matches_result():
    context = SnappingContext(points=[SnapPoint(id="p1", position=vec2(5, 5))])
    assert _at(find_snap_position(vec2(0, 0), context), 5, 5)


def test_snap_is_deterministic():
    context = SnappingContext(
        points=[SnapPoint(id="p", position=vec2(2000, 3000))],
        reference_point=vec2(0, 0),
        reference_line_segments=[LineSegment2D(start=vec2(0, 0), end=vec2(1000, 1000))],
    )
    first = find_snap_result(vec2(2040, 30), context)
    second = find_snap_result(vec2(2040, 30), context)
    assert first == second
    assert first.model_dump() == second.model_dump()


def test_snap_config_distances_are_lengths():
    config = SnapConfig(point_snap_distance=150)
    assert isinstance(config.point_snap_distance, Length)
    assert isinstance(config.line_snap_distance, Length)
    assert isinstance(config.min_distance, Length)
    assert config.point_snap_distance == 150
