"""Corner geometry helpers: angles, miter polygons and construction cuts."""

from __future__ import annotations
import math
from typing import Literal

from plankernel.models.building import CornerOwner, PerimeterCorner, PerimeterGeometry, PerimeterWall
from plankernel.models.construction import CornerExtension, WallCornerInfo
from plankernel.models.geometry import (
    Angle, Length, LineSegment2D, Polygon2D, Vec2, direction,
)


# Two walls whose directions differ by less than 0.1 degrees are colinear
COLINEAR_TOLERANCE = math.sin(math.radians(0.1))


def is_colinear(previous_direction: Vec2, next_direction: Vec2) -> bool:
    """Straight run: nearly parallel and heading the same way."""
    return (
        abs(previous_direction.cross(next_direction)) < COLINEAR_TOLERANCE
        and previous_direction.dot(next_direction) > 0
    )


def is_reversal(previous_direction: Vec2, next_direction: Vec2) -> bool:
    """The next wall doubles back along the previous one."""
    return (
        abs(previous_direction.cross(next_direction)) < COLINEAR_TOLERANCE
        and previous_direction.dot(next_direction) < 0
    )


def calculate_corner_angles(
    previous_point: Vec2,
    point: Vec2,
    next_point: Vec2,
    clockwise: bool,
) -> tuple[Angle, Angle]:
    """Interior and exterior angle at ``point`` of a polygon with the given winding.

    The interior angle is reflex (> pi) for concave corners. The exterior
    angle is ``2*pi - interior``.
    """
    d_in = direction(previous_point, point)
    d_out = direction(point, next_point)
    turn = math.atan2(d_in.cross(d_out), d_in.dot(d_out))
    sign = -1.0 if clockwise else 1.0
    interior = math.pi - sign * turn
    interior = min(max(interior, 0.0), 2 * math.pi)
    return Angle(interior), Angle(2 * math.pi - interior)


def corner_miter_polygon(
    inside_point: Vec2,
    outside_point: Vec2,
    previous_inside: LineSegment2D,
    previous_outside: LineSegment2D,
    next_inside: LineSegment2D,
    next_outside: LineSegment2D,
) -> Polygon2D:
    """Six-point ring filling the joint between two trimmed walls."""
    ring = Polygon2D(points=[
        inside_point,
        previous_inside.end,
        previous_outside.end,
        outside_point,
        next_outside.start,
        next_inside.start,
    ])
    return ring.ensure_clockwise()


def colinear_corner_polygon(
    previous_inside: LineSegment2D,
    previous_outside: LineSegment2D,
    next_inside: LineSegment2D,
    next_outside: LineSegment2D,
    run_direction: Vec2,
    depth: float,
) -> Polygon2D:
    """Stepped ring across a straight-run corner.

    Each half reaches ``depth / 2`` into one wall and stays between that
    wall's own faces, so a change in thickness shows as a step.
    """
    half = depth / 2
    ring = [
        previous_inside.end.scale_add(run_direction, -half),
        previous_inside.end,
        next_inside.start,
        next_inside.start.scale_add(run_direction, half),
        next_outside.start.scale_add(run_direction, half),
        next_outside.start,
        previous_outside.end,
        previous_outside.end.scale_add(run_direction, -half),
    ]
    points = [p for i, p in enumerate(ring) if not p.is_close(ring[i - 1])]
    return Polygon2D(points=points).ensure_clockwise()


def fallback_corner_polygon(center: Vec2, radius: float) -> Polygon2D:
    """Small diamond used when the corner cannot be resolved."""
    r = max(radius, 1.0)
    return Polygon2D(points=[
        Vec2(x=center.x, y=center.y + r),
        Vec2(x=center.x + r, y=center.y),
        Vec2(x=center.x, y=center.y - r),
        Vec2(x=center.x - r, y=center.y),
    ])


def construction_cut_by_outer_edge(
    corner: PerimeterCorner,
    side: Literal["start", "end"],
) -> bool:
    """Whether a wall cuts its construction at the neighbour's outer edge.

    ``side`` says which end of the wall the corner is at. Convex corners the
    wall owns and concave corners it does not own are cut at the outer edge,
    everything else at the inner edge.
    """
    if side == "start":
        owned = corner.belongs_to == CornerOwner.NEXT
    else:
        owned = corner.belongs_to == CornerOwner.PREVIOUS
    convex = corner.is_convex
    return (convex and owned) or (not convex and not owned)


def _corner_extension(
    corner: PerimeterCorner,
    wall_inside_point: Vec2,
    wall_outside_point: Vec2,
    constructed_by_this_wall: bool,
    inside_layer_thickness: float,
    outside_layer_thickness: float,
) -> tuple[Length, Length]:
    """Return (extension distance, extension actually applied)."""
    if corner.is_colinear:
        return Length(0), Length(0)

    outer = round(wall_outside_point.distance_to(corner.outside_point) - outside_layer_thickness)
    inner = round(wall_inside_point.distance_to(corner.inside_point) - inside_layer_thickness)
    extension = max(outer, inner)

    if constructed_by_this_wall:
        applied = extension
    elif extension == outer:
        # Butts against the owner's body, behind its inside layer
        applied = inside_layer_thickness
    else:
        applied = outside_layer_thickness
    return Length(extension), Length(applied)


def calculate_wall_corner_info(
    wall: PerimeterWall,
    geometry: PerimeterGeometry,
    inside_layer_thickness: float = 0.0,
    outside_layer_thickness: float = 0.0,
) -> WallCornerInfo:
    """Extensions of a wall's construction into its two corners."""
    start = geometry.get_corner(wall.start_corner_id)
    end = geometry.get_corner(wall.end_corner_id)
    if start is None or end is None:
        raise KeyError(f"Wall {wall.id} references an unknown corner")

    start_owned = start.belongs_to == CornerOwner.NEXT
    end_owned = end.belongs_to == CornerOwner.PREVIOUS

    start_extension, applied_start = _corner_extension(
        start, wall.inside_line.start, wall.outside_line.start, start_owned,
        inside_layer_thickness, outside_layer_thickness,
    )
    end_extension, applied_end = _corner_extension(
        end, wall.inside_line.end, wall.outside_line.end, end_owned,
        inside_layer_thickness, outside_layer_thickness,
    )

    return WallCornerInfo(
        start_corner=CornerExtension(
            id=start.id,
            constructed_by_this_wall=start_owned,
            extension_distance=start_extension,
            cut_by_outer_edge=construction_cut_by_outer_edge(start, "start"),
        ),
        end_corner=CornerExtension(
            id=end.id,
            constructed_by_this_wall=end_owned,
            extension_distance=end_extension,
            cut_by_outer_edge=construction_cut_by_outer_edge(end, "end"),
        ),
        start_extension=applied_start,
        end_extension=applied_end,
        construction_length=Length(round(wall.wall_length + applied_start + applied_end)),
    )
