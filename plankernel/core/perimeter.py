"""Perimeter resolver: wall faces and mitered corners from a boundary polygon.

Wall ``i`` runs from boundary point ``i`` to ``i + 1``; corner ``i`` sits at
boundary point ``i`` between wall ``i - 1`` and wall ``i``.
"""

from __future__ import annotations
import logging
from typing import Sequence

from pydantic import BaseModel

from plankernel.core.corners import (
    calculate_corner_angles, colinear_corner_polygon, corner_miter_polygon,
    fallback_corner_polygon, is_colinear, is_reversal,
)
from plankernel.core.errors import InvalidPerimeterError
from plankernel.models.building import (
    PerimeterCorner, PerimeterGeometry, PerimeterWall, ReferenceSide, WallConfig,
)
from plankernel.models.geometry import (
    EPSILON, Length, LineSegment2D, Polygon2D, Vec2, direction, line_intersection,
    polygon_signed_area,
)
from plankernel.models.issues import ConstructionIssue

logger = logging.getLogger(__name__)


class _WallFaces(BaseModel):
    """Untrimmed face lines of one wall."""
    direction: Vec2
    outside_direction: Vec2
    inside: LineSegment2D
    outside: LineSegment2D
    degenerate: bool = False


class _CornerPoints(BaseModel):
    inside: Vec2
    outside: Vec2
    colinear: bool = False
    fallback_reason: str | None = None


def _wall_faces(
    start: Vec2,
    end: Vec2,
    thickness: float,
    clockwise: bool,
    reference_side: ReferenceSide,
) -> _WallFaces:
    d = direction(start, end)
    # Outside is to the left when walking a clockwise boundary
    outside_dir = d.perpendicular() if clockwise else d.perpendicular_cw()
    boundary = LineSegment2D(start=start, end=end)

    if reference_side == ReferenceSide.INSIDE:
        inside = boundary
        outside = LineSegment2D(
            start=start.scale_add(outside_dir, thickness),
            end=end.scale_add(outside_dir, thickness),
        )
    else:
        outside = boundary
        inside = LineSegment2D(
            start=start.scale_add(outside_dir, -thickness),
            end=end.scale_add(outside_dir, -thickness),
        )

    return _WallFaces(
        direction=d,
        outside_direction=outside_dir,
        inside=inside,
        outside=outside,
        degenerate=boundary.length < EPSILON,
    )


def _straight_corner_points(
    reference_point: Vec2,
    normal: Vec2,
    previous_thickness: float,
    next_thickness: float,
    reference_side: ReferenceSide,
) -> tuple[Vec2, Vec2]:
    """Inside and outside point of a corner that needs no intersection."""
    if reference_side == ReferenceSide.INSIDE:
        thickness = max(previous_thickness, next_thickness)
        return reference_point, reference_point.scale_add(normal, thickness)
    thickness = min(previous_thickness, next_thickness)
    return reference_point.scale_add(normal, -thickness), reference_point


def _resolve_corner_points(
    reference_point: Vec2,
    previous: _WallFaces,
    following: _WallFaces,
    previous_thickness: float,
    next_thickness: float,
    reference_side: ReferenceSide,
) -> _CornerPoints:
    normal = following.outside_direction
    if normal.length() < EPSILON:
        normal = previous.outside_direction

    reason: str | None = None
    if previous.degenerate or following.degenerate:
        reason = "adjacent wall has zero length"
    elif is_reversal(previous.direction, following.direction):
        reason = "walls double back on each other"
    elif is_colinear(previous.direction, following.direction):
        inside, outside = _straight_corner_points(
            reference_point, normal, previous_thickness, next_thickness, reference_side,
        )
        return _CornerPoints(inside=inside, outside=outside, colinear=True)
    else:
        prev_inside, next_inside = previous.inside.to_line(), following.inside.to_line()
        prev_outside, next_outside = previous.outside.to_line(), following.outside.to_line()
        inside = outside = None
        if prev_inside and next_inside and prev_outside and next_outside:
            inside = line_intersection(prev_inside, next_inside)
            outside = line_intersection(prev_outside, next_outside)
        if inside is not None and outside is not None:
            return _CornerPoints(inside=inside, outside=outside)
        reason = "wall faces do not intersect"

    inside, outside = _straight_corner_points(
        reference_point, normal, previous_thickness, next_thickness, reference_side,
    )
    return _CornerPoints(inside=inside, outside=outside, fallback_reason=reason)


def _trim(face: LineSegment2D, start: _CornerPoints, end: _CornerPoints) -> LineSegment2D:
    """Cut a face line at its corners.

    Both corner points are projected onto the face; the projection closer to
    the face's midpoint wins, so a wall never runs past the joint.
    """
    line = face.to_line()
    if line is None:
        return face
    mid = face.midpoint

    def pick(corner: _CornerPoints) -> Vec2:
        candidates = [line.project(corner.inside), line.project(corner.outside)]
        return min(candidates, key=lambda p: p.distance_squared_to(mid))

    return LineSegment2D(start=pick(start), end=pick(end))


def resolve_perimeter_geometry(
    boundary_points: Sequence[Vec2],
    wall_configs: Sequence[WallConfig],
    reference_side: ReferenceSide | str = ReferenceSide.INSIDE,
) -> PerimeterGeometry:
    """Resolve wall faces and corners of a closed perimeter.

    ``boundary_points`` describe the inside face (or the outside face with
    ``reference_side='outside'``). Degenerate input produces issues and
    best-effort geometry, never an exception; only a mismatch between the
    number of points and wall configs raises ``InvalidPerimeterError``.
    """
    points = list(boundary_points)
    configs = list(wall_configs)
    n = len(points)
    if len(configs) != n:
        raise InvalidPerimeterError(
            f"Expected {n} wall configs for {n} boundary points, got {len(configs)}"
        )

    if n < 3:
        logger.warning("Perimeter with %d walls cannot be resolved", n)
        return PerimeterGeometry(issues=[ConstructionIssue(
            description=f"A perimeter needs at least 3 walls, got {n}",
            elements=[c.id for c in configs if c.id],
        )])

    reference_side = ReferenceSide(reference_side)
    clockwise = polygon_signed_area(points) < 0
    wall_ids = [cfg.id or f"wall-{i}" for i, cfg in enumerate(configs)]
    corner_ids = [f"corner-{i}" for i in range(n)]
    issues: list[ConstructionIssue] = []

    faces = [
        _wall_faces(points[i], points[(i + 1) % n], configs[i].thickness, clockwise, reference_side)
        for i in range(n)
    ]
    for i, f in enumerate(faces):
        if f.degenerate:
            issues.append(ConstructionIssue(
                description=f"Wall {wall_ids[i]} has zero length",
                elements=[wall_ids[i]],
            ))

    corner_points = [
        _resolve_corner_points(
            points[i], faces[i - 1], faces[i],
            configs[i - 1].thickness, configs[i].thickness, reference_side,
        )
        for i in range(n)
    ]

    walls: list[PerimeterWall] = []
    for i, cfg in enumerate(configs):
        f = faces[i]
        start, end = corner_points[i], corner_points[(i + 1) % n]
        if f.degenerate:
            inside_line, outside_line = f.inside, f.outside
        else:
            inside_line = _trim(f.inside, start, end)
            outside_line = _trim(f.outside, start, end)

        walls.append(PerimeterWall(
            id=wall_ids[i],
            thickness=cfg.thickness,
            construction_type=cfg.construction_type,
            openings=cfg.openings,
            inside_line=inside_line,
            outside_line=outside_line,
            direction=f.direction,
            outside_direction=f.outside_direction,
            wall_length=Length(inside_line.length),
            inside_length=Length(inside_line.length),
            outside_length=Length(outside_line.length),
            polygon=Polygon2D(points=[
                inside_line.start, inside_line.end, outside_line.end, outside_line.start,
            ]).ensure_clockwise(),
            start_corner_id=corner_ids[i],
            end_corner_id=corner_ids[(i + 1) % n],
        ))

    corners: list[PerimeterCorner] = []
    for i, cp in enumerate(corner_points):
        previous, following = walls[i - 1], walls[i]
        max_thickness = max(previous.thickness, following.thickness)
        interior, exterior = calculate_corner_angles(
            points[i - 1], points[i], points[(i + 1) % n], clockwise,
        )

        if cp.fallback_reason is not None:
            polygon = fallback_corner_polygon(points[i], max_thickness * 0.5)
            logger.warning("Corner %s uses fallback polygon: %s", corner_ids[i], cp.fallback_reason)
            issues.append(ConstructionIssue(
                description=f"Corner {corner_ids[i]} could not be resolved: {cp.fallback_reason}",
                elements=[corner_ids[i], previous.id, following.id],
            ))
        elif cp.colinear:
            polygon = colinear_corner_polygon(
                previous.inside_line, previous.outside_line,
                following.inside_line, following.outside_line,
                following.direction, max_thickness,
            )
        else:
            polygon = corner_miter_polygon(
                cp.inside, cp.outside,
                previous.inside_line, previous.outside_line,
                following.inside_line, following.outside_line,
            )

        corners.append(PerimeterCorner(
            id=corner_ids[i],
            reference_point=points[i],
            inside_point=cp.inside,
            outside_point=cp.outside,
            belongs_to=configs[i].corner_owner,
            interior_angle=interior,
            exterior_angle=exterior,
            is_colinear=cp.colinear,
            polygon=polygon,
            previous_wall_id=previous.id,
            next_wall_id=following.id,
        ))

    geometry = PerimeterGeometry(
        walls=walls,
        corners=corners,
        inner_polygon=Polygon2D(points=[c.inside_point for c in corners]).ensure_clockwise(),
        outer_polygon=Polygon2D(points=[c.outside_point for c in corners]).ensure_clockwise(),
        issues=issues,
    )
    logger.debug("Resolved perimeter: %d walls, %d issues", len(walls), len(issues))
    return geometry
