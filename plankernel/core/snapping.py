"""Snapping engine for the wall drawing tool.

Point snaps always win over line snaps. Among guide lines, an intersection
of two nearby lines beats a single line; single lines are ranked by kind
(axis through the reference point, axis through an existing point, wall
extension, perpendicular), then by distance, then by insertion order.
"""

from __future__ import annotations
import logging

from pydantic import BaseModel

from plankernel.models.geometry import EPSILON, ZERO_VEC2, Vec2, line_intersection
from plankernel.models.parameters import SnapConfig
from plankernel.models.snapping import (
    SnapLine, SnapLineKind, SnappingContext, SnapResult,
)

logger = logging.getLogger(__name__)

_X_AXIS = Vec2(x=1.0, y=0.0)
_Y_AXIS = Vec2(x=0.0, y=1.0)

# Ranks of the guide line sources, lower wins
RANK_REFERENCE_AXIS = 0
RANK_POINT_AXIS = 1
RANK_EXTENSION = 2
RANK_PERPENDICULAR = 3


class _Candidate(BaseModel):
    line: SnapLine
    rank: int
    index: int
    distance: float = 0.0
    projected: Vec2 = ZERO_VEC2


class SnappingService:
    """Resolves a cursor position against points and guide lines."""

    def __init__(self, config: SnapConfig | None = None) -> None:
        self.config = config or SnapConfig()

    def find_snap_result(self, cursor: Vec2, context: SnappingContext) -> SnapResult:
        point_snap = self._find_point_snap(cursor, context)
        if point_snap is not None:
            return point_snap

        line_snap = self._find_line_snap(cursor, self.generate_snap_lines(context), context)
        if line_snap is not None:
            return line_snap

        return SnapResult(position=cursor)

    def find_snap_position(self, cursor: Vec2, context: SnappingContext) -> Vec2:
        return self.find_snap_result(cursor, context).position

    # ----------------------------------------------------------------

    def _find_point_snap(self, cursor: Vec2, context: SnappingContext) -> SnapResult | None:
        limit_sq = self.config.point_snap_distance ** 2
        best = None
        best_sq = 0.0
        for point in context.points:
            if context.reference_point_id is not None and point.id == context.reference_point_id:
                continue
            d_sq = cursor.distance_squared_to(point.position)
            # Strict comparison keeps the earliest point on ties
            if d_sq <= limit_sq and (best is None or d_sq < best_sq):
                best, best_sq = point, d_sq

        if best is None:
            return None
        return SnapResult(position=best.position, point_id=best.id)

    def generate_snap_lines(self, context: SnappingContext) -> list[_Candidate]:
        """All guide lines for the context in insertion order, duplicates removed."""
        candidates: list[_Candidate] = []

        def add(point: Vec2, direction: Vec2, kind: SnapLineKind, rank: int) -> None:
            line = SnapLine(point=point, direction=direction, kind=kind)
            for c in candidates:
                if abs(c.line.direction.cross(direction)) < EPSILON and c.line.distance_to(point) < EPSILON:
                    return
            candidates.append(_Candidate(line=line, rank=rank, index=len(candidates)))

        def add_axes(point: Vec2, rank: int) -> None:
            add(point, _X_AXIS, SnapLineKind.HORIZONTAL, rank)
            add(point, _Y_AXIS, SnapLineKind.VERTICAL, rank)

        if context.reference_point is not None:
            add_axes(context.reference_point, RANK_REFERENCE_AXIS)

        if self.config.align_to_points:
            add_axes(ZERO_VEC2, RANK_POINT_AXIS)
            for p in context.points:
                add_axes(p.position, RANK_POINT_AXIS)

        for segment in context.reference_line_segments:
            line = segment.to_line()
            if line is None:
                continue
            add(line.point, line.direction, SnapLineKind.EXTENSION, RANK_EXTENSION)
            normal = line.direction.perpendicular()
            add(segment.start, normal, SnapLineKind.PERPENDICULAR, RANK_PERPENDICULAR)
            add(segment.end, normal, SnapLineKind.PERPENDICULAR, RANK_PERPENDICULAR)

        return candidates

    def _far_enough(self, position: Vec2, context: SnappingContext) -> bool:
        if context.reference_point is None:
            return True
        return position.distance_squared_to(context.reference_point) >= self.config.min_distance ** 2

    def _find_line_snap(
        self,
        cursor: Vec2,
        candidates: list[_Candidate],
        context: SnappingContext,
    ) -> SnapResult | None:
        nearby: list[_Candidate] = []
        for c in candidates:
            distance = c.line.distance_to(cursor)
            if distance > self.config.line_snap_distance:
                continue
            projected = c.line.project(cursor)
            if not self._far_enough(projected, context):
                continue
            nearby.append(c.model_copy(update={"distance": distance, "projected": projected}))

        if not nearby:
            return None

        nearby.sort(key=lambda c: (c.rank, c.distance, c.index))
        if len(nearby) == 1:
            return SnapResult(position=nearby[0].projected, lines=[nearby[0].line])

        limit_sq = self.config.line_snap_distance ** 2
        for i in range(len(nearby) - 1):
            for j in range(i + 1, len(nearby)):
                first, second = nearby[i], nearby[j]
                intersection = line_intersection(first.line, second.line)
                if intersection is None:
                    continue
                if cursor.distance_squared_to(intersection) > limit_sq:
                    continue
                if self._far_enough(intersection, context):
                    return SnapResult(position=intersection, lines=[first.line, second.line])

        best = nearby[0]
        return SnapResult(position=best.projected, lines=[best.line])


def find_snap_result(
    cursor: Vec2,
    context: SnappingContext,
    config: SnapConfig | None = None,
) -> SnapResult:
    """Snap ``cursor`` using a service built from ``config``."""
    result = SnappingService(config).find_snap_result(cursor, context)
    logger.debug("Snapped %s to %s (%d lines)", cursor.as_tuple(), result.position.as_tuple(), len(result.lines))
    return result


def find_snap_position(
    cursor: Vec2,
    context: SnappingContext,
    config: SnapConfig | None = None,
) -> Vec2:
    return find_snap_result(cursor, context, config).position
