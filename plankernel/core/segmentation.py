"""Wall segmentation: split a wall into wall-body and opening segments."""

from __future__ import annotations
import logging
from typing import Sequence

from plankernel.core.errors import SegmentationError
from plankernel.models.building import ConstructionType, Opening
from plankernel.models.construction import (
    ConstructionSegment, OpeningSegment, WallSegment, WallSegment3D,
)
from plankernel.models.geometry import LENGTH_TOLERANCE, Length, Vec3, format_length

logger = logging.getLogger(__name__)


def validate_openings(wall_length: float, openings: Sequence[Opening]) -> list[Opening]:
    """Return the openings sorted along the wall.

    Raises ``SegmentationError`` if an opening runs past the wall end or
    starts before the previous one ends.
    """
    ordered = sorted(openings, key=lambda o: o.offset_from_start)
    current = 0.0
    for opening in ordered:
        if opening.end > wall_length + LENGTH_TOLERANCE:
            raise SegmentationError(
                f"Opening extends beyond wall length: opening ends at "
                f"{format_length(opening.end)} but wall is only "
                f"{format_length(wall_length)} long"
            )
        if opening.offset_from_start < current - LENGTH_TOLERANCE:
            raise SegmentationError(
                f"Opening overlaps with previous segment: opening starts at "
                f"{format_length(opening.offset_from_start)} but previous segment "
                f"ends at {format_length(current)}"
            )
        current = opening.end
    return ordered


def segment_wall(
    wall_length: float,
    openings: Sequence[Opening],
    construction_type: ConstructionType | str = ConstructionType.INFILL,
) -> list[ConstructionSegment]:
    """Ordered, gapless segments covering ``[0, wall_length]``.

    Wall segments are only emitted for gaps wider than the tolerance;
    openings are always emitted, even with zero width.
    """
    construction_type = ConstructionType(construction_type)
    ordered = validate_openings(wall_length, openings)

    segments: list[ConstructionSegment] = []
    current = Length(0)
    for opening in ordered:
        gap = opening.offset_from_start - current
        if gap > LENGTH_TOLERANCE:
            segments.append(WallSegment(
                position=current, width=Length(gap), construction_type=construction_type,
            ))
            start = Length(opening.offset_from_start)
        else:
            start = current
        segments.append(OpeningSegment(position=start, width=opening.width, opening=opening))
        current = Length(start + opening.width)

    rest = wall_length - current
    if rest > LENGTH_TOLERANCE:
        segments.append(WallSegment(
            position=current, width=Length(rest), construction_type=construction_type,
        ))

    logger.debug("Segmented %s wall into %d segments", format_length(wall_length), len(segments))
    return segments


def can_merge_openings(first: Opening, second: Opening) -> bool:
    """Touching openings with equal sill and header share one frame."""
    return (
        abs(first.end - second.offset_from_start) <= LENGTH_TOLERANCE
        and abs(first.sill - second.sill) <= LENGTH_TOLERANCE
        and abs(first.header - second.header) <= LENGTH_TOLERANCE
    )


def merge_adjacent_openings(openings: Sequence[Opening]) -> list[list[Opening]]:
    """Group sorted openings into runs that can share a header and sill."""
    groups: list[list[Opening]] = []
    for opening in openings:
        if groups and can_merge_openings(groups[-1][-1], opening):
            groups[-1].append(opening)
        else:
            groups.append([opening])
    return groups


def segment_wall_3d(
    wall_length: float,
    openings: Sequence[Opening],
    wall_height: float,
    thickness: float,
    construction_length: float | None = None,
    start_extension: float = 0.0,
    inside_thickness: float = 0.0,
    outside_thickness: float = 0.0,
) -> list[WallSegment3D]:
    """Segments as boxes in wall construction space.

    Construction space starts ``start_extension`` before the wall's inside
    start; the last wall segment runs to ``construction_length``. Boxes sit
    between the inside and outside layers.
    """
    ordered = validate_openings(wall_length, openings)
    if construction_length is None:
        construction_length = start_extension + wall_length

    depth = thickness - inside_thickness - outside_thickness

    def box(kind: str, x0: float, x1: float, group: list[Opening] | None = None) -> WallSegment3D:
        return WallSegment3D(
            type=kind,
            position=Vec3(x=x0, y=inside_thickness, z=0),
            size=Vec3(x=x1 - x0, y=depth, z=wall_height),
            openings=group or [],
        )

    segments: list[WallSegment3D] = []
    current = 0.0
    for group in merge_adjacent_openings(ordered):
        start = max(group[0].offset_from_start + start_extension, current)
        end = group[-1].end + start_extension
        if start - current > LENGTH_TOLERANCE:
            segments.append(box("wall", current, start))
        else:
            start = current
        segments.append(box("opening", start, end, group))
        current = end

    if construction_length - current > LENGTH_TOLERANCE:
        segments.append(box("wall", current, construction_length))
    return segments
