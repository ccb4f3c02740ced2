"""Opening frames: one header and one sill per (merged) opening segment,
with filling above the header and below the sill."""

from __future__ import annotations

from plankernel.rules.base import ConstructionRule, cuboid, width_measurement
from plankernel.models import (
    ConstructionElement, ConstructionIssue, ConstructionResult, ConstructionType, PartInfo, Vec3,
    WallConstructionContext, WallSegment3D,
)
from plankernel.models.elements import (
    TAG_HEADER, TAG_OPENING_WIDTH, TAG_SILL, TAG_STRAW_FLAKES, TAG_WALL_BODY,
)
from plankernel.models.geometry import LENGTH_TOLERANCE, format_length


class OpeningFrameRule(ConstructionRule):
    """Header and sill spanning each opening group."""

    priority = 60
    dependencies = ["wall.infill", "wall.strawhenge", "wall.monolithic"]

    def get_id(self) -> str:
        return "opening.frame"

    def get_name(self) -> str:
        return "Opening Header and Sill"

    def applies(self, context: WallConstructionContext) -> bool:
        return any(s.type == "opening" for s in context.segments_3d)

    def generate(self, context: WallConstructionContext) -> ConstructionResult:
        result = ConstructionResult()
        for segment in context.segments_3d:
            if segment.type == "opening" and segment.openings:
                result.extend(self._frame_opening(context, segment))
        return result

    def _filling(
        self, context: WallConstructionContext, segment: WallSegment3D, z0: float, z1: float,
    ) -> ConstructionElement:
        size = Vec3(x=segment.size.x, y=segment.size.y, z=z1 - z0)
        position = Vec3(x=segment.position.x, y=segment.position.y, z=z0)
        if context.wall.construction_type == ConstructionType.NON_STRAWBALE:
            return cuboid(context, context.params.monolithic.material, position, size, [TAG_WALL_BODY])
        return cuboid(
            context, context.params.infill.straw_material, position, size,
            [TAG_STRAW_FLAKES], PartInfo(type="straw"),
        )

    def _frame_opening(self, context: WallConstructionContext, segment: WallSegment3D) -> ConstructionResult:
        p = context.params.opening_frame
        result = ConstructionResult()
        wall_bottom = segment.position.z
        wall_top = segment.position.z + segment.size.z
        # Merged openings share sill and header
        sill_top = wall_bottom + segment.openings[0].sill
        header_bottom = wall_bottom + segment.openings[0].header
        opening_ids = [o.id for o in segment.openings]

        result.measurements.append(width_measurement(
            segment.position, segment.size.x, [TAG_OPENING_WIDTH],
        ))

        if header_bottom > wall_top + LENGTH_TOLERANCE:
            result.errors.append(ConstructionIssue(
                description=(
                    f"Opening is higher than the wall: top at {format_length(header_bottom)} "
                    f"but wall is only {format_length(wall_top)} high"
                ),
                elements=opening_ids,
            ))
        elif header_bottom < wall_top - LENGTH_TOLERANCE:
            header_top = header_bottom + p.header_thickness
            if header_top > wall_top + LENGTH_TOLERANCE:
                result.errors.append(ConstructionIssue(
                    description=(
                        f"Header does not fit: needs {format_length(p.header_thickness)} "
                        f"but only {format_length(wall_top - header_bottom)} available"
                    ),
                    elements=opening_ids,
                ))
            else:
                result.elements.append(cuboid(
                    context, p.material,
                    Vec3(x=segment.position.x, y=segment.position.y, z=header_bottom),
                    Vec3(x=segment.size.x, y=segment.size.y, z=p.header_thickness),
                    [TAG_HEADER], PartInfo(type="header"),
                ))
                if wall_top - header_top > LENGTH_TOLERANCE:
                    result.elements.append(self._filling(context, segment, header_top, wall_top))

        if sill_top > wall_bottom + LENGTH_TOLERANCE:
            sill_bottom = sill_top - p.sill_thickness
            if sill_bottom < wall_bottom - LENGTH_TOLERANCE:
                result.errors.append(ConstructionIssue(
                    description=(
                        f"Sill does not fit: needs {format_length(p.sill_thickness)} "
                        f"but only {format_length(sill_top - wall_bottom)} available"
                    ),
                    elements=opening_ids,
                ))
            else:
                result.elements.append(cuboid(
                    context, p.material,
                    Vec3(x=segment.position.x, y=segment.position.y, z=sill_bottom),
                    Vec3(x=segment.size.x, y=segment.size.y, z=p.sill_thickness),
                    [TAG_SILL], PartInfo(type="sill"),
                ))
                if sill_bottom - wall_bottom > LENGTH_TOLERANCE:
                    result.elements.append(self._filling(context, segment, wall_bottom, sill_bottom))

        return result
