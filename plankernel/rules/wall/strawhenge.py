"""Strawhenge walls: prefabricated straw modules with infill for the rest."""

from __future__ import annotations
import math

from plankernel.rules.base import ConstructionRule, cuboid, width_measurement
from plankernel.rules.wall.infill import infill_wall_area
from plankernel.models import (
    ConstructionGroup, ConstructionResult, ConstructionType, PartInfo, Vec3,
    WallConstructionContext,
)
from plankernel.models.elements import (
    TAG_FULL_BALE, TAG_MODULE, TAG_MODULE_FRAME, TAG_MODULE_WIDTH,
)
from plankernel.models.geometry import LENGTH_TOLERANCE


def construct_module(context: WallConstructionContext, position: Vec3, size: Vec3) -> ConstructionResult:
    """Frame of four beams around a straw core, as one group."""
    m = context.params.module
    ft = m.frame_thickness
    inner_height = size.z - 2 * ft
    frame_info = PartInfo(type="module-frame")

    children = [
        # Bottom and top
        cuboid(context, m.frame_material, position,
               Vec3(x=size.x, y=size.y, z=ft), [TAG_MODULE_FRAME], frame_info),
        cuboid(context, m.frame_material, Vec3(x=position.x, y=position.y, z=position.z + size.z - ft),
               Vec3(x=size.x, y=size.y, z=ft), [TAG_MODULE_FRAME], frame_info),
        # Start and end
        cuboid(context, m.frame_material, Vec3(x=position.x, y=position.y, z=position.z + ft),
               Vec3(x=ft, y=size.y, z=inner_height), [TAG_MODULE_FRAME], frame_info),
        cuboid(context, m.frame_material, Vec3(x=position.x + size.x - ft, y=position.y, z=position.z + ft),
               Vec3(x=ft, y=size.y, z=inner_height), [TAG_MODULE_FRAME], frame_info),
        cuboid(context, m.straw_material, Vec3(x=position.x + ft, y=position.y, z=position.z + ft),
               Vec3(x=size.x - 2 * ft, y=size.y, z=inner_height), [TAG_FULL_BALE], PartInfo(type="straw")),
    ]
    group = ConstructionGroup(
        id=context.next_element_id(),
        children=children,
        tags=[TAG_MODULE],
        part_info=PartInfo(type="module"),
    )
    return ConstructionResult(
        elements=[group],
        measurements=[width_measurement(position, size.x, [TAG_MODULE_WIDTH])],
    )


def module_count(width: float, context: WallConstructionContext) -> int:
    """Full modules that fit while leaving room for a post and minimal straw."""
    m = context.params.module
    p = context.params.infill
    count = math.floor((width + LENGTH_TOLERANCE) / m.max_width)
    remainder = width - count * m.max_width
    while count > 0 and LENGTH_TOLERANCE < remainder < p.min_straw_space + p.post_width:
        count -= 1
        remainder += m.max_width
    return count


def strawhenge_wall_area(
    context: WallConstructionContext,
    position: Vec3,
    size: Vec3,
    starts_with_stand: bool = False,
    ends_with_stand: bool = False,
) -> ConstructionResult:
    m = context.params.module
    p = context.params.infill

    # No room for a module -> infill
    if size.x < m.min_width:
        return infill_wall_area(context, position, size, starts_with_stand, ends_with_stand)

    # Exactly one (possibly narrower) module
    if size.x <= m.max_width:
        return construct_module(context, position, size)

    # Module plus minimal infill does not fit -> infill
    if size.x < m.min_width + p.min_straw_space + p.post_width:
        return infill_wall_area(context, position, size, starts_with_stand, ends_with_stand)

    result = ConstructionResult()
    count = module_count(size.x, context)
    x = position.x
    for _ in range(count):
        result.extend(construct_module(
            context, Vec3(x=x, y=position.y, z=position.z), Vec3(x=m.max_width, y=size.y, z=size.z),
        ))
        x += m.max_width

    rest = position.x + size.x - x
    if rest > LENGTH_TOLERANCE:
        # The last module frame acts as the stand on this side
        result.extend(infill_wall_area(
            context,
            Vec3(x=x, y=position.y, z=position.z),
            Vec3(x=rest, y=size.y, z=size.z),
            starts_with_stand=count == 0 and starts_with_stand,
            ends_with_stand=ends_with_stand,
            start_at_end=True,
        ))
    return result


class StrawhengeWallRule(ConstructionRule):
    """Prefabricated modules along the wall, infill for the remainder."""

    priority = 50

    def get_id(self) -> str:
        return "wall.strawhenge"

    def get_name(self) -> str:
        return "Strawhenge Modules"

    def applies(self, context: WallConstructionContext) -> bool:
        return context.wall.construction_type == ConstructionType.STRAWHENGE

    def generate(self, context: WallConstructionContext) -> ConstructionResult:
        result = ConstructionResult()
        segments = context.segments_3d
        for i, segment in enumerate(segments):
            if segment.type != "wall":
                continue
            result.extend(strawhenge_wall_area(
                context, segment.position, segment.size,
                starts_with_stand=i > 0 and segments[i - 1].type == "opening",
                ends_with_stand=i < len(segments) - 1 and segments[i + 1].type == "opening",
            ))
        return result
