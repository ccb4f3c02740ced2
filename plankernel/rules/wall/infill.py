"""Post and straw infill: the basic strawbale wall system.

Each wall area is filled from alternating ends with straw bays of at most
``max_post_spacing`` separated by posts. Areas next to openings start or end
with a post (a "stand").
"""

from __future__ import annotations

from plankernel.rules.base import ConstructionRule, cuboid, width_measurement
from plankernel.models import (
    ConstructionElement, ConstructionIssue, ConstructionResult, ConstructionType, PartInfo, Vec3,
    WallConstructionContext,
)
from plankernel.models.elements import (
    TAG_FULL_BALE, TAG_PARTIAL_BALE, TAG_POST, TAG_POST_SPACING, TAG_STRAW_STUFFED,
)
from plankernel.models.geometry import LENGTH_TOLERANCE
from plankernel.models.parameters import InfillParams


def get_bale_width(available_width: float, params: InfillParams) -> float:
    """Width of the next straw bay given the space left."""
    max_spacing = params.max_post_spacing
    min_straw = params.min_straw_space
    full_bale_and_post = max_spacing + params.post_width

    # Less space than a full bale
    if available_width < max_spacing:
        return available_width

    # Room for a full bale and a post but not for the minimal straw after it
    if full_bale_and_post < available_width < full_bale_and_post + min_straw:
        return available_width - min_straw - params.post_width

    # More than a full bale, not enough for bale and post
    if available_width < full_bale_and_post:
        return available_width - params.post_width

    return max_spacing


def construct_post(
    context: WallConstructionContext, x: float, area_position: Vec3, area_size: Vec3,
) -> ConstructionElement:
    p = context.params.infill
    return cuboid(
        context, p.post_material,
        Vec3(x=x, y=area_position.y, z=area_position.z),
        Vec3(x=p.post_width, y=area_size.y, z=area_size.z),
        tags=[TAG_POST],
        part_info=PartInfo(type="post"),
    )


def construct_straw(
    context: WallConstructionContext, x: float, width: float, area_position: Vec3, area_size: Vec3,
) -> ConstructionElement:
    p = context.params.infill
    if abs(width - p.max_post_spacing) <= LENGTH_TOLERANCE:
        category = TAG_FULL_BALE
    elif width < p.min_straw_space:
        category = TAG_STRAW_STUFFED
    else:
        category = TAG_PARTIAL_BALE
    return cuboid(
        context, p.straw_material,
        Vec3(x=x, y=area_position.y, z=area_position.z),
        Vec3(x=width, y=area_size.y, z=area_size.z),
        tags=[category],
        part_info=PartInfo(type="straw"),
    )


def _infill_recursive(
    context: WallConstructionContext,
    x: float,
    width: float,
    area_position: Vec3,
    area_size: Vec3,
    at_start: bool,
    result: ConstructionResult,
) -> None:
    p = context.params.infill
    while True:
        bale_width = get_bale_width(width, p)
        straw_x = x if at_start else x + width - bale_width

        if bale_width > 0:
            straw = construct_straw(context, straw_x, bale_width, area_position, area_size)
            result.elements.append(straw)
            result.measurements.append(width_measurement(
                Vec3(x=straw_x, y=area_position.y, z=area_position.z), bale_width, [TAG_POST_SPACING],
            ))
            if bale_width < p.min_straw_space:
                result.warnings.append(ConstructionIssue(
                    description="Not enough space for infilling straw",
                    elements=[straw.id],
                ))

        if bale_width + p.post_width > width:
            return

        post_x = straw_x + bale_width if at_start else straw_x - p.post_width
        result.elements.append(construct_post(context, post_x, area_position, area_size))

        if at_start:
            x = post_x + p.post_width
        width = width - bale_width - p.post_width
        at_start = not at_start


def infill_wall_area(
    context: WallConstructionContext,
    position: Vec3,
    size: Vec3,
    starts_with_stand: bool = False,
    ends_with_stand: bool = False,
    start_at_end: bool = False,
) -> ConstructionResult:
    """Fill one wall area with posts and straw."""
    p = context.params.infill
    result = ConstructionResult()
    error = None
    warning = None

    if size.z < p.min_straw_space:
        warning = "Not enough vertical space to fill with straw"

    if starts_with_stand or ends_with_stand:
        if size.x < p.post_width - LENGTH_TOLERANCE:
            error = "Not enough space for a post"
        elif abs(size.x - p.post_width) <= LENGTH_TOLERANCE:
            result.elements.append(construct_post(context, position.x, position, size))
            return result
        elif starts_with_stand and ends_with_stand and size.x < 2 * p.post_width:
            error = "Space for more than one post, but not enough for two"

    left = position.x
    width = size.x
    if starts_with_stand:
        result.elements.append(construct_post(context, left, position, size))
        left += p.post_width
        width -= p.post_width
    if ends_with_stand:
        result.elements.append(construct_post(context, position.x + size.x - p.post_width, position, size))
        width -= p.post_width

    if width > 0:
        _infill_recursive(context, left, width, position, size, not start_at_end, result)

    if warning:
        result.warnings.append(ConstructionIssue(description=warning, elements=result.element_ids()))
    if error:
        result.errors.append(ConstructionIssue(description=error, elements=result.element_ids()))
    return result


class InfillWallRule(ConstructionRule):
    """Posts at maximum spacing with straw bales between them."""

    priority = 50

    def get_id(self) -> str:
        return "wall.infill"

    def get_name(self) -> str:
        return "Post and Straw Infill"

    def applies(self, context: WallConstructionContext) -> bool:
        return context.wall.construction_type == ConstructionType.INFILL

    def generate(self, context: WallConstructionContext) -> ConstructionResult:
        result = ConstructionResult()
        segments = context.segments_3d
        for i, segment in enumerate(segments):
            if segment.type != "wall":
                continue
            starts_with_stand = i > 0 and segments[i - 1].type == "opening"
            ends_with_stand = i < len(segments) - 1 and segments[i + 1].type == "opening"
            result.extend(infill_wall_area(
                context, segment.position, segment.size, starts_with_stand, ends_with_stand,
            ))
        return result
