"""Non-strawbale walls built as one solid body per segment."""

from __future__ import annotations

from plankernel.rules.base import ConstructionRule, cuboid
from plankernel.models import (
    ConstructionResult, ConstructionType, WallConstructionContext,
)
from plankernel.models.elements import TAG_WALL_BODY


class MonolithicWallRule(ConstructionRule):
    """One body element for every wall segment."""

    priority = 50

    def get_id(self) -> str:
        return "wall.monolithic"

    def get_name(self) -> str:
        return "Monolithic Wall Body"

    def applies(self, context: WallConstructionContext) -> bool:
        return context.wall.construction_type == ConstructionType.NON_STRAWBALE

    def generate(self, context: WallConstructionContext) -> ConstructionResult:
        material = context.params.monolithic.material
        return ConstructionResult(elements=[
            cuboid(context, material, segment.position, segment.size, [TAG_WALL_BODY])
            for segment in context.segments_3d
            if segment.type == "wall"
        ])
