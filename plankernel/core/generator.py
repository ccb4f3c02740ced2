"""Construction planner: orchestrates per-wall analysis and rule execution."""

from __future__ import annotations
import logging

from plankernel.models import (
    ConstructionGroup, ConstructionModel, ConstructionParams, ConstructionResult,
    ConstructionType, GenerationConfig, Measurement, PerimeterConstructionResult,
    PerimeterGeometry, PerimeterWall, Vec3, WallConstructionContext,
    WallConstructionPlan,
)
from plankernel.models.elements import (
    TAG_INFILL_CONSTRUCTION, TAG_NON_STRAWBALE_CONSTRUCTION,
    TAG_STRAWHENGE_CONSTRUCTION, TAG_WALL_LENGTH,
)
from plankernel.core.corners import calculate_wall_corner_info
from plankernel.core.errors import InvalidPerimeterError
from plankernel.core.registry import RuleRegistry
from plankernel.core.segmentation import segment_wall, segment_wall_3d

logger = logging.getLogger(__name__)

CONSTRUCTION_TAGS = {
    ConstructionType.INFILL: TAG_INFILL_CONSTRUCTION,
    ConstructionType.STRAWHENGE: TAG_STRAWHENGE_CONSTRUCTION,
    ConstructionType.NON_STRAWBALE: TAG_NON_STRAWBALE_CONSTRUCTION,
}


class ConstructionPlanner:
    """
    Stateless construction planner.

    Takes a resolved perimeter + params, computes corner info and segments
    for every wall, executes the applicable rules, and returns the per-wall
    plans together with the combined element tree.
    """

    def __init__(self, registry: RuleRegistry) -> None:
        self.registry = registry

    def plan(
        self,
        geometry: PerimeterGeometry,
        params: ConstructionParams | None = None,
        config: GenerationConfig | None = None,
    ) -> PerimeterConstructionResult:
        if params is None:
            params = ConstructionParams()
        if config is None:
            config = GenerationConfig()

        if len(geometry.walls) < 3:
            raise InvalidPerimeterError(
                f"A perimeter needs at least 3 walls to be constructed, got {len(geometry.walls)}"
            )

        plans: list[WallConstructionPlan] = []
        model = ConstructionModel(warnings=list(geometry.issues))
        for wall in geometry.walls:
            plan, group = self._plan_wall(wall, geometry, params, config)
            plans.append(plan)
            model.elements.append(group)
            model.measurements.extend(plan.measurements)
            model.errors.extend(plan.errors)
            model.warnings.extend(plan.warnings)

        logger.debug(
            "Planned %d walls: %d errors, %d warnings",
            len(plans), len(model.errors), len(model.warnings),
        )
        return PerimeterConstructionResult(plans=plans, model=model)

    def _plan_wall(
        self,
        wall: PerimeterWall,
        geometry: PerimeterGeometry,
        params: ConstructionParams,
        config: GenerationConfig,
    ) -> tuple[WallConstructionPlan, ConstructionGroup]:
        # Analysis: corners and segments
        corner_info = calculate_wall_corner_info(
            wall, geometry, params.inside_layer_thickness, params.outside_layer_thickness,
        )
        segments = segment_wall(wall.wall_length, wall.openings, wall.construction_type)
        segments_3d = segment_wall_3d(
            wall.wall_length,
            wall.openings,
            params.wall_height,
            wall.thickness,
            construction_length=corner_info.construction_length,
            start_extension=corner_info.start_extension,
            inside_thickness=params.inside_layer_thickness,
            outside_thickness=params.outside_layer_thickness,
        )

        context = WallConstructionContext(
            wall=wall,
            perimeter=geometry,
            params=params,
            config=config,
            corner_info=corner_info,
            segments_3d=segments_3d,
        )

        # Generation: applicable rules in order
        result = ConstructionResult(measurements=[Measurement(
            start_point=Vec3(x=0, y=0, z=0),
            end_point=Vec3(x=corner_info.construction_length, y=0, z=0),
            label="construction length",
            tags=[TAG_WALL_LENGTH],
        )])
        for rule in self.registry.get_applicable_rules(context):
            result.extend(rule.generate(context))

        plan = WallConstructionPlan(
            wall_id=wall.id,
            construction_type=wall.construction_type,
            construction_length=corner_info.construction_length,
            boundary_length=wall.wall_length,
            thickness=wall.thickness,
            wall_height=params.wall_height,
            corner_info=corner_info,
            segments=segments,
            segments_3d=segments_3d,
            measurements=result.measurements,
            errors=result.errors,
            warnings=result.warnings,
        )
        group = ConstructionGroup(
            id=wall.id,
            children=result.elements,
            tags=[CONSTRUCTION_TAGS[wall.construction_type]],
        )
        return plan, group
