"""High-level kernel service: facade for the API layer."""

from __future__ import annotations
from typing import Iterable, Mapping, Sequence

from plankernel.models import (
    ConstructionModel, ConstructionParams, ConstructionSegment, ConstructionType,
    DEFAULT_MATERIALS, GenerationConfig, Material, MaterialPartsList, Opening,
    PerimeterConstructionResult, PerimeterGeometry, ReferenceSide, SnapConfig,
    SnappingContext, SnapResult, Vec2, VirtualPartsList, WallConfig,
)
from plankernel.core.generator import ConstructionPlanner
from plankernel.core.parts import generate_material_parts_list, generate_virtual_parts_list
from plankernel.core.perimeter import resolve_perimeter_geometry
from plankernel.core.registry import RuleRegistry, create_default_registry
from plankernel.core.segmentation import segment_wall
from plankernel.core.snapping import SnappingService


class KernelService:
    """Single entry point for every kernel operation."""

    def __init__(
        self,
        registry: RuleRegistry | None = None,
        materials: Mapping[str, Material] | None = None,
    ) -> None:
        self.registry = registry or create_default_registry()
        self.planner = ConstructionPlanner(self.registry)
        self.materials = dict(materials) if materials is not None else dict(DEFAULT_MATERIALS)

    def resolve_perimeter(
        self,
        boundary_points: Sequence[Vec2],
        wall_configs: Sequence[WallConfig],
        reference_side: ReferenceSide = ReferenceSide.INSIDE,
    ) -> PerimeterGeometry:
        return resolve_perimeter_geometry(boundary_points, wall_configs, reference_side)

    def segment_wall(
        self,
        wall_length: float,
        openings: Sequence[Opening],
        construction_type: ConstructionType = ConstructionType.INFILL,
    ) -> list[ConstructionSegment]:
        return segment_wall(wall_length, openings, construction_type)

    def snap(
        self,
        cursor: Vec2,
        context: SnappingContext,
        config: SnapConfig | None = None,
    ) -> SnapResult:
        return SnappingService(config).find_snap_result(cursor, context)

    def plan_construction(
        self,
        boundary_points: Sequence[Vec2],
        wall_configs: Sequence[WallConfig],
        params: ConstructionParams | None = None,
        config: GenerationConfig | None = None,
        reference_side: ReferenceSide = ReferenceSide.INSIDE,
    ) -> tuple[PerimeterGeometry, PerimeterConstructionResult]:
        geometry = self.resolve_perimeter(boundary_points, wall_configs, reference_side)
        return geometry, self.planner.plan(geometry, params, config)

    def parts_list(
        self,
        model: ConstructionModel,
        exclude_types: Iterable[str] | None = None,
    ) -> tuple[MaterialPartsList, VirtualPartsList]:
        return (
            generate_material_parts_list(model, self.materials, exclude_types),
            generate_virtual_parts_list(model),
        )

    def list_rules(self) -> list[dict[str, str]]:
        return [
            {"id": r.get_id(), "name": r.get_name()}
            for r in self.registry.list_rules()
        ]
