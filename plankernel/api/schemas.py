"""API request/response schemas."""

from __future__ import annotations
from pydantic import BaseModel

from plankernel.models import (
    ConstructionModel, ConstructionParams, ConstructionSegment, ConstructionType,
    GenerationConfig, MaterialParts, Opening, PartItem, PerimeterConstructionResult,
    PerimeterGeometry, ReferenceSide, SnapConfig, SnappingContext, SnapResult,
    Vec2, WallConfig,
)


class PerimeterRequest(BaseModel):
    """Boundary polygon as drawn in the editor."""
    boundary_points: list[Vec2]
    walls: list[WallConfig]
    reference_side: ReferenceSide = ReferenceSide.INSIDE


class SegmentRequest(BaseModel):
    wall_length: float
    openings: list[Opening] = []
    construction_type: ConstructionType = ConstructionType.INFILL


class SegmentResponse(BaseModel):
    segments: list[ConstructionSegment]


class SnapRequest(BaseModel):
    cursor: Vec2
    context: SnappingContext = SnappingContext()
    config: SnapConfig = SnapConfig()


class PlanRequest(PerimeterRequest):
    params: ConstructionParams = ConstructionParams()
    config: GenerationConfig = GenerationConfig()


class PlanResponse(BaseModel):
    geometry: PerimeterGeometry
    construction: PerimeterConstructionResult
    rule_count: int
    wall_count: int


class PartsRequest(BaseModel):
    model: ConstructionModel
    exclude_types: list[str] = []


class PartsResponse(BaseModel):
    materials: dict[str, MaterialParts]
    virtual_parts: dict[str, PartItem]


class RuleInfo(BaseModel):
    id: str
    name: str
