"""Wall segmentation and construction output models."""

from __future__ import annotations
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from .building import ConstructionType, Opening
from .elements import ConstructionNode, Tag
from .geometry import Length, Vec3
from .issues import ConstructionIssue


# ============================================================
# Segments
# ============================================================

class WallSegment(BaseModel):
    """Stretch of wall body between openings."""
    type: Literal["wall"] = "wall"
    position: Length
    width: Length
    construction_type: ConstructionType = ConstructionType.INFILL


class OpeningSegment(BaseModel):
    type: Literal["opening"] = "opening"
    position: Length
    width: Length
    opening: Opening


ConstructionSegment = Annotated[Union[WallSegment, OpeningSegment], Field(discriminator="type")]


class WallSegment3D(BaseModel):
    """Segment as a box in wall construction space.

    Opening segments carry every opening merged into them so one header and
    one sill can span the group.
    """
    type: Literal["wall", "opening"]
    position: Vec3
    size: Vec3
    openings: list[Opening] = []


# ============================================================
# Construction results
# ============================================================

class Measurement(BaseModel):
    """Dimension line between two points in wall construction space."""
    start_point: Vec3
    end_point: Vec3
    label: str | None = None
    tags: list[Tag] = []

    @property
    def length(self) -> float:
        d = self.end_point - self.start_point
        return (d.x * d.x + d.y * d.y + d.z * d.z) ** 0.5


class ConstructionResult(BaseModel):
    """Everything a construction step produced."""
    elements: list[ConstructionNode] = []
    measurements: list[Measurement] = []
    errors: list[ConstructionIssue] = []
    warnings: list[ConstructionIssue] = []

    def extend(self, other: ConstructionResult) -> ConstructionResult:
        self.elements.extend(other.elements)
        self.measurements.extend(other.measurements)
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self

    def element_ids(self) -> list[str]:
        return [e.id for e in self.elements]


class ConstructionModel(BaseModel):
    """Generated element tree with its measurements and issues."""
    elements: list[ConstructionNode] = []
    measurements: list[Measurement] = []
    errors: list[ConstructionIssue] = []
    warnings: list[ConstructionIssue] = []


def merge_models(*models: ConstructionModel) -> ConstructionModel:
    merged = ConstructionModel()
    for m in models:
        merged.elements.extend(m.elements)
        merged.measurements.extend(m.measurements)
        merged.errors.extend(m.errors)
        merged.warnings.extend(m.warnings)
    return merged


# ============================================================
# Per-wall planning
# ============================================================

class CornerExtension(BaseModel):
    """How a wall's construction meets one of its corners."""
    id: str
    constructed_by_this_wall: bool
    extension_distance: Length
    cut_by_outer_edge: bool


class WallCornerInfo(BaseModel):
    start_corner: CornerExtension
    end_corner: CornerExtension
    start_extension: Length
    end_extension: Length
    construction_length: Length


class WallConstructionPlan(BaseModel):
    """Construction summary of one perimeter wall."""
    wall_id: str
    construction_type: ConstructionType
    construction_length: Length
    boundary_length: Length
    thickness: Length
    wall_height: Length
    corner_info: WallCornerInfo
    segments: list[ConstructionSegment] = []
    segments_3d: list[WallSegment3D] = []
    measurements: list[Measurement] = []
    errors: list[ConstructionIssue] = []
    warnings: list[ConstructionIssue] = []


class PerimeterConstructionResult(BaseModel):
    """Plans for every wall plus the combined element tree."""
    plans: list[WallConstructionPlan] = []
    model: ConstructionModel = ConstructionModel()

    def get_plan(self, wall_id: str) -> WallConstructionPlan | None:
        for p in self.plans:
            if p.wall_id == wall_id:
                return p
        return None
