from .geometry import (
    Length, Area, Angle, Vec2, Vec3, Line2D, LineSegment2D, Polygon2D,
    vec2, vec3, direction, line_intersection,
)
from .issues import ConstructionIssue
from .building import (
    Opening, OpeningType, ConstructionType, CornerOwner, ReferenceSide,
    WallConfig, PerimeterWall, PerimeterCorner, PerimeterGeometry,
)
from .elements import (
    Tag, Cuboid, CutCuboid, Extrusion, PartInfo,
    ConstructionElement, ConstructionGroup, ConstructionNode,
)
from .construction import (
    WallSegment, OpeningSegment, ConstructionSegment, WallSegment3D,
    Measurement, ConstructionResult, ConstructionModel,
    CornerExtension, WallCornerInfo, WallConstructionPlan, PerimeterConstructionResult,
)
from .materials import Material, DEFAULT_MATERIALS
from .parts import (
    PartIssue, StrawCategory, PartItem, MaterialPartItem, MaterialParts,
    MaterialPartsList, VirtualPartsList,
)
from .snapping import SnapLine, SnapLineKind, SnapPoint, SnappingContext, SnapResult
from .parameters import SnapConfig, ConstructionParams, GenerationConfig
from .context import WallConstructionContext

__all__ = [
    "Length", "Area", "Angle", "Vec2", "Vec3", "Line2D", "LineSegment2D", "Polygon2D",
    "vec2", "vec3", "direction", "line_intersection",
    "ConstructionIssue",
    "Opening", "OpeningType", "ConstructionType", "CornerOwner", "ReferenceSide",
    "WallConfig", "PerimeterWall", "PerimeterCorner", "PerimeterGeometry",
    "Tag", "Cuboid", "CutCuboid", "Extrusion", "PartInfo",
    "ConstructionElement", "ConstructionGroup", "ConstructionNode",
    "WallSegment", "OpeningSegment", "ConstructionSegment", "WallSegment3D",
    "Measurement", "ConstructionResult", "ConstructionModel",
    "CornerExtension", "WallCornerInfo", "WallConstructionPlan", "PerimeterConstructionResult",
    "Material", "DEFAULT_MATERIALS",
    "PartIssue", "StrawCategory", "PartItem", "MaterialPartItem", "MaterialParts",
    "MaterialPartsList", "VirtualPartsList",
    "SnapLine", "SnapLineKind", "SnapPoint", "SnappingContext", "SnapResult",
    "SnapConfig", "ConstructionParams", "GenerationConfig",
    "WallConstructionContext",
]
