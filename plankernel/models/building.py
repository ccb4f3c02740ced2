"""Building element models: openings, perimeter walls and corners."""

from __future__ import annotations
import math
from enum import Enum
from pydantic import BaseModel

from .geometry import Angle, Length, LineSegment2D, Polygon2D, Vec2
from .issues import ConstructionIssue


class OpeningType(str, Enum):
    DOOR = "door"
    WINDOW = "window"
    PASSAGE = "passage"


class ConstructionType(str, Enum):
    INFILL = "infill"
    STRAWHENGE = "strawhenge"
    NON_STRAWBALE = "non-strawbale"


class CornerOwner(str, Enum):
    """Which adjacent wall's construction extends into a corner."""
    PREVIOUS = "previous"
    NEXT = "next"


class ReferenceSide(str, Enum):
    """Which wall face the boundary polygon describes."""
    INSIDE = "inside"
    OUTSIDE = "outside"


class Opening(BaseModel):
    """An opening (door/window/passage) positioned along a wall."""
    id: str
    type: OpeningType = OpeningType.WINDOW
    offset_from_start: Length    # Distance from wall start to the opening's left edge
    width: Length
    height: Length
    sill_height: Length | None = None

    @property
    def end(self) -> Length:
        return Length(self.offset_from_start + self.width)

    @property
    def sill(self) -> Length:
        return self.sill_height if self.sill_height is not None else Length(0)

    @property
    def header(self) -> Length:
        """Elevation of the top of the opening."""
        return Length(self.sill + self.height)


class WallConfig(BaseModel):
    """Per-wall input for perimeter resolution."""
    id: str | None = None
    thickness: Length = Length(440)
    construction_type: ConstructionType = ConstructionType.INFILL
    openings: list[Opening] = []
    # Owner of the corner at this wall's start
    corner_owner: CornerOwner = CornerOwner.NEXT


class PerimeterWall(BaseModel):
    """A resolved exterior wall between two perimeter corners."""
    id: str
    thickness: Length
    construction_type: ConstructionType = ConstructionType.INFILL
    openings: list[Opening] = []

    inside_line: LineSegment2D
    outside_line: LineSegment2D
    direction: Vec2
    outside_direction: Vec2
    wall_length: Length
    inside_length: Length
    outside_length: Length
    polygon: Polygon2D

    start_corner_id: str
    end_corner_id: str


class PerimeterCorner(BaseModel):
    """The joint between two consecutive perimeter walls."""
    id: str
    reference_point: Vec2
    inside_point: Vec2
    outside_point: Vec2
    belongs_to: CornerOwner = CornerOwner.NEXT
    interior_angle: Angle
    exterior_angle: Angle
    is_colinear: bool = False
    polygon: Polygon2D

    previous_wall_id: str
    next_wall_id: str

    @property
    def is_convex(self) -> bool:
        return self.interior_angle < Angle(math.pi)

    @property
    def interior_angle_degrees(self) -> int:
        return round(self.interior_angle.degrees)

    @property
    def exterior_angle_degrees(self) -> int:
        return round(self.exterior_angle.degrees)


class PerimeterGeometry(BaseModel):
    """Resolved geometry of one closed perimeter."""
    walls: list[PerimeterWall] = []
    corners: list[PerimeterCorner] = []
    inner_polygon: Polygon2D = Polygon2D(points=[])
    outer_polygon: Polygon2D = Polygon2D(points=[])
    issues: list[ConstructionIssue] = []

    def get_wall(self, wall_id: str) -> PerimeterWall | None:
        for w in self.walls:
            if w.id == wall_id:
                return w
        return None

    def get_corner(self, corner_id: str) -> PerimeterCorner | None:
        for c in self.corners:
            if c.id == corner_id:
                return c
        return None
