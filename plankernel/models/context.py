"""Wall construction context: the state one wall's rules work on."""

from __future__ import annotations
from pydantic import BaseModel, Field, PrivateAttr

from .building import PerimeterGeometry, PerimeterWall
from .construction import WallCornerInfo, WallSegment3D
from .parameters import ConstructionParams, GenerationConfig


class WallConstructionContext(BaseModel):
    """
    Holds everything the rules need to construct one wall.

    The planner fills in corner info and 3D segments; rules read them and
    return their elements. Element ids come from ``next_element_id`` so the
    same input always yields the same ids.
    """
    # Input
    wall: PerimeterWall
    perimeter: PerimeterGeometry
    params: ConstructionParams
    config: GenerationConfig = Field(default_factory=GenerationConfig)

    # Analysis results (populated by the planner)
    corner_info: WallCornerInfo
    segments_3d: list[WallSegment3D] = []

    _id_counter: int = PrivateAttr(default=0)

    def next_element_id(self) -> str:
        self._id_counter += 1
        return f"{self.wall.id}-{self._id_counter}"

    @property
    def body_thickness(self) -> float:
        """Wall thickness without the inside and outside layers."""
        return (
            self.wall.thickness
            - self.params.inside_layer_thickness
            - self.params.outside_layer_thickness
        )
