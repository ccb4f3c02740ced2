"""Construction element tree: tags, shapes, elements and groups."""

from __future__ import annotations
import re
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .geometry import Length, Polygon2D, Vec3


class Tag(BaseModel):
    """Label attached to elements and groups; groups pass theirs down."""
    model_config = ConfigDict(frozen=True)

    id: str
    category: str
    label: str | None = None


def create_tag(category: str, name: str) -> Tag:
    """User-defined tag with an id derived from its name."""
    slug = re.sub(r"[\W_]+", "-", name.strip().lower())
    return Tag(id=f"{category}_{slug}", category=category, label=name)


# Straw
TAG_FULL_BALE = Tag(id="straw_full-bale", category="straw")
TAG_PARTIAL_BALE = Tag(id="straw_partial-bale", category="straw")
TAG_STRAW_FLAKES = Tag(id="straw_flakes", category="straw")
TAG_STRAW_STUFFED = Tag(id="straw_stuffed", category="straw")

# Wall parts
TAG_POST = Tag(id="wall-part_post", category="wall-part")
TAG_HEADER = Tag(id="wall-part_header", category="wall-part")
TAG_SILL = Tag(id="wall-part_sill", category="wall-part")
TAG_INFILL = Tag(id="wall-part_infill", category="wall-part")
TAG_WALL_BODY = Tag(id="wall-part_body", category="wall-part")
TAG_MODULE = Tag(id="module-part_module", category="module-part")
TAG_MODULE_FRAME = Tag(id="module-part_frame", category="module-part")

# Wall assemblies
TAG_INFILL_CONSTRUCTION = Tag(id="wall-assembly_infill", category="wall-assembly")
TAG_STRAWHENGE_CONSTRUCTION = Tag(id="wall-assembly_strawhenge", category="wall-assembly")
TAG_NON_STRAWBALE_CONSTRUCTION = Tag(id="wall-assembly_non-strawbale", category="wall-assembly")

# Layers
TAG_WALL_LAYER_INSIDE = Tag(id="wall-layer_inside", category="wall-layer")
TAG_WALL_LAYER_OUTSIDE = Tag(id="wall-layer_outside", category="wall-layer")

# Measurements
TAG_WALL_LENGTH = Tag(id="wall-measurement_length", category="wall-measurement")
TAG_POST_SPACING = Tag(id="wall-measurement_post-spacing", category="wall-measurement")
TAG_MODULE_WIDTH = Tag(id="wall-measurement_module-width", category="wall-measurement")
TAG_OPENING_WIDTH = Tag(id="opening-measurement_width", category="opening-measurement")

LAYER_TAG_CATEGORIES = ("wall-layer", "floor-layer", "roof-layer")
GENERIC_LAYER_TAG_IDS = {TAG_WALL_LAYER_INSIDE.id, TAG_WALL_LAYER_OUTSIDE.id}


# ============================================================
# Shapes
# ============================================================

class Cuboid(BaseModel):
    """Axis-aligned box in the element's local frame."""
    model_config = ConfigDict(frozen=True)

    type: Literal["cuboid"] = "cuboid"
    size: Vec3

    def box_size(self) -> Vec3:
        return self.size


class CutCuboid(BaseModel):
    """Box whose two ends along x are cut at an angle (degrees, 0 = square)."""
    model_config = ConfigDict(frozen=True)

    type: Literal["cut-cuboid"] = "cut-cuboid"
    size: Vec3
    start_cut_angle: float = 0.0
    end_cut_angle: float = 0.0

    def box_size(self) -> Vec3:
        return self.size


class Extrusion(BaseModel):
    """Polygon in the local xy plane extruded along z."""
    model_config = ConfigDict(frozen=True)

    type: Literal["extrusion"] = "extrusion"
    polygon: Polygon2D
    thickness: Length

    def box_size(self) -> Vec3:
        lo, hi = self.polygon.bounds()
        return Vec3(x=hi.x - lo.x, y=hi.y - lo.y, z=self.thickness)

    def min_corner(self) -> Vec3:
        lo, _ = self.polygon.bounds()
        return Vec3(x=lo.x, y=lo.y, z=0.0)


Shape = Annotated[Union[Cuboid, CutCuboid, Extrusion], Field(discriminator="type")]


class PartInfo(BaseModel):
    """Marks an element (or group) as a countable part."""
    type: str
    subtype: str | None = None
    description: str | None = None

    @property
    def type_prefix(self) -> str:
        return f"{self.type}-{self.subtype}" if self.subtype else self.type


# ============================================================
# Elements
# ============================================================

class ConstructionElement(BaseModel):
    """A single generated piece of material positioned in wall space."""
    id: str
    material: str
    position: Vec3
    shape: Shape
    tags: list[Tag] = []
    part_info: PartInfo | None = None

    def bounds(self) -> tuple[Vec3, Vec3]:
        offset = self.shape.min_corner() if isinstance(self.shape, Extrusion) else Vec3(x=0, y=0, z=0)
        lo = self.position + offset
        return lo, lo + self.shape.box_size()


class ConstructionGroup(BaseModel):
    """Nested collection of elements, e.g. a prefab module or a wall."""
    id: str
    children: list[ConstructionNode] = []
    tags: list[Tag] = []
    part_info: PartInfo | None = None

    def bounds(self) -> tuple[Vec3, Vec3] | None:
        boxes = [b for b in (c.bounds() for c in self.children) if b is not None]
        if not boxes:
            return None
        lo = Vec3(
            x=min(b[0].x for b in boxes),
            y=min(b[0].y for b in boxes),
            z=min(b[0].z for b in boxes),
        )
        hi = Vec3(
            x=max(b[1].x for b in boxes),
            y=max(b[1].y for b in boxes),
            z=max(b[1].z for b in boxes),
        )
        return lo, hi

    def size(self) -> Vec3:
        box = self.bounds()
        if box is None:
            return Vec3(x=0, y=0, z=0)
        return box[1] - box[0]

    def iter_elements(self):
        for child in self.children:
            if isinstance(child, ConstructionGroup):
                yield from child.iter_elements()
            else:
                yield child


ConstructionNode = Union[ConstructionElement, ConstructionGroup]

ConstructionGroup.model_rebuild()
