"""Kernel parameters and configuration."""

from __future__ import annotations
from pydantic import BaseModel

from .geometry import Length


class SnapConfig(BaseModel):
    """Snapping tolerances (mm)."""
    point_snap_distance: Length = Length(200)
    line_snap_distance: Length = Length(100)
    min_distance: Length = Length(50)  # Minimum distance a snap may land from the reference point
    align_to_points: bool = True  # Offer axis lines through existing points


class InfillParams(BaseModel):
    """Posts and straw bales for infill walls."""
    max_post_spacing: Length = Length(800)   # Full bale width between posts
    min_straw_space: Length = Length(70)
    post_width: Length = Length(60)
    post_material: str = "wood"
    straw_material: str = "straw"


class ModuleParams(BaseModel):
    """Prefabricated strawhenge modules."""
    min_width: Length = Length(920)
    max_width: Length = Length(920)
    frame_thickness: Length = Length(60)
    frame_material: str = "wood"
    straw_material: str = "straw"


class OpeningFrameParams(BaseModel):
    header_thickness: Length = Length(60)
    sill_thickness: Length = Length(60)
    material: str = "wood"


class MonolithicParams(BaseModel):
    material: str = "masonry"


class ConstructionParams(BaseModel):
    """User-adjustable parameters for construction planning."""
    wall_height: Length = Length(2500)
    inside_layer_thickness: Length = Length(30)   # Plaster etc. on the inside face
    outside_layer_thickness: Length = Length(30)
    infill: InfillParams = InfillParams()
    module: ModuleParams = ModuleParams()
    opening_frame: OpeningFrameParams = OpeningFrameParams()
    monolithic: MonolithicParams = MonolithicParams()


class GenerationConfig(BaseModel):
    """Controls which rules are applied."""
    enabled_rules: list[str] = []        # Empty = use all registered defaults
    disabled_rules: list[str] = []       # Explicitly disable specific rules
