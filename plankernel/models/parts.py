"""Aggregated parts list models."""

from __future__ import annotations
from enum import Enum
from pydantic import BaseModel

from .geometry import Vec3
from .materials import CrossSection


class PartIssue(str, Enum):
    """Advisory stock mismatch flags."""
    CROSS_SECTION_MISMATCH = "CrossSectionMismatch"
    LENGTH_EXCEEDS_AVAILABLE = "LengthExceedsAvailable"
    THICKNESS_MISMATCH = "ThicknessMismatch"
    SHEET_SIZE_EXCEEDED = "SheetSizeExceeded"


class StrawCategory(str, Enum):
    FULL = "full"
    PARTIAL = "partial"
    FLAKES = "flakes"
    STUFFED = "stuffed"


STRAW_CATEGORY_LABELS: dict[StrawCategory, str] = {
    StrawCategory.FULL: "Full bales",
    StrawCategory.PARTIAL: "Partial bales",
    StrawCategory.FLAKES: "Flakes",
    StrawCategory.STUFFED: "Stuffed fill",
}


class PartItem(BaseModel):
    """A labelled group of identical parts."""
    part_id: str
    type: str
    label: str
    size: Vec3
    elements: list[str] = []
    quantity: int = 1


class MaterialPartItem(PartItem):
    material: str
    description: str | None = None
    total_volume: float = 0.0
    length: float | None = None
    total_length: float | None = None
    area: float | None = None
    total_area: float | None = None
    thickness: float | None = None
    cross_section: CrossSection | None = None
    issue: PartIssue | None = None
    straw_category: StrawCategory | None = None


class MaterialParts(BaseModel):
    """All parts of one material with running totals."""
    material: str
    total_quantity: int = 0
    total_volume: float = 0.0
    total_length: float | None = None
    total_area: float | None = None
    parts: dict[str, MaterialPartItem] = {}


MaterialPartsList = dict[str, MaterialParts]
VirtualPartsList = dict[str, PartItem]
