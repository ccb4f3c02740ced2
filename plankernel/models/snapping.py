"""Snapping input and output models."""

from __future__ import annotations
from enum import Enum
from pydantic import BaseModel

from .geometry import Line2D, LineSegment2D, Vec2


class SnapLineKind(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    EXTENSION = "extension"
    PERPENDICULAR = "perpendicular"


class SnapLine(Line2D):
    """Guide line shown while drawing."""
    kind: SnapLineKind


class SnapPoint(BaseModel):
    id: str
    position: Vec2


class SnappingContext(BaseModel):
    """Points and walls of the active floor relevant to one pointer move."""
    points: list[SnapPoint] = []
    reference_point: Vec2 | None = None
    reference_point_id: str | None = None
    # Walls incident to the reference point
    reference_line_segments: list[LineSegment2D] = []


class SnapResult(BaseModel):
    position: Vec2
    lines: list[SnapLine] = []
    point_id: str | None = None
