"""Soft construction issues returned alongside valid output."""

from __future__ import annotations
from pydantic import BaseModel


class ConstructionIssue(BaseModel):
    """A locally wrong but still drawable condition.

    ``elements`` holds the ids of the walls, corners or construction
    elements the issue refers to.
    """
    description: str
    elements: list[str] = []
