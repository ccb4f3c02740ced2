"""Abstract base class for all construction rules.

Every rule in the system implements this interface. Rules are:
- Self-contained: each generates a specific part of a wall's construction
- Composable: multiple rules run in sequence via the registry
- Conditional: each rule decides if it applies to the current wall
"""

from __future__ import annotations
from abc import ABC, abstractmethod

from plankernel.models.construction import ConstructionResult, Measurement
from plankernel.models.context import WallConstructionContext
from plankernel.models.elements import ConstructionElement, Cuboid, PartInfo, Tag
from plankernel.models.geometry import Vec3


class ConstructionRule(ABC):
    """
    Base class for all construction rules.

    Subclasses implement `applies()` and `generate()`.
    The planner queries the registry, filters by `applies()`,
    sorts by `priority`, and calls `generate()` in order for each wall.
    """

    # Lower priority = runs first. Default 100.
    priority: int = 100

    # IDs of rules that must run before this one.
    dependencies: list[str] = []

    @abstractmethod
    def get_id(self) -> str:
        """Unique identifier for this rule (e.g., 'wall.infill')."""
        ...

    @abstractmethod
    def get_name(self) -> str:
        """Human-readable name (e.g., 'Post and Straw Infill')."""
        ...

    @abstractmethod
    def applies(self, context: WallConstructionContext) -> bool:
        """Return True if this rule should run for the given wall."""
        ...

    @abstractmethod
    def generate(self, context: WallConstructionContext) -> ConstructionResult:
        """
        Generate construction elements for the given wall.

        The context provides the wall, params, corner info and the 3D
        segments computed by the planner.
        """
        ...


def cuboid(
    context: WallConstructionContext,
    material: str,
    position: Vec3,
    size: Vec3,
    tags: list[Tag] | None = None,
    part_info: PartInfo | None = None,
) -> ConstructionElement:
    """Box element with the next deterministic id of the wall."""
    return ConstructionElement(
        id=context.next_element_id(),
        material=material,
        position=position,
        shape=Cuboid(size=size),
        tags=tags or [],
        part_info=part_info,
    )


def width_measurement(position: Vec3, width: float, tags: list[Tag], label: str | None = None) -> Measurement:
    return Measurement(
        start_point=position,
        end_point=Vec3(x=position.x + width, y=position.y, z=position.z),
        label=label,
        tags=tags,
    )
