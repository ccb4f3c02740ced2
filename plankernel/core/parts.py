"""Parts aggregation: turn a construction element tree into a bill of materials.

Identical parts are grouped under a canonical part id that does not depend
on how an element is oriented, and labelled ``A, B, ... Z, AA, AB, ...`` per
material in the order they are first seen.
"""

from __future__ import annotations
import logging
from typing import Iterable, Mapping

from plankernel.models.construction import ConstructionModel
from plankernel.models.elements import (
    GENERIC_LAYER_TAG_IDS, LAYER_TAG_CATEGORIES, ConstructionElement,
    ConstructionGroup, ConstructionNode, CutCuboid, Extrusion, Tag,
    TAG_FULL_BALE, TAG_PARTIAL_BALE, TAG_STRAW_FLAKES, TAG_STRAW_STUFFED,
)
from plankernel.models.geometry import Vec3, canonical_polygon_key
from plankernel.models.materials import (
    DEFAULT_MATERIALS, CrossSection, DimensionalMaterial, Material, SheetMaterial,
    StrawbaleMaterial, VolumeMaterial,
)
from plankernel.models.parts import (
    STRAW_CATEGORY_LABELS, MaterialPartItem, MaterialParts, MaterialPartsList,
    PartIssue, PartItem, StrawCategory, VirtualPartsList,
)

logger = logging.getLogger(__name__)

STRAW_CATEGORY_BY_TAG: dict[str, StrawCategory] = {
    TAG_FULL_BALE.id: StrawCategory.FULL,
    TAG_PARTIAL_BALE.id: StrawCategory.PARTIAL,
    TAG_STRAW_FLAKES.id: StrawCategory.FLAKES,
    TAG_STRAW_STUFFED.id: StrawCategory.STUFFED,
}


def index_to_label(index: int) -> str:
    """Bijective base-26 label: 0 -> A, 25 -> Z, 26 -> AA."""
    label = ""
    current = index
    while True:
        label = chr(65 + current % 26) + label
        current = current // 26 - 1
        if current < 0:
            return label


def get_straw_category(tags: Iterable[Tag] | None) -> StrawCategory:
    for tag in tags or []:
        category = STRAW_CATEGORY_BY_TAG.get(tag.id)
        if category is not None:
            return category
    return StrawCategory.STUFFED


def _fmt(value: float) -> str:
    return f"{round(value, 1):g}"


def sorted_dimensions(size: Vec3) -> list[float]:
    return sorted(size.as_tuple())


def compute_part_id(element: ConstructionElement) -> str:
    """Canonical id of a part, the same for every orientation of it."""
    info = element.part_info
    prefix = info.type_prefix if info else "part"
    shape = element.shape
    dims = "x".join(_fmt(d) for d in sorted_dimensions(shape.box_size()))
    part_id = f"{prefix}:{dims}"
    if isinstance(shape, CutCuboid):
        angles = sorted([shape.start_cut_angle, shape.end_cut_angle])
        part_id += ":" + "/".join(_fmt(a) for a in angles)
    elif isinstance(shape, Extrusion):
        part_id += ":" + canonical_polygon_key(shape.polygon.points)
    return part_id


def compute_dimensional_details(
    size: Vec3, material: DimensionalMaterial,
) -> tuple[float, PartIssue | None, CrossSection]:
    """Length, stock issue and cross section of a dimensional part."""
    dimensions = [round(d) for d in size.as_tuple()]
    length = dimensions[2]
    cross_section = CrossSection(smaller_length=dimensions[0], bigger_length=dimensions[1])

    matched = False
    for section in material.cross_sections:
        remaining = [0, 1, 2]
        found = True
        for target in (section.smaller_length, section.bigger_length):
            idx = next((i for i in remaining if dimensions[i] == round(target)), None)
            if idx is None:
                found = False
                break
            remaining.remove(idx)
        if found:
            length = dimensions[remaining[0]]
            cross_section = section
            matched = True
            break

    issue = None
    if not matched:
        issue = PartIssue.CROSS_SECTION_MISMATCH
    elif material.lengths and length > max(material.lengths):
        issue = PartIssue.LENGTH_EXCEEDS_AVAILABLE
    return length, issue, cross_section


def compute_sheet_details(
    size: Vec3, material: SheetMaterial,
) -> tuple[float, tuple[float, float], PartIssue | None]:
    """Thickness, face size and stock issue of a sheet part."""
    dimensions = sorted(round(d) for d in size.as_tuple())
    thickness_index = next(
        (i for i, d in enumerate(dimensions) if d in material.thicknesses), None,
    )
    if thickness_index is None:
        return dimensions[0], (dimensions[1], dimensions[2]), PartIssue.THICKNESS_MISMATCH

    thickness = dimensions[thickness_index]
    face = sorted(d for i, d in enumerate(dimensions) if i != thickness_index)
    fits = any(
        face[0] <= min(s.smaller_length, s.bigger_length)
        and face[1] <= max(s.smaller_length, s.bigger_length)
        for s in material.sizes
    )
    issue = None if fits else PartIssue.SHEET_SIZE_EXCEEDED
    return thickness, (face[0], face[1]), issue


class _PartsCollector:
    """Accumulates parts per material during one walk of the tree."""

    def __init__(self, materials: Mapping[str, Material], exclude_types: Iterable[str] | None) -> None:
        self.materials = materials
        self.exclude_types = set(exclude_types or [])
        self.parts_list: MaterialPartsList = {}
        self.label_counters: dict[str, int] = {}

    def entry(self, material_id: str) -> MaterialParts:
        if material_id not in self.parts_list:
            self.parts_list[material_id] = MaterialParts(material=material_id)
        return self.parts_list[material_id]

    def next_label(self, material_id: str) -> str:
        index = self.label_counters.get(material_id, 0)
        self.label_counters[material_id] = index + 1
        return index_to_label(index)

    def visit(self, node: ConstructionNode, inherited: list[Tag]) -> None:
        tags = inherited + node.tags
        if isinstance(node, ConstructionGroup):
            for child in node.children:
                self.visit(child, tags)
            return

        if node.part_info and node.part_info.type in self.exclude_types:
            return

        material = self.materials.get(node.material)
        if node.part_info is not None:
            self.add_part(node, tags, material)
        else:
            self.add_auto_part(node, tags, material)

    def _increment(self, entry: MaterialParts, part: MaterialPartItem, element_id: str, volume: float) -> None:
        part.quantity += 1
        part.total_volume += volume
        part.elements.append(element_id)
        entry.total_quantity += 1
        entry.total_volume += volume
        if part.length is not None:
            part.total_length = (part.total_length or 0) + part.length
            entry.total_length = (entry.total_length or 0) + part.length
        if part.area is not None:
            part.total_area = (part.total_area or 0) + part.area
            entry.total_area = (entry.total_area or 0) + part.area

    def _insert(self, entry: MaterialParts, part: MaterialPartItem) -> None:
        entry.parts[part.part_id] = part
        entry.total_quantity += 1
        entry.total_volume += part.total_volume
        if part.length is not None:
            entry.total_length = (entry.total_length or 0) + part.length
        if part.area is not None:
            entry.total_area = (entry.total_area or 0) + part.area

    def add_part(self, element: ConstructionElement, tags: list[Tag], material: Material | None) -> None:
        entry = self.entry(element.material)
        info = element.part_info
        shape = element.shape
        size = shape.box_size()
        volume = size.volume()
        face_area = None
        if isinstance(shape, Extrusion):
            face_area = shape.polygon.area()
            volume = face_area * float(shape.thickness)

        part_id = compute_part_id(element)
        straw_category = None
        if isinstance(material, StrawbaleMaterial):
            straw_category = get_straw_category(tags)
            part_id = f"strawbale:{straw_category.value}"

        existing = entry.parts.get(part_id)
        if existing is not None:
            self._increment(entry, existing, element.id, volume)
            return

        length = area = thickness = None
        issue = cross_section = None
        if isinstance(material, DimensionalMaterial):
            length, issue, cross_section = compute_dimensional_details(size, material)
        elif isinstance(material, SheetMaterial):
            thickness, face, issue = compute_sheet_details(size, material)
            area = face_area if face_area is not None else face[0] * face[1]
        elif isinstance(material, VolumeMaterial) and face_area is not None:
            area = face_area

        self._insert(entry, MaterialPartItem(
            part_id=part_id,
            type=f"strawbale-{straw_category.value}" if straw_category else info.type,
            description=STRAW_CATEGORY_LABELS[straw_category] if straw_category else info.description,
            label=self.next_label(element.material),
            material=element.material,
            size=size,
            elements=[element.id],
            quantity=1,
            total_volume=volume,
            length=length,
            total_length=length,
            area=area,
            total_area=area,
            thickness=thickness,
            cross_section=cross_section,
            issue=issue,
            straw_category=straw_category,
        ))

    def add_auto_part(self, element: ConstructionElement, tags: list[Tag], material: Material | None) -> None:
        """Elements without part info are grouped by layer tag or raw size."""
        entry = self.entry(element.material)
        shape = element.shape
        size = shape.box_size()
        dims = sorted_dimensions(size)

        layer_tags = [t for t in tags if t.category in LAYER_TAG_CATEGORIES]
        description = None
        if layer_tags:
            specific = next((t for t in layer_tags if t.id not in GENERIC_LAYER_TAG_IDS), None)
            layer_tag = specific or layer_tags[0]
            part_id = f"auto_{layer_tag.id}"
            description = layer_tag.label
            part_type = layer_tag.category
        else:
            part_id = "auto_" + "x".join(_fmt(d) for d in dims)
            part_type = "-"

        face_area = shape.polygon.area() if isinstance(shape, Extrusion) else None
        area = None
        if isinstance(material, SheetMaterial):
            if face_area is not None:
                area = face_area
            else:
                _, face, _ = compute_sheet_details(size, material)
                area = face[0] * face[1]
        elif isinstance(material, VolumeMaterial):
            area = face_area if face_area is not None else dims[1] * dims[2]
        volume = face_area * float(shape.thickness) if face_area is not None else size.volume()

        existing = entry.parts.get(part_id)
        if existing is not None:
            # Layer parts differ in size, so add the actual area
            existing.quantity += 1
            existing.total_volume += volume
            existing.elements.append(element.id)
            entry.total_quantity += 1
            entry.total_volume += volume
            if area is not None:
                existing.total_area = (existing.total_area or 0) + area
                entry.total_area = (entry.total_area or 0) + area
            return

        self._insert(entry, MaterialPartItem(
            part_id=part_id,
            type=part_type,
            description=description,
            label=self.next_label(element.material),
            material=element.material,
            size=Vec3(x=dims[0], y=dims[1], z=dims[2]),
            elements=[element.id],
            quantity=1,
            total_volume=volume,
            area=area,
            total_area=area,
        ))


def generate_material_parts_list(
    model: ConstructionModel,
    materials: Mapping[str, Material] | None = None,
    exclude_types: Iterable[str] | None = None,
) -> MaterialPartsList:
    """Group the model's elements into labelled parts per material.

    ``exclude_types`` skips elements whose part type is listed. Unknown
    material ids are counted by volume only.
    """
    collector = _PartsCollector(materials if materials is not None else DEFAULT_MATERIALS, exclude_types)
    for node in model.elements:
        collector.visit(node, [])
    logger.debug(
        "Parts list: %d materials, %d parts",
        len(collector.parts_list),
        sum(len(m.parts) for m in collector.parts_list.values()),
    )
    return collector.parts_list


def generate_virtual_parts_list(model: ConstructionModel) -> VirtualPartsList:
    """Labelled list of groups carrying part info, such as prefab modules."""
    parts: VirtualPartsList = {}
    counter = 0

    def visit(node: ConstructionNode) -> None:
        nonlocal counter
        if not isinstance(node, ConstructionGroup):
            return
        for child in node.children:
            visit(child)
        if node.part_info is None:
            return

        dims = sorted_dimensions(node.size())
        part_id = f"{node.part_info.type_prefix}-group:" + "x".join(_fmt(d) for d in dims)
        existing = parts.get(part_id)
        if existing is not None:
            existing.quantity += 1
            existing.elements.append(node.id)
            return

        parts[part_id] = PartItem(
            part_id=part_id,
            type=node.part_info.type,
            label=index_to_label(counter),
            size=Vec3(x=dims[0], y=dims[1], z=dims[2]),
            elements=[node.id],
        )
        counter += 1

    for node in model.elements:
        visit(node)
    return parts
