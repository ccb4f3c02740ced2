"""Tests for the construction planner and the wall/opening rules."""
import pytest

from plankernel.core.corners import calculate_wall_corner_info
from plankernel.core.errors import InvalidPerimeterError, SegmentationError
from plankernel.core.parts import generate_material_parts_list, generate_virtual_parts_list
from plankernel.core.perimeter import resolve_perimeter_geometry
from plankernel.models import (
    ConstructionParams, ConstructionType, GenerationConfig, Opening,
    PerimeterGeometry, WallConfig, WallConstructionContext, vec2, vec3,
)
from plankernel.models.elements import (
    TAG_FULL_BALE, TAG_HEADER, TAG_INFILL_CONSTRUCTION, TAG_MODULE,
    TAG_PARTIAL_BALE, TAG_POST, TAG_SILL, TAG_STRAW_FLAKES, TAG_WALL_BODY,
    TAG_WALL_LENGTH,
)
from plankernel.rules.wall.infill import get_bale_width, infill_wall_area
from plankernel.rules.wall.strawhenge import construct_module, module_count


def _geometry(points, construction_type=ConstructionType.INFILL, openings=()):
    configs = [
        WallConfig(thickness=400, construction_type=construction_type, openings=list(openings) if i == 0 else [])
        for i in range(len(points))
    ]
    return resolve_perimeter_geometry(points, configs)


def _context(geometry, index=0, params=None):
    params = params or ConstructionParams()
    wall = geometry.walls[index]
    return WallConstructionContext(
        wall=wall,
        perimeter=geometry,
        params=params,
        corner_info=calculate_wall_corner_info(
            wall, geometry, params.inside_layer_thickness, params.outside_layer_thickness,
        ),
    )


def _tagged(elements, tag):
    return [e for e in elements if tag in e.tags]


def _spans(elements, tag):
    return sorted(
        (round(e.position.x), round(e.position.x + e.shape.size.x))
        for e in _tagged(elements, tag)
    )


def _wall_elements(result, wall_id):
    group = next(g for g in result.model.elements if g.id == wall_id)
    return list(group.iter_elements())


# --- infill ---

def test_bale_width_rules():
    p = ConstructionParams().infill
    assert get_bale_width(500, p) == 500
    assert get_bale_width(3000, p) == 800
    # Full bale and post fit, but the rest would be too thin
    assert get_bale_width(900, p) == 900 - 70 - 60
    assert get_bale_width(830, p) == 830 - 60


def test_infill_plain_wall(rectangle_geometry):
    context = _context(rectangle_geometry)
    result = infill_wall_area(context, vec3(0, 30, 0), vec3(3000, 340, 2500))
    assert _spans(result.elements, TAG_POST) == [(800, 860), (1660, 1720), (2140, 2200)]
    straw = sorted(
        (round(e.position.x), round(e.position.x + e.shape.size.x))
        for e in result.elements if TAG_POST not in e.tags
    )
    assert straw == [(0, 800), (860, 1660), (1720, 2140), (2200, 3000)]
    assert len(_tagged(result.elements, TAG_FULL_BALE)) == 3
    assert len(_tagged(result.elements, TAG_PARTIAL_BALE)) == 1
    assert result.errors == []


def test_infill_too_narrow_for_two_stands(rectangle_geometry):
    context = _context(rectangle_geometry)
    result = infill_wall_area(context, vec3(0, 30, 0), vec3(100, 340, 2500), True, True)
    assert result.errors[0].description == "Space for more than one post, but not enough for two"


def test_infill_single_stand_post(rectangle_geometry):
    context = _context(rectangle_geometry)
    result = infill_wall_area(context, vec3(0, 30, 0), vec3(60, 340, 2500), True, False)
    assert len(result.elements) == 1
    assert TAG_POST in result.elements[0].tags


def test_element_ids_are_sequential_per_wall(rectangle_geometry):
    context = _context(rectangle_geometry, 2)
    result = infill_wall_area(context, vec3(0, 30, 0), vec3(1000, 340, 2500))
    assert [e.id for e in result.elements] == [f"wall-2-{i}" for i in range(1, len(result.elements) + 1)]


# --- planner ---

def test_plan_rectangle(rectangle_geometry, planner):
    result = planner.plan(rectangle_geometry)
    assert [p.wall_id for p in result.plans] == ["wall-0", "wall-1", "wall-2", "wall-3"]
    assert [g.id for g in result.model.elements] == ["wall-0", "wall-1", "wall-2", "wall-3"]
    assert all(g.tags == [TAG_INFILL_CONSTRUCTION] for g in result.model.elements)
    assert result.model.errors == []

    plan = result.get_plan("wall-0")
    assert abs(plan.construction_length - 4400) < 1e-9
    assert abs(plan.boundary_length - 4000) < 1e-9
    length = plan.measurements[0]
    assert TAG_WALL_LENGTH in length.tags
    assert abs(length.length - 4400) < 1e-9


def test_plan_is_deterministic(rectangle_geometry, planner):
    first = planner.plan(rectangle_geometry)
    second = planner.plan(rectangle_geometry)
    assert first.model_dump() == second.model_dump()


def test_element_ids_are_unique(rectangle_geometry, planner):
    result = planner.plan(rectangle_geometry)
    ids = [e.id for g in result.model.elements for e in g.iter_elements()]
    assert len(ids) == len(set(ids))


def test_wall_with_window(rectangle_points, window, planner):
    geometry = _geometry(rectangle_points, openings=[window])
    result = planner.plan(geometry)
    plan = result.get_plan("wall-0")
    assert plan.errors == []
    assert [(s.type, round(s.position.x), round(s.position.x + s.size.x)) for s in plan.segments_3d] == [
        ("wall", 0, 2370), ("opening", 2370, 3170), ("wall", 3170, 4400),
    ]

    elements = _wall_elements(result, "wall-0")
    posts = _spans(elements, TAG_POST)
    assert [p for p in posts if p[1] <= 2370] == [(800, 860), (1450, 1510), (2310, 2370)]
    # Stand next to the opening on the far side
    assert (3170, 3230) in posts
    bales = _spans(elements, TAG_FULL_BALE) + _spans(elements, TAG_PARTIAL_BALE)
    assert [b for b in sorted(bales) if b[1] <= 2370] == [(0, 800), (860, 1450), (1510, 2310)]


def test_window_header_and_sill(rectangle_points, window, planner):
    geometry = _geometry(rectangle_points, openings=[window])
    elements = _wall_elements(planner.plan(geometry), "wall-0")

    (header,) = _tagged(elements, TAG_HEADER)
    assert abs(header.position.z - 2000) < 1e-9
    assert abs(header.shape.size.z - 60) < 1e-9
    assert abs(header.position.x - 2370) < 1e-9
    assert abs(header.shape.size.x - 800) < 1e-9

    (sill,) = _tagged(elements, TAG_SILL)
    assert abs(sill.position.z - 740) < 1e-9

    fillings = sorted(
        (round(e.position.z), round(e.position.z + e.shape.size.z))
        for e in _tagged(elements, TAG_STRAW_FLAKES)
    )
    assert fillings == [(0, 740), (2060, 2500)]


def test_door_has_no_sill(rectangle_points, planner):
    door = Opening(id="d1", type="door", offset_from_start=1000, width=900, height=2100)
    geometry = _geometry(rectangle_points, openings=[door])
    result = planner.plan(geometry)
    elements = _wall_elements(result, "wall-0")
    assert _tagged(elements, TAG_SILL) == []
    assert len(_tagged(elements, TAG_HEADER)) == 1
    assert result.get_plan("wall-0").errors == []


@pytest.mark.parametrize("height, sill, message", [
    (2000, 800, "Opening is higher than the wall: top at 2800mm but wall is only 2500mm high"),
    (1670, 800, "Header does not fit: needs 60mm but only 30mm available"),
    (1000, 40, "Sill does not fit: needs 60mm but only 40mm available"),
])
def test_opening_frame_errors(rectangle_points, planner, height, sill, message):
    opening = Opening(id="w1", offset_from_start=1000, width=800, height=height, sill_height=sill)
    geometry = _geometry(rectangle_points, openings=[opening])
    result = planner.plan(geometry)
    errors = result.get_plan("wall-0").errors
    assert [e.description for e in errors] == [message]
    assert errors[0].elements == ["w1"]
    assert result.model.errors == errors


def test_disabled_rule_is_skipped(rectangle_points, window, planner):
    geometry = _geometry(rectangle_points, openings=[window])
    config = GenerationConfig(disabled_rules=["opening.frame"])
    elements = _wall_elements(planner.plan(geometry, config=config), "wall-0")
    assert _tagged(elements, TAG_HEADER) == []
    assert _tagged(elements, TAG_POST) != []


def test_opening_beyond_wall_fails_planning(rectangle_points, planner):
    opening = Opening(id="w1", offset_from_start=3500, width=800, height=1000)
    geometry = _geometry(rectangle_points, openings=[opening])
    with pytest.raises(SegmentationError):
        planner.plan(geometry)


def test_too_few_walls_fails_planning(planner):
    with pytest.raises(InvalidPerimeterError):
        planner.plan(PerimeterGeometry())


def test_geometry_issues_become_warnings(rectangle_points, planner):
    points = [vec2(0, 0), vec2(0, 3000), vec2(0, 1000), vec2(2000, 0)]
    geometry = _geometry(points)
    result = planner.plan(geometry)
    assert geometry.issues
    assert result.model.warnings[:len(geometry.issues)] == geometry.issues


# --- strawhenge ---

def test_module_count_leaves_room_for_infill(rectangle_geometry):
    context = _context(rectangle_geometry)
    assert module_count(1840, context) == 2
    assert module_count(2000, context) == 2
    assert module_count(1900, context) == 1
    assert module_count(1000, context) == 0


def test_module_is_a_group(rectangle_geometry):
    context = _context(rectangle_geometry)
    result = construct_module(context, vec3(0, 30, 0), vec3(920, 340, 2500))
    (group,) = result.elements
    assert TAG_MODULE in group.tags
    assert group.part_info.type == "module"
    assert len(group.children) == 5
    assert len(_tagged(group.children, TAG_FULL_BALE)) == 1
    size = group.size()
    assert abs(size.x - 920) < 1e-9 and abs(size.z - 2500) < 1e-9


def test_strawhenge_wall(rectangle_points, planner):
    geometry = _geometry(rectangle_points, ConstructionType.STRAWHENGE)
    result = planner.plan(geometry)
    group = next(g for g in result.model.elements if g.id == "wall-0")
    modules = [c for c in group.children if TAG_MODULE in c.tags]
    assert len(modules) == 4
    rest = [c for c in group.children if TAG_MODULE not in c.tags]
    assert [(round(e.position.x), round(e.position.x + e.shape.size.x)) for e in rest] == [(3680, 4400)]

    virtual = generate_virtual_parts_list(result.model)
    (item,) = virtual.values()
    assert item.type == "module"


# --- non-strawbale ---

def test_monolithic_wall(rectangle_points, window, planner):
    geometry = _geometry(rectangle_points, ConstructionType.NON_STRAWBALE, openings=[window])
    result = planner.plan(geometry)
    elements = _wall_elements(result, "wall-0")
    bodies = _tagged(elements, TAG_WALL_BODY)
    assert all(e.material == "masonry" for e in bodies)
    # Two wall segments plus the filling above the header and below the sill
    assert len(bodies) == 4
    assert _tagged(elements, TAG_STRAW_FLAKES) == []
    assert _tagged(elements, TAG_POST) == []


# --- parts from a plan ---

def test_parts_list_from_plan(rectangle_points, window, planner):
    geometry = _geometry(rectangle_points, openings=[window])
    model = planner.plan(geometry).model
    parts = generate_material_parts_list(model)
    assert set(parts) == {"wood", "straw"}

    post_count = sum(len(_tagged(list(g.iter_elements()), TAG_POST)) for g in model.elements)
    posts = parts["wood"].parts["post:60x340x2500"]
    assert posts.quantity == post_count
    assert posts.label == "A"

    straw = parts["straw"]
    assert "strawbale:full" in straw.parts
    assert "strawbale:flakes" in straw.parts
