"""Shared test fixtures for plankernel tests."""
import pytest

from plankernel.models import Opening, WallConfig, vec2
from plankernel.core.perimeter import resolve_perimeter_geometry
from plankernel.core.generator import ConstructionPlanner
from plankernel.core.registry import create_default_registry


@pytest.fixture(scope="session")
def rectangle_points():
    """6000 x 4000 rectangle, clockwise (y up)."""
    return [vec2(0, 0), vec2(0, 4000), vec2(6000, 4000), vec2(6000, 0)]


@pytest.fixture(scope="session")
def rectangle_geometry(rectangle_points):
    """Rectangle with uniform 400mm walls."""
    configs = [WallConfig(thickness=400) for _ in rectangle_points]
    return resolve_perimeter_geometry(rectangle_points, configs)


@pytest.fixture(scope="session")
def l_shape_points():
    """L-shaped perimeter with one concave corner at index 3, clockwise."""
    return [
        vec2(0, 0), vec2(0, 6000), vec2(4000, 6000),
        vec2(4000, 3000), vec2(8000, 3000), vec2(8000, 0),
    ]


@pytest.fixture(scope="session")
def l_shape_geometry(l_shape_points):
    configs = [WallConfig(thickness=440) for _ in l_shape_points]
    return resolve_perimeter_geometry(l_shape_points, configs)


@pytest.fixture(scope="session")
def planner():
    return ConstructionPlanner(create_default_registry())


@pytest.fixture(scope="session")
def window():
    return Opening(id="w1", type="window", offset_from_start=2000, width=800, height=1200, sill_height=800)
