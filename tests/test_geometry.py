import math

import pytest

from greenhouse_calc.core.errors import ConfigurationError
from greenhouse_calc.core.geometry import calculate_areas, door_area, hoop_arc_length
from greenhouse_calc.core.models import Dimensions, HOOP, RECTANGULAR

DIMS = Dimensions(length=20, width=12, height=8, door_width=3, door_height=6.5)


def test_rectangular_areas():
    a = calculate_areas(DIMS, RECTANGULAR)
    assert a.door_area == pytest.approx(19.5)
    assert a.wall_area == pytest.approx(492.5)
    assert a.roof_area == pytest.approx(240.0)


def test_hoop_areas():
    a = calculate_areas(DIMS, HOOP)
    assert a.door_area == pytest.approx(19.5)
    assert a.wall_area == pytest.approx(172.5)
    assert a.roof_area == pytest.approx(376.99, abs=0.01)


def test_hoop_arc_is_half_circumference():
    assert hoop_arc_length(12) == pytest.approx(math.pi * 6)


def test_negative_dimensions_are_clamped():
    dims = Dimensions(length=-5, width=12, height=8, door_width=3, door_height=6.5)
    assert dims.clamped().length == 0.0

    a = calculate_areas(dims, RECTANGULAR)
    # length treated as 0: only the two end walls remain
    assert a.wall_area == pytest.approx(2 * 12 * 8 - 19.5)
    assert a.roof_area == 0.0


def test_negative_door_dimension_gives_no_door():
    dims = Dimensions(length=20, width=12, height=8, door_width=-3, door_height=6.5)
    assert door_area(dims.clamped()) == 0.0
    assert calculate_areas(dims, RECTANGULAR).wall_area == pytest.approx(2 * (20 * 8 + 12 * 8))


def test_door_larger_than_walls_clamps_wall_area_to_zero():
    dims = Dimensions(length=1, width=1, height=1, door_width=10, door_height=10)
    a = calculate_areas(dims, RECTANGULAR)
    assert a.wall_area == 0.0
    assert a.door_area == pytest.approx(100.0)


def test_unknown_shape_is_rejected():
    with pytest.raises(ConfigurationError):
        calculate_areas(DIMS, "dome")
