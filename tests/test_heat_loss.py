from dataclasses import replace

import pytest

from greenhouse_calc.core.catalog import (
    CoveringMaterial, FrameMaterial, Insulation, default_catalog,
)
from greenhouse_calc.core.errors import ConfigurationError, InvalidInputError
from greenhouse_calc.core.heat_loss import (
    SAFETY_MARGIN, design_curve, estimate_heat_loss, insulation_units_required,
)
from greenhouse_calc.core.models import (
    Dimensions, GreenhouseConfig, HOOP, MaterialSelection, Temperature,
)


def test_default_configuration_breakdown():
    res = estimate_heat_loss(GreenhouseConfig())

    # 20x12x8 rectangular, twin-wall poly walls/roof, double-glass door, ΔT 45 °F
    assert res.temp_diff == 45.0
    assert res.wall_btu_exact == pytest.approx(492.5 * 45 / 1.54)
    assert res.roof_btu_exact == pytest.approx(240 * 45 / 1.54)
    assert res.door_btu_exact == pytest.approx(19.5 * 45 / 2.0)
    assert (res.wall_btu, res.roof_btu, res.door_btu) == (14391, 7013, 439)

    expected_total = (res.wall_btu_exact + res.roof_btu_exact + res.door_btu_exact) / 0.85 * SAFETY_MARGIN
    assert res.total_btu_exact == pytest.approx(expected_total)
    assert res.total_btu == 32122


def test_total_is_rounded_from_exact_components():
    res = estimate_heat_loss(GreenhouseConfig())
    assert res.total_btu == int(res.total_btu_exact + 0.5)
    assert res.wall_btu == int(res.wall_btu_exact + 0.5)
    # components are not rounded before summing
    assert res.total_btu_exact != res.component_sum / res.frame_factor * SAFETY_MARGIN


def test_insulation_only_changes_walls():
    plain = estimate_heat_loss(GreenhouseConfig())
    baled = estimate_heat_loss(replace(GreenhouseConfig(), insulation="standardHayBale"))

    assert baled.wall_r_value == pytest.approx(1.54 + 2.5)
    assert baled.wall_btu < plain.wall_btu
    assert baled.roof_btu == plain.roof_btu
    assert baled.door_btu == plain.door_btu


def test_insulation_units_for_hay_bales():
    res = estimate_heat_loss(replace(GreenhouseConfig(), insulation="standardHayBale"))
    assert res.insulation_units == 110  # ceil(492.5 / 4.5)

    assert estimate_heat_loss(GreenhouseConfig()).insulation_units is None
    assert insulation_units_required(0.0, Insulation("Bale", 2.5, coverage=4.5)) == 0


def test_zero_temperature_difference_gives_zero():
    for insulation in ("none", "largeHayBale"):
        cfg = GreenhouseConfig(insulation=insulation, temperature=Temperature(desired=50, minimum=50))
        res = estimate_heat_loss(cfg)
        assert res.total_btu == 0
        assert res.component_sum == 0


def test_minimum_above_desired_needs_no_heat():
    res = estimate_heat_loss(GreenhouseConfig(temperature=Temperature(desired=60, minimum=80)))
    assert res.temp_diff == 0.0
    assert res.total_btu == 0


def test_total_non_decreasing_in_temperature_difference():
    cfg = GreenhouseConfig()
    totals = [estimate_heat_loss(cfg.with_minimum(t)).total_btu for t in range(75, -41, -5)]
    assert totals == sorted(totals)
    assert totals[0] == 0


@pytest.mark.parametrize("role", ["walls", "roof", "doors"])
def test_total_non_increasing_in_covering_r_value(role):
    cfg = GreenhouseConfig(materials=replace(MaterialSelection(), **{role: "custom"}))

    totals = []
    for r in (0.5, 1.0, 2.0, 4.0):
        catalog = default_catalog()
        catalog.coverings["custom"] = CoveringMaterial("Custom", r)
        totals.append(estimate_heat_loss(cfg, catalog).total_btu)
    assert totals == sorted(totals, reverse=True)


def test_total_non_increasing_in_insulation_r_value():
    catalog = default_catalog()
    cfg = GreenhouseConfig(insulation="custom")
    totals = []
    for r in (0.0, 1.0, 2.5, 10.0):
        catalog.insulations["custom"] = Insulation("Custom", r)
        totals.append(estimate_heat_loss(cfg, catalog).total_btu)
    assert totals == sorted(totals, reverse=True)


def test_better_frame_factor_lowers_total():
    alu = estimate_heat_loss(GreenhouseConfig())
    wood = estimate_heat_loss(GreenhouseConfig(materials=replace(MaterialSelection(), frame="wood")))
    assert wood.total_btu < alu.total_btu


def test_estimate_is_deterministic():
    cfg = GreenhouseConfig(
        dimensions=Dimensions(30, 14, 9, 4, 7),
        shape=HOOP,
        insulation="largeHayBale",
        temperature=Temperature(70, 10),
    )
    assert estimate_heat_loss(cfg) == estimate_heat_loss(cfg)


def test_hoop_uses_arc_roof():
    res = estimate_heat_loss(GreenhouseConfig(shape=HOOP))
    assert res.areas.roof_area == pytest.approx(376.99, abs=0.01)
    assert res.roof_btu_exact == pytest.approx(res.areas.roof_area * 45 / 1.54)


@pytest.mark.parametrize("materials, insulation", [
    (MaterialSelection(walls="bubbleWrap"), "none"),
    (MaterialSelection(roof="bubbleWrap"), "none"),
    (MaterialSelection(doors="bubbleWrap"), "none"),
    (MaterialSelection(frame="bamboo"), "none"),
    (MaterialSelection(), "strawMat"),
])
def test_unknown_keys_raise_configuration_error(materials, insulation):
    with pytest.raises(ConfigurationError):
        estimate_heat_loss(GreenhouseConfig(materials=materials, insulation=insulation))


def test_zero_r_value_is_rejected():
    catalog = default_catalog()
    catalog.coverings["broken"] = CoveringMaterial("Broken", 0.0)
    cfg = GreenhouseConfig(materials=replace(MaterialSelection(), roof="broken"))
    with pytest.raises(InvalidInputError):
        estimate_heat_loss(cfg, catalog)


def test_bad_frame_factor_is_rejected():
    catalog = default_catalog()
    catalog.frames["broken"] = FrameMaterial("Broken", 0.0)
    cfg = GreenhouseConfig(materials=replace(MaterialSelection(), frame="broken"))
    with pytest.raises(InvalidInputError):
        estimate_heat_loss(cfg, catalog)


def test_design_curve_falls_as_minimum_rises():
    curve = design_curve(GreenhouseConfig(), [0, 10, 20, 30, 75, 90])
    assert [t for t, _ in curve] == [0.0, 10.0, 20.0, 30.0, 75.0, 90.0]
    totals = [b for _, b in curve]
    assert totals == sorted(totals, reverse=True)
    assert curve[3][1] == estimate_heat_loss(GreenhouseConfig()).total_btu
    assert totals[-2:] == [0, 0]


@pytest.mark.parametrize("insulation", [
    Insulation("Vacuum Panel", -1.0),
    Insulation("Crumbled Bale", 2.5, coverage=0.0),
    Insulation("Holey Bale", 2.5, coverage=-4.0),
])
def test_unusable_insulation_is_rejected(insulation):
    catalog = default_catalog()
    catalog.insulations["broken"] = insulation
    with pytest.raises(InvalidInputError):
        estimate_heat_loss(GreenhouseConfig(insulation="broken"), catalog)


def test_frame_factor_above_one_is_rejected():
    catalog = default_catalog()
    catalog.frames["broken"] = FrameMaterial("Broken", 1.2)
    cfg = GreenhouseConfig(materials=replace(MaterialSelection(), frame="broken"))
    with pytest.raises(InvalidInputError):
        estimate_heat_loss(cfg, catalog)


def test_insulation_units_reject_non_positive_coverage():
    with pytest.raises(InvalidInputError):
        insulation_units_required(100.0, Insulation("Bale", 2.5, coverage=0.0))


def test_changing_a_catalog_does_not_leak_into_defaults():
    baseline = estimate_heat_loss(GreenhouseConfig())

    tweaked = default_catalog()
    tweaked.coverings["twinPoly"] = CoveringMaterial("Twin-Wall Polycarbonate", 15.4)
    assert estimate_heat_loss(GreenhouseConfig(), tweaked).total_btu < baseline.total_btu

    assert estimate_heat_loss(GreenhouseConfig()) == baseline
    assert default_catalog().covering("twinPoly").r_value == 1.54
