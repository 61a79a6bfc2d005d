"""Greenhouse heat-loss estimate.

Conduction through each surface is ``area × ΔT / R``. The sum is scaled up for
heat leaking through the frame (divided by the frame's thermal bridge factor)
and by a fixed 25 % safety margin.

Rounding: each displayed figure is rounded on its own from the exact value, so
the displayed components do not necessarily add up to the displayed total
(which also carries the frame factor and margin). The exact values are kept on
the result for anyone who needs them.
"""
from __future__ import annotations
import math
from typing import Iterable, List, Optional, Tuple

from .catalog import Insulation, MaterialCatalog, default_catalog
from .errors import InvalidInputError
from .geometry import calculate_areas
from .models import GreenhouseConfig, HeatLossResult
from ..services.logger import get_logger

SAFETY_MARGIN = 1.25

_log = get_logger()


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _divisor(r_value: float, label: str) -> float:
    if not r_value > 0:
        raise InvalidInputError(f"{label} R-value must be > 0 (got {r_value})")
    return float(r_value)


def insulation_units_required(wall_area: float, insulation: Insulation) -> Optional[int]:
    """Bales (or other units) needed to cover ``wall_area``; None if the insulation has no coverage."""
    if insulation.coverage is None:
        return None
    if not insulation.coverage > 0:
        raise InvalidInputError(f"Insulation coverage must be > 0 (got {insulation.coverage})")
    if wall_area <= 0:
        return 0
    return int(math.ceil(wall_area / insulation.coverage))


def estimate_heat_loss(
    config: GreenhouseConfig,
    catalog: Optional[MaterialCatalog] = None,
) -> HeatLossResult:
    if catalog is None:
        catalog = default_catalog()
    mats = config.materials

    # resolve every key first so a bad configuration never yields partial numbers
    wall_cover = catalog.covering(mats.walls)
    roof_cover = catalog.covering(mats.roof)
    door_cover = catalog.covering(mats.doors)
    frame = catalog.frame(mats.frame)
    insulation = catalog.insulation(config.insulation)

    if not 0 < frame.thermal_bridge <= 1:
        raise InvalidInputError(
            f"Frame thermal bridge factor must be in (0, 1] (got {frame.thermal_bridge})"
        )
    if insulation.r_value < 0:
        raise InvalidInputError(f"Insulation R-value must be >= 0 (got {insulation.r_value})")

    wall_r = _divisor(wall_cover.r_value + insulation.r_value, "Wall")
    roof_r = _divisor(roof_cover.r_value, "Roof")
    door_r = _divisor(door_cover.r_value, "Door")

    areas = calculate_areas(config.dimensions, config.shape)

    temp_diff = config.temperature.difference
    if temp_diff < 0:
        # minimum above the set point: nothing to heat
        temp_diff = 0.0

    wall_btu = areas.wall_area * temp_diff / wall_r
    roof_btu = areas.roof_area * temp_diff / roof_r
    door_btu = areas.door_area * temp_diff / door_r
    total_btu = (wall_btu + roof_btu + door_btu) / frame.thermal_bridge * SAFETY_MARGIN

    result = HeatLossResult(
        wall_btu=_round_half_up(wall_btu),
        roof_btu=_round_half_up(roof_btu),
        door_btu=_round_half_up(door_btu),
        total_btu=_round_half_up(total_btu),
        areas=areas,
        temp_diff=temp_diff,
        wall_r_value=wall_r,
        roof_r_value=roof_r,
        door_r_value=door_r,
        frame_factor=frame.thermal_bridge,
        wall_btu_exact=wall_btu,
        roof_btu_exact=roof_btu,
        door_btu_exact=door_btu,
        total_btu_exact=total_btu,
        insulation_units=insulation_units_required(areas.wall_area, insulation),
    )
    _log.debug(
        "Heat loss %s: ΔT=%.1f walls=%d roof=%d doors=%d total=%d",
        config.shape, temp_diff, result.wall_btu, result.roof_btu, result.door_btu, result.total_btu,
    )
    return result


def design_curve(
    config: GreenhouseConfig,
    minimums: Iterable[float],
    catalog: Optional[MaterialCatalog] = None,
) -> List[Tuple[float, int]]:
    """Total BTU/hr at each outside minimum temperature, everything else unchanged."""
    return [
        (float(t), estimate_heat_loss(config.with_minimum(t), catalog).total_btu)
        for t in minimums
    ]
