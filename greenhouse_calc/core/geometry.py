# greenhouse_calc/core/geometry.py
from __future__ import annotations
import math

from .errors import ConfigurationError
from .models import AreaBreakdown, Dimensions, HOOP, RECTANGULAR
from ..services.logger import get_logger

_log = get_logger()


def door_area(dims: Dimensions) -> float:
    return dims.door_width * dims.door_height


def hoop_arc_length(width: float) -> float:
    """Length of the semicircular arch for a hoop of diameter ``width``."""
    return math.pi * (width / 2.0)


def calculate_areas(dims: Dimensions, shape: str) -> AreaBreakdown:
    """
    Surface areas (sq ft) of the envelope.

      rectangular: walls = 2·(L·H + W·H) − door,  roof = L·W
      hoop:        walls = 2·(W·H) − door,        roof = L·(π·W/2)

    The door is assumed to sit in a wall, so its area is taken out of the wall
    area. A door larger than the walls leaves zero wall area.
    """
    d = dims.clamped()
    door = door_area(d)

    if shape == RECTANGULAR:
        walls = 2 * (d.length * d.height) + 2 * (d.width * d.height) - door
        roof = d.length * d.width
    elif shape == HOOP:
        walls = 2 * (d.width * d.height) - door
        roof = d.length * hoop_arc_length(d.width)
    else:
        raise ConfigurationError(f"Unknown greenhouse shape: {shape!r}")

    if walls < 0.0:
        _log.warning(
            "Door area %.2f sq ft exceeds %s wall area; wall area clamped to 0", door, shape
        )
        walls = 0.0

    return AreaBreakdown(wall_area=walls, roof_area=roof, door_area=door)
