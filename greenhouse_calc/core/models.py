# greenhouse_calc/core/models.py
from dataclasses import dataclass, field, replace
from typing import Dict, Optional

RECTANGULAR = "rectangular"
HOOP = "hoop"
SHAPES = (RECTANGULAR, HOOP)

SHAPE_LABELS: Dict[str, str] = {
    RECTANGULAR: "Rectangular",
    HOOP: "Hoop House",
}


@dataclass(frozen=True)
class Dimensions:
    # all in feet
    length: float = 20.0
    width: float = 12.0
    height: float = 8.0
    door_width: float = 3.0
    door_height: float = 6.5

    def clamped(self) -> "Dimensions":
        """Return a copy with every negative dimension replaced by zero."""
        return Dimensions(
            length=max(0.0, float(self.length)),
            width=max(0.0, float(self.width)),
            height=max(0.0, float(self.height)),
            door_width=max(0.0, float(self.door_width)),
            door_height=max(0.0, float(self.door_height)),
        )


@dataclass(frozen=True)
class MaterialSelection:
    walls: str = "twinPoly"
    roof: str = "twinPoly"
    doors: str = "doubleGlass"
    frame: str = "aluminum"


@dataclass(frozen=True)
class Temperature:
    # °F
    desired: float = 75.0
    minimum: float = 30.0

    @property
    def difference(self) -> float:
        return float(self.desired) - float(self.minimum)


@dataclass(frozen=True)
class GreenhouseConfig:
    dimensions: Dimensions = field(default_factory=Dimensions)
    shape: str = RECTANGULAR
    materials: MaterialSelection = field(default_factory=MaterialSelection)
    insulation: str = "none"
    temperature: Temperature = field(default_factory=Temperature)

    def with_minimum(self, minimum: float) -> "GreenhouseConfig":
        return replace(self, temperature=replace(self.temperature, minimum=float(minimum)))


@dataclass(frozen=True)
class AreaBreakdown:
    # sq ft
    wall_area: float
    roof_area: float
    door_area: float


@dataclass(frozen=True)
class HeatLossResult:
    """Rounded BTU/hr figures plus the exact values they were rounded from."""
    wall_btu: int
    roof_btu: int
    door_btu: int
    total_btu: int

    areas: AreaBreakdown
    temp_diff: float
    wall_r_value: float
    roof_r_value: float
    door_r_value: float
    frame_factor: float

    wall_btu_exact: float = 0.0
    roof_btu_exact: float = 0.0
    door_btu_exact: float = 0.0
    total_btu_exact: float = 0.0

    insulation_units: Optional[int] = None

    @property
    def components(self) -> Dict[str, int]:
        return {"Walls": self.wall_btu, "Roof": self.roof_btu, "Doors": self.door_btu}

    @property
    def component_sum(self) -> int:
        """Sum of the displayed component figures (before frame factor and margin)."""
        return self.wall_btu + self.roof_btu + self.door_btu
