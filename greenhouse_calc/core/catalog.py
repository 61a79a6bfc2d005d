# greenhouse_calc/core/catalog.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from pathlib import Path
import sys
import csv

from .errors import ConfigurationError, InvalidInputError
from ..utils.paths import app_data_dir
from ..version import CATALOG_FILENAME


@dataclass(frozen=True)
class CoveringMaterial:
    name: str
    r_value: float


@dataclass(frozen=True)
class FrameMaterial:
    name: str
    thermal_bridge: float


@dataclass(frozen=True)
class Insulation:
    name: str
    r_value: float = 0.0
    coverage: Optional[float] = None  # sq ft covered by one unit (bale)


COVERING = "covering"
FRAME = "frame"
INSULATION = "insulation"
KINDS = (COVERING, FRAME, INSULATION)


@dataclass
class MaterialCatalog:
    """Lookup tables for coverings, frames and insulation, keyed by short ids."""
    coverings: Dict[str, CoveringMaterial] = field(default_factory=dict)
    frames: Dict[str, FrameMaterial] = field(default_factory=dict)
    insulations: Dict[str, Insulation] = field(default_factory=dict)

    # ---- lookups ------------------------------------------------------------
    def covering(self, key: str) -> CoveringMaterial:
        try:
            return self.coverings[key]
        except KeyError:
            raise ConfigurationError(f"Unknown covering material: {key!r}") from None

    def frame(self, key: str) -> FrameMaterial:
        try:
            return self.frames[key]
        except KeyError:
            raise ConfigurationError(f"Unknown frame material: {key!r}") from None

    def insulation(self, key: str) -> Insulation:
        try:
            return self.insulations[key]
        except KeyError:
            raise ConfigurationError(f"Unknown insulation type: {key!r}") from None

    # ---- mutation -----------------------------------------------------------
    def merged(self, other: "MaterialCatalog") -> "MaterialCatalog":
        """New catalog with ``other``'s entries added on top of (and overriding) ours."""
        return MaterialCatalog(
            coverings={**self.coverings, **other.coverings},
            frames={**self.frames, **other.frames},
            insulations={**self.insulations, **other.insulations},
        )

    def validate(self) -> None:
        """Raise InvalidInputError for any entry that would break the heat-loss math."""
        for key, c in self.coverings.items():
            if not c.r_value > 0:
                raise InvalidInputError(f"Covering {key!r} has R-value {c.r_value}; must be > 0")
        for key, f in self.frames.items():
            if not 0 < f.thermal_bridge <= 1:
                raise InvalidInputError(
                    f"Frame {key!r} has thermal bridge factor {f.thermal_bridge}; must be in (0, 1]"
                )
        for key, i in self.insulations.items():
            if i.r_value < 0:
                raise InvalidInputError(f"Insulation {key!r} has negative R-value {i.r_value}")
            if i.coverage is not None and not i.coverage > 0:
                raise InvalidInputError(f"Insulation {key!r} has coverage {i.coverage}; must be > 0")


def default_catalog() -> MaterialCatalog:
    return MaterialCatalog(
        coverings={
            "singleGlass": CoveringMaterial("Single Glass", 0.9),
            "doubleGlass": CoveringMaterial("Double Glass", 2.0),
            "twinPoly": CoveringMaterial("Twin-Wall Polycarbonate", 1.54),
            "polyFilm": CoveringMaterial("Polyethylene Film", 0.83),
        },
        frames={
            "aluminum": FrameMaterial("Aluminum", 0.85),
            "galvanizedSteel": FrameMaterial("Galvanized Steel", 0.80),
            "wood": FrameMaterial("Treated Wood", 0.95),
        },
        insulations={
            "none": Insulation("None", 0.0),
            "standardHayBale": Insulation("Standard Hay Bale (14\"×18\"×36\")", 2.5, coverage=4.5),
            "largeHayBale": Insulation("Large Hay Bale (4'×4'×8')", 2.8, coverage=32.0),
        },
    )


# ---------------------------------------------------------------------------
# CSV extension file
# ---------------------------------------------------------------------------

# Accept common header variants (case/spacing insensitive)
ALIASES: Dict[str, List[str]] = {
    "kind":           ["kind", "Kind", "type", "Type", "category", "Category"],
    "key":            ["key", "Key", "id", "ID"],
    "name":           ["name", "Name", "description", "Description"],
    "r_value":        ["r_value", "R-Value", "R Value", "RValue", "R"],
    "thermal_bridge": ["thermal_bridge", "Thermal Bridge", "ThermalBridge", "Bridge", "Frame Factor"],
    "coverage":       ["coverage", "Coverage", "Coverage (sq ft)", "Area"],
}

# The header we WRITE when exporting a template
CANON_HEADERS: Tuple[str, ...] = ("Kind", "Key", "Name", "R-Value", "Thermal Bridge", "Coverage")


def _norm(s: Optional[str]) -> str:
    return (s or "").strip()


def _map_headers(fieldnames: List[str]) -> Dict[str, Optional[str]]:
    """Return a map from canonical field -> actual CSV header (or None if not found)."""
    out: Dict[str, Optional[str]] = {k: None for k in ALIASES}
    lower = {fn.lower().strip(): fn for fn in fieldnames}
    for canon, candidates in ALIASES.items():
        for cand in candidates:
            key = cand.lower().strip()
            if key in lower:
                out[canon] = lower[key]
                break
    return out


def _float(raw: str, *, field_name: str, line: int, decimal_comma: bool = False) -> Optional[float]:
    if not raw:
        return None
    if decimal_comma:
        # ";" or tab separated files come from locales that write 1,5 for 1.5
        if raw.count(",") > 1 or ("," in raw and "." in raw):
            raise ConfigurationError(f"Line {line}: {field_name} {raw!r} is ambiguous; write it as 1,5 or 1.5")
        raw = raw.replace(",", ".")
    else:
        raw = raw.replace(",", "")
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"Line {line}: {field_name} {raw!r} is not a number") from None


def resolve_catalog_csv(configured: Optional[str] = None) -> Optional[Path]:
    """
    Resolution order (first existing file wins):
      1) the path stored in settings ("catalog_csv")
      2) <folder of the EXE>/materials.csv   (when bundled by PyInstaller)
      3) <cwd>/materials.csv
      4) <app data>/materials.csv
    """
    candidates: List[Path] = []
    if configured:
        candidates.append(Path(configured))
    if getattr(sys, "frozen", False):
        candidates.append(Path(sys.executable).resolve().parent / CATALOG_FILENAME)
    candidates.append(Path.cwd() / CATALOG_FILENAME)
    candidates.append(app_data_dir() / CATALOG_FILENAME)

    for p in candidates:
        if p.is_file():
            return p
    return None


def load_catalog_csv(csv_path: Path) -> MaterialCatalog:
    """Read a catalog extension file. Every row must name a kind and a key."""
    out = MaterialCatalog()
    if not csv_path.exists():
        return out

    with csv_path.open("r", encoding="utf-8", newline="") as f:
        header_line = f.readline()
        f.seek(0)
        # only the delimiter is sniffed; quoting stays excel-style so names with quotes survive
        try:
            delimiter = csv.Sniffer().sniff(header_line, delimiters=",;\t").delimiter
        except csv.Error:
            delimiter = ","
        decimal_comma = delimiter != ","

        reader = csv.DictReader(f, delimiter=delimiter)
        if not reader.fieldnames:
            return out

        header_map = _map_headers(reader.fieldnames)
        if header_map["kind"] is None or header_map["key"] is None:
            raise ConfigurationError(f"{csv_path.name}: missing 'Kind' or 'Key' column")

        for line, rec in enumerate(reader, start=2):
            kind = _norm(rec.get(header_map["kind"] or "", "")).lower()
            key = _norm(rec.get(header_map["key"] or "", ""))
            if not (kind or key):
                continue
            if kind not in KINDS:
                raise ConfigurationError(f"Line {line}: unknown kind {kind!r} (expected one of {', '.join(KINDS)})")
            if not key:
                raise ConfigurationError(f"Line {line}: missing key")

            name = _norm(rec.get(header_map["name"] or "", "")) or key
            def num(canon: str, label: str) -> Optional[float]:
                raw = _norm(rec.get(header_map[canon] or "", ""))
                return _float(raw, field_name=label, line=line, decimal_comma=decimal_comma)

            r_value = num("r_value", "R-value")
            bridge = num("thermal_bridge", "thermal bridge")
            coverage = num("coverage", "coverage")

            if kind == COVERING:
                if r_value is None:
                    raise ConfigurationError(f"Line {line}: covering {key!r} needs an R-value")
                out.coverings[key] = CoveringMaterial(name, r_value)
            elif kind == FRAME:
                if bridge is None:
                    raise ConfigurationError(f"Line {line}: frame {key!r} needs a thermal bridge factor")
                out.frames[key] = FrameMaterial(name, bridge)
            else:
                out.insulations[key] = Insulation(name, r_value or 0.0, coverage=coverage)

    out.validate()
    return out


def load_catalog(configured: Optional[str] = None) -> Tuple[MaterialCatalog, Optional[Path]]:
    """Built-in catalog extended by the first catalog CSV found (if any)."""
    path = resolve_catalog_csv(configured)
    if path is None:
        return default_catalog(), None
    return default_catalog().merged(load_catalog_csv(path)), path


def write_catalog_csv(catalog: MaterialCatalog, csv_path: Path) -> None:
    """Write the whole catalog with the canonical header; useful as an editable template."""
    csv_path.parent.mkdir(parents=True, exist_ok=True)
    with csv_path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(CANON_HEADERS)
        for key, c in catalog.coverings.items():
            writer.writerow([COVERING, key, c.name, f"{c.r_value:.6g}", "", ""])
        for key, fr in catalog.frames.items():
            writer.writerow([FRAME, key, fr.name, "", f"{fr.thermal_bridge:.6g}", ""])
        for key, i in catalog.insulations.items():
            cov = "" if i.coverage is None else f"{i.coverage:.6g}"
            writer.writerow([INSULATION, key, i.name, f"{i.r_value:.6g}", "", cov])
