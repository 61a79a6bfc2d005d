import json
from pathlib import Path
from typing import Any, Dict, Optional
from ..version import SETTINGS_FILENAME
from ..utils.paths import app_data_dir
from .logger import get_logger


class SettingsManager:
    """JSON-backed user preferences (catalog file, report defaults, chart range)."""

    DEFAULTS: Dict[str, Any] = {
        "catalog_csv": None,
        "report_designer": "",
        "last_report_dir": "",
        "chart_min_temp_span": 40,
    }

    def __init__(self, path: Optional[Path] = None) -> None:
        self._log = get_logger()
        self._path: Path = Path(path) if path is not None else app_data_dir() / SETTINGS_FILENAME
        self._data: Dict[str, Any] = {}
        self.load()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> None:
        if self._path.exists():
            try:
                loaded = json.loads(self._path.read_text(encoding="utf-8"))
                if not isinstance(loaded, dict):
                    raise ValueError("settings root is not an object")
                self._data = {**self.DEFAULTS, **loaded}
                self._log.debug("Settings loaded: %s", self._data)
            except (OSError, ValueError) as e:
                self._log.exception("Failed to load settings, using defaults: %s", e)
                self._data = dict(self.DEFAULTS)
        else:
            self._data = dict(self.DEFAULTS)
            self.save()

    def save(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")
            self._log.debug("Settings saved to %s", self._path)
        except OSError as e:
            self._log.exception("Failed to save settings: %s", e)

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self.save()

    # Convenience
    @property
    def catalog_csv(self) -> Optional[str]:
        val = self._data.get("catalog_csv")
        return str(val) if val else None

    @catalog_csv.setter
    def catalog_csv(self, val: Optional[str]) -> None:
        self._data["catalog_csv"] = str(val) if val else None
        self.save()

    @property
    def chart_min_temp_span(self) -> int:
        try:
            return max(1, int(self._data.get("chart_min_temp_span", 40)))
        except (TypeError, ValueError):
            return int(self.DEFAULTS["chart_min_temp_span"])
