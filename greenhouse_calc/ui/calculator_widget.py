from __future__ import annotations
from typing import Dict, Optional

import numpy as np
from PyQt5.QtCore import pyqtSignal
from PyQt5.QtGui import QFont
from PyQt5.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QSplitter, QGroupBox, QFormLayout,
    QComboBox, QDoubleSpinBox, QLabel,
)

from matplotlib.backends.backend_qt5agg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.figure import Figure

from ..core.catalog import MaterialCatalog
from ..core.errors import HeatLossError
from ..core.heat_loss import design_curve, estimate_heat_loss
from ..core.models import (
    Dimensions, GreenhouseConfig, HeatLossResult, MaterialSelection, Temperature,
    SHAPES, SHAPE_LABELS,
)
from ..services.logger import get_logger
from ..utils.formatting import format_area, format_btu

DIM_FIELDS = [
    ("length", "Length (ft):"),
    ("width", "Width (ft):"),
    ("height", "Height (ft):"),
    ("door_width", "Door width (ft):"),
    ("door_height", "Door height (ft):"),
]
COVERING_ROLES = [
    ("walls", "Walls:"),
    ("roof", "Roof:"),
    ("doors", "Doors:"),
]
CURVE_POINTS = 41


class CalculatorWidget(QWidget):
    """
    Greenhouse form. Every edit rebuilds a GreenhouseConfig and re-runs the
    estimate; the results panel and charts follow immediately.
    """

    resultChanged = pyqtSignal(object)  # HeatLossResult or None

    def __init__(self, catalog: MaterialCatalog, *, curve_span: int = 40, parent=None):
        super().__init__(parent)
        self._log = get_logger()
        self._catalog = catalog
        self._curve_span = max(1, int(curve_span))
        self._result: Optional[HeatLossResult] = None
        defaults = GreenhouseConfig()

        # -------- Left: inputs + results --------
        left = QWidget()
        left_l = QVBoxLayout(left)
        left_l.setContentsMargins(6, 6, 6, 6)
        left_l.setSpacing(8)

        # Structure
        struct = QGroupBox("Structure")
        sf = QFormLayout(struct)
        self.cb_shape = QComboBox()
        for s in SHAPES:
            self.cb_shape.addItem(SHAPE_LABELS[s], s)
        self.cb_shape.setCurrentIndex(SHAPES.index(defaults.shape))
        self.cb_shape.currentIndexChanged.connect(self.recalculate)
        sf.addRow("Shape:", self.cb_shape)

        self._dims: Dict[str, QDoubleSpinBox] = {}
        for key, label in DIM_FIELDS:
            sb = QDoubleSpinBox()
            sb.setRange(0.0, 1000.0)  # negative input is clamped by the spin box itself
            sb.setDecimals(1)
            sb.setSingleStep(0.5)
            sb.setValue(getattr(defaults.dimensions, key))
            sb.valueChanged.connect(self.recalculate)
            sf.addRow(label, sb)
            self._dims[key] = sb
        left_l.addWidget(struct)

        # Materials
        mats = QGroupBox("Materials")
        mf = QFormLayout(mats)
        self._coverings: Dict[str, QComboBox] = {}
        for role, label in COVERING_ROLES:
            cb = QComboBox()
            cb.currentIndexChanged.connect(self.recalculate)
            mf.addRow(label, cb)
            self._coverings[role] = cb
        self.cb_frame = QComboBox()
        self.cb_frame.currentIndexChanged.connect(self.recalculate)
        mf.addRow("Frame:", self.cb_frame)
        self.cb_insulation = QComboBox()
        self.cb_insulation.currentIndexChanged.connect(self.recalculate)
        mf.addRow("Wall insulation:", self.cb_insulation)
        left_l.addWidget(mats)

        # Temperature
        temps = QGroupBox("Temperature")
        tf = QFormLayout(temps)
        self.sb_desired = QDoubleSpinBox()
        self.sb_desired.setRange(-60.0, 130.0)
        self.sb_desired.setDecimals(0)
        self.sb_desired.setValue(defaults.temperature.desired)
        self.sb_desired.valueChanged.connect(self.recalculate)
        tf.addRow("Desired (°F):", self.sb_desired)
        self.sb_minimum = QDoubleSpinBox()
        self.sb_minimum.setRange(-60.0, 130.0)
        self.sb_minimum.setDecimals(0)
        self.sb_minimum.setValue(defaults.temperature.minimum)
        self.sb_minimum.valueChanged.connect(self.recalculate)
        tf.addRow("Minimum outside (°F):", self.sb_minimum)
        left_l.addWidget(temps)

        # Results
        results = QGroupBox("Estimated heat loss")
        rf = QFormLayout(results)
        self.lbl_walls = QLabel("–")
        self.lbl_roof = QLabel("–")
        self.lbl_doors = QLabel("–")
        self.lbl_total = QLabel("–")
        bold = QFont()
        bold.setBold(True)
        bold.setPointSize(bold.pointSize() + 2)
        self.lbl_total.setFont(bold)
        self.lbl_areas = QLabel("–")
        self.lbl_areas.setWordWrap(True)
        self.lbl_bales = QLabel("–")
        self.lbl_error = QLabel("")
        self.lbl_error.setWordWrap(True)
        self.lbl_error.setStyleSheet("color: #C80000;")
        rf.addRow("Wall heat loss:", self.lbl_walls)
        rf.addRow("Roof heat loss:", self.lbl_roof)
        rf.addRow("Door heat loss:", self.lbl_doors)
        rf.addRow("Total required:", self.lbl_total)
        rf.addRow("Areas:", self.lbl_areas)
        rf.addRow("Insulation units:", self.lbl_bales)
        rf.addRow("", self.lbl_error)
        left_l.addWidget(results)
        left_l.addStretch(1)

        # -------- Right: breakdown + design curve --------
        right = QWidget()
        rv = QVBoxLayout(right)
        rv.setContentsMargins(6, 6, 6, 6)
        self.fig = Figure(figsize=(5, 6), constrained_layout=True)
        self.canvas = FigureCanvas(self.fig)
        self.ax_bars = self.fig.add_subplot(211)
        self.ax_curve = self.fig.add_subplot(212)
        rv.addWidget(self.canvas, 1)

        split = QSplitter(self)
        split.addWidget(left)
        split.addWidget(right)
        split.setStretchFactor(1, 1)
        lay = QHBoxLayout(self)
        lay.addWidget(split)

        self.set_catalog(catalog)

    # --------------------------------------------------------------------- API
    @property
    def catalog(self) -> MaterialCatalog:
        return self._catalog

    @property
    def result(self) -> Optional[HeatLossResult]:
        return self._result

    def set_curve_span(self, span: int) -> None:
        self._curve_span = max(1, int(span))
        self.recalculate()

    def set_catalog(self, catalog: MaterialCatalog) -> None:
        """Repopulate the combo boxes, keeping the current selections where the keys still exist."""
        self._catalog = catalog
        defaults = GreenhouseConfig()

        def fill(cb: QComboBox, entries: dict, fallback: str) -> None:
            current = cb.currentData() or fallback
            cb.blockSignals(True)
            cb.clear()
            for key, entry in entries.items():
                cb.addItem(entry.name, key)
            idx = cb.findData(current)
            cb.setCurrentIndex(idx if idx >= 0 else 0)
            cb.blockSignals(False)

        for role, cb in self._coverings.items():
            fill(cb, catalog.coverings, getattr(defaults.materials, role))
        fill(self.cb_frame, catalog.frames, defaults.materials.frame)
        fill(self.cb_insulation, catalog.insulations, defaults.insulation)
        self.recalculate()

    def config(self) -> GreenhouseConfig:
        dims = Dimensions(**{k: sb.value() for k, sb in self._dims.items()})
        materials = MaterialSelection(
            walls=self._coverings["walls"].currentData() or "",
            roof=self._coverings["roof"].currentData() or "",
            doors=self._coverings["doors"].currentData() or "",
            frame=self.cb_frame.currentData() or "",
        )
        return GreenhouseConfig(
            dimensions=dims,
            shape=self.cb_shape.currentData(),
            materials=materials,
            insulation=self.cb_insulation.currentData() or "",
            temperature=Temperature(desired=self.sb_desired.value(), minimum=self.sb_minimum.value()),
        )

    # --------------------------------------------------------------------- calc
    def recalculate(self, *_args) -> None:
        cfg = self.config()
        try:
            res = estimate_heat_loss(cfg, self._catalog)
        except HeatLossError as e:
            self._log.warning("Calculation rejected: %s", e)
            self._result = None
            self._show_error(str(e))
            self.resultChanged.emit(None)
            return

        self._result = res
        self._update_results_panel(res)
        self._redraw(cfg, res)
        self.resultChanged.emit(res)

    def _show_error(self, msg: str) -> None:
        for lbl in (self.lbl_walls, self.lbl_roof, self.lbl_doors, self.lbl_total, self.lbl_areas, self.lbl_bales):
            lbl.setText("–")
        self.lbl_error.setText(msg)
        self.ax_bars.cla()
        self.ax_curve.cla()
        self.canvas.draw_idle()

    def _update_results_panel(self, r: HeatLossResult) -> None:
        self.lbl_error.setText("")
        self.lbl_walls.setText(format_btu(r.wall_btu))
        self.lbl_roof.setText(format_btu(r.roof_btu))
        self.lbl_doors.setText(format_btu(r.door_btu))
        self.lbl_total.setText(format_btu(r.total_btu))
        a = r.areas
        self.lbl_areas.setText(
            f"walls {format_area(a.wall_area)} · roof {format_area(a.roof_area)} · doors {format_area(a.door_area)}"
        )
        self.lbl_bales.setText("–" if r.insulation_units is None else f"{r.insulation_units:,}")

    def _redraw(self, cfg: GreenhouseConfig, r: HeatLossResult) -> None:
        ax = self.ax_bars
        ax.cla()
        names = list(r.components) + ["Total"]
        values = list(r.components.values()) + [r.total_btu]
        ax.barh(names, values, color=["#0D4FA2"] * 3 + ["#009640"])
        ax.invert_yaxis()
        ax.set_xlabel("BTU/hr")
        ax.grid(True, axis="x", alpha=0.25)
        ax.set_title(f"ΔT = {r.temp_diff:.0f} °F · frame factor {r.frame_factor:g}")

        ax = self.ax_curve
        ax.cla()
        t_min = cfg.temperature.minimum
        half = self._curve_span / 2.0
        minimums = np.linspace(t_min - half, t_min + half, CURVE_POINTS)
        curve = design_curve(cfg, minimums, self._catalog)
        ax.plot([t for t, _ in curve], [b for _, b in curve], lw=2)
        ax.scatter([t_min], [r.total_btu], s=35, zorder=5)
        ax.annotate(f"{r.total_btu:,}", (t_min, r.total_btu), xytext=(6, 6),
                    textcoords="offset points", fontsize=9)
        ax.set_xlabel("Minimum outside temperature (°F)")
        ax.set_ylabel("Total BTU/hr")
        ax.grid(True, alpha=0.25)

        self.canvas.draw_idle()

    def design_curve_points(self):
        """Curve used by the report, same range as the on-screen chart."""
        cfg = self.config()
        half = self._curve_span / 2.0
        t_min = cfg.temperature.minimum
        return design_curve(cfg, np.linspace(t_min - half, t_min + half, CURVE_POINTS), self._catalog)
