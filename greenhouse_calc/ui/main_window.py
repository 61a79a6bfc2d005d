# greenhouse_calc/ui/main_window.py
from pathlib import Path

from PyQt5.QtWidgets import (
    QMainWindow, QTabWidget, QAction, QFileDialog, QMessageBox, QInputDialog,
)

from ..version import APP_NAME, CATALOG_FILENAME
from ..core.catalog import default_catalog, load_catalog, load_catalog_csv, write_catalog_csv
from ..core.errors import HeatLossError
from ..core.heat_loss import estimate_heat_loss
from ..reports.btu_report import ReportMeta, export_btu_report
from ..services.logger import get_logger
from ..services.settings import SettingsManager
from ..utils.formatting import format_btu

from .calculator_widget import CalculatorWidget
from .report_info_widget import ReportInfoWidget


class MainWindow(QMainWindow):
    def __init__(self, settings: SettingsManager, parent=None):
        super().__init__(parent)
        self._log = get_logger()
        self.settings = settings

        self.setWindowTitle(APP_NAME)
        self.resize(1280, 800)

        try:
            catalog, self.catalog_path = load_catalog(settings.catalog_csv)
        except HeatLossError as e:
            self._log.error("Material catalog rejected, using built-in materials: %s", e)
            QMessageBox.warning(self, "Material Catalog", f"Could not load the material catalog:\n\n{e}")
            catalog, self.catalog_path = default_catalog(), None

        # ---- Tabs -----------------------------------------------------------
        self.tabs = QTabWidget()
        self.setCentralWidget(self.tabs)

        self.calculator = CalculatorWidget(catalog, curve_span=settings.chart_min_temp_span, parent=self)
        self.calculator.resultChanged.connect(self._on_result)
        self.tabs.addTab(self.calculator, "Calculator")

        self.report_info = ReportInfoWidget(ReportMeta(designer=settings.get("report_designer", "") or ""))
        self.tabs.addTab(self.report_info, "Report Info")

        self._build_menu()
        self._show_catalog_source()
        self._on_result(self.calculator.result)

    # ======================= Menu / Actions =================================
    def _build_menu(self):
        m = self.menuBar()
        filem = m.addMenu("File")

        act_report = QAction("Export Report…", self)
        act_report.triggered.connect(self._do_export_report)
        filem.addAction(act_report)

        filem.addSeparator()
        act_quit = QAction("Quit", self)
        act_quit.triggered.connect(self.close)
        filem.addAction(act_quit)

        matm = m.addMenu("Materials")

        act_load = QAction("Load Catalog…", self)
        act_load.triggered.connect(self._do_load_catalog)
        matm.addAction(act_load)

        act_template = QAction("Export Catalog Template…", self)
        act_template.triggered.connect(self._do_export_catalog)
        matm.addAction(act_template)

        act_reset = QAction("Use Built-in Materials", self)
        act_reset.triggered.connect(self._do_reset_catalog)
        matm.addAction(act_reset)

        viewm = m.addMenu("View")
        act_span = QAction("Design Curve Range…", self)
        act_span.triggered.connect(self._do_curve_span)
        viewm.addAction(act_span)

    def _on_result(self, result):
        if result is None:
            self.statusBar().showMessage("Check inputs")
        else:
            self.statusBar().showMessage(f"Total required: {format_btu(result.total_btu)}")

    def _show_catalog_source(self):
        src = self.catalog_path.name if self.catalog_path else "built-in"
        self.setWindowTitle(f"{APP_NAME} — materials: {src}")

    # --- catalog ---
    def _do_load_catalog(self):
        path, _ = QFileDialog.getOpenFileName(self, "Load Material Catalog", "", "CSV (*.csv)")
        if not path:
            return
        try:
            catalog = default_catalog().merged(load_catalog_csv(Path(path)))
        except HeatLossError as e:
            self._log.warning("Catalog %s rejected: %s", path, e)
            QMessageBox.critical(self, "Material Catalog", f"Could not load {Path(path).name}:\n\n{e}")
            return
        self.catalog_path = Path(path)
        self.settings.catalog_csv = str(path)
        self.calculator.set_catalog(catalog)
        self._show_catalog_source()
        self._log.info("Material catalog loaded from %s", path)

    def _do_export_catalog(self):
        path, _ = QFileDialog.getSaveFileName(self, "Export Material Catalog", CATALOG_FILENAME, "CSV (*.csv)")
        if not path:
            return
        try:
            write_catalog_csv(self.calculator.catalog, Path(path))
        except OSError as e:
            self._log.exception("Catalog export failed")
            QMessageBox.critical(self, "Catalog Export Failed", f"Could not write {Path(path).name}:\n\n{e}")
            return
        self.statusBar().showMessage(f"Catalog written: {Path(path).name}")

    def _do_reset_catalog(self):
        self.catalog_path = None
        self.settings.catalog_csv = None
        self.calculator.set_catalog(default_catalog())
        self._show_catalog_source()

    def _do_curve_span(self):
        span, ok = QInputDialog.getInt(
            self, "Design Curve Range", "Temperature span around the minimum (°F):",
            self.settings.chart_min_temp_span, 2, 200, 2,
        )
        if not ok:
            return
        self.settings.set("chart_min_temp_span", span)
        self.calculator.set_curve_span(span)

    # ======================= Report =================================
    def _do_export_report(self):
        missing = self.report_info.missing_fields()
        if missing:
            msg = "Please complete the report details before exporting:\n\n• " + "\n• ".join(missing)
            QMessageBox.information(self, "Missing Report Info", msg)
            self.tabs.setCurrentWidget(self.report_info)
            return

        cfg = self.calculator.config()
        catalog = self.calculator.catalog
        try:
            result = estimate_heat_loss(cfg, catalog)
        except HeatLossError as e:
            QMessageBox.warning(self, "Report Export", f"Fix the inputs first:\n\n{e}")
            return

        start_dir = self.settings.get("last_report_dir", "") or ""
        out_path_str, _ = QFileDialog.getSaveFileName(self, "Export PDF Report", start_dir, "PDF (*.pdf)")
        if not out_path_str:
            return
        out_path = Path(out_path_str)

        meta = self.report_info.meta()
        try:
            export_btu_report(out_path, meta, cfg, result, catalog,
                              curve=self.calculator.design_curve_points())
        except OSError as e:
            self._log.exception("Report export failed")
            QMessageBox.critical(self, "Report Export Failed", f"Could not export report:\n\n{e}")
            return

        self.settings.set("last_report_dir", str(out_path.parent))
        self.settings.set("report_designer", meta.designer)
        self.statusBar().showMessage(f"Report written: {out_path.name}")
        QMessageBox.information(self, "Report Exported", f"Saved:\n{out_path}")
