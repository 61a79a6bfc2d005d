from dataclasses import replace

from greenhouse_calc.core.catalog import default_catalog
from greenhouse_calc.core.heat_loss import design_curve, estimate_heat_loss
from greenhouse_calc.core.models import GreenhouseConfig, HOOP
from greenhouse_calc.reports.btu_report import (
    ReportMeta, export_btu_report, render_breakdown_png,
)


def test_breakdown_chart_is_written(tmp_path):
    res = estimate_heat_loss(GreenhouseConfig())
    png = render_breakdown_png(res, tmp_path / "charts" / "breakdown.png")
    assert png.exists()
    assert png.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"


def test_export_report_writes_pdf(tmp_path):
    cfg = replace(GreenhouseConfig(), shape=HOOP, insulation="standardHayBale")
    res = estimate_heat_loss(cfg)
    meta = ReportMeta(project_title="North Hoop House", location="Field 3",
                      designer="J. Grower", date="2026-10-19", notes="Winter design case.")

    out = export_btu_report(tmp_path / "report.pdf", meta, cfg, res, default_catalog(),
                            curve=design_curve(cfg, range(-10, 51, 5)))

    assert out == tmp_path / "report.pdf"
    assert out.read_bytes()[:4] == b"%PDF"
    assert (tmp_path / ".assets" / "design_curve.png").exists()


def test_export_report_without_curve_or_details(tmp_path):
    cfg = GreenhouseConfig()
    out = export_btu_report(tmp_path / "out" / "plain.pdf", ReportMeta(), cfg,
                            estimate_heat_loss(cfg), default_catalog())
    assert out.exists()
    assert not (tmp_path / "out" / ".assets" / "design_curve.png").exists()
