# reports/btu_report.py: header/footer + inputs + breakdown table + charts
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import (
    BaseDocTemplate, Frame, Image as RLImage, KeepTogether, PageTemplate,
    Paragraph, Spacer, Table, TableStyle,
)

from ..core.catalog import MaterialCatalog
from ..core.heat_loss import SAFETY_MARGIN
from ..core.models import GreenhouseConfig, HeatLossResult, SHAPE_LABELS
from ..services.logger import get_logger
from ..utils.formatting import format_area, format_btu

FONT = "Times-Roman"
FONT_B = "Times-Bold"
BRAND_BLUE = "#0D4FA2"
BRAND_GREEN = "#009640"

_log = get_logger()

_styles = getSampleStyleSheet()

BodySmall = ParagraphStyle(
    name="BodySmall",
    parent=_styles["BodyText"],
    fontName=FONT,
    fontSize=8.5,
    leading=11,
    spaceBefore=2,
    spaceAfter=2,
    textColor=colors.grey,
)


# ---------------- Times font helper for matplotlib ----------------
def _times_rc():
    return {
        "font.family": "serif",
        "font.serif": ["Times New Roman", "Times", "Nimbus Roman", "Liberation Serif", "DejaVu Serif"],
        "mathtext.fontset": "dejavuserif",
        "pdf.fonttype": 42,
        "ps.fonttype": 42,
        "axes.titlesize": 14,
        "axes.labelsize": 12,
        "xtick.labelsize": 10,
        "ytick.labelsize": 10,
        "legend.fontsize": 10,
    }


@dataclass
class ReportMeta:
    project_title: str = ""
    location: str = ""
    designer: str = ""
    date: str = ""
    notes: str = ""


# ---------------- Charts ----------------
def render_breakdown_png(result: HeatLossResult, out_path: Path) -> Path:
    """Horizontal bars: walls / roof / doors plus the total after frame factor and margin."""
    labels = ["Walls", "Roof", "Doors", "Total required"]
    values = [result.wall_btu, result.roof_btu, result.door_btu, result.total_btu]
    bar_colors = [BRAND_BLUE, BRAND_BLUE, BRAND_BLUE, BRAND_GREEN]

    with plt.rc_context(_times_rc()):
        fig = plt.figure(figsize=(6.0, 2.8), dpi=144)
        ax = plt.gca()
        bars = ax.barh(labels, values, color=bar_colors)
        ax.invert_yaxis()
        ax.set_xlabel("Heat loss (BTU/hr)")
        ax.grid(True, axis="x", linestyle=":", linewidth=0.6)
        for bar, v in zip(bars, values):
            ax.annotate(f"{v:,}", (bar.get_width(), bar.get_y() + bar.get_height() / 2),
                        xytext=(4, 0), textcoords="offset points", va="center", fontsize=9)
        ax.set_xlim(0, max(values + [1]) * 1.18)

        out_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(str(out_path), format="png", bbox_inches="tight")
        plt.close(fig)
    return out_path


def render_design_curve_png(
    curve: Sequence[Tuple[float, int]],
    out_path: Path,
    *,
    current_minimum: Optional[float] = None,
    current_total: Optional[int] = None,
) -> Path:
    """Total BTU/hr against outside minimum temperature."""
    xs = [t for t, _ in curve]
    ys = [b for _, b in curve]

    with plt.rc_context(_times_rc()):
        fig = plt.figure(figsize=(6.0, 3.2), dpi=144)
        ax = plt.gca()
        ax.plot(xs, ys, linewidth=2.2, color=BRAND_BLUE)
        if current_minimum is not None and current_total is not None:
            ax.scatter([current_minimum], [current_total], zorder=5, color=BRAND_GREEN)
            ax.annotate("design point", (current_minimum, current_total), xytext=(6, 6),
                        textcoords="offset points", fontsize=9)
        ax.set_xlabel("Outside minimum temperature (°F)")
        ax.set_ylabel("Total required (BTU/hr)")
        ax.grid(True, linestyle=":", linewidth=0.6)
        ax.set_title("Heating requirement vs. minimum temperature")

        out_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(str(out_path), format="png", bbox_inches="tight")
        plt.close(fig)
    return out_path


# ---------------- Tables ----------------
def _kv_table(rows: List[List[str]]) -> Table:
    t = Table(rows, colWidths=[55*mm, 110*mm])
    t.setStyle(TableStyle([
        ("FONT", (0,0), (-1,-1), FONT, 10),
        ("TEXTCOLOR", (0,0), (0,-1), colors.grey),
        ("LINEBELOW", (0,0), (-1,-1), 0.25, colors.whitesmoke),
        ("VALIGN", (0,0), (-1,-1), "MIDDLE"),
        ("LEFTPADDING", (0,0), (-1,-1), 2),
        ("RIGHTPADDING", (0,0), (-1,-1), 2),
        ("BOTTOMPADDING", (0,0), (-1,-1), 4),
    ]))
    return t


def _inputs_rows(config: GreenhouseConfig, catalog: MaterialCatalog) -> List[List[str]]:
    d = config.dimensions.clamped()
    m = config.materials
    ins = catalog.insulation(config.insulation)
    return [
        ["Shape", SHAPE_LABELS.get(config.shape, config.shape)],
        ["Length × width × height (ft)", f"{d.length:g} × {d.width:g} × {d.height:g}"],
        ["Door (ft)", f"{d.door_width:g} × {d.door_height:g}"],
        ["Walls", f"{catalog.covering(m.walls).name} (R-{catalog.covering(m.walls).r_value:g})"],
        ["Roof", f"{catalog.covering(m.roof).name} (R-{catalog.covering(m.roof).r_value:g})"],
        ["Doors", f"{catalog.covering(m.doors).name} (R-{catalog.covering(m.doors).r_value:g})"],
        ["Frame", f"{catalog.frame(m.frame).name} (factor {catalog.frame(m.frame).thermal_bridge:g})"],
        ["Wall insulation", f"{ins.name} (R-{ins.r_value:g})"],
        ["Desired / minimum (°F)", f"{config.temperature.desired:g} / {config.temperature.minimum:g}"],
    ]


def breakdown_table(result: HeatLossResult) -> Table:
    a = result.areas
    rows = [
        ["Surface", "Area", "R-value", "Heat loss"],
        ["Walls", format_area(a.wall_area), f"{result.wall_r_value:.2f}", format_btu(result.wall_btu)],
        ["Roof", format_area(a.roof_area), f"{result.roof_r_value:.2f}", format_btu(result.roof_btu)],
        ["Doors", format_area(a.door_area), f"{result.door_r_value:.2f}", format_btu(result.door_btu)],
        ["Total required", "", "", format_btu(result.total_btu)],
    ]
    t = Table(rows, colWidths=[45*mm, 40*mm, 25*mm, 55*mm], repeatRows=1)
    t.setStyle(TableStyle([
        ("FONT", (0,0), (-1,0), FONT_B, 10),
        ("FONT", (0,1), (-1,-2), FONT, 10),
        ("FONT", (0,-1), (-1,-1), FONT_B, 10),
        ("BACKGROUND", (0,0), (-1,0), colors.whitesmoke),
        ("LINEBELOW", (0,0), (-1,0), 0.5, colors.grey),
        ("LINEABOVE", (0,-1), (-1,-1), 0.75, colors.grey),
        ("ALIGN", (1,1), (-1,-1), "RIGHT"),
        ("LEFTPADDING", (0,0), (-1,-1), 3),
        ("RIGHTPADDING", (0,0), (-1,-1), 3),
        ("BOTTOMPADDING", (0,0), (-1,-1), 3),
    ]))
    return t


def method_note(result: HeatLossResult) -> KeepTogether:
    txt = (
        "<b>Method:</b> heat loss per surface = area × temperature difference ÷ R. "
        f"The component sum is divided by the frame thermal bridge factor ({result.frame_factor:g}) "
        f"and multiplied by a {SAFETY_MARGIN:g} safety margin. "
        "Each figure is rounded on its own, so the displayed components need not add up to the total."
    )
    t = Table([[Paragraph(txt, BodySmall)]], colWidths=[165*mm])
    t.setStyle(TableStyle([
        ("BACKGROUND", (0,0), (-1,-1), colors.whitesmoke),
        ("BOX", (0,0), (-1,-1), 0.5, colors.grey),
        ("LEFTPADDING", (0,0), (-1,-1), 6),
        ("RIGHTPADDING", (0,0), (-1,-1), 6),
        ("TOPPADDING", (0,0), (-1,-1), 6),
        ("BOTTOMPADDING", (0,0), (-1,-1), 6),
    ]))
    return KeepTogether([t])


def _draw_header_footer(canvas, doc, meta: ReportMeta):
    w, h = A4
    canvas.saveState()

    # Thin blue bar at the top
    blue_y = h - 4*mm
    canvas.setFillColor(colors.HexColor(BRAND_BLUE))
    canvas.rect(0, blue_y, w, 8*mm, stroke=0, fill=1)

    canvas.setFillColor(colors.HexColor("#666666"))
    canvas.setFont(FONT, 8)
    canvas.drawString(12*mm, blue_y - 10*mm, "Greenhouse Heat Loss Report")

    canvas.setFillColor(colors.black)
    canvas.setFont(FONT_B, 10)
    canvas.drawRightString(w - 12*mm, blue_y - 6*mm, (meta.project_title or "")[:90])
    canvas.setFont(FONT, 9)
    if meta.date:
        canvas.drawRightString(w - 12*mm, blue_y - 12*mm, meta.date)

    # Green line beneath the header
    canvas.setFillColor(colors.HexColor(BRAND_GREEN))
    canvas.rect(0, blue_y - 18*mm, w, 2*mm, stroke=0, fill=1)

    # Footer rule + page number
    canvas.setStrokeColor(colors.HexColor("#B5B5B5"))
    canvas.setLineWidth(0.5)
    canvas.line(12*mm, 20*mm, w - 12*mm, 20*mm)
    canvas.setFillColor(colors.grey)
    canvas.setFont(FONT, 9)
    canvas.drawRightString(w - 12*mm, 10*mm, f"Page {doc.page}")

    canvas.restoreState()


def export_btu_report(
    out_pdf: Path,
    meta: ReportMeta,
    config: GreenhouseConfig,
    result: HeatLossResult,
    catalog: MaterialCatalog,
    *,
    curve: Optional[Sequence[Tuple[float, int]]] = None,
) -> Path:
    out_pdf = Path(out_pdf)
    out_pdf.parent.mkdir(parents=True, exist_ok=True)

    assets = out_pdf.parent / ".assets"
    assets.mkdir(exist_ok=True)

    styles = getSampleStyleSheet()
    H1 = styles["Title"];      H1.fontName = FONT_B
    H2 = styles["Heading2"];   H2.fontName = FONT_B
    Body = styles["BodyText"]; Body.fontName = FONT

    doc = BaseDocTemplate(
        str(out_pdf),
        pagesize=A4,
        leftMargin=12 * mm,
        rightMargin=12 * mm,
        topMargin=30 * mm,
        bottomMargin=24 * mm,
        title=f"Greenhouse Heat Loss — {meta.project_title}",
        author=meta.designer,
    )
    frame = Frame(doc.leftMargin, doc.bottomMargin, doc.width, doc.height, id="normal")
    doc.addPageTemplates([
        PageTemplate(id="with-header-footer", frames=[frame],
                     onPage=lambda c, d: _draw_header_footer(c, d, meta))
    ])

    flow = []
    flow.append(Paragraph("Greenhouse Heat Loss Estimate", H1))
    flow.append(Spacer(1, 6))

    info = [["Project", meta.project_title], ["Location", meta.location],
            ["Prepared by", meta.designer], ["Date", meta.date]]
    flow.append(_kv_table([r for r in info if r[1]] or [["Project", "–"]]))
    flow.append(Spacer(1, 10))

    flow.append(Paragraph("1 Inputs", H2))
    flow.append(_kv_table(_inputs_rows(config, catalog)))
    flow.append(Spacer(1, 10))

    flow.append(Paragraph("2 Heat loss", H2))
    flow.append(breakdown_table(result))
    flow.append(Spacer(1, 6))
    if result.insulation_units is not None:
        flow.append(Paragraph(
            f"Insulation units needed to cover {format_area(result.areas.wall_area)} of wall: "
            f"<b>{result.insulation_units}</b>", Body))
    flow.append(method_note(result))
    flow.append(Spacer(1, 8))

    png = render_breakdown_png(result, assets / "breakdown.png")
    flow.append(RLImage(str(png), width=150*mm, height=70*mm, kind="proportional"))

    if curve:
        flow.append(Paragraph("3 Design curve", H2))
        cpng = render_design_curve_png(
            curve, assets / "design_curve.png",
            current_minimum=config.temperature.minimum,
            current_total=result.total_btu,
        )
        flow.append(RLImage(str(cpng), width=150*mm, height=80*mm, kind="proportional"))

    if meta.notes:
        flow.append(Paragraph("Notes", H2))
        flow.append(Paragraph(meta.notes, Body))

    doc.build(flow)
    _log.info("Report written to %s", out_pdf)
    return out_pdf
