from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Tuple

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, LETTER
from reportlab.pdfgen import canvas

from ..config import DEFAULT_PALETTE, WEEKS_PER_YEAR
from ..core.annotations import wrap_text
from ..core.calculations import format_date
from ..core.layout import col_x0, grid_bottom_edge, row_y0
from ..storage import artifact_path
from .resolve import WEEK_CURRENT, WEEK_LIVED, ResolvedCalendar

FONT_NAME = "Helvetica"
FIT_MARGIN = 36.0  # points around the calendar on A4/Letter pages
NOTES_WRAP_WIDTH = 28


def _hex(value: str, default=colors.black) -> colors.Color:
    if not value:
        return default
    try:
        return colors.HexColor("#" + str(value).lstrip("#"))
    except ValueError:
        return default


def _palette(overrides: Optional[Dict[str, str]] = None) -> Dict[str, colors.Color]:
    merged = {**DEFAULT_PALETTE, **(overrides or {})}
    return {key: _hex(value) for key, value in merged.items()}


def native_size(cal: ResolvedCalendar) -> Tuple[float, float]:
    """Canvas size of the calendar in layout units (1 unit = 1 pt)."""
    dims = cal.dims
    bottom = dims.content_height
    if cal.settings.show_start_end_labels:
        # end label is centred half a label space below the grid; keep its descenders on the page
        end_label_bottom = grid_bottom_edge(dims) + dims.label_space_bottom * 0.5 + dims.font_size * 0.9
        bottom = max(bottom, end_label_bottom)
    return dims.total_width, bottom + dims.margin_y


class _Painter:
    """Draws in layout coordinates (origin top-left, y down) on a ReportLab canvas."""

    def __init__(self, canv: canvas.Canvas, height: float, palette: Dict[str, colors.Color]) -> None:
        self.canv = canv
        self.height = height
        self.palette = palette

    def y(self, value: float) -> float:
        return self.height - value

    def box(self, x: float, y: float, size: float, fill: colors.Color) -> None:
        self.canv.setFillColor(fill)
        self.canv.rect(x, self.y(y + size), size, size, stroke=0, fill=1)

    def outline(self, x: float, y: float, size: float, stroke: colors.Color, width: float) -> None:
        self.canv.setStrokeColor(stroke)
        self.canv.setLineWidth(width)
        self.canv.rect(x, self.y(y + size), size, size, stroke=1, fill=0)

    def text(self, x: float, y_middle: float, value: str, size: float, align: str = "start") -> None:
        self.canv.setFillColor(self.palette["text"])
        self.canv.setFont(FONT_NAME, size)
        # ReportLab draws on the baseline; shift down so the text is centred on y_middle
        baseline = self.y(y_middle + size * 0.35)
        if align == "end":
            self.canv.drawRightString(x, baseline, value)
        else:
            self.canv.drawString(x, baseline, value)


def _draw_background(p: _Painter, width: float) -> None:
    p.canv.setFillColor(p.palette["background"])
    p.canv.rect(0, 0, width, p.height, stroke=0, fill=1)


def _draw_expectancy_line(p: _Painter, cal: ResolvedCalendar) -> None:
    expected = cal.settings.expected_years
    if expected is None or not 0 < expected < cal.settings.years:
        return
    dims = cal.dims
    line_y = row_y0(expected, dims) - dims.spacing / 2
    p.canv.setStrokeColor(p.palette["expectation_line"])
    p.canv.setLineWidth(1)
    p.canv.line(dims.margin_x, p.y(line_y), dims.margin_x + dims.grid_width_core, p.y(line_y))


def _draw_weeks(p: _Painter, cal: ResolvedCalendar) -> None:
    dims = cal.dims
    fills = {
        WEEK_CURRENT: p.palette["last_week"],
        WEEK_LIVED: p.palette["filled"],
    }
    for row in range(cal.settings.years):
        y0 = row_y0(row, dims)
        for col in range(WEEKS_PER_YEAR):
            index = row * WEEKS_PER_YEAR + col
            x0 = col_x0(col, dims)
            p.box(x0, y0, dims.box_size, fills.get(cal.classify_week(index), p.palette["empty"]))

            if index in cal.goal_weeks:
                p.outline(x0, y0, dims.box_size, p.palette["goal"], 2)
            if index in cal.event_weeks and dims.box_size > 2:
                p.outline(x0 + 1, y0 + 1, dims.box_size - 2, p.palette["event"], 1)


def _draw_year_labels(p: _Painter, cal: ResolvedCalendar) -> None:
    settings = cal.settings
    dims = cal.dims
    if settings.years_per_group <= 0:
        return
    x_base = dims.margin_x + dims.grid_width_core + dims.label_padding
    for row in range(0, settings.years, settings.years_per_group):
        y_center = row_y0(row, dims) + dims.box_size / 2
        p.text(x_base, y_center, str(row), dims.font_size)


def _draw_start_end_labels(p: _Painter, cal: ResolvedCalendar) -> None:
    if not cal.settings.show_start_end_labels:
        return
    dims = cal.dims
    x_right = col_x0(WEEKS_PER_YEAR - 1, dims) + dims.box_size
    p.text(x_right, dims.margin_y + dims.label_space_top * 0.5, cal.settings.start_label, dims.font_size, "end")
    y_end = grid_bottom_edge(dims) + dims.label_space_bottom * 0.5
    p.text(x_right, y_end, cal.settings.end_label, dims.font_size, "end")


def _draw_stats(p: _Painter, cal: ResolvedCalendar) -> None:
    if not cal.settings.show_stats:
        return
    dims = cal.dims
    y_stats = grid_bottom_edge(dims) + max(dims.label_space_bottom * 0.5, dims.font_size)
    p.text(dims.margin_x, y_stats, f"Weeks remaining: {cal.weeks_remaining:,}", dims.font_size_stats)


def _notes_lines(cal: ResolvedCalendar) -> List[str]:
    lines: List[str] = []
    for event in sorted(cal.events, key=lambda e: e.week_index):
        lines.extend(wrap_text(f"{format_date(event.date)} {event.label}", NOTES_WRAP_WIDTH))
    for goal in sorted(cal.goals, key=lambda g: min(g.week_indices)):
        label = f"{format_date(goal.start_date)}..{format_date(goal.end_date)} {goal.label}"
        lines.extend(wrap_text(label, NOTES_WRAP_WIDTH))
    # wrapped lines carry monospace padding; a two-space indent reads the same in Helvetica
    return [line if not line.startswith(" ") else "  " + line.lstrip() for line in lines]


def _draw_notes_panel(p: _Painter, cal: ResolvedCalendar) -> None:
    dims = cal.dims
    if dims.notes_area_width <= 0:
        return
    x = dims.margin_x + dims.grid_width + dims.notes_padding
    y = dims.margin_y + dims.label_space_top + dims.font_size_notes / 2
    line_h = dims.font_size_notes * 1.3
    for line in _notes_lines(cal):
        if y > dims.content_height:
            break
        p.text(x, y, line, dims.font_size_notes)
        y += line_h


def draw_calendar(
    canv: canvas.Canvas,
    cal: ResolvedCalendar,
    palette_overrides: Optional[Dict[str, str]] = None,
) -> None:
    width, height = native_size(cal)
    p = _Painter(canv, height, _palette(palette_overrides))
    _draw_background(p, width)
    _draw_expectancy_line(p, cal)
    _draw_weeks(p, cal)
    _draw_year_labels(p, cal)
    _draw_start_end_labels(p, cal)
    _draw_stats(p, cal)
    _draw_notes_panel(p, cal)


def render_pdf(
    cal: ResolvedCalendar,
    output_path: Path,
    page_size: Tuple[float, float] | None = None,
    palette_overrides: Optional[Dict[str, str]] = None,
) -> None:
    """
    Write the calendar to ``output_path``.

    Without ``page_size`` the page is exactly the layout canvas. With a page
    size the calendar is scaled uniformly and centred inside ``FIT_MARGIN``.
    """
    width, height = native_size(cal)
    canv = canvas.Canvas(str(output_path), pagesize=page_size or (width, height))
    canv.setTitle(f"Life calendar from {format_date(cal.birthdate)}")

    if page_size is not None:
        pw, ph = page_size
        scale = min((pw - 2 * FIT_MARGIN) / width, (ph - 2 * FIT_MARGIN) / height)
        canv.translate((pw - width * scale) / 2, (ph - height * scale) / 2)
        canv.scale(scale, scale)

    draw_calendar(canv, cal, palette_overrides)
    canv.showPage()
    canv.save()


def render_pdfs(
    cal: ResolvedCalendar,
    slug: str,
    base_dir: Path | None = None,
    include_slug: bool = True,
) -> tuple[Path, Path, Path]:
    native_path = artifact_path(slug, "pdf_native", base_dir=base_dir, include_slug=include_slug)
    a4_path = artifact_path(slug, "pdf_a4", base_dir=base_dir, include_slug=include_slug)
    us_path = artifact_path(slug, "pdf_usletter", base_dir=base_dir, include_slug=include_slug)
    render_pdf(cal, native_path)
    render_pdf(cal, a4_path, A4)
    render_pdf(cal, us_path, LETTER)
    return native_path, a4_path, us_path
