from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

from ..config import FONT_SIZE_MULTIPLIER, MIN_FONT_SIZE, WEEKS_PER_YEAR
from .grid import (
    calculate_gap_positions,
    calculate_grid_dimensions,
    get_col_x,
    get_row_y,
    resolve_gap_size,
    vertical_gap_count,
)
from .types import CalendarSettings, Dimensions, EventInfo, FontSizes, GoalInfo


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_font_sizes(box_size: float) -> FontSizes:
    font_size = max(MIN_FONT_SIZE, _round_half_up(box_size * FONT_SIZE_MULTIPLIER))
    # separate fields so stats/notes text can diverge later
    return FontSizes(font_size=font_size, font_size_stats=font_size, font_size_notes=font_size)


def calculate_year_label_dimensions(
    years: int,
    years_per_group: int,
    box_size: float,
    spacing: float,
    font_size: int,
) -> Tuple[float, float]:
    """(label_area_width, label_padding) for the age numbers right of the grid."""
    if years_per_group <= 0 or years <= 0:
        return 0.0, 0.0
    label_padding = max(spacing * 2, box_size / 2)
    estimated_text_width = len(str(years)) * font_size * 0.6
    return label_padding + estimated_text_width, label_padding


def calculate_stats_panel_dimensions(
    show_stats: bool,
    grid_width: float,
    margin: float,
    font_size: int,
) -> Tuple[float, float]:
    """(stats_panel_width, stats_panel_x)."""
    if not show_stats:
        return 0.0, 0.0
    return 15 * font_size, margin + grid_width + 2 * font_size


def calculate_notes_dimensions(
    show_notes_panel: bool,
    events: Sequence[EventInfo],
    goals: Sequence[GoalInfo],
    box_size: float,
    font_size_notes: int,
) -> Tuple[float, float, float, float]:
    """(notes_area_width, notes_padding, notes_text_width, notes_text_height)."""
    if not show_notes_panel or not (events or goals):
        return 0.0, 0.0, 0.0, 0.0
    notes_padding = float(font_size_notes)
    notes_text_width = 20.0 * font_size_notes
    notes_text_height = box_size * 0.8
    return notes_text_width + 2 * notes_padding, notes_padding, notes_text_width, notes_text_height


def calculate_dimensions(
    settings: CalendarSettings,
    events: Sequence[EventInfo] = (),
    goals: Sequence[GoalInfo] = (),
) -> Dimensions:
    """
    Resolve every coordinate the renderer needs from one settings record.

    Always recomputed from scratch; there is no incremental path.
    """
    years = settings.years
    box_size = settings.box_size
    spacing = settings.spacing
    margin = settings.margin

    grid = calculate_grid_dimensions(years, box_size, spacing, settings.gap_config)
    gap_positions = tuple(calculate_gap_positions(settings.horizontal_parts))
    vert_gap_size = resolve_gap_size(settings.vertical_gap_size, box_size)
    horiz_gap_size = resolve_gap_size(settings.horizontal_gap_size, box_size)

    fonts = calculate_font_sizes(box_size)
    font_size = fonts.font_size

    label_area_width, label_padding = calculate_year_label_dimensions(
        years, settings.years_per_group, box_size, spacing, font_size
    )
    stats_panel_width, stats_panel_x = calculate_stats_panel_dimensions(
        settings.show_stats, grid.grid_width_core, margin, font_size
    )
    notes_area_width, notes_padding, notes_text_width, notes_text_height = calculate_notes_dimensions(
        settings.show_notes_panel, events, goals, box_size, fonts.font_size_notes
    )

    if settings.show_start_end_labels:
        label_space_top = font_size * 3.5
        label_space_bottom = font_size * 3.5
    else:
        label_space_top = font_size * 1.5
        label_space_bottom = 0.0

    total_width = grid.grid_width_core + label_area_width + notes_area_width + 2 * margin
    total_height = grid.grid_height + 2 * margin + label_space_top + label_space_bottom

    # bottom edge of the last row, in canvas coordinates
    last_row = max(years - 1, 0)
    grid_bottom = (
        margin
        + label_space_top
        + get_row_y(last_row, box_size, spacing, vert_gap_size, settings.years_per_group)
        + box_size
    )
    content_height = grid_bottom + font_size * 1.5 if settings.show_start_end_labels else grid_bottom
    if settings.show_stats:
        content_height = max(content_height, grid_bottom + font_size + spacing * 4 + font_size)

    return Dimensions(
        years=years,
        grid_width_core=grid.grid_width_core,
        grid_height=grid.grid_height,
        grid_width=grid.grid_width_core + label_area_width,
        box_size=box_size,
        spacing=spacing,
        years_per_group=settings.years_per_group,
        num_gaps_v=vertical_gap_count(years, settings.years_per_group),
        vertical_gap_size=vert_gap_size,
        num_gaps_h=len(gap_positions),
        horizontal_gap_size=horiz_gap_size,
        gap_positions_h=gap_positions,
        label_area_width=label_area_width,
        label_padding=label_padding,
        notes_area_width=notes_area_width,
        notes_padding=notes_padding,
        notes_text_width=notes_text_width,
        notes_text_height=notes_text_height,
        total_width=total_width,
        total_height=total_height,
        content_height=content_height,
        margin_x=margin,
        margin_y=margin,
        label_space_top=label_space_top,
        label_space_bottom=label_space_bottom,
        font_size=font_size,
        font_size_stats=fonts.font_size_stats,
        font_size_notes=fonts.font_size_notes,
        stats_panel_width=stats_panel_width,
        stats_panel_x=stats_panel_x,
    )


def row_y0(row: int, dims: Dimensions) -> float:
    grid_start_y = dims.margin_y + dims.label_space_top
    return grid_start_y + get_row_y(
        row, dims.box_size, dims.spacing, dims.vertical_gap_size, dims.years_per_group
    )


def col_x0(col: int, dims: Dimensions) -> float:
    return dims.margin_x + get_col_x(
        col, dims.box_size, dims.spacing, dims.horizontal_gap_size, dims.gap_positions_h
    )


def grid_bottom_edge(dims: Dimensions) -> float:
    return row_y0(max(dims.years - 1, 0), dims) + dims.box_size


def week_at_point(x: float, y: float, dims: Dimensions) -> Optional[int]:
    """Week index of the box under (x, y), or None over spacing, gaps and margins."""
    row = next(
        (r for r in range(dims.years) if row_y0(r, dims) <= y < row_y0(r, dims) + dims.box_size),
        None,
    )
    if row is None:
        return None
    col = next(
        (c for c in range(WEEKS_PER_YEAR) if col_x0(c, dims) <= x < col_x0(c, dims) + dims.box_size),
        None,
    )
    if col is None:
        return None
    return row * WEEKS_PER_YEAR + col
