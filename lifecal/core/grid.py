from __future__ import annotations

from typing import List, Sequence

from ..config import WEEKS_PER_YEAR
from .types import GapConfig, GridDimensions


def resolve_gap_size(configured: float, box_size: float) -> float:
    # negative means "auto": as wide as one box
    return configured if configured >= 0 else box_size


def vertical_gap_count(years: int, years_per_group: int) -> int:
    return years // years_per_group if years_per_group > 0 else 0


def horizontal_gap_count(horizontal_parts: int) -> int:
    return horizontal_parts - 1 if horizontal_parts > 1 else 0


def calculate_grid_dimensions(
    years: int,
    box_size: float,
    spacing: float,
    gaps: GapConfig,
) -> GridDimensions:
    num_gaps_v = vertical_gap_count(years, gaps.years_per_group)
    vert_gap_size = resolve_gap_size(gaps.vertical_gap_size, box_size)

    num_gaps_h = horizontal_gap_count(gaps.horizontal_parts)
    horiz_gap_size = resolve_gap_size(gaps.horizontal_gap_size, box_size)

    grid_width_core = (
        WEEKS_PER_YEAR * box_size + (WEEKS_PER_YEAR - 1) * spacing + num_gaps_h * horiz_gap_size
    )
    grid_height = years * box_size + (years - 1) * spacing + num_gaps_v * vert_gap_size

    return GridDimensions(
        grid_width_core=grid_width_core,
        grid_height=grid_height,
        grid_width=grid_width_core,
    )


def calculate_gap_positions(horizontal_parts: int) -> List[int]:
    """Columns before which a horizontal gap is inserted."""
    if horizontal_parts <= 1:
        return []
    weeks_per_part = WEEKS_PER_YEAR // horizontal_parts
    return [i * weeks_per_part for i in range(1, horizontal_parts)]


def get_row_y(
    row: int,
    box_size: float,
    spacing: float,
    vert_gap_size: float,
    years_per_group: int,
) -> float:
    gaps_before = row // years_per_group if years_per_group > 0 else 0
    return row * (box_size + spacing) + gaps_before * vert_gap_size


def get_col_x(
    col: int,
    box_size: float,
    spacing: float,
    horiz_gap_size: float,
    gap_positions: Sequence[int],
) -> float:
    gaps_before = sum(1 for gap_pos in gap_positions if gap_pos <= col)
    return col * (box_size + spacing) + gaps_before * horiz_gap_size
