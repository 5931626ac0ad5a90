from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import FrozenSet, List, Optional, Tuple

from ..config import WEEKS_PER_YEAR


@dataclass(frozen=True)
class Event:
    id: str
    date: str        # YYYY-MM-DD
    title: str       # shown in week details
    notes: Optional[str] = None


@dataclass(frozen=True)
class Goal:
    id: str
    start_date: str
    end_date: str
    title: str
    notes: Optional[str] = None


@dataclass(frozen=True)
class EventInfo:
    date: date
    label: str
    week_index: int


@dataclass(frozen=True)
class GoalInfo:
    start_date: date
    end_date: date
    label: str
    week_indices: FrozenSet[int]


@dataclass
class WeekStats:
    notes_created: int = 0
    words_written: int = 0


@dataclass(frozen=True)
class YearProgress:
    weeks_this_life_year: int
    weeks_left_this_life_year: int
    current_year_index: int


@dataclass(frozen=True)
class GapConfig:
    years_per_group: int
    vertical_gap_size: float       # -1 = box size
    horizontal_parts: int
    horizontal_gap_size: float     # -1 = box size


@dataclass(frozen=True)
class GridDimensions:
    grid_width_core: float
    grid_height: float
    grid_width: float


@dataclass(frozen=True)
class FontSizes:
    font_size: int
    font_size_stats: int
    font_size_notes: int


@dataclass(frozen=True)
class CalendarSettings:
    birthdate: str
    years: int
    box_size: float
    spacing: float
    margin: float
    years_per_group: int
    vertical_gap_size: float
    horizontal_parts: int
    horizontal_gap_size: float
    show_start_end_labels: bool
    show_stats: bool
    show_weekly_stats: bool
    show_notes_panel: bool
    start_label: str
    end_label: str
    expected_years: Optional[int]
    events: Tuple[Event, ...] = ()
    goals: Tuple[Goal, ...] = ()

    @property
    def total_weeks(self) -> int:
        return self.years * WEEKS_PER_YEAR

    @property
    def gap_config(self) -> GapConfig:
        return GapConfig(
            years_per_group=self.years_per_group,
            vertical_gap_size=self.vertical_gap_size,
            horizontal_parts=self.horizontal_parts,
            horizontal_gap_size=self.horizontal_gap_size,
        )


@dataclass(frozen=True)
class Dimensions:
    # grid
    years: int
    grid_width_core: float
    grid_height: float
    grid_width: float
    box_size: float
    spacing: float

    # gaps (sizes already resolved from -1)
    years_per_group: int
    num_gaps_v: int
    vertical_gap_size: float
    num_gaps_h: int
    horizontal_gap_size: float
    gap_positions_h: Tuple[int, ...]

    # year labels beside the grid
    label_area_width: float
    label_padding: float

    # events/goals panel
    notes_area_width: float
    notes_padding: float
    notes_text_width: float
    notes_text_height: float

    # canvas
    total_width: float
    total_height: float
    content_height: float
    margin_x: float
    margin_y: float
    label_space_top: float
    label_space_bottom: float

    font_size: int
    font_size_stats: int
    font_size_notes: int

    stats_panel_width: float
    stats_panel_x: float


@dataclass(frozen=True)
class WeekDetail:
    week_index: int
    age: int
    week_in_year: int            # 1-based
    percent_of_life: float
    stats: Optional[WeekStats] = None
    events: List[str] = field(default_factory=list)
    goals: List[Tuple[str, int, int]] = field(default_factory=list)  # (label, position, length)
