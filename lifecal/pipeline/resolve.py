from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, FrozenSet, List, Optional

from ..core.annotations import resolve_events, resolve_goals
from ..core.calculations import (
    age_in_years_float,
    format_date,
    get_current_year_progress,
    weeks_lived_since,
)
from ..core.layout import calculate_dimensions
from ..core.types import CalendarSettings, Dimensions, EventInfo, GoalInfo, WeekStats, YearProgress
from ..settings import parse_birthdate

WEEK_LIVED = "lived"
WEEK_CURRENT = "current"
WEEK_FUTURE = "future"


@dataclass(frozen=True)
class ResolvedCalendar:
    """Everything a drawing pass needs, computed once per render."""

    settings: CalendarSettings
    birthdate: date
    today: date
    weeks_lived: int
    dims: Dimensions
    progress: YearProgress
    events: List[EventInfo] = field(default_factory=list)
    goals: List[GoalInfo] = field(default_factory=list)
    event_weeks: FrozenSet[int] = frozenset()
    goal_weeks: FrozenSet[int] = frozenset()
    weekly_stats: Optional[Dict[int, WeekStats]] = None

    @property
    def total_weeks(self) -> int:
        return self.settings.total_weeks

    @property
    def weeks_remaining(self) -> int:
        return max(0, self.total_weeks - self.weeks_lived)

    def classify_week(self, week_index: int) -> str:
        last_in_grid = min(self.weeks_lived - 1, self.total_weeks - 1) if self.weeks_lived > 0 else -1
        if week_index == last_in_grid:
            return WEEK_CURRENT
        if week_index < self.weeks_lived:
            return WEEK_LIVED
        return WEEK_FUTURE

    def summary(self) -> dict:
        dims = self.dims
        return {
            "birthdate": format_date(self.birthdate),
            "today": format_date(self.today),
            "years": self.settings.years,
            "weeks_lived": self.weeks_lived,
            "weeks_remaining": self.weeks_remaining,
            "age_years": round(age_in_years_float(self.birthdate, self.today), 2),
            "current_year": {
                "index": self.progress.current_year_index,
                "weeks_done": self.progress.weeks_this_life_year,
                "weeks_left": self.progress.weeks_left_this_life_year,
            },
            "canvas": {
                "width": dims.total_width,
                "height": dims.total_height,
                "content_height": dims.content_height,
                "box_size": dims.box_size,
                "font_size": dims.font_size,
            },
            "events": [
                {"date": format_date(e.date), "label": e.label, "week": e.week_index} for e in self.events
            ],
            "goals": [
                {
                    "start": format_date(g.start_date),
                    "end": format_date(g.end_date),
                    "label": g.label,
                    "first_week": min(g.week_indices),
                    "last_week": max(g.week_indices),
                }
                for g in self.goals
            ],
        }


def resolve_calendar(
    settings: CalendarSettings,
    today: date,
    weekly_stats: Optional[Dict[int, WeekStats]] = None,
) -> ResolvedCalendar:
    birthdate = parse_birthdate(settings)
    total_weeks = settings.total_weeks

    events, event_weeks = resolve_events(settings.events, birthdate, total_weeks)
    goals, goal_weeks = resolve_goals(settings.goals, birthdate, total_weeks)
    dims = calculate_dimensions(settings, events, goals)

    return ResolvedCalendar(
        settings=settings,
        birthdate=birthdate,
        today=today,
        weeks_lived=weeks_lived_since(birthdate, today),
        dims=dims,
        progress=get_current_year_progress(birthdate, today, settings.years),
        events=events,
        goals=goals,
        event_weeks=frozenset(event_weeks),
        goal_weeks=frozenset(goal_weeks),
        weekly_stats=weekly_stats if settings.show_weekly_stats else None,
    )
