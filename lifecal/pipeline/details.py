from __future__ import annotations

from typing import List, Mapping, Optional, Sequence

from ..config import WEEKS_PER_YEAR
from ..core.types import EventInfo, GoalInfo, WeekDetail, WeekStats


def describe_week(
    week_index: int,
    total_weeks: int,
    weekly_stats: Optional[Mapping[int, WeekStats]] = None,
    events: Sequence[EventInfo] = (),
    goals: Sequence[GoalInfo] = (),
) -> WeekDetail:
    if not 0 <= week_index < total_weeks:
        raise ValueError(f"week {week_index} is outside the grid (0..{total_weeks - 1})")

    goal_rows = []
    for goal in goals:
        if week_index not in goal.week_indices:
            continue
        ordered = sorted(goal.week_indices)
        goal_rows.append((goal.label, ordered.index(week_index) + 1, len(ordered)))

    return WeekDetail(
        week_index=week_index,
        age=week_index // WEEKS_PER_YEAR,
        week_in_year=week_index % WEEKS_PER_YEAR + 1,
        percent_of_life=round((week_index + 1) / total_weeks * 100, 1),
        stats=(weekly_stats or {}).get(week_index),
        events=[event.label for event in events if event.week_index == week_index],
        goals=goal_rows,
    )


def _plural(count: int, word: str) -> str:
    return f"{count:,} {word}{'' if count == 1 else 's'}"


def format_week_detail(detail: WeekDetail) -> List[str]:
    lines = [
        f"Week {detail.week_index + 1}",
        f"Age {detail.age}, Week {detail.week_in_year}/{WEEKS_PER_YEAR}",
        f"Life {detail.percent_of_life:.1f}%",
    ]
    if detail.stats is not None:
        lines.append(f"{_plural(detail.stats.notes_created, 'note')} created")
        lines.append(f"{_plural(detail.stats.words_written, 'word')} written")
    if detail.events:
        lines.append("Events:")
        lines.extend(f"  - {label}" for label in detail.events)
    if detail.goals:
        lines.append("Goals:")
        lines.extend(f"  - {label} ({position}/{length})" for label, position, length in detail.goals)
    return lines
