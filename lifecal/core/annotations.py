from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List, Set, Tuple

from ..config import DEFAULT_MAX_WIDTH, WRAPPED_LINE_PADDING, WRAPPED_LINE_WIDTH
from ..errors import FormatError
from .calculations import parse_date, weeks_lived_since
from .types import Event, EventInfo, Goal, GoalInfo

logger = logging.getLogger(__name__)


def _blank(value: str | None) -> bool:
    return not value or not str(value).strip()


def resolve_events(
    events: Iterable[Event],
    birthdate: date,
    total_weeks: int,
) -> Tuple[List[EventInfo], Set[int]]:
    resolved: List[EventInfo] = []
    weeks: Set[int] = set()

    for event in events:
        if _blank(event.date):
            continue
        try:
            event_date = parse_date(event.date)
        except FormatError:
            logger.warning("Could not parse event date %r, expected YYYY-MM-DD", event.date)
            continue

        if event_date < birthdate:
            logger.debug("Event %r precedes birthdate, skipped", event.title)
            continue

        week_index = weeks_lived_since(birthdate, event_date)
        if not 0 <= week_index < total_weeks:
            logger.debug("Event %r at week %d is outside the grid", event.title, week_index)
            continue

        resolved.append(EventInfo(date=event_date, label=event.title or "", week_index=week_index))
        weeks.add(week_index)

    return resolved, weeks


def resolve_goals(
    goals: Iterable[Goal],
    birthdate: date,
    total_weeks: int,
) -> Tuple[List[GoalInfo], Set[int]]:
    resolved: List[GoalInfo] = []
    all_weeks: Set[int] = set()

    for goal in goals:
        if _blank(goal.start_date) or _blank(goal.end_date):
            continue
        try:
            start = parse_date(goal.start_date)
            end = parse_date(goal.end_date)
        except FormatError:
            logger.warning(
                "Could not parse goal dates %r to %r, expected YYYY-MM-DD",
                goal.start_date,
                goal.end_date,
            )
            continue

        if end < start:
            start, end = end, start

        if end < birthdate:
            logger.debug("Goal %r ends before birthdate, skipped", goal.title)
            continue

        clamped_start = max(start, birthdate)
        start_week = weeks_lived_since(birthdate, clamped_start)
        if start_week >= total_weeks:
            logger.debug("Goal %r starts beyond the grid, skipped", goal.title)
            continue

        end_week = min(weeks_lived_since(birthdate, end), total_weeks - 1)
        if end_week < start_week:
            continue

        week_indices = frozenset(range(start_week, end_week + 1))
        if not week_indices:
            continue

        resolved.append(
            GoalInfo(start_date=start, end_date=end, label=goal.title or "", week_indices=week_indices)
        )
        all_weeks.update(week_indices)

    return resolved, all_weeks


def wrap_text(label: str, max_width: int = DEFAULT_MAX_WIDTH) -> List[str]:
    if len(label) <= max_width:
        return [label]

    padding = " " * WRAPPED_LINE_PADDING
    lines = [label[:max_width]]
    remaining = label[max_width:]
    for i in range(0, len(remaining), WRAPPED_LINE_WIDTH):
        lines.append(padding + remaining[i : i + WRAPPED_LINE_WIDTH])
    return lines
