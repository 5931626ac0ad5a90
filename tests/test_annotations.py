from __future__ import annotations

import logging
from datetime import date

from lifecal.core.annotations import resolve_events, resolve_goals, wrap_text
from lifecal.core.types import Event, Goal

BIRTHDATE = date(1990, 6, 15)
TOTAL_WEEKS = 80 * 52


def _event(day: str, title: str = "e") -> Event:
    return Event(id=title, date=day, title=title)


def _goal(start: str, end: str, title: str = "g") -> Goal:
    return Goal(id=title, start_date=start, end_date=end, title=title)


def test_events_resolve_to_week_indices() -> None:
    events, weeks = resolve_events(
        [_event("1990-06-15", "born"), _event("2024-06-20", "today")],
        BIRTHDATE,
        TOTAL_WEEKS,
    )
    assert [(e.label, e.week_index) for e in events] == [("born", 0), ("today", 1768)]
    assert weeks == {0, 1768}


def test_events_outside_grid_are_dropped(caplog) -> None:
    with caplog.at_level(logging.WARNING):
        events, weeks = resolve_events(
            [
                _event("", "blank"),
                _event("nope", "garbage"),
                _event("1980-01-01", "before"),
                _event("2005-01-01", "after"),
                _event("1999-06-15", "kept"),
            ],
            BIRTHDATE,
            10 * 52,
        )
    assert [e.label for e in events] == ["kept"]
    assert weeks == {9 * 52}
    assert "nope" in caplog.text


def test_inverted_goal_is_swapped() -> None:
    goals, weeks = resolve_goals([_goal("2030-01-01", "2020-01-01")], BIRTHDATE, TOTAL_WEEKS)
    assert len(goals) == 1
    goal = goals[0]
    assert goal.start_date == date(2020, 1, 1)
    assert goal.end_date == date(2030, 1, 1)
    assert min(goal.week_indices) == 29 * 52 + 28
    assert max(goal.week_indices) == 39 * 52 + 28
    assert len(goal.week_indices) == 521
    assert weeks == set(goal.week_indices)


def test_goal_before_birthdate_is_dropped() -> None:
    goals, weeks = resolve_goals([_goal("1980-01-01", "1985-01-01")], BIRTHDATE, TOTAL_WEEKS)
    assert goals == []
    assert weeks == set()


def test_goal_after_horizon_is_dropped() -> None:
    goals, _ = resolve_goals([_goal("2001-01-01", "2002-01-01")], BIRTHDATE, 10 * 52)
    assert goals == []


def test_goal_spanning_horizon_is_clamped() -> None:
    goals, weeks = resolve_goals([_goal("1999-06-15", "2005-01-01")], BIRTHDATE, 10 * 52)
    assert len(goals) == 1
    assert weeks == set(range(9 * 52, 10 * 52))


def test_goal_start_is_clamped_to_birthdate() -> None:
    goals, weeks = resolve_goals([_goal("1980-01-01", "1990-07-01")], BIRTHDATE, TOTAL_WEEKS)
    assert weeks == {0, 1, 2}
    # the reported dates are the goal's own, only the weeks are clamped
    assert goals[0].start_date == date(1980, 1, 1)


def test_bad_goal_does_not_stop_the_batch() -> None:
    goals, weeks = resolve_goals(
        [
            _goal("2020-01-01", "bad-date", "broken"),
            _goal("", "2020-01-01", "blank"),
            _goal("1990-06-15", "1990-06-20", "first"),
            _goal("1990-06-22", "1990-06-30", "second"),
        ],
        BIRTHDATE,
        TOTAL_WEEKS,
    )
    assert [g.label for g in goals] == ["first", "second"]
    assert weeks == {0, 1, 2}


def test_wrap_text_short_label() -> None:
    assert wrap_text("Graduation") == ["Graduation"]


def test_wrap_text_continuation_lines() -> None:
    lines = wrap_text("a" * 200)
    assert lines[0] == "a" * 80
    assert lines[1:] == [" " * 52 + "a" * 60, " " * 52 + "a" * 60]


def test_wrap_text_continuation_width_is_independent_of_max_width() -> None:
    assert wrap_text("abcdef", 4) == ["abcd", " " * 52 + "ef"]
