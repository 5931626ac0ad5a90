from __future__ import annotations

import calendar
from datetime import date, timedelta

from ..config import DAYS_PER_WEEK, DAYS_PER_YEAR, FEBRUARY, LEAP_DAY, WEEKS_PER_YEAR
from ..errors import FormatError
from .types import YearProgress


def compute_integer_age_years(birthdate: date, today: date) -> int:
    """Number of birthdays that have passed by ``today``."""
    years = today.year - birthdate.year
    if (today.month, today.day) < (birthdate.month, birthdate.day):
        years -= 1
    return max(0, years)


def anchor_date(birthdate: date, years: int) -> date:
    """
    Start of life-year ``years``: the birthday in ``birthdate.year + years``.

    A Feb 29 birthdate lands on March 1 in non-leap years. Both the forward
    (date -> week) and inverse (week -> date) mappings go through here so they
    agree on that rule.
    """
    year = birthdate.year + years
    if birthdate.month == FEBRUARY and birthdate.day == LEAP_DAY and not calendar.isleap(year):
        return date(year, 3, 1)
    return date(year, birthdate.month, birthdate.day)


def weeks_lived_since(birthdate: date, today: date) -> int:
    """
    Week index of ``today`` on a 52-weeks-per-row grid.

    Whole life-years contribute 52 weeks each; weeks since the last birthday
    are capped at 51 so 53-week calendar years never spill into the next row.
    """
    if today <= birthdate:
        return 0

    years = compute_integer_age_years(birthdate, today)
    last_birthday = anchor_date(birthdate, years)

    days_since_birthday = max(0, (today - last_birthday).days)
    weeks_since_birthday = min(days_since_birthday // DAYS_PER_WEEK, WEEKS_PER_YEAR - 1)

    return years * WEEKS_PER_YEAR + weeks_since_birthday


def age_in_years_float(birthdate: date, today: date) -> float:
    days_lived = (today - birthdate).days
    return max(0.0, days_lived / DAYS_PER_YEAR)


def get_current_year_progress(birthdate: date, today: date, total_years: int) -> YearProgress:
    current_year_index = compute_integer_age_years(birthdate, today)
    if current_year_index >= total_years:
        return YearProgress(0, 0, current_year_index)

    weeks_now = weeks_lived_since(birthdate, today)
    weeks_this = weeks_now - current_year_index * WEEKS_PER_YEAR
    weeks_this = min(max(weeks_this, 0), WEEKS_PER_YEAR)
    return YearProgress(
        weeks_this_life_year=weeks_this,
        weeks_left_this_life_year=WEEKS_PER_YEAR - weeks_this,
        current_year_index=current_year_index,
    )


def get_date_for_week_index(week_index: int, birthdate: date) -> date:
    years, weeks = divmod(week_index, WEEKS_PER_YEAR)
    return anchor_date(birthdate, years) + timedelta(days=weeks * DAYS_PER_WEEK)


def parse_date(text: str) -> date:
    """
    Parse ``YYYY-MM-DD`` into a calendar date.

    Components only need to be numeric, so ``2024-3-5`` is accepted. Settings
    input is checked separately and strictly (see ``settings.is_valid_date_input``).
    """
    parts = str(text).split("-")
    if len(parts) != 3:
        raise FormatError(f"Invalid date format: {text}. Expected YYYY-MM-DD")
    try:
        year, month, day = (int(part) for part in parts)
    except ValueError:
        raise FormatError(f"Invalid date format: {text}. Expected YYYY-MM-DD") from None
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise FormatError(f"Invalid date: {text} ({exc})") from None


def format_date(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
