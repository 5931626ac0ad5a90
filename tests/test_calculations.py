from __future__ import annotations

from datetime import date
import unittest

from lifecal.core.calculations import (
    age_in_years_float,
    anchor_date,
    compute_integer_age_years,
    format_date,
    get_current_year_progress,
    get_date_for_week_index,
    parse_date,
    weeks_lived_since,
)
from lifecal.errors import FormatError


class WeekArithmeticTests(unittest.TestCase):
    def test_birthdate_itself_is_week_zero(self) -> None:
        birthdate = date(1990, 6, 15)
        self.assertEqual(weeks_lived_since(birthdate, birthdate), 0)
        self.assertEqual(weeks_lived_since(birthdate, date(1980, 1, 1)), 0)

    def test_known_scenario(self) -> None:
        birthdate = date(1990, 6, 15)
        today = date(2024, 6, 20)
        self.assertEqual(compute_integer_age_years(birthdate, today), 34)
        self.assertEqual(weeks_lived_since(birthdate, today), 34 * 52 + 0)

    def test_age_before_birthday_in_year(self) -> None:
        birthdate = date(1990, 6, 15)
        self.assertEqual(compute_integer_age_years(birthdate, date(2024, 6, 14)), 33)
        self.assertEqual(compute_integer_age_years(birthdate, date(1985, 1, 1)), 0)

    def test_weeks_since_birthday_never_reaches_52(self) -> None:
        birthdate = date(2000, 1, 1)
        # 365 days after the birthday but before the next one
        self.assertEqual(weeks_lived_since(birthdate, date(2000, 12, 31)), 51)
        self.assertEqual(weeks_lived_since(birthdate, date(2001, 1, 1)), 52)

    def test_week_index_round_trip(self) -> None:
        birthdate = date(1985, 7, 4)
        for week_index in (0, 1, 51, 52, 53, 1000, 79 * 52 + 51):
            start = get_date_for_week_index(week_index, birthdate)
            self.assertEqual(weeks_lived_since(birthdate, start), week_index, week_index)

    def test_leap_day_birthdate_lands_on_march_first(self) -> None:
        birthdate = date(2000, 2, 29)
        self.assertEqual(anchor_date(birthdate, 1), date(2001, 3, 1))
        self.assertEqual(anchor_date(birthdate, 4), date(2004, 2, 29))
        self.assertEqual(weeks_lived_since(birthdate, date(2001, 3, 1)), 52)
        self.assertEqual(weeks_lived_since(birthdate, date(2001, 2, 28)), 51)
        self.assertEqual(get_date_for_week_index(52, birthdate), date(2001, 3, 1))
        self.assertEqual(get_date_for_week_index(208, birthdate), date(2004, 2, 29))

    def test_age_in_years_float(self) -> None:
        birthdate = date(2000, 1, 1)
        self.assertAlmostEqual(age_in_years_float(birthdate, date(2001, 12, 31)), 730 / 365.2425)
        self.assertEqual(age_in_years_float(birthdate, date(1999, 1, 1)), 0.0)

    def test_current_year_progress(self) -> None:
        birthdate = date(1990, 6, 15)
        progress = get_current_year_progress(birthdate, date(2024, 12, 1), 80)
        self.assertEqual(progress.current_year_index, 34)
        self.assertEqual(progress.weeks_this_life_year, 24)
        self.assertEqual(progress.weeks_left_this_life_year, 28)

        on_birthday = get_current_year_progress(birthdate, date(2024, 6, 20), 80)
        self.assertEqual(on_birthday.weeks_this_life_year, 0)
        self.assertEqual(on_birthday.weeks_left_this_life_year, 52)

    def test_current_year_progress_past_horizon(self) -> None:
        progress = get_current_year_progress(date(1990, 6, 15), date(2024, 12, 1), 30)
        self.assertEqual(progress.current_year_index, 34)
        self.assertEqual(progress.weeks_this_life_year, 0)
        self.assertEqual(progress.weeks_left_this_life_year, 0)


class DateParsingTests(unittest.TestCase):
    def test_parse_and_format(self) -> None:
        parsed = parse_date("2024-03-05")
        self.assertEqual(parsed, date(2024, 3, 5))
        self.assertEqual(format_date(parsed), "2024-03-05")

    def test_unpadded_components_are_accepted(self) -> None:
        self.assertEqual(parse_date("2024-3-5"), date(2024, 3, 5))

    def test_rejects_malformed_text(self) -> None:
        for text in ("bad", "2024/03/05", "2024-03", "2024-xx-05", "2024-03-05-01", ""):
            with self.assertRaises(FormatError, msg=text):
                parse_date(text)

    def test_rejects_impossible_dates(self) -> None:
        with self.assertRaises(FormatError):
            parse_date("2023-02-29")
        with self.assertRaises(FormatError):
            parse_date("2024-13-01")

    def test_format_pads_year(self) -> None:
        self.assertEqual(format_date(date(5, 1, 2)), "0005-01-02")


if __name__ == "__main__":
    unittest.main()
