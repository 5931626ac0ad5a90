from __future__ import annotations

import argparse
import csv
from pathlib import Path
from typing import Dict, List

from lifecal.core.calculations import format_date, get_date_for_week_index, parse_date
from lifecal.config import WEEKS_PER_YEAR
from lifecal.pipeline.stats import collect_weekly_stats


def build_rows(vault: Path, birthdate: str, years: int) -> List[Dict[str, str]]:
    """One row per week that has at least one note, in week order."""
    born = parse_date(birthdate)
    stats = collect_weekly_stats(vault, born, years * WEEKS_PER_YEAR)
    rows: List[Dict[str, str]] = []
    for week_index in sorted(stats):
        entry = stats[week_index]
        rows.append(
            {
                "week": str(week_index),
                "age": str(week_index // WEEKS_PER_YEAR),
                "week_start": format_date(get_date_for_week_index(week_index, born)),
                "notes_created": str(entry.notes_created),
                "words_written": str(entry.words_written),
            }
        )
    return rows


def main() -> None:
    parser = argparse.ArgumentParser(description="Export per-week note/word counts as CSV")
    parser.add_argument("--vault", dest="vault", type=str, required=True, help="Notes folder")
    parser.add_argument("--birthdate", dest="birthdate", type=str, required=True, help="YYYY-MM-DD")
    parser.add_argument("--years", dest="years", type=int, default=80, help="Rows in the grid")
    parser.add_argument("--out", dest="out_csv", type=str, default="out/weekly_stats.csv", help="Output CSV")
    args = parser.parse_args()

    rows = build_rows(Path(args.vault), args.birthdate, args.years)

    out_path = Path(args.out_csv)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    fieldnames = ["week", "age", "week_start", "notes_created", "words_written"]
    with out_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)

    print(f"OK: wrote {len(rows)} rows -> {out_path}")


if __name__ == "__main__":
    main()
