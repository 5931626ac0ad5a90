from __future__ import annotations

import json
import tempfile
from pathlib import Path
import unittest

from typer.testing import CliRunner

from lifecal import config
from lifecal.core.calculations import parse_date
from lifecal.main import _weekly_stats, app
from lifecal.models import reset_engine
from lifecal.pipeline.stats import WeekStatsCache
from lifecal.settings import resolve_settings


class CommandLineTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)
        config.set_out_dir(self.root / "out")
        reset_engine()
        self.runner = CliRunner()
        self.config_path = self.root / "life.json"
        self.config_path.write_text(
            json.dumps(
                {
                    "birthdate": "1990-06-15",
                    "events": [{"id": "e", "date": "2024-06-20", "title": "Launch"}],
                }
            ),
            encoding="utf-8",
        )

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_info(self) -> None:
        result = self.runner.invoke(app, ["info", "1990-06-15", "--today", "2024-06-20"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Age: 34", result.output)
        self.assertIn("Week index: 1,768 of 4,160", result.output)
        self.assertIn("Weeks remaining: 2,392", result.output)

    def test_info_rejects_bad_birthdate(self) -> None:
        result = self.runner.invoke(app, ["info", "someday"])
        self.assertEqual(result.exit_code, 1)

    def test_render_and_history(self) -> None:
        out_dir = self.root / "out"
        result = self.runner.invoke(
            app,
            ["render", str(self.config_path), "--out", str(out_dir), "--today", "2024-06-20"],
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("READY: life", result.output)
        self.assertIn("Weeks lived: 1,768 / 4,160", result.output)
        self.assertTrue((out_dir / "life" / "a4.pdf").exists())

        history = self.runner.invoke(app, ["history", "--out", str(out_dir)])
        self.assertEqual(history.exit_code, 0, history.output)
        self.assertIn("life READY as of 2024-06-20", history.output)

    def test_render_missing_config(self) -> None:
        result = self.runner.invoke(app, ["render", str(self.root / "missing.json")])
        self.assertEqual(result.exit_code, 1)

    def test_render_failure_exit_code(self) -> None:
        broken = self.root / "broken.json"
        broken.write_text(json.dumps({"birthdate": "garbage"}), encoding="utf-8")
        result = self.runner.invoke(app, ["render", str(broken), "--out", str(self.root / "out")])
        self.assertEqual(result.exit_code, 1)

    def test_zero_box_size_is_rejected_before_rendering(self) -> None:
        flat = self.root / "flat.json"
        flat.write_text(
            json.dumps({"birthdate": "1990-06-15", "boxSize": 0, "spacing": 0, "yearsPerGroup": 0}),
            encoding="utf-8",
        )
        result = self.runner.invoke(app, ["render", str(flat), "--out", str(self.root / "out")])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("boxSize must be positive", result.output)
        self.assertFalse((self.root / "out" / "flat").exists())

    def test_birthdate_override_must_be_zero_padded(self) -> None:
        result = self.runner.invoke(
            app,
            ["render", str(self.config_path), "--birthdate", "1990-6-15", "--out", str(self.root / "out")],
        )
        self.assertEqual(result.exit_code, 2)
        self.assertFalse((self.root / "out" / "life").exists())
        # the same text is still a readable date once it is inside a config file
        self.assertEqual(parse_date("1990-6-15").isoformat(), "1990-06-15")

        padded = self.runner.invoke(
            app,
            ["render", str(self.config_path), "--birthdate", "1990-06-16", "--out", str(self.root / "out")],
        )
        self.assertEqual(padded.exit_code, 0, padded.output)

    def test_week_detail_with_vault(self) -> None:
        vault = self.root / "vault"
        vault.mkdir()
        (vault / "note.md").write_text("one two three", encoding="utf-8")

        result = self.runner.invoke(
            app,
            ["week", str(self.config_path), "1768", "--today", "2024-06-20", "--vault", str(vault)],
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Starts: 2024-06-15", result.output)
        self.assertIn("Week 1769", result.output)
        self.assertIn("  - Launch", result.output)

    def test_week_outside_grid(self) -> None:
        result = self.runner.invoke(app, ["week", str(self.config_path), "99999"])
        self.assertEqual(result.exit_code, 1)

    def test_week_at_canvas_point(self) -> None:
        # default layout: grid starts 1.5 font sizes (25.5pt) below the top edge
        result = self.runner.invoke(
            app, ["week", str(self.config_path), "--at", "5,30", "--today", "2024-06-20"]
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Starts: 1990-06-15", result.output)
        self.assertIn("Week 1\n", result.output)

    def test_week_at_point_between_boxes(self) -> None:
        result = self.runner.invoke(app, ["week", str(self.config_path), "--at", "11,30"])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("No week box", result.output)

    def test_week_needs_index_or_point(self) -> None:
        neither = self.runner.invoke(app, ["week", str(self.config_path)])
        self.assertEqual(neither.exit_code, 2)
        both = self.runner.invoke(app, ["week", str(self.config_path), "3", "--at", "5,30"])
        self.assertEqual(both.exit_code, 2)
        malformed = self.runner.invoke(app, ["week", str(self.config_path), "--at", "five"])
        self.assertEqual(malformed.exit_code, 2)

    def test_weekly_stats_reuse_the_callers_cache(self) -> None:
        vault = self.root / "vault"
        vault.mkdir()
        (vault / "note.md").write_text("one two", encoding="utf-8")
        settings = resolve_settings(None, {"birthdate": "1990-06-15"})
        cache = WeekStatsCache()

        first = _weekly_stats(settings, vault, cache)
        (vault / "later.md").write_text("three", encoding="utf-8")
        self.assertIs(_weekly_stats(settings, vault, cache), first)

        fresh = _weekly_stats(settings, vault, WeekStatsCache())
        self.assertEqual(sum(entry.notes_created for entry in fresh.values()), 2)
        self.assertIsNone(_weekly_stats(settings, None, cache))


if __name__ == "__main__":
    unittest.main()
