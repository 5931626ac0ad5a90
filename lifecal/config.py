from __future__ import annotations

from pathlib import Path
from typing import Dict


BASE_DIR = Path(__file__).resolve().parents[1]
OUT_DIR = BASE_DIR / "out"
DB_PATH = OUT_DIR / "lifecal.db"

WEEKS_PER_YEAR = 52
DAYS_PER_WEEK = 7
DAYS_PER_YEAR = 365.2425
FEBRUARY = 2
LEAP_DAY = 29

FONT_SIZE_MULTIPLIER = 1.68  # 1.2 * 1.4
MIN_FONT_SIZE = 8

# wrap_text: continuation chunks are independent of the first-line width
DEFAULT_MAX_WIDTH = 80
WRAPPED_LINE_WIDTH = 60
WRAPPED_LINE_PADDING = 52

MAX_HORIZONTAL_PARTS = 4

DEFAULT_SETTINGS: Dict[str, object] = {
    "birthdate": "",
    "years": 80,
    "boxSize": 10,
    "spacing": 2,
    "margin": 0,
    "yearsPerGroup": 5,
    "verticalGapSize": -1,
    "horizontalParts": 2,
    "horizontalGapSize": -1,
    "showStartEndLabels": False,
    "showStats": False,
    "showWeeklyStats": True,
    "showNotesPanel": False,
    "startLabel": "Start",
    "endLabel": "Fin.",
    "expectedYears": None,
    "events": [],
    "goals": [],
}

DEFAULT_PALETTE: Dict[str, str] = {
    "background": "#FFFFFF",
    "filled": "#000000",
    "empty": "#CCCCCC",
    "last_week": "#7C3AED",
    "text": "#000000",
    "event": "#7C3AED",
    "goal": "#16A34A",
    "expectation_line": "#D1D5DB",
}


def set_out_dir(path: Path) -> None:
    global OUT_DIR, DB_PATH
    OUT_DIR = path
    DB_PATH = OUT_DIR / "lifecal.db"
