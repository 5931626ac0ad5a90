from __future__ import annotations

import json
import logging
import re
import uuid
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .config import DEFAULT_SETTINGS, MAX_HORIZONTAL_PARTS
from .core.calculations import parse_date
from .core.types import CalendarSettings, Event, Goal
from .errors import ConfigError, FormatError

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
STRICT_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def generate_id() -> str:
    return uuid.uuid4().hex[:12]


def is_valid_date_input(text: str | None) -> bool:
    """Strict check used for settings input: zero-padded and a real date."""
    if not text or not text.strip():
        return False
    if not STRICT_DATE_RE.match(text):
        return False
    try:
        date.fromisoformat(text)
    except ValueError:
        return False
    return True


def _pick(overrides: Mapping[str, Any], defaults: Mapping[str, Any], key: str) -> Any:
    value = overrides.get(key)
    if value is None:
        return defaults.get(key, DEFAULT_SETTINGS.get(key))
    return value


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be a number, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{key} must be a whole number, got {value!r}") from None


def _as_float(value: Any, key: str) -> float:
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{key} must be a number, got {value!r}") from None


def _event_from(raw: Any) -> Event:
    if isinstance(raw, Event):
        return raw
    if not isinstance(raw, Mapping):
        raise ConfigError(f"Event must be a mapping, got {raw!r}")
    return Event(
        id=str(raw.get("id") or generate_id()),
        date=str(raw.get("date") or ""),
        title=str(raw.get("title") or ""),
        notes=raw.get("notes"),
    )


def _goal_from(raw: Any) -> Goal:
    if isinstance(raw, Goal):
        return raw
    if not isinstance(raw, Mapping):
        raise ConfigError(f"Goal must be a mapping, got {raw!r}")
    return Goal(
        id=str(raw.get("id") or generate_id()),
        start_date=str(raw.get("startDate") or ""),
        end_date=str(raw.get("endDate") or ""),
        title=str(raw.get("title") or ""),
        notes=raw.get("notes"),
    )


def resolve_settings(
    defaults: Mapping[str, Any] | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> CalendarSettings:
    """
    Merge a partial override record onto defaults.

    Every key falls back to ``defaults`` (then the built-in defaults) when it is
    missing or None in ``overrides``. Numeric fields are coerced; ``years`` must
    be positive, ``horizontalParts`` is clamped to 1..4, sizes below zero other
    than the -1 auto marker become auto, and an explicit null or non-positive
    ``expectedYears`` disables the expectancy line.
    """
    base: Dict[str, Any] = {**DEFAULT_SETTINGS, **(defaults or {})}
    over: Mapping[str, Any] = overrides or {}

    years = _as_int(_pick(over, base, "years"), "years")
    if years <= 0:
        raise ConfigError(f"years must be positive, got {years}")

    box_size = _as_float(_pick(over, base, "boxSize"), "boxSize")
    spacing = _as_float(_pick(over, base, "spacing"), "spacing")
    margin = _as_float(_pick(over, base, "margin"), "margin")
    if box_size <= 0:
        raise ConfigError(f"boxSize must be positive, got {box_size}")
    for key, value in (("spacing", spacing), ("margin", margin)):
        if value < 0:
            raise ConfigError(f"{key} must not be negative, got {value}")

    years_per_group = max(0, _as_int(_pick(over, base, "yearsPerGroup"), "yearsPerGroup"))
    horizontal_parts = _as_int(_pick(over, base, "horizontalParts"), "horizontalParts")
    horizontal_parts = min(max(horizontal_parts, 1), MAX_HORIZONTAL_PARTS)

    vertical_gap_size = _as_float(_pick(over, base, "verticalGapSize"), "verticalGapSize")
    horizontal_gap_size = _as_float(_pick(over, base, "horizontalGapSize"), "horizontalGapSize")
    if vertical_gap_size < 0:
        vertical_gap_size = -1
    if horizontal_gap_size < 0:
        horizontal_gap_size = -1

    expected_raw = over.get("expectedYears", base.get("expectedYears"))
    expected_years: Optional[int] = None
    if expected_raw not in (None, ""):
        expected = _as_int(expected_raw, "expectedYears")
        expected_years = expected if expected > 0 else None

    events = tuple(_event_from(item) for item in (_pick(over, base, "events") or []))
    goals = tuple(_goal_from(item) for item in (_pick(over, base, "goals") or []))

    return CalendarSettings(
        birthdate=str(_pick(over, base, "birthdate") or "").strip(),
        years=years,
        box_size=box_size,
        spacing=spacing,
        margin=margin,
        years_per_group=years_per_group,
        vertical_gap_size=vertical_gap_size,
        horizontal_parts=horizontal_parts,
        horizontal_gap_size=horizontal_gap_size,
        show_start_end_labels=bool(_pick(over, base, "showStartEndLabels")),
        show_stats=bool(_pick(over, base, "showStats")),
        show_weekly_stats=bool(_pick(over, base, "showWeeklyStats")),
        show_notes_panel=bool(_pick(over, base, "showNotesPanel")),
        start_label=str(_pick(over, base, "startLabel")),
        end_label=str(_pick(over, base, "endLabel")),
        expected_years=expected_years,
        events=events,
        goals=goals,
    )


def parse_birthdate(settings: CalendarSettings) -> date:
    """Birthdate of a render; an unusable value stops the whole render."""
    if not settings.birthdate:
        raise ConfigError("Please set a birthdate (YYYY-MM-DD).")
    try:
        return parse_date(settings.birthdate)
    except FormatError as exc:
        raise ConfigError(
            f"Invalid birthdate: {settings.birthdate}. Expected YYYY-MM-DD format."
        ) from exc


def _split_legacy_lines(text: str) -> List[List[str]]:
    rows: List[List[str]] = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        rows.append([part.strip() for part in line.split("|")])
    return rows


def upgrade_settings(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Bring a stored settings mapping up to ``SCHEMA_VERSION``.

    Version 0 stored events as ``date | title`` lines and goals as
    ``start | end | title`` lines in one string, and carried ``*Color`` keys
    that are no longer read.
    """
    data: Dict[str, Any] = dict(raw)
    version = _as_int(data.get("schema_version", 0), "schema_version")

    if version < 1:
        events = data.get("events")
        if isinstance(events, str):
            data["events"] = [
                {"id": generate_id(), "date": row[0], "title": row[1] if len(row) > 1 else ""}
                for row in _split_legacy_lines(events)
            ]
        goals = data.get("goals")
        if isinstance(goals, str):
            upgraded: List[Dict[str, str]] = []
            for row in _split_legacy_lines(goals):
                if len(row) < 2:
                    logger.warning("Dropping legacy goal without an end date: %r", row)
                    continue
                upgraded.append(
                    {
                        "id": generate_id(),
                        "startDate": row[0],
                        "endDate": row[1],
                        "title": row[2] if len(row) > 2 else "",
                    }
                )
            data["goals"] = upgraded
        for key in [k for k in data if k.endswith("Color")]:
            data.pop(key)
        version = 1

    data["schema_version"] = version
    return data


def load_settings_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Config not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config is not valid JSON: {path} ({exc})") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a JSON object: {path}")
    return upgrade_settings(data)
