from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Dict, Hashable, Iterable, List, Optional

from ..core.calculations import weeks_lived_since
from ..core.types import WeekStats

logger = logging.getLogger(__name__)

FENCED_CODE_RE = re.compile(r"```[\s\S]*?```")
INLINE_CODE_RE = re.compile(r"`[^`]*`")
LINK_RE = re.compile(r"\[([^\]]+)\]\([^)]+\)")


@dataclass(frozen=True)
class FileFact:
    created_at: datetime
    word_count: int
    path: Optional[Path] = None


def created_time(stat_result: os.stat_result) -> datetime:
    # st_birthtime where the platform records it; Linux only has the inode change time
    return datetime.fromtimestamp(getattr(stat_result, "st_birthtime", stat_result.st_ctime))


def count_words(content: str) -> int:
    content = FENCED_CODE_RE.sub("", content)
    content = INLINE_CODE_RE.sub("", content)
    content = LINK_RE.sub(r"\1", content)
    return len(content.split())


def accumulate_weekly_stats(
    facts: Iterable[FileFact],
    birthdate: date,
    total_weeks: int,
) -> Dict[int, WeekStats]:
    stats: Dict[int, WeekStats] = {}
    for fact in facts:
        week_index = weeks_lived_since(birthdate, fact.created_at.date())
        if not 0 <= week_index < total_weeks:
            continue
        entry = stats.setdefault(week_index, WeekStats())
        entry.notes_created += 1
        entry.words_written += fact.word_count
    return stats


def scan_vault(root: Path, pattern: str = "*.md") -> List[FileFact]:
    """
    Creation time and word count for every note under ``root``.

    A note that cannot be read still counts as created, with zero words.
    """
    if not root.is_dir():
        raise FileNotFoundError(f"Vault not found: {root}")
    facts: List[FileFact] = []
    for path in sorted(root.rglob(pattern)):
        if not path.is_file():
            continue
        try:
            created_at = created_time(path.stat())
        except OSError:
            logger.warning("Could not stat %s, skipped", path)
            continue
        try:
            words = count_words(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read %s for word count: %s", path, exc)
            words = 0
        facts.append(FileFact(created_at=created_at, word_count=words, path=path))
    return facts


def collect_weekly_stats(root: Path, birthdate: date, total_weeks: int) -> Dict[int, WeekStats]:
    facts = scan_vault(root)
    stats = accumulate_weekly_stats(facts, birthdate, total_weeks)
    logger.info("Collected stats for %d notes across %d weeks", len(facts), len(stats))
    return stats


class WeekStatsCache:
    """Weekly stats held by the caller between renders; drop it when settings change."""

    def __init__(self) -> None:
        self._key: Optional[Hashable] = None
        self._value: Optional[Dict[int, WeekStats]] = None

    def get_or_compute(
        self,
        key: Hashable,
        compute: Callable[[], Dict[int, WeekStats]],
    ) -> Dict[int, WeekStats]:
        if self._value is None or self._key != key:
            self._value = compute()
            self._key = key
        return self._value

    def invalidate(self) -> None:
        self._key = None
        self._value = None

    @property
    def is_empty(self) -> bool:
        return self._value is None
