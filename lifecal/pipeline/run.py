from __future__ import annotations

import json
import logging
import shutil
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional

from sqlmodel import select

from .. import config
from ..core.calculations import format_date
from ..core.types import CalendarSettings, WeekStats
from ..errors import ConfigError
from ..models import CalendarRender, RenderStatus, get_session, init_db
from ..storage import artifact_path, record_artifacts, slug_from_name
from .render_pdf import render_pdfs
from .render_preview import render_preview
from .resolve import ResolvedCalendar, resolve_calendar

logger = logging.getLogger(__name__)


@dataclass
class RenderResult:
    slug: str
    status: RenderStatus
    artifacts: List[tuple[str, Path]] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    calendar: Optional[ResolvedCalendar] = None


def _write_error(slug: str, message: str) -> None:
    error_path = artifact_path(slug, "error", base_dir=config.OUT_DIR)
    error_path.write_text(message, encoding="utf-8")


def _prepare_temp_dir(slug: str) -> Path:
    temp_dir = config.OUT_DIR / f"{slug}.tmp"
    if temp_dir.exists():
        shutil.rmtree(temp_dir)
    temp_dir.mkdir(parents=True, exist_ok=True)
    return temp_dir


def _finalize_artifacts(
    temp_dir: Path,
    final_dir: Path,
    artifacts: List[tuple[str, Path]],
) -> List[tuple[str, Path]]:
    if final_dir.exists():
        shutil.rmtree(final_dir)
    temp_dir.replace(final_dir)
    return [(artifact_type, final_dir / path.relative_to(temp_dir)) for artifact_type, path in artifacts]


def build_artifacts(cal: ResolvedCalendar, slug: str) -> List[tuple[str, Path]]:
    """Render every artifact into a temp dir, then swap it in as out/<slug>."""
    temp_dir = _prepare_temp_dir(slug)
    try:
        native, a4, letter = render_pdfs(cal, slug, base_dir=temp_dir, include_slug=False)
        preview = render_preview(slug, native, base_dir=temp_dir, include_slug=False)

        layout_path = artifact_path(slug, "layout", base_dir=temp_dir, include_slug=False)
        layout_path.write_text(json.dumps(cal.summary(), indent=2), encoding="utf-8")
    except Exception:
        shutil.rmtree(temp_dir, ignore_errors=True)
        raise

    artifacts = [
        ("pdf_native", native),
        ("pdf_a4", a4),
        ("pdf_usletter", letter),
        ("preview", preview),
        ("layout", layout_path),
    ]
    return _finalize_artifacts(temp_dir, config.OUT_DIR / slug, artifacts)


def render_calendar(
    settings: CalendarSettings,
    name: str,
    today: date | None = None,
    weekly_stats: Optional[Dict[int, WeekStats]] = None,
) -> RenderResult:
    init_db()
    slug = slug_from_name(name)
    today = today or date.today()

    render = CalendarRender(
        slug=slug, birthdate=settings.birthdate, years=settings.years, as_of=format_date(today)
    )
    result = RenderResult(slug=slug, status=RenderStatus.DRAFT)
    fail_code: Optional[str] = None

    try:
        cal = resolve_calendar(settings, today, weekly_stats)
        result.calendar = cal
        render.weeks_lived = cal.weeks_lived
        result.artifacts = build_artifacts(cal, slug)
        result.status = RenderStatus.READY
    except ConfigError as exc:
        logger.warning("Config error for %s: %s", slug, exc)
        result.status = RenderStatus.FAILED
        result.errors = [str(exc)]
        fail_code = "CONFIG_ERROR"
    except Exception as exc:
        logger.exception("Render error for %s", slug)
        result.status = RenderStatus.FAILED
        result.errors = [str(exc)]
        fail_code = "RENDER_ERROR"

    render.status = result.status
    render.fail_code = fail_code
    render.fail_detail = result.errors[0] if result.errors else None
    with get_session() as session:
        session.add(render)
        session.commit()
        session.refresh(render)

    if result.status == RenderStatus.READY:
        record_artifacts(render, result.artifacts)
    else:
        _write_error(slug, "\n".join(result.errors) or "Unknown error")
    return result


def list_renders(slug: str | None = None, limit: int = 20) -> List[CalendarRender]:
    init_db()
    with get_session() as session:
        statement = select(CalendarRender)
        if slug:
            statement = statement.where(CalendarRender.slug == slug)
        statement = statement.order_by(CalendarRender.id.desc()).limit(limit)
        return list(session.exec(statement))
