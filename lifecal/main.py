from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Dict, Optional, Tuple

import typer

from . import config
from .core.calculations import (
    age_in_years_float,
    compute_integer_age_years,
    format_date,
    get_current_year_progress,
    get_date_for_week_index,
    parse_date,
    weeks_lived_since,
)
from .core.layout import week_at_point
from .core.types import CalendarSettings, WeekStats
from .errors import ConfigError, FormatError
from .models import RenderStatus, reset_engine
from .pipeline.details import describe_week, format_week_detail
from .pipeline.resolve import resolve_calendar
from .pipeline.run import list_renders, render_calendar
from .pipeline.stats import WeekStatsCache, collect_weekly_stats
from .settings import is_valid_date_input, load_settings_file, parse_birthdate, resolve_settings

app = typer.Typer(help="Life calendar: weeks from birth laid out on a printable grid")


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # the invocation owns the stats cache; commands share it through the context
    ctx.ensure_object(WeekStatsCache)


def _today(value: Optional[str]) -> date:
    if not value:
        return date.today()
    try:
        return parse_date(value)
    except FormatError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _load(config_path: Path, birthdate: Optional[str]) -> CalendarSettings:
    if birthdate and not is_valid_date_input(birthdate):
        raise typer.BadParameter(f"{birthdate!r} is not a YYYY-MM-DD date", param_hint="--birthdate")
    overrides = load_settings_file(config_path)
    if birthdate:
        overrides["birthdate"] = birthdate
    return resolve_settings(config.DEFAULT_SETTINGS, overrides)


def _weekly_stats(
    settings: CalendarSettings,
    vault: Optional[Path],
    cache: WeekStatsCache,
) -> Optional[Dict[int, WeekStats]]:
    if vault is None or not settings.show_weekly_stats:
        return None
    birthdate = parse_birthdate(settings)
    key = (str(vault.resolve()), format_date(birthdate), settings.years)
    return cache.get_or_compute(
        key, lambda: collect_weekly_stats(vault, birthdate, settings.total_weeks)
    )


def _parse_point(value: str) -> Tuple[float, float]:
    parts = value.split(",")
    try:
        x, y = (float(part) for part in parts)
    except ValueError:
        raise typer.BadParameter(f"{value!r} is not X,Y", param_hint="--at") from None
    return x, y


@app.command()
def render(
    ctx: typer.Context,
    config_path: Path = typer.Argument(..., help="JSON settings file"),
    name: Optional[str] = typer.Option(None, "--name", help="Output name (defaults to the file name)"),
    out: Optional[Path] = typer.Option(None, "--out", help="Output directory"),
    today: Optional[str] = typer.Option(None, "--today", help="Render as of YYYY-MM-DD"),
    vault: Optional[Path] = typer.Option(None, "--vault", help="Notes folder for weekly stats"),
    birthdate: Optional[str] = typer.Option(None, "--birthdate", help="Override the birthdate"),
) -> None:
    if out:
        config.set_out_dir(out)
        reset_engine()
    try:
        settings = _load(config_path, birthdate)
        weekly_stats = _weekly_stats(settings, vault, ctx.ensure_object(WeekStatsCache))
    except (ConfigError, FileNotFoundError) as exc:
        typer.echo(f"Error rendering life calendar: {exc}", err=True)
        raise typer.Exit(code=1)

    result = render_calendar(settings, name or config_path.stem, _today(today), weekly_stats)
    if result.status != RenderStatus.READY:
        typer.echo(f"FAILED: {result.slug}", err=True)
        for error in result.errors:
            typer.echo(f"  {error}", err=True)
        raise typer.Exit(code=1)

    cal = result.calendar
    typer.echo(f"READY: {result.slug}")
    if cal is not None:
        typer.echo(f"Weeks lived: {cal.weeks_lived:,} / {cal.total_weeks:,}")
        typer.echo(f"Events: {len(cal.events)}  Goals: {len(cal.goals)}")
    for artifact_type, path in result.artifacts:
        typer.echo(f"  {artifact_type}: {path}")


@app.command()
def info(
    birthdate: str = typer.Argument(..., help="YYYY-MM-DD"),
    years: int = typer.Option(80, "--years", min=1, help="Rows in the grid"),
    today: Optional[str] = typer.Option(None, "--today", help="As of YYYY-MM-DD"),
) -> None:
    try:
        born = parse_date(birthdate)
    except FormatError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)
    now = _today(today)
    weeks = weeks_lived_since(born, now)
    progress = get_current_year_progress(born, now, years)
    total = years * config.WEEKS_PER_YEAR

    typer.echo(f"Age: {compute_integer_age_years(born, now)} ({age_in_years_float(born, now):.2f} years)")
    typer.echo(f"Week index: {weeks:,} of {total:,}")
    typer.echo(f"Weeks remaining: {max(0, total - weeks):,}")
    typer.echo(
        f"Life-year {progress.current_year_index}: "
        f"{progress.weeks_this_life_year} weeks done, {progress.weeks_left_this_life_year} left"
    )
    typer.echo(f"Current week started: {format_date(get_date_for_week_index(weeks, born))}")


@app.command()
def week(
    ctx: typer.Context,
    config_path: Path = typer.Argument(..., help="JSON settings file"),
    week_index: Optional[int] = typer.Argument(None, min=0, help="Zero-based week index"),
    at: Optional[str] = typer.Option(None, "--at", help="Point X,Y on the native PDF, in points from the top-left corner"),
    vault: Optional[Path] = typer.Option(None, "--vault", help="Notes folder for weekly stats"),
    today: Optional[str] = typer.Option(None, "--today", help="As of YYYY-MM-DD"),
) -> None:
    if (week_index is None) == (at is None):
        raise typer.BadParameter("give either WEEK_INDEX or --at X,Y")
    point = _parse_point(at) if at is not None else None

    try:
        settings = _load(config_path, None)
        stats = _weekly_stats(settings, vault, ctx.ensure_object(WeekStatsCache))
        cal = resolve_calendar(settings, _today(today), stats)
        if point is not None:
            week_index = week_at_point(point[0], point[1], cal.dims)
            if week_index is None:
                typer.echo(f"No week box at {point[0]:g},{point[1]:g}", err=True)
                raise typer.Exit(code=1)
        detail = describe_week(week_index, cal.total_weeks, cal.weekly_stats, cal.events, cal.goals)
    except (ValueError, FileNotFoundError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Starts: {format_date(get_date_for_week_index(week_index, cal.birthdate))}")
    for line in format_week_detail(detail):
        typer.echo(line)


@app.command()
def history(
    slug: Optional[str] = typer.Option(None, "--slug", help="Only this calendar"),
    out: Optional[Path] = typer.Option(None, "--out", help="Output directory"),
    limit: int = typer.Option(20, "--limit", min=1),
) -> None:
    if out:
        config.set_out_dir(out)
        reset_engine()
    renders = list_renders(slug, limit=limit)
    if not renders:
        typer.echo("No renders recorded")
        return
    for item in renders:
        line = f"{item.created_at:%Y-%m-%d %H:%M} {item.slug} {RenderStatus(item.status).value}"
        if item.as_of:
            line += f" as of {item.as_of}"
        if item.fail_code:
            line += f" {item.fail_code}: {item.fail_detail}"
        typer.echo(line)


if __name__ == "__main__":
    app()
