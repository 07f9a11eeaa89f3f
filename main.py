"""
Energy Alignment Engine
Entry point. Loads a profile, runs one query and renders it to the terminal.

Run:
    python main.py today     --profile profile.example.json
    python main.py range     --profile profile.example.json --start 2025-12-01 --end 2025-12-07
    python main.py forecast  --profile profile.example.json --history energy.csv --days 7
    python main.py patterns  --profile profile.example.json --journal journal.csv
    python main.py correlate --profile profile.example.json --weather weather.csv --sleep sleep.csv
"""
import argparse
import json
import os
import sys
from datetime import date, datetime
from pathlib import Path

from loguru import logger
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

import config
from core.correlation_engine import correlate, habit_correlations, sleep_correlations, weather_correlations
from core.dosha import dosha_guidance
from core.energy_engine import compute_daily_energy, compute_energy_for_range
from core.forecast_engine import forecast
from core.history_loader import (
    load_energy_history,
    load_habit_completions,
    load_habit_logs,
    load_journal_entries,
    load_sleep_sessions,
    load_weather_samples,
)
from core.models import InsufficientData, InvalidInput, UserProfile, coerce_datetime
from core.pattern_engine import recognize_patterns
from core.trends import summarize_range
from core.weekday import weekday_color

console = Console()

ALIGNMENT_STYLE = {
    "strong":      "bold green",
    "moderate":    "yellow",
    "challenging": "bold red",
}
TREND_STYLE = {"improving": "green", "declining": "red", "stable": "white"}


# ── Load profile ───────────────────────────────────────────────────────────────

def load_profile(path: str) -> UserProfile:
    profile_path = Path(path)
    if not profile_path.exists():
        logger.error(f"Profile '{profile_path}' not found")
        sys.exit(1)
    with open(profile_path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidInput(f"Profile '{profile_path}' is not valid JSON: {e}") from e
    profile = UserProfile.from_dict(data)
    logger.info(f"Loaded profile {profile.name or '(unnamed)'} born {profile.date_of_birth}")
    return profile


def _insufficient(title: str, result: InsufficientData):
    console.print(Panel(
        f"{result.reason}\nhave {result.available}, need {result.required}",
        title=f"[bold]{title}[/bold]",
        border_style="dim white",
        expand=False,
    ))


# ── Console display ────────────────────────────────────────────────────────────

def display_record(record, guidance: dict):
    conn = record.connection
    style = ALIGNMENT_STYLE[conn.alignment.value]

    table = Table(box=box.ROUNDED, show_header=False, padding=(0, 1))
    table.add_column("Key", style="dim")
    table.add_column("Value", style="bold")

    table.add_row("Alignment",    f"[{style}]{conn.alignment.value.upper()}[/{style}]  ({conn.score:.3f})")
    table.add_row("Perfect Day",  str(record.perfect_day_score))
    table.add_row("", "")
    table.add_row("You",          f"{record.user_energy.label}  ({record.user_energy.intensity})")
    table.add_row("",             f"[dim]{record.user_energy.description}[/dim]")
    table.add_row("Today",        f"{record.environmental_energy.label}  ({record.environmental_energy.intensity})")
    table.add_row("",             f"[dim]{record.environmental_energy.description}[/dim]")
    table.add_row("", "")
    table.add_row("Life Path",    str(record.life_path))
    table.add_row("Personal Year", str(record.personal_year))
    table.add_row("Day Number",   str(record.day_number))
    table.add_row("Elements",     f"{record.birth_element.value} → {record.year_element.value}")
    table.add_row("Lunar Phase",  f"{record.lunar_phase.label}  ({record.lunar_fraction:.3f})")
    table.add_row("Day Colour",   weekday_color(record.date.weekday()))
    table.add_row("", "")
    table.add_row("Dosha",        f"{guidance['dosha']}  ({guidance['energy_level']})")
    table.add_row("Peak Hours",   guidance["peak_hours"])
    table.add_row("Focus",        guidance["business_focus"])

    console.print(Panel(table, title=f"[bold]Daily Energy — {record.date.date()}[/bold]", expand=False))
    console.print(f"[{style}]{conn.summary}[/{style}]")


def display_range(records, summary):
    table = Table(box=box.ROUNDED)
    table.add_column("Date")
    table.add_column("You", justify="right")
    table.add_column("Today", justify="right")
    table.add_column("Alignment")
    table.add_column("Score", justify="right")
    table.add_column("Moon")
    for r in records:
        style = ALIGNMENT_STYLE[r.connection.alignment.value]
        table.add_row(
            f"{r.date.date()} {r.date.strftime('%a')}",
            str(r.user_energy.intensity),
            str(r.environmental_energy.intensity),
            f"[{style}]{r.connection.alignment.value}[/{style}]",
            str(r.perfect_day_score),
            r.lunar_phase.label,
        )
    console.print(table)

    slope = "n/a" if summary.slope is None else f"{summary.slope:+.2f}/day"
    console.print(Panel(
        "\n".join(summary.insights)
        + f"\n\n[dim]avg you {summary.average_user_energy} · avg today {summary.average_environmental_energy}"
        + f" · avg score {summary.average_alignment} · slope {slope}[/dim]",
        title="[bold]Trend[/bold]",
        border_style="cyan",
        expand=False,
    ))


def display_forecast(result):
    table = Table(box=box.ROUNDED)
    table.add_column("Date")
    table.add_column("Energy", justify="right")
    table.add_column("Conf.", justify="right")
    table.add_column("Trend")
    table.add_column("Moon")
    table.add_column("Top recommendation")
    for d in result:
        style = TREND_STYLE[d.trend.value]
        table.add_row(
            f"{d.date} {d.date.strftime('%a')}",
            str(d.predicted_energy),
            f"{d.confidence}%",
            f"[{style}]{d.trend.value}[/{style}]",
            d.lunar_phase.label,
            d.recommendations[0] if d.recommendations else "",
        )
    console.print(table)
    style = TREND_STYLE[result.overall_trend.value]
    console.print(
        f"Overall [{style}]{result.overall_trend.value}[/{style}] · avg {result.average_energy} · "
        f"best {result.best_day} · worst {result.worst_day} · confidence {result.confidence}%"
    )


def display_patterns(patterns):
    if not patterns:
        console.print("[dim]No bucket has enough samples for a pattern yet.[/dim]")
        return
    for p in patterns:
        console.print(Panel(
            f"{p.description}\n\n[bold]→[/bold] {p.recommendation}\n"
            f"[dim]confidence {p.confidence}% · n={p.sample_count} · impact {p.impact.value}[/dim]",
            title=f"[bold]{p.title}[/bold]",
            border_style="magenta",
            expand=False,
        ))


def display_correlations(title: str, results):
    if isinstance(results, InsufficientData):
        _insufficient(title, results)
        return
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Factor")
    table.add_column("r", justify="right")
    table.add_column("Strength")
    table.add_column("n", justify="right")
    table.add_column("Reading")
    for r in results:
        table.add_row(r.factor, f"{r.coefficient:+.2f}", r.strength.value, str(r.sample_size), r.description)
    console.print(table)


def display_habits(results: dict):
    table = Table(title="Habits", box=box.ROUNDED)
    table.add_column("Habit")
    table.add_column("Done", justify="right")
    table.add_column("Skipped", justify="right")
    table.add_column("Impact")
    table.add_column("r", justify="right")
    table.add_column("Recommendation")
    for habit, h in results.items():
        if isinstance(h, InsufficientData):
            table.add_row(habit, "-", "-", "[dim]insufficient[/dim]", "-", h.reason)
            continue
        table.add_row(
            habit,
            f"{h.average_when_done:.0f}",
            f"{h.average_when_skipped:.0f}",
            h.impact,
            f"{h.correlation.coefficient:+.2f}",
            h.recommendation,
        )
    console.print(table)


# ── Commands ───────────────────────────────────────────────────────────────────

def cmd_today(args, profile: UserProfile):
    when = coerce_datetime(args.date) if args.date else datetime.now()
    record = compute_daily_energy(profile, when)
    if args.json:
        console.print_json(json.dumps(record.to_dict()))
        return
    display_record(record, dosha_guidance(record.dosha, when))


def cmd_range(args, profile: UserProfile):
    records = compute_energy_for_range(profile, args.start, args.end)
    if not records:
        logger.warning(f"Empty range: {args.start} → {args.end}")
        return
    summary = summarize_range(records)
    if args.json:
        console.print_json(json.dumps({
            "records": [r.to_dict() for r in records],
            "summary": summary.to_dict(),
        }))
        return
    display_range(records, summary)


def cmd_forecast(args, profile: UserProfile):
    history = load_energy_history(args.history) if args.history else []
    result = forecast(
        profile,
        history,
        days_ahead=args.days,
        start=args.start,
        sleep_sessions=load_sleep_sessions(args.sleep) if args.sleep else None,
        habit_completions=load_habit_completions(args.habits) if args.habits else None,
        weather=load_weather_samples(args.weather) if args.weather else None,
    )
    if args.json:
        console.print_json(json.dumps(result.to_dict()))
        return
    display_forecast(result)


def cmd_patterns(args, profile: UserProfile):
    result = recognize_patterns(profile, load_journal_entries(args.journal))
    if args.json:
        payload = result.to_dict() if isinstance(result, InsufficientData) else [p.to_dict() for p in result]
        console.print_json(json.dumps(payload))
        return
    if isinstance(result, InsufficientData):
        _insufficient("Patterns", result)
        return
    display_patterns(result)


def cmd_correlate(args, profile: UserProfile):
    payload = {}
    if args.series_a and args.series_b:
        result = correlate(load_energy_history(args.series_a), load_energy_history(args.series_b), factor=args.factor)
        payload["series"] = result.to_dict()
        if not args.json:
            display_correlations("Series", result if isinstance(result, InsufficientData) else [result])
    if args.weather:
        result = weather_correlations(load_weather_samples(args.weather))
        payload["weather"] = result.to_dict() if isinstance(result, InsufficientData) else [r.to_dict() for r in result]
        if not args.json:
            display_correlations("Weather", result)
    if args.sleep:
        result = sleep_correlations(load_sleep_sessions(args.sleep))
        payload["sleep"] = result.to_dict() if isinstance(result, InsufficientData) else [r.to_dict() for r in result]
        if not args.json:
            display_correlations("Sleep", result)
    if args.habits:
        as_of = args.as_of or date.today()
        result = habit_correlations(profile, load_habit_logs(args.habits), as_of)
        payload["habits"] = {k: v.to_dict() for k, v in result.items()}
        if not args.json:
            display_habits(result)
    if not payload:
        logger.warning("Nothing to correlate — pass --weather, --sleep, --habits or --series-a/--series-b")
    elif args.json:
        console.print_json(json.dumps(payload))


# ── Entry point ────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Energy alignment engine")
    parser.add_argument("--profile", type=str, default="profile.example.json", help="Profile JSON file")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of tables")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("today", help="Daily energy for one date")
    p.add_argument("--date", type=str, default=None, help="Date or datetime (default: now)")
    p.set_defaults(func=cmd_today)

    p = sub.add_parser("range", help="Daily energy over an inclusive date range")
    p.add_argument("--start", type=str, required=True)
    p.add_argument("--end", type=str, required=True)
    p.set_defaults(func=cmd_range)

    p = sub.add_parser("forecast", help="Multi-day energy forecast")
    p.add_argument("--history", type=str, default=None, help="CSV/JSON: date,value")
    p.add_argument("--days", type=int, default=config.FORECAST_DAYS)
    p.add_argument("--start", type=str, default=None, help="First forecast day (default: today)")
    p.add_argument("--sleep", type=str, default=None, help="CSV/JSON: date,duration,quality,next_day_energy")
    p.add_argument("--habits", type=str, default=None, help="CSV/JSON: habit,energy_before,energy_after")
    p.add_argument("--weather", type=str, default=None, help="CSV/JSON: date,temperature,...,energy_level")
    p.set_defaults(func=cmd_forecast)

    p = sub.add_parser("patterns", help="Best weekday, time of day and lunar phase")
    p.add_argument("--journal", type=str, required=True, help="CSV/JSON: timestamp,score")
    p.set_defaults(func=cmd_patterns)

    p = sub.add_parser("correlate", help="Correlate energy with weather, sleep, habits or another series")
    p.add_argument("--series-a", type=str, default=None, help="CSV/JSON: date,value")
    p.add_argument("--series-b", type=str, default=None, help="CSV/JSON: date,value")
    p.add_argument("--factor", type=str, default="", help="Label for --series-a")
    p.add_argument("--weather", type=str, default=None)
    p.add_argument("--sleep", type=str, default=None)
    p.add_argument("--habits", type=str, default=None, help="CSV/JSON: habit,date,completed")
    p.add_argument("--as-of", type=str, default=None, help="End of the habit window (default: today)")
    p.set_defaults(func=cmd_correlate)
    return parser


def _configure_logging():
    os.makedirs(config.LOG_DIR, exist_ok=True)
    logger.remove()
    logger.add(
        sys.stderr,
        level=config.LOG_LEVEL,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )
    logger.add(
        os.path.join(config.LOG_DIR, "energy_engine_{time:YYYY-MM-DD}.log"),
        rotation="1 day",
        retention="30 days",
        level="DEBUG",
    )


def main(argv=None):
    args = build_parser().parse_args(argv)
    _configure_logging()
    try:
        args.func(args, load_profile(args.profile))
    except InvalidInput as e:
        logger.error(str(e))
        sys.exit(2)


if __name__ == "__main__":
    main()
