"""
History loaders — CSV / JSON files into the engine's history types.

The engine itself never does I/O; these helpers sit at the edge for the CLI
and for callers that keep their logs as flat files. A file is read with
pandas (CSV, or JSON records when the suffix is .json), dates are parsed,
and each row becomes one dataclass instance. Optional columns may be absent
or blank.
"""
from pathlib import Path
from typing import Callable, Optional

import pandas as pd
from loguru import logger

from core.models import (
    HabitCompletion,
    HabitLog,
    InvalidInput,
    JournalEntry,
    SleepSession,
    TimeSeriesPoint,
    WeatherSample,
)


def _read(path) -> pd.DataFrame:
    path = Path(path)
    if not path.exists():
        raise InvalidInput(f"history file not found: {path}")
    if path.suffix.lower() == ".json":
        df = pd.read_json(path, orient="records")
    else:
        df = pd.read_csv(path)
    logger.debug(f"Loaded {len(df)} rows from {path}")
    return df


def _require(df: pd.DataFrame, path, *columns: str):
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise InvalidInput(f"{path}: missing column(s) {', '.join(missing)}")


def _dates(df: pd.DataFrame, column: str, path) -> pd.Series:
    try:
        return pd.to_datetime(df[column], format="mixed")
    except (ValueError, TypeError) as e:
        raise InvalidInput(f"{path}: unparseable {column} values") from e


def _optional(row, column: str, cast: Callable = float) -> Optional[float]:
    value = row.get(column)
    if value is None or pd.isna(value):
        return None
    return cast(value)


def _as_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "y", "done")
    return bool(value)


# ── Loaders ───────────────────────────────────────────────────────────────────

def load_energy_history(path) -> list[TimeSeriesPoint]:
    """Columns: date, and one of value / energy / score."""
    df = _read(path)
    value_col = next((c for c in ("value", "energy", "score") if c in df.columns), None)
    _require(df, path, "date")
    if value_col is None:
        raise InvalidInput(f"{path}: needs a value, energy or score column")
    df["date"] = _dates(df, "date", path)
    df = df.dropna(subset=[value_col])
    return [TimeSeriesPoint(ts.date(), float(v)) for ts, v in zip(df["date"], df[value_col])]


def load_sleep_sessions(path) -> list[SleepSession]:
    """Columns: date, duration, quality, next_day_energy (optional)."""
    df = _read(path)
    _require(df, path, "date", "duration", "quality")
    df["date"] = _dates(df, "date", path)
    return [
        SleepSession(
            date=row["date"].date(),
            duration=float(row["duration"]),
            quality=float(row["quality"]),
            next_day_energy=_optional(row, "next_day_energy"),
        )
        for row in df.to_dict("records")
    ]


def load_weather_samples(path) -> list[WeatherSample]:
    """Columns: date, temperature, humidity, pressure, condition, energy_level (optional)."""
    df = _read(path)
    _require(df, path, "date", "temperature")
    df["date"] = _dates(df, "date", path)
    return [
        WeatherSample(
            date=row["date"].date(),
            temperature=float(row["temperature"]),
            humidity=_optional(row, "humidity") or 0.0,
            pressure=_optional(row, "pressure") or 0.0,
            condition=_optional(row, "condition", str) or "",
            energy_level=_optional(row, "energy_level"),
        )
        for row in df.to_dict("records")
    ]


def load_habit_logs(path) -> list[HabitLog]:
    """Columns: habit, date, completed."""
    df = _read(path)
    _require(df, path, "habit", "date", "completed")
    df["date"] = _dates(df, "date", path)
    return [
        HabitLog(habit=str(row["habit"]), date=row["date"].date(), completed=_as_bool(row["completed"]))
        for row in df.to_dict("records")
    ]


def load_habit_completions(path) -> list[HabitCompletion]:
    """Columns: habit, energy_before (optional), energy_after (optional)."""
    df = _read(path)
    _require(df, path, "habit")
    return [
        HabitCompletion(
            habit=str(row["habit"]),
            energy_before=_optional(row, "energy_before"),
            energy_after=_optional(row, "energy_after"),
        )
        for row in df.to_dict("records")
    ]


def load_journal_entries(path) -> list[JournalEntry]:
    """Columns: timestamp, score (optional)."""
    df = _read(path)
    _require(df, path, "timestamp")
    df["timestamp"] = _dates(df, "timestamp", path)
    return [
        JournalEntry(timestamp=row["timestamp"].to_pydatetime(), score=_optional(row, "score"))
        for row in df.to_dict("records")
    ]
