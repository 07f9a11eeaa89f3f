"""
Pattern Engine — best weekday, time of day and lunar phase from history.

Every log is scored (its own score, or the day's perfect-day score), then
bucketed three ways. Within each dimension the bucket with the highest mean
wins, provided it holds enough samples.
"""
import math
from typing import Iterable, Union

import pandas as pd
from loguru import logger

import config
from core.astro_engine import get_lunar_phase
from core.energy_engine import compute_daily_energy
from core.models import (
    Impact,
    InsufficientData,
    InvalidInput,
    JournalEntry,
    LunarPhase,
    PatternKind,
    RecognizedPattern,
    TimeOfDay,
    UserProfile,
    coerce_datetime,
)
from core.weekday import DAY_NAMES


def time_of_day(hour: int) -> TimeOfDay:
    """6-11 morning, 12-17 afternoon, every other hour evening."""
    for name, (start, end) in config.TIME_OF_DAY_HOURS.items():
        if start <= hour < end:
            return TimeOfDay(name)
    return TimeOfDay.EVENING


def _confidence(kind: PatternKind, samples: int) -> int:
    _, base, step, cap = config.PATTERN_RULES[kind.value]
    return min(cap, base + samples * step)


def _lift(score: float) -> int:
    """Percent above the neutral 50 baseline."""
    return round((score - 50) / 50 * 100)


def _score_logs(profile: UserProfile, logs: Iterable[JournalEntry]) -> pd.DataFrame:
    rows = []
    for log in logs:
        ts = coerce_datetime(log.timestamp, "timestamp")
        if log.score is None:
            record = compute_daily_energy(profile, ts)
            score, phase = record.perfect_day_score, record.lunar_phase
        else:
            try:
                score = float(log.score)
            except (TypeError, ValueError) as e:
                raise InvalidInput(f"score at {ts} is not a number: {log.score!r}") from e
            if not math.isfinite(score):
                raise InvalidInput(f"score at {ts} is not finite: {log.score!r}")
            phase, _ = get_lunar_phase(ts)
        rows.append({
            "date": ts.date(),
            "score": score,
            "day_of_week": DAY_NAMES[ts.weekday()],
            "time_of_day": time_of_day(ts.hour).value,
            "lunar_phase": phase.value,
        })
    return pd.DataFrame(rows, columns=["date", "score", "day_of_week", "time_of_day", "lunar_phase"])


def _best_bucket(frame: pd.DataFrame, column: str, order: list) -> tuple[str, float, int]:
    """Highest-mean bucket, ties broken by natural bucket order."""
    stats = frame.groupby(column)["score"].agg(["mean", "count"]).reindex(order).dropna()
    key = stats["mean"].idxmax()
    return key, float(stats.loc[key, "mean"]), int(stats.loc[key, "count"])


def _day_pattern(frame: pd.DataFrame, best_time: str):
    day, score, n = _best_bucket(frame, "day_of_week", list(DAY_NAMES))
    if n < config.PATTERN_RULES[PatternKind.DAY_OF_WEEK.value][0]:
        return None
    if score >= config.PATTERN_DAY_HIGH_IMPACT:
        impact = Impact.HIGH
    elif score >= config.PATTERN_DAY_MEDIUM_IMPACT:
        impact = Impact.MEDIUM
    else:
        impact = Impact.LOW
    return RecognizedPattern(
        kind=PatternKind.DAY_OF_WEEK,
        key=day,
        title=f"{day}s Are Your Power Days",
        description=(
            f"Your performance peaks on {day}s with an average score of {round(score)}. "
            f"You're {_lift(score)}% more effective than your baseline."
        ),
        confidence=_confidence(PatternKind.DAY_OF_WEEK, n),
        sample_count=n,
        average_score=score,
        impact=impact,
        recommendation=(
            f"Schedule your most important meetings and decisions on {day}s, "
            f"especially during {best_time}."
        ),
    )


def _time_pattern(frame: pd.DataFrame):
    slot, score, n = _best_bucket(frame, "time_of_day", [t.value for t in TimeOfDay])
    if n < config.PATTERN_RULES[PatternKind.TIME_OF_DAY.value][0]:
        return None
    window = config.TIME_OF_DAY_WINDOWS[slot]
    return RecognizedPattern(
        kind=PatternKind.TIME_OF_DAY,
        key=slot,
        title=f"Peak Performance: {slot.capitalize()}",
        description=(
            f"Your energy consistently peaks during {slot} hours ({window}). "
            f"Average score: {round(score)}."
        ),
        confidence=_confidence(PatternKind.TIME_OF_DAY, n),
        sample_count=n,
        average_score=score,
        impact=Impact.HIGH,
        recommendation=(
            f"Block {window} for your most demanding work. "
            "Avoid scheduling routine tasks during this golden window."
        ),
    )


def _lunar_pattern(frame: pd.DataFrame):
    phase, score, n = _best_bucket(frame, "lunar_phase", [p.value for p in LunarPhase])
    if n < config.PATTERN_RULES[PatternKind.LUNAR_PHASE.value][0]:
        return None
    label = LunarPhase(phase).label
    return RecognizedPattern(
        kind=PatternKind.LUNAR_PHASE,
        key=phase,
        title=f"{label} Advantage",
        description=(
            f"You perform {_lift(score)}% better during {label} phases. "
            f"This lunar pattern has appeared {n} times."
        ),
        confidence=_confidence(PatternKind.LUNAR_PHASE, n),
        sample_count=n,
        average_score=score,
        impact=Impact.MEDIUM,
        recommendation=(
            f"Plan major initiatives to align with {label} phases. "
            "Check the lunar calendar when scheduling critical events."
        ),
    )


def recognize_patterns(
    profile: UserProfile,
    logs: Iterable[JournalEntry],
    min_days: int = config.PATTERN_MIN_DAYS,
) -> Union[list[RecognizedPattern], InsufficientData]:
    """
    Mine weekday, time-of-day and lunar-phase patterns from timestamped logs.

    Returns:
        list of RecognizedPattern (possibly empty when no bucket clears its
        sample gate), or InsufficientData with fewer than min_days distinct days
    """
    if not isinstance(profile, UserProfile):
        raise InvalidInput(f"profile must be a UserProfile, got {type(profile).__name__}")

    frame = _score_logs(profile, logs)
    days = frame["date"].nunique()
    if days < min_days:
        logger.info(f"Pattern recognition: {days} days of history, need {min_days}")
        return InsufficientData(
            reason=f"need at least {min_days} days of history",
            required=min_days,
            available=int(days),
        )

    time_pattern = _time_pattern(frame)
    best_time = _best_bucket(frame, "time_of_day", [t.value for t in TimeOfDay])[0]
    patterns = [
        p for p in (
            _day_pattern(frame, config.TIME_OF_DAY_WINDOWS[best_time]),
            time_pattern,
            _lunar_pattern(frame),
        )
        if p is not None
    ]
    logger.info(f"Pattern recognition: {len(frame)} logs over {days} days → {len(patterns)} patterns")
    for p in patterns:
        logger.debug(f"  {p.kind.value}: {p.key} avg {p.average_score:.1f} (n={p.sample_count}, conf {p.confidence})")
    return patterns
