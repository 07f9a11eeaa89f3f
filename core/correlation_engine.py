"""
Correlation Engine — Pearson correlation between energy and life factors.

  - pearson():              zero-variance safe coefficient over paired series
  - correlate():            two dated series paired by calendar date
  - weather_correlations(): temperature / humidity / pressure vs energy
  - sleep_correlations():   duration / quality vs next-day energy
  - habit_correlations():   done vs skipped days, point-biserial coefficient

Every analysis enforces its own minimum sample count and returns
InsufficientData below it instead of a meaningless coefficient.
"""
from datetime import timedelta
from typing import Iterable, Sequence, Union

import numpy as np
import pandas as pd
from loguru import logger

import config
from core.energy_engine import alignment_bucket_score, compute_daily_energy
from core.models import (
    CorrelationResult,
    CorrelationStrength,
    HabitCorrelation,
    HabitLog,
    InsufficientData,
    InvalidInput,
    SleepSession,
    TimeSeriesPoint,
    UserProfile,
    WeatherSample,
    coerce_date,
)

CorrelationOutcome = Union[CorrelationResult, InsufficientData]


# ── Pearson ───────────────────────────────────────────────────────────────────

def pearson(xs: Sequence[float], ys: Sequence[float]) -> float:
    """
    Standard Pearson coefficient over two equal-length series.

    Returns 0.0 when either series has zero variance or both are empty.
    """
    if len(xs) != len(ys):
        raise InvalidInput(f"series lengths differ: {len(xs)} vs {len(ys)}")
    if len(xs) == 0:
        return 0.0

    x = np.asarray(xs, dtype=float)
    y = np.asarray(ys, dtype=float)
    dx = x - x.mean()
    dy = y - y.mean()
    denominator = np.sqrt(np.sum(dx * dx) * np.sum(dy * dy))
    if denominator == 0 or not np.isfinite(denominator):
        return 0.0
    return float(np.clip(np.sum(dx * dy) / denominator, -1.0, 1.0))


def correlation_strength(coefficient: float) -> CorrelationStrength:
    """|r| ≥ 0.7 strong, ≥ 0.4 moderate, ≥ 0.2 weak, else none."""
    r = abs(coefficient)
    if r >= config.CORRELATION_STRONG:
        return CorrelationStrength.STRONG
    if r >= config.CORRELATION_MODERATE:
        return CorrelationStrength.MODERATE
    if r >= config.CORRELATION_WEAK:
        return CorrelationStrength.WEAK
    return CorrelationStrength.NONE


def _generic_description(factor: str, coefficient: float) -> str:
    strength = correlation_strength(coefficient)
    if strength is CorrelationStrength.NONE:
        return f"{factor or 'This factor'} doesn't significantly affect your energy"
    direction = "rises" if coefficient > 0 else "falls"
    return f"Your energy {direction} with {factor or 'this factor'} ({strength.value} relationship)"


def _result(factor: str, xs, ys, describe=None) -> CorrelationResult:
    r = pearson(xs, ys)
    return CorrelationResult(
        factor=factor,
        coefficient=r,
        strength=correlation_strength(r),
        description=describe(r) if describe else _generic_description(factor, r),
        sample_size=len(xs),
    )


# ── Generic dated series ──────────────────────────────────────────────────────

def _series_frame(points: Iterable[TimeSeriesPoint], column: str) -> pd.DataFrame:
    rows = [{"date": coerce_date(p.date), column: float(p.value)} for p in points]
    if not rows:
        return pd.DataFrame(columns=[column], index=pd.Index([], name="date"))
    return pd.DataFrame(rows).groupby("date").mean()


def pair_by_date(series_a: Iterable[TimeSeriesPoint], series_b: Iterable[TimeSeriesPoint]) -> pd.DataFrame:
    """Inner join of two dated series. Duplicate dates within a series are averaged."""
    return _series_frame(series_a, "a").join(_series_frame(series_b, "b"), how="inner").sort_index()


def correlate(
    series_a: Iterable[TimeSeriesPoint],
    series_b: Iterable[TimeSeriesPoint],
    factor: str = "",
    min_samples: int = config.CORRELATION_MIN_SAMPLES,
) -> CorrelationOutcome:
    """
    Correlate two dated series on the dates they share.

    Returns:
        CorrelationResult, or InsufficientData when fewer than min_samples
        dates are shared
    """
    paired = pair_by_date(series_a, series_b)
    if len(paired) < min_samples:
        logger.info(f"correlate {factor or '-'}: {len(paired)} paired points, need {min_samples}")
        return InsufficientData(
            reason=f"need at least {min_samples} paired dates",
            required=min_samples,
            available=len(paired),
        )
    result = _result(factor, paired["a"].tolist(), paired["b"].tolist())
    logger.debug(f"correlate {factor or '-'}: r={result.coefficient:.3f} n={result.sample_size}")
    return result


# ── Weather ───────────────────────────────────────────────────────────────────

def _describe(positive_strong, negative_strong, positive_weak, negative_weak, neutral):
    def describe(r: float) -> str:
        if r > 0.5:
            return positive_strong
        if r < -0.5:
            return negative_strong
        if r > 0.2:
            return positive_weak
        if r < -0.2:
            return negative_weak
        return neutral
    return describe


_WEATHER_DESCRIPTIONS = {
    "temperature": _describe(
        "Your energy increases with warmer temperatures",
        "Your energy decreases in warmer weather - you prefer cooler temperatures",
        "You tend to have slightly more energy in warmer weather",
        "You tend to have slightly less energy in warmer weather",
        "Temperature doesn't significantly affect your energy",
    ),
    "humidity": _describe(
        "Higher humidity boosts your energy",
        "High humidity drains your energy - you prefer drier air",
        "You have slightly more energy in humid conditions",
        "You have slightly less energy when humidity is high",
        "Humidity doesn't significantly affect your energy",
    ),
    "pressure": _describe(
        "High atmospheric pressure boosts your energy",
        "Low pressure (stormy weather) drains your energy",
        "You have slightly more energy in high pressure systems",
        "You have slightly less energy in low pressure systems",
        "Atmospheric pressure doesn't significantly affect your energy",
    ),
}


def weather_correlations(samples: Iterable[WeatherSample]) -> Union[list[CorrelationResult], InsufficientData]:
    """Temperature, humidity and pressure vs the energy logged on that day."""
    rated = [s for s in samples if s.energy_level is not None]
    need = config.CORRELATION_MIN_SAMPLES
    if len(rated) < need:
        logger.info(f"Weather correlation: {len(rated)} rated days, need {need}")
        return InsufficientData(reason="track energy on more weather days", required=need, available=len(rated))

    energy = [s.energy_level for s in rated]
    return [
        _result(factor, [getattr(s, factor) for s in rated], energy, describe)
        for factor, describe in _WEATHER_DESCRIPTIONS.items()
    ]


# ── Sleep ─────────────────────────────────────────────────────────────────────

_SLEEP_DESCRIPTIONS = {
    "duration": _describe(
        "Strong positive correlation: more sleep = more energy for you",
        "Longer nights leave you with less energy the next day",
        "You tend to have slightly more energy after longer nights",
        "You tend to have slightly less energy after longer nights",
        "Your energy might be affected by sleep quality more than duration",
    ),
    "quality": _describe(
        "Restful nights reliably lift your next-day energy",
        "Your next-day energy moves against your sleep quality rating",
        "Better sleep quality gives you a slight energy lift",
        "Better sleep quality comes with slightly lower next-day energy",
        "Sleep quality doesn't significantly affect your energy",
    ),
}


def sleep_correlations(sessions: Iterable[SleepSession]) -> Union[list[CorrelationResult], InsufficientData]:
    """Sleep duration and quality vs next-day energy."""
    rated = [s for s in sessions if s.next_day_energy is not None]
    need = config.CORRELATION_MIN_SAMPLES
    if len(rated) < need:
        logger.info(f"Sleep correlation: {len(rated)} rated nights, need {need}")
        return InsufficientData(reason="log next-day energy for more nights", required=need, available=len(rated))

    energy = [s.next_day_energy for s in rated]
    return [
        _result(factor, [getattr(s, factor) for s in rated], energy, describe)
        for factor, describe in _SLEEP_DESCRIPTIONS.items()
    ]


# ── Habits ────────────────────────────────────────────────────────────────────

def _habit_recommendation(habit: str, impact: str, impact_score: float) -> str:
    magnitude = abs(round(impact_score))
    if impact == "positive":
        return f"{habit} boosts your energy by {magnitude}%. Try to do this more often!"
    if impact == "negative":
        return f"{habit} reduces your energy by {magnitude}%. Consider reducing this habit."
    return f"{habit} has minimal impact on your energy levels."


def habit_correlations(
    profile: UserProfile,
    logs: Iterable[HabitLog],
    as_of,
    window_days: int = config.HABIT_WINDOW_DAYS,
) -> dict[str, Union[HabitCorrelation, InsufficientData]]:
    """
    Per-habit comparison of the day's alignment score on done vs skipped days.

    Only logs in the window_days ending at as_of (inclusive) count. A habit
    needs at least HABIT_MIN_LOGS logs with both outcomes present; otherwise
    its entry is InsufficientData.
    """
    end = coerce_date(as_of, "as_of")
    start = end - timedelta(days=window_days - 1)

    by_habit: dict[str, list[HabitLog]] = {}
    for log in logs:
        day = coerce_date(log.date)
        if start <= day <= end:
            by_habit.setdefault(log.habit, []).append(HabitLog(log.habit, day, bool(log.completed)))

    scores: dict = {}
    results: dict[str, Union[HabitCorrelation, InsufficientData]] = {}
    for habit, entries in sorted(by_habit.items()):
        done = [e for e in entries if e.completed]
        skipped = [e for e in entries if not e.completed]
        if len(entries) < config.HABIT_MIN_LOGS or not done or not skipped:
            results[habit] = InsufficientData(
                reason="need done and skipped days in the window",
                required=config.HABIT_MIN_LOGS,
                available=len(entries),
            )
            continue

        for e in entries:
            if e.date not in scores:
                record = compute_daily_energy(profile, e.date)
                scores[e.date] = alignment_bucket_score(record.connection.alignment)

        done_avg = float(np.mean([scores[e.date] for e in done]))
        skipped_avg = float(np.mean([scores[e.date] for e in skipped]))
        impact_score = done_avg - skipped_avg
        if impact_score > config.HABIT_IMPACT_BAND:
            impact = "positive"
        elif impact_score < -config.HABIT_IMPACT_BAND:
            impact = "negative"
        else:
            impact = "neutral"

        r = pearson([1.0 if e.completed else 0.0 for e in entries], [scores[e.date] for e in entries])
        results[habit] = HabitCorrelation(
            habit=habit,
            total_logs=len(entries),
            average_when_done=done_avg,
            average_when_skipped=skipped_avg,
            impact_score=impact_score,
            impact=impact,
            correlation=CorrelationResult(
                factor=habit,
                coefficient=r,
                strength=correlation_strength(r),
                description=_generic_description(habit, r),
                sample_size=len(entries),
            ),
            recommendation=_habit_recommendation(habit, impact, impact_score),
        )
        logger.debug(f"Habit {habit}: done {done_avg:.1f} vs skipped {skipped_avg:.1f} → {impact}")

    return results
