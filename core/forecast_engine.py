"""
Forecast Engine — multi-day energy prediction.

For each forecast day, starting from the trailing baseline:
  1. Lunar-cycle term (4-segment piecewise-linear curve over the phase fraction)
  2. Fixed weekday offset
  3. Historical weekday deviation ×0.3, only where that weekday has history
  4. Sleep quality impact ×0.4
  5. Habit completion boost at 70% completion ×0.2
  6. Weather placeholder (weight 0.1, no contribution)

Energy is clamped to [0, 100] and confidence capped at 95.
"""
from datetime import date, timedelta
from typing import Iterable, Optional

import numpy as np
from loguru import logger

import config
from core.astro_engine import lunar_phase_fraction
from core.correlation_engine import weather_correlations
from core.energy_engine import clamp, compute_daily_energy
from core.models import (
    CorrelationResult,
    EnergyForecast,
    ForecastDay,
    ForecastFactor,
    HabitCompletion,
    InvalidInput,
    SleepSession,
    TimeSeriesPoint,
    Trend,
    UserProfile,
    WeatherSample,
    coerce_date,
)
from core.score_history import ScoreHistory
from core.weekday import day_name


# ── Factor analysis ───────────────────────────────────────────────────────────

def lunar_impact(fraction: float) -> float:
    """Additive lunar term for a phase fraction in [0, 1)."""
    fraction %= 1.0
    start = 0.0
    for end, intercept, slope in config.FORECAST_LUNAR_SEGMENTS:
        if fraction < end:
            break
        start = end
    return intercept + slope * (fraction - start)


def analyze_sleep_pattern(sessions: Optional[Iterable[SleepSession]]) -> dict:
    """
    Best-rested duration and the average quality-weighted next-day lift.
    Falls back to defaults with fewer than 3 rated nights.
    """
    rated = [s for s in (sessions or []) if s.next_day_energy is not None]
    if len(rated) < config.SLEEP_MIN_SESSIONS:
        return {"optimal_duration": config.SLEEP_DEFAULT_DURATION, "quality_impact": config.SLEEP_DEFAULT_IMPACT}

    groups: dict[int, list[float]] = {}
    for s in rated:
        groups.setdefault(int(round(s.duration)), []).append(s.next_day_energy)

    optimal, best = config.SLEEP_DEFAULT_DURATION, 0.0
    for duration, energies in groups.items():
        avg = float(np.mean(energies))
        if avg > best:
            optimal, best = duration, avg

    quality_impact = float(np.mean([(s.next_day_energy - 50) * (s.quality / 5) for s in rated]))
    return {"optimal_duration": optimal, "quality_impact": quality_impact}


def analyze_habit_pattern(completions: Optional[Iterable[HabitCompletion]]) -> dict:
    """Average before/after energy lift per completion, clamped to 3..10 (default 5)."""
    deltas = [
        c.energy_after - c.energy_before
        for c in (completions or [])
        if c.energy_before is not None and c.energy_after is not None
    ]
    avg = float(np.mean(deltas)) if deltas else config.HABIT_DEFAULT_BOOST
    low, high = config.HABIT_BOOST_RANGE
    return {"completion_boost": clamp(avg, low, high)}


def _weather_note(weather: Optional[Iterable[WeatherSample]]) -> str:
    if weather is None:
        return "Weather conditions may affect your energy"
    results = weather_correlations(weather)
    if not isinstance(results, list):
        return "Weather conditions may affect your energy"
    strongest: CorrelationResult = max(results, key=lambda r: abs(r.coefficient))
    return strongest.description


def _band(value: float, band: float) -> str:
    if value > band:
        return "positive"
    if value < -band:
        return "negative"
    return "neutral"


def _trend(current: float, reference: float) -> Trend:
    if current > reference + config.FORECAST_TREND_BAND:
        return Trend.IMPROVING
    if current < reference - config.FORECAST_TREND_BAND:
        return Trend.DECLINING
    return Trend.STABLE


# ── Recommendations ───────────────────────────────────────────────────────────

def _recommendations(predicted: float, weekday: int) -> tuple:
    if predicted < config.FORECAST_LOW_ENERGY_BELOW:
        recs = [
            "Low energy predicted - schedule light tasks and prioritize rest",
            "Ensure you get quality sleep the night before",
            "Eat energy-boosting foods throughout the day",
        ]
    elif predicted > config.FORECAST_HIGH_ENERGY_ABOVE:
        recs = [
            "High energy day - tackle your most challenging tasks",
            "Great day for exercise or physical activities",
            "Schedule important meetings or creative work",
        ]
    else:
        recs = [
            "Moderate energy - balance challenging and routine tasks",
            "Good day for steady, focused work",
        ]

    if weekday == 0:
        recs.append("Start the week strong with your morning routine")
    elif weekday == 4:
        recs.append("End the week on a high note - plan something enjoyable")
    elif weekday >= 5:
        recs.append("Weekend - balance rest and activities you enjoy")

    return tuple(recs[:config.FORECAST_MAX_RECOMMENDATIONS])


# ── Single day ────────────────────────────────────────────────────────────────

def _forecast_day(
    profile: UserProfile,
    day: date,
    baseline: float,
    weekday_means: dict[int, float],
    sleep: dict,
    habits: dict,
    weather_note: str,
) -> tuple[float, int, tuple, object]:
    weekday = day.weekday()
    name = day_name(weekday)
    factors = []
    predicted = baseline
    confidence = config.FORECAST_BASE_CONFIDENCE

    predicted += lunar_impact(lunar_phase_fraction(day))
    predicted += config.FORECAST_WEEKDAY_OFFSETS[weekday]

    if weekday in weekday_means:
        deviation = weekday_means[weekday] - baseline
        predicted += deviation * config.FORECAST_DAY_PATTERN_WEIGHT
        confidence += config.FORECAST_DAY_PATTERN_CONFIDENCE
        impact = _band(deviation, config.FORECAST_FACTOR_BAND)
        description = {
            "positive": f"{name}s are typically high-energy days for you",
            "negative": f"{name}s tend to be lower energy for you",
            "neutral":  f"{name}s are average energy days",
        }[impact]
        factors.append(ForecastFactor(name, impact, config.FORECAST_DAY_PATTERN_WEIGHT, description))

    sleep_impact = sleep["quality_impact"]
    predicted += sleep_impact * config.FORECAST_SLEEP_WEIGHT
    confidence += config.FORECAST_SLEEP_CONFIDENCE
    sleep_band = _band(sleep_impact, config.FORECAST_SLEEP_BAND)
    factors.append(ForecastFactor(
        "Sleep Quality",
        sleep_band,
        config.FORECAST_SLEEP_WEIGHT,
        f"Good sleep ({sleep['optimal_duration']}h) boosts your energy significantly"
        if sleep_band == "positive" else "Sleep quality affects your energy levels",
    ))

    habit_impact = habits["completion_boost"] * config.FORECAST_HABIT_COMPLETION
    predicted += habit_impact * config.FORECAST_HABIT_WEIGHT
    factors.append(ForecastFactor(
        "Daily Habits",
        "positive" if habit_impact > config.FORECAST_HABIT_BAND else "neutral",
        config.FORECAST_HABIT_WEIGHT,
        "Completing your habits maintains steady energy",
    ))

    factors.append(ForecastFactor("Weather", "neutral", config.FORECAST_WEATHER_WEIGHT, weather_note))

    predicted = clamp(predicted, 0.0, 100.0)
    confidence = min(config.FORECAST_MAX_CONFIDENCE, confidence)
    record = compute_daily_energy(profile, day)
    return predicted, confidence, tuple(factors), record


# ── Public API ────────────────────────────────────────────────────────────────

def forecast(
    profile: UserProfile,
    history: Iterable[TimeSeriesPoint],
    days_ahead: int = config.FORECAST_DAYS,
    start=None,
    sleep_sessions: Optional[Iterable[SleepSession]] = None,
    habit_completions: Optional[Iterable[HabitCompletion]] = None,
    weather: Optional[Iterable[WeatherSample]] = None,
) -> EnergyForecast:
    """
    Predict energy for days_ahead consecutive days.

    Args:
        profile:            whose days are forecast (lunar phase + alignment per day)
        history:            dated daily energy scores (0-100), any order
        days_ahead:         horizon, must be >= 1
        start:              first forecast day (default: today)
        sleep_sessions:     optional nights with next-day energy
        habit_completions:  optional completions with energy before/after
        weather:            optional weather samples (description only)

    Returns:
        EnergyForecast, iterable over its ForecastDay entries
    """
    if isinstance(days_ahead, bool) or not isinstance(days_ahead, int) or days_ahead < 1:
        raise InvalidInput(f"days_ahead must be a positive integer, got {days_ahead!r}")
    if not isinstance(profile, UserProfile):
        raise InvalidInput(f"profile must be a UserProfile, got {type(profile).__name__}")
    first = date.today() if start is None else coerce_date(start, "start")

    points = list(history or [])
    if any(not np.isfinite(float(p.value)) for p in points):
        raise InvalidInput("history contains non-finite values")

    buffer = ScoreHistory(window=config.HISTORY_WINDOW)
    buffer.extend(points)
    baseline = buffer.baseline()
    if not points:
        logger.info(f"No energy history — forecasting from default baseline {baseline:.0f}")

    # Weekday deviations are learned from the whole supplied history.
    full = ScoreHistory(window=max(len(points), 1))
    full.extend(points)
    weekday_means = full.weekday_means()

    sleep = analyze_sleep_pattern(sleep_sessions)
    habits = analyze_habit_pattern(habit_completions)
    weather_note = _weather_note(weather)

    days: list[ForecastDay] = []
    for i in range(days_ahead):
        day = first + timedelta(days=i)
        predicted, confidence, factors, record = _forecast_day(
            profile, day, baseline, weekday_means, sleep, habits, weather_note
        )
        prior = [d.predicted_energy for d in days[-config.FORECAST_TREND_WINDOW:]]
        reference = float(np.mean(prior)) if prior else baseline
        days.append(ForecastDay(
            date=day,
            predicted_energy=int(round(predicted)),
            confidence=int(confidence),
            factors=factors,
            recommendations=_recommendations(predicted, day.weekday()),
            trend=_trend(predicted, reference),
            lunar_phase=record.lunar_phase,
            alignment=record.connection.alignment,
        ))

    energies = [d.predicted_energy for d in days]
    window = config.FORECAST_TREND_WINDOW
    overall = window_trend(energies, window)
    best = max(days, key=lambda d: d.predicted_energy)
    worst = min(days, key=lambda d: d.predicted_energy)

    result = EnergyForecast(
        days=tuple(days),
        overall_trend=overall,
        best_day=best.date,
        worst_day=worst.date,
        average_energy=int(round(np.mean(energies))),
        confidence=int(round(np.mean([d.confidence for d in days]))),
        baseline=baseline,
    )
    logger.info(
        f"Forecast {first} +{days_ahead}d | baseline {baseline:.1f} | "
        f"avg {result.average_energy} | {overall.value} | best {best.date} worst {worst.date}"
    )
    return result


def window_trend(energies: list[float], window: int = config.FORECAST_TREND_WINDOW) -> Trend:
    """Compare the mean of the first `window` values with the mean of the last `window`."""
    if not energies:
        return Trend.STABLE
    head = float(np.mean(energies[:window]))
    tail = float(np.mean(energies[-window:]))
    return _trend(tail, head)
