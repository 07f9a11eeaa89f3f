"""
Tests for the multi-day forecast
"""
from datetime import date, timedelta

import pytest

from core.forecast_engine import (
    _recommendations,
    analyze_habit_pattern,
    analyze_sleep_pattern,
    forecast,
    lunar_impact,
    window_trend,
)
from core.models import (
    EnergyForecast,
    ForecastDay,
    HabitCompletion,
    InvalidInput,
    SleepSession,
    TimeSeriesPoint,
    Trend,
)

START = date(2025, 1, 6)   # a Monday


class TestLunarImpact:
    """Four-segment piecewise-linear curve"""

    @pytest.mark.parametrize("fraction,expected", [
        (0.0, 3.0),
        (0.125, 5.5),
        (0.25, 8.0),
        (0.5, 11.0),
        (0.75, 7.0),
        (0.99, 0.28),
    ])
    def test_curve(self, fraction, expected):
        assert lunar_impact(fraction) == pytest.approx(expected)

    def test_continuous_at_full_moon(self):
        assert lunar_impact(0.4999999) == pytest.approx(lunar_impact(0.5), abs=1e-4)


class TestFactorAnalysis:

    def test_sleep_defaults_when_thin(self):
        assert analyze_sleep_pattern(None) == {"optimal_duration": 8, "quality_impact": 10.0}
        sessions = [SleepSession(START, 7.0, 4.0, 70.0), SleepSession(START, 8.0, 4.0, None)]
        assert analyze_sleep_pattern(sessions)["quality_impact"] == 10.0

    def test_sleep_learned(self):
        sessions = [
            SleepSession(START, 7.0, 5.0, 80.0),
            SleepSession(START + timedelta(days=1), 8.2, 5.0, 90.0),
            SleepSession(START + timedelta(days=2), 6.0, 1.0, 40.0),
        ]
        result = analyze_sleep_pattern(sessions)
        assert result["optimal_duration"] == 8
        # (30·1 + 40·1 − 10·0.2) / 3
        assert result["quality_impact"] == pytest.approx(68 / 3)

    @pytest.mark.parametrize("deltas,expected", [
        ([], 5.0),
        ([20.0], 10.0),
        ([1.0], 3.0),
        ([6.0, 8.0], 7.0),
    ])
    def test_habit_boost(self, deltas, expected):
        completions = [HabitCompletion("walk", 50.0, 50.0 + d) for d in deltas]
        completions.append(HabitCompletion("walk", None, 60.0))
        assert analyze_habit_pattern(completions)["completion_boost"] == pytest.approx(expected)


class TestForecast:

    def test_default_baseline(self, profile):
        result = forecast(profile, [], days_ahead=7, start=START)
        assert isinstance(result, EnergyForecast)
        assert result.baseline == 50.0
        assert len(result) == 7
        assert all(isinstance(d, ForecastDay) for d in result)

    def test_consecutive_dates(self, profile):
        result = forecast(profile, [], days_ahead=10, start=START)
        assert [d.date for d in result] == [START + timedelta(days=i) for i in range(10)]

    def test_baseline_from_history(self, profile, flat_history):
        result = forecast(profile, flat_history, days_ahead=3, start=START)
        assert result.baseline == pytest.approx(60.0)

    def test_baseline_uses_last_thirty(self, profile, flat_history):
        older = [TimeSeriesPoint(date(2024, 11, 1) + timedelta(days=i), 0.0) for i in range(10)]
        result = forecast(profile, older + flat_history, days_ahead=1, start=START)
        assert result.baseline == pytest.approx(60.0)

    def test_confidence_without_history(self, profile):
        result = forecast(profile, [], days_ahead=7, start=START)
        assert all(d.confidence == 75 for d in result)

    def test_confidence_with_weekday_history(self, profile, flat_history):
        result = forecast(profile, flat_history, days_ahead=7, start=START)
        assert all(d.confidence == 85 for d in result)
        assert result.confidence == 85

    def test_weekday_factor_reported(self, profile, flat_history):
        day = forecast(profile, flat_history, days_ahead=1, start=START).days[0]
        names = [f.name for f in day.factors]
        assert names == ["Monday", "Sleep Quality", "Daily Habits", "Weather"]
        assert day.factors[0].impact == "neutral"

    def test_best_and_worst(self, profile):
        result = forecast(profile, [], days_ahead=7, start=START)
        energies = {d.date: d.predicted_energy for d in result}
        assert energies[result.best_day] == max(energies.values())
        assert energies[result.worst_day] == min(energies.values())

    @pytest.mark.parametrize("value", [1000.0, -1000.0])
    def test_adversarial_history_clamped(self, profile, value):
        history = [TimeSeriesPoint(START - timedelta(days=i + 1), value) for i in range(30)]
        sessions = [SleepSession(START, 8.0, 5.0, value * 100) for _ in range(5)]
        completions = [HabitCompletion("x", 0.0, value)]
        result = forecast(profile, history, days_ahead=14, start=START,
                          sleep_sessions=sessions, habit_completions=completions)
        for d in result:
            assert 0 <= d.predicted_energy <= 100
            assert d.confidence <= 95

    def test_recommendations_capped(self, profile):
        for d in forecast(profile, [], days_ahead=14, start=START):
            assert 1 <= len(d.recommendations) <= 4

    def test_first_day_trend_against_baseline(self, profile):
        history = [TimeSeriesPoint(START - timedelta(days=i + 1), 10.0) for i in range(30)]
        day = forecast(profile, history, days_ahead=1, start=START).days[0]
        assert day.trend is Trend.IMPROVING

    def test_serialises(self, profile):
        payload = forecast(profile, [], days_ahead=2, start=START).to_dict()
        assert len(payload["days"]) == 2
        assert payload["days"][0]["date"] == "2025-01-06"

    @pytest.mark.parametrize("days", [0, -3, True, 2.5])
    def test_bad_horizon(self, profile, days):
        with pytest.raises(InvalidInput):
            forecast(profile, [], days_ahead=days, start=START)

    def test_non_finite_history(self, profile):
        with pytest.raises(InvalidInput):
            forecast(profile, [TimeSeriesPoint(START, float("nan"))], days_ahead=1, start=START)


class TestTrend:
    """First-three vs last-three means, ±5 band"""

    def test_improving(self):
        assert window_trend([40, 40, 40, 50, 60, 60, 60]) is Trend.IMPROVING

    def test_declining(self):
        assert window_trend([60, 60, 60, 50, 40, 40, 40]) is Trend.DECLINING

    def test_stable(self):
        assert window_trend([50, 52, 48, 50, 51, 49, 50]) is Trend.STABLE

    def test_band_edge_is_stable(self):
        assert window_trend([50, 50, 50, 50, 55, 55, 55]) is Trend.STABLE


class TestRecommendations:

    def test_low_energy_monday(self):
        recs = _recommendations(30, 0)
        assert len(recs) == 4
        assert recs[0].startswith("Low energy predicted")
        assert recs[-1].startswith("Start the week strong")

    def test_high_energy_weekend(self):
        recs = _recommendations(80, 5)
        assert recs[0].startswith("High energy day")
        assert recs[-1].startswith("Weekend")

    def test_moderate_midweek(self):
        assert len(_recommendations(50, 2)) == 2

    def test_friday(self):
        assert _recommendations(50, 4)[-1].startswith("End the week")
