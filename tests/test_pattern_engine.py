"""
Tests for weekday / time-of-day / lunar-phase pattern mining
"""
from datetime import datetime, timedelta

import pytest

from core.models import (
    Impact,
    InsufficientData,
    InvalidInput,
    JournalEntry,
    PatternKind,
    TimeOfDay,
)
from core.pattern_engine import recognize_patterns, time_of_day


def _by_kind(patterns):
    return {p.kind: p for p in patterns}


class TestTimeOfDay:

    @pytest.mark.parametrize("hour,expected", [
        (0, TimeOfDay.EVENING),
        (5, TimeOfDay.EVENING),
        (6, TimeOfDay.MORNING),
        (11, TimeOfDay.MORNING),
        (12, TimeOfDay.AFTERNOON),
        (17, TimeOfDay.AFTERNOON),
        (18, TimeOfDay.EVENING),
        (23, TimeOfDay.EVENING),
    ])
    def test_buckets(self, hour, expected):
        assert time_of_day(hour) is expected


class TestInsufficientHistory:

    def test_under_fourteen_days(self, profile):
        logs = [JournalEntry(datetime(2025, 1, 1, 9) + timedelta(days=i), 70.0) for i in range(10)]
        result = recognize_patterns(profile, logs)
        assert isinstance(result, InsufficientData)
        assert result.required == 14
        assert result.available == 10

    def test_counts_distinct_days(self, profile):
        start = datetime(2025, 1, 1, 8)
        logs = [JournalEntry(start + timedelta(days=i % 5, hours=i % 10), 70.0) for i in range(20)]
        result = recognize_patterns(profile, logs)
        assert isinstance(result, InsufficientData)
        assert result.available == 5

    def test_empty(self, profile):
        assert isinstance(recognize_patterns(profile, []), InsufficientData)

    def test_profile_type_checked(self, wednesday_journal):
        with pytest.raises(InvalidInput):
            recognize_patterns(None, wednesday_journal)


class TestWednesdayOutlier:
    """Wednesdays at 95, everything else at 40"""

    def test_names_wednesday(self, profile, wednesday_journal):
        patterns = _by_kind(recognize_patterns(profile, wednesday_journal))
        day = patterns[PatternKind.DAY_OF_WEEK]
        assert day.key == "Wednesday"
        assert "Wednesday" in day.title
        assert day.sample_count == 4
        assert day.average_score == pytest.approx(95.0)
        assert day.confidence == 72
        assert day.confidence <= 95
        assert day.impact is Impact.HIGH

    def test_morning_window(self, profile, wednesday_journal):
        patterns = _by_kind(recognize_patterns(profile, wednesday_journal))
        tod = patterns[PatternKind.TIME_OF_DAY]
        assert tod.key == "morning"
        assert tod.sample_count == 28
        assert tod.confidence == 90
        assert "9:00 AM - 12:00 PM" in tod.description
        assert "9:00 AM - 12:00 PM" in patterns[PatternKind.DAY_OF_WEEK].recommendation

    def test_confidences_capped(self, profile, wednesday_journal):
        caps = {PatternKind.DAY_OF_WEEK: 95, PatternKind.TIME_OF_DAY: 90, PatternKind.LUNAR_PHASE: 85}
        for p in recognize_patterns(profile, wednesday_journal):
            assert p.confidence <= caps[p.kind]

    def test_many_samples_hit_cap(self, profile):
        start = datetime(2025, 1, 6, 10)
        logs = [JournalEntry(start + timedelta(days=i), 95.0 if i % 7 == 2 else 40.0) for i in range(7 * 20)]
        day = _by_kind(recognize_patterns(profile, logs))[PatternKind.DAY_OF_WEEK]
        assert day.confidence == 95


class TestGates:

    def test_weekday_needs_three_samples(self, profile):
        start = datetime(2025, 1, 6, 10)
        logs = [JournalEntry(start + timedelta(days=i), 95.0 if i % 7 == 2 else 40.0) for i in range(14)]
        patterns = _by_kind(recognize_patterns(profile, logs))
        assert PatternKind.DAY_OF_WEEK not in patterns

    def test_medium_and_low_impact(self, profile):
        start = datetime(2025, 1, 6, 10)
        for score, impact in ((70.0, Impact.MEDIUM), (60.0, Impact.LOW)):
            logs = [JournalEntry(start + timedelta(days=i), score if i % 7 == 2 else 30.0) for i in range(28)]
            day = _by_kind(recognize_patterns(profile, logs))[PatternKind.DAY_OF_WEEK]
            assert day.impact is impact


class TestSynthesizedScores:

    def test_unscored_logs_use_perfect_day_score(self, profile):
        start = datetime(2025, 2, 1, 14)
        logs = [JournalEntry(start + timedelta(days=i)) for i in range(21)]
        result = recognize_patterns(profile, logs)
        assert isinstance(result, list)
        for p in result:
            assert 0 <= p.average_score <= 100
        assert _by_kind(result)[PatternKind.TIME_OF_DAY].key == "afternoon"


class TestScoreValidation:

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), "high"])
    def test_rejects_unusable_score(self, profile, bad):
        start = datetime(2025, 1, 6, 10)
        logs = [JournalEntry(start + timedelta(days=i), bad) for i in range(14)]
        with pytest.raises(InvalidInput):
            recognize_patterns(profile, logs)

    def test_single_nan_among_good_scores(self, profile, wednesday_journal):
        logs = wednesday_journal + [JournalEntry(datetime(2025, 2, 10, 10), float("nan"))]
        with pytest.raises(InvalidInput, match="not finite"):
            recognize_patterns(profile, logs)
