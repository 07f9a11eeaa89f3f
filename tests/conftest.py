"""
Pytest configuration and fixtures
"""
import os
import sys
from datetime import date, datetime, timedelta

import pytest

# Add the repo root to the path so `config` and `core` import as they do from main.py
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.models import JournalEntry, TimeSeriesPoint, UserProfile  # noqa: E402


@pytest.fixture
def profile():
    """Born mid-June 1990: Pitta, Metal birth year, life path 4."""
    return UserProfile(date_of_birth=date(1990, 6, 15), name="Test User")


@pytest.fixture
def flat_history():
    """Thirty days of steady 60s ending the day before 2025-01-06."""
    start = date(2024, 12, 7)
    return [TimeSeriesPoint(start + timedelta(days=i), 60.0) for i in range(30)]


@pytest.fixture
def wednesday_journal():
    """Four weeks of 10:00 logs: Wednesdays score 95, every other day 40."""
    start = datetime(2025, 1, 6, 10, 0)      # a Monday
    entries = []
    for i in range(28):
        ts = start + timedelta(days=i)
        entries.append(JournalEntry(ts, 95.0 if ts.weekday() == 2 else 40.0))
    return entries
