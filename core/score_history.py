"""
Score History — Rolling buffer for a daily energy series.
Used to compute the forecast baseline (rolling mean), the trend slope
(regression) and per-weekday means.

The buffer is in-memory only: callers own their history and replay it in
with extend() for each computation.
"""
from collections import deque
from typing import Iterable, Optional

import numpy as np

import config
from core.models import TimeSeriesPoint, coerce_date


class ScoreHistory:
    """
    Ring buffer that stores the last N dated scores.
    Computes the baseline (mean) and slope (linear regression slope or simple delta).
    """

    def __init__(self, window: int = config.HISTORY_WINDOW):
        self.window = window
        self._points: deque = deque(maxlen=window)

    # ── Mutation ──────────────────────────────────────────────────────────────

    def push(self, point: TimeSeriesPoint):
        self._points.append(TimeSeriesPoint(coerce_date(point.date), float(point.value)))

    def extend(self, points: Iterable[TimeSeriesPoint]):
        """Push points in date order, so the buffer keeps the most recent ones."""
        for p in sorted(points, key=lambda p: coerce_date(p.date)):
            self.push(p)

    def reset(self):
        self._points.clear()

    # ── Queries ───────────────────────────────────────────────────────────────

    def values(self) -> list[float]:
        return [p.value for p in self._points]

    def baseline(self) -> float:
        """Mean of the buffered values, or the neutral default when empty."""
        if not self._points:
            return config.FORECAST_DEFAULT_BASELINE
        return float(np.mean(self.values()))

    def slope(self) -> Optional[float]:
        """
        Compute slope of the series.
        With >=3 points: uses linear regression slope (more robust).
        With 2 points:   simple delta (current - previous).
        With <2 points:  None (not enough data).
        """
        buf = self.values()
        if len(buf) < 2:
            return None
        if len(buf) >= 3:
            x = np.arange(len(buf), dtype=float)
            return float(np.polyfit(x, buf, 1)[0])
        return float(buf[-1] - buf[-2])

    def weekday_means(self) -> dict[int, float]:
        """Mean value per Python weekday (Monday = 0), only for weekdays seen."""
        buckets: dict[int, list[float]] = {}
        for p in self._points:
            buckets.setdefault(p.date.weekday(), []).append(p.value)
        return {wd: float(np.mean(vals)) for wd, vals in buckets.items()}

    def latest(self) -> Optional[TimeSeriesPoint]:
        return self._points[-1] if self._points else None

    def is_ready(self) -> bool:
        """True once we have at least 2 data points."""
        return len(self._points) >= 2

    def __len__(self) -> int:
        return len(self._points)

    def summary(self) -> dict:
        latest = self.latest()
        return {
            "latest":   None if latest is None else latest.value,
            "baseline": self.baseline(),
            "slope":    self.slope(),
            "history":  self.values(),
            "ready":    self.is_ready(),
        }
