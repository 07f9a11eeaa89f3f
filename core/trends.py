"""
Range trend summary over a run of daily records.

Averages both intensities and the perfect-day score, lists strong and
challenging days, fits a slope to the perfect-day score and phrases a few
plain-language insights.
"""
from typing import Sequence

import numpy as np
from loguru import logger

import config
from core.models import Alignment, DailyEnergyRecord, InvalidInput, TimeSeriesPoint, TrendSummary
from core.score_history import ScoreHistory
from core.weekday import day_name


def _insights(records: Sequence[DailyEnergyRecord], average_alignment: int) -> list[str]:
    span = f"{len(records)}-day period"
    insights = []

    if average_alignment >= config.TREND_EXCELLENT_FROM:
        insights.append(f"This {span} has been excellent for energy alignment. Great time for important projects.")
    elif average_alignment >= config.TREND_BALANCED_FROM:
        insights.append(f"This {span} shows balanced energy patterns. Good for steady progress.")
    else:
        insights.append(f"This {span} has been challenging. Focus on self-care and routine tasks.")

    strong = sum(1 for r in records if r.connection.alignment is Alignment.STRONG)
    challenging = sum(1 for r in records if r.connection.alignment is Alignment.CHALLENGING)
    if strong and strong >= len(records) * config.TREND_STRONG_SHARE:
        insights.append(f"You have {strong} high-energy days this {span}. Perfect for launching new initiatives.")
    if challenging and challenging >= len(records) * config.TREND_CHALLENGING_SHARE:
        insights.append(f"{challenging} days require extra care. Schedule lighter activities on these days.")

    if len(records) >= 2:
        half = len(records) // 2
        first = float(np.mean([r.user_energy.intensity for r in records[:half]]))
        second = float(np.mean([r.user_energy.intensity for r in records[half:]]))
        if second > first + config.TREND_ENERGY_SHIFT:
            insights.append("Your personal energy is rising. Momentum is building for the days ahead.")
        elif first > second + config.TREND_ENERGY_SHIFT:
            insights.append("Your personal energy is declining. Consider rest and recharge activities.")

    best = max(records, key=lambda r: r.connection.score)
    insights.append(f"{day_name(best.date.weekday())} {best.date.date()} shows the strongest alignment.")
    return insights


def summarize_range(records: Sequence[DailyEnergyRecord]) -> TrendSummary:
    """Trend summary for records as returned by compute_energy_for_range()."""
    if not records:
        raise InvalidInput("cannot summarize an empty range")
    records = sorted(records, key=lambda r: r.date)

    history = ScoreHistory(window=len(records))
    history.extend(TimeSeriesPoint(r.date.date(), r.perfect_day_score) for r in records)
    average_alignment = int(round(history.baseline()))

    summary = TrendSummary(
        start=records[0].date.date(),
        end=records[-1].date.date(),
        average_user_energy=int(round(np.mean([r.user_energy.intensity for r in records]))),
        average_environmental_energy=int(round(np.mean([r.environmental_energy.intensity for r in records]))),
        average_alignment=average_alignment,
        slope=history.slope(),
        best_days=tuple(r.date.date() for r in records if r.connection.alignment is Alignment.STRONG),
        challenging_days=tuple(r.date.date() for r in records if r.connection.alignment is Alignment.CHALLENGING),
        insights=tuple(_insights(records, average_alignment)),
    )
    logger.debug(f"Trend {summary.start} → {summary.end}: alignment {average_alignment}, slope {summary.slope}")
    return summary
