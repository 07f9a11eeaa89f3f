"""
Constitutional-type (dosha) model.

  - Birth month → one of three types by season
  - Type + hour → time-of-day energy level, amplified when in season
  - Type + lunar phase → balance factor feeding the user reading's intensity
"""
from datetime import datetime

from loguru import logger

import config
from core.models import DoshaType, LunarPhase, coerce_datetime

_BUSINESS_FOCUS = {
    DoshaType.VATA: (
        "Peak creativity - use for innovation and ideation",
        "High energy window - ideal for dynamic activities",
        "Moderate energy - focus on lighter activities",
    ),
    DoshaType.PITTA: (
        "Peak intensity - tackle your most challenging work",
        "Warm-up period - prepare for peak performance",
        "Post-peak - focus on relationship building",
    ),
    DoshaType.KAPHA: (
        "Steady energy - ideal for sustained effort",
        "Warming up - ease into the day",
        "Maintenance mode - consolidate and connect",
    ),
}


def dosha_for_month(month: int) -> DoshaType:
    """Seasonal type for a calendar month (1-12)."""
    for name, months in config.DOSHA_SEASON_MONTHS.items():
        if month in months:
            return DoshaType(name)
    raise ValueError(f"month out of range: {month}")


def primary_dosha(date_of_birth) -> DoshaType:
    return dosha_for_month(coerce_datetime(date_of_birth, "date_of_birth").month)


def dominant_dosha(date_of_birth) -> DoshaType:
    """Type whose lunar balance drives the user reading, from the birth month."""
    month = coerce_datetime(date_of_birth, "date_of_birth").month
    for name, months in config.DOSHA_BIRTH_MONTHS.items():
        if month in months:
            return DoshaType(name)
    raise ValueError(f"month out of range: {month}")


def _band_index(dosha: DoshaType, hour: int) -> int:
    """Index of the band covering the hour, or len(bands) for the baseline."""
    bands = config.DOSHA_ENERGY_BANDS[dosha.value]
    for i, ((start, end), _) in enumerate(bands):
        if start <= hour < end:
            return i
    return len(bands)


def energy_level(dosha: DoshaType, when) -> int:
    """
    Time-of-day energy for a type at an instant, with the seasonal rule:
    when the calendar month's type matches, levels above the threshold are
    nudged up (cap 100) and the rest nudged down (floor 50).
    """
    dt = coerce_datetime(when)
    bands = config.DOSHA_ENERGY_BANDS[dosha.value]
    idx = _band_index(dosha, dt.hour)
    level = bands[idx][1] if idx < len(bands) else config.DOSHA_ENERGY_BASELINE[dosha.value]

    if dosha_for_month(dt.month) is dosha:
        if level > config.DOSHA_AMPLIFY_THRESHOLD:
            level = min(100, level + config.DOSHA_AMPLIFY_BOOST)
        else:
            level = max(config.DOSHA_AMPLIFY_FLOOR, level - config.DOSHA_AMPLIFY_DAMPEN)
    return level


def lunar_balance(dosha: DoshaType, phase: LunarPhase) -> float:
    """Balance factor in (0, 1] for a type under a lunar phase."""
    boost = config.DOSHA_LUNAR_BOOST.get(phase.value)
    if boost is None:
        return config.DOSHA_BALANCE_DEFAULT
    favoured, value = boost
    return value if dosha.value == favoured else config.DOSHA_BALANCE_OFF_TYPE


def dosha_guidance(dosha: DoshaType, when) -> dict:
    """Energy level, peak-hours label and focus line for a type at an instant."""
    dt: datetime = coerce_datetime(when)
    idx = _band_index(dosha, dt.hour)
    focus = _BUSINESS_FOCUS[dosha]
    level = energy_level(dosha, dt)
    logger.debug(f"{dosha.value} at {dt.hour:02d}h → {level}")
    return {
        "dosha": dosha.value,
        "energy_level": level,
        "peak_hours": config.DOSHA_PEAK_HOURS[dosha.value],
        "business_focus": focus[min(idx, len(focus) - 1)],
        "in_season": dosha_for_month(dt.month) is dosha,
    }
