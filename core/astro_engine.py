"""
Astronomy Engine — Julian Day and lunar phase from a calendar instant.

A simple civil-calendar Julian Day approximation is all the scoring needs;
no ephemeris is consulted.

Outputs:
  - Julian Day Number (with the fractional day from h/m/s)
  - Lunar phase fraction (0.0 = new moon, 0.5 = full moon)
  - One of eight lunar phase buckets
"""
import math

from loguru import logger

import config
from core.models import LunarPhase, coerce_datetime

# Bucket order follows the fraction: bucket k is centred on k/8.
_PHASE_ORDER = tuple(LunarPhase)


# ── Julian Date helpers ────────────────────────────────────────────────────────

def julian_day(when) -> float:
    """
    Julian Day for a calendar instant. A bare date means local midnight.

    JD = 367y − ⌊7(y + ⌊(m+9)/12⌋)/4⌋ + ⌊275m/9⌋ + d + 1721013.5
         + (h + min/60 + s/3600) / 24
    """
    dt = coerce_datetime(when)
    y, m, d = dt.year, dt.month, dt.day
    jd = (
        367 * y
        - (7 * (y + (m + 9) // 12)) // 4
        + (275 * m) // 9
        + d
        + 1721013.5
    )
    jd += (dt.hour + dt.minute / 60.0 + dt.second / 3600.0) / 24.0
    return jd


# ── Lunar phase ────────────────────────────────────────────────────────────────

def lunar_phase_fraction(when) -> float:
    """
    Fraction of the synodic month elapsed, folded so 0.0 = new moon.
    Always in [0, 1).
    """
    days_since_reference = julian_day(when) - config.LUNAR_REFERENCE_JD
    cycles = days_since_reference / config.SYNODIC_MONTH_DAYS
    fraction = cycles - math.floor(cycles)
    return (fraction + config.LUNAR_PHASE_FOLD) % 1.0


def phase_from_fraction(fraction: float) -> LunarPhase:
    """
    Map a fraction to its bucket. Boundaries sit at k/8 − 1/16, so anything
    below 1/16 or at/above 15/16 is a new moon.
    """
    if not 0.0 <= fraction < 1.0:
        fraction = fraction % 1.0
    index = int((fraction + 1 / 16) * 8) % 8
    return _PHASE_ORDER[index]


def get_lunar_phase(when) -> tuple[LunarPhase, float]:
    """Return (phase bucket, raw fraction) for an instant."""
    fraction = lunar_phase_fraction(when)
    phase = phase_from_fraction(fraction)
    logger.debug(f"Lunar phase for {when}: {phase.value} ({fraction:.4f})")
    return phase, fraction


def is_waxing(phase: LunarPhase) -> bool:
    return phase in (LunarPhase.WAXING_CRESCENT, LunarPhase.FIRST_QUARTER, LunarPhase.WAXING_GIBBOUS)


def is_waning(phase: LunarPhase) -> bool:
    return phase in (LunarPhase.WANING_GIBBOUS, LunarPhase.LAST_QUARTER, LunarPhase.WANING_CRESCENT)


# ── Full lunar state ───────────────────────────────────────────────────────────

def get_sky_state(when) -> dict:
    """
    Single call for the lunar context of an instant.

    Returns:
        {
          "jd": float,
          "lunar_phase": LunarPhase,
          "lunar_fraction": float,
          "waxing": bool,
          "waning": bool,
        }
    """
    dt = coerce_datetime(when)
    jd = julian_day(dt)
    phase, fraction = get_lunar_phase(dt)
    return {
        "jd": jd,
        "lunar_phase": phase,
        "lunar_fraction": fraction,
        "waxing": is_waxing(phase),
        "waning": is_waning(phase),
    }
