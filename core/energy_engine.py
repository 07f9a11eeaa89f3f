"""
Energy Engine — the core scoring pipeline.

Combines:
  1. Numerology (life path, personal year, day number)
  2. Five-element interaction (birth year vs target year)
  3. Constitutional type and its lunar balance
  4. Weekday fortune
  5. Lunar phase

Outputs a DailyEnergyRecord: user reading, environmental reading and their
alignment (strong | moderate | challenging). Pure: the same (profile, instant)
always yields the same record.
"""
from datetime import timedelta
from typing import Optional

from loguru import logger

import config
from core.astro_engine import get_lunar_phase
from core.dosha import dominant_dosha, energy_level, lunar_balance, primary_dosha
from core.elements import element_interaction, year_element
from core.models import (
    Alignment,
    ConnectionReading,
    DailyEnergyRecord,
    EnergyCategory,
    EnergyReading,
    InvalidInput,
    LunarPhase,
    UserProfile,
    coerce_date,
    coerce_datetime,
)
from core.numerology import day_number, life_path_number, personal_year_number
from core.weekday import weekday_fortune

_ALIGNMENT_COLORS = {
    Alignment.STRONG: config.COLOR_STRONG,
    Alignment.MODERATE: config.COLOR_MID,
    Alignment.CHALLENGING: config.COLOR_WEAK,
}


# ── Helpers ────────────────────────────────────────────────────────────────────

def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def intensity_color(intensity: int) -> str:
    """Display colour from intensity alone: >70 strong, >40 mid, else weak."""
    if intensity > config.INTENSITY_STRONG_ABOVE:
        return config.COLOR_STRONG
    if intensity > config.INTENSITY_MID_ABOVE:
        return config.COLOR_MID
    return config.COLOR_WEAK


def _reading(category: EnergyCategory, raw_intensity: float) -> EnergyReading:
    intensity = int(clamp(round(raw_intensity), 0, 100))
    return EnergyReading(category=category, intensity=intensity, color=intensity_color(intensity))


# ── Readings ───────────────────────────────────────────────────────────────────

def user_reading(profile: UserProfile, when, phase: Optional[LunarPhase] = None) -> EnergyReading:
    """
    The person's reading for a date.

    Category = (life path + personal year) mod 9.
    Intensity = dosha lunar balance × 100.
    """
    dt = coerce_datetime(when)
    lp = life_path_number(profile.date_of_birth)
    py = personal_year_number(profile.date_of_birth, dt.year)
    if phase is None:
        phase, _ = get_lunar_phase(dt)
    balance = lunar_balance(dominant_dosha(profile.date_of_birth), phase)
    return _reading(EnergyCategory.at(lp + py), balance * 100)


def environmental_reading(when) -> EnergyReading:
    """
    The day's reading, identical for everyone.

    Category = (day number + 5) mod 9.
    Intensity = weekday fortune × 100.
    """
    dt = coerce_datetime(when)
    category = EnergyCategory.at(day_number(dt) + config.ENVIRONMENT_CATEGORY_OFFSET)
    return _reading(category, weekday_fortune(dt.weekday()) * 100)


# ── Alignment scorer ───────────────────────────────────────────────────────────

def alignment_score(user: EnergyReading, environment: EnergyReading, interaction: float) -> float:
    """
    0.5 + 0.3 × element interaction + (100 − |intensity gap|) / 200,
    clamped to [0, 1]. Clamping never moves a value across a bucket boundary.
    """
    gap = abs(user.intensity - environment.intensity)
    score = (
        config.ALIGNMENT_BASE
        + config.ALIGNMENT_ELEMENT_WEIGHT * interaction
        + (100 - gap) / config.ALIGNMENT_GAP_NORMALIZER
    )
    return clamp(score, 0.0, 1.0)


def classify_alignment(score: float) -> Alignment:
    """>0.7 strong, >0.4 moderate, everything else challenging."""
    if score > config.ALIGNMENT_STRONG_ABOVE:
        return Alignment.STRONG
    if score > config.ALIGNMENT_MODERATE_ABOVE:
        return Alignment.MODERATE
    return Alignment.CHALLENGING


def _summary(alignment: Alignment, user: EnergyReading, environment: EnergyReading) -> str:
    if alignment is Alignment.STRONG:
        return (
            f"A day of {environment.label} aligns beautifully with your {user.label}. "
            "Your natural tendencies are amplified by today's energy. Move forward with confidence."
        )
    if alignment is Alignment.MODERATE:
        return (
            f"Today's {environment.label} energy offers a steady backdrop for your {user.label}. "
            "A solid day for consistent progress rather than dramatic breakthroughs."
        )
    return (
        f"Your {user.label} energy meets today's {environment.label} energy, creating some friction. "
        "Prioritize flexibility. Complete essential work early, then leave room to adapt."
    )


def connection_reading(
    user: EnergyReading,
    environment: EnergyReading,
    birth_element,
    target_element,
) -> ConnectionReading:
    interaction = element_interaction(birth_element, target_element)
    score = alignment_score(user, environment, interaction)
    alignment = classify_alignment(score)
    return ConnectionReading(
        alignment=alignment,
        score=score,
        color=_ALIGNMENT_COLORS[alignment],
        summary=_summary(alignment, user, environment),
    )


# ── Master record generator ────────────────────────────────────────────────────

def compute_daily_energy(profile: UserProfile, when) -> DailyEnergyRecord:
    """
    Full synthesis for one profile on one instant.

    Args:
        profile: the user's profile (only date_of_birth is read)
        when:    date (local midnight), datetime or ISO string

    Returns:
        DailyEnergyRecord with both readings, their connection and the lunar state
    """
    if not isinstance(profile, UserProfile):
        raise InvalidInput(f"profile must be a UserProfile, got {type(profile).__name__}")
    dt = coerce_datetime(when)

    phase, fraction = get_lunar_phase(dt)
    user = user_reading(profile, dt, phase)
    environment = environmental_reading(dt)

    birth_element = year_element(profile.date_of_birth.year)
    target_element = year_element(dt.year)
    connection = connection_reading(user, environment, birth_element, target_element)

    dosha = primary_dosha(profile.date_of_birth)
    record = DailyEnergyRecord(
        date=dt,
        user_energy=user,
        environmental_energy=environment,
        connection=connection,
        lunar_phase=phase,
        lunar_fraction=fraction,
        life_path=life_path_number(profile.date_of_birth),
        personal_year=personal_year_number(profile.date_of_birth, dt.year),
        day_number=day_number(dt),
        birth_element=birth_element,
        year_element=target_element,
        dosha=dosha,
        dosha_energy=energy_level(dosha, dt),
    )
    logger.debug(
        f"{dt.date()} | user {user.label} ({user.intensity}) | "
        f"env {environment.label} ({environment.intensity}) | "
        f"{connection.alignment.value} {connection.score:.3f}"
    )
    return record


def compute_energy_for_range(profile: UserProfile, start, end) -> list[DailyEnergyRecord]:
    """One record per day from start to end inclusive. Empty when end < start."""
    first = coerce_date(start, "start")
    last = coerce_date(end, "end")
    span = (last - first).days
    return [compute_daily_energy(profile, first + timedelta(days=i)) for i in range(span + 1)]


def alignment_bucket_score(alignment: Alignment) -> int:
    """Numeric stand-in for a bucket: strong 90, moderate 60, challenging 30."""
    return config.ALIGNMENT_BUCKET_SCORES[alignment.value]
