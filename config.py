"""
Central configuration for the energy engine.
All tunable parameters live here. Loaded from environment where applicable.
"""
import os
from dotenv import load_dotenv

load_dotenv()

# ── Lunar cycle ───────────────────────────────────────────────────────────────
# Reference is the full moon of 2000-01-21. The raw fraction is folded by half
# a cycle so that 0.0 = new moon and 0.5 = full moon.
SYNODIC_MONTH_DAYS = 29.53058867
LUNAR_REFERENCE_JD = 2451565.4
LUNAR_PHASE_FOLD   = 0.5

# ── Numerology ────────────────────────────────────────────────────────────────
MASTER_NUMBERS = frozenset({11, 22, 33})

# ── Five elements ─────────────────────────────────────────────────────────────
# Interaction of a subject element with a context element.
ELEMENT_SAME               = 1.0
ELEMENT_SUBJECT_GENERATES  = 0.8    # subject nourishes context
ELEMENT_CONTEXT_GENERATES  = 0.6    # context nourishes subject
ELEMENT_SUBJECT_DESTROYS   = -0.5
ELEMENT_CONTEXT_DESTROYS   = -0.8
ELEMENT_NEUTRAL            = 0.0

# ── Constitutional types (dosha) ──────────────────────────────────────────────
# Birth month (1-12) → type. Oct–Jan Vata, May–Sep Pitta, Feb–Apr Kapha.
DOSHA_SEASON_MONTHS = {
    "Vata":  (10, 11, 12, 1),
    "Pitta": (5, 6, 7, 8, 9),
    "Kapha": (2, 3, 4),
}

# Birth month → dominant type behind the user reading. Mar–Jun Pitta,
# Jul–Oct Vata, Nov–Feb Kapha.
DOSHA_BIRTH_MONTHS = {
    "Pitta": (3, 4, 5, 6),
    "Vata":  (7, 8, 9, 10),
    "Kapha": (11, 12, 1, 2),
}

# Time-of-day energy bands: list of ((start_hour, end_hour), level) checked in
# order, end exclusive. Hours outside every band get the baseline.
DOSHA_ENERGY_BANDS = {
    "Vata":  [((6, 10), 90), ((14, 18), 85)],
    "Pitta": [((10, 14), 95), ((6, 10), 75)],
    "Kapha": [((10, 14), 85), ((6, 10), 55)],
}
DOSHA_ENERGY_BASELINE = {"Vata": 60, "Pitta": 65, "Kapha": 70}
DOSHA_PEAK_HOURS = {"Vata": "6-10 AM or 2-6 PM", "Pitta": "10 AM - 2 PM", "Kapha": "10 AM - 2 PM"}

# In-season amplification: peaks above the threshold are nudged up, the rest down.
DOSHA_AMPLIFY_THRESHOLD = 80
DOSHA_AMPLIFY_BOOST     = 5
DOSHA_AMPLIFY_DAMPEN    = 10
DOSHA_AMPLIFY_FLOOR     = 50

# Lunar balance: (phase, favoured type) → boosted balance, others on that
# phase get DOSHA_BALANCE_OFF_TYPE, every other phase the default.
DOSHA_LUNAR_BOOST = {
    "full_moon": ("Kapha", 0.9),
    "new_moon":  ("Vata", 0.9),
}
DOSHA_BALANCE_OFF_TYPE = 0.7
DOSHA_BALANCE_DEFAULT  = 0.75

# ── Weekday fortune ───────────────────────────────────────────────────────────
# Indexed by Python weekday (Monday = 0): (colour of the day, base fortune).
WEEKDAY_FORTUNE = (
    ("Yellow", 0.8),   # Monday    — new beginnings
    ("Pink",   0.6),   # Tuesday   — be cautious
    ("Green",  0.9),   # Wednesday — very auspicious
    ("Orange", 0.5),   # Thursday  — neutral
    ("Blue",   0.7),   # Friday    — relationships
    ("Purple", 0.4),   # Saturday  — avoid major decisions
    ("Red",    0.7),   # Sunday    — rest, spirituality
)

# ── Energy synthesis ──────────────────────────────────────────────────────────
ENVIRONMENT_CATEGORY_OFFSET = 5

COLOR_STRONG = "#22C55E"
COLOR_MID    = "#F59E0B"
COLOR_WEAK   = "#EF4444"
INTENSITY_STRONG_ABOVE = 70
INTENSITY_MID_ABOVE    = 40

# ── Alignment scorer ──────────────────────────────────────────────────────────
ALIGNMENT_BASE             = 0.5
ALIGNMENT_ELEMENT_WEIGHT   = 0.3
ALIGNMENT_GAP_NORMALIZER   = 200
ALIGNMENT_STRONG_ABOVE     = 0.7
ALIGNMENT_MODERATE_ABOVE   = 0.4

# Numeric stand-in for an alignment bucket (habit impact, trend summaries).
ALIGNMENT_BUCKET_SCORES = {"strong": 90, "moderate": 60, "challenging": 30}

# ── Correlation ───────────────────────────────────────────────────────────────
CORRELATION_STRONG   = 0.7
CORRELATION_MODERATE = 0.4
CORRELATION_WEAK     = 0.2
CORRELATION_MIN_SAMPLES = int(os.getenv("CORRELATION_MIN_SAMPLES", "5"))

HABIT_MIN_LOGS        = 3
HABIT_WINDOW_DAYS     = 30
HABIT_IMPACT_BAND     = 5

# ── Forecast ──────────────────────────────────────────────────────────────────
FORECAST_DAYS            = int(os.getenv("FORECAST_DAYS", "7"))
HISTORY_WINDOW           = int(os.getenv("HISTORY_WINDOW", "30"))
FORECAST_DEFAULT_BASELINE = 50.0
FORECAST_BASE_CONFIDENCE = 70
FORECAST_MAX_CONFIDENCE  = 95

# Lunar term: four linear segments over the phase fraction, each
# (segment_end, intercept, slope) applied as intercept + slope * (phase - segment_start).
FORECAST_LUNAR_SEGMENTS = (
    (0.25, 3.0, 20.0),     # new → first quarter, rising
    (0.50, 8.0, 12.0),     # first quarter → full, plateau
    (0.75, 11.0, -16.0),   # full → last quarter, falling
    (1.00, 7.0, -28.0),    # last quarter → new, trough
)

# Indexed by Python weekday (Monday = 0).
FORECAST_WEEKDAY_OFFSETS = (6, 10, 8, 4, -2, -7, -5)

FORECAST_DAY_PATTERN_WEIGHT      = 0.3
FORECAST_DAY_PATTERN_CONFIDENCE  = 10
FORECAST_SLEEP_WEIGHT            = 0.4
FORECAST_SLEEP_CONFIDENCE        = 5
FORECAST_HABIT_WEIGHT            = 0.2
FORECAST_HABIT_COMPLETION        = 0.7
FORECAST_WEATHER_WEIGHT          = 0.1
FORECAST_FACTOR_BAND             = 5      # day-pattern impact sign band
FORECAST_SLEEP_BAND              = 3
FORECAST_HABIT_BAND              = 2
FORECAST_TREND_BAND              = 5
FORECAST_TREND_WINDOW            = 3
FORECAST_MAX_RECOMMENDATIONS     = 4
FORECAST_LOW_ENERGY_BELOW        = 40
FORECAST_HIGH_ENERGY_ABOVE       = 70

# Defaults when the supplied sleep / habit history is too thin to learn from.
SLEEP_MIN_SESSIONS        = 3
SLEEP_DEFAULT_DURATION    = 8
SLEEP_DEFAULT_IMPACT      = 10.0
HABIT_DEFAULT_BOOST       = 5.0
HABIT_BOOST_RANGE         = (3.0, 10.0)

# ── Pattern recognition ───────────────────────────────────────────────────────
PATTERN_MIN_DAYS = int(os.getenv("PATTERN_MIN_DAYS", "14"))

# kind → (min samples in best bucket, base confidence, increment per sample, cap)
PATTERN_RULES = {
    "day_of_week": (3, 60, 3, 95),
    "time_of_day": (5, 50, 2, 90),
    "lunar_phase": (2, 40, 10, 85),
}
PATTERN_DAY_HIGH_IMPACT   = 80
PATTERN_DAY_MEDIUM_IMPACT = 65

TIME_OF_DAY_HOURS = {
    "morning":   (6, 12),
    "afternoon": (12, 18),
}
TIME_OF_DAY_WINDOWS = {
    "morning":   "9:00 AM - 12:00 PM",
    "afternoon": "2:00 PM - 5:00 PM",
    "evening":   "6:00 PM - 9:00 PM",
}

# ── Range trend summary ───────────────────────────────────────────────────────
TREND_EXCELLENT_FROM      = 70     # average perfect-day score
TREND_BALANCED_FROM       = 55
TREND_STRONG_SHARE        = 0.4    # share of strong days worth calling out
TREND_CHALLENGING_SHARE   = 0.3
TREND_ENERGY_SHIFT        = 10     # first-half vs second-half user intensity

# ── Logging ───────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("LOG_DIR", "logs")
