"""
Numerology Engine — digit-sum reduction with master numbers.

Provides:
  - Single-digit reduction that stops on master numbers 11, 22, 33
  - Life Path Number (from the birth date)
  - Personal Year Number (birth day + month + target year)
  - Day Number (from the target date itself)
"""
from datetime import date

import config
from core.models import InvalidInput, coerce_date


def reduce_to_single_digit(n: int) -> int:
    """
    Repeatedly sum decimal digits until a single digit or a master number
    (11, 22, 33) remains.

    Example — 29: 2+9 = 11 → master number, stop.
    Example — 25: 2+5 = 7.
    """
    if isinstance(n, bool) or not isinstance(n, int):
        raise InvalidInput(f"expected an integer, got {n!r}")
    while n > 9 and n not in config.MASTER_NUMBERS:
        n = sum(int(d) for d in str(n))
    return n


def _date_sum(d: date) -> int:
    return d.day + d.month + d.year


def life_path_number(date_of_birth) -> int:
    """
    Life Path Number: reduce(day + month + year) of the birth date.

    Example — 1990-06-15:
      15 + 6 + 1990 = 2011 → 4
    """
    return reduce_to_single_digit(_date_sum(coerce_date(date_of_birth, "date_of_birth")))


def personal_year_number(date_of_birth, target_year: int) -> int:
    """
    Personal Year Number: reduce(birth day + birth month + target year).

    Example — born 1990-06-15, year 2025:
      15 + 6 + 2025 = 2046 → 12 → 3
    """
    dob = coerce_date(date_of_birth, "date_of_birth")
    return reduce_to_single_digit(dob.day + dob.month + target_year)


def day_number(d) -> int:
    """Day Number of a target date: reduce(day + month + year)."""
    return reduce_to_single_digit(_date_sum(coerce_date(d)))


def full_numerology_report(date_of_birth, today) -> dict:
    """Numerology snapshot for a profile on a given day."""
    dob = coerce_date(date_of_birth, "date_of_birth")
    today = coerce_date(today)
    lp = life_path_number(dob)
    py = personal_year_number(dob, today.year)
    dn = day_number(today)
    return {
        "date_of_birth": dob.isoformat(),
        "today": today.isoformat(),
        "life_path_number": lp,
        "personal_year_number": py,
        "day_number": dn,
        "master_number": lp in config.MASTER_NUMBERS,
    }
