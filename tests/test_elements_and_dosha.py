"""
Tests for the five-element cycle, constitutional types and the weekday table
"""
from datetime import date, datetime
from itertools import product

import pytest

from core.dosha import (
    dominant_dosha,
    dosha_for_month,
    dosha_guidance,
    energy_level,
    lunar_balance,
    primary_dosha,
)
from core.elements import destroys, element_interaction, generates, year_element
from core.models import DoshaType, Element, LunarPhase
from core.weekday import day_name, weekday_color, weekday_fortune


class TestElements:
    """Generative and destructive cycles as ordinal arithmetic"""

    @pytest.mark.parametrize("year,expected", [
        (1990, Element.METAL),
        (1991, Element.METAL),
        (1992, Element.WATER),
        (2024, Element.WOOD),
        (2025, Element.WOOD),
        (2026, Element.FIRE),
        (2028, Element.EARTH),
    ])
    def test_year_element(self, year, expected):
        assert year_element(year) is expected

    def test_generative_cycle(self):
        assert generates(Element.WOOD) is Element.FIRE
        assert generates(Element.FIRE) is Element.EARTH
        assert generates(Element.EARTH) is Element.METAL
        assert generates(Element.METAL) is Element.WATER
        assert generates(Element.WATER) is Element.WOOD

    def test_destructive_cycle(self):
        assert destroys(Element.WOOD) is Element.EARTH
        assert destroys(Element.EARTH) is Element.WATER
        assert destroys(Element.WATER) is Element.FIRE
        assert destroys(Element.FIRE) is Element.METAL
        assert destroys(Element.METAL) is Element.WOOD

    def test_interaction_values(self):
        assert element_interaction(Element.FIRE, Element.FIRE) == 1.0
        assert element_interaction(Element.WOOD, Element.FIRE) == 0.8
        assert element_interaction(Element.FIRE, Element.WOOD) == 0.6
        assert element_interaction(Element.WOOD, Element.EARTH) == -0.5
        assert element_interaction(Element.EARTH, Element.WOOD) == -0.8

    def test_interaction_is_total(self):
        """Every ordered pair falls into one of the five defined relations"""
        for a, b in product(Element, repeat=2):
            assert element_interaction(a, b) in (1.0, 0.8, 0.6, -0.5, -0.8)


class TestDosha:
    """Birth-season type, time-of-day curve and lunar balance"""

    @pytest.mark.parametrize("month,expected", [
        (1, DoshaType.VATA), (10, DoshaType.VATA), (12, DoshaType.VATA),
        (2, DoshaType.KAPHA), (4, DoshaType.KAPHA),
        (5, DoshaType.PITTA), (6, DoshaType.PITTA), (9, DoshaType.PITTA),
    ])
    def test_season(self, month, expected):
        assert dosha_for_month(month) is expected

    def test_bad_month(self):
        with pytest.raises(ValueError):
            dosha_for_month(13)

    def test_primary_dosha(self):
        assert primary_dosha(date(1990, 6, 15)) is DoshaType.PITTA

    @pytest.mark.parametrize("month,expected", [
        (3, DoshaType.PITTA), (6, DoshaType.PITTA),
        (7, DoshaType.VATA), (10, DoshaType.VATA),
        (11, DoshaType.KAPHA), (1, DoshaType.KAPHA), (2, DoshaType.KAPHA),
    ])
    def test_dominant_by_birth_month(self, month, expected):
        assert dominant_dosha(date(1990, month, 15)) is expected

    def test_peak_amplified_in_season(self):
        assert energy_level(DoshaType.PITTA, datetime(2025, 6, 1, 11)) == 100

    def test_peak_plain_out_of_season(self):
        assert energy_level(DoshaType.PITTA, datetime(2025, 12, 1, 11)) == 95

    def test_baseline_dampened_in_season(self):
        assert energy_level(DoshaType.PITTA, datetime(2025, 6, 1, 20)) == 55

    def test_dampening_floor(self):
        assert energy_level(DoshaType.KAPHA, datetime(2025, 3, 1, 7)) == 50

    def test_vata_afternoon_band(self):
        assert energy_level(DoshaType.VATA, datetime(2025, 6, 1, 15)) == 85

    def test_lunar_balance(self):
        assert lunar_balance(DoshaType.KAPHA, LunarPhase.FULL_MOON) == 0.9
        assert lunar_balance(DoshaType.PITTA, LunarPhase.FULL_MOON) == 0.7
        assert lunar_balance(DoshaType.VATA, LunarPhase.NEW_MOON) == 0.9
        assert lunar_balance(DoshaType.KAPHA, LunarPhase.NEW_MOON) == 0.7
        assert lunar_balance(DoshaType.PITTA, LunarPhase.FIRST_QUARTER) == 0.75

    def test_guidance(self):
        g = dosha_guidance(DoshaType.PITTA, datetime(2025, 6, 1, 11))
        assert g["dosha"] == "Pitta"
        assert g["energy_level"] == 100
        assert g["in_season"] is True
        assert g["business_focus"].startswith("Peak intensity")


class TestWeekday:

    def test_fortune_table(self):
        assert [weekday_fortune(i) for i in range(7)] == [0.8, 0.6, 0.9, 0.5, 0.7, 0.4, 0.7]

    def test_names_and_colours(self):
        assert day_name(2) == "Wednesday"
        assert weekday_color(2) == "Green"
