"""Weekday fortune table and day names (Monday = 0, as datetime.weekday())."""
import config

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def weekday_fortune(weekday: int) -> float:
    """Base fortune in [0, 1] for a weekday."""
    return config.WEEKDAY_FORTUNE[weekday][1]


def weekday_color(weekday: int) -> str:
    return config.WEEKDAY_FORTUNE[weekday][0]


def day_name(weekday: int) -> str:
    return DAY_NAMES[weekday]
