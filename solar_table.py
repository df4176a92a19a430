# solar_table.py
#
# Average sunrise / sunset per calendar period, in minutes from midnight.
# Approximate values for western France – good enough to split a day
# into night / dawn / day / dusk.

from typing import Dict, List, NamedTuple


class SolarTimes(NamedTuple):
    sunrise: int
    sunset: int


PERIODS: List[str] = [
    "Janvier", "Février", "Mars", "Avril", "Mai", "Juin",
    "Juillet", "Août", "Septembre", "Octobre", "Novembre", "Décembre",
]

SOLAR_TIMES: Dict[str, SolarTimes] = {
    "Janvier": SolarTimes(8 * 60 + 40, 17 * 60 + 30),
    "Février": SolarTimes(8 * 60 + 0, 18 * 60 + 15),
    "Mars": SolarTimes(7 * 60 + 10, 19 * 60 + 0),
    "Avril": SolarTimes(7 * 60 + 0, 20 * 60 + 45),
    "Mai": SolarTimes(6 * 60 + 15, 21 * 60 + 30),
    "Juin": SolarTimes(5 * 60 + 50, 22 * 60 + 0),
    "Juillet": SolarTimes(6 * 60 + 10, 21 * 60 + 50),
    "Août": SolarTimes(6 * 60 + 50, 21 * 60 + 0),
    "Septembre": SolarTimes(7 * 60 + 30, 20 * 60 + 0),
    "Octobre": SolarTimes(8 * 60 + 15, 18 * 60 + 45),
    "Novembre": SolarTimes(8 * 60 + 0, 17 * 60 + 30),
    "Décembre": SolarTimes(8 * 60 + 45, 17 * 60 + 0),
}

# 06:00 – 18:00 when someone hands us a period we don't know
DEFAULT_SOLAR_TIMES = SolarTimes(360, 1080)

MINUTES_PER_DAY = 1440


def get_solar_times(period: str) -> SolarTimes:
    return SOLAR_TIMES.get(period, DEFAULT_SOLAR_TIMES)


def period_for_month(month: int) -> str:
    """Map a calendar month number (1–12) to its period name."""
    if month < 1 or month > 12:
        raise ValueError(f"month must be between 1 and 12, got {month}")
    return PERIODS[month - 1]
