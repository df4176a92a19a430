"""
Solar clock.

Turns a time of day (minutes from midnight) plus a calendar period into:
- a day phase: night / dawn / day / dusk
- an "is it night" flag used when suggesting species
- a sun angle (90° at first light → 270° at end of dusk) for the front end

Two night rules live here on purpose:
- the phase treats the hour after sunset as dusk (inclusive at sunset + 60)
- is_night only flips once that hour is over, and stays on until sunrise

At exactly sunset + 60 the phase is still "dusk" but is_night is already True.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from solar_table import get_solar_times

TWILIGHT_MINUTES = 60

NIGHT_ANGLE = 180.0
AFTERGLOW_ANGLE = 270.0


class DayPhase(str, Enum):
    NIGHT = "night"
    DAWN = "dawn"
    DAY = "day"
    DUSK = "dusk"


@dataclass(frozen=True)
class SolarReading:
    phase: DayPhase
    day_progress_angle: float
    is_night: bool
    sunrise: int
    sunset: int


def day_phase(time: int, period: str) -> DayPhase:
    sunrise, sunset = get_solar_times(period)

    dawn_start = sunrise - TWILIGHT_MINUTES
    dawn_end = sunrise
    dusk_start = sunset - TWILIGHT_MINUTES
    dusk_end = sunset + TWILIGHT_MINUTES

    if time < dawn_start:
        return DayPhase.NIGHT
    if time < dawn_end:
        return DayPhase.DAWN
    if time < dusk_start:
        return DayPhase.DAY
    if time <= dusk_end:
        return DayPhase.DUSK
    return DayPhase.NIGHT


def is_night(time: int, period: str) -> bool:
    """Night for fish activity: from one hour after sunset until sunrise."""
    sunrise, sunset = get_solar_times(period)
    return time >= sunset + TWILIGHT_MINUTES or time < sunrise


def day_progress_angle(time: int, period: str) -> float:
    """
    Sun position as an angle in degrees.

    First light (sunrise - 60) maps to 90°, end of dusk (sunset + 60) to 270°.
    The hour after dusk holds at 270°, the rest of the night sits at 180°.
    """
    sunrise, sunset = get_solar_times(period)
    dawn_start = sunrise - TWILIGHT_MINUTES
    dusk_end = sunset + TWILIGHT_MINUTES

    if dawn_start <= time <= dusk_end:
        progress = (time - dawn_start) / (dusk_end - dawn_start)
        return 90.0 + progress * 180.0
    if dusk_end < time < dusk_end + TWILIGHT_MINUTES:
        return AFTERGLOW_ANGLE
    return NIGHT_ANGLE


def read_clock(time: int, period: str) -> SolarReading:
    sunrise, sunset = get_solar_times(period)
    return SolarReading(
        phase=day_phase(time, period),
        day_progress_angle=day_progress_angle(time, period),
        is_night=is_night(time, period),
        sunrise=sunrise,
        sunset=sunset,
    )
