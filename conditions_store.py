"""
Conditions store.

Owns one FishingConditions snapshot and is the only way to change it.
Every call to `update` goes:

    merge + validate → expert request check → derive (sun, zone, species,
    expert gate) → auto-downgrade expert → re-pick target species

and only then swaps the new snapshot in. A failed update leaves the old
snapshot untouched, so readers never see a half-applied change.

No I/O, no locks: one store per angler session, callers serialise updates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from condition_labels import shows_water_flow
from expert_gate import can_activate_expert, check_activation, coerce_for_submission, enforce_expertise
from fishing_types import (
    DEFAULT_PRESSURE,
    Coordinates,
    ExpertiseLevel,
    FishingConditions,
    WaterType,
    available_water_types,
    default_conditions,
)
from solar_clock import DayPhase, read_clock
from species_recommender import SpeciesSuggestions, pick_target, recommend_species
from zones import GeoZone, is_coastal, resolve_zone

if TYPE_CHECKING:
    from weather_service import WeatherReading

logger = logging.getLogger(__name__)


class InvalidConditions(Exception):
    """A change was refused because the resulting snapshot would be invalid."""


@dataclass(frozen=True)
class DerivedConditions:
    phase: DayPhase
    day_progress_angle: float
    is_night: bool
    sunrise: int
    sunset: int
    zone: GeoZone
    is_coastal: bool
    suggestions: SpeciesSuggestions
    can_activate_expert: bool
    available_water_types: Tuple[WaterType, ...]
    show_water_flow: bool


def derive(conditions: FishingConditions) -> DerivedConditions:
    """Everything the UI and the strategy call read off a snapshot."""
    clock = read_clock(conditions.time, conditions.period)
    zone = resolve_zone(conditions.region)
    coastal = is_coastal(conditions.region)

    return DerivedConditions(
        phase=clock.phase,
        day_progress_angle=clock.day_progress_angle,
        is_night=clock.is_night,
        sunrise=clock.sunrise,
        sunset=clock.sunset,
        zone=zone,
        is_coastal=coastal,
        suggestions=recommend_species(zone, coastal, clock.is_night),
        can_activate_expert=can_activate_expert(conditions),
        available_water_types=tuple(available_water_types(coastal)),
        show_water_flow=shows_water_flow(conditions.water_type),
    )


def _settle(candidate: FishingConditions) -> Tuple[FishingConditions, DerivedConditions]:
    derived = derive(candidate)

    settled = enforce_expertise(candidate)
    if settled is not candidate:
        logger.info("Expert mode dropped – gate no longer satisfied")

    target = pick_target(settled.target_fish, derived.suggestions)
    if target != settled.target_fish:
        logger.info("Target species %s not on offer, switching to %s", settled.target_fish, target)
        settled = settled.model_copy(update={"target_fish": target})

    return settled, derived


class ConditionsStore:
    def __init__(self, initial: Optional[FishingConditions] = None):
        self._snapshot, self._derived = _settle(initial or default_conditions())

    @property
    def snapshot(self) -> FishingConditions:
        return self._snapshot

    @property
    def derived(self) -> DerivedConditions:
        return self._derived

    def update(self, changes: Optional[Dict[str, Any]] = None) -> FishingConditions:
        """
        Apply a partial change and return the settled snapshot.

        Raises InvalidConditions for unknown fields or out-of-range values and
        ExpertModeUnavailable when expert mode is asked for without the
        required fields. In both cases nothing is applied.
        """
        changes = dict(changes or {})

        merged = self._snapshot.model_dump()
        merged.update(changes)
        try:
            candidate = FishingConditions.model_validate(merged)
        except ValidationError as e:
            raise InvalidConditions(str(e)) from e

        # Only beginner → expert is an activation; an expert snapshot that
        # loses a gate field is downgraded by _settle instead.
        if self._snapshot.expertise_level == ExpertiseLevel.BEGINNER:
            check_activation(candidate)

        self._snapshot, self._derived = _settle(candidate)
        logger.debug("Conditions updated: %s", sorted(changes))
        return self._snapshot

    def set_expertise(self, level: ExpertiseLevel) -> FishingConditions:
        return self.update({"expertise_level": level})

    def apply_weather(
        self,
        reading: "WeatherReading",
        coordinates: Optional[Coordinates] = None,
    ) -> FishingConditions:
        """Fold a weather lookup into the snapshot as one update."""
        changes: Dict[str, Any] = {
            "weather": reading.weather_score,
            "wind": reading.wind_score,
            "wind_direction": reading.wind_direction,
            "time": reading.time,
            "period": reading.period,
            "pressure": float(round(reading.pressure)) if reading.pressure else DEFAULT_PRESSURE,
            # keep whatever department the angler picked if the lookup found none
            "region": reading.region or self._snapshot.region,
        }
        if coordinates is not None:
            changes["coordinates"] = coordinates
        return self.update(changes)

    def submission_snapshot(self) -> FishingConditions:
        return coerce_for_submission(self._snapshot)

    def visible_species_ids(self) -> List[str]:
        return self._derived.suggestions.visible_ids()
