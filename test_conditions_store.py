"""
Tests for the conditions store: the one place conditions change.

Covers the settled-snapshot guarantees (expert gate, target species),
refused updates, idempotence and the weather merge.
"""

import random

import pytest

import conditions_store
from conditions_store import ConditionsStore, InvalidConditions, derive
from expert_gate import ExpertModeUnavailable, can_activate_expert
from fishing_types import (
    BottomType,
    Coordinates,
    ExpertiseLevel,
    WaterType,
    WindDirection,
    default_conditions,
)
from solar_clock import DayPhase
from solar_table import PERIODS
from species_recommender import SpeciesSuggestions
from weather_service import WeatherReading
from zones import GeoZone


@pytest.fixture
def store():
    return ConditionsStore(default_conditions(period="Juin"))


def _expert_ready(store):
    store.update(
        {
            "region": "Gironde",
            "water_type": WaterType.ESTUAIRE,
            "bottom_type": BottomType.VASE,
            "wind_direction": WindDirection.W,
        }
    )


# ============================================================================
# DEFAULTS / DERIVED VIEW
# ============================================================================

def test_first_load(store):
    snap = store.snapshot
    assert snap.expertise_level == ExpertiseLevel.BEGINNER
    assert snap.target_fish == "brochet"
    assert snap.region is None
    assert snap.depth.min == 0 and snap.depth.max == 10

    derived = store.derived
    assert derived.zone == GeoZone.INTERIEUR
    assert derived.is_coastal is True
    assert derived.phase == DayPhase.DAY
    assert derived.can_activate_expert is False
    assert WaterType.MER in derived.available_water_types


def test_inland_department_hides_saltwater_options(store):
    store.update({"region": "Cantal"})
    assert store.derived.is_coastal is False
    assert WaterType.MER not in store.derived.available_water_types
    assert WaterType.RIVIERE in store.derived.available_water_types


def test_show_water_flow(store):
    assert store.derived.show_water_flow is False
    store.update({"water_type": WaterType.LAC})
    assert store.derived.show_water_flow is False
    store.update({"water_type": WaterType.RIVIERE})
    assert store.derived.show_water_flow is True
    store.update({"water_type": WaterType.PORT})
    assert store.derived.show_water_flow is True


def test_finistere_after_dusk_suggests_squid(store):
    store.update({"region": "Finistère", "time": 1400})

    derived = store.derived
    assert derived.is_night is True
    assert derived.is_coastal is True
    assert "calamar" in [s.id for s in derived.suggestions.night_priority]
    # brochet is still on offer in Finistère, so the target doesn't move
    assert store.snapshot.target_fish == "brochet"


# ============================================================================
# EXPERT GATE
# ============================================================================

def test_expert_refused_when_nothing_set(store):
    before = store.snapshot
    with pytest.raises(ExpertModeUnavailable):
        store.update({"expertise_level": ExpertiseLevel.EXPERT})

    assert store.snapshot is before
    assert store.snapshot.expertise_level == ExpertiseLevel.BEGINNER


def test_refused_expert_request_applies_nothing_else(store):
    with pytest.raises(ExpertModeUnavailable):
        store.update({"expertise_level": "expert", "weather": 90})
    assert store.snapshot.weather == 50


def test_clearing_region_drops_expert_in_same_update(store):
    _expert_ready(store)
    store.set_expertise(ExpertiseLevel.EXPERT)
    assert store.snapshot.expertise_level == ExpertiseLevel.EXPERT

    settled = store.update({"region": None})

    assert settled.expertise_level == ExpertiseLevel.BEGINNER
    assert store.snapshot.expertise_level == ExpertiseLevel.BEGINNER
    assert store.derived.can_activate_expert is False


def test_full_form_resend_can_clear_a_gate_field(store):
    _expert_ready(store)
    store.set_expertise(ExpertiseLevel.EXPERT)

    # clients that post the whole form keep sending expert along with the edit
    settled = store.update({"region": None, "expertise_level": ExpertiseLevel.EXPERT})

    assert settled.region is None
    assert settled.expertise_level == ExpertiseLevel.BEGINNER


def test_expert_resent_while_eligible_stays_expert(store):
    _expert_ready(store)
    store.set_expertise(ExpertiseLevel.EXPERT)
    settled = store.update({"weather": 80, "expertise_level": ExpertiseLevel.EXPERT})
    assert settled.expertise_level == ExpertiseLevel.EXPERT
    assert settled.weather == 80


def test_expert_can_be_switched_off(store):
    _expert_ready(store)
    store.set_expertise(ExpertiseLevel.EXPERT)
    store.set_expertise(ExpertiseLevel.BEGINNER)
    assert store.snapshot.expertise_level == ExpertiseLevel.BEGINNER


def test_expert_and_fields_in_one_update(store):
    settled = store.update(
        {
            "region": "Var",
            "water_type": WaterType.DIGUE,
            "bottom_type": BottomType.ROCHE,
            "wind_direction": WindDirection.N,
            "expertise_level": ExpertiseLevel.EXPERT,
        }
    )
    assert settled.expertise_level == ExpertiseLevel.EXPERT


def test_submission_snapshot_is_never_inconsistent(store):
    _expert_ready(store)
    store.set_expertise(ExpertiseLevel.EXPERT)
    assert store.submission_snapshot().expertise_level == ExpertiseLevel.EXPERT

    store.update({"wind_direction": None})
    assert store.submission_snapshot().expertise_level == ExpertiseLevel.BEGINNER


# ============================================================================
# TARGET SPECIES
# ============================================================================

def test_hidden_target_falls_back_to_local_pick(store):
    store.update({"region": "Gironde", "target_fish": "bar"})
    assert store.snapshot.target_fish == "bar"

    store.update({"region": "Cantal"})
    assert store.snapshot.target_fish == "brochet"


def test_hidden_target_falls_back_to_night_pick(store):
    store.update({"region": "Guyane", "target_fish": "espadon"})
    assert store.snapshot.target_fish == "espadon"

    store.update({"region": "Finistère", "time": 1400})
    assert store.snapshot.target_fish == "calamar"


def test_guyane_switches_target_to_local_species(store):
    store.update({"region": "Guyane"})
    # brochet doesn't live there; first local pick in label order
    assert store.snapshot.target_fish == "acoupa"


def test_empty_suggestions_leave_target_alone(store, monkeypatch):
    empty = SpeciesSuggestions((), (), ())
    monkeypatch.setattr(conditions_store, "recommend_species", lambda *a, **kw: empty)

    store.update({"target_fish": "thon", "region": "Cantal"})

    assert store.derived.suggestions.is_empty
    assert store.snapshot.target_fish == "thon"


# ============================================================================
# REFUSED UPDATES
# ============================================================================

@pytest.mark.parametrize(
    "changes",
    [
        {"weather": 150},
        {"time": 1440},
        {"time": -1},
        {"depth": {"min": 12, "max": 4}},
        {"target_fish": "nemo"},
        {"water_type": "Piscine"},
        {"pressure": 0},
        {"bogus": 1},
        {"technique": None},
    ],
)
def test_invalid_changes_are_refused(store, changes):
    before = store.snapshot
    with pytest.raises(InvalidConditions):
        store.update(changes)
    assert store.snapshot is before


def test_unknown_period_is_tolerated(store):
    store.update({"period": "Smarch"})
    assert store.derived.sunrise == 360
    assert store.derived.sunset == 1080


def test_blank_region_means_no_region(store):
    store.update({"region": "   "})
    assert store.snapshot.region is None


# ============================================================================
# IDEMPOTENCE / INVARIANTS
# ============================================================================

def test_empty_update_is_idempotent(store):
    store.update({"region": "Hérault", "time": 1300})
    first = store.update({})
    first_derived = store.derived
    second = store.update({})

    assert first == second
    assert store.derived == first_derived
    assert derive(second) == first_derived


def test_invariants_hold_under_random_edits():
    rng = random.Random(20240611)
    store = ConditionsStore(default_conditions(period="Mai"))

    regions = [None, "Gironde", "Finistère", "Var", "Cantal", "Guyane", "La Réunion", "Nord"]
    species_ids = ["brochet", "bar", "calamar", "seiche", "espadon", "acoupa", "carpe"]

    def random_change():
        field = rng.choice(
            ["region", "time", "period", "water_type", "bottom_type",
             "wind_direction", "expertise_level", "target_fish"]
        )
        if field == "region":
            return {field: rng.choice(regions)}
        if field == "time":
            return {field: rng.randrange(0, 1440)}
        if field == "period":
            return {field: rng.choice(PERIODS)}
        if field == "water_type":
            return {field: rng.choice([None] + list(WaterType))}
        if field == "bottom_type":
            return {field: rng.choice([None] + list(BottomType))}
        if field == "wind_direction":
            return {field: rng.choice([None] + list(WindDirection))}
        if field == "expertise_level":
            return {field: rng.choice(list(ExpertiseLevel))}
        return {field: rng.choice(species_ids)}

    for _ in range(500):
        try:
            store.update(random_change())
        except ExpertModeUnavailable:
            pass

        snap = store.snapshot
        if snap.expertise_level == ExpertiseLevel.EXPERT:
            assert can_activate_expert(snap)
        visible = store.visible_species_ids()
        if visible:
            assert snap.target_fish in visible
        assert store.derived == derive(snap)


# ============================================================================
# WEATHER MERGE
# ============================================================================

def _reading(**overrides):
    values = dict(
        weather_score=85,
        wind_score=40,
        wind_direction=WindDirection.NW,
        time=1130,
        period="Août",
        pressure=1008.6,
        region="Gironde",
        city_name="Arcachon",
        source="openweathermap",
    )
    values.update(overrides)
    return WeatherReading(**values)


def test_apply_weather(store):
    settled = store.apply_weather(_reading(), Coordinates(lat=44.66, lon=-1.17))

    assert settled.weather == 85
    assert settled.wind == 40
    assert settled.wind_direction == WindDirection.NW
    assert settled.time == 1130
    assert settled.period == "Août"
    assert settled.pressure == 1009
    assert settled.region == "Gironde"
    assert settled.coordinates == Coordinates(lat=44.66, lon=-1.17)
    assert store.derived.zone == GeoZone.ATLANTIQUE_MANCHE


def test_apply_weather_keeps_region_and_defaults_pressure(store):
    store.update({"region": "Var"})
    settled = store.apply_weather(_reading(region=None, pressure=None))

    assert settled.region == "Var"
    assert settled.pressure == 1013
    assert settled.coordinates is None
