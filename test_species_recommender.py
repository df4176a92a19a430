"""
Tests for species filtering, partitioning and ordering.
"""

import itertools

from species_catalog import SPECIES_BY_ID, SPECIES_CATALOG, Habitat, SpeciesRecord
from species_recommender import (
    SpeciesSuggestions,
    label_sort_key,
    pick_target,
    recommend_species,
    visible_species,
)
from zones import GeoZone


def _labels(records):
    return [s.label for s in records]


# ============================================================================
# COVERAGE / DISJOINTNESS
# ============================================================================

def test_groups_cover_visible_set_without_duplicates():
    for zone, coastal, night in itertools.product(GeoZone, (True, False), (True, False)):
        suggestions = recommend_species(zone, coastal, night)
        ids = suggestions.visible_ids()
        assert len(ids) == len(set(ids)), (zone, coastal, night)
        assert set(ids) == {s.id for s in visible_species(zone, coastal)}, (zone, coastal, night)


def test_each_group_is_sorted():
    for zone, coastal, night in itertools.product(GeoZone, (True, False), (True, False)):
        s = recommend_species(zone, coastal, night)
        for group in (s.night_priority, s.local_priority, s.other):
            keys = [label_sort_key(r.label) for r in group]
            assert keys == sorted(keys)


# ============================================================================
# FILTERS
# ============================================================================

def test_inland_spot_hides_saltwater():
    visible = visible_species(GeoZone.INTERIEUR, coastal=False)
    assert visible
    assert all(s.habitat != Habitat.SALTWATER for s in visible)


def test_restricted_species_only_show_in_their_zone():
    guyane = {s.id for s in visible_species(GeoZone.GUYANE, coastal=True)}
    tropical = {s.id for s in visible_species(GeoZone.TROPICAL, coastal=True)}
    atlantic = {s.id for s in visible_species(GeoZone.ATLANTIQUE_MANCHE, coastal=True)}

    assert "acoupa" in guyane
    assert "acoupa" not in tropical
    assert "brochet" not in guyane
    assert "espadon" not in atlantic
    assert "brochet" in atlantic


def test_unrestricted_species_are_kept_everywhere():
    catalog = [SpeciesRecord("anguille", "Anguille", "", Habitat.MIGRATORY)]
    for zone in GeoZone:
        assert _labels(visible_species(zone, coastal=False, catalog=catalog)) == ["Anguille"]


# ============================================================================
# PARTITION
# ============================================================================

def test_finistere_after_dusk_puts_cephalopods_first():
    s = recommend_species(GeoZone.ATLANTIQUE_MANCHE, coastal=True, night=True)

    assert _labels(s.night_priority) == ["Calamar", "Seiche"]
    assert _labels(s.local_priority) == [
        "Bar (Loup)", "Daurade Royale", "Lieu Jaune", "Thon Rouge", "Truite", "Vieille",
    ]
    assert _labels(s.other) == [
        "Barracuda", "Black-Bass", "Brochet", "Carpe", "Chevesne",
        "Maquereau", "Perche", "Sandre", "Silure",
    ]


def test_cephalopods_are_ordinary_by_day():
    s = recommend_species(GeoZone.ATLANTIQUE_MANCHE, coastal=True, night=False)
    assert s.night_priority == ()
    assert "calamar" in {r.id for r in s.other}


def test_inland_local_priority():
    s = recommend_species(GeoZone.INTERIEUR, coastal=False, night=True)
    assert s.night_priority == ()
    assert _labels(s.local_priority) == ["Brochet", "Chevesne", "Perche", "Sandre", "Truite"]
    assert _labels(s.other) == ["Black-Bass", "Carpe", "Silure"]


def test_first_load_shows_saltwater_inland():
    # no region: inland zone but coastal-permissive
    s = recommend_species(GeoZone.INTERIEUR, coastal=True, night=True)
    assert "bar" in s.visible_ids()
    assert [r.id for r in s.night_priority] == ["calamar", "seiche"]


def test_priority_zone_that_is_not_visible_is_ignored():
    catalog = [
        SpeciesRecord("a", "A", "", Habitat.SALTWATER, (GeoZone.INTERIEUR,)),
        SpeciesRecord("b", "B", "", Habitat.FRESHWATER, (GeoZone.INTERIEUR,)),
    ]
    s = recommend_species(GeoZone.INTERIEUR, coastal=False, night=False, catalog=catalog)
    assert s.visible_ids() == ["b"]


# ============================================================================
# ORDERING
# ============================================================================

def test_sort_ignores_accents_and_case():
    catalog = [
        SpeciesRecord("z", "zander", "", Habitat.FRESHWATER),
        SpeciesRecord("e", "Éperlan", "", Habitat.FRESHWATER),
        SpeciesRecord("a", "Ablette", "", Habitat.FRESHWATER),
        SpeciesRecord("f", "Flet", "", Habitat.FRESHWATER),
    ]
    s = recommend_species(GeoZone.INTERIEUR, coastal=False, night=False, catalog=catalog)
    assert _labels(s.other) == ["Ablette", "Éperlan", "Flet", "zander"]


# ============================================================================
# TARGET PICKING
# ============================================================================

def _suggestions(night=(), local=(), other=()):
    return SpeciesSuggestions(
        night_priority=tuple(SPECIES_BY_ID[i] for i in night),
        local_priority=tuple(SPECIES_BY_ID[i] for i in local),
        other=tuple(SPECIES_BY_ID[i] for i in other),
    )


def test_pick_target_keeps_visible_choice():
    s = _suggestions(night=["calamar"], local=["bar"], other=["carpe"])
    assert pick_target("carpe", s) == "carpe"


def test_pick_target_precedence():
    assert pick_target("espadon", _suggestions(night=["seiche"], local=["bar"])) == "seiche"
    assert pick_target("espadon", _suggestions(local=["lieu", "bar"], other=["carpe"])) == "lieu"
    assert pick_target("espadon", _suggestions(other=["carpe", "silure"])) == "carpe"


def test_pick_target_leaves_target_alone_when_nothing_visible():
    empty = recommend_species(GeoZone.GUYANE, coastal=False, night=False)
    assert empty.is_empty
    assert empty.all_visible() == []
    assert pick_target("brochet", empty) == "brochet"


def test_catalog_ids_are_unique():
    assert len(SPECIES_BY_ID) == len(SPECIES_CATALOG) == 24
