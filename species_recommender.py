"""
Species suggestions.

Given the zone, whether the spot is coastal and whether it is night, split
the visible part of the catalog into three ranked groups:

    night_priority – squid / cuttlefish on a coastal spot after dark
    local_priority – species that are a top pick for this zone
    other          – everything else still visible

Filters run first (coastal, then zone restriction), so a species is in
exactly one group or in none.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from species_catalog import SPECIES_CATALOG, Habitat, SpeciesRecord
from zones import GeoZone

NOCTURNAL_CEPHALOPOD_IDS = ("calamar", "seiche")


@dataclass(frozen=True)
class SpeciesSuggestions:
    night_priority: Tuple[SpeciesRecord, ...]
    local_priority: Tuple[SpeciesRecord, ...]
    other: Tuple[SpeciesRecord, ...]

    def all_visible(self) -> List[SpeciesRecord]:
        return list(self.night_priority) + list(self.local_priority) + list(self.other)

    def visible_ids(self) -> List[str]:
        return [s.id for s in self.all_visible()]

    @property
    def is_empty(self) -> bool:
        return not (self.night_priority or self.local_priority or self.other)


def label_sort_key(label: str) -> Tuple[str, str]:
    """
    Alphabetical order the way a French reader expects it.

    Accents and case are ignored on the first pass ("Étang" files under E),
    the raw label breaks ties so the order stays total.
    """
    decomposed = unicodedata.normalize("NFKD", label)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), label


def visible_species(
    zone: GeoZone,
    coastal: bool,
    catalog: Sequence[SpeciesRecord] = SPECIES_CATALOG,
) -> List[SpeciesRecord]:
    species = list(catalog)

    if not coastal:
        species = [s for s in species if s.habitat != Habitat.SALTWATER]

    return [
        s for s in species
        if s.restricted_to_zones is None or zone in s.restricted_to_zones
    ]


def recommend_species(
    zone: GeoZone,
    coastal: bool,
    night: bool,
    catalog: Sequence[SpeciesRecord] = SPECIES_CATALOG,
) -> SpeciesSuggestions:
    night_list: List[SpeciesRecord] = []
    local_list: List[SpeciesRecord] = []
    other_list: List[SpeciesRecord] = []

    for s in visible_species(zone, coastal, catalog):
        if night and coastal and s.id in NOCTURNAL_CEPHALOPOD_IDS:
            night_list.append(s)
        elif zone in s.priority_zones:
            local_list.append(s)
        else:
            other_list.append(s)

    def _sorted(items: List[SpeciesRecord]) -> Tuple[SpeciesRecord, ...]:
        return tuple(sorted(items, key=lambda s: label_sort_key(s.label)))

    return SpeciesSuggestions(
        night_priority=_sorted(night_list),
        local_priority=_sorted(local_list),
        other=_sorted(other_list),
    )


def pick_target(current: Optional[str], suggestions: SpeciesSuggestions) -> Optional[str]:
    """
    Keep the current target if it is still on offer, otherwise fall back to
    the first night pick, then the first local pick, then the first of the
    rest. Nothing on offer → leave the target alone.
    """
    visible = suggestions.all_visible()
    if not visible:
        return current

    if current in {s.id for s in visible}:
        return current

    if suggestions.night_priority:
        return suggestions.night_priority[0].id
    if suggestions.local_priority:
        return suggestions.local_priority[0].id
    return visible[0].id
