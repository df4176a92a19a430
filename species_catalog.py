# species_catalog.py
#
# Every species the app can suggest.
#   priority_zones      – zones where the species is a local top pick
#   restricted_to_zones – if set, the species is hidden everywhere else

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from zones import DROM_ZONES, METROPOLE_ZONES, GeoZone


class Habitat(str, Enum):
    FRESHWATER = "freshwater"
    SALTWATER = "saltwater"
    MIGRATORY = "migratory"


@dataclass(frozen=True)
class SpeciesRecord:
    id: str
    label: str
    icon: str
    habitat: Habitat
    priority_zones: Tuple[GeoZone, ...] = ()
    restricted_to_zones: Optional[Tuple[GeoZone, ...]] = None


_FW = Habitat.FRESHWATER
_SW = Habitat.SALTWATER

SPECIES_CATALOG: List[SpeciesRecord] = [
    # ---------- Freshwater (inland) ----------
    SpeciesRecord("brochet", "Brochet", "🦈", _FW, (GeoZone.INTERIEUR,), METROPOLE_ZONES),
    SpeciesRecord("sandre", "Sandre", "🧛", _FW, (GeoZone.INTERIEUR,), METROPOLE_ZONES),
    SpeciesRecord("perche", "Perche", "🐟", _FW, (GeoZone.INTERIEUR,), METROPOLE_ZONES),
    SpeciesRecord("blackbass", "Black-Bass", "🐡", _FW, (), METROPOLE_ZONES),
    SpeciesRecord("silure", "Silure", "🐋", _FW, (), METROPOLE_ZONES),
    SpeciesRecord("chevesne", "Chevesne", "🐟", _FW, (GeoZone.INTERIEUR,), METROPOLE_ZONES),
    SpeciesRecord("carpe", "Carpe", "🎏", _FW, (), METROPOLE_ZONES),
    SpeciesRecord(
        "truite", "Truite", "🐠", _FW,
        (GeoZone.INTERIEUR, GeoZone.ATLANTIQUE_MANCHE), METROPOLE_ZONES,
    ),

    # ---------- Saltwater (metropole) ----------
    SpeciesRecord(
        "bar", "Bar (Loup)", "🐺", _SW,
        (GeoZone.ATLANTIQUE_MANCHE, GeoZone.MEDITERRANEE), METROPOLE_ZONES,
    ),
    SpeciesRecord(
        "daurade", "Daurade Royale", "👑", _SW,
        (GeoZone.MEDITERRANEE, GeoZone.ATLANTIQUE_MANCHE), METROPOLE_ZONES,
    ),
    SpeciesRecord("lieu", "Lieu Jaune", "🟡", _SW, (GeoZone.ATLANTIQUE_MANCHE,), METROPOLE_ZONES),
    SpeciesRecord("vieille", "Vieille", "🐲", _SW, (GeoZone.ATLANTIQUE_MANCHE,), METROPOLE_ZONES),
    SpeciesRecord("maquereau", "Maquereau", "⚡", _SW, (), METROPOLE_ZONES),
    SpeciesRecord("barracuda", "Barracuda", "🦷", _SW, (GeoZone.MEDITERRANEE,), METROPOLE_ZONES),
    SpeciesRecord(
        "thon", "Thon Rouge", "🍣", _SW,
        (GeoZone.MEDITERRANEE, GeoZone.ATLANTIQUE_MANCHE), METROPOLE_ZONES,
    ),

    # ---------- Cephalopods – pushed to the top at night ----------
    SpeciesRecord("calamar", "Calamar", "🦑", _SW, (), METROPOLE_ZONES),
    SpeciesRecord("seiche", "Seiche", "🐙", _SW, (), METROPOLE_ZONES),

    # ---------- Overseas (Guyane, Réunion, Antilles) ----------
    SpeciesRecord("espadon", "Espadon", "🗡️", _SW, (GeoZone.TROPICAL, GeoZone.GUYANE), DROM_ZONES),
    SpeciesRecord("wahoo", "Thon Wahoo", "🚀", _SW, (GeoZone.TROPICAL, GeoZone.GUYANE), DROM_ZONES),
    SpeciesRecord(
        "coryphene", "Daurade Coryphène", "🌈", _SW,
        (GeoZone.TROPICAL, GeoZone.GUYANE), DROM_ZONES,
    ),
    SpeciesRecord("tarpon", "Tarpon", "🦾", _SW, (GeoZone.GUYANE, GeoZone.TROPICAL), DROM_ZONES),
    SpeciesRecord("acoupa", "Acoupa", "🔊", _SW, (GeoZone.GUYANE,), (GeoZone.GUYANE,)),
    SpeciesRecord("snook", "Snook", "📏", _SW, (GeoZone.GUYANE, GeoZone.TROPICAL), DROM_ZONES),
    SpeciesRecord("carangue", "Carangue", "🦍", _SW, (GeoZone.TROPICAL, GeoZone.GUYANE), DROM_ZONES),
]

SPECIES_BY_ID: Dict[str, SpeciesRecord] = {s.id: s for s in SPECIES_CATALOG}


def get_species(species_id: str) -> SpeciesRecord:
    try:
        return SPECIES_BY_ID[species_id]
    except KeyError:
        raise KeyError(f"Unknown species id: {species_id}") from None
