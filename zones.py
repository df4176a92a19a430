# zones.py
#
# Which ecological zone a French department belongs to, and whether it
# touches the sea. Plain lists – the department names are the ones the
# geo.api.gouv.fr commune lookup hands back.

from enum import Enum
from typing import List, Optional


class GeoZone(str, Enum):
    MEDITERRANEE = "Méditerranée"
    ATLANTIQUE_MANCHE = "Atlantique / Manche"
    GUYANE = "Guyane"
    TROPICAL = "Tropical (DROM)"
    INTERIEUR = "Intérieur des terres"


MEDITERRANEAN_DEPARTMENTS: List[str] = [
    "Pyrénées-Orientales", "Aude", "Hérault", "Gard", "Bouches-du-Rhône",
    "Var", "Alpes-Maritimes", "Haute-Corse", "Corse-du-Sud",
]

ATLANTIC_CHANNEL_DEPARTMENTS: List[str] = [
    # North / Channel
    "Nord", "Pas-de-Calais", "Somme", "Seine-Maritime", "Calvados", "Manche",
    "Ille-et-Vilaine", "Côtes-d'Armor", "Finistère",
    # Atlantic
    "Morbihan", "Loire-Atlantique", "Vendée", "Charente-Maritime", "Gironde",
    "Landes", "Pyrénées-Atlantiques",
]

GUYANA_DEPARTMENTS: List[str] = ["Guyane"]

TROPICAL_DEPARTMENTS: List[str] = ["Guadeloupe", "Martinique", "La Réunion", "Mayotte"]

COASTAL_DEPARTMENTS: List[str] = (
    ATLANTIC_CHANNEL_DEPARTMENTS
    + MEDITERRANEAN_DEPARTMENTS
    + GUYANA_DEPARTMENTS
    + TROPICAL_DEPARTMENTS
)

# Zones where metropolitan / overseas species live
METROPOLE_ZONES = (GeoZone.INTERIEUR, GeoZone.ATLANTIQUE_MANCHE, GeoZone.MEDITERRANEE)
DROM_ZONES = (GeoZone.GUYANE, GeoZone.TROPICAL)


def resolve_zone(region: Optional[str]) -> GeoZone:
    """Map a department name to its zone. Unknown or missing → inland."""
    if not region:
        return GeoZone.INTERIEUR

    if region in MEDITERRANEAN_DEPARTMENTS:
        return GeoZone.MEDITERRANEE
    if region in ATLANTIC_CHANNEL_DEPARTMENTS:
        return GeoZone.ATLANTIQUE_MANCHE
    if region in GUYANA_DEPARTMENTS:
        return GeoZone.GUYANE
    if region in TROPICAL_DEPARTMENTS:
        return GeoZone.TROPICAL

    return GeoZone.INTERIEUR


def is_coastal(region: Optional[str]) -> bool:
    """
    Whether saltwater spots and species should be offered.

    No region picked yet → True, so first load shows everything.
    """
    if not region:
        return True
    return region in COASTAL_DEPARTMENTS
