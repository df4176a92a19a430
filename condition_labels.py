# condition_labels.py
#
# Turn the 0–100 sliders into the words an angler would use.
# Pure lookups – used by the strategy prompt and the session view.

from typing import Optional

from fishing_types import SALTWATER_WATER_TYPES, WaterType, WindDirection

FLOWING_FRESHWATER = (WaterType.RIVIERE, WaterType.FLEUVE, WaterType.CANAL, WaterType.BARRAGE)


def format_time(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def weather_label(value: int) -> str:
    if value < 16:
        return "Orageux"
    if value < 32:
        return "Pluie"
    if value < 48:
        return "Temps gris"
    if value < 64:
        return "Nuageux"
    if value < 80:
        return "Éclaircies"
    return "Plein Soleil"


def clarity_label(value: int) -> str:
    if value < 20:
        return "Boueuse"
    if value < 40:
        return "Trouble"
    if value < 60:
        return "Teintée"
    if value < 80:
        return "Claire"
    return "Cristalline"


def tide_label(value: int) -> str:
    # 0 low → 50 high → 100 low again
    if value <= 15:
        return "Basse mer (étale)"
    if value < 45:
        return "Montante"
    if value <= 55:
        return "Pleine mer (étale)"
    if value < 85:
        return "Descendante"
    return "Basse mer (étale)"


def wind_label(value: int) -> str:
    if value < 20:
        return "Calme plat"
    if value < 40:
        return "Brise légère"
    if value < 60:
        return "Vent modéré"
    if value < 80:
        return "Vent soutenu"
    return "Tempête / Rafales"


def water_flow_label(value: int) -> str:
    if value < 20:
        return "Nul / Stagnant"
    if value < 40:
        return "Lent / Faible"
    if value < 60:
        return "Moyen"
    if value < 80:
        return "Soutenu"
    return "Puissant / Fort"


def surface_label(value: int) -> str:
    if value < 10:
        return "Miroir / Calme plat"
    if value < 30:
        return "Petites rides"
    if value < 50:
        return "Vaguelettes / Clapot"
    if value < 70:
        return "Vagues modérées"
    if value < 90:
        return "Houle prononcée"
    return "Démontée / Écume"


_WIND_DIRECTION_LABELS = {
    WindDirection.N: "De face (Venant du large)",
    WindDirection.NE: "3/4 Face (Gauche)",
    WindDirection.E: "Latéral (Venant de gauche)",
    WindDirection.SE: "3/4 Dos (Gauche)",
    WindDirection.S: "De dos (Venant de terre)",
    WindDirection.SW: "3/4 Dos (Droite)",
    WindDirection.W: "Latéral (Venant de droite)",
    WindDirection.NW: "3/4 Face (Droite)",
}


def wind_direction_label(direction: Optional[WindDirection]) -> str:
    if direction is None:
        return "Non renseigné"
    return _WIND_DIRECTION_LABELS[direction]


def pressure_status(hpa: float) -> str:
    if hpa < 1005:
        return "🔴 Basse pression - Poissons potentiellement apathiques ou en profondeur."
    if hpa <= 1015:
        return "🟡 Pression stable - Conditions normales."
    return "🟢 Haute pression - Activité de surface possible."


def is_saltwater(water_type: Optional[WaterType]) -> bool:
    return water_type is not None and water_type in SALTWATER_WATER_TYPES


def shows_water_flow(water_type: Optional[WaterType]) -> bool:
    """Current only matters at sea and on moving fresh water."""
    if water_type is None:
        return False
    if is_saltwater(water_type):
        return True
    return water_type in FLOWING_FRESHWATER
