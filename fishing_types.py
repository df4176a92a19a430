"""
Domain types for the conditions form.

Enumerations carry the French labels shown to the angler and sent to the
model. FishingConditions is the single snapshot the store owns.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from solar_table import period_for_month
from species_catalog import SPECIES_BY_ID


class WaterType(str, Enum):
    RIVIERE = "Rivière"
    FLEUVE = "Fleuve"
    LAC = "Lac"
    ETANG = "Étang"
    CANAL = "Canal"
    BARRAGE = "Barrage"
    MER = "Pleine Mer"
    DIGUE = "Digue"
    PLAGE = "Plage"
    FALAISES = "Falaises"
    PORT = "Port"
    ESTUAIRE = "Estuaire"


FRESHWATER_WATER_TYPES: List[WaterType] = [
    WaterType.RIVIERE,
    WaterType.FLEUVE,
    WaterType.LAC,
    WaterType.ETANG,
    WaterType.CANAL,
    WaterType.BARRAGE,
]

SALTWATER_WATER_TYPES: List[WaterType] = [
    WaterType.MER,
    WaterType.DIGUE,
    WaterType.PLAGE,
    WaterType.FALAISES,
    WaterType.PORT,
    WaterType.ESTUAIRE,
]


class BottomType(str, Enum):
    VASE = "Vase"
    HERBIERS = "Herbiers"
    ROCHE = "Roche"
    SABLE = "Sable"
    PARCS = "Parcs Ostréicoles"


class Technique(str, Enum):
    LEURRES = "Leurres"
    APPATS_NATURELS = "Appâts Naturels"


class WindDirection(str, Enum):
    # Relative to the angler facing the water: N blows in from the water,
    # S comes off the land behind them.
    N = "N"
    NE = "NE"
    E = "E"
    SE = "SE"
    S = "S"
    SW = "SW"
    W = "W"
    NW = "NW"


class ExpertiseLevel(str, Enum):
    BEGINNER = "beginner"
    EXPERT = "expert"


# ------------- First-load defaults -------------

DEFAULT_WEATHER = 50          # grey / cloudy
DEFAULT_TIME = 720            # 12:00
DEFAULT_WATER_CLARITY = 50
DEFAULT_TARGET_FISH = "brochet"
DEFAULT_TECHNIQUE = Technique.LEURRES
DEFAULT_TIDE_LEVEL = 50       # high tide
DEFAULT_WIND = 20             # light breeze
DEFAULT_WATER_FLOW = 30
DEFAULT_WATER_SURFACE = 10    # calm, small ripples
DEFAULT_PRESSURE = 1013.0
DEFAULT_DEPTH_MIN = 0.0
DEFAULT_DEPTH_MAX = 10.0
DEFAULT_EXPERTISE = ExpertiseLevel.BEGINNER


class DepthRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    min: float = Field(DEFAULT_DEPTH_MIN, ge=0, description="Shallowest depth fished, metres")
    max: float = Field(DEFAULT_DEPTH_MAX, ge=0, description="Deepest depth fished, metres")

    @model_validator(mode="after")
    def _min_below_max(self) -> "DepthRange":
        if self.min > self.max:
            raise ValueError("depth.min must not exceed depth.max")
        return self


class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class FishingConditions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    period: str = Field(..., description="Calendar period, e.g. 'Juin'")
    weather: int = Field(DEFAULT_WEATHER, ge=0, le=100, description="0 stormy → 100 full sun")
    time: int = Field(DEFAULT_TIME, ge=0, le=1439, description="Minutes from midnight")
    water_clarity: int = Field(DEFAULT_WATER_CLARITY, ge=0, le=100, description="0 muddy → 100 clear")
    water_type: Optional[WaterType] = None
    bottom_type: Optional[BottomType] = None
    target_fish: str = Field(DEFAULT_TARGET_FISH, description="Species id from the catalog")
    technique: Technique = DEFAULT_TECHNIQUE
    tide_level: int = Field(DEFAULT_TIDE_LEVEL, ge=0, le=100, description="0 low → 50 high → 100 low")
    wind: int = Field(DEFAULT_WIND, ge=0, le=100, description="0 calm → 100 storm")
    water_flow: int = Field(DEFAULT_WATER_FLOW, ge=0, le=100, description="0 still → 100 torrent")
    wind_direction: Optional[WindDirection] = None
    water_surface: int = Field(DEFAULT_WATER_SURFACE, ge=0, le=100, description="0 mirror → 100 big swell")
    pressure: float = Field(DEFAULT_PRESSURE, gt=0, description="Atmospheric pressure, hPa")
    depth: DepthRange = Field(default_factory=DepthRange)
    region: Optional[str] = Field(None, description="French department name")
    coordinates: Optional[Coordinates] = None
    expertise_level: ExpertiseLevel = DEFAULT_EXPERTISE

    @field_validator("target_fish")
    @classmethod
    def _known_species(cls, v: str) -> str:
        if v not in SPECIES_BY_ID:
            raise ValueError(f"unknown species id '{v}'")
        return v

    @field_validator("region")
    @classmethod
    def _blank_region_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v


def default_conditions(
    period: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> FishingConditions:
    """
    Build the first-load snapshot.

    `period` defaults to the current month. `overrides` come from the admin
    config 'defaults' block and win over the named constants above.
    """
    if period is None:
        period = period_for_month(datetime.now().month)

    values: Dict[str, Any] = {"period": period}
    values.update(overrides or {})
    return FishingConditions.model_validate(values)


def available_water_types(coastal: bool) -> List[WaterType]:
    if coastal:
        return FRESHWATER_WATER_TYPES + SALTWATER_WATER_TYPES
    return list(FRESHWATER_WATER_TYPES)
