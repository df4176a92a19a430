# weather_service.py
#
# Live conditions for a lat/lon:
# - OpenWeatherMap current weather (only if OWM_API_KEY is set)
# - geo.api.gouv.fr for the department name, fetched at the same time
# - Open-Meteo as the no-key fallback when OWM is missing or fails
#
# Everything is squashed into the 0–100 scores the conditions form uses.

from __future__ import annotations

import asyncio
import logging
import math
import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

import httpx

from fishing_types import WindDirection
from solar_table import period_for_month

logger = logging.getLogger(__name__)

OWM_URL = "https://api.openweathermap.org/data/2.5/weather"
OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"
GEO_GOUV_URL = "https://geo.api.gouv.fr/communes"

DEFAULT_TIMEOUT = 10.0
FALLBACK_CITY_NAME = "Position actuelle"


class WeatherUnavailable(Exception):
    """No weather provider answered."""


@dataclass(frozen=True)
class WeatherReading:
    weather_score: int
    wind_score: int
    wind_direction: WindDirection
    time: int
    period: str
    pressure: Optional[float]
    region: Optional[str]
    city_name: str
    source: str


# -----------------------------
# Score helpers
# -----------------------------

_COMPASS = [
    WindDirection.N, WindDirection.NE, WindDirection.E, WindDirection.SE,
    WindDirection.S, WindDirection.SW, WindDirection.W, WindDirection.NW,
]


def wind_direction_from_degrees(deg: float) -> WindDirection:
    """45° sectors centred on the compass points, 0° = N."""
    index = int(math.floor(((deg + 22.5) % 360) / 45))
    return _COMPASS[index]


def owm_condition_score(condition_id: int) -> int:
    """OpenWeatherMap condition id → 0 (storm) … 100 (clear)."""
    if 200 <= condition_id < 300:
        return 10  # thunderstorm
    if 300 <= condition_id < 400:
        return 25  # drizzle
    if 500 <= condition_id < 600:
        return 20  # rain
    if 600 <= condition_id < 700:
        return 35  # snow
    if 700 <= condition_id < 800:
        return 40  # mist, fog, haze…
    if condition_id == 800:
        return 95
    if condition_id == 801:
        return 85
    if condition_id == 802:
        return 70
    if condition_id == 803:
        return 60
    if condition_id == 804:
        return 50
    return 50


def wmo_code_score(code: int) -> int:
    """Open-Meteo WMO weather code → same scale as owm_condition_score."""
    if code == 0:
        return 95
    if code <= 3:
        return 70
    if code <= 48:
        return 40  # fog
    if code <= 67:
        return 25  # drizzle / rain
    if code <= 77:
        return 35  # snow
    if code <= 82:
        return 25  # showers
    if code <= 99:
        return 10  # thunderstorm
    return 50


def wind_speed_score(speed_ms: float) -> int:
    """0–20 m/s spread over 0–100."""
    return int(round(min(max(speed_ms * 5, 0), 100)))


def local_clock(now: datetime, utc_offset_seconds: int) -> Tuple[int, str]:
    """Minutes from midnight and period name at the spot."""
    local = now.astimezone(timezone.utc) + timedelta(seconds=utc_offset_seconds)
    return local.hour * 60 + local.minute, period_for_month(local.month)


# -----------------------------
# Providers
# -----------------------------

async def fetch_department(client: httpx.AsyncClient, lat: float, lon: float) -> Optional[str]:
    """French department name for a point, or None if the lookup fails."""
    params = {
        "lat": lat,
        "lon": lon,
        "fields": "departement",
        "format": "json",
        "geometry": "centre",
    }
    try:
        resp = await client.get(GEO_GOUV_URL, params=params)
        if resp.status_code != 200:
            logger.warning("Department lookup failed (%s)", resp.status_code)
            return None
        data = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Department lookup failed: %s", e)
        return None

    if not data or not isinstance(data, list) or not isinstance(data[0], dict):
        return None
    departement = data[0].get("departement")
    if isinstance(departement, dict):
        return departement.get("nom")
    return None


async def _fetch_openweathermap(
    client: httpx.AsyncClient,
    lat: float,
    lon: float,
    api_key: Optional[str],
) -> Optional[Dict[str, Any]]:
    if not api_key:
        return None

    params = {
        "lat": lat,
        "lon": lon,
        "appid": api_key,
        "units": "metric",
        "lang": "fr",
    }
    try:
        resp = await client.get(OWM_URL, params=params)
        if resp.status_code != 200:
            logger.warning("OpenWeatherMap error (%s), falling back", resp.status_code)
            return None
        return resp.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("OpenWeatherMap unreachable (%s), falling back", e)
        return None


def _reading_from_owm(
    data: Dict[str, Any],
    region: Optional[str],
    now: datetime,
) -> Optional[WeatherReading]:
    try:
        time, period = local_clock(now, int(data.get("timezone", 0)))
        return WeatherReading(
            weather_score=owm_condition_score(int(data["weather"][0]["id"])),
            wind_score=wind_speed_score(float(data["wind"]["speed"])),
            wind_direction=wind_direction_from_degrees(float(data["wind"].get("deg", 0))),
            time=time,
            period=period,
            pressure=(data.get("main") or {}).get("pressure"),
            region=region,
            city_name=data.get("name") or FALLBACK_CITY_NAME,
            source="openweathermap",
        )
    except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
        logger.warning("Unexpected OpenWeatherMap payload (%s), falling back", e)
        return None


async def _fetch_open_meteo(
    client: httpx.AsyncClient,
    lat: float,
    lon: float,
    region: Optional[str],
    now: datetime,
) -> WeatherReading:
    params = {
        "latitude": lat,
        "longitude": lon,
        "current": "surface_pressure,weather_code,wind_speed_10m,wind_direction_10m",
        "wind_speed_unit": "ms",
        "timezone": "auto",
    }
    try:
        resp = await client.get(OPEN_METEO_URL, params=params)
    except httpx.HTTPError as e:
        logger.error("Open-Meteo unreachable: %s", e)
        raise WeatherUnavailable("Impossible de récupérer la météo (Services indisponibles).") from e

    if resp.status_code != 200:
        logger.error("Open-Meteo error (%s)", resp.status_code)
        raise WeatherUnavailable("Impossible de récupérer la météo (Services indisponibles).")

    try:
        data = resp.json()
        current = data["current"]
        time, period = local_clock(now, int(data.get("utc_offset_seconds", 0)))
        return WeatherReading(
            weather_score=wmo_code_score(int(current["weather_code"])),
            wind_score=wind_speed_score(float(current["wind_speed_10m"])),
            wind_direction=wind_direction_from_degrees(float(current["wind_direction_10m"])),
            time=time,
            period=period,
            pressure=current.get("surface_pressure"),
            region=region,
            city_name=FALLBACK_CITY_NAME,
            source="open-meteo",
        )
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        logger.error("Unexpected Open-Meteo payload: %s", e)
        raise WeatherUnavailable("Impossible de récupérer la météo (Réponse invalide).") from e


async def _fetch_with_client(
    client: httpx.AsyncClient,
    lat: float,
    lon: float,
    now: datetime,
    api_key: Optional[str],
) -> WeatherReading:
    owm_data, region = await asyncio.gather(
        _fetch_openweathermap(client, lat, lon, api_key),
        fetch_department(client, lat, lon),
    )

    if owm_data is not None:
        reading = _reading_from_owm(owm_data, region, now)
        if reading is not None:
            logger.info("Weather from OpenWeatherMap for %s (%s)", reading.city_name, region)
            return reading

    reading = await _fetch_open_meteo(client, lat, lon, region, now)
    logger.info("Weather from Open-Meteo (%s)", region)
    return reading


async def fetch_local_weather(
    lat: float,
    lon: float,
    now: Optional[datetime] = None,
    client: Optional[httpx.AsyncClient] = None,
    owm_api_key: Optional[str] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> WeatherReading:
    """
    Current conditions at (lat, lon).

    `now` should be timezone-aware; defaults to the current UTC time. Local
    time at the spot comes from the provider's UTC offset. Pass `client` to
    reuse (or fake) the HTTP client.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    api_key = owm_api_key if owm_api_key is not None else os.getenv("OWM_API_KEY")

    if client is not None:
        return await _fetch_with_client(client, lat, lon, now, api_key)

    async with httpx.AsyncClient(timeout=timeout) as http_client:
        return await _fetch_with_client(http_client, lat, lon, now, api_key)
