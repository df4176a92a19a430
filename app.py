import os
import logging
import secrets
from typing import Dict, Any, Optional

from fastapi import FastAPI, HTTPException, Request, Response, Depends, status
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from app_config import (
    load_config as load_admin_config,
    save_config as save_admin_config,
    get_condition_defaults,
    get_weather_timeout,
)
from condition_labels import (
    clarity_label,
    format_time,
    pressure_status,
    surface_label,
    tide_label,
    water_flow_label,
    weather_label,
    wind_direction_label,
    wind_label,
)
from conditions_store import DerivedConditions, InvalidConditions
from expert_gate import ExpertModeUnavailable, missing_expert_fields
from fishing_types import (
    FRESHWATER_WATER_TYPES,
    SALTWATER_WATER_TYPES,
    BottomType,
    Coordinates,
    DepthRange,
    ExpertiseLevel,
    FishingConditions,
    Technique,
    WaterType,
    WindDirection,
    default_conditions,
)
from sessions import Session, SessionRegistry
from solar_table import PERIODS
from species_catalog import SPECIES_CATALOG, SpeciesRecord
from strategy_ai import StrategyUnavailable, generate_strategy
from weather_service import WeatherUnavailable, fetch_local_weather
from zones import GeoZone

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

security = HTTPBasic()


def verify_admin(credentials: HTTPBasicCredentials = Depends(security)):
    # Only the password is checked
    correct_password = os.getenv("ADMIN_PASS", "")

    is_correct_password = bool(correct_password) and secrets.compare_digest(
        credentials.password, correct_password
    )

    if not is_correct_password:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect password",
            headers={"WWW-Authenticate": "Basic"},
        )

    return "admin"


app = FastAPI(title="Tacklor Fishing Guide")

sessions = SessionRegistry()


# ------------- Request/response models -------------


class ConditionsPatch(BaseModel):
    """Partial change to a session's conditions. Send null to clear a field."""

    model_config = ConfigDict(extra="forbid")

    period: Optional[str] = Field(None, description="Calendar period, e.g. 'Juin'")
    weather: Optional[int] = None
    time: Optional[int] = Field(None, description="Minutes from midnight (0–1439)")
    water_clarity: Optional[int] = None
    water_type: Optional[WaterType] = None
    bottom_type: Optional[BottomType] = None
    target_fish: Optional[str] = Field(None, description="Species id, e.g. 'bar'")
    technique: Optional[Technique] = None
    tide_level: Optional[int] = None
    wind: Optional[int] = None
    water_flow: Optional[int] = None
    wind_direction: Optional[WindDirection] = None
    water_surface: Optional[int] = None
    pressure: Optional[float] = None
    depth: Optional[DepthRange] = None
    region: Optional[str] = Field(None, description="French department name, e.g. 'Gironde'")
    coordinates: Optional[Coordinates] = None
    expertise_level: Optional[ExpertiseLevel] = None


class ExpertiseRequest(BaseModel):
    level: ExpertiseLevel


class LocateRequest(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class SessionResponse(BaseModel):
    session_id: str
    conditions: FishingConditions
    derived: Dict[str, Any]
    labels: Dict[str, str]
    status: Optional[Dict[str, str]] = None


class LocateResponse(SessionResponse):
    applied: bool = Field(..., description="False when a newer lookup superseded this one")
    city_name: Optional[str] = None


class StrategyResponse(BaseModel):
    strategy: str
    expertise_level: ExpertiseLevel


# ------------- Helper functions -------------


def _serialise_species(s: SpeciesRecord) -> Dict[str, Any]:
    return {
        "id": s.id,
        "label": s.label,
        "icon": s.icon,
        "habitat": s.habitat.value,
        "priority_zones": [z.value for z in s.priority_zones],
        "restricted_to_zones": (
            [z.value for z in s.restricted_to_zones] if s.restricted_to_zones is not None else None
        ),
    }


def _serialise_derived(derived: DerivedConditions) -> Dict[str, Any]:
    """
    Flatten the derived dataclass (and the species records inside it)
    into plain dicts so FastAPI / JSON can serialise them.
    """
    suggestions = derived.suggestions
    return {
        "phase": derived.phase.value,
        "day_progress_angle": derived.day_progress_angle,
        "is_night": derived.is_night,
        "sunrise": derived.sunrise,
        "sunset": derived.sunset,
        "zone": derived.zone.value,
        "is_coastal": derived.is_coastal,
        "suggestions": {
            "night_priority": [_serialise_species(s) for s in suggestions.night_priority],
            "local_priority": [_serialise_species(s) for s in suggestions.local_priority],
            "other": [_serialise_species(s) for s in suggestions.other],
        },
        "can_activate_expert": derived.can_activate_expert,
        "available_water_types": [w.value for w in derived.available_water_types],
        "show_water_flow": derived.show_water_flow,
    }


def _labels(c: FishingConditions) -> Dict[str, str]:
    return {
        "time": format_time(c.time),
        "weather": weather_label(c.weather),
        "water_clarity": clarity_label(c.water_clarity),
        "tide_level": tide_label(c.tide_level),
        "wind": wind_label(c.wind),
        "water_flow": water_flow_label(c.water_flow),
        "water_surface": surface_label(c.water_surface),
        "wind_direction": wind_direction_label(c.wind_direction),
        "pressure": pressure_status(c.pressure),
    }


def _session_view(session: Session) -> Dict[str, Any]:
    store = session.store
    return {
        "session_id": session.session_id,
        "conditions": store.snapshot,
        "derived": _serialise_derived(store.derived),
        "labels": _labels(store.snapshot),
        "status": (
            {"kind": session.status.kind, "message": session.status.message}
            if session.status is not None
            else None
        ),
    }


def _get_session(session_id: str) -> Session:
    try:
        return sessions.get(session_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Unknown session_id")


# ------------- Meta ------------------


@app.get("/health")
async def health_check():
    return {"status": "ok", "sessions": len(sessions)}


@app.get("/api/reference")
async def reference():
    """
    Everything the front end needs to draw the form: periods, water and
    bottom types, techniques, compass points, zones and the species list.
    """
    return {
        "periods": PERIODS,
        "water_types": {
            "freshwater": [w.value for w in FRESHWATER_WATER_TYPES],
            "saltwater": [w.value for w in SALTWATER_WATER_TYPES],
        },
        "bottom_types": [b.value for b in BottomType],
        "techniques": [t.value for t in Technique],
        "wind_directions": [d.value for d in WindDirection],
        "zones": [z.value for z in GeoZone],
        "species": [_serialise_species(s) for s in SPECIES_CATALOG],
    }


# ---------------------- Sessions ------------------------


@app.post("/api/sessions", response_model=SessionResponse, status_code=201)
async def create_session():
    try:
        initial = default_conditions(overrides=get_condition_defaults())
    except ValidationError as e:
        logger.error("Admin defaults are invalid, using built-in defaults: %s", e)
        initial = default_conditions()

    session = sessions.create(initial)
    return _session_view(session)


@app.get("/api/sessions/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str):
    return _session_view(_get_session(session_id))


@app.delete("/api/sessions/{session_id}", status_code=204)
async def close_session(session_id: str):
    if not sessions.drop(session_id):
        raise HTTPException(status_code=404, detail="Unknown session_id")
    return Response(status_code=204)


@app.patch("/api/sessions/{session_id}/conditions", response_model=SessionResponse)
async def update_conditions(session_id: str, payload: ConditionsPatch):
    session = _get_session(session_id)
    changes = payload.model_dump(exclude_unset=True)

    try:
        sessions.update(session_id, changes)
    except InvalidConditions as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ExpertModeUnavailable as e:
        raise HTTPException(status_code=409, detail=str(e))

    return _session_view(session)


@app.post("/api/sessions/{session_id}/expertise", response_model=SessionResponse)
async def set_expertise(session_id: str, payload: ExpertiseRequest):
    session = _get_session(session_id)

    try:
        session.store.set_expertise(payload.level)
    except ExpertModeUnavailable as e:
        raise HTTPException(
            status_code=409,
            detail={
                "message": str(e),
                "missing": missing_expert_fields(session.store.snapshot),
            },
        )

    return _session_view(session)


@app.post("/api/sessions/{session_id}/locate", response_model=LocateResponse)
async def locate(session_id: str, payload: LocateRequest):
    """
    Pull live weather for the angler's position and fold it into the form.

    If another locate call for the same session started while this one was
    waiting on the providers, this result is dropped (applied = false).
    """
    session = _get_session(session_id)
    ticket = sessions.begin_locate(session_id)

    try:
        reading = await fetch_local_weather(
            payload.latitude,
            payload.longitude,
            timeout=get_weather_timeout(),
        )
    except WeatherUnavailable as e:
        sessions.fail_locate(session_id, ticket, "Impossible de récupérer la météo.")
        raise HTTPException(status_code=502, detail=str(e))
    except Exception:
        logger.exception("Weather lookup crashed")
        sessions.fail_locate(session_id, ticket, "Impossible de récupérer la météo.")
        raise HTTPException(status_code=502, detail="Weather lookup failed")

    coordinates = Coordinates(lat=payload.latitude, lon=payload.longitude)
    try:
        applied = sessions.finish_locate(session_id, ticket, reading, coordinates)
    except InvalidConditions as e:
        logger.error("Weather reading rejected by the store: %s", e)
        sessions.fail_locate(session_id, ticket, "Impossible de récupérer la météo.")
        raise HTTPException(status_code=502, detail="Weather provider returned unusable data")

    view = _session_view(session)
    view["applied"] = applied
    view["city_name"] = reading.city_name
    return view


@app.post("/api/sessions/{session_id}/strategy", response_model=StrategyResponse)
async def strategy(session_id: str):
    session = _get_session(session_id)
    store = session.store

    if store.snapshot.water_type is None or store.snapshot.bottom_type is None:
        raise HTTPException(
            status_code=400,
            detail="Veuillez sélectionner un type d'eau et de fond.",
        )

    outgoing = store.submission_snapshot()
    try:
        text = await run_in_threadpool(generate_strategy, outgoing, store.derived)
    except StrategyUnavailable as e:
        raise HTTPException(status_code=502, detail=str(e))

    return StrategyResponse(strategy=text, expertise_level=outgoing.expertise_level)


# ------------------- Admin config API (JSON) -------------------


@app.get("/api/admin/config")
async def get_admin_config(user: str = Depends(verify_admin)):
    """
    Return the current admin config JSON.
    """
    try:
        cfg = load_admin_config()
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to load config: {e}",
        )
    return cfg


@app.post("/api/admin/config")
async def update_admin_config(request: Request, user: str = Depends(verify_admin)):
    """
    Replace the admin config JSON with the posted body.
    """
    try:
        new_cfg = await request.json()
    except Exception:
        raise HTTPException(
            status_code=400,
            detail="Invalid JSON payload, could not parse",
        )

    if not isinstance(new_cfg, dict):
        raise HTTPException(
            status_code=400,
            detail="Config must be a JSON object",
        )

    for section in ("strategy", "weather", "defaults"):
        if section in new_cfg and not isinstance(new_cfg[section], dict):
            raise HTTPException(
                status_code=400,
                detail=f"'{section}' must be a JSON object",
            )

    try:
        default_conditions(overrides=get_condition_defaults(new_cfg))
    except ValidationError as e:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid defaults: {e.errors(include_url=False)}",
        )

    try:
        save_admin_config(new_cfg)
    except Exception as e:
        raise HTTPException(
            status_code=500,
            detail=f"Failed to save config: {e}",
        )

    return {"status": "ok", "saved": True}
