# app_config.py
import json
import os
from pathlib import Path
from typing import Dict, Any
from threading import Lock

from fishing_types import (
    DEFAULT_DEPTH_MAX,
    DEFAULT_DEPTH_MIN,
    DEFAULT_PRESSURE,
    DEFAULT_TARGET_FISH,
    DEFAULT_TECHNIQUE,
    DEFAULT_TIDE_LEVEL,
    DEFAULT_TIME,
    DEFAULT_WATER_CLARITY,
    DEFAULT_WATER_FLOW,
    DEFAULT_WATER_SURFACE,
    DEFAULT_WEATHER,
    DEFAULT_WIND,
    FishingConditions,
)

_CONFIG_PATH = Path(os.getenv("TACKLOR_CONFIG_PATH", "config/tacklor_admin.json"))
_CONFIG_LOCK = Lock()

DEFAULT_MODEL = "gpt-4.1-mini"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_WEATHER_TIMEOUT = 10.0

_NOT_CONFIGURABLE = ("expertise_level",)

# Written out the first time so the admin page has something to edit
_DEFAULT_CONFIG: Dict[str, Any] = {
    "strategy": {
        "model": DEFAULT_MODEL,
        "temperature": DEFAULT_TEMPERATURE,
    },
    "weather": {
        "timeout": DEFAULT_WEATHER_TIMEOUT,
    },
    "defaults": {
        "weather": DEFAULT_WEATHER,
        "time": DEFAULT_TIME,
        "water_clarity": DEFAULT_WATER_CLARITY,
        "target_fish": DEFAULT_TARGET_FISH,
        "technique": DEFAULT_TECHNIQUE.value,
        "tide_level": DEFAULT_TIDE_LEVEL,
        "wind": DEFAULT_WIND,
        "water_flow": DEFAULT_WATER_FLOW,
        "water_surface": DEFAULT_WATER_SURFACE,
        "pressure": DEFAULT_PRESSURE,
        "depth": {"min": DEFAULT_DEPTH_MIN, "max": DEFAULT_DEPTH_MAX},
    },
}


def _ensure_file_exists() -> None:
    if not _CONFIG_PATH.parent.exists():
        _CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
    if not _CONFIG_PATH.exists():
        with _CONFIG_PATH.open("w", encoding="utf-8") as f:
            json.dump(_DEFAULT_CONFIG, f, indent=2, ensure_ascii=False)


def load_config() -> Dict[str, Any]:
    with _CONFIG_LOCK:
        _ensure_file_exists()
        with _CONFIG_PATH.open("r", encoding="utf-8") as f:
            return json.load(f)


def save_config(cfg: Dict[str, Any]) -> None:
    with _CONFIG_LOCK:
        _ensure_file_exists()
        with _CONFIG_PATH.open("w", encoding="utf-8") as f:
            json.dump(cfg, f, indent=2, ensure_ascii=False)


def get_condition_defaults(cfg: Dict[str, Any] = None) -> Dict[str, Any]:
    """
    First-load field values from the 'defaults' block.

    Keys that aren't FishingConditions fields are dropped so an old config
    file can't break session creation. Expert mode is never a default: the
    angler has to switch it on.
    """
    if cfg is None:
        cfg = load_config()
    defaults = cfg.get("defaults", {}) or {}
    return {
        k: v
        for k, v in defaults.items()
        if k in FishingConditions.model_fields and k not in _NOT_CONFIGURABLE
    }


def get_strategy_settings() -> Dict[str, Any]:
    cfg: Dict[str, Any] = load_config()
    strategy = cfg.get("strategy", {})

    return {
        "model": str(strategy.get("model", DEFAULT_MODEL)),
        "temperature": float(strategy.get("temperature", DEFAULT_TEMPERATURE)),
    }


def get_weather_timeout() -> float:
    cfg: Dict[str, Any] = load_config()
    return float(cfg.get("weather", {}).get("timeout", DEFAULT_WEATHER_TIMEOUT))
