# strategy_ai.py
#
# Turn a settled conditions snapshot into a fishing plan with OpenAI.
# Prompt building is kept apart from the API call so it can be checked
# without a key.

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

from openai import OpenAI, OpenAIError

from app_config import get_strategy_settings
from condition_labels import (
    clarity_label,
    format_time,
    is_saltwater,
    pressure_status,
    surface_label,
    tide_label,
    water_flow_label,
    weather_label,
    wind_direction_label,
    wind_label,
)
from conditions_store import DerivedConditions
from expert_gate import coerce_for_submission
from fishing_types import ExpertiseLevel, FishingConditions
from species_catalog import get_species

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are Tacklor, a French fishing guide. You turn on-site conditions into "
    "honest, practical fishing strategies."
)

_PHASE_NAMES = {
    "night": "nuit",
    "dawn": "aube",
    "day": "journée",
    "dusk": "crépuscule",
}


class StrategyUnavailable(Exception):
    """The strategy could not be generated."""


_client: Optional[OpenAI] = None


def get_client() -> OpenAI:
    global _client
    if _client is None:
        if not os.getenv("OPENAI_API_KEY"):
            raise StrategyUnavailable("Clé API OpenAI manquante (OPENAI_API_KEY).")
        _client = OpenAI()
    return _client


def build_strategy_prompt(conditions: FishingConditions, derived: DerivedConditions) -> str:
    """
    Build the user prompt for one strategy request.

    IMPORTANT:
    - This function ONLY builds the prompt.
    - Every value is spelled out with its label so the model doesn't have to
      guess what "wind 60" means.
    """
    species = get_species(conditions.target_fish)
    saltwater = is_saltwater(conditions.water_type)

    water_type = conditions.water_type.value if conditions.water_type else "Non renseigné"
    bottom_type = conditions.bottom_type.value if conditions.bottom_type else "Non renseigné"
    region = conditions.region or "Non renseignée"

    lines = [
        f"Département : {region} (zone : {derived.zone.value}, "
        f"{'littoral' if derived.is_coastal else 'intérieur'})",
        f"Période : {conditions.period}",
        f"Heure : {format_time(conditions.time)} ({_PHASE_NAMES[derived.phase.value]}, "
        f"lever {format_time(derived.sunrise)}, coucher {format_time(derived.sunset)})",
        f"Météo : {weather_label(conditions.weather)} ({conditions.weather}/100)",
        f"Pression : {round(conditions.pressure)} hPa – {pressure_status(conditions.pressure)}",
        f"Vent : {wind_label(conditions.wind)} ({conditions.wind}/100), "
        f"direction : {wind_direction_label(conditions.wind_direction)}",
        f"Type d'eau : {water_type}",
        f"Fond : {bottom_type}",
        f"Clarté de l'eau : {clarity_label(conditions.water_clarity)}",
        f"Surface : {surface_label(conditions.water_surface)}",
        f"Profondeur : {conditions.depth.min:g} à {conditions.depth.max:g} m",
        f"Espèce visée : {species.label}",
        f"Technique : {conditions.technique.value}",
    ]
    if saltwater:
        lines.append(f"Marée : {tide_label(conditions.tide_level)}")
    if derived.show_water_flow:
        lines.append(f"Courant : {water_flow_label(conditions.water_flow)}")

    conditions_block = "\n".join(lines)

    if conditions.expertise_level == ExpertiseLevel.EXPERT:
        level_instruction = (
            "The angler is EXPERIENCED. Be technical: exact lure models or bait "
            "presentations, line diameters, retrieve speeds, and how the wind "
            "direction relative to the bank changes where the fish will hold. "
            "Skip the basics."
        )
    else:
        level_instruction = (
            "The angler is a BEGINNER. Keep the vocabulary simple, explain any "
            "technical term, and give one clear, safe plan rather than many options."
        )

    night_instruction = ""
    if derived.is_night:
        night_instruction = (
            "It is night. Mention lighting, safety near the water, and adapt the "
            "plan to nocturnal behaviour of the target species."
        )

    return f"""
Here are the conditions reported by the angler:

{conditions_block}

Write a fishing strategy for this session, in French.

STRUCTURE:
- Start with a one-sentence verdict on the session (promising, average, tough).
- Then where to fish on this spot, how deep, and why given these conditions.
- Then the setup: rod, line, and {conditions.technique.value.lower()} to use.
- Then how to fish it: animation, retrieve, timing over the next hours.
- End with one regulation or safety reminder relevant to the species or the spot.

FORMAT RULES:
- Plain text only. No markdown, no asterisks, no tables.
- Short paragraphs separated by a single blank line.

{level_instruction}
{night_instruction}
""".strip()


def summarise_strategy_with_ai(prompt: str, client: Any = None) -> str:
    """
    Call OpenAI to turn the prompt into the strategy text.
    """
    settings: Dict[str, Any] = get_strategy_settings()
    if client is None:
        client = get_client()

    try:
        response = client.chat.completions.create(
            model=settings["model"],
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=settings["temperature"],
        )
    except OpenAIError as e:
        logger.exception("Strategy generation failed")
        raise StrategyUnavailable(f"Le guide n'a pas pu répondre : {e}") from e

    content = response.choices[0].message.content if response.choices else None
    if not content or not content.strip():
        raise StrategyUnavailable("Le guide a renvoyé une réponse vide.")
    return content.strip()


def generate_strategy(
    conditions: FishingConditions,
    derived: DerivedConditions,
    client: Any = None,
) -> str:
    """Coerce the outgoing snapshot, build the prompt and ask the model."""
    outgoing = coerce_for_submission(conditions)
    if outgoing.expertise_level != conditions.expertise_level:
        logger.warning("Expert mode set without the required fields – sending as beginner")

    prompt = build_strategy_prompt(outgoing, derived)
    return summarise_strategy_with_ai(prompt, client=client)
