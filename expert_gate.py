# expert_gate.py
#
# Expert mode needs the full picture: a department, a water type, a bottom
# type and a wind direction. Without them the model only gets beginner mode.

from fishing_types import ExpertiseLevel, FishingConditions


class ExpertModeUnavailable(Exception):
    """Expert mode was requested while the conditions don't allow it."""


MISSING_FIELD_LABELS = {
    "region": "département",
    "water_type": "type d'eau",
    "bottom_type": "type de fond",
    "wind_direction": "direction du vent",
}


def missing_expert_fields(conditions: FishingConditions) -> list:
    return [name for name in MISSING_FIELD_LABELS if getattr(conditions, name) is None]


def can_activate_expert(conditions: FishingConditions) -> bool:
    return (
        conditions.region is not None
        and conditions.water_type is not None
        and conditions.bottom_type is not None
        and conditions.wind_direction is not None
    )


def check_activation(conditions: FishingConditions) -> None:
    """Raise if `conditions` asks for expert mode it isn't entitled to."""
    if conditions.expertise_level != ExpertiseLevel.EXPERT:
        return
    if can_activate_expert(conditions):
        return

    missing = ", ".join(MISSING_FIELD_LABELS[f] for f in missing_expert_fields(conditions))
    raise ExpertModeUnavailable(f"Mode expert indisponible – à renseigner : {missing}.")


def enforce_expertise(conditions: FishingConditions) -> FishingConditions:
    """Drop back to beginner if expert is set but no longer allowed. No-op otherwise."""
    if conditions.expertise_level == ExpertiseLevel.EXPERT and not can_activate_expert(conditions):
        return conditions.model_copy(update={"expertise_level": ExpertiseLevel.BEGINNER})
    return conditions


def coerce_for_submission(conditions: FishingConditions) -> FishingConditions:
    """
    Last check before the snapshot leaves for strategy generation.

    Returns a copy; the caller's snapshot is left as it is.
    """
    return enforce_expertise(conditions.model_copy())
