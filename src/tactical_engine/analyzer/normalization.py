"""Normalization helpers shared by the analysis stages."""

import math
import re

from tactical_engine.analyzer.constants import (
    FIELD_MAX,
    FIELD_MIN,
    ROLE_ALIASES,
)
from tactical_engine.types import Formation, Slot


def normalize_role(role: str | None) -> str:
    """Normalize a role code ('st', ' CDM ') to a canonical key ('ST', 'DM')."""
    if not role:
        return ""
    key = re.sub(r"[^A-Z]", "", role.upper())
    return ROLE_ALIASES.get(key, key)


def clamp(value: float, low: float = FIELD_MIN, high: float = FIELD_MAX) -> float:
    return max(low, min(high, value))


def is_number(value: object) -> bool:
    """True for finite ints/floats (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return math.isfinite(value)


def slot_coordinates(slot: Slot | None) -> tuple[float, float] | None:
    """Return (x, y) for a slot with a usable position, otherwise None."""
    if slot is None or slot.position is None:
        return None
    x, y = slot.position.x, slot.position.y
    if not (is_number(x) and is_number(y)):
        return None
    return float(x), float(y)


def player_slots(formation: Formation) -> dict[str, Slot]:
    """Map player id -> the first slot that player is assigned to."""
    assigned: dict[str, Slot] = {}
    for slot in formation.slots:
        if slot.player_id and slot.player_id not in assigned:
            assigned[slot.player_id] = slot
    return assigned


def player_label(name: str | None, player_id: str) -> str:
    cleaned = (name or "").strip()
    return cleaned or player_id


__all__ = [
    "clamp",
    "is_number",
    "normalize_role",
    "player_label",
    "player_slots",
    "slot_coordinates",
]
