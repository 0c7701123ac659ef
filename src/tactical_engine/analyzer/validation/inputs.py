"""Contract checks and lenient coercion of caller-supplied inputs."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from tactical_engine.analyzer.constants import FIELD_MAX, FIELD_MIN
from tactical_engine.analyzer.normalization import is_number, slot_coordinates
from tactical_engine.types import (
    FieldPosition,
    Formation,
    GameContext,
    Player,
    Slot,
    TeamRelations,
)

logger = logging.getLogger(__name__)


class ContractViolation(TypeError):
    """Raised when the caller passes no formation or no player collection at all."""


def ensure_contract(formation: Any, players: Any) -> None:
    """Fail fast on programming errors in the caller, not on bad data."""
    if formation is None:
        raise ContractViolation("formation is required")
    if not isinstance(formation, Formation | Mapping):
        raise ContractViolation(
            f"formation must be a Formation or mapping, got {type(formation).__name__}"
        )
    if players is None:
        raise ContractViolation("players is required (pass an empty list for none)")
    if isinstance(players, str | bytes | Mapping) or not isinstance(players, Iterable):
        raise ContractViolation(
            f"players must be a list of players, got {type(players).__name__}"
        )


def coerce_position(raw: Any) -> FieldPosition | None:
    """Keep a position only when both coordinates are finite numbers."""
    if isinstance(raw, FieldPosition):
        return raw
    if not isinstance(raw, Mapping):
        return None
    x, y = raw.get("x"), raw.get("y")
    if not (is_number(x) and is_number(y)):
        return None
    return FieldPosition(x=x, y=y)


def coerce_slot(raw: Any) -> Slot | None:
    if isinstance(raw, Slot):
        return raw
    if not isinstance(raw, Mapping):
        logger.warning("Ignoring malformed slot: %r", raw)
        return None

    data = dict(raw)
    raw_position = data.pop("position", None)
    try:
        slot = Slot.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Ignoring invalid slot {data.get('id')!r}: {e.error_count()} errors")
        return None

    position = coerce_position(raw_position)
    if raw_position is not None and position is None:
        logger.warning(f"Slot {slot.id!r} has a non-numeric position; ignoring it")
    return slot.model_copy(update={"position": position})


def _drop_duplicate_assignments(slots: list[Slot]) -> list[Slot]:
    """Each player may occupy one slot; later duplicates lose the assignment."""
    seen: set[str] = set()
    cleaned: list[Slot] = []
    for slot in slots:
        if slot.player_id and slot.player_id in seen:
            logger.warning(
                f"Player {slot.player_id!r} assigned to several slots; "
                f"clearing slot {slot.id!r}"
            )
            slot = slot.model_copy(update={"player_id": None})
        elif slot.player_id:
            seen.add(slot.player_id)
        cleaned.append(slot)
    return cleaned


def coerce_formation(raw: Formation | Mapping[str, Any]) -> Formation:
    """Build a Formation, tolerating malformed or missing slots."""
    if isinstance(raw, Formation):
        return raw.model_copy(update={"slots": _drop_duplicate_assignments(raw.slots)})

    data = dict(raw)
    raw_slots = data.pop("slots", None)
    if raw_slots is None:
        logger.warning("Formation %r has no slots", data.get("id"))
        raw_slots = []
    elif isinstance(raw_slots, Mapping):
        raw_slots = list(raw_slots.values())
    elif not isinstance(raw_slots, list | tuple):
        logger.warning("Formation %r slots are malformed; ignoring them", data.get("id"))
        raw_slots = []

    try:
        formation = Formation.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Formation metadata invalid ({e.error_count()} errors)")
        formation = Formation(id=str(data.get("id") or "unknown"))

    slots = [slot for slot in (coerce_slot(s) for s in raw_slots) if slot is not None]
    return formation.model_copy(update={"slots": _drop_duplicate_assignments(slots)})


def coerce_players(raw: Iterable[Any]) -> list[Player]:
    """Parse player entries, skipping ones that cannot be read."""
    players: list[Player] = []
    seen: set[str] = set()
    for entry in raw:
        if isinstance(entry, Player):
            player = entry
        elif isinstance(entry, Mapping):
            try:
                player = Player.model_validate(entry)
            except ValidationError as e:
                logger.warning(
                    f"Skipping invalid player {entry.get('id')!r}: {e.error_count()} errors"
                )
                continue
        else:
            logger.warning("Skipping malformed player entry: %r", entry)
            continue

        if player.id in seen:
            logger.warning(f"Duplicate player id {player.id!r}; keeping the first")
            continue
        seen.add(player.id)
        players.append(player)
    return players


def coerce_context(raw: Any) -> GameContext | None:
    if raw is None or isinstance(raw, GameContext):
        return raw
    if isinstance(raw, Mapping):
        try:
            return GameContext.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid game context: {e.error_count()} errors")
            return None
    logger.warning("Ignoring game context of type %s", type(raw).__name__)
    return None


def coerce_relations(raw: Any) -> TeamRelations | None:
    if raw is None or isinstance(raw, TeamRelations):
        return raw
    if isinstance(raw, Mapping):
        try:
            return TeamRelations.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid team relations: {e.error_count()} errors")
            return None
    logger.warning("Ignoring team relations of type %s", type(raw).__name__)
    return None


def validate_formation(formation: Formation) -> list[str]:
    """Data-quality warnings for a coerced formation (never raises)."""
    warnings: list[str] = []
    positioned = 0
    for slot in formation.slots:
        coords = slot_coordinates(slot)
        if coords is None:
            if slot.position is not None:
                warnings.append(f"Slot '{slot.id}' position is not finite")
            continue
        positioned += 1
        x, y = coords
        if not (FIELD_MIN <= x <= FIELD_MAX and FIELD_MIN <= y <= FIELD_MAX):
            warnings.append(f"Slot '{slot.id}' is off the field ({x:g}, {y:g})")

    if formation.slots and positioned == 0:
        warnings.append("No slot has a usable position")
    return warnings


__all__ = [
    "ContractViolation",
    "coerce_context",
    "coerce_formation",
    "coerce_players",
    "coerce_position",
    "coerce_relations",
    "coerce_slot",
    "ensure_contract",
    "validate_formation",
]
