"""Heat-zone stage: spatial influence of each placed player."""

import logging
from collections.abc import Sequence

from tactical_engine.analyzer.constants import (
    ATTACK_THIRD_MIN_Y,
    COVERAGE_CONFIDENCE,
    COVERAGE_WARNING_THRESHOLD,
    DEFAULT_POSITION_IMPORTANCE,
    DEFENSE_THIRD_MAX_Y,
    EMPTY_THIRD_CONFIDENCE,
    POSITION_IMPORTANCE,
)
from tactical_engine.analyzer.normalization import (
    clamp,
    normalize_role,
    player_slots,
    slot_coordinates,
)
from tactical_engine.types import (
    Action,
    ActionType,
    Formation,
    HeatMap,
    HeatZone,
    Impact,
    Player,
    Priority,
    Recommendation,
    RecommendationType,
    ZoneType,
)

logger = logging.getLogger(__name__)

_THIRD_LABELS = {
    ZoneType.ATTACK: "Attacking",
    ZoneType.MIDFIELD: "Midfield",
    ZoneType.DEFENSE: "Defensive",
}


def zone_type_for(y: float) -> ZoneType:
    if y > ATTACK_THIRD_MIN_Y:
        return ZoneType.ATTACK
    if y < DEFENSE_THIRD_MAX_Y:
        return ZoneType.DEFENSE
    return ZoneType.MIDFIELD


def position_importance(*roles: str | None) -> float:
    """Importance of the first known role, falling back to the default."""
    for role in roles:
        key = normalize_role(role)
        if key in POSITION_IMPORTANCE:
            return POSITION_IMPORTANCE[key]
    return DEFAULT_POSITION_IMPORTANCE


def generate_heat_map(formation: Formation, players: Sequence[Player]) -> HeatMap:
    """One zone per placed player plus the overall field coverage."""
    slots = player_slots(formation)
    zones: list[HeatZone] = []
    intensities: list[float] = []

    for player in players:
        slot = slots.get(player.id)
        coords = slot_coordinates(slot)
        if slot is None or coords is None:
            continue
        x, y = coords
        importance = position_importance(slot.role, player.preferred_role)
        intensity = clamp(clamp(player.current_potential) / 100 * importance, 0.0, 1.0)
        intensities.append(intensity)
        zones.append(
            HeatZone(
                x=clamp(x),
                y=clamp(y),
                intensity=round(intensity, 3),
                type=zone_type_for(y),
                player_id=player.id,
            )
        )

    if not zones:
        return HeatMap()

    coverage = sum(intensities) / len(intensities) * 100
    return HeatMap(zones=zones, coverage=round(coverage, 1))


def coverage_recommendations(heat_map: HeatMap) -> list[Recommendation]:
    """Warn about thin overall coverage and thirds left without players."""
    if not heat_map.zones:
        return []

    recommendations: list[Recommendation] = []
    occupied = {zone.type for zone in heat_map.zones}

    for zone_type in ZoneType:
        if zone_type in occupied:
            continue
        label = _THIRD_LABELS[zone_type]
        recommendations.append(
            Recommendation(
                id=f"coverage-empty-{zone_type.value}",
                type=RecommendationType.TACTICAL,
                title=f"Cover the {label} Third",
                description=f"No player is positioned in the {label.lower()} third.",
                reasoning=(
                    "An unoccupied third leaves space the opposition can play "
                    "through without pressure."
                ),
                confidence=EMPTY_THIRD_CONFIDENCE,
                priority=Priority.MEDIUM,
                impact=Impact.SIGNIFICANT,
                actions=[
                    Action(
                        type=ActionType.MOVE_PLAYER,
                        description=f"Move a player into the {label.lower()} third",
                        parameters={"zone": zone_type.value},
                    )
                ],
            )
        )

    if heat_map.coverage < COVERAGE_WARNING_THRESHOLD:
        recommendations.append(
            Recommendation(
                id="coverage-low",
                type=RecommendationType.TACTICAL,
                title="Improve Field Coverage",
                description=(
                    f"Field coverage is {heat_map.coverage:g}%. Key areas lack "
                    "influential players."
                ),
                reasoning=(
                    "Low coverage means fewer players can affect play in the "
                    "areas that matter most."
                ),
                confidence=COVERAGE_CONFIDENCE,
                priority=Priority.LOW,
                impact=Impact.MODERATE,
                actions=[
                    Action(
                        type=ActionType.ADJUST_TACTICS,
                        description="Place stronger players in central roles",
                        parameters={
                            "currentCoverage": heat_map.coverage,
                            "targetCoverage": COVERAGE_WARNING_THRESHOLD,
                        },
                    )
                ],
            )
        )

    return recommendations


__all__ = [
    "coverage_recommendations",
    "generate_heat_map",
    "position_importance",
    "zone_type_for",
]
