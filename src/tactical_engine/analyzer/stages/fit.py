"""Player-position fit stage: how well each player suits their slot."""

import logging
from collections.abc import Sequence

from tactical_engine.analyzer.constants import (
    ATTACKER_ZONE_MIN_Y,
    DEFAULT_FIT_REASONING,
    DEFAULT_ROLE_ARCHETYPES,
    DEFENDER_ZONE_MAX_Y,
    DEFENSIVE_HALF_MAX_Y,
    FULL_MATCH_RATIO,
    LEFT_WING_MAX_X,
    MAX_ALTERNATIVES,
    MIDFIELD_ALTERNATIVE_BONUS,
    MIDFIELD_ALTERNATIVE_REASON,
    PARTIAL_MATCH_RATIO,
    RIGHT_WING_MIN_X,
    ROLE_ARCHETYPES,
    SUITABILITY_CRITICAL_THRESHOLD,
    SUITABILITY_WARNING_THRESHOLD,
    SUPPORT_STRIKER_ALTERNATIVE_BONUS,
    SUPPORT_STRIKER_ALTERNATIVE_REASON,
)
from tactical_engine.analyzer.normalization import (
    clamp,
    normalize_role,
    player_label,
    player_slots,
    slot_coordinates,
)
from tactical_engine.types import (
    Action,
    ActionType,
    AlternativePosition,
    Archetype,
    Formation,
    Impact,
    Player,
    PlayerFit,
    Priority,
    Recommendation,
    RecommendationType,
)

logger = logging.getLogger(__name__)


def classify_archetype(x: float, y: float) -> Archetype:
    """Map a field coordinate onto a positional archetype."""
    if y < DEFENDER_ZONE_MAX_Y:
        return Archetype.DEFENDER
    if y > ATTACKER_ZONE_MIN_Y:
        return Archetype.ATTACKER
    if x < LEFT_WING_MAX_X:
        return Archetype.LEFT_WING
    if x > RIGHT_WING_MIN_X:
        return Archetype.RIGHT_WING
    return Archetype.MIDFIELDER


def position_match_ratio(preferred_role: str, archetype: Archetype) -> float:
    """100 when the archetype suits the player's preferred role, else 60."""
    compatible = ROLE_ARCHETYPES.get(
        normalize_role(preferred_role), DEFAULT_ROLE_ARCHETYPES
    )
    return FULL_MATCH_RATIO if archetype in compatible else PARTIAL_MATCH_RATIO


def generate_alternative_positions(
    player: Player, y: float
) -> list[AlternativePosition]:
    """Suggest other positions based on which half the player occupies."""
    base = clamp(player.current_potential)
    alternatives: list[AlternativePosition] = []

    if y < DEFENSIVE_HALF_MAX_Y:
        alternatives.append(
            AlternativePosition(
                position=Archetype.MIDFIELDER.value,
                suitability=clamp(base + MIDFIELD_ALTERNATIVE_BONUS),
                reason=MIDFIELD_ALTERNATIVE_REASON,
            )
        )
    else:
        alternatives.append(
            AlternativePosition(
                position="Support Striker",
                suitability=clamp(base + SUPPORT_STRIKER_ALTERNATIVE_BONUS),
                reason=SUPPORT_STRIKER_ALTERNATIVE_REASON,
            )
        )

    return alternatives[:MAX_ALTERNATIVES]


def evaluate_player_fit(player: Player, x: float, y: float) -> PlayerFit:
    """Score a single player standing at (x, y)."""
    potential = clamp(player.current_potential)
    archetype = classify_archetype(x, y)
    ratio = position_match_ratio(player.preferred_role, archetype)
    suitability = round(clamp(potential * ratio / 100), 1)

    return PlayerFit(
        player_id=player.id,
        archetype=archetype,
        match_ratio=ratio,
        suitability=suitability,
        alternatives=generate_alternative_positions(player, y),
        positioning=suitability,
        effectiveness=round((suitability + potential) / 2, 1),
    )


def score_player_fits(
    formation: Formation, players: Sequence[Player]
) -> list[PlayerFit]:
    """Fit records for every player that occupies a positioned slot."""
    slots = player_slots(formation)
    fits: list[PlayerFit] = []
    for player in players:
        coords = slot_coordinates(slots.get(player.id))
        if coords is None:
            continue
        fits.append(evaluate_player_fit(player, *coords))
    return fits


def analyze_player_positioning(
    formation: Formation, players: Sequence[Player]
) -> list[Recommendation]:
    """Recommend moves for players poorly suited to their current slot."""
    slots = player_slots(formation)
    by_id = {p.id: p for p in players}
    recommendations: list[Recommendation] = []

    for fit in score_player_fits(formation, players):
        if fit.suitability >= SUITABILITY_WARNING_THRESHOLD:
            continue

        player = by_id[fit.player_id]
        name = player_label(player.name, player.id)
        best = fit.alternatives[0] if fit.alternatives else None
        critical = fit.suitability < SUITABILITY_CRITICAL_THRESHOLD
        position = slots[player.id].position

        recommendations.append(
            Recommendation(
                id=f"player-position-{player.id}",
                type=RecommendationType.PLAYER,
                title=f"Optimize {name}'s Position",
                description=(
                    f"{name} is only {fit.suitability:g}% suited for current "
                    f"position ({fit.archetype.value})."
                ),
                reasoning=best.reason if best else DEFAULT_FIT_REASONING,
                confidence=round(100 - fit.suitability, 1),
                priority=Priority.HIGH if critical else Priority.MEDIUM,
                impact=Impact.SIGNIFICANT if critical else Impact.MODERATE,
                actions=[
                    Action(
                        type=ActionType.MOVE_PLAYER,
                        description=(
                            f"Move to {best.position if best else 'better position'}"
                        ),
                        parameters={
                            "playerId": player.id,
                            "currentPosition": (
                                position.model_dump() if position else None
                            ),
                            "suggestedPosition": best.position if best else None,
                            "alternatives": [
                                alt.model_dump() for alt in fit.alternatives
                            ],
                        },
                    )
                ],
            )
        )

    logger.debug(
        "Position fit flagged %d of %d players", len(recommendations), len(players)
    )
    return recommendations


__all__ = [
    "analyze_player_positioning",
    "classify_archetype",
    "evaluate_player_fit",
    "generate_alternative_positions",
    "position_match_ratio",
    "score_player_fits",
]
