"""Match-context stage: strategic advice driven by phase and score."""

from tactical_engine.analyzer.constants import (
    ATTACKING_URGENCY_CONFIDENCE,
    DEFENSIVE_STABILITY_CONFIDENCE,
)
from tactical_engine.types import (
    Action,
    ActionType,
    GameContext,
    GamePhase,
    Impact,
    Priority,
    Recommendation,
    RecommendationType,
)

LATE_PHASES = frozenset({GamePhase.LATE, GamePhase.EXTRA_TIME})


def generate_tactical_advice(context: GameContext | None) -> list[Recommendation]:
    """Late-game strategy from the home side's point of view."""
    if context is None or context.score is None:
        return []
    if context.game_phase not in LATE_PHASES:
        return []

    home, away = context.score.home, context.score.away

    if home < away:
        return [
            Recommendation(
                id="tactical-urgent-attack",
                type=RecommendationType.STRATEGY,
                title="Increase Attacking Urgency",
                description=(
                    "Push more players forward and increase tempo to find an "
                    "equalizer."
                ),
                reasoning="Being behind late in the game requires taking calculated risks.",
                confidence=ATTACKING_URGENCY_CONFIDENCE,
                priority=Priority.HIGH,
                impact=Impact.GAME_CHANGING,
                actions=[
                    Action(
                        type=ActionType.ADJUST_TACTICS,
                        description="Move defensive players higher up the pitch",
                        parameters={"urgency": "high", "focus": "attack"},
                    )
                ],
            )
        ]

    if home > away:
        return [
            Recommendation(
                id="tactical-defensive-stability",
                type=RecommendationType.STRATEGY,
                title="Maintain Defensive Stability",
                description="Protect the lead by maintaining a compact defensive shape.",
                reasoning=(
                    "Preserve the advantage while minimizing opponent scoring "
                    "opportunities."
                ),
                confidence=DEFENSIVE_STABILITY_CONFIDENCE,
                priority=Priority.HIGH,
                impact=Impact.GAME_CHANGING,
                actions=[
                    Action(
                        type=ActionType.ADJUST_TACTICS,
                        description="Drop deeper and focus on defensive solidity",
                        parameters={"urgency": "low", "focus": "defense"},
                    )
                ],
            )
        ]

    return []


__all__ = ["LATE_PHASES", "generate_tactical_advice"]
