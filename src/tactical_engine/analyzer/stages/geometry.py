"""Formation geometry stage: balance, width and depth diagnostics."""

import logging

from tactical_engine.analyzer.constants import (
    ATTACKING_LINE_Y,
    COMPACTNESS_CONFIDENCE,
    DEFENSIVE_LINE_Y,
    FIELD_CENTER_X,
    HORIZONTAL_SPREAD_MIN,
    LATERAL_BALANCE_CONFIDENCE,
    LATERAL_IMBALANCE_THRESHOLD,
    TARGET_HORIZONTAL_SPREAD,
    TARGET_VERTICAL_SPREAD,
    VERTICAL_SPREAD_MAX,
    WIDTH_CONFIDENCE,
)
from tactical_engine.analyzer.normalization import clamp, slot_coordinates
from tactical_engine.types import (
    Action,
    ActionType,
    Formation,
    FormationMetrics,
    Impact,
    Priority,
    Recommendation,
    RecommendationType,
)

logger = logging.getLogger(__name__)


def valid_coordinates(formation: Formation) -> list[tuple[float, float]]:
    """Coordinates of every slot with a numeric position."""
    coords = [slot_coordinates(slot) for slot in formation.slots]
    return [c for c in coords if c is not None]


def analyze_formation_structure(formation: Formation) -> list[Recommendation]:
    """Check lateral balance, vertical compactness and width of a formation."""
    coords = valid_coordinates(formation)
    if not coords:
        logger.debug("No valid slot positions in formation %s", formation.id)
        return []

    xs = [x for x, _ in coords]
    ys = [y for _, y in coords]
    avg_x = sum(xs) / len(xs)
    spread_x = max(xs) - min(xs)
    spread_y = max(ys) - min(ys)

    recommendations: list[Recommendation] = []

    if abs(avg_x - FIELD_CENTER_X) > LATERAL_IMBALANCE_THRESHOLD:
        side = "right" if avg_x > FIELD_CENTER_X else "left"
        recommendations.append(
            Recommendation(
                id="formation-lateral-balance",
                type=RecommendationType.FORMATION,
                title="Improve Lateral Balance",
                description=(
                    f"Formation is {side}-heavy. Consider repositioning players "
                    "for better balance."
                ),
                reasoning=(
                    "Unbalanced formations can be exploited by opponents focusing "
                    "attacks on the weaker side."
                ),
                confidence=LATERAL_BALANCE_CONFIDENCE,
                priority=Priority.MEDIUM,
                impact=Impact.MODERATE,
                actions=[
                    Action(
                        type=ActionType.ADJUST_TACTICS,
                        description="Reposition players for better lateral balance",
                        parameters={
                            "targetBalance": FIELD_CENTER_X,
                            "currentBalance": round(avg_x, 1),
                        },
                    )
                ],
            )
        )

    if spread_y > VERTICAL_SPREAD_MAX:
        recommendations.append(
            Recommendation(
                id="formation-compactness",
                type=RecommendationType.TACTICAL,
                title="Increase Formation Compactness",
                description=(
                    "Players are too spread out vertically, making midfield "
                    "control difficult."
                ),
                reasoning=(
                    "Compact formations allow better passing connections and "
                    "pressing coordination."
                ),
                confidence=COMPACTNESS_CONFIDENCE,
                priority=Priority.MEDIUM,
                impact=Impact.SIGNIFICANT,
                actions=[
                    Action(
                        type=ActionType.ADJUST_TACTICS,
                        description="Bring lines closer together",
                        parameters={
                            "currentSpread": round(spread_y, 1),
                            "targetSpread": TARGET_VERTICAL_SPREAD,
                        },
                    )
                ],
            )
        )

    if spread_x < HORIZONTAL_SPREAD_MIN:
        recommendations.append(
            Recommendation(
                id="formation-width",
                type=RecommendationType.TACTICAL,
                title="Utilize Field Width",
                description=(
                    "Formation is too narrow. Spread players wider to stretch the "
                    "opposition."
                ),
                reasoning=(
                    "Width creates space in central areas and provides more "
                    "passing options."
                ),
                confidence=WIDTH_CONFIDENCE,
                priority=Priority.MEDIUM,
                impact=Impact.MODERATE,
                actions=[
                    Action(
                        type=ActionType.ADJUST_TACTICS,
                        description="Position wingers and fullbacks wider",
                        parameters={
                            "currentWidth": round(spread_x, 1),
                            "recommendedWidth": TARGET_HORIZONTAL_SPREAD,
                        },
                    )
                ],
            )
        )

    return recommendations


def compute_formation_metrics(formation: Formation) -> FormationMetrics | None:
    """Summarize shape as 0-100 scores for dashboards."""
    coords = valid_coordinates(formation)
    if not coords:
        return None

    xs = [x for x, _ in coords]
    ys = [y for _, y in coords]
    count = len(coords)
    avg_x = sum(xs) / count
    spread_x = max(xs) - min(xs)
    spread_y = max(ys) - min(ys)

    attacking = sum(1 for y in ys if y > ATTACKING_LINE_Y)
    defensive = sum(1 for y in ys if y < DEFENSIVE_LINE_Y)

    return FormationMetrics(
        balance=clamp(100 - abs(avg_x - FIELD_CENTER_X) * 2),
        width=clamp(spread_x),
        depth=clamp(spread_y),
        compactness=clamp(100 - (spread_x + spread_y) / 2),
        attacking=attacking / count * 100,
        defensive=defensive / count * 100,
    )


__all__ = [
    "analyze_formation_structure",
    "compute_formation_metrics",
    "valid_coordinates",
]
