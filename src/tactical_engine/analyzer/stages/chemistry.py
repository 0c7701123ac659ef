"""Chemistry stage: pairwise compatibility between players on one team."""

import logging
import math
from collections.abc import Sequence
from typing import Any

from tactical_engine.analyzer.constants import (
    CHEMISTRY_BASE,
    CHEMISTRY_CRITICAL_LINK_THRESHOLD,
    CHEMISTRY_LINK_COUNT,
    CHEMISTRY_MENTORING_BONUS,
    CHEMISTRY_PROXIMITY_RADIUS,
    CHEMISTRY_PROXIMITY_WEIGHT,
    CHEMISTRY_RECOMMENDATION_CONFIDENCE,
    CHEMISTRY_ROLE_WEIGHT,
    CHEMISTRY_WEAK_LINK_THRESHOLD,
    CONDITION_MODIFIERS,
    DEFAULT_ROLE_SYNERGY,
    RELATIONSHIP_MODIFIERS,
    ROLE_GROUPS,
    ROLE_SYNERGY,
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
    ChemistryPair,
    ChemistryReport,
    Formation,
    Impact,
    Player,
    Priority,
    Recommendation,
    RecommendationType,
    RelationshipTag,
    TeamRelations,
)

logger = logging.getLogger(__name__)

Coordinates = tuple[float, float]


def _is_named(player: Any) -> bool:
    return isinstance(player, Player) and bool((player.name or "").strip())


def relationship_between(
    relations: TeamRelations | None, first_id: str, second_id: str
) -> RelationshipTag | None:
    """Look up a relationship in either direction.

    When the two directions disagree the tag with the lower modifier wins, so
    the result never depends on argument order.
    """
    if relations is None:
        return None
    candidates = (
        relations.relationships.get(first_id, {}).get(second_id),
        relations.relationships.get(second_id, {}).get(first_id),
    )
    tags = {tag for tag in candidates if tag is not None}
    if not tags:
        return None
    return min(tags, key=lambda tag: RELATIONSHIP_MODIFIERS[tag])


def share_mentoring_group(
    relations: TeamRelations | None, first_id: str, second_id: str
) -> bool:
    if relations is None:
        return False
    return any(
        first_id in group.members and second_id in group.members
        for group in relations.mentoring_groups
    )


def role_synergy(first_role: str, second_role: str) -> float:
    first = ROLE_GROUPS.get(normalize_role(first_role))
    second = ROLE_GROUPS.get(normalize_role(second_role))
    if first is None or second is None:
        return DEFAULT_ROLE_SYNERGY
    return ROLE_SYNERGY[first][second]


def proximity_bonus(first: Coordinates | None, second: Coordinates | None) -> float:
    if first is None or second is None:
        return 0.0
    distance = math.dist(first, second)
    return max(0.0, 1 - distance / CHEMISTRY_PROXIMITY_RADIUS) * CHEMISTRY_PROXIMITY_WEIGHT


def condition_modifier(player: Player) -> float:
    """Mean of the player's form and morale modifiers."""
    return (
        CONDITION_MODIFIERS.get(player.form, 0.0)
        + CONDITION_MODIFIERS.get(player.morale, 0.0)
    ) / 2


def score_pair(
    first: Player,
    second: Player,
    first_coords: Coordinates | None = None,
    second_coords: Coordinates | None = None,
    relations: TeamRelations | None = None,
) -> ChemistryPair:
    """Compatibility of two players, symmetric in its arguments."""
    tag = relationship_between(relations, first.id, second.id)

    score = CHEMISTRY_BASE
    score += role_synergy(first.preferred_role, second.preferred_role) * CHEMISTRY_ROLE_WEIGHT
    score += proximity_bonus(first_coords, second_coords)
    if tag is not None:
        score += RELATIONSHIP_MODIFIERS[tag]
    if share_mentoring_group(relations, first.id, second.id):
        score += CHEMISTRY_MENTORING_BONUS
    score += (condition_modifier(first) + condition_modifier(second)) / 2

    return ChemistryPair(
        player_a=first.id,
        player_b=second.id,
        score=round(clamp(score), 1),
        relationship_tag=tag,
    )


def calculate_chemistry(
    players: Sequence[Player | None],
    formation: Formation | None = None,
    relations: TeamRelations | None = None,
) -> ChemistryReport:
    """Score every unordered pair of named players and summarize the links."""
    if not isinstance(players, list | tuple):
        logger.warning("Chemistry skipped: expected a player list, got %s", type(players).__name__)
        return ChemistryReport()

    named = [p for p in players if _is_named(p)]
    if len(named) < 2:
        return ChemistryReport()

    slots = player_slots(formation) if formation is not None else {}
    coords = {p.id: slot_coordinates(slots.get(p.id)) for p in named}

    pairs: list[ChemistryPair] = []
    for i, first in enumerate(named):
        for second in named[i + 1 :]:
            if first.id == second.id:
                continue
            pairs.append(
                score_pair(first, second, coords[first.id], coords[second.id], relations)
            )

    if not pairs:
        return ChemistryReport()

    pairs.sort(key=lambda pair: pair.score, reverse=True)

    totals: dict[str, list[float]] = {}
    for pair in pairs:
        totals.setdefault(pair.player_a, []).append(pair.score)
        totals.setdefault(pair.player_b, []).append(pair.score)
    individual = {pid: round(sum(s) / len(s), 1) for pid, s in totals.items()}

    return ChemistryReport(
        pairs=pairs,
        overall=round(sum(p.score for p in pairs) / len(pairs), 1),
        individual=individual,
        top_links=pairs[:CHEMISTRY_LINK_COUNT],
        bottom_links=list(reversed(pairs[-CHEMISTRY_LINK_COUNT:])),
    )


def chemistry_recommendations(
    report: ChemistryReport, players: Sequence[Player]
) -> list[Recommendation]:
    """Flag the weakest links when they fall below the chemistry threshold."""
    weak = [p for p in report.bottom_links if p.score < CHEMISTRY_WEAK_LINK_THRESHOLD]
    if not weak:
        return []

    names = {p.id: player_label(p.name, p.id) for p in players}
    links = ", ".join(
        f"{names.get(p.player_a, p.player_a)} & {names.get(p.player_b, p.player_b)} "
        f"({p.score:g})"
        for p in weak
    )
    critical = weak[0].score < CHEMISTRY_CRITICAL_LINK_THRESHOLD

    return [
        Recommendation(
            id="chemistry-weak-links",
            type=RecommendationType.PLAYER,
            title="Strengthen Weak Chemistry Links",
            description=f"Bottom chemistry links: {links}.",
            reasoning=(
                "Poor understanding between teammates disrupts passing "
                "combinations and defensive cover."
            ),
            confidence=CHEMISTRY_RECOMMENDATION_CONFIDENCE,
            priority=Priority.MEDIUM if critical else Priority.LOW,
            impact=Impact.MODERATE,
            actions=[
                Action(
                    type=ActionType.ADJUST_TACTICS,
                    description="Separate or pair players to improve understanding",
                    parameters={"pairs": [p.model_dump() for p in weak]},
                )
            ],
        )
    ]


__all__ = [
    "calculate_chemistry",
    "chemistry_recommendations",
    "condition_modifier",
    "proximity_bonus",
    "relationship_between",
    "role_synergy",
    "score_pair",
    "share_mentoring_group",
]
