"""Merge, deduplicate, rank and bound recommendation streams."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from tactical_engine.analyzer.advisory import AdvisoryResult
from tactical_engine.analyzer.constants import MAX_RECOMMENDATIONS
from tactical_engine.types import (
    Impact,
    Priority,
    Recommendation,
    RecommendationType,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RecommendationSource:
    """Output of one heuristic stage."""

    name: str
    recommendations: list[Recommendation] = field(default_factory=list)
    failed: bool = False


FALLBACK_RECOMMENDATIONS: tuple[Recommendation, ...] = (
    Recommendation(
        id="fallback-balance",
        type=RecommendationType.FORMATION,
        title="Review Formation Balance",
        description="Consider adjusting player positions for better field coverage.",
        reasoning=(
            "Balanced formations provide stability in both attacking and "
            "defensive phases."
        ),
        confidence=75,
        priority=Priority.MEDIUM,
        impact=Impact.MODERATE,
    ),
    Recommendation(
        id="fallback-chemistry",
        type=RecommendationType.PLAYER,
        title="Optimize Player Chemistry",
        description="Place players in positions that maximize their natural abilities.",
        reasoning="Players perform better when positioned according to their strengths.",
        confidence=80,
        priority=Priority.MEDIUM,
        impact=Impact.SIGNIFICANT,
    ),
)


def rank_key(recommendation: Recommendation) -> tuple[int, float]:
    return (-recommendation.priority.rank, -recommendation.confidence)


def rank_recommendations(recommendations: Sequence[Recommendation]) -> list[Recommendation]:
    """Stable sort by priority then confidence, both descending."""
    return sorted(recommendations, key=rank_key)


def title_key(recommendation: Recommendation) -> str:
    return recommendation.title.casefold().strip()


def deduplicate(
    heuristics: Sequence[Recommendation],
    advisory: Sequence[Recommendation] = (),
) -> list[Recommendation]:
    """Drop repeated ids, then AI items whose title repeats one already kept.

    Heuristic titles are never compared with each other: two players with the
    same display name each keep their own recommendation.
    """
    seen_ids: set[str] = set()
    seen_titles: set[str] = set()
    unique: list[Recommendation] = []
    for rec in heuristics:
        if rec.id in seen_ids:
            logger.debug("Dropping duplicate recommendation %s", rec.id)
            continue
        seen_ids.add(rec.id)
        seen_titles.add(title_key(rec))
        unique.append(rec)

    for rec in advisory:
        key = title_key(rec)
        if rec.id in seen_ids or key in seen_titles:
            logger.debug("Dropping advisory recommendation %s", rec.id)
            continue
        seen_ids.add(rec.id)
        seen_titles.add(key)
        unique.append(rec)
    return unique


def aggregate_recommendations(
    sources: Sequence[RecommendationSource],
    advisory: AdvisoryResult | None = None,
    limit: int = MAX_RECOMMENDATIONS,
) -> list[Recommendation]:
    """Produce the single ranked list handed back to the caller.

    Heuristic sources are merged in the order given, then AI advisory items.
    A failed or missing advisory result simply contributes nothing.
    """
    merged: list[Recommendation] = []
    for source in sources:
        merged.extend(source.recommendations)

    ai_items = advisory.recommendations if advisory is not None and advisory.ok else []

    if not merged and not ai_items and any(source.failed for source in sources):
        failed = [s.name for s in sources if s.failed]
        logger.warning(f"Using fallback recommendations after stage failures: {failed}")
        merged.extend(FALLBACK_RECOMMENDATIONS)

    ranked = rank_recommendations(deduplicate(merged, ai_items))
    if len(ranked) > limit:
        logger.debug("Trimming %d recommendations to %d", len(ranked), limit)
    return ranked[:limit]


__all__ = [
    "FALLBACK_RECOMMENDATIONS",
    "RecommendationSource",
    "aggregate_recommendations",
    "deduplicate",
    "rank_key",
    "rank_recommendations",
    "title_key",
]
