"""Tests for recommendation aggregation and ranking."""

from __future__ import annotations

from tactical_engine.analyzer.advisory import AdvisoryResult
from tactical_engine.analyzer.aggregator import (
    FALLBACK_RECOMMENDATIONS,
    RecommendationSource,
    aggregate_recommendations,
    deduplicate,
    rank_recommendations,
)
from tactical_engine.types import (
    Impact,
    Priority,
    Recommendation,
    RecommendationType,
)


def _rec(
    rec_id: str,
    priority: Priority = Priority.MEDIUM,
    confidence: float = 50,
    title: str | None = None,
) -> Recommendation:
    return Recommendation(
        id=rec_id,
        type=RecommendationType.TACTICAL,
        title=title or f"Title {rec_id}",
        description="d",
        reasoning="r",
        confidence=confidence,
        priority=priority,
        impact=Impact.MODERATE,
    )


def _is_ranked(recs: list[Recommendation]) -> bool:
    keys = [(r.priority.rank, r.confidence) for r in recs]
    return all(a >= b for a, b in zip(keys, keys[1:], strict=False))


class TestRanking:
    def test_priority_then_confidence(self) -> None:
        recs = [
            _rec("low", Priority.LOW, 99),
            _rec("med-50", Priority.MEDIUM, 50),
            _rec("crit", Priority.CRITICAL, 10),
            _rec("med-80", Priority.MEDIUM, 80),
            _rec("high", Priority.HIGH, 60),
        ]
        ranked = rank_recommendations(recs)
        assert [r.id for r in ranked] == ["crit", "high", "med-80", "med-50", "low"]

    def test_ties_keep_contribution_order(self) -> None:
        recs = [_rec("first"), _rec("second"), _rec("third")]
        assert [r.id for r in rank_recommendations(recs)] == ["first", "second", "third"]


class TestDeduplicate:
    def test_heuristics_deduplicate_by_id_only(self) -> None:
        recs = [
            _rec("a", title="Improve Lateral Balance"),
            _rec("a", title="Something else"),
            _rec("b", title="improve lateral balance"),
            _rec("c", title="Unique"),
        ]
        assert [r.id for r in deduplicate(recs)] == ["a", "b", "c"]

    def test_same_titles_from_different_players_are_kept(self) -> None:
        recs = [
            _rec("player-position-p1", title="Optimize Иван's Position"),
            _rec("player-position-p2", title="Optimize Пётр's Position"),
            _rec("player-position-p3", title="Optimize Silva's Position"),
            _rec("player-position-p4", title="Optimize Silva's Position"),
        ]
        assert len(deduplicate(recs)) == 4

    def test_advisory_title_matching_is_case_insensitive(self) -> None:
        heuristics = [_rec("geo", title="Press Higher")]
        advisory = [
            _rec("ai-recommendation-0", title="  PRESS HIGHER "),
            _rec("ai-recommendation-1", title="Прессинг выше"),
            _rec("ai-recommendation-2", title="прессинг ВЫШЕ"),
        ]
        kept = deduplicate(heuristics, advisory)
        assert [r.id for r in kept] == ["geo", "ai-recommendation-1"]


class TestAggregateRecommendations:
    def test_merges_sources_and_advisory(self) -> None:
        sources = [
            RecommendationSource("formation", [_rec("geo", Priority.MEDIUM, 85)]),
            RecommendationSource("context", [_rec("ctx", Priority.HIGH, 90)]),
        ]
        advisory = AdvisoryResult.success([_rec("ai-recommendation-0", Priority.MEDIUM, 85)])

        result = aggregate_recommendations(sources, advisory)

        assert [r.id for r in result] == ["ctx", "geo", "ai-recommendation-0"]
        assert _is_ranked(result)

    def test_heuristic_wins_duplicate_title_over_ai(self) -> None:
        sources = [RecommendationSource("formation", [_rec("geo", title="Press Higher")])]
        advisory = AdvisoryResult.success(
            [_rec("ai-recommendation-0", Priority.CRITICAL, 99, title="press higher")]
        )

        (only,) = aggregate_recommendations(sources, advisory)
        assert only.id == "geo"

    def test_failed_advisory_contributes_nothing(self) -> None:
        sources = [RecommendationSource("formation", [_rec("geo")])]
        result = aggregate_recommendations(sources, AdvisoryResult.failure("timeout"))
        assert [r.id for r in result] == ["geo"]

    def test_bounded_to_limit(self) -> None:
        recs = [_rec(f"r{i}", confidence=i) for i in range(30)]
        result = aggregate_recommendations([RecommendationSource("many", recs)])

        assert len(result) == 20
        assert result[0].id == "r29"
        assert _is_ranked(result)

    def test_fallback_when_stages_failed_and_nothing_left(self) -> None:
        sources = [
            RecommendationSource("formation", failed=True),
            RecommendationSource("context"),
        ]
        result = aggregate_recommendations(sources)

        assert {r.id for r in result} == {r.id for r in FALLBACK_RECOMMENDATIONS}
        assert result[0].title == "Optimize Player Chemistry"

    def test_no_fallback_without_failures(self) -> None:
        assert aggregate_recommendations([RecommendationSource("formation")]) == []

    def test_no_fallback_when_advisory_filled_in(self) -> None:
        sources = [RecommendationSource("formation", failed=True)]
        advisory = AdvisoryResult.success([_rec("ai-recommendation-0")])
        result = aggregate_recommendations(sources, advisory)
        assert [r.id for r in result] == ["ai-recommendation-0"]

    def test_idempotent(self) -> None:
        sources = [
            RecommendationSource("a", [_rec("x", Priority.LOW, 10), _rec("y")]),
            RecommendationSource("b", [_rec("z", Priority.HIGH, 70)]),
        ]
        assert aggregate_recommendations(sources) == aggregate_recommendations(sources)
