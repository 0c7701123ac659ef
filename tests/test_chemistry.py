"""Tests for the chemistry stage."""

from __future__ import annotations

import pytest

from tactical_engine.analyzer.stages.chemistry import (
    calculate_chemistry,
    chemistry_recommendations,
    condition_modifier,
    relationship_between,
    role_synergy,
    score_pair,
)
from tactical_engine.types import (
    Condition,
    FieldPosition,
    Formation,
    MentoringGroup,
    Player,
    Priority,
    RelationshipTag,
    Slot,
    TeamRelations,
)


def _cm(player_id: str, **kwargs: object) -> Player:
    return Player(id=player_id, name=player_id.upper(), preferred_role="CM", **kwargs)


class TestScorePair:
    def test_baseline_midfield_pair(self) -> None:
        """Base 40 plus 0.9 midfield synergy weighted by 30."""
        assert score_pair(_cm("a"), _cm("b")).score == 67

    def test_friendship_and_rivalry(self) -> None:
        relations = TeamRelations(
            relationships={
                "a": {"b": RelationshipTag.FRIENDSHIP},
                "c": {"d": RelationshipTag.RIVALRY},
            }
        )
        friends = score_pair(_cm("a"), _cm("b"), relations=relations)
        rivals = score_pair(_cm("c"), _cm("d"), relations=relations)

        assert friends.score == 82
        assert friends.relationship_tag == RelationshipTag.FRIENDSHIP
        assert rivals.score == 47
        assert rivals.relationship_tag == RelationshipTag.RIVALRY

    def test_mentoring_bonus(self) -> None:
        relations = TeamRelations(
            mentoring_groups=[MentoringGroup(mentor_id="a", mentee_ids=["b"])]
        )
        assert score_pair(_cm("a"), _cm("b"), relations=relations).score == 77

    def test_proximity_bonus(self) -> None:
        near = score_pair(_cm("a"), _cm("b"), (50, 50), (50, 50))
        mid = score_pair(_cm("a"), _cm("b"), (50, 50), (50, 75))
        far = score_pair(_cm("a"), _cm("b"), (0, 0), (100, 100))

        assert near.score == 82
        assert mid.score == 74.5
        assert far.score == 67

    def test_condition_modifiers(self) -> None:
        sharp = _cm("a", form=Condition.EXCELLENT, morale=Condition.EXCELLENT)
        flat = _cm("b", form=Condition.TERRIBLE, morale=Condition.AVERAGE)
        # (5 + -5) / 2 = 0 net
        assert score_pair(sharp, flat).score == 67

    def test_extended_condition_scale(self) -> None:
        okay = _cm("a", form=Condition.OKAY, morale=Condition.OKAY)
        low = _cm("b", form=Condition.VERY_POOR, morale=Condition.VERY_POOR)
        assert condition_modifier(okay) == -1
        assert condition_modifier(low) == -8
        # 67 + (-1 + -8) / 2
        assert score_pair(okay, low).score == 62.5

    def test_score_is_clamped(self) -> None:
        relations = TeamRelations(
            relationships={"a": {"b": RelationshipTag.FRIENDSHIP}},
            mentoring_groups=[MentoringGroup(mentor_id="a", mentee_ids=["b"])],
        )
        pair = score_pair(_cm("a"), _cm("b"), (50, 50), (50, 50), relations)
        assert pair.score == 100

    def test_symmetric_with_conflicting_relations(self) -> None:
        relations = TeamRelations(
            relationships={
                "a": {"b": RelationshipTag.FRIENDSHIP},
                "b": {"a": RelationshipTag.RIVALRY},
            }
        )
        first, second = _cm("a"), Player(id="b", name="B", preferred_role="ST")
        forward = score_pair(first, second, (10, 10), (30, 40), relations)
        backward = score_pair(second, first, (30, 40), (10, 10), relations)

        assert forward.score == backward.score
        assert forward.relationship_tag == RelationshipTag.RIVALRY
        assert relationship_between(relations, "b", "a") == RelationshipTag.RIVALRY


class TestRoleSynergy:
    def test_table_is_symmetric(self) -> None:
        roles = ["GK", "CB", "CM", "ST"]
        for first in roles:
            for second in roles:
                assert role_synergy(first, second) == role_synergy(second, first)

    def test_unknown_role_uses_default(self) -> None:
        assert role_synergy("??", "ST") == 0.5


class TestCalculateChemistry:
    def test_empty_and_single_player(self) -> None:
        assert calculate_chemistry([]).pairs == []
        report = calculate_chemistry([_cm("a")])
        assert report.pairs == []
        assert report.overall == 0

    def test_unnamed_players_are_excluded(self) -> None:
        players = [_cm("a"), Player(id="x"), Player(id="y", name="   "), _cm("b")]
        report = calculate_chemistry(players)

        assert len(report.pairs) == 1
        assert {report.pairs[0].player_a, report.pairs[0].player_b} == {"a", "b"}

    def test_none_entries_are_skipped(self) -> None:
        report = calculate_chemistry([_cm("a"), None, _cm("b")])
        assert len(report.pairs) == 1

    def test_non_list_input_returns_empty_report(self) -> None:
        assert calculate_chemistry("not players").pairs == []  # type: ignore[arg-type]

    def test_pairs_are_unique_and_bounded(self) -> None:
        players = [_cm(pid) for pid in "abcdef"]
        report = calculate_chemistry(players)

        assert len(report.pairs) == 15
        keys = {frozenset((p.player_a, p.player_b)) for p in report.pairs}
        assert len(keys) == 15
        assert all(0 <= p.score <= 100 for p in report.pairs)
        assert all(p.player_a != p.player_b for p in report.pairs)

    def test_links_and_summary(self) -> None:
        relations = TeamRelations(
            relationships={
                "a": {"b": RelationshipTag.FRIENDSHIP},
                "c": {"d": RelationshipTag.RIVALRY},
            }
        )
        players = [_cm(pid) for pid in "abcd"]
        report = calculate_chemistry(players, relations=relations)

        scores = [p.score for p in report.pairs]
        assert scores == sorted(scores, reverse=True)
        assert report.top_links[0].score == 82
        assert report.bottom_links[0].score == 47
        assert [p.score for p in report.bottom_links] == sorted(
            p.score for p in report.bottom_links
        )
        assert report.overall == pytest.approx(sum(scores) / len(scores), abs=0.05)
        assert report.individual["a"] == pytest.approx((82 + 67 + 67) / 3, abs=0.05)

    def test_uses_formation_coordinates(self) -> None:
        players = [_cm("a"), _cm("b")]
        formation = Formation(
            id="f",
            slots=[
                Slot(id="1", position=FieldPosition(x=50, y=50), player_id="a"),
                Slot(id="2", position=FieldPosition(x=50, y=50), player_id="b"),
            ],
        )
        assert calculate_chemistry(players, formation).pairs[0].score == 82


class TestChemistryRecommendations:
    def test_no_weak_links(self) -> None:
        report = calculate_chemistry([_cm("a"), _cm("b")])
        assert chemistry_recommendations(report, []) == []

    def test_weak_link_is_low_priority(self) -> None:
        keeper = Player(id="gk", name="Keeper", preferred_role="GK")
        striker = Player(id="st", name="Striker", preferred_role="ST")
        relations = TeamRelations(relationships={"gk": {"st": RelationshipTag.RIVALRY}})
        report = calculate_chemistry([keeper, striker], relations=relations)

        (rec,) = chemistry_recommendations(report, [keeper, striker])
        assert report.pairs[0].score == 29
        assert rec.id == "chemistry-weak-links"
        assert rec.priority == Priority.LOW
        assert "Keeper & Striker" in rec.description

    def test_critical_link_is_medium_priority(self) -> None:
        keeper = Player(
            id="gk",
            name="Keeper",
            preferred_role="GK",
            form=Condition.TERRIBLE,
            morale=Condition.TERRIBLE,
        )
        striker = Player(
            id="st",
            name="Striker",
            preferred_role="ST",
            form=Condition.TERRIBLE,
            morale=Condition.TERRIBLE,
        )
        relations = TeamRelations(relationships={"gk": {"st": RelationshipTag.RIVALRY}})
        report = calculate_chemistry([keeper, striker], relations=relations)

        (rec,) = chemistry_recommendations(report, [keeper, striker])
        assert report.pairs[0].score == 19
        assert rec.priority == Priority.MEDIUM
