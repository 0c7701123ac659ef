"""Tests for the AI advisory gateway and response parsing."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock

from tactical_engine.analyzer.advisory import (
    ADVISORY_SCHEMA,
    AnthropicAdvisoryGateway,
    DisabledAdvisoryGateway,
    build_advisory_request,
    parse_advisory_response,
)
from tactical_engine.analyzer.api import ExternalServiceError, configure_debug
from tactical_engine.types import (
    ActionType,
    Formation,
    GameContext,
    GamePhase,
    Player,
    Priority,
    RecommendationType,
    Score,
)

VALID_BODY = {
    "recommendations": [
        {
            "title": "Press Higher",
            "description": "Push the defensive line up ten metres.",
            "reasoning": "Opponents build slowly from the back.",
            "priority": "high",
            "confidence": 77,
            "impact": "significant",
        },
        {
            "title": "Overload the Left",
            "description": "Invert the right winger.",
            "reasoning": "Their right back is on a yellow.",
            "priority": "medium",
            "confidence": 60,
            "impact": "moderate",
            "extra": "ignored",
        },
    ]
}


class TestParseAdvisoryResponse:
    def test_plain_json(self) -> None:
        result = parse_advisory_response(json.dumps(VALID_BODY))

        assert result.ok
        first, second = result.recommendations
        assert first.id == "ai-recommendation-0"
        assert second.id == "ai-recommendation-1"
        assert first.type == RecommendationType.TACTICAL
        assert first.priority == Priority.HIGH
        assert first.actions is not None
        action = first.actions[0]
        assert action.type == ActionType.ADJUST_TACTICS
        assert action.parameters["source"] == "ai"
        assert action.parameters["recommendation"]["title"] == "Press Higher"

    def test_fenced_json_keeps_last_block(self) -> None:
        draft = {"recommendations": []}
        response = (
            f"Draft:\n```json\n{json.dumps(draft)}\n```\n"
            f"Final:\n```json\n{json.dumps(VALID_BODY)}\n```"
        )
        result = parse_advisory_response(response)
        assert result.ok
        assert len(result.recommendations) == 2

    def test_garbled_response_is_a_failure(self) -> None:
        result = parse_advisory_response("I think you should press more {oops")
        assert not result.ok
        assert result.recommendations == []
        assert result.error is not None and "non-JSON" in result.error

    def test_schema_mismatch_is_a_failure(self) -> None:
        body = {"recommendations": [{**VALID_BODY["recommendations"][0], "priority": "urgent"}]}
        result = parse_advisory_response(json.dumps(body))
        assert not result.ok
        assert result.error is not None and "schema" in result.error

    def test_out_of_range_confidence_is_a_failure(self) -> None:
        body = {"recommendations": [{**VALID_BODY["recommendations"][0], "confidence": 140}]}
        assert not parse_advisory_response(json.dumps(body)).ok

    def test_deeply_nested_response_is_a_failure(self) -> None:
        depth = 100_000
        result = parse_advisory_response("{\"a\": " * depth + "1" + "}" * depth)
        assert not result.ok
        assert result.error == "response nested too deeply"

    def test_empty_response_is_a_failure(self) -> None:
        assert parse_advisory_response("   ").error == "empty response"


class TestBuildAdvisoryRequest:
    def test_prompt_only_carries_name_role_rating(self) -> None:
        player = Player(
            id="p1",
            name="Nine",
            preferred_role="ST",
            current_potential=81.6,
            attributes={"pace": 93},
            traits=frozenset({"secret-injury"}),
        )
        context = GameContext(game_phase=GamePhase.LATE, score=Score(home=0, away=1))
        request = build_advisory_request(Formation(id="f", name="4-3-3"), [player], context)

        assert request.schema == ADVISORY_SCHEMA
        assert '"name": "Nine"' in request.prompt
        assert '"rating": 82' in request.prompt
        assert "4-3-3" in request.prompt
        assert '"gamePhase": "late"' in request.prompt
        assert '"pace"' not in request.prompt
        assert "secret-injury" not in request.prompt

    def test_no_context_reads_standard_match(self) -> None:
        request = build_advisory_request(Formation(id="f"), [])
        assert "Standard match" in request.prompt


class TestGateways:
    def test_disabled_gateway_reports_unavailable(self) -> None:
        result = DisabledAdvisoryGateway().fetch(Formation(id="f"), [])
        assert not result.ok
        assert result.recommendations == []

    def test_anthropic_gateway_success(self) -> None:
        client = MagicMock()
        client.call.return_value = (json.dumps(VALID_BODY), "end_turn")
        gateway = AnthropicAdvisoryGateway(client=client)

        result = gateway.fetch(Formation(id="f"), [])

        assert result.ok
        assert [r.title for r in result.recommendations] == [
            "Press Higher",
            "Overload the Left",
        ]
        client.call.assert_called_once()

    def test_anthropic_gateway_swallows_service_errors(self) -> None:
        client = MagicMock()
        client.call.side_effect = ExternalServiceError("connection reset")
        result = AnthropicAdvisoryGateway(client=client).fetch(Formation(id="f"), [])

        assert not result.ok
        assert result.error == "connection reset"

    def test_missing_api_key_is_a_failure_not_an_exception(self) -> None:
        result = AnthropicAdvisoryGateway().fetch(Formation(id="f"), [])
        assert not result.ok
        assert result.error is not None and "ANTHROPIC_API_KEY" in result.error

    def test_saves_debug_content_when_enabled(self, tmp_path: Path) -> None:
        client = MagicMock()
        client.call.return_value = (json.dumps(VALID_BODY), "end_turn")
        configure_debug(True, tmp_path)
        try:
            AnthropicAdvisoryGateway(client=client).fetch(Formation(id="f"), [])
        finally:
            configure_debug(False, None)

        assert (tmp_path / "advisory_prompt.txt").exists()
        assert (tmp_path / "advisory_response.json").read_text() == json.dumps(VALID_BODY)
