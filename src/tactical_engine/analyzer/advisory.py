"""AI advisory gateway: one best-effort call to a text-generation service."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tactical_engine.analyzer.api import (
    AdvisorySettings,
    AnthropicClient,
    extract_last_json,
    save_debug_content,
)
from tactical_engine.analyzer.constants import ADVISORY_SYSTEM_PROMPT
from tactical_engine.analyzer.normalization import (
    clamp,
    player_label,
    player_slots,
    slot_coordinates,
)
from tactical_engine.types import (
    Action,
    ActionType,
    Formation,
    GameContext,
    Impact,
    Player,
    Priority,
    Recommendation,
    RecommendationType,
)

logger = logging.getLogger(__name__)


class AdvisoryItem(BaseModel):
    """One recommendation as returned by the model."""

    model_config = ConfigDict(extra="ignore")

    title: str = Field(min_length=1)
    description: str
    reasoning: str
    priority: Priority
    confidence: float = Field(ge=0, le=100)
    impact: Impact


class AdvisoryPayload(BaseModel):
    """Schema the model's JSON body must conform to."""

    recommendations: list[AdvisoryItem]


ADVISORY_SCHEMA: dict[str, Any] = AdvisoryPayload.model_json_schema()


@dataclass(slots=True)
class AdvisoryRequest:
    prompt: str
    schema: dict[str, Any]


@dataclass(slots=True)
class AdvisoryResult:
    """Success or failure of one advisory call; never raised, always returned."""

    recommendations: list[Recommendation] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, recommendations: list[Recommendation]) -> AdvisoryResult:
        return cls(recommendations=recommendations)

    @classmethod
    def failure(cls, error: str) -> AdvisoryResult:
        return cls(error=error)


class AdvisoryGateway(Protocol):
    def fetch(
        self,
        formation: Formation,
        players: Sequence[Player],
        context: GameContext | None = None,
    ) -> AdvisoryResult: ...


def summarize_players(players: Sequence[Player]) -> list[dict[str, Any]]:
    """Name, role and rating only; nothing else leaves the engine."""
    return [
        {
            "name": player_label(p.name, p.id),
            "role": p.preferred_role,
            "rating": round(clamp(p.current_potential)),
        }
        for p in players
    ]


def summarize_formation(formation: Formation, players: Sequence[Player]) -> dict[str, Any]:
    names = {p.id: player_label(p.name, p.id) for p in players}
    slots = []
    for slot in formation.slots:
        coords = slot_coordinates(slot)
        slots.append(
            {
                "role": slot.role,
                "x": round(coords[0], 1) if coords else None,
                "y": round(coords[1], 1) if coords else None,
                "player": names.get(slot.player_id or ""),
            }
        )
    return {"name": formation.name, "slots": slots}


def summarize_context(context: GameContext | None) -> dict[str, Any] | None:
    if context is None:
        return None
    data = context.model_dump(
        mode="json", by_alias=True, exclude_none=True, exclude={"opposition_formation"}
    )
    if context.opposition_formation is not None:
        data["oppositionFormation"] = context.opposition_formation.name
    return data


def build_advisory_request(
    formation: Formation,
    players: Sequence[Player],
    context: GameContext | None = None,
) -> AdvisoryRequest:
    """Serialize the analysis inputs into a prompt plus the response schema."""
    assigned = player_slots(formation)
    placed = [p for p in players if p.id in assigned]
    context_data = summarize_context(context)

    prompt = f"""Analyze this formation and provide specific coaching recommendations.

FORMATION:
{json.dumps(summarize_formation(formation, players), indent=2)}

PLAYERS ({len(players)} in squad, {len(placed)} placed):
{json.dumps(summarize_players(players), indent=2)}

GAME CONTEXT:
{json.dumps(context_data, indent=2) if context_data else "Standard match"}

Coordinates are field percentages: y=0 is our goal line, y=100 the opposition's;
x=0 is the left touchline, x=100 the right.

Provide 2-3 specific, actionable recommendations.
Return JSON matching this schema EXACTLY:
{json.dumps(ADVISORY_SCHEMA, indent=2)}

Rules:
1. priority is one of: low, medium, high, critical.
2. impact is one of: minor, moderate, significant, game-changing.
3. confidence is a number from 0 to 100.

Return ONLY valid JSON, no markdown fences."""

    return AdvisoryRequest(prompt=prompt, schema=ADVISORY_SCHEMA)


def to_recommendations(payload: AdvisoryPayload) -> list[Recommendation]:
    return [
        Recommendation(
            id=f"ai-recommendation-{index}",
            type=RecommendationType.TACTICAL,
            title=item.title,
            description=item.description,
            reasoning=item.reasoning,
            confidence=item.confidence,
            priority=item.priority,
            impact=item.impact,
            actions=[
                Action(
                    type=ActionType.ADJUST_TACTICS,
                    description=item.description,
                    parameters={
                        "source": "ai",
                        "recommendation": item.model_dump(mode="json"),
                    },
                )
            ],
        )
        for index, item in enumerate(payload.recommendations)
    ]


def parse_advisory_response(response: str) -> AdvisoryResult:
    """Validate a raw model response against the advisory schema."""
    if not response or not response.strip():
        return AdvisoryResult.failure("empty response")

    try:
        data = json.loads(extract_last_json(response))
        payload = AdvisoryPayload.model_validate(data)
    except json.JSONDecodeError as e:
        return AdvisoryResult.failure(f"non-JSON response: {e}")
    except RecursionError:
        return AdvisoryResult.failure("response nested too deeply")
    except ValidationError as e:
        return AdvisoryResult.failure(f"schema mismatch ({e.error_count()} errors)")

    return AdvisoryResult.success(to_recommendations(payload))


class DisabledAdvisoryGateway:
    """Gateway used when no text-generation service is configured."""

    def fetch(
        self,
        formation: Formation,
        players: Sequence[Player],
        context: GameContext | None = None,
    ) -> AdvisoryResult:
        return AdvisoryResult.failure("advisory disabled")


class AnthropicAdvisoryGateway:
    """Advisory gateway backed by the Anthropic Messages API."""

    def __init__(
        self,
        client: AnthropicClient | None = None,
        settings: AdvisorySettings | None = None,
    ) -> None:
        self.settings = settings or AdvisorySettings()
        self._client = client

    def _get_client(self) -> AnthropicClient:
        if self._client is None:
            self._client = AnthropicClient(self.settings)
        return self._client

    def fetch(
        self,
        formation: Formation,
        players: Sequence[Player],
        context: GameContext | None = None,
    ) -> AdvisoryResult:
        request = build_advisory_request(formation, players, context)
        save_debug_content("advisory_prompt.txt", request.prompt)

        try:
            response, _ = self._get_client().call(
                prompt=request.prompt, system=ADVISORY_SYSTEM_PROMPT
            )
        except Exception as e:  # network, timeout, auth or missing key
            logger.warning(f"Advisory call failed: {e}")
            return AdvisoryResult.failure(str(e) or type(e).__name__)

        save_debug_content("advisory_response.json", response)

        result = parse_advisory_response(response)
        if not result.ok:
            logger.warning(f"Advisory response discarded: {result.error}")
        else:
            logger.info(f"Advisory returned {len(result.recommendations)} recommendations")
        return result


__all__ = [
    "ADVISORY_SCHEMA",
    "AdvisoryGateway",
    "AdvisoryItem",
    "AdvisoryPayload",
    "AdvisoryRequest",
    "AdvisoryResult",
    "AnthropicAdvisoryGateway",
    "DisabledAdvisoryGateway",
    "build_advisory_request",
    "parse_advisory_response",
    "summarize_players",
    "to_recommendations",
]
