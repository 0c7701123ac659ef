"""Shared type definitions for the tactical analysis engine."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

# =============================================================================
# Closed vocabularies
# =============================================================================


class RecommendationType(StrEnum):
    FORMATION = "formation"
    PLAYER = "player"
    TACTICAL = "tactical"
    STRATEGY = "strategy"
    SUBSTITUTION = "substitution"


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Ordering weight: critical > high > medium > low."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    Priority.CRITICAL: 4,
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


class Impact(StrEnum):
    MINOR = "minor"
    MODERATE = "moderate"
    SIGNIFICANT = "significant"
    GAME_CHANGING = "game-changing"


class ActionType(StrEnum):
    MOVE_PLAYER = "move_player"
    CHANGE_FORMATION = "change_formation"
    ADJUST_TACTICS = "adjust_tactics"
    SUBSTITUTE_PLAYER = "substitute_player"


class GamePhase(StrEnum):
    EARLY = "early"
    MID = "mid"
    LATE = "late"
    EXTRA_TIME = "extra-time"


class GameState(StrEnum):
    WINNING = "winning"
    LOSING = "losing"
    DRAWING = "drawing"
    PRESSURE = "pressure"
    COUNTER_ATTACK = "counter-attack"


class Condition(StrEnum):
    """Shared scale for player form and morale."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    AVERAGE = "Average"
    OKAY = "Okay"
    POOR = "Poor"
    VERY_POOR = "Very Poor"
    TERRIBLE = "Terrible"

    @classmethod
    def parse(cls, value: Any) -> Condition:
        """Case- and separator-insensitive lookup; unknown values read as Average."""
        if isinstance(value, Condition):
            return value
        if isinstance(value, str):
            key = " ".join(value.replace("_", " ").replace("-", " ").split()).casefold()
            for member in cls:
                if member.value.casefold() == key:
                    return member
        logger.warning("Unknown condition %r; treating it as Average", value)
        return cls.AVERAGE


class RelationshipTag(StrEnum):
    FRIENDSHIP = "friendship"
    RIVALRY = "rivalry"


class Archetype(StrEnum):
    """Positional archetype derived from a slot's field coordinates."""

    GOALKEEPER = "Goalkeeper"
    DEFENDER = "Defender"
    MIDFIELDER = "Midfielder"
    ATTACKER = "Attacker"
    LEFT_WING = "Left Wing"
    RIGHT_WING = "Right Wing"


class ZoneType(StrEnum):
    ATTACK = "attack"
    MIDFIELD = "midfield"
    DEFENSE = "defense"


# =============================================================================
# Input snapshots
# =============================================================================


class EngineModel(BaseModel):
    """Base model accepting both snake_case and camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class FieldPosition(EngineModel):
    """Coordinate in field-percentage space (0-100 on both axes)."""

    x: float
    y: float


class Slot(EngineModel):
    """A named position in a formation with an optional assigned player."""

    id: str
    role: str = ""
    position: FieldPosition | None = None
    player_id: str | None = None


class Formation(EngineModel):
    id: str
    name: str = ""
    slots: list[Slot] = Field(default_factory=list)


class Player(EngineModel):
    id: str
    name: str | None = None
    attributes: dict[str, float] = Field(default_factory=dict)
    preferred_role: str = "CM"
    current_potential: float = 70.0  # clamped to 0-100 wherever it is used
    form: Condition = Condition.AVERAGE
    morale: Condition = Condition.AVERAGE
    traits: frozenset[str] = frozenset()

    @field_validator("form", "morale", mode="before")
    @classmethod
    def _lenient_condition(cls, value: Any) -> Condition:
        return Condition.parse(value)


class Score(EngineModel):
    home: int = 0
    away: int = 0


class GameContext(EngineModel):
    """Match situation; the analysed team is always the home side."""

    game_phase: GamePhase | None = None
    score: Score | None = None
    game_state: GameState | None = None
    opposition_formation: Formation | None = None


class MentoringGroup(EngineModel):
    mentor_id: str
    mentee_ids: list[str] = Field(default_factory=list)

    @property
    def members(self) -> set[str]:
        return {self.mentor_id, *self.mentee_ids}


class TeamRelations(EngineModel):
    """Directed relationship table plus mentoring groups for one squad."""

    relationships: dict[str, dict[str, RelationshipTag]] = Field(default_factory=dict)
    mentoring_groups: list[MentoringGroup] = Field(default_factory=list)


# =============================================================================
# Outputs
# =============================================================================


class Action(EngineModel):
    type: ActionType
    description: str
    parameters: dict[str, Any] = Field(default_factory=dict)


class Recommendation(EngineModel):
    """A single coaching recommendation."""

    id: str
    type: RecommendationType
    title: str
    description: str
    reasoning: str
    confidence: float = Field(ge=0, le=100)
    priority: Priority
    impact: Impact
    actions: list[Action] | None = None


class AlternativePosition(EngineModel):
    position: str
    suitability: float
    reason: str


class PlayerFit(EngineModel):
    """Suitability of one player in their assigned slot."""

    player_id: str
    archetype: Archetype
    match_ratio: float
    suitability: float
    alternatives: list[AlternativePosition] = Field(default_factory=list)
    positioning: float
    effectiveness: float
    chemistry: float | None = None


class FormationMetrics(EngineModel):
    balance: float
    width: float
    depth: float
    compactness: float
    attacking: float
    defensive: float


class ChemistryPair(EngineModel):
    player_a: str
    player_b: str
    score: float = Field(ge=0, le=100)
    relationship_tag: RelationshipTag | None = None


class ChemistryReport(EngineModel):
    pairs: list[ChemistryPair] = Field(default_factory=list)
    overall: float = 0.0
    individual: dict[str, float] = Field(default_factory=dict)
    top_links: list[ChemistryPair] = Field(default_factory=list)
    bottom_links: list[ChemistryPair] = Field(default_factory=list)


class HeatZone(EngineModel):
    x: float = Field(ge=0, le=100)
    y: float = Field(ge=0, le=100)
    intensity: float = Field(ge=0, le=1)
    type: ZoneType
    player_id: str | None = None


class HeatMap(EngineModel):
    zones: list[HeatZone] = Field(default_factory=list)
    coverage: float = 0.0


class AnalysisResult(EngineModel):
    """Everything one analysis pass hands back to the hosting UI."""

    recommendations: list[Recommendation] = Field(default_factory=list)
    heat_zones: list[HeatZone] = Field(default_factory=list)
    chemistry: list[ChemistryPair] = Field(default_factory=list)
    coverage: float = 0.0
    metrics: FormationMetrics | None = None
    player_fits: list[PlayerFit] = Field(default_factory=list)
    chemistry_report: ChemistryReport = Field(default_factory=ChemistryReport)
    sequence: int = 0
    advisory_used: bool = False


__all__ = [
    "Action",
    "ActionType",
    "AlternativePosition",
    "AnalysisResult",
    "Archetype",
    "ChemistryPair",
    "ChemistryReport",
    "Condition",
    "EngineModel",
    "FieldPosition",
    "Formation",
    "FormationMetrics",
    "GameContext",
    "GamePhase",
    "GameState",
    "HeatMap",
    "HeatZone",
    "Impact",
    "MentoringGroup",
    "Player",
    "PlayerFit",
    "Priority",
    "Recommendation",
    "RecommendationType",
    "RelationshipTag",
    "Score",
    "Slot",
    "TeamRelations",
    "ZoneType",
]
