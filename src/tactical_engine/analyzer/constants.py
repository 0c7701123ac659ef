"""Thresholds, weights and lookup tables for the tactical analyzer."""

from tactical_engine.types import (
    Archetype,
    Condition,
    RelationshipTag,
)

# Field is expressed in percentages on both axes
FIELD_MIN = 0.0
FIELD_MAX = 100.0
FIELD_CENTER_X = 50.0

# -----------------------------------------------------------------------------
# Formation geometry
# -----------------------------------------------------------------------------
LATERAL_IMBALANCE_THRESHOLD = 15.0  # |avgX - 50|
VERTICAL_SPREAD_MAX = 80.0  # spreadY above this is too stretched
HORIZONTAL_SPREAD_MIN = 60.0  # spreadX below this is too narrow
TARGET_VERTICAL_SPREAD = 70.0
TARGET_HORIZONTAL_SPREAD = 75.0

LATERAL_BALANCE_CONFIDENCE = 85.0
COMPACTNESS_CONFIDENCE = 78.0
WIDTH_CONFIDENCE = 82.0

# Attacking/defensive share for FormationMetrics
ATTACKING_LINE_Y = 60.0
DEFENSIVE_LINE_Y = 40.0

# -----------------------------------------------------------------------------
# Player-position fit
# -----------------------------------------------------------------------------
DEFENDER_ZONE_MAX_Y = 25.0
ATTACKER_ZONE_MIN_Y = 75.0
LEFT_WING_MAX_X = 25.0
RIGHT_WING_MIN_X = 75.0

FULL_MATCH_RATIO = 100.0
PARTIAL_MATCH_RATIO = 60.0

SUITABILITY_WARNING_THRESHOLD = 70.0
SUITABILITY_CRITICAL_THRESHOLD = 50.0
MAX_ALTERNATIVES = 2

DEFENSIVE_HALF_MAX_Y = 50.0
MIDFIELD_ALTERNATIVE_BONUS = 10.0
SUPPORT_STRIKER_ALTERNATIVE_BONUS = 5.0
MIDFIELD_ALTERNATIVE_REASON = "Player has good passing ability for midfield role"
SUPPORT_STRIKER_ALTERNATIVE_REASON = (
    "Player could provide good support in advanced position"
)
DEFAULT_FIT_REASONING = "Player attributes don't match position requirements"

# Preferred role -> archetypes the player is comfortable in
ROLE_ARCHETYPES: dict[str, frozenset[Archetype]] = {
    "GK": frozenset({Archetype.GOALKEEPER, Archetype.DEFENDER}),
    "CB": frozenset({Archetype.DEFENDER}),
    "LB": frozenset({Archetype.LEFT_WING, Archetype.DEFENDER}),
    "RB": frozenset({Archetype.RIGHT_WING, Archetype.DEFENDER}),
    "LWB": frozenset({Archetype.LEFT_WING, Archetype.DEFENDER}),
    "RWB": frozenset({Archetype.RIGHT_WING, Archetype.DEFENDER}),
    "DM": frozenset({Archetype.MIDFIELDER, Archetype.DEFENDER}),
    "CM": frozenset({Archetype.MIDFIELDER}),
    "LM": frozenset({Archetype.LEFT_WING, Archetype.MIDFIELDER}),
    "RM": frozenset({Archetype.RIGHT_WING, Archetype.MIDFIELDER}),
    "AM": frozenset({Archetype.MIDFIELDER, Archetype.ATTACKER}),
    "LW": frozenset({Archetype.LEFT_WING, Archetype.ATTACKER}),
    "RW": frozenset({Archetype.RIGHT_WING, Archetype.ATTACKER}),
    "SS": frozenset({Archetype.ATTACKER, Archetype.MIDFIELDER}),
    "ST": frozenset({Archetype.ATTACKER}),
    "CF": frozenset({Archetype.ATTACKER}),
}
DEFAULT_ROLE_ARCHETYPES = frozenset({Archetype.MIDFIELDER})

# Common spellings mapped onto ROLE_ARCHETYPES keys
ROLE_ALIASES: dict[str, str] = {
    "GKP": "GK",
    "G": "GK",
    "DEF": "CB",
    "D": "CB",
    "CDM": "DM",
    "MID": "CM",
    "M": "CM",
    "CAM": "AM",
    "FWD": "ST",
    "F": "ST",
}

# -----------------------------------------------------------------------------
# Chemistry
# -----------------------------------------------------------------------------
CHEMISTRY_BASE = 40.0
CHEMISTRY_ROLE_WEIGHT = 30.0
CHEMISTRY_PROXIMITY_WEIGHT = 15.0
CHEMISTRY_PROXIMITY_RADIUS = 50.0
CHEMISTRY_MENTORING_BONUS = 10.0
CHEMISTRY_LINK_COUNT = 5
CHEMISTRY_WEAK_LINK_THRESHOLD = 40.0
CHEMISTRY_CRITICAL_LINK_THRESHOLD = 25.0
CHEMISTRY_RECOMMENDATION_CONFIDENCE = 70.0

RELATIONSHIP_MODIFIERS: dict[RelationshipTag, float] = {
    RelationshipTag.FRIENDSHIP: 15.0,
    RelationshipTag.RIVALRY: -20.0,
}

CONDITION_MODIFIERS: dict[Condition, float] = {
    Condition.EXCELLENT: 5.0,
    Condition.GOOD: 2.0,
    Condition.AVERAGE: 0.0,
    Condition.OKAY: -1.0,
    Condition.POOR: -5.0,
    Condition.VERY_POOR: -8.0,
    Condition.TERRIBLE: -10.0,
}

# Role -> coarse group used by the synergy table
ROLE_GROUPS: dict[str, str] = {
    "GK": "GK",
    "CB": "DF",
    "LB": "DF",
    "RB": "DF",
    "LWB": "DF",
    "RWB": "DF",
    "DM": "MF",
    "CM": "MF",
    "LM": "MF",
    "RM": "MF",
    "AM": "MF",
    "LW": "FW",
    "RW": "FW",
    "SS": "FW",
    "ST": "FW",
    "CF": "FW",
}

ROLE_SYNERGY: dict[str, dict[str, float]] = {
    "GK": {"GK": 0.5, "DF": 0.9, "MF": 0.6, "FW": 0.3},
    "DF": {"GK": 0.9, "DF": 0.8, "MF": 0.7, "FW": 0.5},
    "MF": {"GK": 0.6, "DF": 0.7, "MF": 0.9, "FW": 0.8},
    "FW": {"GK": 0.3, "DF": 0.5, "MF": 0.8, "FW": 0.7},
}
DEFAULT_ROLE_SYNERGY = 0.5

# -----------------------------------------------------------------------------
# Heat zones
# -----------------------------------------------------------------------------
ATTACK_THIRD_MIN_Y = 66.0
DEFENSE_THIRD_MAX_Y = 33.0

POSITION_IMPORTANCE: dict[str, float] = {
    "GK": 0.9,
    "CB": 0.9,
    "DM": 0.9,
    "CM": 0.9,
    "AM": 0.9,
    "SS": 0.85,
    "ST": 0.9,
    "CF": 0.9,
    "LB": 0.7,
    "RB": 0.7,
    "LWB": 0.7,
    "RWB": 0.7,
    "LM": 0.7,
    "RM": 0.7,
    "LW": 0.7,
    "RW": 0.7,
}
DEFAULT_POSITION_IMPORTANCE = 0.8

COVERAGE_WARNING_THRESHOLD = 60.0
COVERAGE_CONFIDENCE = 65.0
EMPTY_THIRD_CONFIDENCE = 72.0

# -----------------------------------------------------------------------------
# Context rules
# -----------------------------------------------------------------------------
ATTACKING_URGENCY_CONFIDENCE = 90.0
DEFENSIVE_STABILITY_CONFIDENCE = 85.0

# -----------------------------------------------------------------------------
# Aggregation / history
# -----------------------------------------------------------------------------
MAX_RECOMMENDATIONS = 20
HISTORY_CAPACITY = 50

# -----------------------------------------------------------------------------
# AI advisory
# -----------------------------------------------------------------------------
DEFAULT_ADVISORY_MODEL = "claude-opus-4-5-20251101"
ADVISORY_MAX_TOKENS = 1500
ADVISORY_TIMEOUT_SECONDS = 20.0
ADVISORY_MAX_ATTEMPTS = 1

ADVISORY_SYSTEM_PROMPT = """You are an expert football tactical analyst.
Use only the formation, player and match data provided. Return valid JSON only."""

__all__ = [
    "ADVISORY_MAX_ATTEMPTS",
    "ADVISORY_MAX_TOKENS",
    "ADVISORY_SYSTEM_PROMPT",
    "ADVISORY_TIMEOUT_SECONDS",
    "ATTACKER_ZONE_MIN_Y",
    "ATTACKING_LINE_Y",
    "ATTACKING_URGENCY_CONFIDENCE",
    "ATTACK_THIRD_MIN_Y",
    "CHEMISTRY_BASE",
    "CHEMISTRY_CRITICAL_LINK_THRESHOLD",
    "CHEMISTRY_LINK_COUNT",
    "CHEMISTRY_MENTORING_BONUS",
    "CHEMISTRY_PROXIMITY_RADIUS",
    "CHEMISTRY_PROXIMITY_WEIGHT",
    "CHEMISTRY_RECOMMENDATION_CONFIDENCE",
    "CHEMISTRY_ROLE_WEIGHT",
    "CHEMISTRY_WEAK_LINK_THRESHOLD",
    "COMPACTNESS_CONFIDENCE",
    "CONDITION_MODIFIERS",
    "COVERAGE_CONFIDENCE",
    "COVERAGE_WARNING_THRESHOLD",
    "DEFAULT_ADVISORY_MODEL",
    "DEFAULT_FIT_REASONING",
    "DEFAULT_POSITION_IMPORTANCE",
    "DEFAULT_ROLE_ARCHETYPES",
    "DEFAULT_ROLE_SYNERGY",
    "DEFENDER_ZONE_MAX_Y",
    "DEFENSE_THIRD_MAX_Y",
    "DEFENSIVE_HALF_MAX_Y",
    "DEFENSIVE_LINE_Y",
    "DEFENSIVE_STABILITY_CONFIDENCE",
    "EMPTY_THIRD_CONFIDENCE",
    "FIELD_CENTER_X",
    "FIELD_MAX",
    "FIELD_MIN",
    "FULL_MATCH_RATIO",
    "HISTORY_CAPACITY",
    "HORIZONTAL_SPREAD_MIN",
    "LATERAL_BALANCE_CONFIDENCE",
    "LATERAL_IMBALANCE_THRESHOLD",
    "LEFT_WING_MAX_X",
    "MAX_ALTERNATIVES",
    "MAX_RECOMMENDATIONS",
    "MIDFIELD_ALTERNATIVE_BONUS",
    "MIDFIELD_ALTERNATIVE_REASON",
    "PARTIAL_MATCH_RATIO",
    "POSITION_IMPORTANCE",
    "RELATIONSHIP_MODIFIERS",
    "RIGHT_WING_MIN_X",
    "ROLE_ALIASES",
    "ROLE_ARCHETYPES",
    "ROLE_GROUPS",
    "ROLE_SYNERGY",
    "SUITABILITY_CRITICAL_THRESHOLD",
    "SUITABILITY_WARNING_THRESHOLD",
    "SUPPORT_STRIKER_ALTERNATIVE_BONUS",
    "SUPPORT_STRIKER_ALTERNATIVE_REASON",
    "TARGET_HORIZONTAL_SPREAD",
    "TARGET_VERTICAL_SPREAD",
    "VERTICAL_SPREAD_MAX",
    "WIDTH_CONFIDENCE",
]
