"""Input validation for the tactical analyzer."""

from tactical_engine.analyzer.validation.inputs import (
    ContractViolation,
    coerce_context,
    coerce_formation,
    coerce_players,
    coerce_relations,
    ensure_contract,
    validate_formation,
)

__all__ = [
    "ContractViolation",
    "coerce_context",
    "coerce_formation",
    "coerce_players",
    "coerce_relations",
    "ensure_contract",
    "validate_formation",
]
