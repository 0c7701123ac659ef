"""Tactical analysis and recommendation engine for football line-ups."""

from tactical_engine.analyzer import (
    AdvisorySettings,
    AnthropicAdvisoryGateway,
    ContractViolation,
    DisabledAdvisoryGateway,
    TacticalEngine,
)

__all__ = [
    "AdvisorySettings",
    "AnthropicAdvisoryGateway",
    "ContractViolation",
    "DisabledAdvisoryGateway",
    "TacticalEngine",
]
