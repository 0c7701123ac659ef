"""Tactical analyzer module.

This module runs deterministic formation, fit, chemistry and coverage
heuristics, optionally enriched by an AI advisory call, and ranks the
resulting coaching recommendations.
"""

from tactical_engine.analyzer.advisory import (
    AdvisoryResult,
    AnthropicAdvisoryGateway,
    DisabledAdvisoryGateway,
)
from tactical_engine.analyzer.api import AdvisorySettings, ExternalServiceError
from tactical_engine.analyzer.history import RecommendationHistory
from tactical_engine.analyzer.orchestrator import AnalysisSequencer, TacticalEngine
from tactical_engine.analyzer.validation import ContractViolation

__all__ = [
    "AdvisoryResult",
    "AdvisorySettings",
    "AnalysisSequencer",
    "AnthropicAdvisoryGateway",
    "ContractViolation",
    "DisabledAdvisoryGateway",
    "ExternalServiceError",
    "RecommendationHistory",
    "TacticalEngine",
]
