"""Stage modules for the tactical analyzer."""

from tactical_engine.analyzer.stages.chemistry import (
    calculate_chemistry,
    chemistry_recommendations,
)
from tactical_engine.analyzer.stages.context import generate_tactical_advice
from tactical_engine.analyzer.stages.fit import (
    analyze_player_positioning,
    score_player_fits,
)
from tactical_engine.analyzer.stages.geometry import (
    analyze_formation_structure,
    compute_formation_metrics,
)
from tactical_engine.analyzer.stages.heat_zones import (
    coverage_recommendations,
    generate_heat_map,
)

__all__ = [
    "analyze_formation_structure",
    "analyze_player_positioning",
    "calculate_chemistry",
    "chemistry_recommendations",
    "compute_formation_metrics",
    "coverage_recommendations",
    "generate_heat_map",
    "generate_tactical_advice",
    "score_player_fits",
]
