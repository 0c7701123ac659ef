"""Orchestrator for the tactical analysis engine."""

import asyncio
import logging
import os
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TypeVar

from tactical_engine.analyzer.advisory import (
    AdvisoryGateway,
    AdvisoryResult,
    AnthropicAdvisoryGateway,
    DisabledAdvisoryGateway,
)
from tactical_engine.analyzer.aggregator import (
    RecommendationSource,
    aggregate_recommendations,
)
from tactical_engine.analyzer.api import AdvisorySettings, configure_debug
from tactical_engine.analyzer.history import RecommendationHistory
from tactical_engine.analyzer.stages import (
    analyze_formation_structure,
    analyze_player_positioning,
    calculate_chemistry,
    chemistry_recommendations,
    compute_formation_metrics,
    coverage_recommendations,
    generate_heat_map,
    generate_tactical_advice,
    score_player_fits,
)
from tactical_engine.analyzer.validation import (
    coerce_context,
    coerce_formation,
    coerce_players,
    coerce_relations,
    ensure_contract,
    validate_formation,
)
from tactical_engine.types import (
    AnalysisResult,
    ChemistryReport,
    Formation,
    FormationMetrics,
    GameContext,
    HeatMap,
    Player,
    PlayerFit,
    Recommendation,
    TeamRelations,
)

T = TypeVar("T")


class AnalysisSequencer:
    """Hands out increasing pass numbers; only the newest pass is current."""

    def __init__(self) -> None:
        self._latest = 0

    @property
    def latest(self) -> int:
        return self._latest

    def begin(self) -> int:
        self._latest += 1
        return self._latest

    def is_current(self, sequence: int) -> bool:
        return sequence == self._latest


@dataclass(slots=True)
class HeuristicPass:
    """Intermediate products of the deterministic stages for one pass."""

    sources: list[RecommendationSource] = field(default_factory=list)
    metrics: FormationMetrics | None = None
    player_fits: list[PlayerFit] = field(default_factory=list)
    chemistry: ChemistryReport = field(default_factory=ChemistryReport)
    heat_map: HeatMap = field(default_factory=HeatMap)


def default_gateway(settings: AdvisorySettings | None = None) -> AdvisoryGateway:
    """Use the Anthropic gateway only when an API key is configured."""
    if os.environ.get("ANTHROPIC_API_KEY"):
        return AnthropicAdvisoryGateway(settings=settings)
    return DisabledAdvisoryGateway()


class TacticalEngine:
    """Runs every analysis stage over a formation snapshot and ranks the output."""

    def __init__(
        self,
        gateway: AdvisoryGateway | None = None,
        history: RecommendationHistory | None = None,
        relations: TeamRelations | Mapping[str, Any] | None = None,
        settings: AdvisorySettings | None = None,
        verbose: bool = False,
        save_prompts: bool = False,
        prompts_dir: Path | None = None,
    ):
        self._setup_logging(verbose)
        self.logger = logging.getLogger(__name__)
        self.settings = settings or AdvisorySettings()
        self.gateway = gateway if gateway is not None else default_gateway(self.settings)
        self.history = history if history is not None else RecommendationHistory()
        self.relations = coerce_relations(relations)
        self.sequencer = AnalysisSequencer()

        if save_prompts and prompts_dir is None:
            prompts_dir = Path("advisory_prompts")
        configure_debug(save_prompts, prompts_dir)

    def _setup_logging(self, verbose: bool) -> None:
        """Setup logging configuration."""
        level = logging.DEBUG if verbose else logging.INFO
        logging.basicConfig(
            level=level,
            format="%(asctime)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    # ------------------------------------------------------------------
    # Stage plumbing
    # ------------------------------------------------------------------

    def _guard(
        self, name: str, fn: Callable[..., T], *args: Any, default: T
    ) -> tuple[T, bool]:
        """Run one stage; a crash is logged and replaced by ``default``."""
        try:
            return fn(*args), False
        except Exception:
            self.logger.exception(f"Stage '{name}' failed")
            return default, True

    def _run_stage(
        self, name: str, fn: Callable[..., list[Recommendation]], *args: Any
    ) -> RecommendationSource:
        recommendations, failed = self._guard(name, fn, *args, default=[])
        return RecommendationSource(name, recommendations, failed)

    def _prepare(
        self,
        formation: Formation | Mapping[str, Any],
        players: Iterable[Player | Mapping[str, Any]],
        context: GameContext | Mapping[str, Any] | None,
    ) -> tuple[Formation, list[Player], GameContext | None]:
        formation_ = coerce_formation(formation)
        players_ = coerce_players(players)
        context_ = coerce_context(context)

        for warning in validate_formation(formation_):
            self.logger.warning(warning)
        return formation_, players_, context_

    def _heuristic_pass(
        self,
        formation: Formation,
        players: list[Player],
        context: GameContext | None,
        relations: TeamRelations | None,
    ) -> HeuristicPass:
        metrics, _ = self._guard(
            "metrics", compute_formation_metrics, formation, default=None
        )
        fits, _ = self._guard(
            "player-fit", score_player_fits, formation, players, default=[]
        )
        report, report_failed = self._guard(
            "chemistry",
            calculate_chemistry,
            players,
            formation,
            relations,
            default=ChemistryReport(),
        )
        heat_map, heat_failed = self._guard(
            "heat-zones", generate_heat_map, formation, players, default=HeatMap()
        )

        sources = [
            self._run_stage("formation", analyze_formation_structure, formation),
            self._run_stage("positioning", analyze_player_positioning, formation, players),
            (
                RecommendationSource("chemistry", failed=True)
                if report_failed
                else self._run_stage(
                    "chemistry", chemistry_recommendations, report, players
                )
            ),
            (
                RecommendationSource("coverage", failed=True)
                if heat_failed
                else self._run_stage("coverage", coverage_recommendations, heat_map)
            ),
            self._run_stage("context", generate_tactical_advice, context),
        ]

        player_fits = [
            fit.model_copy(update={"chemistry": report.individual.get(fit.player_id)})
            for fit in fits
        ]
        return HeuristicPass(sources, metrics, player_fits, report, heat_map)

    def _fetch_advisory(
        self,
        formation: Formation,
        players: list[Player],
        context: GameContext | None,
    ) -> AdvisoryResult:
        try:
            return self.gateway.fetch(formation, players, context)
        except Exception as e:
            self.logger.warning(f"Advisory gateway raised: {e}")
            return AdvisoryResult.failure(str(e) or type(e).__name__)

    def _assemble(
        self, sequence: int, heuristics: HeuristicPass, advisory: AdvisoryResult
    ) -> AnalysisResult:
        recommendations = aggregate_recommendations(heuristics.sources, advisory)
        self.logger.info(
            f"Pass {sequence}: {len(recommendations)} recommendations "
            f"(advisory {'used' if advisory.ok else 'unavailable'})"
        )
        return AnalysisResult(
            recommendations=recommendations,
            heat_zones=heuristics.heat_map.zones,
            chemistry=heuristics.chemistry.pairs,
            coverage=heuristics.heat_map.coverage,
            metrics=heuristics.metrics,
            player_fits=heuristics.player_fits,
            chemistry_report=heuristics.chemistry,
            sequence=sequence,
            advisory_used=advisory.ok,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def analyze(
        self,
        formation: Formation | Mapping[str, Any],
        players: Iterable[Player | Mapping[str, Any]],
        context: GameContext | Mapping[str, Any] | None = None,
        relations: TeamRelations | Mapping[str, Any] | None = None,
    ) -> AnalysisResult:
        """Analyse a formation snapshot and return ranked recommendations.

        Raises:
            ContractViolation: ``formation`` or ``players`` is missing or of
                the wrong kind. Malformed entries inside them are skipped.
        """
        ensure_contract(formation, players)
        sequence = self.sequencer.begin()
        formation_, players_, context_ = self._prepare(formation, players, context)
        team_relations = coerce_relations(relations) if relations is not None else self.relations

        heuristics = self._heuristic_pass(formation_, players_, context_, team_relations)
        advisory = self._fetch_advisory(formation_, players_, context_)
        return self._assemble(sequence, heuristics, advisory)

    async def analyze_async(
        self,
        formation: Formation | Mapping[str, Any],
        players: Iterable[Player | Mapping[str, Any]],
        context: GameContext | Mapping[str, Any] | None = None,
        relations: TeamRelations | Mapping[str, Any] | None = None,
    ) -> AnalysisResult | None:
        """Like ``analyze`` but awaits the advisory call off the event loop.

        Returns None when a newer pass started before this one finished.
        """
        ensure_contract(formation, players)
        sequence = self.sequencer.begin()
        formation_, players_, context_ = self._prepare(formation, players, context)
        team_relations = coerce_relations(relations) if relations is not None else self.relations

        heuristics = self._heuristic_pass(formation_, players_, context_, team_relations)
        try:
            advisory = await asyncio.wait_for(
                asyncio.to_thread(self._fetch_advisory, formation_, players_, context_),
                timeout=self.settings.timeout_seconds,
            )
        except TimeoutError:
            self.logger.warning(
                f"Advisory timed out after {self.settings.timeout_seconds}s"
            )
            advisory = AdvisoryResult.failure("advisory timed out")

        if not self.sequencer.is_current(sequence):
            self.logger.info(
                f"Pass {sequence} superseded by pass {self.sequencer.latest}; discarding"
            )
            return None
        return self._assemble(sequence, heuristics, advisory)

    def store_recommendation(
        self, recommendation: Recommendation, sequence: int | None = None
    ) -> Recommendation:
        """Record an applied recommendation in the coaching history."""
        return self.history.store(recommendation, sequence)

    def get_coaching_history(self) -> list[Recommendation]:
        return self.history.entries()


__all__ = [
    "AnalysisSequencer",
    "HeuristicPass",
    "TacticalEngine",
    "default_gateway",
]
