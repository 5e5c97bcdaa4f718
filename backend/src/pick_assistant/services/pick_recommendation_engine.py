"""Pick recommendation engine combining all scoring components."""

import asyncio
import logging
import math
from typing import Optional

from pick_assistant.errors import InputError, ProviderError
from pick_assistant.models.draft import DraftState, Role
from pick_assistant.models.provider import StatsSource
from pick_assistant.models.recommendations import RecommendationScore, ScoreBreakdown, Weights
from pick_assistant.models.stats import Champion, EntityStats, Tier
from pick_assistant.services.catalog_service import CatalogService
from pick_assistant.services.scorers import MatchupCalculator, MetaScorer
from pick_assistant.services.synergy_service import SynergyService

logger = logging.getLogger(__name__)


class RecommendationEngine:
    """Generates pick recommendations using weighted four-factor scoring.

    Candidates are every catalog champion not already picked or banned. Each
    is scored in the requested role; candidates without enough data are
    dropped rather than scored as zero.
    """

    WEIGHT_KEYS = ("win_rate", "popularity", "counter", "synergy")
    LIMITED_DATA_THRESHOLD = 50

    def __init__(
        self,
        stats_source: StatsSource,
        catalog: CatalogService,
        default_weights: Optional[Weights] = None,
        min_sample_size: int = 30,
        min_matchup_sample: int = 10,
        min_synergy_sample: int = 5,
        batch_size: int = 10,
        enable_counter: bool = True,
        enable_synergy: bool = True,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.stats_source = stats_source
        self.catalog = catalog
        self.default_weights = default_weights or Weights()
        self.min_sample_size = min_sample_size
        self.batch_size = batch_size
        self.meta_scorer = MetaScorer()
        self.matchup_calculator = MatchupCalculator(stats_source, min_matchup_sample, enable_counter)
        self.synergy_service = SynergyService(stats_source, min_synergy_sample, enable_synergy)

    def normalize_weights(self, override: Optional[dict[str, float]] = None) -> Weights:
        """Merge a partial override onto the defaults and rescale to sum to 1.0.

        Raises:
            InputError: unknown key, non-finite or negative value, or non-positive sum.
        """
        merged = self.default_weights.as_dict()
        for key, value in (override or {}).items():
            if key not in merged:
                raise InputError(f"Unknown weight '{key}'")
            if value is None:
                continue
            try:
                merged[key] = float(value)
            except (TypeError, ValueError) as e:
                raise InputError(f"Weight '{key}' must be a number") from e

        if not all(math.isfinite(v) for v in merged.values()):
            raise InputError("Weights must be finite")
        if any(v < 0 for v in merged.values()):
            raise InputError("Weights must be non-negative")
        total = sum(merged.values())
        if total <= 0:
            raise InputError("Weights must have a positive sum")

        return Weights(**{k: v / total for k, v in merged.items()})

    async def get_recommendations(
        self,
        draft_state: DraftState,
        weights: Optional[dict[str, float]] = None,
        top_n: int = 5,
    ) -> list[RecommendationScore]:
        """Rank available champions for the player's role.

        Args:
            draft_state: Current draft; my_role must be set
            weights: Partial weight override merged onto the defaults
            top_n: Maximum recommendations to return

        Returns:
            Recommendations ordered by total score (highest first), ties by id

        Raises:
            InputError: my_role missing, bad weights or top_n
            CatalogUnavailableError: the champion list could not be loaded
        """
        if draft_state.my_role is None:
            raise InputError("my_role is required to generate recommendations")
        if top_n < 1:
            raise InputError("top_n must be at least 1")
        normalized = self.normalize_weights(weights)

        catalog = await self.catalog.get_catalog()
        unavailable = draft_state.unavailable_ids
        candidates = [catalog[cid] for cid in sorted(catalog) if cid not in unavailable]
        logger.info(
            f"Scoring {len(candidates)} candidates for {draft_state.my_role.value} "
            f"({len(unavailable)} unavailable)"
        )

        scored: list[RecommendationScore] = []
        for start in range(0, len(candidates), self.batch_size):
            batch = candidates[start : start + self.batch_size]
            results = await asyncio.gather(
                *(
                    self.calculate_entity_score(champ, draft_state.my_role, draft_state, normalized)
                    for champ in batch
                )
            )
            scored.extend(r for r in results if r is not None)

        scored.sort(key=lambda r: (-r.total_score, r.entity_id))
        return scored[:top_n]

    async def calculate_entity_score(
        self,
        champion: Champion,
        role: Role,
        draft_state: DraftState,
        weights: Weights,
    ) -> Optional[RecommendationScore]:
        """Score one candidate; None if it lacks data or its fetches failed."""
        try:
            stats = await self.stats_source.get_entity_stats(champion.id, role)
            if stats is None or stats.sample_size < self.min_sample_size:
                return None

            counter_score, synergy_score = await asyncio.gather(
                self.matchup_calculator.get_counter_score(
                    champion.id, role, draft_state.opponent_pick_ids
                ),
                self.synergy_service.get_synergy_score(champion.id, role, draft_state.own_pick_ids),
            )
        except ProviderError as e:
            logger.warning(f"Dropping champion {champion.id} ({champion.name}): {e}")
            return None

        breakdown = ScoreBreakdown(
            win_rate_score=self.meta_scorer.get_win_rate_score(stats),
            popularity_score=self.meta_scorer.get_popularity_score(stats),
            counter_score=counter_score,
            synergy_score=synergy_score,
        )
        total = (
            breakdown.win_rate_score * weights.win_rate
            + breakdown.popularity_score * weights.popularity
            + breakdown.counter_score * weights.counter
            + breakdown.synergy_score * weights.synergy
        )

        return RecommendationScore(
            entity_id=champion.id,
            entity_name=champion.name,
            role=role,
            total_score=total,
            breakdown=breakdown,
            stats=stats,
            reasoning=self._generate_reasons(stats, breakdown, draft_state),
        )

    def _generate_reasons(
        self, stats: EntityStats, breakdown: ScoreBreakdown, draft_state: DraftState
    ) -> list[str]:
        """Generate human-readable reasons; always at least one."""
        reasons = []

        if stats.win_rate >= 0.52:
            reasons.append(f"Strong {stats.win_rate * 100:.1f}% win rate in {stats.tier.value} tier")
        elif stats.win_rate >= 0.50:
            reasons.append(f"Solid {stats.win_rate * 100:.1f}% win rate")

        if stats.tier in (Tier.S, Tier.A):
            reasons.append(f"High tier champion ({stats.tier.value} tier)")

        if breakdown.counter_score >= 70:
            reasons.append("Excellent matchup into enemy composition")
        elif breakdown.counter_score >= 55:
            reasons.append("Favorable matchups")
        elif breakdown.counter_score < 40:
            reasons.append("Challenging matchups - requires skill")

        if breakdown.synergy_score >= 65 and draft_state.own_pick_ids:
            reasons.append("Strong synergy with team composition")

        if stats.sample_size < self.LIMITED_DATA_THRESHOLD:
            reasons.append("Limited data - results may vary")

        if not reasons:
            reasons.append("Balanced pick for current situation")

        return reasons
