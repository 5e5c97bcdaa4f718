"""Application-level service wiring the recommendation core together."""

import asyncio
import logging
import time
from typing import Optional

import httpx

from pick_assistant.config import Settings
from pick_assistant.errors import ProviderError
from pick_assistant.models.draft import DraftState, Role
from pick_assistant.models.provider import StatsSource
from pick_assistant.models.recommendations import RecommendationResponse, Weights
from pick_assistant.models.stats import Champion, EntityStats
from pick_assistant.services.aggregated_stats_provider import AggregatedStatsProvider
from pick_assistant.services.cache import TTLCache
from pick_assistant.services.catalog_service import CatalogService
from pick_assistant.services.pick_recommendation_engine import RecommendationEngine
from pick_assistant.services.riot_client import RiotClient
from pick_assistant.services.stats_aggregator import StatsAggregator
from pick_assistant.utils.rate_limiter import RateLimiter
from pick_assistant.utils.role_normalizer import ROLE_ORDER

logger = logging.getLogger(__name__)

# Frequently picked champions across all roles, warmed on request
POPULAR_CHAMPION_IDS = [
    157, 238, 64, 11, 555, 777, 110, 234, 202, 120,
    145, 81, 89, 92, 67, 498, 39, 99, 105, 35,
    236, 22, 412, 221, 121, 18, 103, 268, 141, 76,
]


class DraftService:
    """Owns the shared cache, provider clients, stats source and engine."""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Build every component from settings.

        Args:
            settings: Application settings
            transport: Optional httpx transport shared by all provider clients
        """
        self.settings = settings
        self.cache = TTLCache(sweep_interval=settings.cache_sweep_interval)
        self.rate_limiters = [
            RateLimiter(settings.riot_requests_per_second, 1.0),
            RateLimiter(settings.riot_requests_per_two_minutes, 120.0),
        ]
        self.riot_client = RiotClient(
            api_key=settings.riot_api_key,
            region=settings.riot_region,
            platform=settings.riot_platform,
            rate_limiters=self.rate_limiters,
            timeout=settings.request_timeout,
            retry_attempts=settings.retry_attempts,
            retry_base_delay=settings.retry_base_delay,
            batch_delay=settings.batch_fetch_delay,
            ddragon_base_url=settings.ddragon_base_url,
            transport=transport,
        )
        self.catalog = CatalogService(self.riot_client, self.cache, ttl=settings.patch_ttl)
        self.stats_source = self._build_stats_source(transport)
        self.engine = RecommendationEngine(
            stats_source=self.stats_source,
            catalog=self.catalog,
            default_weights=Weights(
                win_rate=settings.weight_win_rate,
                popularity=settings.weight_popularity,
                counter=settings.weight_counter,
                synergy=settings.weight_synergy,
            ),
            min_sample_size=settings.min_sample_size,
            min_matchup_sample=settings.min_matchup_sample,
            min_synergy_sample=settings.min_synergy_sample,
            batch_size=settings.scoring_batch_size,
            enable_counter=settings.enable_counter_calculation,
            enable_synergy=settings.enable_synergy_calculation,
        )

    def _build_stats_source(self, transport: Optional[httpx.AsyncBaseTransport]) -> StatsSource:
        s = self.settings
        if s.stats_source == "aggregated":
            logger.info("Using pre-aggregated stats provider")
            return AggregatedStatsProvider(
                catalog=self.catalog,
                cache=self.cache,
                base_url=s.ugg_base_url,
                min_sample_size=s.min_sample_size,
                min_matchup_sample=s.min_matchup_sample,
                min_synergy_sample=s.min_synergy_sample,
                stats_ttl=s.entity_stats_ttl,
                matchup_ttl=s.matchup_ttl,
                timeout=s.request_timeout,
                retry_attempts=s.retry_attempts,
                retry_base_delay=s.retry_base_delay,
                transport=transport,
            )
        logger.info("Using match-sampling stats aggregator")
        return StatsAggregator(
            client=self.riot_client,
            cache=self.cache,
            players_to_sample=s.players_to_sample,
            matches_per_player=s.matches_per_player,
            queue_id=s.ranked_queue_id,
            target_sample_size=s.target_sample_size,
            min_sample_size=s.min_sample_size,
            min_matchup_sample=s.min_matchup_sample,
            min_synergy_sample=s.min_synergy_sample,
            stats_ttl=s.entity_stats_ttl,
            sample_ttl=s.match_sample_ttl,
            matchup_ttl=s.matchup_ttl,
            leaderboard_ttl=s.leaderboard_ttl,
        )

    async def start(self) -> None:
        self.cache.start()
        if not self.settings.riot_api_key:
            logger.warning("RIOT_API_KEY is not set; Riot API calls will be rejected")
        logger.info("Draft service started")

    async def close(self) -> None:
        """Stop the cache sweep and release HTTP clients."""
        self.cache.destroy()
        await self.riot_client.close()
        if isinstance(self.stats_source, AggregatedStatsProvider):
            await self.stats_source.close()
        logger.info("Draft service stopped")

    async def get_recommendations(
        self,
        draft_state: DraftState,
        weights: Optional[dict[str, float]] = None,
        top_n: Optional[int] = None,
    ) -> RecommendationResponse:
        started = time.perf_counter()
        recommendations = await self.engine.get_recommendations(
            draft_state,
            weights=weights,
            top_n=top_n if top_n is not None else self.settings.default_top_n,
        )
        patch = await self.catalog.get_current_patch()
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"Generated {len(recommendations)} recommendations for "
            f"{draft_state.my_role.value} in {elapsed_ms:.0f}ms"
        )
        return RecommendationResponse(
            recommendations=recommendations,
            timestamp=int(time.time() * 1000),
            patch=patch,
        )

    async def get_entity_stats(self, entity_id: int, role: Role) -> Optional[EntityStats]:
        return await self.stats_source.get_entity_stats(entity_id, role)

    async def get_catalog(self) -> dict[int, Champion]:
        return await self.catalog.get_catalog()

    def clear_cache(self) -> None:
        self.cache.clear()

    async def warmup_cache(
        self,
        entity_ids: Optional[list[int]] = None,
        roles: Optional[list[Role]] = None,
    ) -> dict:
        """Pre-populate entity stats for popular champions.

        Runs in batches of scoring_batch_size; a failed pair is counted and
        skipped.

        Returns:
            Dict with requested, warmed and failed pair counts
        """
        ids = entity_ids if entity_ids is not None else POPULAR_CHAMPION_IDS
        roles = roles if roles is not None else list(ROLE_ORDER)
        pairs = [(entity_id, role) for entity_id in ids for role in roles]
        logger.info(f"Warming cache for {len(ids)} champions x {len(roles)} roles")

        warmed = 0
        failed = 0
        batch_size = self.settings.scoring_batch_size
        for start in range(0, len(pairs), batch_size):
            batch = pairs[start : start + batch_size]
            results = await asyncio.gather(*(self._warm_one(eid, role) for eid, role in batch))
            warmed += sum(1 for r in results if r is True)
            failed += sum(1 for r in results if r is None)

        logger.info(f"Cache warmup complete: {warmed}/{len(pairs)} warmed, {failed} failed")
        return {"requested": len(pairs), "warmed": warmed, "failed": failed}

    async def _warm_one(self, entity_id: int, role: Role) -> Optional[bool]:
        """True if stats were cached, False if under-sampled, None on failure."""
        try:
            return await self.stats_source.get_entity_stats(entity_id, role) is not None
        except ProviderError as e:
            logger.warning(f"Warmup failed for champion {entity_id} {role.value}: {e}")
            return None

    async def status(self) -> dict:
        """Patch, cache and rate limiter diagnostics."""
        try:
            patch = await self.catalog.get_current_patch()
        except ProviderError:
            patch = None
        cache_stats = self.cache.stats()
        return {
            "patch": patch,
            "stats_source": self.settings.stats_source,
            "cache": {"size": cache_stats["size"], "running": self.cache.running},
            "rate_limiters": [
                {
                    "max_requests": limiter.max_requests,
                    "window": limiter.window,
                    "in_window": limiter.queue_size(),
                }
                for limiter in self.rate_limiters
            ],
        }
