"""Pre-aggregated champion statistics from a third-party stats site.

The endpoints return bare positional arrays; they are parsed here into the
typed stats models so nothing else depends on their layout:

    champion_stats/.../{champion}/{role}.json -> [win%, pick%, ban%, matches, rank]
    matchups/.../{champion}/{role}.json       -> {"<opponent id>": [win%, matches]}
    duo/.../{champion}/{role}.json            -> {"<ally id>": [win%, matches]}

Unlike sampled stats, pick and ban rate here are measured.
"""

import logging
from typing import Any, Optional

import httpx

from pick_assistant.models.draft import Role
from pick_assistant.models.stats import (
    EntityStats,
    MatchupStats,
    SynergyStats,
    calculate_tier_with_pick_rate,
)
from pick_assistant.services.cache import TTLCache
from pick_assistant.services.catalog_service import CatalogService
from pick_assistant.services.http_client import ProviderHttpClient

logger = logging.getLogger(__name__)

QUEUE = "ranked_solo_5x5"

# Canonical roles to the site's URL slugs
ROLE_SLUGS = {
    Role.TOP: "top",
    Role.JUNGLE: "jungle",
    Role.MID: "mid",
    Role.BOT: "adc",
    Role.SUPPORT: "supp",
}


def to_site_patch(patch: str) -> str:
    """"14.23.1" -> "14_23"."""
    return "_".join(patch.split(".")[:2])


def parse_entity_stats(entity_id: int, role: Role, row: Any) -> Optional[EntityStats]:
    """Parse [win%, pick%, ban%, matches, rank] into EntityStats."""
    if not isinstance(row, list) or len(row) < 3:
        return None
    win_rate = float(row[0]) / 100
    pick_rate = float(row[1]) / 100
    ban_rate = float(row[2]) / 100
    matches = int(row[3]) if len(row) > 3 and row[3] else 0
    rank = int(row[4]) if len(row) > 4 and row[4] else 0
    return EntityStats(
        entity_id=entity_id,
        role=role,
        win_rate=win_rate,
        pick_rate=pick_rate,
        ban_rate=ban_rate,
        sample_size=matches,
        tier=calculate_tier_with_pick_rate(win_rate, pick_rate),
        rank=rank,
        pick_rate_measured=True,
        source="aggregated",
    )


def parse_pair_row(row: Any) -> Optional[tuple[float, int]]:
    """Parse [win%, matches] into (win_rate, matches)."""
    if not isinstance(row, list) or not row:
        return None
    matches = int(row[1]) if len(row) > 1 and row[1] else 0
    return float(row[0]) / 100, matches


class AggregatedStatsProvider(ProviderHttpClient):
    """Stats source backed by pre-aggregated per-patch endpoints."""

    def __init__(
        self,
        catalog: CatalogService,
        cache: TTLCache,
        base_url: str = "https://stats2.u.gg/lol/1.5",
        min_sample_size: int = 30,
        min_matchup_sample: int = 10,
        min_synergy_sample: int = 5,
        stats_ttl: float = 3600,
        matchup_ttl: float = 7200,
        timeout: float = 10.0,
        retry_attempts: int = 3,
        retry_base_delay: float = 2.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(
            timeout=timeout,
            retry_attempts=retry_attempts,
            retry_base_delay=retry_base_delay,
            transport=transport,
        )
        self.catalog = catalog
        self.cache = cache
        self.base_url = base_url.rstrip("/")
        self.min_sample_size = min_sample_size
        self.min_matchup_sample = min_matchup_sample
        self.min_synergy_sample = min_synergy_sample
        self.stats_ttl = stats_ttl
        self.matchup_ttl = matchup_ttl
        self._headers = {"User-Agent": "PickAssistant/0.1"}

    async def get_entity_stats(self, entity_id: int, role: Role) -> Optional[EntityStats]:
        patch = await self.catalog.get_current_patch()
        cache_key = f"stats:aggregated:{entity_id}:{role.value}:{patch}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        url = (
            f"{self.base_url}/champion_stats/world/{to_site_patch(patch)}/{QUEUE}/"
            f"{entity_id}/{ROLE_SLUGS[role]}.json"
        )
        result = await self._fetch(url, headers=self._headers)
        if not result.is_found:
            if result.is_error:
                logger.warning(f"Failed to fetch stats for champion {entity_id} {role.value}")
            return None

        try:
            stats = parse_entity_stats(entity_id, role, result.value)
        except (TypeError, ValueError) as e:
            logger.warning(f"Malformed stats row for champion {entity_id} {role.value}: {e}")
            return None

        if stats is None or stats.sample_size < self.min_sample_size:
            return None

        self.cache.set(cache_key, stats, self.stats_ttl)
        return stats

    async def _get_pair(
        self, endpoint: str, entity_id: int, other_id: int, role: Role
    ) -> Optional[tuple[float, int]]:
        patch = await self.catalog.get_current_patch()
        url = (
            f"{self.base_url}/{endpoint}/{to_site_patch(patch)}/{QUEUE}/"
            f"{entity_id}/{ROLE_SLUGS[role]}.json"
        )
        result = await self._fetch(url, headers=self._headers)
        if not result.is_found or not isinstance(result.value, dict):
            return None

        try:
            return parse_pair_row(result.value.get(str(other_id)))
        except (TypeError, ValueError) as e:
            logger.debug(f"Malformed {endpoint} row for {entity_id}/{other_id}: {e}")
            return None

    async def get_matchup_stats(
        self, entity_id: int, opponent_id: int, role: Role
    ) -> Optional[MatchupStats]:
        patch = await self.catalog.get_current_patch()
        cache_key = f"matchup:aggregated:{entity_id}:{opponent_id}:{role.value}:{patch}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        pair = await self._get_pair("matchups", entity_id, opponent_id, role)
        if pair is None or pair[1] < self.min_matchup_sample:
            return None

        matchup = MatchupStats(
            entity_id=entity_id,
            opponent_id=opponent_id,
            role=role,
            win_rate=pair[0],
            sample_size=pair[1],
        )
        self.cache.set(cache_key, matchup, self.matchup_ttl)
        return matchup

    async def get_synergy_stats(
        self, entity_id: int, ally_id: int, role: Role
    ) -> Optional[SynergyStats]:
        patch = await self.catalog.get_current_patch()
        cache_key = f"synergy:aggregated:{entity_id}:{ally_id}:{role.value}:{patch}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        pair = await self._get_pair("duo", entity_id, ally_id, role)
        if pair is None or pair[1] < self.min_synergy_sample:
            return None

        synergy = SynergyStats(
            entity_id=entity_id,
            ally_id=ally_id,
            role=role,
            win_rate=pair[0],
            sample_size=pair[1],
        )
        self.cache.set(cache_key, synergy, self.matchup_ttl)
        return synergy
