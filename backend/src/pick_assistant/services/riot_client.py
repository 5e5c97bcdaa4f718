"""Riot Games API + Data Dragon client.

Every Riot call passes through the shared rate limiters and is retried on
transient failures. Data Dragon (static CDN) is not rate limited.

Public methods return ProviderResult: FOUND with a value, NOT_FOUND for a
404, or ERROR once retries are exhausted. They do not raise for provider
failures.
"""

import asyncio
import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from pick_assistant.errors import DataUnavailableError
from pick_assistant.models.provider import ProviderResult
from pick_assistant.models.stats import Champion, MatchRecord, Participant
from pick_assistant.services.http_client import ProviderHttpClient
from pick_assistant.utils.rate_limiter import RateLimiter
from pick_assistant.utils.role_normalizer import normalize_position

logger = logging.getLogger(__name__)


def parse_match(payload: dict) -> MatchRecord:
    """Parse a Match-V5 payload into a MatchRecord.

    Raises:
        KeyError, TypeError, ValueError: if the payload is malformed.
    """
    info = payload["info"]
    participants = tuple(
        Participant(
            entity_id=int(p["championId"]),
            role=normalize_position(p.get("teamPosition")),
            team_id=int(p["teamId"]),
            win=bool(p["win"]),
            kills=int(p.get("kills", 0)),
            deaths=int(p.get("deaths", 0)),
            assists=int(p.get("assists", 0)),
        )
        for p in info["participants"]
    )
    match_id = payload.get("metadata", {}).get("matchId") or str(info.get("gameId", ""))
    return MatchRecord(
        match_id=match_id,
        game_duration=int(info.get("gameDuration", 0)),
        participants=participants,
    )


def parse_champion_catalog(payload: dict) -> dict[int, Champion]:
    """Parse Data Dragon champion.json into {champion_id: Champion}."""
    catalog: dict[int, Champion] = {}
    for key, data in payload["data"].items():
        champion_id = int(data["key"])
        catalog[champion_id] = Champion(
            id=champion_id,
            key=key,
            name=data.get("name", key),
            title=data.get("title", ""),
            tags=tuple(data.get("tags", [])),
        )
    return catalog


class RiotClient(ProviderHttpClient):
    """Rate-limited, retrying client for the Riot API and Data Dragon."""

    def __init__(
        self,
        api_key: str,
        region: str = "europe",
        platform: str = "euw1",
        rate_limiters: Optional[list[RateLimiter]] = None,
        timeout: float = 10.0,
        retry_attempts: int = 3,
        retry_base_delay: float = 2.0,
        batch_delay: float = 0.05,
        ddragon_base_url: str = "https://ddragon.leagueoflegends.com",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            api_key: Riot developer/production key (X-Riot-Token)
            region: Regional routing value for Match-V5 (americas, europe, asia, sea)
            platform: Platform routing value for Summoner/League-V4 (euw1, na1, kr, ...)
            rate_limiters: Limiters every Riot call must pass, e.g. 20/1s and 100/120s
            timeout: Per-request timeout in seconds
            retry_attempts: Attempts per call before giving up
            retry_base_delay: First backoff delay in seconds, doubled per attempt
            batch_delay: Pause between sequential match fetches in a batch
            ddragon_base_url: Static data CDN root
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        super().__init__(
            timeout=timeout,
            retry_attempts=retry_attempts,
            retry_base_delay=retry_base_delay,
            transport=transport,
        )
        self.api_key = api_key
        self.region = region
        self.platform = platform
        self.rate_limiters = rate_limiters if rate_limiters is not None else [RateLimiter(20, 1.0)]
        self.batch_delay = batch_delay
        self.ddragon_base_url = ddragon_base_url.rstrip("/")

    @property
    def platform_url(self) -> str:
        return f"https://{self.platform}.api.riotgames.com"

    @property
    def regional_url(self) -> str:
        return f"https://{self.region}.api.riotgames.com"

    async def _request(
        self,
        url: str,
        params: Optional[dict] = None,
        headers: Optional[dict] = None,
        riot: bool = True,
    ) -> ProviderResult[Any]:
        """One GET; Riot calls wait on every rate limiter first."""
        if riot:
            for limiter in self.rate_limiters:
                await limiter.acquire()
            headers = {**(headers or {}), "X-Riot-Token": self.api_key}
        return await super()._request(url, params=params, headers=headers)

    # --- Static data (Data Dragon) ---

    async def get_latest_patch(self) -> ProviderResult[str]:
        """Newest static data version, e.g. "14.23.1"."""
        result = await self._fetch(f"{self.ddragon_base_url}/api/versions.json", riot=False)
        if not result.is_found:
            return result
        versions = result.value
        if not isinstance(versions, list) or not versions:
            return ProviderResult.not_found()
        return ProviderResult.found(str(versions[0]))

    async def get_champion_catalog(
        self, patch: str, language: str = "en_US"
    ) -> ProviderResult[dict[int, Champion]]:
        """All champions for a patch, keyed by numeric champion id."""
        url = f"{self.ddragon_base_url}/cdn/{patch}/data/{language}/champion.json"
        result = await self._fetch(url, riot=False)
        if not result.is_found:
            return result
        try:
            return ProviderResult.found(parse_champion_catalog(result.value))
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Malformed champion catalog for patch {patch}: {e}")
            return ProviderResult.failed(DataUnavailableError("Malformed champion catalog", last_error=e))

    # --- Summoner-V4 ---

    async def get_summoner_by_puuid(self, puuid: str) -> ProviderResult[dict]:
        url = f"{self.platform_url}/lol/summoner/v4/summoners/by-puuid/{quote(puuid)}"
        return await self._fetch(url)

    async def get_summoner_by_name(self, summoner_name: str) -> ProviderResult[dict]:
        url = f"{self.platform_url}/lol/summoner/v4/summoners/by-name/{quote(summoner_name)}"
        result = await self._fetch(url)
        if result.is_not_found:
            logger.warning(f"Summoner not found: {summoner_name}")
        return result

    # --- Match-V5 ---

    async def get_match_ids(
        self, puuid: str, count: int = 20, queue: Optional[int] = None
    ) -> ProviderResult[list[str]]:
        """Most recent match ids for a player, optionally filtered by queue (420 = Ranked Solo)."""
        url = f"{self.regional_url}/lol/match/v5/matches/by-puuid/{quote(puuid)}/ids"
        params: dict[str, Any] = {"start": 0, "count": max(1, min(count, 100))}
        if queue is not None:
            params["queue"] = queue
        result = await self._fetch(url, params=params)
        if result.is_found and not isinstance(result.value, list):
            return ProviderResult.failed(DataUnavailableError(f"Unexpected match id payload for {puuid}"))
        return result

    async def get_match(self, match_id: str) -> ProviderResult[MatchRecord]:
        result = await self._fetch(f"{self.regional_url}/lol/match/v5/matches/{match_id}")
        if not result.is_found:
            return result
        try:
            return ProviderResult.found(parse_match(result.value))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Malformed match payload {match_id}: {e}")
            return ProviderResult.failed(DataUnavailableError(f"Malformed match {match_id}", last_error=e))

    async def get_matches_batch(self, match_ids: list[str]) -> list[MatchRecord]:
        """Fetch matches one at a time, skipping any that fail."""
        matches: list[MatchRecord] = []
        for match_id in match_ids:
            result = await self.get_match(match_id)
            if result.is_found:
                matches.append(result.value)
            else:
                logger.warning(f"Skipping match {match_id} ({result.outcome.value})")
            # Small delay to spread load across the rate limit window
            await asyncio.sleep(self.batch_delay)
        return matches

    # --- League-V4 ---

    async def _get_league_players(self, league: str) -> ProviderResult[list[str]]:
        url = f"{self.platform_url}/lol/league/v4/{league}/by-queue/RANKED_SOLO_5x5"
        result = await self._fetch(url)
        if not result.is_found:
            return result
        entries = result.value.get("entries", []) if isinstance(result.value, dict) else []
        # Newer payloads carry puuid directly; older ones only summonerId
        players = [e.get("puuid") or e.get("summonerId") for e in entries]
        return ProviderResult.found([p for p in players if p])

    async def get_challenger_players(self) -> ProviderResult[list[str]]:
        return await self._get_league_players("challengerleagues")

    async def get_master_players(self) -> ProviderResult[list[str]]:
        return await self._get_league_players("masterleagues")
