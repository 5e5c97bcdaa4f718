"""Champion statistics aggregated from sampled high-elo matches.

The Riot API has no aggregated win-rate endpoint, so we build one:

1. Take the Challenger + Master ladders (cached ~24h).
2. Walk the first N players, pulling their recent ranked matches and keeping
   the ones where the champion was played in the requested role.
3. Stop once the sample hits the target size.
4. Refuse to answer below the minimum sample size.

The raw sample is cached separately (longer TTL) from the derived stats, so
matchup and synergy lookups reuse it without refetching matches.
"""

import logging
from typing import Optional

from pick_assistant.models.draft import Role
from pick_assistant.models.provider import ProviderResult
from pick_assistant.models.stats import (
    PLACEHOLDER_BAN_RATE,
    PLACEHOLDER_PICK_RATE,
    EntityStats,
    MatchRecord,
    MatchupStats,
    SynergyStats,
    calculate_tier,
)
from pick_assistant.services.cache import TTLCache
from pick_assistant.services.riot_client import RiotClient

logger = logging.getLogger(__name__)

HIGH_ELO_PLAYERS_KEY = "high-elo-players"


class StatsAggregator:
    """Computes EntityStats / MatchupStats / SynergyStats from match samples."""

    def __init__(
        self,
        client: RiotClient,
        cache: TTLCache,
        players_to_sample: int = 10,
        matches_per_player: int = 20,
        queue_id: int = 420,
        target_sample_size: int = 200,
        min_sample_size: int = 30,
        min_matchup_sample: int = 10,
        min_synergy_sample: int = 5,
        stats_ttl: float = 3600,
        sample_ttl: float = 7200,
        matchup_ttl: float = 7200,
        leaderboard_ttl: float = 86400,
    ):
        self.client = client
        self.cache = cache
        self.players_to_sample = players_to_sample
        self.matches_per_player = matches_per_player
        self.queue_id = queue_id
        self.target_sample_size = target_sample_size
        self.min_sample_size = min_sample_size
        self.min_matchup_sample = min_matchup_sample
        self.min_synergy_sample = min_synergy_sample
        self.stats_ttl = stats_ttl
        self.sample_ttl = sample_ttl
        self.matchup_ttl = matchup_ttl
        self.leaderboard_ttl = leaderboard_ttl

    async def get_entity_stats(self, entity_id: int, role: Role) -> Optional[EntityStats]:
        """Win-rate statistics for a champion in a role, or None if under-sampled."""
        cache_key = f"stats:sampled:{entity_id}:{role.value}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        logger.info(f"Calculating stats for champion {entity_id} in {role.value}")
        matches = await self.get_sample_matches(entity_id, role)

        if len(matches) < self.min_sample_size:
            logger.warning(
                f"Insufficient data for champion {entity_id} {role.value}: {len(matches)} matches"
            )
            return None

        stats = self.calculate_stats(entity_id, role, matches)
        self.cache.set(cache_key, stats, self.stats_ttl)
        return stats

    def calculate_stats(self, entity_id: int, role: Role, matches: list[MatchRecord]) -> EntityStats:
        """Derive EntityStats from a filtered sample.

        Only win rate (and the tier derived from it) is meaningful here; pick
        and ban rate need the full population and are placeholders.
        """
        wins = 0
        kda_total = 0.0
        duration_total = 0
        for match in matches:
            participant = match.find(entity_id, role)
            if participant.win:
                wins += 1
            kda_total += (participant.kills + participant.assists) / max(1, participant.deaths)
            duration_total += match.game_duration

        total = len(matches)
        win_rate = wins / total

        return EntityStats(
            entity_id=entity_id,
            role=role,
            win_rate=win_rate,
            pick_rate=PLACEHOLDER_PICK_RATE,
            ban_rate=PLACEHOLDER_BAN_RATE,
            sample_size=total,
            tier=calculate_tier(win_rate),
            rank=0,
            pick_rate_measured=False,
            source="sampled",
            avg_kda=round(kda_total / total, 2),
            avg_game_duration=round(duration_total / total, 1),
        )

    async def get_sample_matches(self, entity_id: int, role: Role) -> list[MatchRecord]:
        """Matches where entity_id was played in role, capped at the target size."""
        cache_key = f"matches-sample:{entity_id}:{role.value}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        players = await self.get_high_elo_players()
        if not players:
            logger.warning("No high-elo players available for sampling")
            return []

        sample: list[MatchRecord] = []
        seen: set[str] = set()
        sampled_any = False
        for player_id in players[: self.players_to_sample]:
            matches = await self._get_player_matches(player_id)
            if matches is None:
                continue
            sampled_any = True

            # Ladder players share games; count each match once
            for match in matches:
                if match.match_id in seen or match.find(entity_id, role) is None:
                    continue
                seen.add(match.match_id)
                sample.append(match)
            if len(sample) >= self.target_sample_size:
                break

        sample = sample[: self.target_sample_size]
        if sampled_any:
            self.cache.set(cache_key, sample, self.sample_ttl)
        return sample

    async def _get_player_matches(self, player_id: str) -> Optional[list[MatchRecord]]:
        """Recent ranked matches for one ladder player; None if the player is unusable."""
        summoner = await self.client.get_summoner_by_puuid(player_id)
        if not summoner.is_found:
            if summoner.is_error:
                logger.warning(f"Failed to look up player {player_id}: {summoner.error}")
            return None

        puuid = summoner.value.get("puuid", player_id)
        match_ids = await self.client.get_match_ids(puuid, count=self.matches_per_player, queue=self.queue_id)
        if match_ids.is_error:
            logger.warning(f"Failed to get matches for player {player_id}: {match_ids.error}")
            return None
        if not match_ids.is_found:
            return []

        return await self.client.get_matches_batch(match_ids.value)

    async def get_high_elo_players(self) -> list[str]:
        """Challenger then Master ladder player ids (cached)."""
        cached = self.cache.get(HIGH_ELO_PLAYERS_KEY)
        if cached is not None:
            return cached

        challenger = await self.client.get_challenger_players()
        master = await self.client.get_master_players()
        players = self._ladder_or_empty("challenger", challenger) + self._ladder_or_empty("master", master)

        # An empty pool means both ladders failed; retry on the next call instead of caching it
        if players:
            self.cache.set(HIGH_ELO_PLAYERS_KEY, players, self.leaderboard_ttl)
        return players

    @staticmethod
    def _ladder_or_empty(name: str, result: ProviderResult[list[str]]) -> list[str]:
        if result.is_found:
            return result.value
        if result.is_error:
            logger.error(f"Failed to fetch {name} players: {result.error}")
        return []

    async def get_matchup_stats(
        self, entity_id: int, opponent_id: int, role: Role
    ) -> Optional[MatchupStats]:
        """Win rate of entity_id (in role) in sampled games that include opponent_id."""
        cache_key = f"matchup:{entity_id}:{opponent_id}:{role.value}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        matches = await self.get_sample_matches(entity_id, role)
        wins = 0
        total = 0
        for match in matches:
            participant = match.find(entity_id, role)
            if participant is None:
                continue
            if not any(p.entity_id == opponent_id for p in match.participants if p is not participant):
                continue
            total += 1
            wins += participant.win

        if total < self.min_matchup_sample:
            return None

        matchup = MatchupStats(
            entity_id=entity_id,
            opponent_id=opponent_id,
            role=role,
            win_rate=wins / total,
            sample_size=total,
        )
        self.cache.set(cache_key, matchup, self.matchup_ttl)
        return matchup

    async def get_synergy_stats(
        self, entity_id: int, ally_id: int, role: Role
    ) -> Optional[SynergyStats]:
        """Win rate of entity_id (in role) in sampled games where ally_id was on the same team."""
        cache_key = f"synergy:{entity_id}:{ally_id}:{role.value}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        matches = await self.get_sample_matches(entity_id, role)
        wins = 0
        total = 0
        for match in matches:
            participant = match.find(entity_id, role)
            if participant is None:
                continue
            has_ally = any(
                p.entity_id == ally_id and p.team_id == participant.team_id
                for p in match.participants
                if p is not participant
            )
            if not has_ally:
                continue
            total += 1
            wins += participant.win

        if total < self.min_synergy_sample:
            return None

        synergy = SynergyStats(
            entity_id=entity_id,
            ally_id=ally_id,
            role=role,
            win_rate=wins / total,
            sample_size=total,
        )
        self.cache.set(cache_key, synergy, self.matchup_ttl)
        return synergy
