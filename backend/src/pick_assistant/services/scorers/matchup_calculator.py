"""Counter scoring against the enemy team's picks."""

import asyncio
import logging
from typing import Optional

from pick_assistant.models.draft import Role
from pick_assistant.models.provider import StatsSource
from pick_assistant.models.stats import MatchupStats
from pick_assistant.services.scorers.meta_scorer import clamp_score

logger = logging.getLogger(__name__)


class MatchupCalculator:
    """Averages a champion's win rate against each enemy pick."""

    NEUTRAL_SCORE = 50.0
    CENTER = 0.45
    SPAN = 0.10

    def __init__(self, stats_source: StatsSource, min_sample_size: int = 10, enabled: bool = True):
        self.stats_source = stats_source
        self.min_sample_size = min_sample_size
        self.enabled = enabled

    async def get_counter_score(
        self, entity_id: int, role: Role, opponent_ids: list[int]
    ) -> float:
        """Score in [0, 100]; 50 when there is nothing usable to judge by.

        Missing matchup data is neutral, never a penalty.
        """
        if not opponent_ids or not self.enabled:
            return self.NEUTRAL_SCORE

        matchups: list[Optional[MatchupStats]] = await asyncio.gather(
            *(self.stats_source.get_matchup_stats(entity_id, opp, role) for opp in opponent_ids)
        )
        valid = [m for m in matchups if m is not None and m.sample_size >= self.min_sample_size]
        if not valid:
            return self.NEUTRAL_SCORE

        avg_win_rate = sum(m.win_rate for m in valid) / len(valid)
        logger.debug(
            f"Champion {entity_id} vs {len(valid)}/{len(opponent_ids)} enemies: avg {avg_win_rate:.3f}"
        )
        return clamp_score((avg_win_rate - self.CENTER) / self.SPAN * 100)
