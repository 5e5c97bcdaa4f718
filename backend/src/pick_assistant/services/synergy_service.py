"""Synergy scoring against the champions already on our team."""

import asyncio
from typing import Optional

from pick_assistant.models.draft import Role
from pick_assistant.models.provider import StatsSource
from pick_assistant.models.stats import SynergyStats
from pick_assistant.services.scorers.meta_scorer import clamp_score


class SynergyService:
    """Scores champion synergies from same-team win rates."""

    NEUTRAL_SCORE = 50.0
    # 48% same-team win rate maps to 0, 56% to 100
    CENTER = 0.48
    SPAN = 0.08

    def __init__(self, stats_source: StatsSource, min_sample_size: int = 5, enabled: bool = True):
        self.stats_source = stats_source
        self.min_sample_size = min_sample_size
        self.enabled = enabled

    async def get_synergy_score(self, entity_id: int, role: Role, ally_ids: list[int]) -> float:
        if not ally_ids or not self.enabled:
            return self.NEUTRAL_SCORE

        synergies: list[Optional[SynergyStats]] = await asyncio.gather(
            *(self.stats_source.get_synergy_stats(entity_id, ally, role) for ally in ally_ids)
        )
        valid = [s for s in synergies if s is not None and s.sample_size >= self.min_sample_size]
        if not valid:
            return self.NEUTRAL_SCORE

        avg_win_rate = sum(s.win_rate for s in valid) / len(valid)
        return clamp_score((avg_win_rate - self.CENTER) / self.SPAN * 100)
