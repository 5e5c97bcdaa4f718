"""Meta strength scorer based on win rate and pick rate."""

from pick_assistant.models.stats import EntityStats, Tier


def clamp_score(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


class MetaScorer:
    """Scores a champion's standalone strength from its EntityStats."""

    # 45% win rate maps to 0, 55% to 100
    WIN_RATE_CENTER = 0.45
    WIN_RATE_SPAN = 0.10

    # A 10% pick rate is already maximally popular
    PICK_RATE_CEILING = 0.10

    # Reliability proxy when pick rate was not actually measured
    TIER_SCORES = {
        Tier.S: 80.0,
        Tier.A: 60.0,
        Tier.B: 40.0,
        Tier.C: 20.0,
        Tier.D: 10.0,
    }

    def get_win_rate_score(self, stats: EntityStats) -> float:
        return clamp_score((stats.win_rate - self.WIN_RATE_CENTER) / self.WIN_RATE_SPAN * 100)

    def get_popularity_score(self, stats: EntityStats) -> float:
        """Pick-rate based when measured, otherwise a fixed score per tier."""
        if stats.pick_rate_measured:
            return clamp_score(stats.pick_rate / self.PICK_RATE_CEILING * 100)
        return self.TIER_SCORES.get(stats.tier, self.TIER_SCORES[Tier.D])
