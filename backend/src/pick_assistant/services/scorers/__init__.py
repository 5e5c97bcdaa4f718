"""Core scoring components for recommendation engine."""
from pick_assistant.services.scorers.meta_scorer import MetaScorer, clamp_score
from pick_assistant.services.scorers.matchup_calculator import MatchupCalculator

__all__ = [
    "MetaScorer",
    "MatchupCalculator",
    "clamp_score",
]
