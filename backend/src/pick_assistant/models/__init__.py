"""Data models for the pick assistant."""

from pick_assistant.models.draft import DraftPhase, DraftState, PickedEntity, Role
from pick_assistant.models.stats import (
    Champion,
    EntityStats,
    MatchRecord,
    MatchupStats,
    Participant,
    SynergyStats,
    Tier,
)
from pick_assistant.models.provider import Outcome, ProviderResult, StatsSource
from pick_assistant.models.recommendations import (
    RecommendationResponse,
    RecommendationScore,
    ScoreBreakdown,
    Weights,
)

__all__ = [
    "DraftPhase",
    "DraftState",
    "PickedEntity",
    "Role",
    "Champion",
    "EntityStats",
    "MatchRecord",
    "MatchupStats",
    "Participant",
    "SynergyStats",
    "Tier",
    "Outcome",
    "ProviderResult",
    "StatsSource",
    "RecommendationResponse",
    "RecommendationScore",
    "ScoreBreakdown",
    "Weights",
]
