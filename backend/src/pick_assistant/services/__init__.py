"""Business logic services."""

from pick_assistant.services.cache import TTLCache
from pick_assistant.services.catalog_service import CatalogService
from pick_assistant.services.draft_service import DraftService
from pick_assistant.services.pick_recommendation_engine import RecommendationEngine
from pick_assistant.services.riot_client import RiotClient
from pick_assistant.services.stats_aggregator import StatsAggregator

__all__ = [
    "TTLCache",
    "CatalogService",
    "DraftService",
    "RecommendationEngine",
    "RiotClient",
    "StatsAggregator",
]
