"""Current patch and champion catalog, cached at process scope."""

import logging

from pick_assistant.errors import CatalogUnavailableError
from pick_assistant.models.stats import Champion
from pick_assistant.services.cache import TTLCache
from pick_assistant.services.riot_client import RiotClient

logger = logging.getLogger(__name__)

PATCH_KEY = "patch:current"


class CatalogService:
    """Resolves the patch and its champion list.

    Without a catalog no candidate set exists, so failures here raise
    CatalogUnavailableError instead of degrading.
    """

    def __init__(self, client: RiotClient, cache: TTLCache, ttl: float = 86400):
        self.client = client
        self.cache = cache
        self.ttl = ttl

    async def get_current_patch(self) -> str:
        cached = self.cache.get(PATCH_KEY)
        if cached is not None:
            return cached

        result = await self.client.get_latest_patch()
        if not result.is_found:
            logger.error(f"Failed to fetch current patch ({result.outcome.value})")
            raise CatalogUnavailableError(
                "Could not determine current patch version", last_error=result.error
            )

        patch = result.value
        self.cache.set(PATCH_KEY, patch, self.ttl)
        logger.info(f"Current patch: {patch}")
        return patch

    async def get_catalog(self) -> dict[int, Champion]:
        """All champions for the current patch, keyed by champion id."""
        patch = await self.get_current_patch()
        cache_key = f"champions:{patch}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        result = await self.client.get_champion_catalog(patch)
        if not result.is_found or not result.value:
            logger.error(f"Failed to fetch champion list for patch {patch} ({result.outcome.value})")
            raise CatalogUnavailableError("Could not fetch champions data", last_error=result.error)

        catalog = result.value
        self.cache.set(cache_key, catalog, self.ttl)
        logger.info(f"Loaded {len(catalog)} champions for patch {patch}")
        return catalog
