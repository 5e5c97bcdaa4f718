"""Tests for patch and champion catalog resolution."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from pick_assistant.errors import CatalogUnavailableError, DataUnavailableError
from pick_assistant.models.provider import ProviderResult
from pick_assistant.services.cache import TTLCache
from pick_assistant.services.catalog_service import CatalogService

from conftest import make_champion

pytestmark = pytest.mark.anyio


@pytest.fixture
def client():
    client = MagicMock()
    client.get_latest_patch = AsyncMock(return_value=ProviderResult.found("14.23.1"))
    client.get_champion_catalog = AsyncMock(
        return_value=ProviderResult.found({103: make_champion(103, "Ahri")})
    )
    return client


async def test_catalog_is_cached_per_patch(client):
    service = CatalogService(client, TTLCache())

    first = await service.get_catalog()
    second = await service.get_catalog()

    assert first[103].name == "Ahri"
    assert first is second
    client.get_latest_patch.assert_awaited_once()
    client.get_champion_catalog.assert_awaited_once_with("14.23.1")


async def test_patch_failure_raises(client):
    client.get_latest_patch.return_value = ProviderResult.failed(DataUnavailableError("down"))
    service = CatalogService(client, TTLCache())

    with pytest.raises(CatalogUnavailableError):
        await service.get_current_patch()


async def test_catalog_failure_raises_and_is_not_cached(client):
    client.get_champion_catalog.return_value = ProviderResult.not_found()
    service = CatalogService(client, TTLCache())

    with pytest.raises(CatalogUnavailableError):
        await service.get_catalog()

    client.get_champion_catalog.return_value = ProviderResult.found({1: make_champion(1)})
    assert 1 in await service.get_catalog()
