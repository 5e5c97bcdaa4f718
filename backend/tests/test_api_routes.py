"""Tests for the REST API routes."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from pick_assistant.errors import CatalogUnavailableError, InputError
from pick_assistant.main import app
from pick_assistant.models.draft import Role
from pick_assistant.models.recommendations import RecommendationResponse, RecommendationScore, ScoreBreakdown

from conftest import make_champion, make_stats

pytestmark = pytest.mark.anyio


@pytest.fixture
def mock_service():
    service = MagicMock()
    service.get_recommendations = AsyncMock(
        return_value=RecommendationResponse(
            recommendations=[
                RecommendationScore(
                    entity_id=103,
                    entity_name="Ahri",
                    role=Role.MID,
                    total_score=60.2,
                    breakdown=ScoreBreakdown(73.0, 60.0, 50.0, 50.0),
                    stats=make_stats(103, win_rate=0.523),
                    reasoning=["Strong 52.3% win rate in A tier"],
                )
            ],
            timestamp=1700000000000,
            patch="14.23.1",
        )
    )
    service.get_entity_stats = AsyncMock(return_value=make_stats(103))
    service.get_catalog = AsyncMock(return_value={103: make_champion(103, "Ahri"), 1: make_champion(1, "Annie")})
    service.warmup_cache = AsyncMock(return_value={"requested": 5, "warmed": 4, "failed": 1})
    service.status = AsyncMock(return_value={"patch": "14.23.1"})
    return service


@pytest.fixture
async def client(mock_service):
    """Async test client with the service set directly on app.state."""
    app.state.draft_service = mock_service
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    del app.state.draft_service


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_status(client):
    response = await client.get("/api/status")
    assert response.json() == {"patch": "14.23.1"}


class TestRecommendations:
    async def test_returns_ranked_list(self, client, mock_service):
        response = await client.post(
            "/api/recommendations",
            json={
                "current_state": {
                    "own_picks": [{"entity_id": 89, "role": "SUPPORT"}],
                    "opponent_picks": [{"entity_id": 238}],
                    "banned_entity_ids": [17],
                    "my_role": "middle",
                },
                "weights": {"counter": 0.5},
                "top_n": 3,
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["patch"] == "14.23.1"
        assert data["recommendations"][0]["entity_id"] == 103
        assert data["recommendations"][0]["role"] == "mid"
        assert data["recommendations"][0]["stats"]["tier"] == "A"

        state = mock_service.get_recommendations.await_args.args[0]
        assert state.my_role == Role.MID
        assert state.own_picks[0].role == Role.SUPPORT
        assert state.unavailable_ids == {89, 238, 17}
        assert mock_service.get_recommendations.await_args.kwargs == {"weights": {"counter": 0.5}, "top_n": 3}

    async def test_unknown_role_is_400(self, client, mock_service):
        response = await client.post(
            "/api/recommendations", json={"current_state": {"my_role": "feeder"}}
        )
        assert response.status_code == 400
        mock_service.get_recommendations.assert_not_awaited()

    async def test_input_error_is_400(self, client, mock_service):
        mock_service.get_recommendations.side_effect = InputError("my_role is required")
        response = await client.post("/api/recommendations", json={"current_state": {}})
        assert response.status_code == 400
        assert "my_role" in response.json()["detail"]

    async def test_catalog_outage_is_503(self, client, mock_service):
        mock_service.get_recommendations.side_effect = CatalogUnavailableError("no catalog")
        response = await client.post("/api/recommendations", json={"current_state": {"my_role": "mid"}})
        assert response.status_code == 503


async def test_champions_sorted_by_name(client):
    response = await client.get("/api/champions")
    names = [c["name"] for c in response.json()["champions"]]
    assert names == ["Ahri", "Annie"]


class TestChampionStats:
    async def test_found(self, client, mock_service):
        response = await client.get("/api/champion/103/stats/mid")
        assert response.status_code == 200
        assert response.json()["sample_size"] == 100
        mock_service.get_entity_stats.assert_awaited_once_with(103, Role.MID)

    async def test_absent_is_404(self, client, mock_service):
        mock_service.get_entity_stats.return_value = None
        response = await client.get("/api/champion/103/stats/jungle")
        assert response.status_code == 404

    async def test_bad_role_is_400(self, client):
        response = await client.get("/api/champion/103/stats/feeder")
        assert response.status_code == 400


async def test_cache_clear(client, mock_service):
    response = await client.post("/api/cache/clear")
    assert response.json()["success"] is True
    mock_service.clear_cache.assert_called_once()


async def test_cache_warmup(client, mock_service):
    response = await client.post("/api/cache/warmup", json={"entity_ids": [103], "roles": ["adc"]})
    assert response.json() == {"success": True, "requested": 5, "warmed": 4, "failed": 1}
    mock_service.warmup_cache.assert_awaited_once_with(entity_ids=[103], roles=[Role.BOT])


async def test_cache_warmup_without_body(client, mock_service):
    response = await client.post("/api/cache/warmup")
    assert response.status_code == 200
    mock_service.warmup_cache.assert_awaited_once_with(entity_ids=None, roles=None)
