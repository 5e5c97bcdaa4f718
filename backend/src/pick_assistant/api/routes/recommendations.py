"""REST endpoints for recommendations, stats and cache management."""

from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from pick_assistant.errors import DataUnavailableError, InputError
from pick_assistant.models.draft import DraftPhase, DraftState, PickedEntity
from pick_assistant.services.draft_service import DraftService
from pick_assistant.utils.role_normalizer import normalize_role, normalize_role_strict

router = APIRouter(prefix="/api", tags=["recommendations"])


class PickedEntityModel(BaseModel):
    """One champion slot in the draft."""

    entity_id: int
    role: Optional[str] = None
    player_id: Optional[str] = None


class DraftStateModel(BaseModel):
    """Champion select snapshot as sent by the draft watcher."""

    own_picks: list[PickedEntityModel] = Field(default_factory=list)
    opponent_picks: list[PickedEntityModel] = Field(default_factory=list)
    banned_entity_ids: list[int] = Field(default_factory=list)
    my_role: Optional[str] = None
    phase: DraftPhase = DraftPhase.PICK
    timer: int = 0

    def to_draft_state(self) -> DraftState:
        return DraftState(
            own_picks=[_to_picked(p) for p in self.own_picks],
            opponent_picks=[_to_picked(p) for p in self.opponent_picks],
            banned_entity_ids=set(self.banned_entity_ids),
            my_role=normalize_role_strict(self.my_role) if self.my_role else None,
            phase=self.phase,
            timer=self.timer,
        )


def _to_picked(pick: PickedEntityModel) -> PickedEntity:
    return PickedEntity(
        entity_id=pick.entity_id,
        role=normalize_role(pick.role),
        player_id=pick.player_id,
    )


class RecommendationRequest(BaseModel):
    """Request body for generating recommendations."""

    current_state: DraftStateModel
    weights: Optional[dict[str, float]] = None
    top_n: Optional[int] = None


class WarmupRequest(BaseModel):
    """Optional warmup scope; defaults to popular champions in every role."""

    entity_ids: Optional[list[int]] = None
    roles: Optional[list[str]] = None


def _get_service(request: Request) -> DraftService:
    return request.app.state.draft_service


def _to_http_error(error: Exception) -> HTTPException:
    if isinstance(error, InputError):
        return HTTPException(status_code=400, detail=str(error))
    return HTTPException(status_code=503, detail=str(error))


@router.get("/status")
async def get_status(request: Request):
    """Service diagnostics: patch, cache and rate limiter state."""
    return await _get_service(request).status()


@router.post("/recommendations")
async def get_recommendations(request: Request, body: RecommendationRequest):
    """Rank available champions for the current draft."""
    service = _get_service(request)
    try:
        draft_state = body.current_state.to_draft_state()
        response = await service.get_recommendations(
            draft_state, weights=body.weights, top_n=body.top_n
        )
    except (InputError, DataUnavailableError) as e:
        raise _to_http_error(e) from e
    return response.to_dict()


@router.get("/champions")
async def list_champions(request: Request):
    """Champion catalog for the current patch."""
    try:
        catalog = await _get_service(request).get_catalog()
    except DataUnavailableError as e:
        raise _to_http_error(e) from e
    return {
        "champions": [
            {
                "id": champ.id,
                "key": champ.key,
                "name": champ.name,
                "title": champ.title,
                "tags": list(champ.tags),
            }
            for champ in sorted(catalog.values(), key=lambda c: c.name)
        ]
    }


@router.get("/champion/{entity_id}/stats/{role}")
async def get_champion_stats(request: Request, entity_id: int, role: str):
    """Stats for one champion in one role."""
    try:
        normalized = normalize_role_strict(role)
        stats = await _get_service(request).get_entity_stats(entity_id, normalized)
    except (InputError, DataUnavailableError) as e:
        raise _to_http_error(e) from e
    if stats is None:
        raise HTTPException(status_code=404, detail="Stats not found")
    return stats


@router.post("/cache/clear")
async def clear_cache(request: Request):
    _get_service(request).clear_cache()
    return {"success": True, "message": "Cache cleared"}


@router.post("/cache/warmup")
async def warmup_cache(request: Request, body: Optional[WarmupRequest] = None):
    """Pre-populate stats for popular champions."""
    body = body or WarmupRequest()
    try:
        roles = [normalize_role_strict(r) for r in body.roles] if body.roles is not None else None
    except InputError as e:
        raise _to_http_error(e) from e
    result = await _get_service(request).warmup_cache(entity_ids=body.entity_ids, roles=roles)
    return {"success": True, **result}
