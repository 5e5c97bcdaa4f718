"""Shared fixtures and fakes."""

import pytest

from pick_assistant.models.draft import Role
from pick_assistant.models.stats import Champion, EntityStats, MatchRecord, Participant, calculate_tier


@pytest.fixture
def anyio_backend():
    return "asyncio"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


def make_stats(
    entity_id: int,
    role: Role = Role.MID,
    win_rate: float = 0.52,
    sample_size: int = 100,
    tier=None,
    pick_rate: float = 0.05,
    pick_rate_measured: bool = False,
) -> EntityStats:
    return EntityStats(
        entity_id=entity_id,
        role=role,
        win_rate=win_rate,
        pick_rate=pick_rate,
        ban_rate=0.0,
        sample_size=sample_size,
        tier=tier or calculate_tier(win_rate),
        pick_rate_measured=pick_rate_measured,
        source="aggregated" if pick_rate_measured else "sampled",
    )


def make_champion(entity_id: int, name: str = "") -> Champion:
    name = name or f"Champ{entity_id}"
    return Champion(id=entity_id, key=name, name=name, title="", tags=())


def make_match(
    match_id: str,
    entity_id: int,
    role: Role = Role.MID,
    win: bool = True,
    allies: tuple = (),
    enemies: tuple = (),
) -> MatchRecord:
    """A match with entity_id on team 100, plus given ally/enemy champion ids."""
    participants = [
        Participant(entity_id=entity_id, role=role, team_id=100, win=win, kills=5, deaths=2, assists=5)
    ]
    participants += [
        Participant(entity_id=a, role=None, team_id=100, win=win, kills=0, deaths=0, assists=0)
        for a in allies
    ]
    participants += [
        Participant(entity_id=e, role=None, team_id=200, win=not win, kills=0, deaths=0, assists=0)
        for e in enemies
    ]
    return MatchRecord(match_id=match_id, game_duration=1800, participants=tuple(participants))
