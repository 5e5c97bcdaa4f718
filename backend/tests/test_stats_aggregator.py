"""Tests for the match-sampling stats aggregator."""

import pytest

from pick_assistant.errors import DataUnavailableError
from pick_assistant.models.draft import Role
from pick_assistant.models.provider import ProviderResult
from pick_assistant.models.stats import PLACEHOLDER_PICK_RATE, Tier
from pick_assistant.services.cache import TTLCache
from pick_assistant.services.stats_aggregator import StatsAggregator

from conftest import make_match

pytestmark = pytest.mark.anyio

AHRI = 103
ZED = 238
LEONA = 89


class FakeRiotClient:
    """In-memory stand-in for RiotClient keyed by player id."""

    def __init__(self, matches_by_player: dict, challenger=None, master=None):
        self.matches_by_player = matches_by_player
        self.challenger = challenger if challenger is not None else ProviderResult.found(list(matches_by_player))
        self.master = master if master is not None else ProviderResult.found([])
        self.summoner_calls = []
        self.ladder_calls = 0
        self.match_id_calls = []

    async def get_challenger_players(self):
        self.ladder_calls += 1
        return self.challenger

    async def get_master_players(self):
        return self.master

    async def get_summoner_by_puuid(self, puuid):
        self.summoner_calls.append(puuid)
        if puuid not in self.matches_by_player:
            return ProviderResult.not_found()
        return ProviderResult.found({"puuid": puuid})

    async def get_match_ids(self, puuid, count=20, queue=None):
        self.match_id_calls.append((puuid, count, queue))
        return ProviderResult.found([m.match_id for m in self.matches_by_player[puuid]])

    async def get_matches_batch(self, match_ids):
        by_id = {m.match_id: m for ms in self.matches_by_player.values() for m in ms}
        return [by_id[i] for i in match_ids]


def ahri_games(player: str, wins: int, losses: int, **kwargs) -> list:
    games = [make_match(f"{player}-w{i}", AHRI, Role.MID, win=True, **kwargs) for i in range(wins)]
    games += [make_match(f"{player}-l{i}", AHRI, Role.MID, win=False, **kwargs) for i in range(losses)]
    return games


def make_aggregator(client, cache=None, **kwargs) -> StatsAggregator:
    return StatsAggregator(client, cache or TTLCache(), **kwargs)


async def test_thirty_matches_sixteen_wins():
    client = FakeRiotClient({"p1": ahri_games("p1", wins=16, losses=14)})
    aggregator = make_aggregator(client)

    stats = await aggregator.get_entity_stats(AHRI, Role.MID)

    assert stats is not None
    assert stats.sample_size == 30
    assert stats.win_rate == pytest.approx(0.5333, abs=1e-4)
    assert stats.tier == Tier.S
    assert stats.pick_rate == PLACEHOLDER_PICK_RATE
    assert stats.pick_rate_measured is False
    assert stats.source == "sampled"
    assert stats.avg_game_duration == 1800
    assert stats.avg_kda == 5.0


async def test_below_minimum_sample_is_absent():
    client = FakeRiotClient({"p1": ahri_games("p1", wins=15, losses=14)})
    aggregator = make_aggregator(client)

    assert await aggregator.get_entity_stats(AHRI, Role.MID) is None


async def test_other_roles_are_excluded():
    games = ahri_games("p1", wins=20, losses=10)
    games += [make_match(f"top-{i}", AHRI, Role.TOP) for i in range(10)]
    client = FakeRiotClient({"p1": games})
    aggregator = make_aggregator(client)

    mid = await aggregator.get_sample_matches(AHRI, Role.MID)
    top = await aggregator.get_sample_matches(AHRI, Role.TOP)

    assert len(mid) == 30
    assert len(top) == 10


async def test_stops_at_target_sample_size():
    client = FakeRiotClient({
        "p1": ahri_games("p1", wins=10, losses=5),
        "p2": ahri_games("p2", wins=10, losses=5),
        "p3": ahri_games("p3", wins=10, losses=5),
    })
    aggregator = make_aggregator(client, target_sample_size=20)

    sample = await aggregator.get_sample_matches(AHRI, Role.MID)

    assert len(sample) == 20
    assert client.summoner_calls == ["p1", "p2"]


async def test_only_first_n_players_sampled():
    players = {f"p{i}": ahri_games(f"p{i}", wins=1, losses=0) for i in range(5)}
    client = FakeRiotClient(players)
    aggregator = make_aggregator(client, players_to_sample=3, matches_per_player=7, queue_id=420)

    await aggregator.get_sample_matches(AHRI, Role.MID)

    assert client.summoner_calls == ["p0", "p1", "p2"]
    assert client.match_id_calls[0] == ("p0", 7, 420)


async def test_unknown_players_are_skipped():
    client = FakeRiotClient(
        {"p1": ahri_games("p1", wins=20, losses=15)},
        challenger=ProviderResult.found(["ghost", "p1"]),
    )
    aggregator = make_aggregator(client)

    stats = await aggregator.get_entity_stats(AHRI, Role.MID)

    assert stats.sample_size == 35
    assert client.summoner_calls == ["ghost", "p1"]


async def test_shared_matches_counted_once():
    # Two ladder players in the same 30 games, plus 4 of p2's own
    shared = ahri_games("shared", wins=16, losses=14)
    client = FakeRiotClient({
        "p1": shared,
        "p2": shared + ahri_games("p2", wins=0, losses=4),
    })
    aggregator = make_aggregator(client)

    sample = await aggregator.get_sample_matches(AHRI, Role.MID)
    stats = await aggregator.get_entity_stats(AHRI, Role.MID)

    assert len(sample) == 34
    assert len({m.match_id for m in sample}) == 34
    assert stats.sample_size == 34
    assert stats.win_rate == pytest.approx(16 / 34)


async def test_raw_sample_is_reused_across_queries():
    client = FakeRiotClient({"p1": ahri_games("p1", wins=20, losses=15, enemies=(ZED,))})
    aggregator = make_aggregator(client)

    await aggregator.get_entity_stats(AHRI, Role.MID)
    await aggregator.get_matchup_stats(AHRI, ZED, Role.MID)
    await aggregator.get_synergy_stats(AHRI, LEONA, Role.MID)

    assert client.summoner_calls == ["p1"]
    assert client.ladder_calls == 1


async def test_stats_cached_until_expiry(clock):
    client = FakeRiotClient({"p1": ahri_games("p1", wins=20, losses=15)})
    aggregator = make_aggregator(client, cache=TTLCache(clock=clock), stats_ttl=3600, sample_ttl=7200)

    first = await aggregator.get_entity_stats(AHRI, Role.MID)
    clock.advance(3601)
    second = await aggregator.get_entity_stats(AHRI, Role.MID)

    assert first == second
    # Stats expired but the raw sample did not, so no refetch
    assert client.summoner_calls == ["p1"]


async def test_empty_ladder_is_not_cached():
    client = FakeRiotClient(
        {"p1": ahri_games("p1", wins=20, losses=15)},
        challenger=ProviderResult.failed(DataUnavailableError("down")),
        master=ProviderResult.failed(DataUnavailableError("down")),
    )
    aggregator = make_aggregator(client)

    assert await aggregator.get_entity_stats(AHRI, Role.MID) is None

    client.challenger = ProviderResult.found(["p1"])
    stats = await aggregator.get_entity_stats(AHRI, Role.MID)
    assert stats is not None


async def test_master_players_follow_challenger():
    client = FakeRiotClient(
        {"c1": [], "m1": []},
        challenger=ProviderResult.found(["c1"]),
        master=ProviderResult.found(["m1"]),
    )
    aggregator = make_aggregator(client)

    assert await aggregator.get_high_elo_players() == ["c1", "m1"]


class TestMatchup:
    async def test_matchup_counts_games_with_opponent(self):
        games = ahri_games("p1", wins=8, losses=4, enemies=(ZED,))
        games += ahri_games("x1", wins=10, losses=10)
        client = FakeRiotClient({"p1": games})
        aggregator = make_aggregator(client)

        matchup = await aggregator.get_matchup_stats(AHRI, ZED, Role.MID)

        assert matchup.sample_size == 12
        assert matchup.win_rate == pytest.approx(8 / 12)

    async def test_matchup_below_threshold_is_absent(self):
        games = ahri_games("p1", wins=5, losses=4, enemies=(ZED,))
        client = FakeRiotClient({"p1": games})
        aggregator = make_aggregator(client, min_matchup_sample=10)

        assert await aggregator.get_matchup_stats(AHRI, ZED, Role.MID) is None


class TestSynergy:
    async def test_synergy_requires_same_team(self):
        games = ahri_games("p1", wins=5, losses=1, allies=(LEONA,))
        # Leona on the enemy team does not count as synergy
        games += ahri_games("p2", wins=0, losses=6, enemies=(LEONA,))
        client = FakeRiotClient({"p1": games})
        aggregator = make_aggregator(client)

        synergy = await aggregator.get_synergy_stats(AHRI, LEONA, Role.MID)

        assert synergy.sample_size == 6
        assert synergy.win_rate == pytest.approx(5 / 6)

    async def test_synergy_below_threshold_is_absent(self):
        games = ahri_games("p1", wins=3, losses=1, allies=(LEONA,))
        client = FakeRiotClient({"p1": games})
        aggregator = make_aggregator(client, min_synergy_sample=5)

        assert await aggregator.get_synergy_stats(AHRI, LEONA, Role.MID) is None

    async def test_matchup_counts_ally_as_participant(self):
        games = ahri_games("p1", wins=6, losses=4, allies=(LEONA,))
        client = FakeRiotClient({"p1": games})
        aggregator = make_aggregator(client)

        matchup = await aggregator.get_matchup_stats(AHRI, LEONA, Role.MID)

        assert matchup.sample_size == 10
