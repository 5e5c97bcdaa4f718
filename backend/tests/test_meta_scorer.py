"""Tests for meta scorer."""
import pytest

from pick_assistant.models.stats import Tier
from pick_assistant.services.scorers.meta_scorer import MetaScorer, clamp_score

from conftest import make_stats


@pytest.fixture
def scorer():
    return MetaScorer()


@pytest.mark.parametrize(
    "win_rate,expected",
    [(0.30, 0.0), (0.45, 0.0), (0.50, 50.0), (0.523, 73.0), (0.55, 100.0), (0.60, 100.0)],
)
def test_win_rate_score(scorer, win_rate, expected):
    assert scorer.get_win_rate_score(make_stats(1, win_rate=win_rate)) == pytest.approx(expected)


def test_popularity_uses_measured_pick_rate(scorer):
    stats = make_stats(1, pick_rate=0.04, pick_rate_measured=True)
    assert scorer.get_popularity_score(stats) == pytest.approx(40.0)

    stats = make_stats(1, pick_rate=0.25, pick_rate_measured=True)
    assert scorer.get_popularity_score(stats) == 100.0


@pytest.mark.parametrize(
    "tier,expected",
    [(Tier.S, 80.0), (Tier.A, 60.0), (Tier.B, 40.0), (Tier.C, 20.0), (Tier.D, 10.0)],
)
def test_popularity_falls_back_to_tier(scorer, tier, expected):
    """Placeholder pick rates are ignored in favor of the tier."""
    stats = make_stats(1, tier=tier, pick_rate=0.05, pick_rate_measured=False)
    assert scorer.get_popularity_score(stats) == expected


def test_clamp_score():
    assert clamp_score(-5) == 0.0
    assert clamp_score(105) == 100.0
    assert clamp_score(42.5) == 42.5
