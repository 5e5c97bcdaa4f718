"""Champion statistics and raw match record models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Optional

from pick_assistant.models.draft import Role

# Pick/ban rate cannot be measured from a match sample; these stand in for them
PLACEHOLDER_PICK_RATE = 0.05
PLACEHOLDER_BAN_RATE = 0.0


class Tier(str, Enum):
    """Coarse strength grade."""

    S = "S"
    A = "A"
    B = "B"
    C = "C"
    D = "D"


def calculate_tier(win_rate: float) -> Tier:
    """Grade a champion from win rate alone (sampled stats)."""
    if win_rate >= 0.53:
        return Tier.S
    if win_rate >= 0.51:
        return Tier.A
    if win_rate >= 0.49:
        return Tier.B
    if win_rate >= 0.47:
        return Tier.C
    return Tier.D


def calculate_tier_with_pick_rate(win_rate: float, pick_rate: float) -> Tier:
    """Grade a champion from win rate and a measured pick rate.

    Both rates are fractions in [0, 1].
    """
    if win_rate >= 0.52 and pick_rate >= 0.03:
        return Tier.S
    if win_rate >= 0.51 or (win_rate >= 0.50 and pick_rate >= 0.05):
        return Tier.A
    if win_rate >= 0.49 or pick_rate >= 0.05:
        return Tier.B
    if win_rate >= 0.47:
        return Tier.C
    return Tier.D


@dataclass(frozen=True)
class EntityStats:
    """Per-champion, per-role performance statistics."""

    entity_id: int
    role: Role
    win_rate: float
    pick_rate: float
    ban_rate: Optional[float]
    sample_size: int
    tier: Tier
    rank: int = 0
    # False when pick_rate is a placeholder rather than a measurement
    pick_rate_measured: bool = False
    source: Literal["sampled", "aggregated"] = "sampled"
    avg_kda: Optional[float] = None
    avg_game_duration: Optional[float] = None  # seconds


@dataclass(frozen=True)
class MatchupStats:
    """Win rate of entity_id in role when facing opponent_id."""

    entity_id: int
    opponent_id: int
    role: Role
    win_rate: float
    sample_size: int


@dataclass(frozen=True)
class SynergyStats:
    """Win rate of entity_id in role when ally_id is on the same team."""

    entity_id: int
    ally_id: int
    role: Role
    win_rate: float
    sample_size: int


@dataclass(frozen=True)
class Participant:
    """One player's line in a match."""

    entity_id: int
    role: Optional[Role]  # None when the provider position is unmapped
    team_id: int
    win: bool
    kills: int = 0
    deaths: int = 0
    assists: int = 0


@dataclass(frozen=True)
class MatchRecord:
    """A finished match, parsed from the provider payload."""

    match_id: str
    game_duration: int  # seconds
    participants: tuple[Participant, ...] = field(default_factory=tuple)

    def find(self, entity_id: int, role: Optional[Role] = None) -> Optional[Participant]:
        """Return the participant playing entity_id (in role, if given)."""
        for participant in self.participants:
            if participant.entity_id != entity_id:
                continue
            if role is not None and participant.role != role:
                continue
            return participant
        return None


@dataclass(frozen=True)
class Champion:
    """Static catalog entry."""

    id: int
    key: str
    name: str
    title: str = ""
    tags: tuple[str, ...] = ()
