"""Draft state models for a live champion select."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Role(str, Enum):
    """Lane/position roles. Lowercase canonical values."""

    TOP = "top"
    JUNGLE = "jungle"
    MID = "mid"
    BOT = "bot"
    SUPPORT = "support"


class DraftPhase(str, Enum):
    """Phases of a solo queue champion select."""

    BAN = "ban"
    PICK = "pick"
    FINISHED = "finished"


@dataclass(frozen=True)
class PickedEntity:
    """A champion locked (or hovered) by a player in the draft."""

    entity_id: int
    role: Optional[Role] = None
    player_id: Optional[str] = None


@dataclass
class DraftState:
    """Snapshot of a champion select session.

    Produced by the draft watcher; read-only to the recommendation core.
    """

    own_picks: list[PickedEntity] = field(default_factory=list)
    opponent_picks: list[PickedEntity] = field(default_factory=list)
    banned_entity_ids: set[int] = field(default_factory=set)
    my_role: Optional[Role] = None
    phase: DraftPhase = DraftPhase.PICK
    timer: int = 0  # Remaining milliseconds in the current phase

    @property
    def own_pick_ids(self) -> list[int]:
        """Champion ids picked by our team (0 marks an empty slot)."""
        return [p.entity_id for p in self.own_picks if p.entity_id > 0]

    @property
    def opponent_pick_ids(self) -> list[int]:
        """Champion ids picked by the enemy team."""
        return [p.entity_id for p in self.opponent_picks if p.entity_id > 0]

    @property
    def unavailable_ids(self) -> set[int]:
        """Every champion that can no longer be recommended."""
        return set(self.own_pick_ids) | set(self.opponent_pick_ids) | set(self.banned_entity_ids)
