"""Explicit outcome type for provider calls."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, Protocol, TypeVar

from pick_assistant.models.draft import Role
from pick_assistant.models.stats import EntityStats, MatchupStats, SynergyStats

T = TypeVar("T")


class Outcome(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class ProviderResult(Generic[T]):
    """Distinguishes a value, a legitimate absence, and a failure.

    A 404 (unranked player, purged match) is NOT_FOUND and is never retried;
    ERROR carries the exception that ended the call.
    """

    outcome: Outcome
    value: Optional[T] = None
    error: Optional[Exception] = None

    @classmethod
    def found(cls, value: T) -> "ProviderResult[T]":
        return cls(Outcome.FOUND, value=value)

    @classmethod
    def not_found(cls) -> "ProviderResult[T]":
        return cls(Outcome.NOT_FOUND)

    @classmethod
    def failed(cls, error: Exception) -> "ProviderResult[T]":
        return cls(Outcome.ERROR, error=error)

    @property
    def is_found(self) -> bool:
        return self.outcome is Outcome.FOUND

    @property
    def is_not_found(self) -> bool:
        return self.outcome is Outcome.NOT_FOUND

    @property
    def is_error(self) -> bool:
        return self.outcome is Outcome.ERROR

    def unwrap(self) -> Optional[T]:
        """Value if found, None if not found; raises the stored error otherwise."""
        if self.error is not None:
            raise self.error
        return self.value


class StatsSource(Protocol):
    """Anything that can answer per-champion stats queries.

    Implemented by the match-sampling aggregator and the pre-aggregated
    provider. All three return None when data is absent or under-sampled.
    """

    async def get_entity_stats(self, entity_id: int, role: Role) -> Optional[EntityStats]: ...

    async def get_matchup_stats(
        self, entity_id: int, opponent_id: int, role: Role
    ) -> Optional[MatchupStats]: ...

    async def get_synergy_stats(
        self, entity_id: int, ally_id: int, role: Role
    ) -> Optional[SynergyStats]: ...
