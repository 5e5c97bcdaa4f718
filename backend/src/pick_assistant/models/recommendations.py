"""Recommendation models for champion select suggestions."""

from dataclasses import asdict, dataclass, field
from typing import Optional

from pick_assistant.models.draft import Role
from pick_assistant.models.stats import EntityStats


@dataclass(frozen=True)
class Weights:
    """Relative importance of the four score components."""

    win_rate: float = 0.40
    popularity: float = 0.10
    counter: float = 0.30
    synergy: float = 0.20

    @property
    def total(self) -> float:
        return self.win_rate + self.popularity + self.counter + self.synergy

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class ScoreBreakdown:
    """Individual sub-scores, each clamped to [0, 100]."""

    win_rate_score: float
    popularity_score: float
    counter_score: float
    synergy_score: float


@dataclass
class RecommendationScore:
    """A scored champion candidate."""

    entity_id: int
    entity_name: str
    role: Role
    total_score: float
    breakdown: ScoreBreakdown
    stats: EntityStats
    reasoning: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON response."""
        return asdict(self)


@dataclass
class RecommendationResponse:
    """Ranked recommendations for one request."""

    recommendations: list[RecommendationScore]
    timestamp: int  # Unix epoch milliseconds
    patch: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "recommendations": [rec.to_dict() for rec in self.recommendations],
            "timestamp": self.timestamp,
            "patch": self.patch,
        }
