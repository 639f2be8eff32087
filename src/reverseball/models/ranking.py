"""Request-scoped ranking containers produced by the qualification pipeline."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from .player import PlayerRecord, PlayerSummary


class EnrichmentAnnotation(BaseModel):
    """Predictive scores attached to a qualified player."""

    current_score: float | None = None
    future_score: float | None = None
    score_growth: float | None = None
    trajectory_label: str = "Unknown"
    suitable_roles: List[str] = Field(default_factory=list)
    confidence: float = 0.75

    model_config = ConfigDict(frozen=True)


class EnrichmentStatus(str, Enum):
    DISABLED = "disabled"
    SKIPPED = "skipped"
    UNAVAILABLE = "unavailable"
    FAILED = "failed"
    APPLIED = "applied"


@dataclass(frozen=True)
class QualificationResult:
    """A record that passed a position rule, with its rank score."""

    player: PlayerSummary
    source: PlayerRecord
    rank_score: float
    insights: EnrichmentAnnotation | None = None

    @property
    def future_score(self) -> float:
        if self.insights is None or self.insights.future_score is None:
            return 0.0
        if not math.isfinite(self.insights.future_score):
            return 0.0
        return self.insights.future_score


@dataclass(frozen=True)
class PlayerDetail:
    """Single-player lookup view (all stored fields plus optional insights)."""

    player: PlayerRecord
    insights: EnrichmentAnnotation | None = None


@dataclass(frozen=True)
class RankedPlayer:
    id: int
    player: PlayerSummary
    rank_score: float
    insights: EnrichmentAnnotation | None = None


@dataclass(frozen=True)
class RankedList:
    role: str
    players: Tuple[RankedPlayer, ...]
    enrichment: EnrichmentStatus
    enriched_count: int = 0

    def __len__(self) -> int:
        return len(self.players)
