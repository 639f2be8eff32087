"""Player and ranking models."""

from .player import PlayerRecord, PlayerSummary, format_market_value
from .ranking import (
    EnrichmentAnnotation,
    EnrichmentStatus,
    PlayerDetail,
    QualificationResult,
    RankedList,
    RankedPlayer,
)

__all__ = [
    "EnrichmentAnnotation",
    "EnrichmentStatus",
    "PlayerDetail",
    "PlayerRecord",
    "PlayerSummary",
    "QualificationResult",
    "RankedList",
    "RankedPlayer",
    "format_market_value",
]
