"""Pydantic models for API I/O."""

from .players import (
    InsightsResponse,
    PlayerDetailResponse,
    PlayerListResponse,
    PlayerSummaryResponse,
    RankedListResponse,
    RankedPlayerResponse,
    RoleResponse,
)

__all__ = [
    "InsightsResponse",
    "PlayerDetailResponse",
    "PlayerListResponse",
    "PlayerSummaryResponse",
    "RankedListResponse",
    "RankedPlayerResponse",
    "RoleResponse",
]
