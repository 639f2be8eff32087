from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class InsightsResponse(BaseModel):
    current_score: float | None = None
    future_score: float | None = None
    score_growth: float | None = None
    trajectory_label: str = "Unknown"
    suitable_roles: List[str] = Field(default_factory=list)
    confidence: float = 0.75


class PlayerSummaryResponse(BaseModel):
    name: str | None
    age: int | None
    club: str | None
    footed: str | None
    height_cm: float | None
    market_value: str
    market_value_raw: float
    image: str | None
    league: str | None
    league_country: str | None
    nationality: str | None
    positions: str | None


class RankedPlayerResponse(PlayerSummaryResponse):
    id: int
    rank_score: float
    insights: InsightsResponse | None = None


class RankedListResponse(BaseModel):
    success: bool = True
    role: str
    count: int
    enriched: int
    enrichment: str
    data: List[RankedPlayerResponse]


class PlayerListResponse(BaseModel):
    success: bool = True
    count: int
    data: List[PlayerSummaryResponse]


class PlayerDetailResponse(BaseModel):
    success: bool = True
    data: Dict[str, Any]
    insights: InsightsResponse | None = None


class RoleResponse(BaseModel):
    key: str
    label: str
    role_codes: List[str]
    min_score: float
