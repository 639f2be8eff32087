"""Wire formats exchanged with the predictive scoring provider."""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from reverseball.models import EnrichmentAnnotation, PlayerRecord


def _parse_age(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        match = re.match(r"\s*-?\d+", value)
        if match:
            return int(match.group())
    return 0


def parse_market_value(value: Any) -> float:
    """Return a raw euro amount, accepting display strings like ``"4.5M €"``."""

    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip().upper()
    cleaned = re.sub(r"[^0-9.]", "", text)
    try:
        amount = float(cleaned) if cleaned else 0.0
    except ValueError:
        return 0.0
    if "M" in text:
        return amount * 1_000_000
    if "K" in text:
        return amount * 1_000
    return amount


def build_prediction_payload(record: PlayerRecord) -> Dict[str, Any]:
    """Provider request body for one record; stats are sent unscaled."""

    return {
        "name": record.name or None,
        "age": _parse_age(record.age),
        "club": record.club or None,
        "footed": record.footed or None,
        "height_cm": record.height_cm or None,
        "market_value": parse_market_value(record.market_value),
        "league": record.league or None,
        "league_country": record.league_country or None,
        "nationality": record.nationality or None,
        "positions": list(record.positions),
        "sofascore_id": record.external_id,
        "stats": dict(record.stats),
    }


class Prediction(BaseModel):
    """One prediction object returned by ``/predict`` or ``/predict_batch``."""

    sofascore_id: Optional[str] = None
    name: Optional[str] = None
    current_potential: Optional[float] = None
    future_potential: Optional[float] = None
    potential_growth: Optional[float] = None
    development_trajectory: Optional[str] = None
    suitable_roles: List[str] = Field(default_factory=list)
    confidence_score: Optional[float] = None

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    @field_validator("sofascore_id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        return str(value)

    @field_validator("suitable_roles", mode="before")
    @classmethod
    def _coerce_roles(cls, value: Any) -> Any:
        return value or []

    def to_annotation(self) -> EnrichmentAnnotation:
        return EnrichmentAnnotation(
            current_score=self.current_potential,
            future_score=self.future_potential,
            score_growth=self.potential_growth,
            trajectory_label=self.development_trajectory or "Unknown",
            suitable_roles=list(self.suitable_roles),
            confidence=self.confidence_score or 0.75,
        )


__all__ = ["Prediction", "build_prediction_payload", "parse_market_value"]
