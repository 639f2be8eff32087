"""Canonical player models shared across storage, qualification and enrichment layers."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.config import ConfigDict


def format_market_value(market_value: float | None) -> str:
    """Render a raw euro amount as e.g. ``"4.1M €"`` or ``"500K €"``."""

    if not market_value:
        return "0 €"
    if market_value >= 1_000_000:
        return f"{market_value / 1_000_000:.1f}M €"
    if market_value >= 1_000:
        return f"{market_value / 1_000:.0f}K €"
    if float(market_value).is_integer():
        return f"{int(market_value)} €"
    return f"{market_value} €"


class PlayerSummary(BaseModel):
    """Display projection of a player returned to callers."""

    name: str | None = None
    age: int | None = None
    club: str | None = None
    footed: str | None = None
    height_cm: float | None = None
    market_value: str = "0 €"
    market_value_raw: float = 0
    image: str | None = None
    league: str | None = None
    league_country: str | None = None
    nationality: str | None = None
    positions: str | None = None

    model_config = ConfigDict(frozen=True)


class PlayerRecord(BaseModel):
    """One player's season snapshot as read from the record source."""

    name: str
    external_id: str | None = Field(default=None, alias="sofascore_id")
    age: int | None = None
    club: str | None = None
    league: str | None = None
    league_country: str | None = None
    nationality: str | None = None
    footed: str | None = None
    height_cm: float | None = None
    market_value: float | None = None
    image: str | None = None
    positions: List[str] = Field(default_factory=list)
    stats: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    @model_validator(mode="before")
    @classmethod
    def _drop_private_keys(cls, data: Any) -> Any:
        # storage keys such as "_id" never travel with the record
        if isinstance(data, Mapping):
            return {key: value for key, value in data.items() if not str(key).startswith("_")}
        return data

    @field_validator("external_id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        return str(value)

    @field_validator("positions", mode="before")
    @classmethod
    def _coerce_positions(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @field_validator("stats", mode="before")
    @classmethod
    def _coerce_stats(cls, value: Any) -> Any:
        return value or {}

    def to_summary(self) -> PlayerSummary:
        return PlayerSummary(
            name=self.name or None,
            age=self.age or None,
            club=self.club or None,
            footed=self.footed or None,
            height_cm=self.height_cm or None,
            market_value=format_market_value(self.market_value),
            market_value_raw=self.market_value or 0,
            image=self.image or None,
            league=self.league or None,
            league_country=self.league_country or None,
            nationality=self.nationality or None,
            positions=",".join(self.positions) if self.positions else None,
        )

    def to_document(self) -> Dict[str, Any]:
        """Return the storage document shape (``sofascore_id`` key and extra scraped fields included)."""

        return self.model_dump(by_alias=True)
