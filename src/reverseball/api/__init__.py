"""REST API for position rankings."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List

from fastapi import FastAPI, HTTPException
from starlette.concurrency import run_in_threadpool

from reverseball.api.schemas import (
    InsightsResponse,
    PlayerDetailResponse,
    PlayerListResponse,
    PlayerSummaryResponse,
    RankedListResponse,
    RankedPlayerResponse,
    RoleResponse,
)
from reverseball.config import Settings, get_rule, iter_rules
from reverseball.enrichment import EnrichmentClient
from reverseball.models import EnrichmentAnnotation, PlayerDetail, RankedList, format_market_value
from reverseball.persistence import PlayerStore, RecordSourceError
from reverseball.pipeline import list_players, lookup_player, rank_role


logger = logging.getLogger(__name__)

_HIDDEN_DETAIL_FIELDS = {"sofascore_id", "season", "scraped_at"}


def _insights_to_response(insights: EnrichmentAnnotation | None) -> InsightsResponse | None:
    if insights is None:
        return None
    return InsightsResponse.model_validate(insights.model_dump())


def ranked_list_to_response(ranked: RankedList) -> RankedListResponse:
    data = [
        RankedPlayerResponse(
            id=entry.id,
            rank_score=entry.rank_score,
            insights=_insights_to_response(entry.insights),
            **entry.player.model_dump(),
        )
        for entry in ranked.players
    ]
    return RankedListResponse(
        role=ranked.role,
        count=len(data),
        enriched=ranked.enriched_count,
        enrichment=ranked.enrichment.value,
        data=data,
    )


def player_detail_to_response(detail: PlayerDetail) -> PlayerDetailResponse:
    document: Dict[str, Any] = {
        key: value
        for key, value in detail.player.to_document().items()
        if key not in _HIDDEN_DETAIL_FIELDS
    }
    document["market_value"] = format_market_value(detail.player.market_value)
    document["positions"] = ",".join(detail.player.positions)
    return PlayerDetailResponse(data=document, insights=_insights_to_response(detail.insights))


def create_app(
    settings: Settings | None = None,
    *,
    store: PlayerStore | None = None,
    enrichment: EnrichmentClient | None = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    owns_enrichment = enrichment is None
    store = store or PlayerStore(settings.db_path)
    enrichment = enrichment or EnrichmentClient.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if enrichment.enabled:
            await run_in_threadpool(enrichment.check_availability)
        try:
            yield
        finally:
            if owns_enrichment:
                enrichment.close()

    app = FastAPI(title="reverseball rankings", lifespan=lifespan)
    app.state.player_store = store
    app.state.enrichment = enrichment

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {"status": "ok", "ml_available": enrichment.enabled and enrichment.is_healthy}

    @app.get("/roles", response_model=List[RoleResponse])
    async def roles() -> List[RoleResponse]:
        return [
            RoleResponse(
                key=rule.key,
                label=rule.label,
                role_codes=sorted(rule.role_codes),
                min_score=rule.min_score,
            )
            for rule in iter_rules()
        ]

    @app.get("/players", response_model=PlayerListResponse)
    def all_players() -> PlayerListResponse:
        try:
            players = list_players(store)
        except RecordSourceError as exc:
            logger.error("Record source failure while listing players: %s", exc)
            raise HTTPException(status_code=503, detail="Player store unavailable") from exc
        data = [PlayerSummaryResponse.model_validate(player.model_dump()) for player in players]
        return PlayerListResponse(count=len(data), data=data)

    @app.get("/players/{role}", response_model=RankedListResponse)
    def ranked_players(role: str) -> RankedListResponse:
        try:
            get_rule(role)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Unknown role {role!r}") from exc
        try:
            ranked = rank_role(store, role, enrichment=enrichment)
        except RecordSourceError as exc:
            logger.error("Record source failure while ranking %s: %s", role, exc)
            raise HTTPException(status_code=503, detail="Player store unavailable") from exc
        return ranked_list_to_response(ranked)

    @app.get("/player/{name}", response_model=PlayerDetailResponse)
    def player_detail(name: str) -> PlayerDetailResponse:
        try:
            detail = lookup_player(store, name, enrichment=enrichment)
        except RecordSourceError as exc:
            logger.error("Record source failure while reading %s: %s", name, exc)
            raise HTTPException(status_code=503, detail="Player store unavailable") from exc
        if detail is None:
            raise HTTPException(status_code=404, detail="Player not found")
        return player_detail_to_response(detail)

    return app
