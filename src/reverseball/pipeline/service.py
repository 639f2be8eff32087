"""Qualification and enrichment pipeline producing the final ranked list."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from reverseball.config.positions import PositionRule, get_rule
from reverseball.enrichment import EnrichmentClient
from reverseball.models import (
    EnrichmentStatus,
    PlayerDetail,
    PlayerRecord,
    PlayerSummary,
    QualificationResult,
    RankedList,
    RankedPlayer,
)
from reverseball.persistence import PlayerStore, RecordSource
from reverseball.pool import qualify


logger = logging.getLogger(__name__)


def assign_ids(results: Sequence[QualificationResult]) -> tuple[RankedPlayer, ...]:
    return tuple(
        RankedPlayer(
            id=index,
            player=item.player,
            rank_score=item.rank_score,
            insights=item.insights,
        )
        for index, item in enumerate(results, start=1)
    )


def run(
    records: Iterable[PlayerRecord],
    rule: PositionRule,
    *,
    enrichment: Optional[EnrichmentClient] = None,
) -> RankedList:
    """Qualify ``records`` with ``rule``, enrich, and number the final order from 1.

    Without an enrichment client the qualification order is final.
    """

    qualified = qualify(records, rule)
    display: List[QualificationResult] = list(qualified)
    sources: List[PlayerRecord] = [item.source for item in qualified]

    if enrichment is None:
        final, status, matched = display, EnrichmentStatus.DISABLED, 0
    else:
        batch = enrichment.enrich_batch(display, sources)
        final, status, matched = batch.results, batch.status, batch.matched

    ranked = RankedList(
        role=rule.key,
        players=assign_ids(final),
        enrichment=status,
        enriched_count=matched,
    )
    logger.info(
        "Ranked %s players for %s (enrichment=%s, annotated=%s)",
        len(ranked),
        rule.key,
        status.value,
        matched,
    )
    return ranked


def rank_role(
    source: RecordSource,
    role: str,
    *,
    enrichment: Optional[EnrichmentClient] = None,
) -> RankedList:
    """Resolve ``role`` and run the pipeline over matching records from ``source``."""

    rule = get_rule(role)
    return run(source.iter_by_positions(rule.role_codes), rule, enrichment=enrichment)


def lookup_player(
    store: PlayerStore,
    name: str,
    *,
    enrichment: Optional[EnrichmentClient] = None,
) -> Optional[PlayerDetail]:
    record = store.get_player_by_name(name)
    if record is None:
        return None
    detail = PlayerDetail(player=record)
    if enrichment is None:
        return detail
    return enrichment.annotate_one(detail, record)


def list_players(store: PlayerStore) -> List[PlayerSummary]:
    """Display projection of every stored player, unranked and unfiltered."""

    return [record.to_summary() for record in store.iter_players()]
