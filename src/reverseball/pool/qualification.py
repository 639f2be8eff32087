"""Stream candidate records through a position rule and rank the survivors."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, List

from reverseball.models import PlayerRecord, QualificationResult
from reverseball.pool.metrics import PlayerMetrics

if TYPE_CHECKING:
    from reverseball.config.positions import PositionRule


logger = logging.getLogger(__name__)


def qualify(records: Iterable[PlayerRecord], rule: "PositionRule") -> List[QualificationResult]:
    """Return records passing ``rule``, sorted by rank score descending.

    The sort is stable: equal scores keep the order in which the source yielded
    them. Errors raised while iterating ``records`` propagate unchanged.
    """

    results: List[QualificationResult] = []
    seen = 0
    for record in records:
        seen += 1
        if not rule.matches(record):
            continue
        metrics = PlayerMetrics(record.stats)
        score = rule.rank_score(metrics)
        if not rule.passes(metrics, score=score):
            continue
        results.append(
            QualificationResult(player=record.to_summary(), source=record, rank_score=score)
        )

    results.sort(key=lambda item: item.rank_score, reverse=True)
    logger.info("Rule %s qualified %s/%s records", rule.key, len(results), seen)
    return results


__all__ = ["qualify"]
