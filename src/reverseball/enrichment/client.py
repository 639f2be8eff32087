"""HTTP client for the predictive scoring provider.

Every public call fails open: network errors, timeouts, non-2xx responses
and malformed bodies are logged and turned into "no annotation". They are
never raised to the caller. The only exception that escapes is ``ValueError``
for misaligned batch inputs, which is a programming error on the caller's side.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, TypeVar

import httpx
from pydantic import ValidationError

from reverseball.config.settings import Settings
from reverseball.models import (
    EnrichmentAnnotation,
    EnrichmentStatus,
    PlayerRecord,
    QualificationResult,
)

from .payload import Prediction, build_prediction_payload


logger = logging.getLogger(__name__)

_Display = TypeVar("_Display")


@dataclass(frozen=True)
class EnrichmentOutcome:
    """Either an annotation or the reason there is none."""

    annotation: EnrichmentAnnotation | None = None
    reason: str | None = None

    @property
    def available(self) -> bool:
        return self.annotation is not None


@dataclass(frozen=True)
class BatchEnrichment:
    results: List[QualificationResult]
    status: EnrichmentStatus
    matched: int = 0


def _by_future_score(results: Sequence[QualificationResult]) -> List[QualificationResult]:
    return sorted(results, key=lambda item: item.future_score, reverse=True)


class EnrichmentClient:
    """Long-lived provider handle; create once at startup and ``close()`` at shutdown."""

    def __init__(
        self,
        base_url: str,
        *,
        enabled: bool = True,
        health_timeout: float = 5.0,
        timeout: float = 10.0,
        batch_timeout: float = 60.0,
        http_client: httpx.Client | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.enabled = enabled
        self.health_timeout = health_timeout
        self.timeout = timeout
        self.batch_timeout = batch_timeout
        self.is_healthy = False
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(base_url=self.base_url)

    @classmethod
    def from_settings(cls, settings: Settings, *, http_client: httpx.Client | None = None) -> "EnrichmentClient":
        return cls(
            settings.ml_url,
            enabled=settings.ml_enabled,
            health_timeout=settings.ml_health_timeout,
            timeout=settings.ml_timeout,
            batch_timeout=settings.ml_batch_timeout,
            http_client=http_client,
        )

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled
        logger.info("Enrichment client %s", "enabled" if enabled else "disabled")

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def check_availability(self) -> bool:
        """Probe ``/health``; healthy only when the provider reports models loaded."""

        try:
            response = self._http.get(self._url("/health"), timeout=self.health_timeout)
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Enrichment provider health check failed: %s", exc)
            self.is_healthy = False
            return False

        self.is_healthy = isinstance(body, dict) and body.get("models_loaded") is True
        if self.is_healthy:
            logger.info("Enrichment provider is healthy")
        else:
            logger.warning("Enrichment provider reachable but models are not loaded")
        return self.is_healthy

    def predict_one(self, source: PlayerRecord) -> EnrichmentOutcome:
        if not self.enabled:
            return EnrichmentOutcome(reason="disabled")
        if not self.is_healthy:
            return EnrichmentOutcome(reason="unavailable")

        payload = build_prediction_payload(source)
        try:
            response = self._http.post(self._url("/predict"), json=payload, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Prediction failed for player %s: %s (%s)",
                source.name,
                exc,
                exc.response.text[:500],
            )
            return EnrichmentOutcome(reason="request_failed")
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Prediction failed for player %s: %s", source.name, exc)
            return EnrichmentOutcome(reason="request_failed")

        try:
            prediction = Prediction.model_validate(body)
        except ValidationError as exc:
            logger.warning("Invalid prediction for player %s: %s", source.name, exc)
            return EnrichmentOutcome(reason="invalid_response")
        return EnrichmentOutcome(annotation=prediction.to_annotation())

    def annotate_one(self, display: _Display, source: PlayerRecord) -> _Display:
        """Return ``display`` with ``insights`` set, or unchanged when no score is available."""

        outcome = self.predict_one(source)
        if not outcome.available:
            return display
        return dataclasses.replace(display, insights=outcome.annotation)  # type: ignore[type-var]

    def _post_batch(self, sources: Sequence[PlayerRecord]) -> Optional[List[Dict[str, Any]]]:
        body = {"players": [build_prediction_payload(source) for source in sources]}
        logger.info("Sending %s players for batch prediction", len(sources))
        try:
            response = self._http.post(
                self._url("/predict_batch"), json=body, timeout=self.batch_timeout
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Batch prediction failed: %s (%s)", exc, exc.response.text[:500]
            )
            return None
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Batch prediction failed: %s", exc)
            return None

        predictions = data.get("predictions") if isinstance(data, dict) else None
        if not isinstance(predictions, list):
            logger.warning("Batch prediction response has no predictions list; skipping insights")
            return None
        return predictions

    def enrich_batch(
        self,
        display: Sequence[QualificationResult],
        sources: Sequence[PlayerRecord],
    ) -> BatchEnrichment:
        """Annotate positionally aligned ``display``/``sources`` and re-sort by future score.

        The result always has the same length as ``display`` and is a permutation
        of it. When the provider cannot be used, annotations stay ``None`` and the
        stable sort keeps the incoming order.
        """

        if len(display) != len(sources):
            raise ValueError(
                f"display and source records must align ({len(display)} != {len(sources)})"
            )
        original = list(display)
        if not self.enabled:
            return BatchEnrichment(results=_by_future_score(original), status=EnrichmentStatus.DISABLED)
        if not original:
            return BatchEnrichment(results=original, status=EnrichmentStatus.SKIPPED)

        if not self.check_availability():
            logger.warning("Enrichment provider not available; returning players without insights")
            return BatchEnrichment(results=_by_future_score(original), status=EnrichmentStatus.UNAVAILABLE)

        raw_predictions = self._post_batch(sources)
        if raw_predictions is None:
            return BatchEnrichment(results=_by_future_score(original), status=EnrichmentStatus.FAILED)

        by_id: Dict[str, EnrichmentAnnotation] = {}
        by_name: Dict[str, EnrichmentAnnotation] = {}
        for raw in raw_predictions:
            try:
                prediction = Prediction.model_validate(raw)
            except ValidationError as exc:
                logger.warning("Skipping malformed prediction: %s", exc)
                continue
            annotation = prediction.to_annotation()
            if prediction.sofascore_id is not None:
                by_id.setdefault(prediction.sofascore_id, annotation)
            if prediction.name is not None:
                by_name.setdefault(prediction.name, annotation)

        enriched: List[QualificationResult] = []
        matched = 0
        for item, source in zip(original, sources):
            annotation = None
            if source.external_id is not None:
                annotation = by_id.get(source.external_id)
            if annotation is None and item.player.name is not None:
                annotation = by_name.get(item.player.name)
            if annotation is not None:
                matched += 1
            enriched.append(dataclasses.replace(item, insights=annotation))

        logger.info("Insights added to %s/%s players", matched, len(enriched))
        return BatchEnrichment(
            results=_by_future_score(enriched),
            status=EnrichmentStatus.APPLIED,
            matched=matched,
        )

    def annotate_batch(
        self,
        display: Sequence[QualificationResult],
        sources: Sequence[PlayerRecord],
    ) -> List[QualificationResult]:
        return self.enrich_batch(display, sources).results


__all__ = ["BatchEnrichment", "EnrichmentClient", "EnrichmentOutcome"]
