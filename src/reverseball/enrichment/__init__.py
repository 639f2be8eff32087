"""Predictive scoring provider integration."""

from .client import BatchEnrichment, EnrichmentClient, EnrichmentOutcome
from .payload import Prediction, build_prediction_payload, parse_market_value

__all__ = [
    "BatchEnrichment",
    "EnrichmentClient",
    "EnrichmentOutcome",
    "Prediction",
    "build_prediction_payload",
    "parse_market_value",
]
