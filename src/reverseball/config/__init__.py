"""Configuration helpers for position rules and process settings."""

from .positions import (
    POSITION_RULES,
    MetricThreshold,
    PositionRule,
    get_rule,
    iter_rules,
    save_percentage,
)
from .settings import Settings

__all__ = [
    "MetricThreshold",
    "POSITION_RULES",
    "PositionRule",
    "Settings",
    "get_rule",
    "iter_rules",
    "save_percentage",
]
