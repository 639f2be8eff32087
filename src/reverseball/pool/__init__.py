"""Candidate pool utilities (normalization, qualification)."""

from .metrics import PlayerMetrics, per90
from .qualification import qualify

__all__ = [
    "PlayerMetrics",
    "per90",
    "qualify",
]
