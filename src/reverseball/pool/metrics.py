"""Per-90 normalization of cumulative season statistics."""

from __future__ import annotations

from typing import Any, Dict, Mapping


def _as_number(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if number != number:  # NaN
        return 0.0
    return number


def per90(value: Any, minutes_played: Any) -> float:
    """Scale a cumulative value to a 90-minute basis.

    Returns ``0`` when minutes are missing, zero or negative.
    """

    minutes = _as_number(minutes_played)
    if minutes <= 0:
        return 0.0
    return _as_number(value) * 90 / minutes


class PlayerMetrics:
    """Read-only metric view over one record's stats bag.

    Per-90 values are computed lazily and cached, so a rule that reads the same
    metric in its score and its thresholds normalizes it only once.
    """

    __slots__ = ("_stats", "_per90_cache", "minutes_played", "appearances")

    def __init__(self, stats: Mapping[str, Any] | None):
        self._stats: Mapping[str, Any] = stats or {}
        self._per90_cache: Dict[str, float] = {}
        self.minutes_played = max(0.0, _as_number(self._stats.get("minutesPlayed")))
        self.appearances = max(0.0, _as_number(self._stats.get("appearances")))

    @property
    def minutes_per_match(self) -> float:
        if self.appearances <= 0:
            return 0.0
        return self.minutes_played / self.appearances

    def raw(self, name: str) -> float:
        return _as_number(self._stats.get(name))

    def per90(self, name: str) -> float:
        cached = self._per90_cache.get(name)
        if cached is None:
            cached = per90(self._stats.get(name), self.minutes_played)
            self._per90_cache[name] = cached
        return cached

    def value(self, name: str, *, scaled: bool = True) -> float:
        return self.per90(name) if scaled else self.raw(name)


__all__ = ["PlayerMetrics", "per90"]
