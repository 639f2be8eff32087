"""Position rule table used to qualify and rank players per role."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Mapping, Optional, Tuple

from reverseball.models import PlayerRecord
from reverseball.pool.metrics import PlayerMetrics


@dataclass(frozen=True)
class MetricThreshold:
    """Bound on one metric; ``per90=False`` reads the raw field (percentages)."""

    metric: str
    minimum: float | None = None
    maximum: float | None = None
    per90: bool = True

    def holds(self, metrics: PlayerMetrics) -> bool:
        value = metrics.value(self.metric, scaled=self.per90)
        if self.minimum is not None and value < self.minimum:
            return False
        if self.maximum is not None and value > self.maximum:
            return False
        return True


@dataclass(frozen=True)
class PositionRule:
    key: str
    label: str
    role_codes: frozenset[str]
    weights: Mapping[str, float]
    min_score: float
    thresholds: Tuple[MetricThreshold, ...] = ()
    min_appearances: int = 3
    min_minutes_per_match: float = 25.0
    scorer: Optional[Callable[[PlayerMetrics], float]] = None

    def matches(self, record: PlayerRecord) -> bool:
        return not self.role_codes.isdisjoint(record.positions)

    def rank_score(self, metrics: PlayerMetrics) -> float:
        if self.scorer is not None:
            return self.scorer(metrics)
        return sum(metrics.per90(metric) * weight for metric, weight in self.weights.items())

    def passes(self, metrics: PlayerMetrics, *, score: float | None = None) -> bool:
        if metrics.appearances < self.min_appearances:
            return False
        if metrics.minutes_per_match < self.min_minutes_per_match:
            return False
        if score is None:
            score = self.rank_score(metrics)
        if score < self.min_score:
            return False
        return all(threshold.holds(metrics) for threshold in self.thresholds)


def save_percentage(metrics: PlayerMetrics) -> float:
    saves = metrics.raw("saves")
    faced = saves + metrics.raw("goalsConceded")
    if faced <= 0:
        return 0.0
    return saves / faced * 100


def _weights(*metrics: str, **weighted: float) -> Mapping[str, float]:
    table: Dict[str, float] = {metric: 1.0 for metric in metrics}
    table.update(weighted)
    return MappingProxyType(table)


def _min(metric: str, value: float, *, per90: bool = True) -> MetricThreshold:
    return MetricThreshold(metric=metric, minimum=value, per90=per90)


_WINGER_WEIGHTS = _weights("goalsAssistsSum", "keyPasses", "expectedAssists", "passToAssist")
_WIDE_MID_WEIGHTS = _weights("assists", "totalCross", "tackles", "keyPasses")
_WIDE_MID_THRESHOLDS = (
    _min("accurateFinalThirdPasses", 6),
    _min("totalCross", 2),
    _min("tackles", 0.9),
)
_FULL_BACK_WEIGHTS = _weights(
    "totalCross", "tackles", "keyPasses", "accurateFinalThirdPasses", "assists"
)
_DEFENDER_WEIGHTS = _weights("ballRecovery", "tackles", "interceptions", "clearances")
_DEFENSIVE_BACK_THRESHOLDS = (
    _min("totalDuelsWonPercentage", 48, per90=False),
    _min("ballRecovery", 3.5),
)


_POSITION_RULES: Dict[str, PositionRule] = {
    "st": PositionRule(
        key="st",
        label="Striker",
        role_codes=frozenset({"ST"}),
        weights=_weights("totalShots", goalsAssistsSum=3.0, expectedGoals=2.0),
        min_score=5.0,
        thresholds=(_min("goalConversionPercentage", 18.4, per90=False),),
    ),
    "am": PositionRule(
        key="am",
        label="Attacking midfielder",
        role_codes=frozenset({"AM"}),
        weights=_weights("assists", "expectedAssists", "bigChancesCreated", "keyPasses"),
        min_score=1.5,
        thresholds=(_min("accurateFinalThirdPasses", 8),),
    ),
    "lw": PositionRule(
        key="lw",
        label="Left winger",
        role_codes=frozenset({"LW", "ML"}),
        weights=_WINGER_WEIGHTS,
        min_score=2.0,
        thresholds=(_min("keyPasses", 0.7),),
    ),
    "rw": PositionRule(
        key="rw",
        label="Right winger",
        role_codes=frozenset({"RW", "MR"}),
        weights=_WINGER_WEIGHTS,
        min_score=2.0,
        thresholds=(_min("keyPasses", 0.7),),
    ),
    "rm": PositionRule(
        key="rm",
        label="Right midfielder",
        role_codes=frozenset({"MR", "DR"}),
        weights=_WIDE_MID_WEIGHTS,
        min_score=5.0,
        thresholds=_WIDE_MID_THRESHOLDS,
    ),
    "lm": PositionRule(
        key="lm",
        label="Left midfielder",
        role_codes=frozenset({"ML", "DL"}),
        weights=_WIDE_MID_WEIGHTS,
        min_score=5.0,
        thresholds=_WIDE_MID_THRESHOLDS,
    ),
    "dm": PositionRule(
        key="dm",
        label="Defensive midfielder",
        role_codes=frozenset({"DM"}),
        weights=_weights("ballRecovery", "tackles", "interceptions"),
        min_score=7.5,
        thresholds=(
            _min("totalDuelsWonPercentage", 40, per90=False),
            _min("ballRecovery", 4.5),
        ),
    ),
    "dm_playmaker": PositionRule(
        key="dm_playmaker",
        label="Deep-lying playmaker",
        role_codes=frozenset({"DM", "MC"}),
        weights=_weights("keyPasses", "accurateFinalThirdPasses", "interceptions"),
        min_score=13.0,
        thresholds=(_min("accurateLongBalls", 3, per90=False),),
    ),
    "mezzala": PositionRule(
        key="mezzala",
        label="Mezzala",
        role_codes=frozenset({"MC"}),
        weights=_weights("bigChancesCreated", "goalsAssistsSum", "keyPasses", "possessionWonAttThird"),
        min_score=3.0,
        thresholds=(
            _min("successfulDribblesPercentage", 50, per90=False),
            _min("accurateFinalThirdPasses", 7),
        ),
    ),
    "mc": PositionRule(
        key="mc",
        label="Central midfielder",
        role_codes=frozenset({"MC"}),
        weights=_weights("accurateFinalThirdPasses", "tackles", "keyPasses", "ballRecovery"),
        min_score=17.0,
        thresholds=(_min("accuratePassesPercentage", 84.5, per90=False),),
    ),
    "box_to_box": PositionRule(
        key="box_to_box",
        label="Box-to-box midfielder",
        role_codes=frozenset({"DM", "MC"}),
        weights=_weights(
            "possessionWonAttThird", "tackles", "keyPasses", "ballRecovery", "successfulDribbles"
        ),
        min_score=6.5,
        thresholds=(
            _min("possessionWonAttThird", 0.25),
            _min("successfulDribbles", 0.15),
            _min("keyPasses", 0.5),
            _min("tackles", 1.0),
            _min("ballRecovery", 3.0),
            _min("totalDuelsWonPercentage", 45, per90=False),
        ),
    ),
    "right_full_back": PositionRule(
        key="right_full_back",
        label="Right full-back",
        role_codes=frozenset({"DR"}),
        weights=_FULL_BACK_WEIGHTS,
        min_score=13.0,
        thresholds=(_min("totalCross", 2),),
    ),
    "left_full_back": PositionRule(
        key="left_full_back",
        label="Left full-back",
        role_codes=frozenset({"DL"}),
        weights=_FULL_BACK_WEIGHTS,
        min_score=13.0,
        thresholds=(_min("totalCross", 2),),
    ),
    "right_defensive_back": PositionRule(
        key="right_defensive_back",
        label="Right defensive back",
        role_codes=frozenset({"DR"}),
        weights=_DEFENDER_WEIGHTS,
        min_score=9.0,
        thresholds=_DEFENSIVE_BACK_THRESHOLDS,
    ),
    "left_defensive_back": PositionRule(
        key="left_defensive_back",
        label="Left defensive back",
        role_codes=frozenset({"DL"}),
        weights=_DEFENDER_WEIGHTS,
        min_score=9.0,
        thresholds=_DEFENSIVE_BACK_THRESHOLDS,
    ),
    "dc": PositionRule(
        key="dc",
        label="Centre-back",
        role_codes=frozenset({"DC"}),
        weights=_DEFENDER_WEIGHTS,
        min_score=11.0,
        thresholds=(
            _min("totalDuelsWonPercentage", 48, per90=False),
            MetricThreshold(metric="errorLeadToGoal", maximum=0.15),
        ),
    ),
    "gk": PositionRule(
        key="gk",
        label="Goalkeeper",
        role_codes=frozenset({"GK"}),
        weights=MappingProxyType({}),
        min_score=70.0,
        thresholds=(_min("goalsPrevented", 0, per90=False),),
        scorer=save_percentage,
    ),
}


def iter_rules() -> Iterable[PositionRule]:
    """Return an iterator of all configured position rules."""

    return _POSITION_RULES.values()


def get_rule(key: str) -> PositionRule:
    """Fetch a rule by key (case-insensitive), raising KeyError if missing."""

    normalized = key.strip().lower().replace("-", "_")
    if normalized not in _POSITION_RULES:
        raise KeyError(f"No position rule configured for {key!r}")
    return _POSITION_RULES[normalized]


POSITION_RULES: Mapping[str, PositionRule] = MappingProxyType(_POSITION_RULES)
