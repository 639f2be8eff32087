"""Process settings resolved from environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path


logger = logging.getLogger(__name__)

_DB_PATH_ENV = "REVERSEBALL_DB_PATH"
_ML_URL_ENV = "REVERSEBALL_ML_URL"
_ML_ENABLED_ENV = "REVERSEBALL_ML_ENABLED"
_ML_HEALTH_TIMEOUT_ENV = "REVERSEBALL_ML_HEALTH_TIMEOUT"
_ML_TIMEOUT_ENV = "REVERSEBALL_ML_TIMEOUT"
_ML_BATCH_TIMEOUT_ENV = "REVERSEBALL_ML_BATCH_TIMEOUT"

DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent / "reverseball.sqlite"
DEFAULT_ML_URL = "http://127.0.0.1:5000"


def _env_float(name: str, default: float, *, clamp_min: float | None = None) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid float for %s: %s; using default %.2f", name, raw, default)
        return default
    if clamp_min is not None:
        value = max(clamp_min, value)
    return value


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    text = raw.strip().lower()
    if text in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if text in {"0", "false", "f", "no", "n", "off"}:
        return False
    logger.warning("Invalid boolean for %s: %s; using default %s", name, raw, default)
    return default


@dataclass(frozen=True)
class Settings:
    db_path: Path = DEFAULT_DB_PATH
    ml_url: str = DEFAULT_ML_URL
    ml_enabled: bool = True
    ml_health_timeout: float = 5.0
    ml_timeout: float = 10.0
    ml_batch_timeout: float = 60.0

    @classmethod
    def from_env(cls) -> "Settings":
        db_path = os.getenv(_DB_PATH_ENV)
        return cls(
            db_path=Path(db_path) if db_path else DEFAULT_DB_PATH,
            ml_url=(os.getenv(_ML_URL_ENV) or DEFAULT_ML_URL).rstrip("/"),
            ml_enabled=_env_bool(_ML_ENABLED_ENV, True),
            ml_health_timeout=_env_float(_ML_HEALTH_TIMEOUT_ENV, 5.0, clamp_min=0.1),
            ml_timeout=_env_float(_ML_TIMEOUT_ENV, 10.0, clamp_min=0.1),
            ml_batch_timeout=_env_float(_ML_BATCH_TIMEOUT_ENV, 60.0, clamp_min=0.1),
        )
