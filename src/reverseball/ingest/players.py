"""Helpers to load player season documents and emit canonical records."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Tuple

from pydantic import ValidationError

from reverseball.models import PlayerRecord


logger = logging.getLogger(__name__)


@dataclass
class IngestReport:
    total: int = 0
    loaded: int = 0
    rejected: List[str] = field(default_factory=list)


def _iter_documents(text: str) -> Iterable[Any]:
    stripped = text.lstrip()
    if not stripped:
        return []
    if stripped[0] in "[{":
        try:
            data = json.loads(stripped)
        except json.JSONDecodeError:
            data = None
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            players = data.get("players")
            return players if isinstance(players, list) else [data]
    # JSON Lines
    return [json.loads(line) for line in text.splitlines() if line.strip()]


def documents_to_records(documents: Iterable[Any]) -> Tuple[List[PlayerRecord], IngestReport]:
    records: List[PlayerRecord] = []
    report = IngestReport()
    for index, document in enumerate(documents):
        report.total += 1
        label = document.get("name") if isinstance(document, Mapping) else None
        label = str(label or f"document #{index + 1}")
        if not isinstance(document, Mapping):
            report.rejected.append(label)
            logger.warning("Skipping %s: not an object", label)
            continue
        try:
            records.append(PlayerRecord.model_validate(dict(document)))
        except ValidationError as exc:
            report.rejected.append(label)
            logger.warning("Skipping %s: %s", label, exc.errors()[0].get("msg", exc))
            continue
        report.loaded += 1
    return records, report


def load_player_documents(path: Path) -> Tuple[List[PlayerRecord], IngestReport]:
    """Read a JSON array, a ``{"players": [...]}`` object or JSON Lines file."""

    text = path.read_text(encoding="utf-8")
    try:
        documents = _iter_documents(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"{path} is not valid JSON or JSON Lines: {exc}") from exc
    return documents_to_records(documents)
