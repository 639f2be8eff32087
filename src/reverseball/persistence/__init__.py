"""Persistence layer for player season documents."""

from __future__ import annotations

import json
import sqlite3
from contextlib import closing
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Iterator, Optional, Protocol
from uuid import uuid4

from reverseball.models import PlayerRecord


class RecordSourceError(RuntimeError):
    """Raised when the backing store cannot be read or written."""


class RecordSource(Protocol):
    def iter_by_positions(self, codes: Iterable[str]) -> Iterator[PlayerRecord]:
        ...


class PlayerStore:
    """SQLite-backed store of player documents.

    Insertion order is preserved through ``rowid`` so iteration order is
    deterministic across calls.
    """

    def __init__(self, db_path: Path | str):
        self._use_uri = isinstance(db_path, str) and db_path.startswith("file:")
        self.db_path: Path | str = db_path if self._use_uri else Path(db_path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        try:
            if isinstance(self.db_path, Path):
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                conn = sqlite3.connect(self.db_path)
            else:
                conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        except sqlite3.Error as exc:
            raise RecordSourceError(f"Cannot open player store at {self.db_path}: {exc}") from exc
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with closing(self._connect()) as conn:
            try:
                self._create_schema(conn)
            except sqlite3.Error as exc:
                raise RecordSourceError(f"Cannot initialise player store: {exc}") from exc

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS players (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                document_json TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS player_positions (
                player_id TEXT NOT NULL,
                code TEXT NOT NULL,
                PRIMARY KEY (player_id, code)
            )
            """
        )
        conn.execute("CREATE INDEX IF NOT EXISTS idx_player_positions_code ON player_positions (code)")
        conn.execute("CREATE INDEX IF NOT EXISTS idx_players_name ON players (name)")
        conn.commit()

    def _player_key(self, conn: sqlite3.Connection, record: PlayerRecord) -> str:
        if record.external_id:
            return f"ext:{record.external_id}"
        row = conn.execute(
            "SELECT id FROM players WHERE name = ? AND id LIKE 'name:%' LIMIT 1",
            (record.name,),
        ).fetchone()
        return row["id"] if row else f"name:{uuid4().hex}"

    def save_players(self, records: Iterable[PlayerRecord]) -> int:
        """Upsert records by external id (or by name when the id is absent)."""

        saved = 0
        now = datetime.now(timezone.utc).isoformat()
        with closing(self._connect()) as conn:
            try:
                for record in records:
                    key = self._player_key(conn, record)
                    conn.execute(
                        """
                        INSERT INTO players (id, name, document_json, updated_at)
                        VALUES (?, ?, ?, ?)
                        ON CONFLICT(id) DO UPDATE SET
                            name = excluded.name,
                            document_json = excluded.document_json,
                            updated_at = excluded.updated_at
                        """,
                        (key, record.name, json.dumps(record.to_document()), now),
                    )
                    conn.execute("DELETE FROM player_positions WHERE player_id = ?", (key,))
                    conn.executemany(
                        "INSERT OR IGNORE INTO player_positions (player_id, code) VALUES (?, ?)",
                        [(key, code) for code in record.positions],
                    )
                    saved += 1
                conn.commit()
            except sqlite3.Error as exc:
                conn.rollback()
                raise RecordSourceError(f"Failed to save players: {exc}") from exc
        return saved

    def iter_by_positions(self, codes: Iterable[str]) -> Iterator[PlayerRecord]:
        """Yield records whose positions contain any of ``codes``, lazily."""

        code_list = sorted(set(codes))
        if not code_list:
            return
        placeholders = ", ".join("?" for _ in code_list)
        query = f"""
            SELECT document_json FROM players
            WHERE id IN (SELECT player_id FROM player_positions WHERE code IN ({placeholders}))
            ORDER BY rowid
        """
        with closing(self._connect()) as conn:
            try:
                cursor = conn.execute(query, code_list)
                for row in cursor:
                    yield PlayerRecord.model_validate(json.loads(row["document_json"]))
            except sqlite3.Error as exc:
                raise RecordSourceError(f"Failed to read players: {exc}") from exc

    def iter_players(self) -> Iterator[PlayerRecord]:
        """Yield every stored record in insertion order, lazily."""

        with closing(self._connect()) as conn:
            try:
                cursor = conn.execute("SELECT document_json FROM players ORDER BY rowid")
                for row in cursor:
                    yield PlayerRecord.model_validate(json.loads(row["document_json"]))
            except sqlite3.Error as exc:
                raise RecordSourceError(f"Failed to read players: {exc}") from exc

    def get_player_by_name(self, name: str) -> Optional[PlayerRecord]:
        with closing(self._connect()) as conn:
            try:
                row = conn.execute(
                    "SELECT document_json FROM players WHERE name = ? ORDER BY rowid LIMIT 1",
                    (name,),
                ).fetchone()
            except sqlite3.Error as exc:
                raise RecordSourceError(f"Failed to read player {name!r}: {exc}") from exc
        if row is None:
            return None
        return PlayerRecord.model_validate(json.loads(row["document_json"]))

    def count_players(self) -> int:
        with closing(self._connect()) as conn:
            try:
                row = conn.execute("SELECT COUNT(*) AS total FROM players").fetchone()
            except sqlite3.Error as exc:
                raise RecordSourceError(f"Failed to count players: {exc}") from exc
        return int(row["total"])


__all__ = ["PlayerStore", "RecordSource", "RecordSourceError"]
