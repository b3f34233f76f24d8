# src/flight_sorter/services/sink.py

from __future__ import annotations

import json
import math
import os
import sqlite3
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from flight_sorter.services.offer_bridge import records_to_frame


DEFAULT_DB_PATH = os.path.join("data", "dataset.sqlite")


def _strict(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, Mapping):
        return {k: _strict(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_strict(v) for v in value]
    return value


def dump_record(record: Any) -> str:
    """Strict JSON for one record; NaN and infinities are written as null."""
    try:
        return json.dumps(record, default=str, allow_nan=False)
    except ValueError:
        return json.dumps(_strict(record), default=str, allow_nan=False)


def _ensure_parent_dir(path: str) -> None:
    parent = os.path.dirname(path)
    if parent and not os.path.exists(parent):
        os.makedirs(parent, exist_ok=True)


class ListSink:
    """In-memory sink; keeps records in the order they were pushed."""

    def __init__(self):
        self.items: List[Mapping[str, Any]] = []

    def push(self, record: Mapping[str, Any]) -> None:
        self.items.append(record)


class SqliteDatasetSink:
    """
    SQLite-backed result dataset. Each pushed record is one row; the
    autoincrement id is the emission order.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH, run_id: Optional[str] = None):
        self.db_path = db_path
        self.run_id = run_id or datetime.now(timezone.utc).isoformat()
        _ensure_parent_dir(self.db_path)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS dataset_items (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    run_id TEXT NOT NULL,
                    pushed_at_utc TEXT NOT NULL,
                    payload TEXT NOT NULL
                );
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_dataset_run ON dataset_items(run_id);"
            )

    def push(self, record: Mapping[str, Any]) -> None:
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO dataset_items (run_id, pushed_at_utc, payload) VALUES (?, ?, ?);",
                (self.run_id, now, dump_record(record)),
            )

    def items(self, run_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """Records of one run (this sink's run by default) in emission order."""
        with self._connect() as conn:
            cur = conn.execute(
                "SELECT payload FROM dataset_items WHERE run_id = ? ORDER BY id ASC;",
                (run_id or self.run_id,),
            )
            return [json.loads(row[0]) for row in cur.fetchall()]

    def to_dataframe(self, run_id: Optional[str] = None) -> pd.DataFrame:
        return records_to_frame(self.items(run_id))
