"""SQLite-backed run metadata and per-generation champion metrics."""

from __future__ import annotations

import hashlib
import json
import platform
import sqlite3
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping


@dataclass(frozen=True)
class GenerationMetrics:
    """Champion state recorded at one generation."""

    generation_index: int
    score: int
    polygons: int
    points: int
    accepted: bool = False


class EvolutionLogger:
    """Persist run metadata and champion metrics in SQLite."""

    def __init__(self, db_path: str | Path) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.connection = sqlite3.connect(self.db_path, check_same_thread=False)
        self.connection.row_factory = sqlite3.Row
        self._ensure_schema()

    def close(self) -> None:
        self.connection.close()

    def _ensure_schema(self) -> None:
        self.connection.executescript(
            """
            CREATE TABLE IF NOT EXISTS run_metadata (
                run_id TEXT PRIMARY KEY,
                config_hash TEXT NOT NULL,
                seed INTEGER NOT NULL,
                config_json TEXT NOT NULL,
                runtime_metadata TEXT NOT NULL,
                created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
            );

            CREATE TABLE IF NOT EXISTS generation_metrics (
                run_id TEXT NOT NULL,
                generation_index INTEGER NOT NULL,
                score INTEGER NOT NULL,
                polygons INTEGER NOT NULL,
                points INTEGER NOT NULL,
                accepted INTEGER NOT NULL,
                PRIMARY KEY (run_id, generation_index),
                FOREIGN KEY (run_id)
                    REFERENCES run_metadata (run_id)
                    ON DELETE CASCADE
            );
            """
        )
        self.connection.commit()

    def start_run(self, config: Mapping[str, Any], seed: int, metadata: Mapping[str, Any] | None = None) -> str:
        """Register a run and return its id: the seed in hex plus a random suffix."""
        config_json = json.dumps(dict(config), sort_keys=True, default=str)
        config_hash = hashlib.sha256(config_json.encode("utf-8")).hexdigest()
        run_id = f"{seed:08x}-{uuid.uuid4().hex[:8]}"
        runtime = {"python_version": platform.python_version(), "platform": platform.platform(), **(metadata or {})}

        self.connection.execute(
            "INSERT INTO run_metadata (run_id, config_hash, seed, config_json, runtime_metadata) VALUES (?, ?, ?, ?, ?)",
            (run_id, config_hash, seed, config_json, json.dumps(runtime, sort_keys=True, default=str)),
        )
        self.connection.commit()
        return run_id

    def log_generation(self, run_id: str, metrics: GenerationMetrics) -> None:
        self.connection.execute(
            """
            INSERT OR REPLACE INTO generation_metrics (
                run_id, generation_index, score, polygons, points, accepted
            ) VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                run_id,
                metrics.generation_index,
                metrics.score,
                metrics.polygons,
                metrics.points,
                int(metrics.accepted),
            ),
        )
        self.connection.commit()

    def fetch_metrics(self, run_id: str) -> list[dict[str, int]]:
        """Return ordered generation metrics for plotting/analysis."""
        rows = self.connection.execute(
            """
            SELECT generation_index, score, polygons, points, accepted
            FROM generation_metrics
            WHERE run_id = ?
            ORDER BY generation_index ASC
            """,
            (run_id,),
        ).fetchall()
        return [dict(row) for row in rows]

    def latest_run_id(self) -> str | None:
        """Return most recently created run id, if any."""
        row = self.connection.execute(
            """
            SELECT run_id
            FROM run_metadata
            ORDER BY created_at DESC, rowid DESC
            LIMIT 1
            """
        ).fetchone()
        return str(row[0]) if row is not None else None
