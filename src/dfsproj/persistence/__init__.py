"""Feed object storage and the SQLite-backed id crosswalk."""

from __future__ import annotations

import csv
import json
import logging
import os
import sqlite3
import tempfile
import uuid
from contextlib import suppress
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional

from dfsproj.config import normalize_service, normalize_sport
from dfsproj.errors import FeedUnavailableError
from dfsproj.ingest import DraftablesFeed, parse_draftables, parse_ledgers, parse_team_averages, parse_team_odds
from dfsproj.tables import Crosswalk, FeedTables


logger = logging.getLogger(__name__)


def draftables_key(sport: str, service: str, slate: str) -> str:
    return f"draftables/{normalize_sport(sport).lower()}/{normalize_service(service)}/{slate}.json"


def simulations_key(sport: str, day: Optional[str] = None) -> str:
    return f"simulations/{normalize_sport(sport).lower()}/{day or 'latest'}.json"


def odds_key(sport: str) -> str:
    return f"odds/{normalize_sport(sport).lower()}.json"


def team_averages_key(sport: str) -> str:
    return f"team_averages/{normalize_sport(sport).lower()}.json"


class FeedStore:
    """Read feed blobs from a directory tree and crosswalk rows from SQLite."""

    def __init__(self, feed_root: Path | str, db_path: Path | str | None = None):
        self.feed_root = Path(feed_root)
        self.db_path = Path(db_path) if db_path is not None else self.feed_root / "crosswalk.sqlite"
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.OperationalError:
            fallback_dir = Path(tempfile.gettempdir()) / "dfsproj-runtime"
            fallback_dir.mkdir(parents=True, exist_ok=True)
            fallback = fallback_dir / "crosswalk.sqlite"
            logger.warning("Crosswalk database %s unavailable; using %s", self.db_path, fallback)
            conn = sqlite3.connect(fallback)
            self.db_path = fallback
            self._create_schema(conn)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS crosswalk (
                sport TEXT NOT NULL,
                service TEXT NOT NULL,
                provider_id TEXT NOT NULL,
                canonical_id INTEGER NOT NULL,
                updated_at TEXT NOT NULL,
                PRIMARY KEY (sport, service, provider_id)
            )
            """
        )
        conn.commit()

    # crosswalk -----------------------------------------------------------

    def save_crosswalk(self, rows: Iterable[Mapping[str, Any]]) -> int:
        updated_at = datetime.now(timezone.utc).isoformat()
        values = []
        for row in rows:
            try:
                values.append(
                    (
                        normalize_sport(str(row["sport"])),
                        normalize_service(str(row["service"])),
                        str(row["provider_id"]).strip(),
                        int(row["canonical_id"]),
                        updated_at,
                    )
                )
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed crosswalk row: %r", row)
        with self._connect() as conn:
            conn.executemany(
                """
                INSERT INTO crosswalk (sport, service, provider_id, canonical_id, updated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT (sport, service, provider_id)
                DO UPDATE SET canonical_id = excluded.canonical_id, updated_at = excluded.updated_at
                """,
                values,
            )
            conn.commit()
        return len(values)

    def import_crosswalk_csv(self, path: Path) -> int:
        with path.open(newline="", encoding="utf-8") as f:
            return self.save_crosswalk(csv.DictReader(f))

    def load_crosswalk(self, sport: str, service: str) -> Crosswalk:
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    "SELECT sport, service, provider_id, canonical_id FROM crosswalk WHERE sport = ? AND service = ?",
                    (normalize_sport(sport), normalize_service(service)),
                ).fetchall()
        except sqlite3.Error as exc:
            raise FeedUnavailableError("crosswalk", str(exc)) from exc
        return Crosswalk.from_rows(dict(row) for row in rows)

    # feed objects --------------------------------------------------------

    def object_path(self, key: str) -> Path:
        return self.feed_root / key

    def read_object(self, key: str) -> Any:
        path = self.object_path(key)
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise FeedUnavailableError(key, "object not found") from exc
        except (OSError, json.JSONDecodeError) as exc:
            raise FeedUnavailableError(key, str(exc)) from exc

    def write_object(self, key: str, payload: Any) -> Path:
        path = self.object_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(f".tmp-{path.name}-{uuid.uuid4().hex}")
        try:
            tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError:
            with suppress(FileNotFoundError):
                tmp_path.unlink()
            raise
        return path

    def list_slates(self, sport: str, service: str) -> List[str]:
        directory = self.object_path(draftables_key(sport, service, "_")).parent
        if not directory.is_dir():
            return []
        return sorted(path.stem for path in directory.glob("*.json"))

    def load_draftables(
        self,
        sport: str,
        service: str,
        slate: str,
        *,
        mapping: Mapping[str, str] | None = None,
    ) -> DraftablesFeed:
        key = draftables_key(sport, service, slate)
        try:
            return parse_draftables(self.read_object(key), service, mapping=mapping)
        except ValueError as exc:
            raise FeedUnavailableError(key, str(exc)) from exc

    def _read_simulations(self, sport: str, day: Optional[str]) -> Any:
        if day:
            try:
                return self.read_object(simulations_key(sport, day))
            except FeedUnavailableError:
                logger.info("No simulations for %s on %s; falling back to latest", sport, day)
        return self.read_object(simulations_key(sport))

    def load_tables(self, sport: str, service: str, *, day: Optional[str] = None) -> FeedTables:
        """Resolve every lookup table for one request; missing feeds raise FeedUnavailableError."""

        try:
            ledgers = parse_ledgers(self._read_simulations(sport, day))
            odds = parse_team_odds(self.read_object(odds_key(sport)))
            averages = parse_team_averages(self.read_object(team_averages_key(sport)))
        except ValueError as exc:
            raise FeedUnavailableError(sport, str(exc)) from exc
        return FeedTables.build(
            crosswalk=self.load_crosswalk(sport, service),
            ledgers=ledgers,
            odds=odds,
            team_averages=averages,
        )


__all__ = [
    "FeedStore",
    "draftables_key",
    "odds_key",
    "simulations_key",
    "team_averages_key",
]
