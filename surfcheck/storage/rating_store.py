"""SQLite store for daily good-location ratings.

One row per (location, date) that scored as suitable. Rows are written
once and never updated; inserting a pair that already exists is skipped,
which makes repeated ingestion runs for the same region and day safe.
"""

import json
import logging
import os
import sqlite3
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Iterable, Optional, Union


logger = logging.getLogger(__name__)

BUSY_TIMEOUT_SECONDS = 30


class RatingStoreError(Exception):
    """Exception raised for rating store failures."""

    pass


@dataclass
class StoredRating:
    """A persisted record that a location was suitable on a date."""
    rating_date: date
    location_id: str
    region: str
    score: int
    conditions: dict  # Reading snapshot for audit/replay
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: Optional[datetime] = None


def as_date(value: Union[date, datetime, str]) -> date:
    """Normalize a date-like value to a calendar date.

    Datetimes are truncated to their date; strings must be ISO formatted.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    raise TypeError(f"Expected a date, got {type(value).__name__}")


def _default_db_path() -> Path:
    env_path = os.environ.get("SURFCHECK_DB_PATH")
    if env_path:
        return Path(env_path)

    data_dir = Path.home() / ".cache" / "surfcheck"
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / "ratings.db"


class RatingStore:
    """Append-only table of good ratings keyed by (location, date)."""

    def __init__(self, db_path: Optional[Path] = None):
        """Initialize the store, creating the table if needed.

        Args:
            db_path: Path to SQLite database file. Defaults to $SURFCHECK_DB_PATH
                or ~/.cache/surfcheck/ratings.db
        """
        self.db_path = Path(db_path) if db_path is not None else _default_db_path()
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path, timeout=BUSY_TIMEOUT_SECONDS)

    def _init_db(self) -> None:
        """Initialize the ratings table."""
        try:
            with self._connect() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS stored_ratings (
                        id TEXT PRIMARY KEY,
                        rating_date TEXT NOT NULL,
                        location_id TEXT NOT NULL,
                        region TEXT NOT NULL,
                        score INTEGER NOT NULL,
                        conditions TEXT NOT NULL,
                        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                        UNIQUE (location_id, rating_date)
                    )
                """)
                conn.execute("""
                    CREATE INDEX IF NOT EXISTS idx_stored_ratings_region_date
                    ON stored_ratings (region, rating_date)
                """)
                conn.commit()
        except sqlite3.Error as e:
            raise RatingStoreError(f"Failed to initialize {self.db_path}: {e}") from e

    def insert_ratings(self, ratings: Iterable[StoredRating]) -> int:
        """Bulk insert ratings, skipping (location, date) pairs already stored.

        Args:
            ratings: Ratings to write

        Returns:
            Number of rows actually written
        """
        rows = [
            (
                r.id,
                as_date(r.rating_date).isoformat(),
                r.location_id,
                r.region,
                r.score,
                json.dumps(r.conditions, sort_keys=True),
                datetime.now(timezone.utc).isoformat(),
            )
            for r in ratings
        ]
        if not rows:
            return 0

        try:
            with self._connect() as conn:
                before = conn.total_changes
                conn.executemany(
                    """
                    INSERT INTO stored_ratings
                        (id, rating_date, location_id, region, score, conditions, created_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT (location_id, rating_date) DO NOTHING
                    """,
                    rows,
                )
                conn.commit()
                inserted = conn.total_changes - before
        except sqlite3.Error as e:
            raise RatingStoreError(f"Failed to store {len(rows)} ratings: {e}") from e

        logger.debug(f"Inserted {inserted}/{len(rows)} ratings")
        return inserted

    def count_ratings(self, region: str, rating_date: Union[date, datetime]) -> int:
        """Count stored ratings for a region on a date."""
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    "SELECT COUNT(*) FROM stored_ratings WHERE region = ? AND rating_date = ?",
                    (region, as_date(rating_date).isoformat()),
                )
                return cursor.fetchone()[0]
        except sqlite3.Error as e:
            raise RatingStoreError(f"Failed to count ratings for {region}: {e}") from e

    def get_ratings(
        self,
        region: str,
        rating_date: Union[date, datetime],
    ) -> list[StoredRating]:
        """Get stored ratings for a region on a date, best score first."""
        try:
            with self._connect() as conn:
                cursor = conn.execute(
                    """
                    SELECT id, rating_date, location_id, region, score, conditions, created_at
                    FROM stored_ratings
                    WHERE region = ? AND rating_date = ?
                    ORDER BY score DESC, location_id
                    """,
                    (region, as_date(rating_date).isoformat()),
                )
                rows = cursor.fetchall()
        except sqlite3.Error as e:
            raise RatingStoreError(f"Failed to read ratings for {region}: {e}") from e

        return [
            StoredRating(
                id=row[0],
                rating_date=date.fromisoformat(row[1]),
                location_id=row[2],
                region=row[3],
                score=row[4],
                conditions=json.loads(row[5]),
                created_at=datetime.fromisoformat(row[6]) if row[6] else None,
            )
            for row in rows
        ]
