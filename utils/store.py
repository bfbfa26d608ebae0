from __future__ import annotations

import os
import sqlite3
from contextlib import closing
from datetime import datetime
from pathlib import Path
from typing import Optional

from models import InternshipRecord


class DuplicateInternshipError(ValueError):
    """Raised by `InternshipStore.create` when the URL is already stored."""


_COLUMNS = "origin, url, title, image_url, published_at, found_at, is_published"


class InternshipStore:
    """
    SQLite-backed record store keyed by posting URL.

    Uniqueness is enforced by the table itself, so concurrent creators racing
    on the same URL see exactly one success. Connections are opened per call.
    """

    def __init__(self, sqlite_path: str | Path):
        self.sqlite_path = str(sqlite_path)
        self._schema_ready = False

    def find_by_url(self, url: str) -> Optional[InternshipRecord]:
        with closing(self._connect()) as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM internships WHERE url = ?",
                (url.strip(),),
            ).fetchone()
        return _row_to_record(row) if row else None

    def create(self, record: InternshipRecord) -> InternshipRecord:
        try:
            with closing(self._connect()) as conn, conn:
                conn.execute(
                    f"INSERT INTO internships ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
                    (
                        record.origin,
                        record.url.strip(),
                        record.title,
                        record.image_url,
                        record.published_at.isoformat(),
                        record.found_at.isoformat(),
                        int(record.is_published),
                    ),
                )
        except sqlite3.IntegrityError as e:
            raise DuplicateInternshipError(f"Internship already stored: {record.url}") from e
        return record

    def mark_published(self, url: str) -> bool:
        with closing(self._connect()) as conn, conn:
            cur = conn.execute(
                "UPDATE internships SET is_published = 1 WHERE url = ? AND is_published = 0",
                (url.strip(),),
            )
            return cur.rowcount == 1

    def list_records(self) -> list[InternshipRecord]:
        with closing(self._connect()) as conn:
            rows = conn.execute(f"SELECT {_COLUMNS} FROM internships ORDER BY found_at, id").fetchall()
        return [_row_to_record(r) for r in rows]

    def count(self) -> int:
        with closing(self._connect()) as conn:
            (n,) = conn.execute("SELECT COUNT(*) FROM internships").fetchone()
        return int(n or 0)

    def _connect(self) -> sqlite3.Connection:
        if not self._schema_ready:
            d = os.path.dirname(os.path.abspath(self.sqlite_path)) or "."
            os.makedirs(d, exist_ok=True)
        conn = sqlite3.connect(self.sqlite_path, timeout=30.0)
        conn.execute("PRAGMA synchronous=NORMAL;")
        if not self._schema_ready:
            _ensure_schema(conn)
            self._schema_ready = True
        return conn


def _ensure_schema(conn: sqlite3.Connection) -> None:
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS internships (
          id INTEGER PRIMARY KEY,
          origin TEXT NOT NULL,
          url TEXT NOT NULL UNIQUE,
          title TEXT NOT NULL,
          image_url TEXT,
          published_at TEXT NOT NULL,
          found_at TEXT NOT NULL,
          is_published INTEGER NOT NULL DEFAULT 0
        );
        """
    )
    conn.commit()


def _row_to_record(row: tuple) -> InternshipRecord:
    origin, url, title, image_url, published_at, found_at, is_published = row
    return InternshipRecord(
        origin=origin,
        url=url,
        title=title,
        image_url=image_url,
        published_at=datetime.fromisoformat(published_at),
        found_at=datetime.fromisoformat(found_at),
        is_published=bool(is_published),
    )
