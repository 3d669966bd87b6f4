"""Persisted code -> file index and the duplicate-group queries over it."""
from __future__ import annotations
import os
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .code import normalize
from .db import connect, migrate


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def to_iso(ts: datetime) -> str:
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).isoformat()


def from_iso(value: Optional[str]) -> datetime:
    if not value:
        return datetime.fromtimestamp(0, tz=timezone.utc)
    return datetime.fromisoformat(value)


@dataclass
class FileRecord:
    path: str
    code: str
    size: int
    mtime: datetime
    created_at: Optional[datetime] = None

    @property
    def directory(self) -> str:
        return os.path.dirname(self.path)


@dataclass
class DuplicateGroup:
    code: str
    files: List[FileRecord] = field(default_factory=list)

    def directories(self) -> List[str]:
        seen: Dict[str, None] = {}
        for f in self.files:
            seen.setdefault(f.directory, None)
        return list(seen)


_SELECT = "SELECT f.path, f.code, f.size, f.mtime, f.created_at FROM files f"


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def group_rows(rows: Iterable[Sequence[Any]]) -> List[DuplicateGroup]:
    """Group ``(path, code, size, mtime, created_at)`` rows by code, keeping first-seen order."""
    groups: Dict[str, DuplicateGroup] = {}
    for path, code, size, mtime, created_at in rows:
        group = groups.get(code)
        if group is None:
            group = groups[code] = DuplicateGroup(code=code)
        group.files.append(
            FileRecord(
                path=path,
                code=code,
                size=int(size or 0),
                mtime=from_iso(mtime),
                created_at=from_iso(created_at) if created_at else None,
            )
        )
    return list(groups.values())


class DuplicateIndex:
    """SQLite-backed store of ``codes`` and ``files`` rows.

    Every statement is committed on its own; there are no multi-statement
    transactions. Mutations are idempotent, and a full re-scan rebuilds the
    index from disk.
    """

    def __init__(self, con: sqlite3.Connection) -> None:
        self.con = con

    @classmethod
    def open(cls, db_path: Path) -> "DuplicateIndex":
        con = connect(Path(db_path))
        try:
            migrate(con)
        except sqlite3.Error:
            con.close()
            raise
        return cls(con)

    def close(self) -> None:
        self.con.close()

    def __enter__(self) -> "DuplicateIndex":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def upsert(self, record: FileRecord) -> None:
        now = to_iso(utc_now())
        self.con.execute(
            "INSERT OR IGNORE INTO codes (code, created_at) VALUES (?, ?)",
            (record.code, now),
        )
        self.con.execute(
            "INSERT OR REPLACE INTO files (path, code, size, mtime, created_at) VALUES (?, ?, ?, ?, ?)",
            (record.path, record.code, int(record.size), to_iso(record.mtime), now),
        )

    def clear(self) -> None:
        self.con.execute("DELETE FROM files")
        self.con.execute("DELETE FROM codes")

    def count(self) -> int:
        row = self.con.execute("SELECT COUNT(*) FROM files").fetchone()
        return int(row[0]) if row else 0

    def find_duplicates(self) -> List[DuplicateGroup]:
        """Groups of files sharing a code across at least two directories."""
        rows = self.con.execute(
            _SELECT
            + """
            WHERE f.code IN (SELECT code FROM files GROUP BY code HAVING COUNT(*) > 1)
            ORDER BY f.code, f.path
            """
        ).fetchall()
        return [g for g in group_rows(rows) if len(g.files) > 1 and len(g.directories()) > 1]

    def search_by_code(self, query: str, exact: bool = False) -> List[DuplicateGroup]:
        code = normalize(query)
        if exact:
            sql = _SELECT + " WHERE f.code = ? ORDER BY f.code, f.path"
            params: Tuple[str, ...] = (code,)
        else:
            sql = _SELECT + " WHERE f.code LIKE ? ESCAPE '\\' ORDER BY f.code, f.path"
            params = (_escape_like(code) + "%",)
        return group_rows(self.con.execute(sql, params).fetchall())

    def get_file(self, path: str) -> Optional[FileRecord]:
        rows = self.con.execute(_SELECT + " WHERE f.path = ?", (path,)).fetchall()
        groups = group_rows(rows)
        return groups[0].files[0] if groups else None

    def delete_file(self, path: str) -> None:
        self.con.execute("DELETE FROM files WHERE path = ?", (path,))

    def update_file_path(self, old_path: str, new_path: str) -> None:
        self.con.execute("UPDATE OR REPLACE files SET path = ? WHERE path = ?", (new_path, old_path))
