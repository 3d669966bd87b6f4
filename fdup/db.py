from __future__ import annotations
import sqlite3
from pathlib import Path

DDL = r"""
CREATE TABLE IF NOT EXISTS codes (
  code TEXT PRIMARY KEY,
  created_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS files (
  path TEXT PRIMARY KEY,
  code TEXT NOT NULL REFERENCES codes(code),
  size INTEGER NOT NULL,
  mtime TEXT NOT NULL,
  created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_code ON files(code);
CREATE INDEX IF NOT EXISTS idx_size ON files(size);
"""

def connect(db_path: Path) -> sqlite3.Connection:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    # autocommit: every statement stands on its own
    con = sqlite3.connect(str(db_path), isolation_level=None)
    con.execute("PRAGMA foreign_keys=ON;")
    con.execute("PRAGMA journal_mode=WAL;")
    con.execute("PRAGMA synchronous=NORMAL;")
    con.execute("PRAGMA busy_timeout=5000;")
    return con

def migrate(con: sqlite3.Connection) -> None:
  con.executescript(DDL)
