from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict

import pytest

from fdup.index import DuplicateIndex, FileRecord

DEFAULT_PATTERNS = [r"([A-Z]{2,5}-\d{3,5})", r"([A-Z]{2,5})(\d{3,5})"]


def make_tree(root: Path, files: Dict[str, str]) -> Dict[str, Path]:
    created = {}
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        created[rel] = path
    return created


def record(path, code: str, size: int = 10) -> FileRecord:
    return FileRecord(
        path=str(path),
        code=code,
        size=size,
        mtime=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
    )


@pytest.fixture
def index(tmp_path):
    idx = DuplicateIndex.open(tmp_path / "db" / "fdup.db")
    yield idx
    idx.close()


@pytest.fixture
def in_tmp(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def can_symlink(tmp_path: Path) -> bool:
    try:
        os.symlink(tmp_path / "missing-target", tmp_path / ".probe-link")
    except (OSError, NotImplementedError):
        return False
    os.remove(tmp_path / ".probe-link")
    return True
