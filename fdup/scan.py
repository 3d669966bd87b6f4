# fdup/scan.py
from __future__ import annotations
import os
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from .code import Extractor
from .config import FdupConfig
from .ignore import IgnoreFilter
from .index import DuplicateIndex, FileRecord

ProgressCallback = Callable[[int, int], None]
LogCallback = Callable[[str], None]


def utc(ts: float) -> datetime:
    return datetime.fromtimestamp(ts, tz=timezone.utc)


class ScanError(Exception):
    """A non-fatal problem with a single entry, collected into the scan report."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message


@dataclass
class ScanResult:
    total_files: int = 0
    added_files: int = 0
    errors: List[Exception] = field(default_factory=list)


class Scanner:
    """Two-phase directory walk: collect candidate paths, then build records."""

    def __init__(self, patterns: List[str], ignore: List[str], root_dir: str) -> None:
        self.extractor = Extractor(patterns)
        self.ignore = IgnoreFilter(ignore)
        self.root_dir = str(root_dir)

    def collect(self, errors: List[Exception]) -> List[str]:
        files: List[str] = []

        def on_error(err: OSError) -> None:
            errors.append(err)

        for dirpath, dirnames, filenames in os.walk(self.root_dir, onerror=on_error):
            rel_dir = os.path.relpath(dirpath, self.root_dir)
            kept = []
            for name in sorted(dirnames):
                full = os.path.join(dirpath, name)
                if os.path.islink(full):
                    continue
                if self.ignore.should_ignore(os.path.join(rel_dir, name), is_dir=True):
                    continue
                kept.append(name)
            dirnames[:] = kept

            for name in sorted(filenames):
                full = os.path.join(dirpath, name)
                if os.path.islink(full):
                    continue
                if self.ignore.should_ignore(os.path.join(rel_dir, name), is_dir=False):
                    continue
                files.append(full)
        return files

    def scan(self, progress: Optional[ProgressCallback] = None) -> Tuple[List[FileRecord], ScanResult]:
        errors: List[Exception] = []
        files = self.collect(errors)
        total = len(files)
        records: List[FileRecord] = []

        for i, path in enumerate(files, 1):
            if progress is not None:
                progress(i, total)

            code, found = self.extractor.extract(os.path.basename(path))
            if not found:
                continue

            try:
                st = os.stat(path)
            except OSError as e:
                errors.append(e)
                continue
            try:
                abs_path = os.path.abspath(path)
            except (OSError, ValueError) as e:
                errors.append(ScanError(path, str(e)))
                continue

            records.append(FileRecord(path=abs_path, code=code, size=st.st_size, mtime=utc(st.st_mtime)))

        return records, ScanResult(total_files=total, added_files=len(records), errors=errors)


def scan_root(
    root: str,
    cfg: FdupConfig,
    index: DuplicateIndex,
    progress_cb: Optional[ProgressCallback] = None,
    log_cb: Optional[LogCallback] = None,
    verbose: bool = False,
) -> ScanResult:
    """Clear the index and rebuild it from a fresh scan of ``root``.

    Raises ``PatternError`` before touching the index when a pattern is invalid.
    """

    def emit_log(message: str) -> None:
        if log_cb is None:
            print(message)
        else:
            log_cb(message)

    scanner = Scanner(cfg.pattern_regexes(), cfg.ignore, root)

    emit_log(f"[RUN] Starting scan: root={root}, patterns={len(scanner.extractor.patterns)}, ignore={len(cfg.ignore)}")
    if not Path(root).is_dir():
        emit_log(f"[WARN] Root does not exist: {root}")
        return ScanResult(errors=[ScanError(root, "root directory does not exist")])

    emit_log("[INFO] Clearing index...")
    index.clear()

    records, result = scanner.scan(progress_cb)
    emit_log(f"[INFO] {root}: {result.total_files} candidate files, {len(records)} with codes")

    failed = 0
    for rec in records:
        try:
            index.upsert(rec)
        except sqlite3.Error as e:
            failed += 1
            if verbose:
                emit_log(f"[WARN] failed to insert {rec.path}: {e}")
    if failed:
        result.added_files -= failed
        emit_log(f"[WARN] {failed} record(s) could not be stored")

    emit_log(f"[DONE] scan complete: {result.added_files} records, {len(result.errors)} errors")
    return result
