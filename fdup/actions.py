"""Delete and move primitives shared by every front end.

Each file is handled as a pair: the disk mutation, then the matching index
update. A batch stops at the first failing file; files already handled stay
as they are.
"""
from __future__ import annotations
import os
import shutil
import sqlite3
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .index import DuplicateIndex
from .platform_ops import PlatformOps, get_platform_ops
from .util import plural


class ActionError(Exception):
    def __init__(self, path: str, cause: BaseException) -> None:
        super().__init__(f"{path}: {cause}")
        self.path = path
        self.cause = cause


@dataclass
class BatchResult:
    kind: str  # "delete" or "move"
    dest_dir: Optional[str] = None
    # (old_path, new_path); new_path is None for deletes
    completed: List[Tuple[str, Optional[str]]] = field(default_factory=list)
    messages: List[str] = field(default_factory=list)
    error: Optional[ActionError] = None
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


class FileActions:
    def __init__(
        self,
        index: Optional[DuplicateIndex] = None,
        ops: Optional[PlatformOps] = None,
        dry_run: bool = False,
        use_trash: bool = False,
    ) -> None:
        self.index = index
        self.ops = ops or get_platform_ops()
        self.dry_run = dry_run
        self.use_trash = use_trash

    def delete(self, path: str) -> str:
        """Delete (or trash) one file and drop its index row. Returns a message."""
        if self.dry_run:
            verb = "trash" if self.use_trash else "delete"
            return f"[DRY-RUN] Would {verb}: {path}"
        try:
            if self.use_trash:
                self.ops.trash(path)
            else:
                os.remove(path)
            if self.index is not None:
                self.index.delete_file(path)
        except (OSError, sqlite3.Error) as e:
            raise ActionError(path, e) from e
        return f"{'Trashed' if self.use_trash else 'Deleted'}: {path}"

    def move(self, path: str, dest_dir: str) -> Tuple[str, str]:
        """Move one file into ``dest_dir`` and repoint its index row.

        Returns ``(new_path, message)``. An existing different file at the
        destination is never overwritten.
        """
        dest_path = os.path.join(dest_dir, os.path.basename(path))
        if self.dry_run:
            return dest_path, f"[DRY-RUN] Would move: {path} -> {dest_dir}"
        try:
            os.makedirs(dest_dir, exist_ok=True)
            if os.path.exists(dest_path):
                if os.path.samefile(path, dest_path):
                    return path, f"Already in {dest_dir}: {path}"
                raise FileExistsError(f"destination exists: {dest_path}")
            shutil.move(path, dest_path)
            if self.index is not None:
                self.index.update_file_path(path, dest_path)
        except (OSError, sqlite3.Error) as e:
            raise ActionError(path, e) from e
        return dest_path, f"Moved: {path} -> {dest_dir}"

    def delete_batch(self, paths: Sequence[str]) -> BatchResult:
        result = BatchResult(kind="delete", dry_run=self.dry_run)
        for path in paths:
            try:
                result.messages.append(self.delete(path))
            except ActionError as e:
                result.error = e
                break
            result.completed.append((path, None))
        if result.ok and not self.dry_run:
            verb = "Trashed" if self.use_trash else "Deleted"
            result.messages = [f"{verb} {len(paths)} {plural(len(paths))}"]
        return result

    def move_batch(self, paths: Sequence[str], dest_dir: str) -> BatchResult:
        dest_dir = os.path.abspath(os.path.expanduser(dest_dir))
        result = BatchResult(kind="move", dest_dir=dest_dir, dry_run=self.dry_run)
        for path in paths:
            try:
                new_path, message = self.move(path, dest_dir)
            except ActionError as e:
                result.error = e
                break
            result.messages.append(message)
            result.completed.append((path, new_path))
        if result.ok and not self.dry_run:
            result.messages = [f"Moved {len(paths)} {plural(len(paths))} to {dest_dir}"]
        return result
