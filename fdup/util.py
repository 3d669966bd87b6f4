from __future__ import annotations
import os
from typing import Iterable, List


def format_size(size: int) -> str:
    """Binary-unit size: ``512 B``, ``1.5 KB``, ``2.0 MB``."""
    unit = 1024
    if size < unit:
        return f"{size} B"
    div, exp = unit, 0
    n = size // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f"{size / div:.1f} {'KMGTPE'[exp]}B"


def plural(n: int, word: str = "file") -> str:
    return word if n == 1 else word + "s"


def missing_paths(paths: Iterable[str]) -> List[str]:
    return [p for p in paths if not os.path.exists(p)]
