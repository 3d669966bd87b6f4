"""Glob-lite ignore rules for the directory scanner.

Only the ``*`` wildcard is supported and it never crosses a path separator.
``?``, ``[...]`` and ``**`` have no special meaning and match literally.
"""
from __future__ import annotations
import re
from functools import lru_cache
from typing import Iterable, List, Pattern

_SEPARATORS = ("/", "\\")


@lru_cache(maxsize=256)
def _compile_rule(rule: str) -> Pattern[str]:
    parts = [re.escape(chunk) for chunk in rule.split("*")]
    return re.compile("[^/\\\\]*".join(parts) + r"\Z", re.DOTALL)


def match_pattern(name: str, pattern: str) -> bool:
    """Exact match, or ``*`` wildcard match when the pattern contains one."""
    if "*" in pattern:
        return _compile_rule(pattern).match(name) is not None
    return name == pattern


def split_path(rel_path: str) -> List[str]:
    return [p for p in re.split(r"[/\\]", rel_path) if p and p != "."]


class IgnoreFilter:
    def __init__(self, rules: Iterable[str]) -> None:
        self.dir_rules: List[str] = []
        self.file_rules: List[str] = []
        for rule in rules:
            if not rule:
                continue
            if rule.endswith(_SEPARATORS):
                stripped = rule.rstrip("/\\")
                if stripped:
                    self.dir_rules.append(stripped)
            else:
                self.file_rules.append(rule)

    def should_ignore(self, rel_path: str, is_dir: bool) -> bool:
        """Decide whether an entry, given relative to the scan root, is excluded.

        Directory rules look at every directory component; for a file that is
        every component but its own name. File rules look at the whole relative
        path, the base name and every component.
        """
        parts = split_path(rel_path)
        if not parts:
            return False

        dir_parts = parts if is_dir else parts[:-1]
        for rule in self.dir_rules:
            if any(match_pattern(part, rule) for part in dir_parts):
                return True

        full = "/".join(parts)
        for rule in self.file_rules:
            if match_pattern(full, rule) or match_pattern(parts[-1], rule):
                return True
            if any(match_pattern(part, rule) for part in parts):
                return True
        return False
