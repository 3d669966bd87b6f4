"""Code extraction from filenames.

A code is derived from the capture groups of the first configured pattern that
matches a filename. Codes are stored normalized (uppercase, no hyphens) and
formatted for display with a hyphen before the first digit run.
"""
from __future__ import annotations
import re
from typing import Iterable, List, Pattern, Tuple


class PatternError(ValueError):
    """Raised when a configured regex pattern does not compile."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"invalid pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


def normalize(code: str) -> str:
    """Uppercase a code and strip hyphens: ``"prj-001"`` -> ``"PRJ001"``."""
    return code.upper().replace("-", "")


def format_code(normalized: str) -> str:
    """Insert a hyphen before the first digit run: ``"PRJ001"`` -> ``"PRJ-001"``.

    Codes without digits, or starting with a digit, are returned unchanged.
    """
    for i, ch in enumerate(normalized):
        if ch.isdigit():
            if i > 0:
                return normalized[:i] + "-" + normalized[i:]
            break
    return normalized


class Extractor:
    """Ordered list of compiled, case-insensitive code patterns."""

    def __init__(self, patterns: Iterable[str]) -> None:
        compiled: List[Pattern[str]] = []
        for pattern in patterns:
            try:
                compiled.append(re.compile(pattern, re.IGNORECASE))
            except re.error as e:
                raise PatternError(pattern, str(e)) from e
        self._patterns = compiled

    @classmethod
    def compile(cls, patterns: Iterable[str]) -> "Extractor":
        return cls(patterns)

    @property
    def patterns(self) -> List[str]:
        return [p.pattern for p in self._patterns]

    def extract(self, filename: str) -> Tuple[str, bool]:
        """Return ``(normalized_code, True)`` or ``("", False)`` when nothing matches."""
        for regex in self._patterns:
            if regex.groups == 0:
                continue
            m = regex.search(filename)
            if m is None:
                continue
            raw = "".join(g or "" for g in m.groups())
            if not raw:
                continue
            return normalize(raw), True
        return "", False
