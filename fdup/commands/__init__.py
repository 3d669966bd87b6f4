"""Command registration for the fdup CLI."""
from __future__ import annotations

from typing import Iterable

from . import dup, init, patterns, scan, search

COMMAND_MODULES: Iterable = (init, scan, patterns, search, dup)

__all__ = ["COMMAND_MODULES"]
