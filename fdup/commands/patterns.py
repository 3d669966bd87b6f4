"""CLI command checking the configured patterns against their test cases."""
from __future__ import annotations

import argparse
from argparse import _SubParsersAction
from typing import List, Optional, Sequence, Tuple

from ..code import Extractor, PatternError
from ..config import PatternTestCase
from .common import EXIT_BAD_CONFIG, add_common_flags, fail, is_quiet, locate_and_load


def _configure_parser(parser: argparse.ArgumentParser) -> None:
    pass


def add_parser(subparsers: _SubParsersAction[argparse.ArgumentParser]) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(
        "test",
        help="Test patterns against config test cases",
        description="Validate that the patterns in config.yaml extract the expected codes.",
    )
    _configure_parser(parser)
    parser.set_defaults(handler=run_from_args)
    return parser


def build_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog or "fdup test", description="Test patterns against config test cases")
    add_common_flags(parser)
    _configure_parser(parser)
    return parser


def check_case(extractor: Extractor, case: PatternTestCase) -> Tuple[bool, str]:
    """Returns ``(passed, description)`` for one test case."""
    extracted, found = extractor.extract(case.input)
    if case.expected is None:
        if found:
            return False, f"expected (no match), got {extracted}"
        return True, "(no match)"
    if not found:
        return False, f"expected {case.expected}, got (no match)"
    if extracted != case.expected:
        return False, f"expected {case.expected}, got {extracted}"
    return True, extracted


def run_cases(extractor: Extractor, cases: List[PatternTestCase], quiet: bool = False) -> int:
    failed = 0
    for case in cases:
        ok, result = check_case(extractor, case)
        if ok:
            if not quiet:
                print(f"✓ {case.input} -> {result}")
        else:
            failed += 1
            print(f"✗ {case.input} -> {result}")
    return failed


def run_from_args(args: argparse.Namespace) -> int:
    quiet = is_quiet(args)
    _, cfg = locate_and_load()

    if not cfg.test:
        print("No test cases defined in config.yaml")
        return 0

    try:
        extractor = Extractor(cfg.pattern_regexes())
    except PatternError as e:
        fail(f"invalid patterns: {e}", EXIT_BAD_CONFIG)

    if not quiet:
        print("Testing patterns...")
    failed = run_cases(extractor, cfg.test, quiet=quiet)

    total = len(cfg.test)
    if failed:
        print(f"{failed} of {total} tests failed.")
        return 1
    if not quiet:
        print(f"All {total} tests passed.")
    return 0


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    return run_from_args(args)


__all__ = ["add_parser", "build_parser", "check_case", "run_cases", "run_cli", "run_from_args"]
