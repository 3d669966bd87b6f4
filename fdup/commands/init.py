"""CLI command creating the .fdup directory, default config and database."""
from __future__ import annotations

import argparse
import shutil
import sqlite3
from argparse import _SubParsersAction
from pathlib import Path
from typing import Optional, Sequence

from ..config import DIR_NAME, db_path, default_config, save_config
from ..index import DuplicateIndex
from .common import EXIT_DB_OPEN, add_common_flags, fail, is_quiet


def _configure_parser(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-f", "--force", action="store_true", help="Force reinitialize (deletes existing data)")


def add_parser(subparsers: _SubParsersAction[argparse.ArgumentParser]) -> argparse.ArgumentParser:
    parser = subparsers.add_parser(
        "init",
        help="Initialize fdup in the current directory",
        description="Create the .fdup/ directory with config.yaml and fdup.db.",
    )
    _configure_parser(parser)
    parser.set_defaults(handler=run_from_args)
    return parser


def build_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog or "fdup init", description="Initialize fdup in the current directory")
    add_common_flags(parser)
    _configure_parser(parser)
    return parser


def run_from_args(args: argparse.Namespace) -> int:
    quiet = is_quiet(args)
    config_dir = Path.cwd() / DIR_NAME

    if config_dir.exists():
        if not args.force:
            fail("already initialized. Use --force to reinitialize")
        try:
            shutil.rmtree(config_dir)
        except OSError as e:
            fail(f"failed to remove existing {DIR_NAME}: {e}")

    config_dir.mkdir(parents=True)
    if not quiet:
        print(f"Created {DIR_NAME}/")

    save_config(config_dir, default_config())
    if not quiet:
        print(f"Created {DIR_NAME}/config.yaml")

    try:
        DuplicateIndex.open(db_path(config_dir)).close()
    except (sqlite3.Error, OSError) as e:
        fail(f"failed to create database: {e}", EXIT_DB_OPEN)
    if not quiet:
        print(f"Created {DIR_NAME}/fdup.db")
        print("Initialized successfully.")
    return 0


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    return run_from_args(args)


__all__ = ["add_parser", "build_parser", "run_cli", "run_from_args"]
