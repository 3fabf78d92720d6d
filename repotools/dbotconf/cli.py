"""Command line for managing Dependabot configuration."""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

import yaml

from repotools.dbotconf.generate import generate
from repotools.dbotconf.verify import MissingUpdatesError, verify
from repotools.repo import ModFileError

_EXAMPLE = """\
examples:
  dbotconf generate > .github/dependabot.yml

  dbotconf verify .github/dependabot.yml"""

_ERRORS = (OSError, ValueError, ModFileError, MissingUpdatesError, yaml.YAMLError)


def _csv(value: str) -> list[str]:
    return value.split(",")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with the generate and verify commands."""
    parser = argparse.ArgumentParser(
        prog="dbotconf",
        description="dbotconf manages Dependabot configuration for multi-module Go repositories.",
        epilog=_EXAMPLE,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--ignore", action="extend", type=_csv, default=[], help="glob patterns to ignore"
    )
    shared = argparse.ArgumentParser(add_help=False)
    shared.add_argument(
        "--ignore",
        action="extend",
        type=_csv,
        default=argparse.SUPPRESS,
        help="glob patterns to ignore",
    )
    sub = parser.add_subparsers(dest="command")
    sub.add_parser(
        "generate", parents=[shared], help="Generate Dependabot configuration"
    )
    verify_parser = sub.add_parser(
        "verify",
        parents=[shared],
        help="Verify Dependabot configuration is complete",
        description="Ensure Dependabot configuration contains update checks "
        "for all modules in the repository.",
    )
    verify_parser.add_argument("path", nargs="*")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line and return the exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help(sys.stdout)
        return 0
    try:
        if args.command == "generate":
            generate(args.ignore)
        else:
            verify(args.path, args.ignore)
    except _ERRORS as exc:
        sys.stdout.write(f"dbotconf {args.command}: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())