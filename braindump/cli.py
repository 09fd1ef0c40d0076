"""Command-line entry point.

Usage:
  braindump
  braindump --agent claude --since 2026-01-01T00:00:00Z --pretty
  braindump --session-id 42 --summary -o sessions.txt
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import TextIO

from braindump import __version__, config
from braindump.date_utils import parse_cli_timestamp
from braindump.errors import ConfigurationError
from braindump.models import AGENT_TYPES, Session
from braindump.output import write_envelope, write_summary
from braindump.parsers.platforms.registry import collect_sessions
from braindump.session_filter import FilterOptions, apply_filters

logger = logging.getLogger("braindump")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="braindump",
        description=(
            "Read Claude Code and Goose agent session histories and output them "
            "in a unified JSON format."
        ),
    )
    parser.add_argument(
        "--agent",
        default="",
        type=str.lower,
        choices=("",) + AGENT_TYPES,
        metavar="{claude,goose}",
        help="Filter by agent type (claude, goose)",
    )
    parser.add_argument("--session-id", default="", help="Filter by specific session ID")
    parser.add_argument("--since", default="", help="Filter sessions created at or after this RFC 3339 timestamp")
    parser.add_argument("--until", default="", help="Filter sessions created at or before this RFC 3339 timestamp")
    parser.add_argument("-o", "--output", default="", help="Output file (default: stdout)")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON output")
    parser.add_argument("--summary", action="store_true", help="Output a human-readable summary instead of JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress and skipped records to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_filter_options(args: argparse.Namespace) -> FilterOptions:
    """Build filter predicates from CLI arguments; raises ValueError on bad timestamps."""
    since = None
    until = None
    if args.since:
        try:
            since = parse_cli_timestamp(args.since)
        except ValueError as exc:
            raise ValueError(f"invalid --since timestamp: {exc}") from exc
    if args.until:
        try:
            until = parse_cli_timestamp(args.until)
        except ValueError as exc:
            raise ValueError(f"invalid --until timestamp: {exc}") from exc
    return FilterOptions(agent_type=args.agent, session_id=args.session_id, since=since, until=until)


def _emit(sessions: list[Session], stream: TextIO, args: argparse.Namespace) -> None:
    if args.summary:
        write_summary(sessions, stream)
    else:
        write_envelope(sessions, stream, pretty=args.pretty)


def run(args: argparse.Namespace) -> int:
    try:
        options = parse_filter_options(args)
        settings = config.load_settings()
    except (ValueError, ConfigurationError) as exc:
        logger.error("%s", exc)
        return 1

    sessions = asyncio.run(collect_sessions(settings, options.agent_type))
    filtered = apply_filters(sessions, options)

    if not args.output:
        _emit(filtered, sys.stdout, args)
        return 0

    try:
        with open(args.output, "w", encoding="utf-8") as handle:
            _emit(filtered, handle, args)
    except OSError as exc:
        logger.error("failed to write output file %s: %s", args.output, exc)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    return run(args)


if __name__ == "__main__":
    raise SystemExit(main())
