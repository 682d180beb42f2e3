#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from datetime import timedelta
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from tsunami.app import DEFAULT_MAX_AGE, build_snapshots, default_store, load_trending_tracks
from tsunami.config import (
    ConfigurationError,
    configure_logging,
    get_relay_config,
    get_snapshot_config,
)
from tsunami.domain.ranking.trending import DEFAULT_LIMIT

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from tsunami.config import RelayConfig

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_DEGRADED = 3


def _positive_float(value: str) -> float:
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Not a number: {value}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"Must be positive: {value}")
    return parsed


def _non_negative_int(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Not an integer: {value}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError(f"Must not be negative: {value}")
    return parsed


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Aggregate music records from Nostr relays")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build-snapshots", help="Write the static snapshot artifacts")
    build.add_argument(
        "--dist",
        type=Path,
        help="Output directory; artifacts go to <dist>/data (default: $TSUNAMI_DIST_DIR or dist)",
    )
    build.add_argument(
        "--relay",
        action="append",
        dest="relays",
        metavar="URL",
        help="Relay gateway URL, repeatable (default: $TSUNAMI_RELAY_URLS)",
    )
    build.add_argument(
        "--timeout",
        type=_positive_float,
        help="Per-relay timeout in seconds for catalog and engagement queries",
    )

    trending = subparsers.add_parser("trending", help="Print trending tracks as JSON")
    trending.add_argument(
        "--limit",
        type=_non_negative_int,
        default=DEFAULT_LIMIT,
        help="Number of tracks to return (default: %(default)s)",
    )
    trending.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="ID",
        help="Event id or coordinate to leave out, repeatable",
    )
    trending.add_argument(
        "--max-age-minutes",
        type=_positive_float,
        default=DEFAULT_MAX_AGE.total_seconds() / 60,
        help="Serve the cached snapshot when younger than this (default: %(default)s)",
    )
    trending.add_argument(
        "--relay",
        action="append",
        dest="relays",
        metavar="URL",
        help="Relay gateway URL, repeatable (default: $TSUNAMI_RELAY_URLS)",
    )
    trending.add_argument("--dist", type=Path, help="Directory holding the snapshot artifacts")

    return parser.parse_args(list(argv))


def _relay_config(args: argparse.Namespace) -> RelayConfig:
    urls = tuple(dict.fromkeys(args.relays)) if args.relays else None
    config = get_relay_config(urls=urls)
    timeout = getattr(args, "timeout", None)
    if timeout is not None:
        config = replace(
            config, timeouts=replace(config.timeouts, catalog=timeout, engagement=timeout)
        )
    return config


def _run_build(args: argparse.Namespace) -> int:
    result = build_snapshots(
        relay_config=_relay_config(args),
        snapshot_config=get_snapshot_config(dist_dir=args.dist),
    )
    for outcome in result.report.outcomes:
        if outcome.error:
            log.warning("%s: %s (%s)", outcome.name, outcome.status, outcome.error)
    if result.degraded:
        log.warning("Snapshot build finished degraded")
        return EXIT_DEGRADED
    return EXIT_OK


def _run_trending(args: argparse.Namespace) -> int:
    view = load_trending_tracks(
        limit=args.limit,
        exclude=tuple(args.exclude),
        max_age=timedelta(minutes=args.max_age_minutes),
        relay_config=_relay_config(args),
        store=default_store(args.dist),
    )
    document = {
        "generatedAt": view.generated_at.isoformat(),
        "fromCache": view.from_cache,
        "degraded": view.degraded,
        "items": list(view.items),
    }
    print(json.dumps(document, indent=2))
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(verbose=parsed_args.verbose)

    try:
        if parsed_args.command == "build-snapshots":
            code = _run_build(parsed_args)
        elif parsed_args.command == "trending":
            code = _run_trending(parsed_args)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        sys.exit(EXIT_USAGE)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(EXIT_FAILURE)
    sys.exit(code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)", file=sys.stderr)
    sys.exit(EXIT_OK)


if __name__ == "__main__":
    main()
