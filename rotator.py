"""Command line entry point: generate the on-call rota and send reminders."""
from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Iterable

from adapters.config_loader import load_rotator_config
from adapters.report import csv_writer, metrics_writer, xlsx_writer
from domain.errors import ConfigurationError, TransportError
from services.rotator import RunOptions, notify_only, repository_for, run_rotation


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate the on-call rota and send reminders")
    parser.add_argument("--startdate", type=_parse_date, help="Start date (YYYY-MM-DD) for rota generation")
    parser.add_argument("--laston", help="Seed rota with yesterday's oncall person")
    parser.add_argument("--days", type=int, default=0, help="Number of days of rota to generate (overrides config file)")
    parser.add_argument("--configfile", default="rotator.yaml", help="Where to look for config file")
    parser.add_argument("--database", help="Calendar database (overrides config file)")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--monitoring-file", dest="monitoring_file", help="If set, write monitoring status to file and exit.")
    mode.add_argument(
        "--notify-only",
        dest="notify_only",
        action="store_true",
        help="Only send the --notify reminder, do not generate",
    )
    parser.add_argument("--notify", choices=["today", "tomorrow"], help="Send mail to whoever is oncall [today] or [tomorrow].")
    parser.add_argument("-d", dest="debug", action="store_true", help="Print spammy debugging information")
    parser.add_argument("-v", dest="verbose", action="store_true", help="Be a bit more verbose")
    parser.add_argument(
        "--dry-run",
        dest="dry_run",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Don't actually write any calendar entries",
    )
    parser.add_argument("--unrestrict", action="store_true", help="Start restrictions from zero (for recasting schedule)")
    parser.add_argument("--seed", type=int, help="Random seed for the starting point when nobody anchors the rota")
    parser.add_argument("--csv", help="Write the generated rota to this CSV file")
    parser.add_argument("--load-csv", dest="load_csv", help="Write the per-person load summary to this CSV file")
    parser.add_argument("--xlsx", help="Write the generated rota to this Excel file")
    return parser


def configure_logging(debug: bool, verbose: bool) -> None:
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    configure_logging(args.debug, args.verbose)

    if args.notify_only and not args.notify:
        parser.error("--notify-only needs --notify today|tomorrow")

    try:
        config = load_rotator_config(args.configfile)
        repository = repository_for(config, args.database)
        if args.notify_only:
            result = notify_only(config, repository, args.notify)
        else:
            options = RunOptions(
                start=args.startdate,
                days=args.days,
                last_on=args.laston,
                monitoring_file=args.monitoring_file,
                notify=args.notify,
                dry_run=args.dry_run,
                unrestrict=args.unrestrict,
                seed=args.seed,
            )
            result = run_rotation(config, repository, options)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1
    except TransportError as exc:
        print(f"Calendar error: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        what = "Monitoring file creation" if args.monitoring_file else "Rotation run"
        print(f"{what} failed: {exc}", file=sys.stderr)
        return 1

    if result.mode == "monitoring":
        print(f"Monitoring status written to {result.monitoring_path}")
    elif result.mode == "generate":
        roster = config.roster()
        try:
            if args.csv:
                csv_writer.write_rota(Path(args.csv), result.decisions)
            if args.load_csv:
                metrics_writer.write_load_summary(Path(args.load_csv), result.decisions, roster)
            if args.xlsx:
                xlsx_writer.write_rota(Path(args.xlsx), result.decisions, roster)
        except OSError as exc:
            print(f"Report creation failed: {exc}", file=sys.stderr)
            return 1
        if result.shadow_days:
            print(
                "Nobody available on: " + ", ".join(d.isoformat() for d in result.shadow_days),
                file=sys.stderr,
            )

    for error in result.notification_errors:
        print(f"Error sending mail: {error}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
