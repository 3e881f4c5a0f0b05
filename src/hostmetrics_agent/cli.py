"""Command-line interface for hostmetrics agent."""

import argparse
import dataclasses
import logging
import sys
from typing import List, Optional

from . import __version__
from .collectors import PROBES, collect_builtin
from .config import DEFAULT_CONFIG_PATH, AgentConfig, ConfigManager, ConfigurationMissing
from .context import RunContext
from .extensions import collect_extensions
from .transport import PlaintextSender

logger = logging.getLogger("hostmetrics-agent")


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def load_config(args: argparse.Namespace) -> AgentConfig:
    """Load configuration and apply command-line overrides."""
    config = ConfigManager(args.config).load()

    overrides = {"verbose": args.verbose, "dry_run": args.dry_run}
    if args.timeout is not None:
        overrides["timeout"] = args.timeout

    return dataclasses.replace(config, **overrides)


def cmd_run(args: argparse.Namespace) -> int:
    """Collect and send metrics."""
    try:
        config = load_config(args)
    except ConfigurationMissing as e:
        logger.error(f"Configuration error: {e}")
        return 1

    ctx = RunContext.capture(config.hostname, config.command_timeout)
    logger.debug(f"Collecting metrics for {ctx.hostname} at {ctx.timestamp} (privileged={ctx.privileged})")

    records = collect_builtin(ctx, args.probes)

    if not args.no_extensions:
        records.extend(collect_extensions(ctx, config.extensions_dir, config.extension_timeout))

    sender = PlaintextSender(
        config.remote_host,
        config.remote_port,
        timeout=config.timeout,
        verbose=config.verbose,
        dry_run=config.dry_run,
    )

    for record in records:
        sender.send(record)

    logger.debug(
        f"{len(records)} record(s): {sender.sent} sent, "
        f"{sender.dropped} dropped, {sender.skipped} not sent"
    )

    return 0


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")

    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer: {number}")

    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hostmetrics-agent",
        description="Collect host metrics and ship them to a plaintext TCP collector",
    )

    parser.add_argument("--version", action="version", version=f"hostmetrics-agent {__version__}")
    parser.add_argument(
        "-c", "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Config file with HOST and PORT (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "-n", "--dry-run",
        action="store_true",
        help="Collect metrics but don't send them",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print every metric line and debug logging",
    )
    parser.add_argument(
        "-t", "--timeout",
        type=positive_int,
        metavar="SECONDS",
        help="Connection timeout per metric (default: 5)",
    )
    parser.add_argument(
        "--probe",
        dest="probes",
        action="append",
        choices=sorted(PROBES),
        metavar="NAME",
        help=f"Only run this built-in probe (repeatable; one of: {', '.join(PROBES)})",
    )
    parser.add_argument(
        "--no-extensions",
        action="store_true",
        help="Don't run extension scripts",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(args.verbose)

    return cmd_run(args)


if __name__ == "__main__":
    sys.exit(main())
