"""``pingpal ping``: timed reachability samples against one host."""
from __future__ import annotations

import argparse

from pingpal.config import Config
from pingpal.scan.coordinator import ScanCoordinator
from pingpal.scan.models import PingConfig

from ..console import RichReporter, console, summary_tables
from ..runner import finish, run_scan

HELP = "Ping one host at a fixed interval and summarize the replies"


def add_arguments(parser: argparse.ArgumentParser, config: Config) -> None:
    parser.add_argument("address", help="IPv4 address of the host")
    parser.add_argument(
        "--interval",
        type=int,
        default=config.get("ping_interval"),
        help="Milliseconds between pings, also the per-ping timeout (100-10000)",
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--count",
        type=int,
        default=config.get("ping_count"),
        help="Number of pings to send (1-100)",
    )
    group.add_argument(
        "--continuous",
        action="store_true",
        help="Ping until interrupted with Ctrl-C",
    )


def build(args: argparse.Namespace) -> PingConfig:
    return PingConfig(
        address=args.address,
        interval=args.interval,
        count=args.count,
        continuous=args.continuous,
    )


def run(args: argparse.Namespace, config: Config) -> int:
    ping_config = build(args)
    if ping_config.continuous:
        console.print(f"[*] Pinging {ping_config.address} until interrupted")
    else:
        console.print(f"[*] Pinging {ping_config.address} {ping_config.count} time(s)")
    reporter = RichReporter("ping", indeterminate=ping_config.continuous)
    coordinator = ScanCoordinator(ping_config, reporter=reporter, **config.coordinator_options())
    session = run_scan(coordinator, reporter)
    finish(args, coordinator)
    if session.summary is None:
        console.print("No pings were sent.")
        return 1
    for table in summary_tables(session.summary):
        console.print(table)
    return 0
