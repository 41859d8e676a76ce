"""``pingpal sweep``: find live hosts in an address range."""
from __future__ import annotations

import argparse

from pingpal.config import Config
from pingpal.scan.coordinator import ScanCoordinator
from pingpal.scan.models import AddressSweepConfig
from pingpal.scan.ranges import address_count

from ..console import RichReporter, console
from ..runner import finish, run_scan

HELP = "Sweep a network range (a.b.c.d/n) for live hosts"


def add_arguments(parser: argparse.ArgumentParser, config: Config) -> None:
    parser.add_argument("network_range", help="Range to sweep, e.g. 192.168.1.0/24")
    parser.add_argument(
        "--timeout",
        type=int,
        default=config.get("scan_timeout"),
        help="Reachability timeout in milliseconds (100-10000)",
    )


def build(args: argparse.Namespace) -> AddressSweepConfig:
    return AddressSweepConfig(network_range=args.network_range, timeout=args.timeout)


def run(args: argparse.Namespace, config: Config) -> int:
    scan_config = build(args)
    total = address_count(scan_config.prefix_length)
    console.print(f"[*] Sweeping {total} address(es) in {scan_config.network_range}")
    reporter = RichReporter("sweep")
    coordinator = ScanCoordinator(scan_config, reporter=reporter, **config.coordinator_options())
    run_scan(coordinator, reporter)
    console.print(f"Found {len(coordinator.results)} live host(s)")
    finish(args, coordinator)
    return 0
