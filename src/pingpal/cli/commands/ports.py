"""``pingpal ports``: find open TCP ports on one host."""
from __future__ import annotations

import argparse

from pingpal.config import Config
from pingpal.scan.coordinator import ScanCoordinator
from pingpal.scan.models import PortSweepConfig

from ..console import RichReporter, console
from ..runner import finish, run_scan

HELP = "Sweep a TCP port range on one host for open services"


def add_arguments(parser: argparse.ArgumentParser, config: Config) -> None:
    parser.add_argument("address", help="IPv4 address of the host")
    parser.add_argument("low", type=int, help="First port (1-65535)")
    parser.add_argument("high", type=int, help="Last port (1-65535)")
    parser.add_argument(
        "--timeout",
        type=int,
        default=config.get("scan_timeout"),
        help="Connect timeout in milliseconds (100-10000)",
    )


def build(args: argparse.Namespace) -> PortSweepConfig:
    return PortSweepConfig(
        address=args.address, low=args.low, high=args.high, timeout=args.timeout
    )


def run(args: argparse.Namespace, config: Config) -> int:
    scan_config = build(args)
    console.print(
        f"[*] Scanning ports {scan_config.low}-{scan_config.high} on {scan_config.address}"
    )
    reporter = RichReporter("ports")
    coordinator = ScanCoordinator(scan_config, reporter=reporter, **config.coordinator_options())
    run_scan(coordinator, reporter)
    console.print(f"Found {len(coordinator.results)} open port(s)")
    finish(args, coordinator)
    return 0
