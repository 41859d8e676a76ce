"""Command line interface for PingPal."""
from __future__ import annotations

import argparse
import logging
from typing import Sequence

from pingpal import __version__
from pingpal.config import Config
from pingpal.scan.errors import InvalidScanConfigError, PingPalError, RecordError
from pingpal.utils import setup_logging

from . import commands
from .console import console

logger = logging.getLogger(__name__)


def build_parser(config: Config) -> argparse.ArgumentParser:
    """Return the top level parser with one subparser per command."""

    parser = argparse.ArgumentParser(
        prog="pingpal",
        description="Sweep address ranges and ports, or ping a host.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)
    for name in commands.COMMAND_NAMES:
        module = commands.load(name)
        command = sub.add_parser(name, help=module.HELP, description=module.HELP)
        module.add_arguments(command, config)
        command.add_argument(
            "-v", "--verbose", action="store_true", help="Enable debug logging"
        )
        if name != "show":
            command.add_argument("--export", metavar="FILE", help="Write results to a JSON file")
        command.set_defaults(handler=module.run)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Parse *argv*, run the selected command and return its exit status."""

    config = Config()
    parser = build_parser(config)
    args = parser.parse_args(argv)

    level = "DEBUG" if args.verbose else config.get("log_level", "WARNING")
    setup_logging(level, config.get("log_file"))

    try:
        return args.handler(args, config)
    except InvalidScanConfigError as exc:
        parser.error(str(exc))
    except RecordError as exc:
        console.print(f"[red]Invalid record:[/] {exc}")
        return 2
    except (PingPalError, OSError) as exc:
        logger.debug("Command failed", exc_info=True)
        console.print(f"[red]Error:[/] {exc}")
        return 1


__all__ = ["build_parser", "main"]
