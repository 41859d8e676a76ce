"""Run a coordinator on a worker thread while the main thread handles Ctrl-C."""
from __future__ import annotations

import logging
from argparse import Namespace
from pathlib import Path

from pingpal.scan.coordinator import ScanCoordinator, ScanSession
from pingpal.scan.records import save_record

from .console import RichReporter, console, results_table

logger = logging.getLogger(__name__)

_JOIN_POLL = 0.2


def _wait(thread) -> None:
    while thread.is_alive():
        thread.join(_JOIN_POLL)


def run_scan(coordinator: ScanCoordinator, reporter: RichReporter) -> ScanSession:
    """Start *coordinator* in the background and wait for it to finish.

    A keyboard interrupt is turned into a stop request and a second one
    into a forced shutdown. Results collected up to that point remain
    available on the returned session.
    """

    with reporter:
        thread = coordinator.start_in_background()
        try:
            _wait(thread)
        except KeyboardInterrupt:
            logger.debug("Interrupted; requesting stop")
            console.print("[yellow]Stopping scan; press Ctrl-C again to abort.[/]")
            coordinator.request_stop()
            try:
                _wait(thread)
            except KeyboardInterrupt:
                console.print("[yellow]Aborting outstanding probes...[/]")
                coordinator.force_shutdown()
                _wait(thread)
    session = coordinator.session
    if session.timed_out:
        console.print("[red]Scan exceeded its grace period; outstanding probes were cancelled.[/]")
    return session


def finish(args: Namespace, coordinator: ScanCoordinator) -> None:
    """Print the results table and export them when ``--export`` was given."""

    verdicts = coordinator.results.snapshot()
    console.print(results_table(coordinator.config, verdicts))
    if getattr(args, "export", None):
        path = save_record(Path(args.export), coordinator.config, verdicts)
        console.print(f"Exported results to {path}")


__all__ = ["finish", "run_scan"]
