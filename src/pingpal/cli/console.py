"""Rich presentation of scan progress and results."""
from __future__ import annotations

from typing import Iterable, Sequence

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from pingpal.scan.models import (
    HostUp,
    PingSample,
    PingSummary,
    PortOpen,
    ScanConfig,
    ScanType,
    Verdict,
)

console = Console()


class RichReporter:
    """Progress reporter that drives a rich progress bar.

    Callbacks may arrive from the coordinator's worker thread.
    """

    def __init__(self, description: str, *, indeterminate: bool = False, out: Console | None = None) -> None:
        self.console = out or console
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold]{task.description}"),
            BarColumn(),
            MofNCompleteColumn() if not indeterminate else TextColumn(""),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        )
        self._task = self.progress.add_task(description, total=None if indeterminate else 100)

    def __enter__(self) -> "RichReporter":
        self.progress.start()
        return self

    def __exit__(self, *exc: object) -> None:
        self.progress.stop()

    def on_progress(self, percent: int) -> None:
        self.progress.update(self._task, completed=percent)

    def on_result(self, verdict: Verdict) -> None:
        self.progress.console.print(describe_verdict(verdict))

    def on_complete(self, summary: PingSummary | None) -> None:
        self.progress.stop_task(self._task)


def describe_verdict(verdict: Verdict) -> str:
    if isinstance(verdict, HostUp):
        return f"[green]up[/]    {verdict.address}"
    if isinstance(verdict, PortOpen):
        return f"[green]open[/]  {verdict.port:<5} {verdict.protocol}"
    if verdict.success:
        return f"reply  time={verdict.round_trip}ms  loss={verdict.loss_percent:.2f}%"
    return f"[red]timeout[/]  loss={verdict.loss_percent:.2f}%"


def results_table(config: ScanConfig, verdicts: Sequence[Verdict]) -> Table:
    """Return a table listing *verdicts* for the scan described by *config*."""

    if config.scan_type is ScanType.ADDRESS_SWEEP:
        table = Table(title=f"Live hosts in {config.network_range}", expand=False)
        table.add_column("IP Address")
        for v in sorted(
            (v for v in verdicts if isinstance(v, HostUp)),
            key=lambda v: tuple(int(p) for p in v.address.split(".")),
        ):
            table.add_row(v.address)
        return table

    if config.scan_type is ScanType.PORT_SWEEP:
        table = Table(title=f"Open ports on {config.address}", expand=False)
        table.add_column("Port", justify="right")
        table.add_column("Protocol")
        for v in sorted((v for v in verdicts if isinstance(v, PortOpen)), key=lambda v: v.port):
            table.add_row(str(v.port), v.protocol)
        return table

    table = Table(title=f"Pings to {config.address}", expand=False)
    table.add_column("#", justify="right")
    table.add_column("Round trip (ms)", justify="right")
    table.add_column("Success")
    table.add_column("Loss %", justify="right")
    for index, v in enumerate((v for v in verdicts if isinstance(v, PingSample)), start=1):
        table.add_row(
            str(index),
            str(v.round_trip),
            "yes" if v.success else "[red]no[/]",
            f"{v.loss_percent:.2f}",
        )
    return table


def summary_tables(summary: PingSummary) -> Iterable[Table]:
    """Yield the response-time and packet tables for a ping summary."""

    response = Table(title="Response times (ms)", expand=False)
    response.add_column("Minimum", justify="right")
    response.add_column("Maximum", justify="right")
    response.add_column("Average", justify="right")
    response.add_row(
        str(summary.minimum),
        str(summary.maximum),
        "-" if summary.average is None else f"{summary.average:.2f}",
    )
    yield response

    packets = Table(title="Packets", expand=False)
    packets.add_column("Sent", justify="right")
    packets.add_column("Received", justify="right")
    packets.add_column("Lost", justify="right")
    packets.add_column("Loss %", justify="right")
    packets.add_row(
        str(summary.total),
        str(summary.successful),
        str(summary.failed),
        f"{summary.loss_percent:.2f}",
    )
    yield packets


__all__ = ["RichReporter", "console", "describe_verdict", "results_table", "summary_tables"]
