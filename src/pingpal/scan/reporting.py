"""Progress reporting interface implemented by presentation layers."""
from __future__ import annotations

import logging
from typing import Callable, Protocol, runtime_checkable

from .models import PingSummary, Verdict

logger = logging.getLogger(__name__)


@runtime_checkable
class ProgressReporter(Protocol):
    """Receives progress, verdicts and the final summary of a scan.

    Sweep scans may invoke these methods from a thread other than the one
    that called :meth:`ScanCoordinator.start`; implementations must return
    quickly.
    """

    def on_progress(self, percent: int) -> None: ...

    def on_result(self, verdict: Verdict) -> None: ...

    def on_complete(self, summary: PingSummary | None) -> None: ...


class NullReporter:
    """Reporter that discards every notification."""

    def on_progress(self, percent: int) -> None:
        pass

    def on_result(self, verdict: Verdict) -> None:
        pass

    def on_complete(self, summary: PingSummary | None) -> None:
        pass


class CallbackReporter:
    """Adapt plain callables to the :class:`ProgressReporter` interface."""

    def __init__(
        self,
        progress: Callable[[int], None] | None = None,
        result: Callable[[Verdict], None] | None = None,
        complete: Callable[[PingSummary | None], None] | None = None,
    ) -> None:
        self._progress = progress
        self._result = result
        self._complete = complete

    def on_progress(self, percent: int) -> None:
        if self._progress is not None:
            self._progress(percent)

    def on_result(self, verdict: Verdict) -> None:
        if self._result is not None:
            self._result(verdict)

    def on_complete(self, summary: PingSummary | None) -> None:
        if self._complete is not None:
            self._complete(summary)


class SafeReporter:
    """Wrap a reporter so its failures are logged instead of aborting a scan."""

    def __init__(self, inner: ProgressReporter) -> None:
        self.inner = inner

    def on_progress(self, percent: int) -> None:
        try:
            self.inner.on_progress(percent)
        except Exception:
            logger.debug("progress callback raised", exc_info=True)

    def on_result(self, verdict: Verdict) -> None:
        try:
            self.inner.on_result(verdict)
        except Exception:
            logger.debug("result callback raised", exc_info=True)

    def on_complete(self, summary: PingSummary | None) -> None:
        try:
            self.inner.on_complete(summary)
        except Exception:
            logger.debug("completion callback raised", exc_info=True)


__all__ = ["CallbackReporter", "NullReporter", "ProgressReporter", "SafeReporter"]
