"""Result collection and ping statistics."""
from __future__ import annotations

import math
import threading
from typing import Generic, Iterable, Iterator, TypeVar

from .errors import NoSamplesError
from .models import PingSample, PingSummary, Verdict

V = TypeVar("V", bound=Verdict)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round *value* to *digits* decimals with ties away from zero."""

    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def progress_percent(completed: int, total: int) -> int:
    """Return ``round(100 * completed / total)`` as an integer percentage."""

    if total <= 0:
        return 100
    return int(round_half_up(100 * completed / total))


def loss_percent(successes: int, attempts: int) -> float:
    """Percentage of failed attempts, rounded to two decimals.

    Zero attempts count as no loss.
    """

    if attempts <= 0:
        return 0.0
    return round_half_up((1 - successes / attempts) * 100, 2)


class ResultSet(Generic[V]):
    """Append-only collection of verdicts plus progress counters.

    Appends and completion updates may come from any thread. Verdicts are
    kept in insertion order, which only carries meaning for ping runs.
    """

    def __init__(self, total: int = 0) -> None:
        self._lock = threading.Lock()
        self._verdicts: list[V] = []
        self._total = total
        self._scanned = 0

    def reset(self, total: int) -> None:
        with self._lock:
            self._verdicts.clear()
            self._total = total
            self._scanned = 0

    def append(self, verdict: V) -> None:
        with self._lock:
            self._verdicts.append(verdict)

    def mark_scanned(self) -> int:
        """Count one finished target and return the new scanned total."""

        with self._lock:
            if self._scanned < self._total:
                self._scanned += 1
            return self._scanned

    @property
    def total(self) -> int:
        with self._lock:
            return self._total

    @property
    def scanned(self) -> int:
        with self._lock:
            return self._scanned

    @property
    def progress(self) -> float:
        """Fraction of targets scanned so far, between 0 and 1."""

        with self._lock:
            if self._total <= 0:
                return 1.0
            return self._scanned / self._total

    @property
    def percent(self) -> int:
        with self._lock:
            return progress_percent(self._scanned, self._total)

    def snapshot(self) -> list[V]:
        """Return a copy of the verdicts collected so far."""

        with self._lock:
            return list(self._verdicts)

    def __iter__(self) -> Iterator[V]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        with self._lock:
            return len(self._verdicts)


class PingTally:
    """Running attempt/success counters for a ping run."""

    def __init__(self) -> None:
        self.attempts = 0
        self.successes = 0

    def record(self, success: bool) -> float:
        """Count one attempt and return the cumulative loss percentage."""

        self.attempts += 1
        if success:
            self.successes += 1
        return self.loss_percent

    @property
    def failures(self) -> int:
        return self.attempts - self.successes

    @property
    def loss_percent(self) -> float:
        return loss_percent(self.successes, self.attempts)


def minimum_round_trip(samples: Iterable[PingSample]) -> int:
    """Smallest round trip over all samples, failed ones included."""

    values = [s.round_trip for s in samples]
    if not values:
        raise NoSamplesError("no ping samples recorded")
    return min(values)


def maximum_round_trip(samples: Iterable[PingSample]) -> int:
    """Largest round trip over all samples, failed ones included."""

    values = [s.round_trip for s in samples]
    if not values:
        raise NoSamplesError("no ping samples recorded")
    return max(values)


def average_round_trip(samples: Iterable[PingSample]) -> float | None:
    """Mean round trip of the successful samples, or ``None`` if there are none."""

    successful = [s.round_trip for s in samples if s.success]
    if not successful:
        return None
    return round_half_up(sum(successful) / len(successful), 2)


def summarize(samples: Iterable[PingSample]) -> PingSummary:
    """Derive summary statistics for a ping run.

    Raises :class:`NoSamplesError` when *samples* is empty.
    """

    samples = list(samples)
    if not samples:
        raise NoSamplesError("no ping samples recorded")
    successful = sum(1 for s in samples if s.success)
    return PingSummary(
        minimum=minimum_round_trip(samples),
        maximum=maximum_round_trip(samples),
        average=average_round_trip(samples),
        total=len(samples),
        successful=successful,
        failed=len(samples) - successful,
        loss_percent=loss_percent(successful, len(samples)),
    )


__all__ = [
    "PingTally",
    "ResultSet",
    "average_round_trip",
    "loss_percent",
    "maximum_round_trip",
    "minimum_round_trip",
    "progress_percent",
    "round_half_up",
    "summarize",
]
