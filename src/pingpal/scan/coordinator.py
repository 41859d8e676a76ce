"""Orchestration of one scan run: sweeps over a worker pool, paced pings."""
from __future__ import annotations

import logging
import os
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from enum import Enum
from typing import Sequence

import psutil

from .errors import ScanSessionError
from .models import (
    AddressSweepConfig,
    HostUp,
    PingConfig,
    PingSample,
    PingSummary,
    PortOpen,
    PortSweepConfig,
    ScanConfig,
    ScanTarget,
    Verdict,
)
from .prober import Prober
from .protocols import ProtocolResolver, get_resolver
from .ranges import expand_addresses, expand_ports
from .reporting import NullReporter, ProgressReporter, SafeReporter
from .results import PingTally, ResultSet, progress_percent, summarize

logger = logging.getLogger(__name__)

# Probe threads per logical core, and seconds to wait for outstanding probes
# once the last target is submitted.
POOL_MULTIPLIER = int(os.environ.get("PINGPAL_POOL_MULTIPLIER", 32))
GRACE_PERIOD = float(os.environ.get("PINGPAL_GRACE_PERIOD", 600.0))

# Outstanding futures allowed per worker before submission waits.
_PENDING_PER_WORKER = 4

# Seconds between checks for a forced shutdown while probes are in flight.
_ABORT_POLL = 0.1


def default_pool_size(multiplier: int = POOL_MULTIPLIER) -> int:
    """Return ``max(1, logical cores) * multiplier``."""

    cores = psutil.cpu_count(logical=True) or 1
    return max(1, cores) * max(1, multiplier)


class SessionState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    STOPPING = "stopping"
    COMPLETED = "completed"


class ScanSession:
    """Mutable state of a single scan run.

    A session moves ``pending -> running -> (stopping ->) completed`` and is
    never restarted.
    """

    def __init__(self) -> None:
        self.state = SessionState.PENDING
        self.results: ResultSet[Verdict] = ResultSet()
        self.summary: PingSummary | None = None
        self.timed_out = False
        self.started_at: float | None = None
        self.finished_at: float | None = None
        self._stop = threading.Event()
        self._abort = threading.Event()
        self._lock = threading.Lock()

    @property
    def stop_requested(self) -> bool:
        return self._stop.is_set()

    @property
    def aborted(self) -> bool:
        return self._abort.is_set()

    @property
    def completed(self) -> bool:
        return self.state is SessionState.COMPLETED

    def request_stop(self) -> None:
        with self._lock:
            self._stop.set()
            if self.state is SessionState.RUNNING:
                self.state = SessionState.STOPPING

    def force_shutdown(self) -> None:
        self._abort.set()
        self.request_stop()

    def wait_for_stop(self, timeout: float) -> bool:
        """Sleep up to *timeout* seconds; return ``True`` if a stop arrived."""

        return self._stop.wait(timeout)

    def _begin(self) -> None:
        with self._lock:
            if self.state is not SessionState.PENDING:
                raise ScanSessionError(
                    f"session is {self.state.value}; create a new session to scan again"
                )
            if self._stop.is_set():
                raise ScanSessionError(
                    "stop was requested; create a new session to scan again"
                )
            self.state = SessionState.RUNNING
            self.started_at = time.time()

    def _finish(self) -> None:
        with self._lock:
            self.state = SessionState.COMPLETED
            self.finished_at = time.time()

    @property
    def duration(self) -> float | None:
        if self.started_at is None or self.finished_at is None:
            return None
        return self.finished_at - self.started_at


class ScanCoordinator:
    """Run the scan described by *config* end-to-end.

    Address and port sweeps fan their targets out over a fixed-size thread
    pool and record positive verdicts only. Ping runs probe a single address
    once per interval on the calling thread and record every attempt.

    A stop request ends a ping run at the next interval boundary. For sweeps
    it only blocks restarting the session unless ``strict_stop`` is set, in
    which case no further targets are submitted and queued units skip their
    probe. :meth:`force_shutdown` does the same regardless of ``strict_stop``
    and returns without waiting for probes already in flight.
    """

    def __init__(
        self,
        config: ScanConfig,
        *,
        prober: Prober | None = None,
        reporter: ProgressReporter | None = None,
        resolver: ProtocolResolver | None = None,
        pool_size: int | None = None,
        grace_period: float = GRACE_PERIOD,
        strict_stop: bool = False,
    ) -> None:
        self.config = config
        self.prober = prober or Prober()
        self.reporter: ProgressReporter = SafeReporter(reporter or NullReporter())
        self.resolver = resolver or get_resolver()
        self.pool_size = max(1, pool_size if pool_size is not None else default_pool_size())
        self.grace_period = grace_period
        self.strict_stop = strict_stop
        self._session = ScanSession()
        self._lock = threading.Lock()

    # -- session management -------------------------------------------------
    @property
    def session(self) -> ScanSession:
        return self._session

    @property
    def results(self) -> ResultSet[Verdict]:
        return self._session.results

    @property
    def stop_requested(self) -> bool:
        return self._session.stop_requested

    def request_stop(self) -> None:
        """Ask the current run to stop; see the class docstring for semantics."""

        logger.debug("Stop requested for %s", self.config.scan_type.value)
        self._session.request_stop()

    def force_shutdown(self) -> None:
        """Stop now: queued probes are cancelled and in-flight ones abandoned.

        Results already collected stay on the session.
        """

        logger.debug("Forced shutdown of %s", self.config.scan_type.value)
        self._session.force_shutdown()

    def new_session(self) -> ScanSession:
        """Replace a finished or unused session with a fresh one."""

        with self._lock:
            if self._session.state in (SessionState.RUNNING, SessionState.STOPPING):
                raise ScanSessionError("cannot replace a session that is still running")
            self._session = ScanSession()
            return self._session

    def targets(self) -> Sequence[ScanTarget]:
        """Return the ordered targets this scan will probe."""

        config = self.config
        if isinstance(config, AddressSweepConfig):
            return expand_addresses(config.network_range)
        if isinstance(config, PortSweepConfig):
            return expand_ports(config.low, config.high)
        return [config.address]

    def start(self) -> ScanSession:
        """Run the scan to completion on the calling thread.

        Raises :class:`ScanSessionError` if the current session was already
        started or a stop was requested before it began.
        """

        session = self._session
        session._begin()
        logger.debug("Starting %s scan", self.config.scan_type.value)
        try:
            if isinstance(self.config, PingConfig):
                self._run_ping(session, self.config)
            else:
                self._run_sweep(session)
        finally:
            session._finish()
            logger.debug(
                "%s scan finished with %d result(s)",
                self.config.scan_type.value,
                len(session.results),
            )
        return session

    def start_in_background(self) -> threading.Thread:
        """Run :meth:`start` on a daemon thread and return the thread."""

        thread = threading.Thread(
            target=self.start,
            name=f"pingpal-{self.config.scan_type.value}",
            daemon=True,
        )
        thread.start()
        return thread

    # -- sweeps -------------------------------------------------------------
    def _probe(self, session: ScanSession, target: ScanTarget) -> Verdict | None:
        if session.aborted or (self.strict_stop and session.stop_requested):
            return None
        config = self.config
        if isinstance(config, AddressSweepConfig):
            address = str(target)
            if self.prober.probe_host(address, config.timeout):
                return HostUp(address)
            return None
        if isinstance(config, PortSweepConfig):
            port = int(target)
            if self.prober.probe_port(config.address, port, config.timeout):
                return PortOpen(port, self.resolver.lookup(port))
            return None
        raise TypeError(f"not a sweep configuration: {config!r}")

    def _collect(self, session: ScanSession, future: Future, total: int) -> None:
        verdict = future.result()
        if verdict is not None:
            session.results.append(verdict)
            self.reporter.on_result(verdict)
        scanned = session.results.mark_scanned()
        self.reporter.on_progress(progress_percent(scanned, total))

    def _run_sweep(self, session: ScanSession) -> None:
        targets = self.targets()
        total = len(targets)
        session.results.reset(total)
        self.reporter.on_progress(0)

        workers = self.pool_size
        max_pending = workers * _PENDING_PER_WORKER
        logger.debug("Sweeping %d target(s) with %d worker(s)", total, workers)

        jobs = iter(targets)
        pending: set[Future] = set()
        submitting = True
        deadline: float | None = None
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pingpal-probe")
        try:
            while True:
                while submitting and len(pending) < max_pending:
                    if session.aborted or (self.strict_stop and session.stop_requested):
                        submitting = False
                        break
                    try:
                        target = next(jobs)
                    except StopIteration:
                        submitting = False
                        break
                    pending.add(executor.submit(self._probe, session, target))

                if not submitting and deadline is None:
                    deadline = time.monotonic() + self.grace_period
                if not pending or session.aborted:
                    break

                timeout = _ABORT_POLL
                if deadline is not None:
                    timeout = min(timeout, max(0.0, deadline - time.monotonic()))
                done, pending = wait(pending, timeout=timeout, return_when=FIRST_COMPLETED)
                for future in done:
                    self._collect(session, future, total)
                if not done and deadline is not None and time.monotonic() >= deadline:
                    break
        finally:
            if pending:
                session.timed_out = (
                    not session.aborted
                    and deadline is not None
                    and time.monotonic() >= deadline
                )
                if session.aborted:
                    logger.debug("Forced shutdown; abandoning %d probe(s)", len(pending))
                elif session.timed_out:
                    logger.warning(
                        "Cancelling %d outstanding probe(s) after %.0fs grace period",
                        len(pending),
                        self.grace_period,
                    )
                else:
                    logger.debug("Sweep interrupted; cancelling %d probe(s)", len(pending))
                executor.shutdown(wait=False, cancel_futures=True)
            else:
                executor.shutdown(wait=True)

        self.reporter.on_complete(None)

    # -- ping ---------------------------------------------------------------
    def _run_ping(self, session: ScanSession, config: PingConfig) -> None:
        total = 0 if config.continuous else config.count
        session.results.reset(total)
        self.reporter.on_progress(0)

        tally = PingTally()
        interval = config.interval / 1000
        next_deadline = time.monotonic() + interval
        while (tally.attempts < config.count or config.continuous) and not session.stop_requested:
            reachable, elapsed = self.prober.probe_latency(config.address, config.interval)
            loss = tally.record(reachable)
            sample = PingSample(elapsed if reachable else config.interval, reachable, loss)
            session.results.append(sample)
            self.reporter.on_result(sample)
            if not config.continuous:
                scanned = session.results.mark_scanned()
                self.reporter.on_progress(progress_percent(scanned, total))

            remaining = max(0.0, next_deadline - time.monotonic())
            if session.wait_for_stop(remaining):
                break
            next_deadline += interval

        samples = [v for v in session.results.snapshot() if isinstance(v, PingSample)]
        session.summary = summarize(samples) if samples else None
        self.reporter.on_complete(session.summary)


__all__ = [
    "GRACE_PERIOD",
    "POOL_MULTIPLIER",
    "ScanCoordinator",
    "ScanSession",
    "SessionState",
    "default_pool_size",
]
