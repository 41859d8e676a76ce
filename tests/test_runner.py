from types import SimpleNamespace

from pingpal.cli.console import RichReporter
from pingpal.cli.runner import run_scan


class _InterruptedThread:
    """Thread stand-in whose joins raise ``KeyboardInterrupt`` a set number of times."""

    def __init__(self, interrupts):
        self.interrupts = interrupts
        self.alive = True

    def is_alive(self):
        return self.alive

    def join(self, timeout=None):
        if self.interrupts:
            self.interrupts -= 1
            raise KeyboardInterrupt
        self.alive = False


class _Coordinator:
    def __init__(self, interrupts):
        self.thread = _InterruptedThread(interrupts)
        self.calls = []
        self.session = SimpleNamespace(timed_out=False)

    def start_in_background(self):
        return self.thread

    def request_stop(self):
        self.calls.append("request_stop")

    def force_shutdown(self):
        self.calls.append("force_shutdown")


def test_single_interrupt_requests_stop():
    coordinator = _Coordinator(interrupts=1)
    run_scan(coordinator, RichReporter("sweep"))
    assert coordinator.calls == ["request_stop"]
    assert not coordinator.thread.alive


def test_second_interrupt_forces_shutdown():
    coordinator = _Coordinator(interrupts=2)
    run_scan(coordinator, RichReporter("sweep"))
    assert coordinator.calls == ["request_stop", "force_shutdown"]
    assert not coordinator.thread.alive


def test_uninterrupted_run_leaves_scan_alone():
    coordinator = _Coordinator(interrupts=0)
    session = run_scan(coordinator, RichReporter("sweep"))
    assert coordinator.calls == []
    assert session is coordinator.session
