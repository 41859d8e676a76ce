import threading
import time

import pytest

from pingpal.scan.protocols import ProtocolResolver


class FakeProber:
    """Scripted stand-in for :class:`pingpal.scan.prober.Prober`."""

    def __init__(self, up=(), open_ports=(), latencies=(), delay=0.0, on_call=None):
        self.up = set(up)
        self.open_ports = set(open_ports)
        self.latencies = list(latencies)
        self.delay = delay
        self.on_call = on_call
        self.calls = []
        self._lock = threading.Lock()

    def _called(self, target):
        with self._lock:
            self.calls.append(target)
        if self.on_call is not None:
            self.on_call(target)
        if self.delay:
            time.sleep(self.delay)

    def probe_host(self, address, timeout_ms):
        self._called(address)
        return address in self.up

    def probe_port(self, address, port, timeout_ms):
        self._called(port)
        return port in self.open_ports

    def probe_latency(self, address, timeout_ms):
        self._called(address)
        with self._lock:
            if self.latencies:
                return self.latencies.pop(0)
        return True, 1


@pytest.fixture
def fake_prober():
    return FakeProber


@pytest.fixture(autouse=True)
def pingpal_home(tmp_path, monkeypatch):
    home = tmp_path / "pingpal-home"
    monkeypatch.setenv("PINGPAL_HOME", str(home))
    monkeypatch.delenv("PINGPAL_LOG_FILE", raising=False)
    return home


@pytest.fixture
def resolver():
    return ProtocolResolver(table={22: "SSH", 80: "HTTP", 443: "HTTPS"})
