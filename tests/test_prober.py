import os
import socket
import socketserver
import subprocess
import sys
import threading
import time

import pytest

import pingpal.scan.prober as prober_module
from pingpal.scan.prober import Prober, _ping_command


class _Handler(socketserver.BaseRequestHandler):
    def handle(self):
        self.request.recv(1)


def test_probe_port_open_and_closed():
    prober = Prober(use_ping=False)
    with socketserver.TCPServer(("127.0.0.1", 0), _Handler) as server:
        port = server.server_address[1]
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        try:
            assert prober.probe_port("127.0.0.1", port, 1000)
        finally:
            server.shutdown()
            thread.join()

    assert not prober.probe_port("127.0.0.1", port, 1000)


def test_probe_port_bad_address_is_negative():
    assert not Prober(use_ping=False).probe_port("not a host", 80, 100)


def test_probe_host_unresolvable(monkeypatch):
    def fail(address):
        raise socket.gaierror("no such host")

    monkeypatch.setattr(prober_module.socket, "gethostbyname", fail)
    assert not Prober(use_ping=True).probe_host("nowhere.invalid", 100)


def test_probe_host_tcp_echo_refused_counts_as_up():
    assert Prober(use_ping=False).probe_host("127.0.0.1", 500)


def test_prober_falls_back_without_ping_binary(monkeypatch):
    monkeypatch.setattr(prober_module.shutil, "which", lambda name: None)
    assert Prober().use_ping is False


def test_icmp_echo_uses_return_code(monkeypatch):
    codes = iter([0, 1])

    def fake_run(cmd, **kwargs):
        return subprocess.CompletedProcess(cmd, next(codes))

    monkeypatch.setattr(prober_module.subprocess, "run", fake_run)
    prober = Prober(use_ping=True)
    assert prober.probe_host("127.0.0.1", 200)
    assert not prober.probe_host("127.0.0.1", 200)


def test_icmp_echo_timeout_is_negative(monkeypatch):
    def fake_run(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

    monkeypatch.setattr(prober_module.subprocess, "run", fake_run)
    assert not Prober(use_ping=True).probe_host("127.0.0.1", 200)


def test_icmp_echo_missing_binary_switches_to_tcp(monkeypatch):
    def fake_run(cmd, **kwargs):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(prober_module.subprocess, "run", fake_run)
    monkeypatch.setattr(Prober, "_tcp_echo", lambda self, address, timeout_ms: True)
    prober = Prober(use_ping=True)
    assert prober.probe_host("127.0.0.1", 200)
    assert prober.use_ping is False


def test_ping_command_per_platform(monkeypatch):
    monkeypatch.setattr(prober_module.platform, "system", lambda: "Windows")
    assert _ping_command("1.2.3.4", 500) == ["ping", "-n", "1", "-w", "500", "1.2.3.4"]
    monkeypatch.setattr(prober_module.platform, "system", lambda: "Linux")
    assert _ping_command("1.2.3.4", 1500) == ["ping", "-c", "1", "-W", "1.500", "1.2.3.4"]
    assert _ping_command("1.2.3.4", 100) == ["ping", "-c", "1", "-W", "0.100", "1.2.3.4"]


def test_probe_latency_is_capped_at_timeout(monkeypatch):
    def slow(self, address, timeout_ms):
        time.sleep(0.15)
        return False

    monkeypatch.setattr(Prober, "probe_host", slow)
    assert Prober(use_ping=False).probe_latency("127.0.0.1", 100) == (False, 100)


def _slow_ping(tmp_path, monkeypatch, seconds):
    script = tmp_path / "ping"
    script.write_text(f"#!/bin/sh\nsleep {seconds}\nexit 0\n", encoding="utf-8")
    script.chmod(0o755)
    monkeypatch.setenv("PATH", f"{tmp_path}{os.pathsep}{os.environ.get('PATH', '')}")
    monkeypatch.setattr(prober_module.platform, "system", lambda: "Linux")


@pytest.mark.skipif(sys.platform == "win32", reason="needs a POSIX shell script")
def test_host_check_gives_up_on_late_reply(tmp_path, monkeypatch):
    _slow_ping(tmp_path, monkeypatch, 0.6)
    start = time.perf_counter()
    assert not Prober(use_ping=True).probe_host("127.0.0.1", 100)
    assert time.perf_counter() - start < 0.55


@pytest.mark.skipif(sys.platform == "win32", reason="needs a POSIX shell script")
def test_latency_reply_after_timeout_is_a_failure(tmp_path, monkeypatch):
    _slow_ping(tmp_path, monkeypatch, 0.15)
    assert Prober(use_ping=True).probe_latency("127.0.0.1", 100) == (False, 100)
