"""Blocking reachability and connectivity probes.

Every probe is bounded by a timeout in milliseconds and reports failure as a
negative verdict: unreachable hosts, refused connections, timeouts and
malformed addresses never raise.
"""
from __future__ import annotations

import errno
import logging
import platform
import shutil
import socket
import subprocess
import threading
import time

logger = logging.getLogger(__name__)

# TCP port used when no ping binary is available. A refused connection still
# proves the host answered.
ECHO_PORT = 7

# Extra seconds granted to the ping process for start-up and exit.
_PING_PROCESS_SLACK = 0.25


def _ping_command(address: str, timeout_ms: int) -> list[str]:
    system = platform.system().lower()
    if system == "windows":
        return ["ping", "-n", "1", "-w", str(timeout_ms), address]
    if system == "darwin":
        return ["ping", "-c", "1", "-W", str(timeout_ms), address]
    return ["ping", "-c", "1", "-W", f"{timeout_ms / 1000:.3f}", address]


def _resolve(address: str) -> str | None:
    try:
        return socket.gethostbyname(address)
    except (OSError, UnicodeError):
        return None


class Prober:
    """Run single probes against a host.

    ``use_ping`` selects the system ``ping`` binary for host checks; when it
    is ``None`` the binary is used if one can be found on ``PATH`` and a TCP
    connect to :data:`ECHO_PORT` is used otherwise.
    """

    def __init__(self, *, use_ping: bool | None = None) -> None:
        if use_ping is None:
            use_ping = shutil.which("ping") is not None
        self.use_ping = use_ping
        self._lock = threading.Lock()

    def probe_host(self, address: str, timeout_ms: int) -> bool:
        """Return ``True`` if *address* answers within *timeout_ms*."""

        resolved = _resolve(address)
        if resolved is None:
            return False
        if self.use_ping:
            return self._icmp_echo(resolved, timeout_ms)
        return self._tcp_echo(resolved, timeout_ms)

    def probe_port(self, address: str, port: int, timeout_ms: int) -> bool:
        """Return ``True`` if a TCP connection to *port* succeeds."""

        try:
            with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
                sock.settimeout(timeout_ms / 1000)
                return sock.connect_ex((address, port)) == 0
        except (OSError, OverflowError, UnicodeError):
            return False

    def probe_latency(self, address: str, timeout_ms: int) -> tuple[bool, int]:
        """Time one host probe and return ``(reachable, elapsed_ms)``.

        A reply slower than *timeout_ms* counts as unreachable, so the elapsed
        time never exceeds *timeout_ms*.
        """

        start = time.perf_counter()
        reachable = self.probe_host(address, timeout_ms)
        elapsed = int((time.perf_counter() - start) * 1000)
        if elapsed > timeout_ms:
            return False, timeout_ms
        return reachable, elapsed

    def _icmp_echo(self, address: str, timeout_ms: int) -> bool:
        cmd = _ping_command(address, timeout_ms)
        deadline = timeout_ms / 1000 + _PING_PROCESS_SLACK
        try:
            proc = subprocess.run(
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=deadline,
                check=False,
            )
        except subprocess.TimeoutExpired:
            return False
        except OSError as exc:
            logger.debug("ping unavailable (%s); falling back to TCP echo", exc)
            with self._lock:
                self.use_ping = False
            return self._tcp_echo(address, timeout_ms)
        return proc.returncode == 0

    def _tcp_echo(self, address: str, timeout_ms: int) -> bool:
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
                sock.settimeout(timeout_ms / 1000)
                result = sock.connect_ex((address, ECHO_PORT))
        except OSError:
            return False
        return result in (0, errno.ECONNREFUSED)


__all__ = ["ECHO_PORT", "Prober"]
