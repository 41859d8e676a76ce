"""Port number to protocol name lookups backed by a static CSV table."""
from __future__ import annotations

import csv
import io
import logging
import os
import threading
from functools import lru_cache
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path

from .errors import ProtocolTableError

logger = logging.getLogger(__name__)

UNKNOWN_PROTOCOL = "No specific protocol associated with this port."

# The packaged table can be replaced via ``PINGPAL_PORT_TABLE``.
if "PINGPAL_PORT_TABLE" in os.environ:
    _TABLE_SOURCE: Path | Traversable = Path(os.environ["PINGPAL_PORT_TABLE"])
else:
    _TABLE_SOURCE = resources.files("pingpal.scan").joinpath("data", "port_list.csv")


def load_protocol_table(source: Path | Traversable) -> dict[int, str]:
    """Parse a ``port,protocol`` CSV file (with a header row) from *source*."""

    try:
        text = source.read_text(encoding="utf-8")
    except (OSError, ValueError) as exc:
        raise ProtocolTableError(f"Port list not found: {source}") from exc

    table: dict[int, str] = {}
    reader = csv.reader(io.StringIO(text))
    next(reader, None)
    for lineno, row in enumerate(reader, start=2):
        if not row or not "".join(row).strip():
            continue
        if len(row) < 2:
            raise ProtocolTableError(f"{source}:{lineno}: expected 'port,protocol'")
        try:
            port = int(row[0].strip())
        except ValueError as exc:
            raise ProtocolTableError(f"{source}:{lineno}: invalid port {row[0]!r}") from exc
        table[port] = row[1].strip()
    return table


class ProtocolResolver:
    """Read-only lookup from port number to protocol name.

    The table is loaded on first use. A load failure is logged once and
    every lookup afterwards returns :data:`UNKNOWN_PROTOCOL`.
    """

    def __init__(
        self,
        source: Path | Traversable | None = None,
        *,
        table: dict[int, str] | None = None,
    ) -> None:
        self.source = source if source is not None else _TABLE_SOURCE
        self._table: dict[int, str] | None = dict(table) if table is not None else None
        self._lock = threading.Lock()
        self.load_error: ProtocolTableError | None = None

    def _ensure_loaded(self) -> dict[int, str]:
        if self._table is not None:
            return self._table
        with self._lock:
            if self._table is None:
                try:
                    self._table = load_protocol_table(self.source)
                except ProtocolTableError as exc:
                    logger.warning("Failed to load protocol table: %s", exc)
                    self.load_error = exc
                    self._table = {}
        return self._table

    @property
    def loaded(self) -> bool:
        self._ensure_loaded()
        return self.load_error is None

    def lookup(self, port: int) -> str:
        """Return the protocol registered for *port* or the unknown sentinel."""

        return self._ensure_loaded().get(port, UNKNOWN_PROTOCOL)

    def __len__(self) -> int:
        return len(self._ensure_loaded())


@lru_cache()
def get_resolver() -> ProtocolResolver:
    """Return the process-wide resolver for the packaged table."""

    return ProtocolResolver()


__all__ = [
    "UNKNOWN_PROTOCOL",
    "ProtocolResolver",
    "get_resolver",
    "load_protocol_table",
]
