"""Default settings for PingPal."""
from __future__ import annotations

from typing import Any, Dict

DEFAULT_SETTINGS: Dict[str, Any] = {
    # Address and port sweeps
    "scan_timeout": 1000,
    "pool_multiplier": 32,
    "grace_period": 600.0,
    "strict_stop": False,
    # Timed ping
    "ping_interval": 1000,
    "ping_count": 4,
    # Logging
    "log_level": "WARNING",
    "log_file": None,
}

__all__ = ["DEFAULT_SETTINGS"]
