"""Filesystem helpers for configuration storage."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ConfigPaths:
    """Resolved filesystem locations for configuration data."""

    root: Path
    config_file: Path

    @classmethod
    def create(cls, root: Path | None = None) -> "ConfigPaths":
        """Return paths rooted at *root*, ``PINGPAL_HOME`` or ``~/.pingpal``."""

        if root is None and os.environ.get("PINGPAL_HOME"):
            root = Path(os.environ["PINGPAL_HOME"])
        base = Path(root) if root is not None else Path.home() / ".pingpal"
        base = base.expanduser().resolve()
        return cls(root=base, config_file=base / "config.json")

    def ensure(self) -> None:
        """Create the configuration directory if needed."""

        self.root.mkdir(parents=True, exist_ok=True)


__all__ = ["ConfigPaths"]
