"""High-level configuration manager used by the PingPal CLI."""
from __future__ import annotations

import json
import logging
import shutil
from copy import deepcopy
from json import JSONDecodeError
from typing import Any, Dict

from .defaults import DEFAULT_SETTINGS
from .paths import ConfigPaths

logger = logging.getLogger(__name__)


class Config:
    """Load user settings and persist them when the file needs repair."""

    def __init__(
        self,
        *,
        paths: ConfigPaths | None = None,
        defaults: Dict[str, Any] | None = None,
    ) -> None:
        self.paths = paths or ConfigPaths.create()
        self.defaults: Dict[str, Any] = deepcopy(defaults or DEFAULT_SETTINGS)
        self.config: Dict[str, Any] = self.defaults.copy()
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from disk, falling back to defaults."""

        path = self.paths.config_file
        if not path.exists():
            self.config = self.defaults.copy()
            return
        try:
            with open(path, "r", encoding="utf-8") as handle:
                loaded_config = json.load(handle)
            if not isinstance(loaded_config, dict):
                raise JSONDecodeError("expected a JSON object", "", 0)
            self.config = {**self.defaults, **loaded_config}
        except (JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("Invalid config file, resetting to defaults: %s", exc)
            backup = path.with_suffix(path.suffix + ".bak")
            try:
                shutil.move(path, backup)
            except OSError as backup_err:
                logger.warning("Failed to back up invalid config: %s", backup_err)
            self.config = self.defaults.copy()
            self.save()
        except OSError as exc:
            logger.error("Error reading config: %s", exc)
            self.config = self.defaults.copy()

    def save(self) -> bool:
        """Persist the current configuration to disk."""

        try:
            self.paths.ensure()
            with open(self.paths.config_file, "w", encoding="utf-8") as handle:
                json.dump(self.config, handle, indent=4)
            return True
        except OSError as exc:
            logger.error("Error saving config: %s", exc)
            return False

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value for *key* or ``default`` when unset."""

        return self.config.get(key, default)

    def coordinator_options(self) -> Dict[str, Any]:
        """Keyword arguments for :class:`pingpal.scan.ScanCoordinator`."""

        from pingpal.scan.coordinator import default_pool_size

        return {
            "pool_size": default_pool_size(int(self.get("pool_multiplier", 32))),
            "grace_period": float(self.get("grace_period", 600.0)),
            "strict_stop": bool(self.get("strict_stop", False)),
        }


__all__ = ["Config"]
