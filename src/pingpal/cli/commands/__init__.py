"""Concrete command implementations for the PingPal CLI."""
from __future__ import annotations

from importlib import import_module
from types import ModuleType
from typing import TYPE_CHECKING, Any

__all__ = ["sweep", "ports", "ping", "show", "load", "COMMAND_NAMES"]

COMMAND_NAMES = ("sweep", "ports", "ping", "show")

if TYPE_CHECKING:
    from . import ping as ping
    from . import ports as ports
    from . import show as show
    from . import sweep as sweep


def load(name: str) -> ModuleType:
    """Dynamically import a command module by *name*."""

    if name not in COMMAND_NAMES:
        raise ValueError(f"Unknown command: {name}")
    return import_module(f"{__name__}.{name}")


def __getattr__(name: str) -> Any:
    if name in COMMAND_NAMES:
        module = import_module(f"{__name__}.{name}")
        globals()[name] = module
        return module
    raise AttributeError(name)
