"""Command line tools for listing and watching sensors on a remote object bus.

The Typer application is ``cli.app.app``. It is not re-exported here so that
``cli.app`` keeps resolving to the module, which tests patch (for example
``cli.app.BusClient``).
"""

from importlib import import_module
from types import ModuleType


def __getattr__(name: str) -> ModuleType:
    if name in {"app", "client", "render"}:
        return import_module(f"cli.{name}")
    raise AttributeError(name)


__all__ = []
