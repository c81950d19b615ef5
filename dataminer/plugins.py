"""Discovering and loading processor plugins."""

from __future__ import annotations

import sys
import threading
from collections.abc import Callable
from typing import Any

from dataminer.models import ProcessorRegistry

PLUGIN_GROUP = "dataminer.plugins"

RegisterFunction = Callable[[ProcessorRegistry], None]

_plugins: dict[str, list[Any]] = {}
_plugins_lock = threading.Lock()


class PluginError(Exception):
    """Raised when a plugin cannot be loaded or fails to register."""


def _describe(plugin: Any) -> str:
    return getattr(plugin, "__name__", repr(plugin))


def add_plugin(plugin: Any, group: str = PLUGIN_GROUP) -> Any:
    """Make ``plugin`` discoverable in ``group``; usable as a decorator."""
    with _plugins_lock:
        _plugins.setdefault(group, []).append(plugin)
    return plugin


def load_plugin(plugin: Any, registry: ProcessorRegistry) -> None:
    """Let ``plugin`` register its processors in ``registry``.

    ``plugin`` is an object with a ``register_plugin`` callable, or the
    register callable itself.
    """
    description = _describe(plugin)
    print(f"Loading plugin: {description}")

    register = getattr(plugin, "register_plugin", plugin)
    if not callable(register):
        raise PluginError(
            f"Plugin {description} does not export 'register_plugin' function"
        )

    try:
        register(registry)
    except Exception as exc:
        raise PluginError(f"Error registering plugin {description}: {exc}") from exc
    print(f"Successfully registered plugin from {description}")


def find_plugins(group: str = PLUGIN_GROUP) -> list[Any]:
    """Return every plugin added to ``group``, in the order they were added."""
    with _plugins_lock:
        found = list(_plugins.get(group, ()))
    if not found:
        print(f"No plugins found in group: {group}", file=sys.stderr)
    return found