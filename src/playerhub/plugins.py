"""Plugin registry: register plugin constructors at process scope.

Plugins are registered once per process with the minimum player version
they need. Player instances hold plugin *instances* (``Api.add_plugin``);
this module only holds the definitions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from playerhub.version import VERSION, version_tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PluginDefinition:
    name: str
    minimum_version: str
    constructor: Callable[..., Any]

    def is_compatible(self, player_version: str = VERSION) -> bool:
        return version_tuple(player_version) >= version_tuple(self.minimum_version or "0")


_plugins: dict[str, PluginDefinition] = {}


def reset() -> None:
    """Clear the registry. Use in test fixtures for isolation."""
    _plugins.clear()


def register_plugin(
    name: str, minimum_version: str, constructor: Callable[..., Any]
) -> PluginDefinition:
    """Register ``constructor`` under ``name``. The first registration wins."""
    existing = _plugins.get(name)
    if existing is not None:
        return existing
    definition = PluginDefinition(name, minimum_version, constructor)
    if not definition.is_compatible():
        logger.warning(
            "Plugin %r requires player %s or newer (running %s)",
            name,
            minimum_version,
            VERSION,
        )
    _plugins[name] = definition
    return definition


def get_plugin_definition(name: str) -> PluginDefinition | None:
    return _plugins.get(name)


def registered_plugins() -> list[str]:
    return list(_plugins)


class PluginRegistrar:
    """What ``select_player`` returns for a query it cannot resolve.

    It has no playback surface; plugins can still be registered through it.
    """

    def __init__(self, query: Any = None, reason: str = "") -> None:
        self.query = query
        self.reason = reason

    def register_plugin(
        self, name: str, minimum_version: str, constructor: Callable[..., Any]
    ) -> PluginDefinition:
        return register_plugin(name, minimum_version, constructor)

    def __repr__(self) -> str:
        return f"PluginRegistrar(query={self.query!r}, reason={self.reason!r})"
