"""Process entry point: find or create players, register providers and plugins.

``PlayerHub`` owns the instance registry and everything a new ``Api`` is
built with. The module keeps one hub for the process; ``select_player`` and
friends at module level use it::

    from playerhub import select_player

    player = select_player("main-video").setup({"file": "movie.mp4"})
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable

from playerhub import plugins, providers
from playerhub.api import Api
from playerhub.config import Storage
from playerhub.engine import EngineFactory, HeadlessEngine
from playerhub.flags import get_settings
from playerhub.observability import PlayerCreated, emit
from playerhub.page import Element, PageContext
from playerhub.plugins import PluginDefinition, PluginRegistrar
from playerhub.providers import Provider
from playerhub.registry import CreateRequest, InstanceRegistry, Unresolvable

logger = logging.getLogger(__name__)


class PlayerHub:
    """Creates players on demand and tracks the live ones.

    Args:
        engine_factory: Engine constructor handed to every new ``Api``.
        page: Page players are embedded in; also used to look up element ids.
        storage: Persisted options shared by every player.
        defaults: Injected defaults; the settings file's ``defaults`` when omitted.
        registry: Instance registry; a new one bound to ``page`` when omitted.
    """

    def __init__(
        self,
        *,
        engine_factory: EngineFactory = HeadlessEngine,
        page: PageContext | None = None,
        storage: Storage | Mapping[str, str] | None = None,
        defaults: Mapping[str, Any] | None = None,
        registry: InstanceRegistry | None = None,
    ) -> None:
        self.page = page or PageContext()
        self.registry = registry or InstanceRegistry(self.page)
        self.engine_factory = engine_factory
        self.storage = storage
        self.defaults: dict[str, Any] = dict(
            defaults if defaults is not None else get_settings().defaults
        )

    def __call__(self, query: Any = None) -> Api | PluginRegistrar:
        return self.select_player(query)

    def select_player(self, query: Any = None) -> Api | PluginRegistrar:
        """Return the player for ``query``, creating one for a new element.

        Queries that match nothing (and name no element) get a
        ``PluginRegistrar`` with no playback surface.
        """
        resolution = self.registry.resolve(query)
        if isinstance(resolution, Unresolvable):
            logger.debug("select_player(%r): %s", query, resolution.reason)
            return PluginRegistrar(query, resolution.reason)
        if isinstance(resolution, CreateRequest):
            return self._add_player(resolution.element)
        return resolution

    def _add_player(self, element: Element) -> Api:
        api = Api(
            element,
            engine_factory=self.engine_factory,
            registry=self.registry,
            storage=self.storage,
            defaults=self.defaults,
            page=self.page,
        )
        self.registry.register(api)
        emit(
            PlayerCreated(
                unique_id=api.unique_id,
                dom_id=api.id,
                live_instances=len(self.registry),
            )
        )
        return api

    def register_provider(
        self,
        provider: Provider | str,
        supports: Callable[[Mapping[str, Any]], bool] | None = None,
        priority: int = 0,
    ) -> Provider:
        return providers.register_provider(provider, supports, priority)

    def available_providers(self) -> list[str]:
        return providers.available_providers()

    def register_plugin(
        self, name: str, minimum_version: str, constructor: Callable[..., Any]
    ) -> PluginDefinition:
        return plugins.register_plugin(name, minimum_version, constructor)


# Singleton
_hub: PlayerHub | None = None


def get_hub() -> PlayerHub:
    """Get the process-wide PlayerHub, creating it on first use."""
    global _hub
    if _hub is None:
        _hub = PlayerHub()
    return _hub


def set_hub(hub: PlayerHub) -> PlayerHub:
    """Replace the process-wide hub (custom engine, page or storage)."""
    global _hub
    _hub = hub
    return hub


def select_player(query: Any = None) -> Api | PluginRegistrar:
    return get_hub().select_player(query)


def register_provider(
    provider: Provider | str,
    supports: Callable[[Mapping[str, Any]], bool] | None = None,
    priority: int = 0,
) -> Provider:
    return providers.register_provider(provider, supports, priority)


def available_providers() -> list[str]:
    return providers.available_providers()


def register_plugin(
    name: str, minimum_version: str, constructor: Callable[..., Any]
) -> PluginDefinition:
    return plugins.register_plugin(name, minimum_version, constructor)


def reset() -> None:
    """Drop the process hub and the plugin/provider registries. For tests."""
    global _hub
    _hub = None
    plugins.reset()
    providers.reset()
