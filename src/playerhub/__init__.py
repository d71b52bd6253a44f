"""playerhub: player instance lifecycle, config normalization and event bridging.

Entry points:
    select_player(query)    find the player for an element id / index / element,
                            or create one for a new element
    register_provider(...)  add a media provider
    available_providers()   registered provider names
    register_plugin(...)    register a plugin constructor

Building blocks:
    Api                the player facade
    PlayerHub          owns the instance registry; select_player() uses one per process
    InstanceRegistry   ordered collection of live players
    normalize          options + persisted + defaults -> canonical config
    HeadlessEngine     in-memory engine used when no real engine is supplied
"""

from playerhub.api import Api, LifecycleState
from playerhub.bus import EventBus
from playerhub.config import MemoryStorage, Storage, normalize
from playerhub.engine import BaseEngine, Engine, HeadlessEngine
from playerhub.events import States
from playerhub.global_api import (
    PlayerHub,
    available_providers,
    get_hub,
    register_plugin,
    register_provider,
    reset,
    select_player,
    set_hub,
)
from playerhub.page import Element, PageContext
from playerhub.plugins import PluginRegistrar
from playerhub.registry import CreateRequest, InstanceRegistry, Unresolvable
from playerhub.timer import Timer
from playerhub.version import VERSION

__all__ = [
    # Entry points
    "select_player",
    "register_provider",
    "available_providers",
    "register_plugin",
    "get_hub",
    "set_hub",
    "reset",
    # Facade
    "Api",
    "LifecycleState",
    "PlayerHub",
    "PluginRegistrar",
    # Registry
    "InstanceRegistry",
    "CreateRequest",
    "Unresolvable",
    "Element",
    "PageContext",
    # Config
    "normalize",
    "Storage",
    "MemoryStorage",
    # Engine boundary
    "Engine",
    "BaseEngine",
    "HeadlessEngine",
    "EventBus",
    "States",
    "Timer",
    "VERSION",
]
