"""playerhub observability: structured logs and player lifecycle events.

The facade, registry and normalizer call ``emit(SomeEvent(...))`` and know
nothing else. ``configure()`` turns emission on: it installs logging and
connects the structlog subscriber, which writes one structured line per
event. Until then ``emit`` does nothing.

Logging is a formatter (structlog or stdlib) paired with a destination
(stderr or a JSONL file); see ``ObservabilityConfig`` for the env vars and
``register_formatter`` / ``register_destination`` for custom ones.
"""

from playerhub.observability.config import ObservabilityConfig
from playerhub.observability.emitter import configure, emit, is_configured, reset
from playerhub.observability.events import (
    ConfigDeprecated,
    ListenerFailed,
    PlayerCreated,
    PlayerReady,
    PlayerRemoved,
    PlayerSetupStarted,
)
from playerhub.observability.logging import (
    LogDestination,
    LogFormatter,
    get_logger,
    register_destination,
    register_formatter,
)

__all__ = [
    # Core API
    "emit",
    "configure",
    "is_configured",
    "reset",
    "ObservabilityConfig",
    # Logging (swappable)
    "get_logger",
    "LogFormatter",
    "LogDestination",
    "register_formatter",
    "register_destination",
    # Instance lifecycle
    "PlayerCreated",
    "PlayerSetupStarted",
    "PlayerReady",
    "PlayerRemoved",
    # Configuration / listeners
    "ConfigDeprecated",
    "ListenerFailed",
]
