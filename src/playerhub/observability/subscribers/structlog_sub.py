"""Writes one structured log line per lifecycle event.

Connected by ``configure()``. Lines go through ``get_logger`` so they follow
whichever formatter is active.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Callable

from playerhub.observability.events import (
    ConfigDeprecated,
    ListenerFailed,
    PlayerCreated,
    PlayerReady,
    PlayerRemoved,
    PlayerSetupStarted,
)
from playerhub.observability.logging import get_logger
from playerhub.observability.signals import subscribe

# event class -> (log method, event name)
EVENT_LOG_LINES: dict[type, tuple[str, str]] = {
    PlayerCreated: ("info", "player.created"),
    PlayerSetupStarted: ("debug", "player.setup.started"),
    PlayerReady: ("info", "player.ready"),
    PlayerRemoved: ("info", "player.removed"),
    ConfigDeprecated: ("warning", "config.deprecated"),
    ListenerFailed: ("error", "listener.failed"),
}


def _log_handler(level: str, name: str) -> Callable[[Any], None]:
    def handler(event: Any) -> None:
        # looked up per call: the formatter can change between configure() runs
        getattr(get_logger("playerhub.events"), level)(name, **asdict(event))

    return handler


def register_structlog_subscriber() -> None:
    for event_type, (level, name) in EVENT_LOG_LINES.items():
        subscribe(event_type, _log_handler(level, name))
