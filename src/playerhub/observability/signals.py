"""Isolated signal namespace for playerhub observability.

Every event dataclass gets one blinker signal, named after the class.
All playerhub subscribers connect here, separate from any other blinker
usage in the process.
"""

from __future__ import annotations

from typing import Any, Callable

from blinker import Namespace

playerhub_signals = Namespace()

_connected: list[tuple[Any, Callable[[Any], None]]] = []


def signal_for(event_type: type) -> Any:
    return playerhub_signals.signal(event_type.__name__)


def subscribe(event_type: type, handler: Callable[[Any], None]) -> None:
    """Call ``handler(event)`` for every emitted ``event_type`` event."""
    signal = signal_for(event_type)
    signal.connect(handler, weak=False)
    _connected.append((signal, handler))


def unsubscribe_all() -> None:
    while _connected:
        signal, handler = _connected.pop()
        signal.disconnect(handler)
