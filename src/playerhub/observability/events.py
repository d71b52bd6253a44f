"""Lifecycle events sent through ``emit``.

Each is a frozen dataclass carrying only plain values, so subscribers can
log or forward them without touching the player that produced them.
"""

from __future__ import annotations

from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Instance lifecycle
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PlayerCreated:
    unique_id: int | None
    dom_id: str
    live_instances: int


@dataclass(frozen=True)
class PlayerSetupStarted:
    unique_id: int | None
    dom_id: str
    reconfigure: bool  # True when a live engine was torn down first


@dataclass(frozen=True)
class PlayerReady:
    unique_id: int | None
    dom_id: str
    setup_time_ms: float | None


@dataclass(frozen=True)
class PlayerRemoved:
    unique_id: int | None
    dom_id: str
    live_instances: int


# ---------------------------------------------------------------------------
# Configuration / listeners
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ConfigDeprecated:
    option: str
    value: str
    detail: str


@dataclass(frozen=True)
class ListenerFailed:
    event_type: str
    error: str
