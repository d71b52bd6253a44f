"""Process-wide lifecycle event dispatch.

Library code calls ``emit(PlayerReady(...))`` and nothing else. Until an
application (or the CLI) calls ``configure()``, ``emit`` returns straight
away and nothing is logged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from blinker import Namespace

from playerhub.observability.signals import playerhub_signals, signal_for, unsubscribe_all

if TYPE_CHECKING:
    from playerhub.observability.config import ObservabilityConfig

_configured: bool = False


def emit(event: Any) -> None:
    """Send ``event`` on the signal named after its class, if configured."""
    if not _configured:
        return
    signal_for(type(event)).send(event)


def configure(config: ObservabilityConfig | None = None) -> Namespace:
    """Install logging from ``config`` and attach the log subscriber.

    Only the first call does anything; later calls return the namespace
    unchanged until ``reset()``.
    """
    global _configured

    if _configured:
        return playerhub_signals

    from playerhub.observability.config import ObservabilityConfig
    from playerhub.observability.logging import setup_logging
    from playerhub.observability.subscribers.structlog_sub import (
        register_structlog_subscriber,
    )

    setup_logging(config if config is not None else ObservabilityConfig())
    register_structlog_subscriber()
    _configured = True
    return playerhub_signals


def is_configured() -> bool:
    return _configured


def reset() -> None:
    """Detach subscribers and logging handlers; ``emit`` goes quiet again."""
    global _configured

    from playerhub.observability.logging import shutdown_logging

    unsubscribe_all()
    shutdown_logging()
    _configured = False
