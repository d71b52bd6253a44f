"""Forward every event an engine triggers onto the facade that owns it."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from playerhub import events
from playerhub.observability import PlayerReady, emit

if TYPE_CHECKING:
    from playerhub.api import Api
    from playerhub.engine import Engine


class EventBridge:
    """One wildcard subscription from an engine bus to an ``Api``.

    The ``ready`` event is stamped with ``setupTime``: the milliseconds
    between the facade's ``setup`` and ``ready`` QoE ticks.
    """

    def __init__(self, api: Api) -> None:
        self._api = api
        self._engine: Engine | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    def attach(self, engine: Engine) -> None:
        if self._engine is not None:
            self.detach()
        self._engine = engine
        engine.on(events.ALL, self._forward, self)

    def detach(self) -> None:
        if self._engine is None:
            return
        self._engine.off(events.ALL, self._forward, self)
        self._engine = None

    def _forward(self, event_type: str, payload: Any = None, *_: Any) -> None:
        if event_type == events.READY:
            payload = dict(payload) if isinstance(payload, Mapping) else {}
            qoe = self._api._qoe
            qoe.tick(events.READY)
            payload["setupTime"] = qoe.between("setup", events.READY)
            emit(
                PlayerReady(
                    unique_id=self._api.unique_id,
                    dom_id=self._api.id,
                    setup_time_ms=payload["setupTime"],
                )
            )
        self._api.trigger(event_type, payload)
