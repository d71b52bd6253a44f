"""Synchronous event bus with per-type and wildcard subscriptions.

Both the facade and the engines it wraps are buses. A listener registered
under ``events.ALL`` receives ``(type, *args)`` for every trigger; other
listeners receive ``*args``.

Dispatch iterates a snapshot of the listener list. A listener removed
with ``off()`` mid-dispatch is deactivated immediately, so it never sees
the remainder of the event that was in flight; a listener added
mid-dispatch only sees later events.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from playerhub.events import ALL
from playerhub.observability import ListenerFailed, emit

logger = logging.getLogger(__name__)

Callback = Callable[..., Any]


@dataclass(eq=False)
class _Listener:
    callback: Callback
    context: Any = None
    once: bool = False
    active: bool = True

    def matches(self, callback: Callback | None, context: Any) -> bool:
        if callback is not None and self.callback != callback:
            return False
        if context is not None and self.context is not context:
            return False
        return True


class EventBus:
    def __init__(self) -> None:
        self._listeners: dict[str, list[_Listener]] = {}

    def on(self, name: str, callback: Callback, context: Any = None) -> EventBus:
        """Bind ``callback`` to ``name``.

        ``context`` is stored with the listener so ``off(context=...)`` can
        remove every listener registered by one owner.
        """
        self._listeners.setdefault(name, []).append(_Listener(callback, context))
        return self

    def once(self, name: str, callback: Callback, context: Any = None) -> EventBus:
        """Bind ``callback`` to the next ``name`` event only."""
        self._listeners.setdefault(name, []).append(
            _Listener(callback, context, once=True)
        )
        return self

    def off(
        self,
        name: str | None = None,
        callback: Callback | None = None,
        context: Any = None,
    ) -> EventBus:
        """Remove listeners. With no arguments, removes every listener."""
        names = [name] if name is not None else list(self._listeners)
        for event_name in names:
            listeners = self._listeners.get(event_name)
            if not listeners:
                continue
            kept = []
            for listener in listeners:
                if listener.matches(callback, context):
                    listener.active = False
                else:
                    kept.append(listener)
            if kept:
                self._listeners[event_name] = kept
            else:
                del self._listeners[event_name]
        return self

    def has_listeners(self, name: str | None = None) -> bool:
        if name is None:
            return bool(self._listeners)
        return bool(self._listeners.get(name))

    def trigger(self, name: str, *args: Any) -> EventBus:
        """Dispatch ``name``; a raising listener aborts dispatch and propagates."""
        for listener, call_args in self._dispatch_plan(name, args):
            self._invoke(listener, call_args)
        return self

    def trigger_safe(self, name: str, *args: Any) -> EventBus:
        """Dispatch ``name``; listener exceptions are logged and dispatch continues."""
        for listener, call_args in self._dispatch_plan(name, args):
            try:
                self._invoke(listener, call_args)
            except Exception as exc:
                logger.exception("Listener for %r raised", name)
                emit(ListenerFailed(event_type=name, error=repr(exc)))
        return self

    def _dispatch_plan(
        self, name: str, args: tuple[Any, ...]
    ) -> list[tuple[_Listener, tuple[Any, ...]]]:
        plan = [(listener, args) for listener in self._listeners.get(name, ())]
        if name != ALL:
            plan.extend(
                (listener, (name, *args)) for listener in self._listeners.get(ALL, ())
            )
        return plan

    def _invoke(self, listener: _Listener, args: tuple[Any, ...]) -> None:
        if not listener.active:
            return
        if listener.once:
            listener.active = False
            self._discard(listener)
        listener.callback(*args)

    def _discard(self, target: _Listener) -> None:
        for event_name, listeners in list(self._listeners.items()):
            if target in listeners:
                listeners.remove(target)
                if not listeners:
                    del self._listeners[event_name]
                return
