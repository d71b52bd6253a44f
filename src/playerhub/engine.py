"""Engine boundary: the capability interface the facade delegates to.

An engine is the component that actually loads and plays media. The facade
never calls engine methods directly; it asks ``engine.capability(name)`` for
a callable and treats ``None`` as "not supported". Engines are also event
buses: the facade bridges every event they trigger.

``HeadlessEngine`` is an in-memory engine that keeps a playback model and
emits the same events a real engine would, without decoding anything. It is
the default engine for ``PlayerHub`` and is what the test-suite drives.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, ClassVar, Protocol, runtime_checkable

from playerhub import events
from playerhub.bus import EventBus
from playerhub.events import States
from playerhub.page import Element
from playerhub.timer import Timer


@runtime_checkable
class Engine(Protocol):
    """What the facade needs from an engine."""

    def on(self, name: str, callback: Callable[..., Any], context: Any = None) -> Any: ...

    def off(
        self,
        name: str | None = None,
        callback: Callable[..., Any] | None = None,
        context: Any = None,
    ) -> Any: ...

    def capability(self, name: str) -> Callable[..., Any] | None: ...


EngineFactory = Callable[[Element], Engine]


class BaseEngine(EventBus):
    """Engine base class: exposes the methods listed in ``CAPABILITIES``."""

    CAPABILITIES: ClassVar[frozenset[str]] = frozenset()

    def __init__(self, element: Element) -> None:
        super().__init__()
        self.element = element

    def capability(self, name: str) -> Callable[..., Any] | None:
        if name not in self.CAPABILITIES:
            return None
        method = getattr(self, name, None)
        return method if callable(method) else None

    @property
    def capabilities(self) -> frozenset[str]:
        return frozenset(name for name in self.CAPABILITIES if self.capability(name))


class HeadlessEngine(BaseEngine):
    CAPABILITIES = frozenset(
        {
            "setup",
            "get",
            "get_config",
            "set_config",
            "get_state",
            "get_mute",
            "set_mute",
            "set_volume",
            "set_controls",
            "set_fullscreen",
            "set_playback_rate",
            "get_width",
            "get_height",
            "resize",
            "get_provider",
            "get_item_qoe",
            "play",
            "pause",
            "stop",
            "seek",
            "load",
            "next",
            "playlist_next",
            "playlist_prev",
            "playlist_item",
            "player_destroy",
        }
    )

    def __init__(self, element: Element) -> None:
        super().__init__(element)
        self.config: dict[str, Any] = {}
        self.model: dict[str, Any] = {"state": States.IDLE}
        self.item_qoe = Timer()
        self.destroyed = False

    # -- lifecycle --

    def setup(self, config: Mapping[str, Any], api: Any = None) -> None:
        self.config = dict(config)
        self.model.update(
            state=States.IDLE,
            volume=self.config.get("volume", 90),
            mute=bool(self.config.get("mute", False)),
            controls=self.config.get("controls", True),
            fullscreen=False,
            stretching=self.config.get("stretching", "uniform"),
            playbackRate=self.config.get("playbackRate", 1),
            width=self.config.get("width"),
            height=self.config.get("height"),
            position=0,
            duration=0,
            buffer=0,
            viewable=1,
            itemMeta={},
        )
        self._set_playlist(self.config.get("playlist") or [])
        self.trigger(events.PLAYLIST, {"playlist": self.model["playlist"]})
        self.trigger(events.READY, {})

    def player_destroy(self) -> None:
        self.model["state"] = States.IDLE
        self.destroyed = True
        self.off()

    # -- model access --

    def get(self, key: str) -> Any:
        return self.model.get(key)

    def get_config(self) -> dict[str, Any]:
        return dict(self.config)

    def set_config(self, options: Mapping[str, Any]) -> None:
        self.config.update(options)

    def get_state(self) -> str:
        return self.model["state"]

    def get_mute(self) -> bool:
        return bool(self.model.get("mute"))

    def get_width(self) -> Any:
        return self.model.get("width")

    def get_height(self) -> Any:
        return self.model.get("height")

    def get_provider(self) -> dict[str, str]:
        return {"name": "headless"}

    def get_item_qoe(self) -> Timer:
        return self.item_qoe

    # -- setters --

    def set_volume(self, level: Any) -> None:
        try:
            volume = min(max(float(level), 0.0), 100.0)
        except (TypeError, ValueError):
            return
        self.model["volume"] = int(volume) if volume.is_integer() else volume
        self.trigger(events.VOLUME, {"volume": self.model["volume"]})

    def set_mute(self, toggle: bool | None = None) -> None:
        mute = (not self.model.get("mute")) if toggle is None else bool(toggle)
        self.model["mute"] = mute
        self.trigger(events.MUTE, {"mute": mute})

    def set_controls(self, toggle: bool | None = None) -> None:
        controls = (not self.model.get("controls")) if toggle is None else bool(toggle)
        self.model["controls"] = controls
        self.trigger(events.CONTROLS, {"controls": controls})

    def set_fullscreen(self, toggle: bool | None = None) -> None:
        fullscreen = (not self.model.get("fullscreen")) if toggle is None else bool(toggle)
        self.model["fullscreen"] = fullscreen
        self.trigger(events.FULLSCREEN, {"fullscreen": fullscreen})

    def set_playback_rate(self, rate: Any) -> None:
        if isinstance(rate, bool) or not isinstance(rate, (int, float)):
            return
        if 0.25 <= rate <= 4:
            self.model["playbackRate"] = rate

    def resize(self, width: Any, height: Any) -> None:
        self.model.update(width=width, height=height)
        self.trigger(events.RESIZE, {"width": width, "height": height})

    # -- playback --

    def play(self, meta: Mapping[str, Any] | None = None) -> None:
        self.item_qoe.tick("playAttempt")
        self._change_state(States.PLAYING, events.PLAY, meta)
        if self.item_qoe.between("playAttempt", "firstFrame") is None:
            self.item_qoe.tick("firstFrame")

    def pause(self, meta: Mapping[str, Any] | None = None) -> None:
        self._change_state(States.PAUSED, events.PAUSE, meta)

    def stop(self) -> None:
        self.model["position"] = 0
        self._change_state(States.IDLE, events.IDLE, None)

    def seek(self, position: Any, meta: Mapping[str, Any] | None = None) -> None:
        payload = {"position": self.model.get("position", 0), "offset": position}
        if meta:
            payload.update(meta)
        self.model["position"] = position
        self.trigger(events.SEEK, payload)

    def load(self, to_load: Any, feed_data: Mapping[str, Any] | None = None) -> None:
        if isinstance(to_load, Mapping):
            playlist = list(to_load["playlist"]) if "playlist" in to_load else [dict(to_load)]
        elif isinstance(to_load, (list, tuple)):
            playlist = list(to_load)
        else:
            playlist = [{"file": to_load}]
        if feed_data is not None:
            self.model["feedData"] = dict(feed_data)
        self._set_playlist(playlist)
        self.trigger(events.PLAYLIST, {"playlist": self.model["playlist"]})

    def next(self) -> None:
        self.playlist_next()

    def playlist_next(self, meta: Mapping[str, Any] | None = None) -> None:
        self.playlist_item(self.model.get("item", 0) + 1, meta)

    def playlist_prev(self, meta: Mapping[str, Any] | None = None) -> None:
        self.playlist_item(self.model.get("item", 0) - 1, meta)

    def playlist_item(self, index: int, meta: Mapping[str, Any] | None = None) -> None:
        playlist = self.model.get("playlist") or []
        if not playlist:
            return
        index = index % len(playlist)
        self.model.update(item=index, playlistItem=playlist[index], position=0)
        self.item_qoe = Timer()
        payload: dict[str, Any] = {"index": index, "item": playlist[index]}
        if meta:
            payload.update(meta)
        self.trigger(events.PLAYLIST_ITEM, payload)

    # -- internals --

    def _set_playlist(self, playlist: list[Any]) -> None:
        self.model.update(
            playlist=playlist,
            item=0,
            playlistItem=playlist[0] if playlist else None,
        )

    def _change_state(
        self, new_state: str, event_name: str, meta: Mapping[str, Any] | None
    ) -> None:
        old_state = self.model["state"]
        self.model["state"] = new_state
        payload: dict[str, Any] = {"oldstate": old_state, "newstate": new_state}
        if meta:
            payload.update(meta)
        self.trigger(event_name, payload)
