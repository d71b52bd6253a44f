"""Api: the public player object.

An ``Api`` is bound to one page element for its whole life. Each
``setup(config)`` builds a fresh engine for that element, bridges the
engine's events onto the ``Api`` and hands the engine the normalized
config. Everything else on the class is a thin layer over
``call_internal`` (delegate to an engine capability) and the event bus.

Lifecycle::

    UNCONFIGURED --setup--> CONFIGURING --> LIVE --setup--> CONFIGURING ...
         |                                   |
         +--------------remove---------------+--> REMOVED

``setup()``/``remove()`` issued while a ``setup()`` is still running (from
a listener or from the engine) are queued and run in order once it returns.
"""

from __future__ import annotations

import enum
import logging
import re
from collections import deque
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Callable

from playerhub import events
from playerhub import plugins as plugin_registry
from playerhub.bridge import EventBridge
from playerhub.bus import EventBus
from playerhub.config import Storage, normalize
from playerhub.engine import Engine, EngineFactory, HeadlessEngine
from playerhub.events import States
from playerhub.flags import get_settings
from playerhub.observability import PlayerRemoved, PlayerSetupStarted, emit
from playerhub.page import Element, PageContext
from playerhub.timer import Timer
from playerhub.version import VERSION

if TYPE_CHECKING:
    from playerhub.plugins import PluginDefinition
    from playerhub.registry import InstanceRegistry

logger = logging.getLogger(__name__)

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _external(meta: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return meta if meta else {"reason": "external"}


def _listener(event_name: str) -> Callable[[Api, Callable[..., Any]], Api]:
    def method(self: Api, callback: Callable[..., Any]) -> Api:
        self.on(event_name, callback)
        return self

    method.__doc__ = f"Deprecated: use ``on({event_name!r}, callback)``."
    return method


class LifecycleState(enum.Enum):
    UNCONFIGURED = "unconfigured"
    CONFIGURING = "configuring"
    LIVE = "live"
    REMOVED = "removed"


class Api(EventBus):
    """Player facade.

    Args:
        element: The page element the player is bound to.
        engine_factory: Builds an engine for ``element`` on every ``setup()``.
        registry: Registry to leave on ``remove()``; ``None`` for a detached player.
        storage: Persisted options read on every ``setup()``.
        defaults: Injected defaults, read live on every ``setup()``.
        page: Page the player was loaded from.
    """

    def __init__(
        self,
        element: Element,
        *,
        engine_factory: EngineFactory = HeadlessEngine,
        registry: InstanceRegistry | None = None,
        storage: Storage | Mapping[str, str] | None = None,
        defaults: Mapping[str, Any] | None = None,
        page: PageContext | None = None,
    ) -> None:
        super().__init__()
        self._element = element
        self._id = element.id
        self._unique_id: int | None = None
        self._engine_factory = engine_factory
        self._registry = registry
        self._storage = storage
        self._defaults = defaults
        self._page = page
        self._engine: Engine | None = None
        self._bridge = EventBridge(self)
        self._state = LifecycleState.UNCONFIGURED
        self._pending: deque[tuple[str, tuple[Any, ...]]] = deque()
        self.plugins: dict[str, Any] = {}

        self._qoe = Timer()
        self._qoe.tick("init")

    def __repr__(self) -> str:
        return f"Api(id={self._id!r}, unique_id={self._unique_id}, state={self._state.value})"

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def id(self) -> str:
        return self._id

    @property
    def unique_id(self) -> int | None:
        return self._unique_id

    def _assign_unique_id(self, unique_id: int) -> None:
        if self._unique_id is not None:
            raise ValueError(f"Player {self._id!r} already has unique id {self._unique_id}")
        self._unique_id = unique_id

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def version(self) -> str:
        return VERSION

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def setup(self, config: Mapping[str, Any] | None = None) -> Api:
        """Build a new engine and configure it with ``config``.

        A live player is torn down first: external listeners are cleared,
        the old engine's events are unbridged and the old engine is asked
        to destroy itself.
        """
        if self._state is LifecycleState.REMOVED:
            logger.warning("setup() ignored: player %s was removed", self._id)
            return self
        if self._state is LifecycleState.CONFIGURING:
            self._pending.append(("setup", (config,)))
            return self

        reconfigure = self._state is LifecycleState.LIVE
        emit(PlayerSetupStarted(unique_id=self._unique_id, dom_id=self._id, reconfigure=reconfigure))
        self._state = LifecycleState.CONFIGURING
        try:
            if reconfigure:
                self._teardown()
            self._qoe.tick("setup")

            engine = self._engine_factory(self._element)
            self._engine = engine
            self._bridge.attach(engine)

            options = dict(config or {})
            self._bind_config_events(options.get("events"))
            canonical = normalize(
                options, self._storage, defaults=self._defaults, page=self._page
            )
            canonical["id"] = self._id

            engine_setup = engine.capability("setup")
            if engine_setup is not None:
                engine_setup(canonical, self)
        except Exception:
            # calls queued by a setup that never completed are dropped
            if self._pending:
                logger.warning(
                    "Dropping %d lifecycle call(s) queued during failed setup of %s",
                    len(self._pending),
                    self._id,
                )
                self._pending.clear()
            raise
        finally:
            if self._state is LifecycleState.CONFIGURING:
                self._state = LifecycleState.LIVE

        self._drain_pending()
        return self

    def remove(self) -> Api:
        """Unregister the player, announce ``remove`` and release the engine."""
        if self._state is LifecycleState.REMOVED:
            return self
        if self._state is LifecycleState.CONFIGURING:
            self._pending.append(("remove", ()))
            return self

        live = 0
        if self._registry is not None:
            self._registry.unregister(self._unique_id)
            live = len(self._registry)

        self.trigger(events.REMOVE)
        self._teardown()
        self._state = LifecycleState.REMOVED
        self._pending.clear()
        emit(PlayerRemoved(unique_id=self._unique_id, dom_id=self._id, live_instances=live))
        return self

    def _teardown(self) -> None:
        self.off()
        engine = self._engine
        self._bridge.detach()
        self._engine = None
        if engine is not None:
            # Players can be removed before the engine finishes loading.
            destroy = engine.capability("player_destroy")
            if destroy is not None:
                destroy()

    def _drain_pending(self) -> None:
        while self._pending and self._state is not LifecycleState.CONFIGURING:
            operation, args = self._pending.popleft()
            getattr(self, operation)(*args)

    def _bind_config_events(self, handlers: Any) -> None:
        if not isinstance(handlers, Mapping):
            return
        for name, handler in handlers.items():
            method = self._event_method(str(name))
            if method is None:
                logger.debug("No player method %r for config event handler", name)
                continue
            method(handler)

    def _event_method(self, name: str) -> Callable[..., Any] | None:
        for candidate in (name, _CAMEL_RE.sub("_", name).lower()):
            if candidate.startswith("_"):
                continue
            method = getattr(self, candidate, None)
            if callable(method):
                return method
        return None

    # ------------------------------------------------------------------
    # Delegation and events
    # ------------------------------------------------------------------

    def call_internal(self, name: str, *args: Any) -> Any:
        """Call engine capability ``name``; ``None`` if there is no such capability."""
        engine = self._engine
        if engine is None:
            return None
        capability = engine.capability(name)
        if capability is None:
            return None
        return capability(*args)

    def trigger(self, name: str, payload: Any = None) -> Api:  # type: ignore[override]
        """Emit ``name`` with a copy of ``payload`` stamped with ``type``.

        In debug mode a raising listener propagates; otherwise it is logged
        and the remaining listeners still run.
        """
        data = dict(payload) if isinstance(payload, Mapping) else {}
        data["type"] = name
        if get_settings().debug:
            EventBus.trigger(self, name, data)
        else:
            EventBus.trigger_safe(self, name, data)
        return self

    def dispatch_event(self, name: str, payload: Any = None) -> Api:
        """Deprecated alias of ``trigger``."""
        return self.trigger(name, payload)

    def remove_event_listener(
        self,
        name: str | None = None,
        callback: Callable[..., Any] | None = None,
        context: Any = None,
    ) -> Api:
        """Deprecated alias of ``off``."""
        self.off(name, callback, context)
        return self

    # ------------------------------------------------------------------
    # Quality of experience
    # ------------------------------------------------------------------

    def qoe(self) -> dict[str, Any]:
        item = self.call_internal("get_item_qoe")
        return {
            "setupTime": self._qoe.between("setup", events.READY),
            "firstFrame": item.between("playAttempt", "firstFrame") if item else None,
            "player": self._qoe.dump(),
            "item": item.dump() if item else {},
        }

    # ------------------------------------------------------------------
    # Getters
    # ------------------------------------------------------------------

    def get_audio_tracks(self) -> Any:
        return self.call_internal("get_audio_tracks")

    def get_buffer(self) -> Any:
        """Percentage (0-100) of the current item that is buffered."""
        return self.call_internal("get", "buffer")

    def get_captions(self) -> Any:
        return self.call_internal("get", "captions")

    def get_captions_list(self) -> Any:
        return self.call_internal("get_captions_list")

    def get_config(self) -> Any:
        return self.call_internal("get_config")

    def get_container(self) -> Any:
        return self.call_internal("get_container")

    def get_controls(self) -> Any:
        return self.call_internal("get", "controls")

    def get_current_audio_track(self) -> Any:
        return self.call_internal("get_current_audio_track")

    def get_current_captions(self) -> Any:
        return self.call_internal("get_current_captions")

    def get_current_quality(self) -> Any:
        return self.call_internal("get_current_quality")

    def get_duration(self) -> Any:
        return self.call_internal("get", "duration")

    def get_fullscreen(self) -> Any:
        return self.call_internal("get", "fullscreen")

    def get_height(self) -> Any:
        return self.call_internal("get_height")

    def get_item(self) -> Any:
        """Deprecated alias of ``get_playlist_index``."""
        return self.get_playlist_index()

    def get_item_meta(self) -> Any:
        return self.call_internal("get", "itemMeta") or {}

    def get_meta(self) -> Any:
        """Deprecated alias of ``get_item_meta``."""
        return self.get_item_meta()

    def get_mute(self) -> Any:
        return self.call_internal("get_mute")

    def get_playback_rate(self) -> Any:
        return self.call_internal("get", "playbackRate")

    def get_playlist(self) -> Any:
        return self.call_internal("get", "playlist")

    def get_playlist_index(self) -> Any:
        return self.call_internal("get", "item")

    def get_playlist_item(self, index: int | None = None) -> Any:
        """The current playlist item, or the item at ``index``."""
        if index is None:
            return self.call_internal("get", "playlistItem")
        playlist = self.get_playlist()
        if playlist and 0 <= index < len(playlist):
            return playlist[index]
        return None

    def get_position(self) -> Any:
        return self.call_internal("get", "position")

    def get_provider(self) -> Any:
        return self.call_internal("get_provider")

    def get_quality_levels(self) -> Any:
        return self.call_internal("get_quality_levels")

    def get_safe_region(self) -> Any:
        return self.call_internal("get_safe_region")

    def get_state(self) -> Any:
        return self.call_internal("get_state")

    def get_stretching(self) -> Any:
        return self.call_internal("get", "stretching")

    def get_viewable(self) -> Any:
        return self.call_internal("get", "viewable")

    def get_visual_quality(self) -> Any:
        return self.call_internal("get_visual_quality")

    def get_volume(self) -> Any:
        return self.call_internal("get", "volume")

    def get_width(self) -> Any:
        return self.call_internal("get_width")

    def get_rendering_mode(self) -> str:
        """Deprecated: always ``"html5"``."""
        return "html5"

    def get_ad_block(self) -> bool:
        """Ad-block detection lives in the commercial build; always False here."""
        return False

    # ------------------------------------------------------------------
    # Setters
    # ------------------------------------------------------------------

    def set_captions(self, captions_styles: Mapping[str, Any]) -> Api:
        self.call_internal("set_captions", captions_styles)
        return self

    def set_config(self, options: Mapping[str, Any]) -> Api:
        self.call_internal("set_config", options)
        return self

    def set_controls(self, toggle: bool | None = None) -> Api:
        self.call_internal("set_controls", toggle)
        return self

    def set_current_audio_track(self, index: int) -> Any:
        return self.call_internal("set_current_audio_track", index)

    def set_current_captions(self, index: int) -> Any:
        return self.call_internal("set_current_captions", index)

    def set_current_quality(self, index: int) -> Any:
        return self.call_internal("set_current_quality", index)

    def set_cues(self, slider_cues: list[Mapping[str, Any]]) -> Api:
        """Cues shown on the time slider; each needs ``begin`` and ``text``."""
        self.call_internal("set_cues", slider_cues)
        return self

    def set_fullscreen(self, toggle: bool | None = None) -> Api:
        self.call_internal("set_fullscreen", toggle)
        return self

    def set_mute(self, toggle: bool | None = None) -> Api:
        self.call_internal("set_mute", toggle)
        return self

    def set_playback_rate(self, playback_rate: float) -> Api:
        """Limited by the engine to 0.25-4.0; not supported for live streams."""
        self.call_internal("set_playback_rate", playback_rate)
        return self

    def set_volume(self, level: float) -> Api:
        self.call_internal("set_volume", level)
        return self

    # ------------------------------------------------------------------
    # Playback
    # ------------------------------------------------------------------

    def load(self, to_load: Any, feed_data: Mapping[str, Any] | None = None) -> Api:
        self.call_internal("load", to_load, feed_data)
        return self

    def play(self, state: Any = None, meta: Mapping[str, Any] | None = None) -> Api:
        """Play (``True``), pause (``False``) or toggle based on the current state."""
        if isinstance(state, Mapping) and state.get("reason"):
            meta = state
        meta = _external(meta)
        if state is True:
            self.call_internal("play", meta)
            return self
        if state is False:
            self.call_internal("pause", meta)
            return self

        if self.get_state() in (States.PLAYING, States.BUFFERING):
            self.call_internal("pause", meta)
        else:
            self.call_internal("play", meta)
        return self

    def pause(self, state: Any = None, meta: Mapping[str, Any] | None = None) -> Api:
        """Pause (``True``), play (``False``) or toggle based on the current state."""
        if isinstance(state, bool):
            return self.play(not state, meta)
        if meta is None and isinstance(state, Mapping):
            meta = state
        return self.play(meta)

    def seek(self, position: float, meta: Mapping[str, Any] | None = None) -> Api:
        self.call_internal("seek", position, _external(meta))
        return self

    def stop(self) -> Api:
        self.call_internal("stop")
        return self

    def next(self) -> Api:
        self.call_internal("next")
        return self

    def playlist_next(self, meta: Mapping[str, Any] | None = None) -> Api:
        self.call_internal("playlist_next", _external(meta))
        return self

    def playlist_prev(self, meta: Mapping[str, Any] | None = None) -> Api:
        self.call_internal("playlist_prev", _external(meta))
        return self

    def playlist_item(self, index: int, meta: Mapping[str, Any] | None = None) -> Api:
        self.call_internal("playlist_item", index, _external(meta))
        return self

    def cast_toggle(self) -> Api:
        self.call_internal("cast_toggle")
        return self

    def resize(self, width: Any, height: Any) -> Api:
        self.call_internal("resize", width, height)
        return self

    def is_before_complete(self) -> Any:
        return self.call_internal("is_before_complete")

    def is_before_play(self) -> Any:
        return self.call_internal("is_before_play")

    def attach_media(self) -> Api:
        """Deprecated: resume normal playback after an ad break."""
        self.call_internal("attach_media")
        return self

    def detach_media(self) -> Api:
        """Deprecated: detach player state from the media before an ad break."""
        self.call_internal("detach_media")
        return self

    # ------------------------------------------------------------------
    # Ads and controls
    # ------------------------------------------------------------------

    def create_instream(self) -> Any:
        return self.call_internal("create_instream")

    def skip_ad(self) -> Api:
        self.call_internal("skip_ad")
        return self

    def play_ad(self, ad_break: Any) -> None:
        """Implemented by the advertising plugin."""

    def pause_ad(self, toggle: bool) -> None:
        """Implemented by the advertising plugin."""

    def add_button(
        self,
        img: str,
        tooltip: str,
        callback: Callable[..., Any],
        button_id: str,
        btn_class: str | None = None,
    ) -> Api:
        self.call_internal("add_button", img, tooltip, callback, button_id, btn_class)
        return self

    def remove_button(self, button_id: str) -> Api:
        self.call_internal("remove_button", button_id)
        return self

    # ------------------------------------------------------------------
    # Plugins
    # ------------------------------------------------------------------

    def get_plugin(self, name: str) -> Any:
        return self.plugins.get(name)

    def add_plugin(self, name: str, plugin: Any) -> None:
        """Attach a plugin instance; it is added to the player on ``ready``."""
        self.plugins[name] = plugin

        add_to_player = getattr(plugin, "add_to_player", None)
        if callable(add_to_player):
            self.on(events.READY, add_to_player)

        resize = getattr(plugin, "resize", None)
        if callable(resize):
            self.on(events.RESIZE, resize)

    def register_plugin(
        self, name: str, minimum_version: str, constructor: Callable[..., Any]
    ) -> PluginDefinition:
        return plugin_registry.register_plugin(name, minimum_version, constructor)

    # ------------------------------------------------------------------
    # Deprecated on_<event> subscriptions
    # ------------------------------------------------------------------

    on_buffer = _listener(events.BUFFER)
    on_pause = _listener(events.PAUSE)
    on_play = _listener(events.PLAY)
    on_idle = _listener(events.IDLE)
    on_buffer_change = _listener(events.BUFFER_CHANGE)
    on_buffer_full = _listener(events.BUFFER_FULL)
    on_error = _listener(events.ERROR)
    on_setup_error = _listener(events.SETUP_ERROR)
    on_fullscreen = _listener(events.FULLSCREEN)
    on_meta = _listener(events.META)
    on_mute = _listener(events.MUTE)
    on_playlist = _listener(events.PLAYLIST)
    on_playlist_item = _listener(events.PLAYLIST_ITEM)
    on_playlist_complete = _listener(events.PLAYLIST_COMPLETE)
    on_ready = _listener(events.READY)
    on_resize = _listener(events.RESIZE)
    on_complete = _listener(events.COMPLETE)
    on_seek = _listener(events.SEEK)
    on_time = _listener(events.TIME)
    on_volume = _listener(events.VOLUME)
    on_before_play = _listener(events.BEFORE_PLAY)
    on_before_complete = _listener(events.BEFORE_COMPLETE)
    on_display_click = _listener(events.DISPLAY_CLICK)
    on_controls = _listener(events.CONTROLS)
    on_quality_levels = _listener(events.LEVELS)
    on_quality_change = _listener(events.LEVELS_CHANGED)
    on_captions_list = _listener(events.CAPTIONS_LIST)
    on_captions_change = _listener(events.CAPTIONS_CHANGED)
    on_ad_error = _listener(events.AD_ERROR)
    on_ad_click = _listener(events.AD_CLICK)
    on_ad_impression = _listener(events.AD_IMPRESSION)
    on_ad_time = _listener(events.AD_TIME)
    on_ad_complete = _listener(events.AD_COMPLETE)
    on_ad_companions = _listener(events.AD_COMPANIONS)
    on_ad_skipped = _listener(events.AD_SKIPPED)
    on_ad_play = _listener(events.AD_PLAY)
    on_ad_pause = _listener(events.AD_PAUSE)
    on_ad_meta = _listener(events.AD_META)
    on_cast = _listener(events.CAST_SESSION)
    on_audio_track_change = _listener(events.AUDIO_TRACK_CHANGED)
    on_audio_tracks = _listener(events.AUDIO_TRACKS)
