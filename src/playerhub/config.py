"""Config normalization: user options + persisted state + defaults -> canonical config.

Merge precedence, lowest to highest::

    DEFAULTS < injected defaults < persisted options < explicit options

The merge is shallow except for ``localization``, which is merged per
string (built-in < injected < explicit) so a partial translation table
keeps the English strings it omits.

Derived fields are computed after the merge: base URL, sizes, engine
asset URLs, aspect ratio, skin, playback rates and playlist. Malformed
values never raise; they fall back to defaults or disable the feature
they configure.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from playerhub.observability import ConfigDeprecated, emit
from playerhub.page import PageContext
from playerhub.serialize import coerce, deserialize, parse_number, serialize

logger = logging.getLogger(__name__)

CanonicalConfig = dict[str, Any]

DEFAULT_SKIN = "seven"

LOCALIZATION: dict[str, str] = {
    "player": "Video Player",
    "play": "Play",
    "playback": "Start playback",
    "pause": "Pause",
    "volume": "Volume",
    "prev": "Previous",
    "next": "Next",
    "cast": "Chromecast",
    "airplay": "Airplay",
    "fullscreen": "Fullscreen",
    "playlist": "Playlist",
    "hd": "Quality",
    "cc": "Closed captions",
    "audioTracks": "Audio tracks",
    "playbackRates": "Playback rates",
    "normal": "Normal",
    "replay": "Replay",
    "buffer": "Loading",
    "more": "More",
    "liveBroadcast": "Live broadcast",
    "loadingAd": "Loading ad",
    "rewind": "Rewind 10s",
    "nextUp": "Next Up",
    "nextUpClose": "Next Up Close",
    "related": "Discover",
    "close": "Close",
}

DEFAULTS: dict[str, Any] = {
    "autostart": False,
    "controls": True,
    "displaytitle": True,
    "displaydescription": True,
    "mobilecontrols": False,
    "defaultPlaybackRate": 1,
    "playbackRateControls": False,
    "repeat": False,
    "castAvailable": False,
    "skin": DEFAULT_SKIN,
    "stretching": "uniform",
    "mute": False,
    "volume": 90,
    "width": 480,
    "height": 270,
    "audioMode": False,
    "renderCaptionsNatively": True,
    "nextUpDisplay": True,
}

DEFAULT_PLAYBACK_RATES = [0.5, 1, 1.25, 1.5, 2]
MIN_PLAYBACK_RATE = 0.25
MAX_PLAYBACK_RATE = 4.0

ENGINE_ASSETS = {
    "flashplayer": "player.flash.swf",
    "flashloader": "player.loader.swf",
}

# Top-level fields lifted into a playlist item when no playlist is given.
PLAYLIST_ITEM_FIELDS = (
    "title",
    "description",
    "type",
    "mediaid",
    "image",
    "file",
    "sources",
    "tracks",
    "preload",
)

_PERCENT_RE = re.compile(r"^\d*\.?\d+%$")


@runtime_checkable
class Storage(Protocol):
    """Persisted per-option values, each encoded with ``serialize.serialize``."""

    def get_all_items(self) -> Mapping[str, str]: ...


class MemoryStorage:
    """In-memory ``Storage``; values are encoded on write."""

    def __init__(self, items: Mapping[str, Any] | None = None) -> None:
        self._items: dict[str, str] = {}
        for key, value in (items or {}).items():
            self.set_item(key, value)

    def set_item(self, key: str, value: Any) -> None:
        self._items[key] = serialize(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def get_all_items(self) -> dict[str, str]:
        return dict(self._items)


def normalize(
    options: Mapping[str, Any] | None = None,
    persisted: Storage | Mapping[str, str] | None = None,
    *,
    defaults: Mapping[str, Any] | None = None,
    page: PageContext | None = None,
) -> CanonicalConfig:
    """Build the canonical configuration handed to the engine.

    Args:
        options: Explicit call-time options.
        persisted: Stored options (a ``Storage`` or a mapping of encoded strings).
        defaults: Process-wide injected defaults.
        page: Where the player was loaded from; a default ``PageContext`` if omitted.

    Returns:
        A new dict; the inputs are not modified.
    """
    page = page or PageContext()
    injected = {key: coerce(value) for key, value in (defaults or {}).items()}
    stored = {key: deserialize(value) for key, value in _persisted_items(persisted).items()}
    explicit = {key: coerce(value) for key, value in (options or {}).items()}

    config: CanonicalConfig = {**DEFAULTS, **injected, **stored, **explicit}
    config["localization"] = _merge_localization(injected, explicit)

    config["base"] = _resolve_base(config.get("base"), page)
    config["width"] = _normalize_size(config.get("width"))
    config["height"] = _normalize_size(config.get("height"))
    _resolve_engine_assets(config, page)

    aspectratio = evaluate_aspect_ratio(config.get("aspectratio"), config["width"])

    _resolve_skin(config)
    _resolve_playback_rates(config)

    if aspectratio:
        config["aspectratio"] = aspectratio
    else:
        config.pop("aspectratio", None)

    _resolve_playlist(config)

    quality_labels = config.get("qualityLabels") or config.get("hlslabels")
    if quality_labels:
        config["qualityLabels"] = quality_labels

    return config


def evaluate_aspect_ratio(aspectratio: Any, width: Any) -> str | int:
    """Return the aspect ratio as a percentage string, or ``0`` for "unset".

    Only percentage widths use an aspect ratio. ``"16:9"`` becomes
    ``"56.25%"``; a bare percentage passes through.
    """
    if "%" not in str(width):
        return 0
    if not isinstance(aspectratio, str) or not aspectratio:
        return 0
    if _PERCENT_RE.match(aspectratio):
        return aspectratio
    w_text, sep, h_text = aspectratio.partition(":")
    if not sep:
        return 0
    w = parse_number(w_text)
    h = parse_number(h_text)
    if w is None or h is None or w <= 0 or h <= 0:
        return 0
    return _format_number(h / w * 100) + "%"


def _persisted_items(persisted: Storage | Mapping[str, str] | None) -> Mapping[str, Any]:
    if persisted is None:
        return {}
    if isinstance(persisted, Storage):
        return persisted.get_all_items() or {}
    return persisted


def _merge_localization(
    injected: Mapping[str, Any], explicit: Mapping[str, Any]
) -> dict[str, Any]:
    merged = dict(LOCALIZATION)
    for layer in (injected, explicit):
        strings = layer.get("localization")
        if isinstance(strings, Mapping):
            merged.update(strings)
    return merged


def _resolve_base(base: Any, page: PageContext) -> str:
    if base == ".":
        base = page.script_dir
    base = str(base or page.load_origin or "")
    return base if base.endswith("/") else base + "/"


def _normalize_size(value: Any) -> Any:
    if isinstance(value, str) and value.endswith("px"):
        return value[:-2]
    return value


def _resolve_engine_assets(config: CanonicalConfig, page: PageContext) -> None:
    asset_path = page.script_dir or config["base"]
    for key, filename in ENGINE_ASSETS.items():
        url = config.get(key) or asset_path + filename
        # Non-ssl pages can only talk to engine assets served without ssl.
        if page.protocol == "http:":
            url = url.replace("https", "http", 1)
        config[key] = url


def _resolve_skin(config: CanonicalConfig) -> None:
    skin = config.get("skin")
    if isinstance(skin, Mapping):
        config["skinUrl"] = skin.get("url")
        config["skinColorInactive"] = skin.get("inactive")
        config["skinColorActive"] = skin.get("active")
        config["skinColorBackground"] = skin.get("background")
        name = skin.get("name")
        skin = name if isinstance(name, str) else DEFAULT_SKIN
        config["skin"] = skin

    if isinstance(skin, str) and skin.find(".xml") > 0:
        logger.warning("XML skins are no longer supported, please update your config: %s", skin)
        emit(
            ConfigDeprecated(
                option="skin",
                value=skin,
                detail="XML skins are not supported; the .xml extension was dropped",
            )
        )
        config["skin"] = skin.replace(".xml", "", 1)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _resolve_playback_rates(config: CanonicalConfig) -> None:
    controls = config.get("playbackRateControls")
    rates: list[Any] | None = None
    if controls is True:
        rates = list(DEFAULT_PLAYBACK_RATES)
    elif isinstance(controls, (list, tuple)):
        rates = [
            rate
            for rate in controls
            if _is_number(rate) and MIN_PLAYBACK_RATE <= rate <= MAX_PLAYBACK_RATE
        ] or None

    if rates:
        config["playbackRateControls"] = rates
        config["playbackRates"] = list(rates)
    else:
        config["playbackRateControls"] = False
        config.pop("playbackRates", None)

    default_rate = config.get("defaultPlaybackRate")
    if not rates or not _is_number(default_rate) or default_rate not in rates:
        config["defaultPlaybackRate"] = 1
    config["playbackRate"] = config["defaultPlaybackRate"]


def _resolve_playlist(config: CanonicalConfig) -> None:
    playlist = config.get("playlist")
    if isinstance(playlist, Mapping):
        if isinstance(playlist.get("playlist"), (list, tuple)):
            # The "playlist" is a feed that carries its own playlist.
            config["feedData"] = playlist
            playlist = list(playlist["playlist"])
        else:
            playlist = [dict(playlist)]
    elif isinstance(playlist, tuple):
        playlist = list(playlist)

    if isinstance(playlist, str) and playlist:
        # A feed URL; the engine loads it.
        config["playlist"] = playlist
        return
    if not isinstance(playlist, list) or not playlist:
        # Legacy: a single playlist item flattened into the config.
        playlist = [
            {key: config[key] for key in PLAYLIST_ITEM_FIELDS if key in config}
        ]
    config["playlist"] = playlist


def _format_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)
