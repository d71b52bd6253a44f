"""Event names emitted on a player facade, and playback state values."""

from __future__ import annotations

# Wildcard: listeners registered under this name receive (type, payload)
# for every event.
ALL = "all"

# Lifecycle
READY = "ready"
SETUP_ERROR = "setupError"
REMOVE = "remove"
ERROR = "error"
RESIZE = "resize"
CONTROLS = "controls"
FULLSCREEN = "fullscreen"
DISPLAY_CLICK = "displayClick"

# Playback state
BUFFER = "buffer"
PLAY = "play"
PAUSE = "pause"
IDLE = "idle"
COMPLETE = "complete"
BEFORE_PLAY = "beforePlay"
BEFORE_COMPLETE = "beforeComplete"

# Media
BUFFER_CHANGE = "bufferChange"
BUFFER_FULL = "bufferFull"
META = "meta"
MUTE = "mute"
SEEK = "seek"
TIME = "time"
VOLUME = "volume"
LEVELS = "levels"
LEVELS_CHANGED = "levelsChanged"
AUDIO_TRACKS = "audioTracks"
AUDIO_TRACK_CHANGED = "audioTrackChanged"
CAPTIONS_LIST = "captionsList"
CAPTIONS_CHANGED = "captionsChanged"
CAST_SESSION = "cast"

# Playlist
PLAYLIST = "playlist"
PLAYLIST_ITEM = "playlistItem"
PLAYLIST_COMPLETE = "playlistComplete"

# Advertising
AD_ERROR = "adError"
AD_CLICK = "adClick"
AD_IMPRESSION = "adImpression"
AD_TIME = "adTime"
AD_COMPLETE = "adComplete"
AD_COMPANIONS = "adCompanions"
AD_SKIPPED = "adSkipped"
AD_PLAY = "adPlay"
AD_PAUSE = "adPause"
AD_META = "adMeta"


class States:
    """Values returned by the engine's ``get_state`` capability."""

    IDLE = "idle"
    BUFFERING = "buffering"
    PLAYING = "playing"
    PAUSED = "paused"
    COMPLETE = "complete"
