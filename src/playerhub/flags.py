"""Process-wide player settings: YAML config + env var overrides.

Priority: env var > YAML file > default.
Env vars use the PLAYERHUB_{NAME} convention (e.g. PLAYERHUB_DEBUG=on).
YAML file default: ~/.playerhub/settings.yaml

Example file::

    debug: false
    defaults:
      skin: beelden
      volume: 60
      localization:
        play: Abspielen
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

_TRUTHY = {"1", "true", "on", "yes"}
_FALSY = {"0", "false", "off", "no"}
_DEFAULT_PATH = Path("~/.playerhub/settings.yaml").expanduser()


@dataclass
class PlayerSettings:
    # Listener exceptions propagate out of trigger() instead of being logged.
    debug: bool = False
    # Injected defaults layered between the built-in defaults and persisted
    # options on every setup().
    defaults: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Path | None = None) -> PlayerSettings:
        """Load settings from YAML file, then override with env vars."""
        env_path = os.environ.get("PLAYERHUB_SETTINGS_PATH")
        file_path = path or (Path(env_path).expanduser() if env_path else _DEFAULT_PATH)

        raw: Any = {}
        if file_path.exists():
            raw = yaml.safe_load(file_path.read_text()) or {}
        if not isinstance(raw, dict):
            raw = {}

        debug = raw.get("debug", False)
        if isinstance(debug, str):
            debug = debug.lower() in _TRUTHY
        debug = bool(debug)

        env_debug = os.environ.get("PLAYERHUB_DEBUG")
        if env_debug is not None:
            val = env_debug.lower()
            if val in _TRUTHY:
                debug = True
            elif val in _FALSY:
                debug = False

        defaults = raw.get("defaults") or {}
        if not isinstance(defaults, dict):
            defaults = {}

        return cls(debug=debug, defaults=dict(defaults))

    def to_dict(self) -> dict[str, Any]:
        return {"debug": self.debug, "defaults": dict(self.defaults)}


# Singleton
_settings: PlayerSettings | None = None


def get_settings(path: Path | None = None) -> PlayerSettings:
    """Get the singleton PlayerSettings instance."""
    global _settings
    if _settings is None:
        _settings = PlayerSettings.load(path)
    return _settings


def reset_settings() -> None:
    """Reset for testing."""
    global _settings
    _settings = None
