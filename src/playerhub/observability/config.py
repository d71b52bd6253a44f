"""Observability settings, read from ``PLAYERHUB_*`` environment variables.

Every field has a default, so ``ObservabilityConfig()`` is enough for
JSON logs on stderr.

    PLAYERHUB_LOG_FORMATTER    structlog (default) | stdlib
    PLAYERHUB_LOG_DESTINATION  stderr (default) | jsonl
    PLAYERHUB_LOG_LEVEL        INFO (default)
    PLAYERHUB_LOG_FORMAT       json (default) | console
    PLAYERHUB_LOG_PATH         file for the jsonl destination
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Callable


def _env(name: str, default: str | None = None) -> Callable[[], str | None]:
    return lambda: os.environ.get(f"PLAYERHUB_{name}", default)


@dataclass
class ObservabilityConfig:
    log_formatter: str = field(default_factory=_env("LOG_FORMATTER", "structlog"))
    log_destination: str = field(default_factory=_env("LOG_DESTINATION", "stderr"))
    log_level: str = field(default_factory=_env("LOG_LEVEL", "INFO"))
    log_format: str = field(default_factory=_env("LOG_FORMAT", "json"))
    jsonl_path: str | None = field(default_factory=_env("LOG_PATH"))
