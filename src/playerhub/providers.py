"""Provider registry: media providers the engine may choose from.

Choosing a provider for a given source is the engine's job; this module
only records which providers exist and what they claim to support.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable


def _supports_nothing(source: Mapping[str, Any]) -> bool:
    return False


@dataclass(frozen=True)
class Provider:
    name: str
    supports: Callable[[Mapping[str, Any]], bool] = _supports_nothing
    priority: int = 0


_providers: dict[str, Provider] = {}


def reset() -> None:
    """Clear the registry. Use in test fixtures for isolation."""
    _providers.clear()


def register_provider(
    provider: Provider | str,
    supports: Callable[[Mapping[str, Any]], bool] | None = None,
    priority: int = 0,
) -> Provider:
    """Register a provider object, or build one from a name and a ``supports`` check.

    Re-registering a name replaces the earlier provider.
    """
    if isinstance(provider, str):
        provider = Provider(provider, supports or _supports_nothing, priority)
    _providers[provider.name] = provider
    return provider


def get_provider(name: str) -> Provider:
    if name not in _providers:
        raise KeyError(f"Unknown provider: {name!r}. Available: {list(_providers)}")
    return _providers[name]


def available_providers() -> list[str]:
    """Registered provider names, highest priority first."""
    return [
        provider.name
        for provider in sorted(_providers.values(), key=lambda p: p.priority, reverse=True)
    ]


def providers_supporting(source: Mapping[str, Any]) -> list[str]:
    """Names of providers whose ``supports`` accepts ``source``, highest priority first."""
    return [name for name in available_providers() if _providers[name].supports(source)]
