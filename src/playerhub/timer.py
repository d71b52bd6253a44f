"""Named-tick timer used for player quality-of-experience measurements."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable


def _now_ms() -> float:
    return time.time() * 1000.0


@dataclass
class Timer:
    """Record named timestamps (ticks) and method durations.

    ``tick("setup")`` then ``tick("ready")`` lets ``between("setup", "ready")``
    report the setup latency in milliseconds. Re-ticking a name overwrites it.
    """

    clock: Callable[[], float] = _now_ms
    _ticks: dict[str, float] = field(default_factory=dict)
    _starts: dict[str, float] = field(default_factory=dict)
    _sums: dict[str, float] = field(default_factory=dict)
    _counts: dict[str, int] = field(default_factory=dict)

    def tick(self, name: str) -> None:
        self._ticks[name] = self.clock()

    def clear(self, name: str) -> None:
        self._ticks.pop(name, None)

    def between(self, left: str, right: str) -> float | None:
        """Milliseconds from tick ``left`` to tick ``right``, or None if either is missing."""
        if left in self._ticks and right in self._ticks:
            return self._ticks[right] - self._ticks[left]
        return None

    def start(self, name: str) -> None:
        self._starts[name] = self.clock()
        self._counts[name] = self._counts.get(name, 0) + 1

    def end(self, name: str) -> None:
        started = self._starts.pop(name, None)
        if started is None:
            return
        self._sums[name] = self._sums.get(name, 0.0) + (self.clock() - started)

    def dump(self) -> dict[str, Any]:
        return {
            "counts": dict(self._counts),
            "sums": dict(self._sums),
            "events": dict(self._ticks),
        }
