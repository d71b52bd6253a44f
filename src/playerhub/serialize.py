"""Encoding of option values for persisted storage.

Persisted options are stored as strings. The type tag is JSON itself:
``serialize(True) == "true"``, ``serialize(90) == "90"``,
``serialize("seven") == '"seven"'``. ``deserialize`` reverses that and keeps
text that is not valid JSON verbatim, so values written by older releases
(bare strings such as ``seven``) still load.

``coerce`` is the looser legacy rule applied to call-time option strings:
short ``"true"``/``"false"`` and numeric strings become real values.
"""

from __future__ import annotations

import json
import re
from typing import Any

# Strings at least this long are never coerced by the legacy rule.
_COERCE_MAX_LEN = 6

_NUMBER_RE = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?\s*$")


def serialize(value: Any) -> str:
    """Encode ``value`` for storage."""
    return json.dumps(value, separators=(",", ":"))


def deserialize(text: Any) -> Any:
    """Decode a stored value back to its natural type.

    Non-string input is returned unchanged.
    """
    if not isinstance(text, str):
        return text
    try:
        return json.loads(text)
    except ValueError:
        return text


def parse_number(text: str) -> int | float | None:
    """Parse a decimal literal, or return None when ``text`` is not one."""
    if not _NUMBER_RE.match(text):
        return None
    number = float(text)
    if number.is_integer() and not re.search(r"[.eE]", text):
        return int(number)
    return number


def coerce(value: Any) -> Any:
    if not isinstance(value, str) or len(value) >= _COERCE_MAX_LEN:
        return value
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    number = parse_number(value)
    if number is not None:
        return number
    return value
